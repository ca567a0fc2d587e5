"""
Structured logging system for geomatch.

Provides centralized logging with console and optional file output,
plus metrics tracking for group recommendation runs.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring recommendation quality.
    """

    def __init__(
        self,
        name: str = "geomatch",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files; no file output when None
            enable_file: Write logs to file (requires log_dir)
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers
        self.logger.propagate = False

        self.metrics = {
            "recommend_runs": 0,
            "groups_scored": 0,
            "groups_skipped": 0,
            "groups_blocked": 0,
            "empty_recommendations": 0,
            "skips_by_reason": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file and log_dir is not None:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"geomatch_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, ensure_ascii=False, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_recommend_run(self, recommended: int):
        """Record one recommendation run and whether it came back empty."""
        self.metrics["recommend_runs"] += 1
        if recommended == 0:
            self.metrics["empty_recommendations"] += 1

    def record_group_scored(self, blocked: bool = False):
        self.metrics["groups_scored"] += 1
        if blocked:
            self.metrics["groups_blocked"] += 1

    def record_group_skipped(self, reason: str):
        self.metrics["groups_skipped"] += 1
        if reason not in self.metrics["skips_by_reason"]:
            self.metrics["skips_by_reason"][reason] = 0
        self.metrics["skips_by_reason"][reason] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = dict(self.metrics)
        metrics_copy["skips_by_reason"] = dict(self.metrics["skips_by_reason"])
        scored = metrics_copy["groups_scored"]
        metrics_copy["block_rate"] = round(metrics_copy["groups_blocked"] / scored, 3) if scored else 0.0
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Recommendation Metrics ===")
        self.info(f"Runs: {metrics['recommend_runs']} ({metrics['empty_recommendations']} empty)")
        self.info(
            f"Groups scored: {metrics['groups_scored']} "
            f"(blocked {metrics['groups_blocked']}, {metrics['block_rate'] * 100:.1f}%)"
        )

        if metrics["skips_by_reason"]:
            self.info("Skipped groups:")
            for reason, count in metrics["skips_by_reason"].items():
                self.info(f"  {reason}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "geomatch",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
