"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Dict, Any, List

from geomatch.logger import get_logger, reset_logger


@pytest.fixture(autouse=True)
def quiet_logger():
    """Fresh global logger per test, without console noise."""
    reset_logger()
    logger = get_logger(enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def valid_job() -> Dict[str, Any]:
    """Valid job record as stored by the scraper."""
    return {
        "id": "job-1001",
        "title": "מפתח/ת Full Stack",
        "location": "פתח תקווה",
        "description": "פיתוח מערכות web בצוות קטן",
    }


@pytest.fixture
def valid_group() -> Dict[str, Any]:
    """Valid group record."""
    return {
        "id": "ptjobs",
        "name": "דרושים בפתח תקווה והסביבה",
        "url": "https://www.facebook.com/groups/ptjobs",
        "is_member": True,
        "location_tags": ["פתח תקווה"],
        "region": "center",
    }


@pytest.fixture
def scenario_groups() -> List[Dict[str, Any]]:
    """One local group and two groups in the wrong region for a Petah Tikva job."""
    return [
        {
            "id": "ptjobs",
            "name": "דרושים בפתח תקווה והסביבה",
            "url": "https://www.facebook.com/groups/ptjobs",
            "region": "center",
            "location_tags": ["פתח תקווה"],
        },
        {
            "id": "b7jobs",
            "name": "דרושים באר שבע והדרום",
            "url": "https://www.facebook.com/groups/b7jobs",
            "region": "south",
            "location_tags": ["באר שבע"],
        },
        {
            "id": "southtech",
            "name": "הייטק דרום",
            "url": "https://www.facebook.com/groups/southtech",
            "region": "south",
            "location_tags": ["תל אביב"],
        },
    ]


@pytest.fixture
def groups_file(tmp_path, scenario_groups) -> Path:
    """Groups JSON file in the {"groups": [...]} layout."""
    path = tmp_path / "groups.json"
    path.write_text(json.dumps({"groups": scenario_groups}, ensure_ascii=False), encoding="utf-8")
    return path
