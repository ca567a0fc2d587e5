from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from .geo_data import GENERAL
from .normalize import clean_location, clean_title

JOB_REQUIRED_STR_FIELDS = ["title"]
JOB_OPTIONAL_STR_FIELDS = ["id", "location", "description"]

GROUP_REQUIRED_STR_FIELDS = ["id", "name"]
GROUP_OPTIONAL_STR_FIELDS = ["url", "region"]
GROUP_OPTIONAL_LIST_FIELDS = ["location_tags", "keywords"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def _check_required(data: Dict[str, Any], fields: List[str], errors: List[str]) -> None:
    for f in fields:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")


def _check_optional_str(data: Dict[str, Any], fields: List[str], errors: List[str]) -> None:
    for f in fields:
        if f in data and data[f] is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")


def validate_job(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Job record must be an object"]
    errors: List[str] = []
    _check_required(data, JOB_REQUIRED_STR_FIELDS, errors)
    _check_optional_str(data, JOB_OPTIONAL_STR_FIELDS, errors)
    return errors


def validate_group(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Group record must be an object"]
    errors: List[str] = []
    _check_required(data, GROUP_REQUIRED_STR_FIELDS, errors)
    _check_optional_str(data, GROUP_OPTIONAL_STR_FIELDS, errors)

    for f in GROUP_OPTIONAL_LIST_FIELDS:
        value = data.get(f)
        if value is None:
            continue
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            errors.append(f"Field '{f}' must be a list of strings if provided")

    if "is_member" in data and not isinstance(data["is_member"], bool):
        errors.append("Field 'is_member' must be a boolean if provided")

    if isinstance(data.get("url"), str) and data["url"].strip():
        if not _valid_url(data["url"]):
            errors.append("Field 'url' must be a valid absolute URL (scheme + host)")

    return errors


def _str_or_empty(v: Any) -> str:
    return v if isinstance(v, str) else ""


def _str_tuple(v: Any) -> Tuple[str, ...]:
    if not isinstance(v, (list, tuple)):
        return ()
    return tuple(s for s in v if isinstance(s, str) and s.strip())


@dataclass(frozen=True)
class JobPosting:
    """The job fields group matching reads."""

    title: str
    location: str = ""
    description: str = ""
    job_id: Optional[str] = None

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "JobPosting":
        job_id = data.get("id")
        return cls(
            title=clean_title(data.get("title")),
            location=clean_location(data.get("location")),
            description=_str_or_empty(data.get("description_clean") or data.get("description")),
            job_id=job_id if isinstance(job_id, str) else None,
        )

    @property
    def topic_text(self) -> str:
        return f"{self.title} {self.description}"


@dataclass(frozen=True)
class DistributionGroup:
    """A social group or page that can receive a job post."""

    group_id: str
    name: str
    url: str = ""
    is_member: bool = True
    location_tags: Tuple[str, ...] = field(default_factory=tuple)
    region: str = GENERAL
    keywords: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "DistributionGroup":
        region = data.get("region")
        is_member = data.get("is_member", True)
        return cls(
            group_id=str(data.get("id") or ""),
            name=_str_or_empty(data.get("name")).strip(),
            url=_str_or_empty(data.get("url")),
            is_member=is_member if isinstance(is_member, bool) else True,
            location_tags=_str_tuple(data.get("location_tags")),
            region=region.strip() if _is_non_empty_str(region) else GENERAL,
            keywords=_str_tuple(data.get("keywords")),
        )
