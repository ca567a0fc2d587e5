import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .geo_data import (
    CITY_TABLE,
    GENERAL,
    GROUP_REGION_PRIORITY,
    NORMALIZE_REGION_ORDER,
    REGION_KEYWORDS,
    resolve_region_name,
)


def normalize_text(s: str) -> str:
    return " ".join(s.casefold().strip().split())


@dataclass(frozen=True)
class NormalizedLocation:
    city: Optional[str]
    region: str
    original: str


@dataclass(frozen=True)
class GroupGeo:
    cities: FrozenSet[str]
    region: str


def _has_region_token(text: str, region: str) -> bool:
    return any(normalize_text(t) in text for t in REGION_KEYWORDS[region])


def normalize_location(raw) -> NormalizedLocation:
    """
    Resolve a free-text location into a canonical city and region.

    The first table entry with a keyword inside the text wins; if no city is
    found, bare region tokens are tried in NORMALIZE_REGION_ORDER.
    """
    if not raw or not isinstance(raw, str):
        return NormalizedLocation(city=None, region=GENERAL, original="")

    text = normalize_text(raw)
    if not text:
        return NormalizedLocation(city=None, region=GENERAL, original="")

    for entry in CITY_TABLE:
        if entry.matches(text):
            return NormalizedLocation(city=entry.name, region=entry.region, original=raw)

    for region in NORMALIZE_REGION_ORDER:
        if _has_region_token(text, region):
            return NormalizedLocation(city=None, region=region, original=raw)

    return NormalizedLocation(city=None, region=GENERAL, original=raw)


def _clean_tags(tags) -> List[str]:
    if not isinstance(tags, (list, tuple)):
        return []
    return [t for t in tags if isinstance(t, str)]


def analyze_group(name, tags=None, declared_region=None) -> GroupGeo:
    """
    Infer a group's geography from its name, tags and declared region.

    Unlike normalize_location, every matching city is collected and the
    region follows the LAST match. Explicit region tokens or a declared
    region then override it, checked in GROUP_REGION_PRIORITY order.
    """
    name = name if isinstance(name, str) else ""
    text = normalize_text(" ".join([name] + _clean_tags(tags)))

    found = set()
    region = GENERAL
    for entry in CITY_TABLE:
        if entry.matches(text):
            found.add(entry.name)
            region = entry.region

    declared = resolve_region_name(declared_region)
    for candidate in GROUP_REGION_PRIORITY:
        if _has_region_token(text, candidate) or declared == candidate:
            region = candidate
            break

    return GroupGeo(cities=frozenset(found), region=region)


def auto_tag_group(name) -> Tuple[List[str], str]:
    """Derive (location_tags, region) for a group that was synced without them."""
    geo = analyze_group(name)
    tags = [entry.name for entry in CITY_TABLE if entry.name in geo.cities]
    return tags, geo.region


PLACEHOLDER_LOCATIONS = {"ישראל", "israel", "לא צוין", "unknown"}


def clean_location(raw) -> str:
    """Strip whitespace and blank out placeholder values meaning 'unset'."""
    if not isinstance(raw, str):
        return ""
    loc = raw.strip()
    if normalize_text(loc) in PLACEHOLDER_LOCATIONS:
        return ""
    return loc


_TITLE_NOISE: Iterable[Tuple[str, int]] = (
    (r"עודכן ב-\d+ שעות האחרונות", 0),
    (r"עודכן ב-\d+ שעות", 0),
    (r"עודכן לפני \d+ שעות", 0),
    (r"משרה מס[׳'] \d+", 0),
    (r"עודכן לאחרונה", 0),
    (r"משרה חמה", 0),
    (r"דחוף", 0),
    (r"SVT", re.IGNORECASE),
    (r"\d{6,}", 0),  # board ids glued to the title
    (r"#", 0),
)

DEFAULT_TITLE = "משרה חדשה"


def clean_title(title) -> str:
    """Remove job-board noise from a scraped title."""
    if not title or not isinstance(title, str):
        return DEFAULT_TITLE
    for pattern, flags in _TITLE_NOISE:
        title = re.sub(pattern, "", title, flags=flags)
    title = re.sub(r"\s{2,}", " ", title).strip()
    return title or DEFAULT_TITLE
