"""
Israeli geographic knowledge base.

Static table of canonical cities, their region and the aliases used to spot
them in free text. The table is validated once at import; a malformed entry
is a programming error and fails loudly.

Ordering matters: normalization returns the first entry whose keyword is
found in the input, so an entry whose name contains another entry's keyword
must be listed before it.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

GENERAL = "general"

REGIONS = ("center", "sharon", "shfela", "south", "north", "jerusalem", GENERAL)


class KnowledgeBaseError(ValueError):
    """Raised when the static location table is malformed."""
    pass


def _fold(s: str) -> str:
    return " ".join(s.casefold().split())


@dataclass(frozen=True)
class LocationEntry:
    name: str
    region: str
    keywords: Tuple[str, ...]

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise KnowledgeBaseError("Location entry has an empty canonical name")
        if self.region not in REGIONS or self.region == GENERAL:
            raise KnowledgeBaseError(f"Location '{self.name}' has invalid region: {self.region!r}")
        if not self.keywords:
            raise KnowledgeBaseError(f"Location '{self.name}' has no keywords")
        if any(not isinstance(k, str) or not k.strip() for k in self.keywords):
            raise KnowledgeBaseError(f"Location '{self.name}' has an empty keyword")
        if _fold(self.name) not in {_fold(k) for k in self.keywords}:
            raise KnowledgeBaseError(f"Location '{self.name}' must list its own name as a keyword")

    def matches(self, folded_text: str) -> bool:
        """True if any keyword occurs in already-normalized text."""
        return any(_fold(k) in folded_text for k in self.keywords)


def _entry(name: str, region: str, *aliases: str) -> LocationEntry:
    return LocationEntry(name=name, region=region, keywords=(name,) + aliases)


_RAW_TABLE: List[LocationEntry] = [
    # --- center (Gush Dan) ---
    _entry("תל אביב", "center", "תל-אביב", 'ת"א', "ת״א", "tlv", "tel aviv", "יפו"),
    _entry("רמת גן", "center", "רמת-גן", "בורסה", "ramat gan"),
    _entry("גבעתיים", "center", "גבעתים", "givatayim"),
    _entry("בני ברק", "center", "בני-ברק", "bnei brak"),
    _entry("פתח תקווה", "center", "פתח תקוה", "פתח-תקווה", 'פ"ת', "פ״ת", "petah tikva"),
    _entry("גבעת שמואל", "center", "אוניברסיטת בר אילן"),
    _entry("קריית אונו", "center", "קרית אונו"),
    _entry("גני תקווה", "center", "גני תקוה"),
    _entry("סביון", "center"),
    # listed ahead of יהוד, whose keyword is a substring of both
    _entry("אור יהודה", "center"),
    _entry("אבן יהודה", "sharon"),
    _entry("יהוד", "center", "יהוד-מונוסון", "מונוסון"),
    _entry("חולון", "center", "holon"),
    _entry("בת ים", "center", "בת-ים", "bat yam"),
    _entry("ראשון לציון", "center", "ראשון-לציון", 'ראשל"צ', "ראשל״צ", "rishon lezion"),
    _entry("אלעד", "center"),
    _entry("ראש העין", "center", "ראש-העין"),
    _entry("שוהם", "center", "איירפורט סיטי", "airport city"),
    # --- sharon ---
    _entry("הרצליה", "sharon", "הרצליה פיתוח", "herzliya"),
    _entry("רמת השרון", "sharon"),
    _entry("כפר סבא", "sharon", 'כפ"ס', "כפ״ס", "kfar saba"),
    _entry("רעננה", "sharon", "raanana"),
    _entry("הוד השרון", "sharon"),
    _entry("נתניה", "sharon", "netanya"),
    _entry("חדרה", "sharon"),
    _entry("חריש", "sharon"),
    _entry("קיסריה", "sharon"),
    _entry("כפר יונה", "sharon"),
    # --- shfela ---
    _entry("רחובות", "shfela", "פארק המדע", "rehovot"),
    _entry("נס ציונה", "shfela"),
    _entry("לוד", "shfela", 'נתב"ג', "נתב״ג"),
    _entry("רמלה", "shfela"),
    _entry("באר יעקב", "shfela"),
    _entry("מודיעין", "shfela", "מכבים", "modiin"),
    _entry("יבנה", "shfela"),
    _entry("גדרה", "shfela"),
    _entry("מזכרת בתיה", "shfela"),
    _entry("קריית מלאכי", "shfela", "קרית מלאכי", "קסטינה"),
    # --- south ---
    _entry("אשדוד", "south", "ashdod"),
    _entry("אשקלון", "south", "ashkelon"),
    _entry("באר שבע", "south", 'ב"ש', "ב״ש", "beer sheva", "b7"),
    _entry("קריית גת", "south", "קרית גת"),
    _entry("שדרות", "south"),
    _entry("נתיבות", "south"),
    _entry("אופקים", "south"),
    _entry("דימונה", "south"),
    _entry("ירוחם", "south"),
    _entry("ערד", "south"),
    _entry("אילת", "south", "eilat"),
    # --- north ---
    _entry("חיפה", "north", 'מת"מ', "מת״מ", "haifa"),
    _entry(
        "קריות", "north",
        "קרית אתא", "קריית אתא", "קרית מוצקין", "קריית מוצקין",
        "קרית ביאליק", "קריית ביאליק", "קרית ים", "קריית ים",
    ),
    _entry("נשר", "north"),
    _entry("עכו", "north"),
    _entry("נהריה", "north"),
    _entry("כרמיאל", "north"),
    _entry("טבריה", "north"),
    _entry("עפולה", "north"),
    _entry("נצרת", "north", "נוף הגליל", "נצרת עילית"),
    _entry("קריית שמונה", "north", "קרית שמונה"),
    _entry("צפת", "north"),
    _entry("בית שאן", "north"),
    _entry("יקנעם", "north", "יוקנעם"),
    _entry("מגדל העמק", "north"),
    # --- jerusalem ---
    _entry("ירושלים", "jerusalem", "jerusalem"),
    _entry("בית שמש", "jerusalem"),
    _entry("מעלה אדומים", "jerusalem"),
    _entry("מבשרת ציון", "jerusalem", "מבשרת"),
    _entry("גוש עציון", "jerusalem", "אפרת"),
    # Samaria, grouped with Jerusalem for distribution purposes
    _entry("אריאל", "jerusalem"),
]

# Bare region tokens, used when no city is recognized.
REGION_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "center": ("מרכז", "גוש דן", "center"),
    "sharon": ("שרון", "sharon"),
    "shfela": ("שפלה", "shfela"),
    "south": ("דרום", "נגב", "south"),
    "north": ("צפון", "גליל", "north"),
    "jerusalem": ("ירושלים", "jerusalem"),
}

# Region fallback order for a job location.
NORMALIZE_REGION_ORDER = ("center", "north", "south", "sharon", "shfela", "jerusalem")

# Override priority for group analysis; the first satisfied region wins.
GROUP_REGION_PRIORITY = ("center", "sharon", "shfela", "south", "north", "jerusalem")


def validate_table(entries: Iterable[LocationEntry]) -> Tuple[LocationEntry, ...]:
    """
    Check table-level invariants and freeze the table.

    Raises:
        KnowledgeBaseError: on duplicate names or missing regions
    """
    table = tuple(entries)
    if not table:
        raise KnowledgeBaseError("Location table is empty")

    seen = set()
    for entry in table:
        if not isinstance(entry, LocationEntry):
            raise KnowledgeBaseError(f"Unexpected table row: {entry!r}")
        if entry.name in seen:
            raise KnowledgeBaseError(f"Duplicate canonical name: {entry.name}")
        seen.add(entry.name)

    covered = {entry.region for entry in table}
    missing = [r for r in REGIONS if r != GENERAL and r not in covered]
    if missing:
        raise KnowledgeBaseError(f"Regions without cities: {', '.join(missing)}")

    for region in REGIONS:
        if region != GENERAL and not REGION_KEYWORDS.get(region):
            raise KnowledgeBaseError(f"Region '{region}' has no region keywords")

    return table


CITY_TABLE: Tuple[LocationEntry, ...] = validate_table(_RAW_TABLE)


def cities_in_region(region: str) -> List[str]:
    return [e.name for e in CITY_TABLE if e.region == region]


def resolve_region_name(value) -> Optional[str]:
    """
    Map a declared region value to a region code.

    Accepts region codes and their Hebrew/English synonyms in any case.
    Returns None for anything unrecognized, including "general".
    """
    if not isinstance(value, str):
        return None
    folded = _fold(value)
    if not folded:
        return None
    for region, tokens in REGION_KEYWORDS.items():
        if folded == region or folded in {_fold(t) for t in tokens}:
            return region
    return None


def shadowed_entries() -> List[Tuple[str, str]]:
    """
    List (entry, shadowing_entry) pairs where an earlier row's keyword
    swallows a later row's canonical name under first-match lookup.
    """
    shadowed = []
    for idx, entry in enumerate(CITY_TABLE):
        folded = _fold(entry.name)
        for earlier in CITY_TABLE[:idx]:
            if earlier.matches(folded):
                shadowed.append((entry.name, earlier.name))
                break
    return shadowed
