"""
Group recommendation scoring.

Scores how well a distribution group fits a job, first on geography
(hard rules, no blending) and then on topical overlap, and ranks the
groups into a short list for publishing.

Everything above recommend_groups is pure: no I/O, no shared state.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .geo_data import GENERAL
from .logger import get_logger
from .normalize import analyze_group, clean_location, normalize_location, normalize_text
from .schema import DistributionGroup, JobPosting

HARD_BLOCK_SCORE = -1000
CITY_MATCH_SCORE = 100
REGION_WIDE_SCORE = 50
NEIGHBOR_CITY_SCORE = 20
GENERAL_GROUP_SCORE = 10

NAME_MATCH_BONUS = 200
TOPIC_MATCH_BONUS = 30
GENERIC_TERM_BONUS = 5
# Topical bonuses are only considered above this running score.
TOPIC_GATE_SCORE = -500

MIN_RECOMMEND_SCORE = 10
# Per-job posting cap imposed by platform rate limits.
MAX_RECOMMENDED_GROUPS = 3

TOPIC_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "security": ("אבטחה", "ביטחון", "ביטחוני", "שומר", "סייר", "מוקד", 'קב"ט', "security"),
    "logistics": ("נהג", "הובלה", "תובלה", "משאית", "רכב", "שליח", "הפצה", "לוגיסטיקה", "מחסן", "logistics"),
    "technology": (
        "הייטק", "פיתוח", "תוכנה", "qa", "הנדסה", "דיגיטל", "hi-tech", "tech",
        "מתכנת", "סייבר", "full stack", "developer",
    ),
    "manufacturing": ("ייצור", "מפעל", "טכנאי", "בטיחות", "תעשייה", "בניה", "חשמלאי", "רתך", "מכונאי"),
    "sales": ("מכירות", "sales", "אנשי מכירות", "נציג מכירות", "טלמרקטינג", "פיתוח עסקי"),
    "marketing": ("שיווק", "מרקטינג", "marketing", "ppc", "seo", "קריאייטיב", "תוכן"),
    # no bare "רכז": it is a substring of "מרכז"
    "human-resources": ("משאבי אנוש", "גיוס", "hr", "השמה", "רכזת גיוס", "רכז גיוס", "רכז/ת גיוס"),
    "customer-service": ("שירות", "שירות לקוחות", "נציג שירות", "תמיכה", "מוקד שירות"),
    "office-administration": ("מזכירות", "מנהלה", "אדמיניסטרציה", "פקיד", "פקידה", "משרד"),
}

GENERIC_JOB_TERMS = ("דרושים", "עבודה", "משרות", "jobs", "hiring")


@dataclass(frozen=True)
class RecommendedGroup:
    group_id: str
    name: str
    url: str
    score: int


def geo_score(job_location, group_name, group_tags=None, group_region=None) -> int:
    """
    Geographic compatibility of a job location with a group.

    Rules, first applicable wins:
        -1000  both regions known and different (hard block)
          100  the job's city is one of the group's cities
           50  same region, region-wide group (no city of its own)
           20  same region, group names a different city
           10  group is general / nationwide
            0  anything else
    """
    job_geo = normalize_location(job_location)
    group_geo = analyze_group(group_name, group_tags, group_region)

    if job_geo.region != GENERAL and group_geo.region != GENERAL:
        if job_geo.region != group_geo.region:
            return HARD_BLOCK_SCORE

    if job_geo.city and job_geo.city in group_geo.cities:
        return CITY_MATCH_SCORE

    if job_geo.region == group_geo.region and job_geo.region != GENERAL:
        if not group_geo.cities:
            return REGION_WIDE_SCORE
        return NEIGHBOR_CITY_SCORE

    if group_geo.region == GENERAL:
        return GENERAL_GROUP_SCORE

    return 0


def name_bonus(job_location, group_name) -> int:
    """Bonus for a group whose name literally contains the job location."""
    loc = normalize_text(clean_location(job_location))
    if not loc or not isinstance(group_name, str):
        return 0
    return NAME_MATCH_BONUS if loc in normalize_text(group_name) else 0


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(normalize_text(k) in text for k in keywords)


def topic_bonus(job_text, group_name) -> int:
    """+30 for every topical category present on both the job and the group name."""
    if not isinstance(job_text, str) or not isinstance(group_name, str):
        return 0
    job = normalize_text(job_text)
    group = normalize_text(group_name)
    bonus = 0
    for keywords in TOPIC_KEYWORDS.values():
        if _contains_any(job, keywords) and _contains_any(group, keywords):
            bonus += TOPIC_MATCH_BONUS
    return bonus


def generic_bonus(group_name) -> int:
    if not isinstance(group_name, str):
        return 0
    return GENERIC_TERM_BONUS if _contains_any(normalize_text(group_name), GENERIC_JOB_TERMS) else 0


def score_group(job: JobPosting, group: DistributionGroup) -> int:
    """
    Total score of one group for one job.

    The geo score comes first and the name bonus is added unconditionally,
    so a hard-blocked group tops out at -800. Topical and generic bonuses
    only apply while the running score is above TOPIC_GATE_SCORE.
    """
    score = geo_score(job.location, group.name, group.location_tags, group.region)
    score += name_bonus(job.location, group.name)
    if score > TOPIC_GATE_SCORE:
        score += topic_bonus(job.topic_text, group.name)
        score += generic_bonus(group.name)
    return score


def rank_scored(scored: Sequence[RecommendedGroup], limit: Optional[int] = None) -> List[RecommendedGroup]:
    """
    Keep groups above MIN_RECOMMEND_SCORE, best first, at most `limit`.

    Equal scores keep their input order.
    """
    cap = MAX_RECOMMENDED_GROUPS if limit is None else max(0, min(limit, MAX_RECOMMENDED_GROUPS))
    eligible = [g for g in scored if g.score > MIN_RECOMMEND_SCORE]
    return sorted(eligible, key=lambda g: g.score, reverse=True)[:cap]


GroupLike = Union[DistributionGroup, dict]


def recommend_groups(
    job: JobPosting,
    groups: Iterable[GroupLike],
    limit: Optional[int] = None,
) -> List[RecommendedGroup]:
    """
    Score every candidate group for a job and return the short list.

    Groups are expected to be pre-filtered to ones the account is a member
    of. Records without a usable name are skipped and logged; they never
    abort the batch. An empty result is a normal outcome.
    """
    logger = get_logger()
    scored: List[RecommendedGroup] = []

    for group in groups:
        if isinstance(group, dict):
            group = DistributionGroup.from_record(group)
        if not isinstance(group, DistributionGroup):
            logger.warning("Skipping group record of unexpected type", type=type(group).__name__)
            logger.record_group_skipped("bad_record")
            continue
        if not group.name:
            logger.warning("Skipping group without a name", group_id=group.group_id)
            logger.record_group_skipped("missing_name")
            continue

        score = score_group(job, group)
        blocked = score <= HARD_BLOCK_SCORE + NAME_MATCH_BONUS
        logger.record_group_scored(blocked=blocked)
        logger.debug("Scored group", group_id=group.group_id, name=group.name, score=score)
        scored.append(RecommendedGroup(group_id=group.group_id, name=group.name, url=group.url, score=score))

    ranked = rank_scored(scored, limit)
    logger.record_recommend_run(len(ranked))

    if not ranked:
        logger.info("No relevant groups found", title=job.title, location=job.location)
    else:
        logger.info(
            f"Recommended {len(ranked)} of {len(scored)} groups",
            title=job.title,
            location=job.location,
            groups=[g.group_id for g in ranked],
        )
    return ranked
