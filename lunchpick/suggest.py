"""Suggestion scoring for lunchpick."""

import logging
from datetime import date

import numpy as np

from lunchpick.models import Candidate, Frequency, Preference, ScoredCandidate, VisitRecord

logger = logging.getLogger(__name__)

# Days since last visit for a candidate the group has never been to
NEVER_VISITED_DAYS = 999.0

# A restrictive preference (target >= 30 days) is violated by a visit
# within 30% of its target interval
HARD_VIOLATION_MIN_TARGET_DAYS = 30.0
HARD_VIOLATION_RATIO = 0.3

MAX_JITTER = 0.25


def build_preference_lookup(
    preferences: list[Preference],
) -> dict[str, dict[str, Frequency]]:
    """
    Index preferences by member.

    Returns a dict mapping member_id -> candidate_id -> frequency.
    Later entries for the same pair replace earlier ones.
    """
    lookup: dict[str, dict[str, Frequency]] = {}
    for pref in preferences:
        lookup.setdefault(pref.member_id, {})[pref.candidate_id] = pref.frequency
    return lookup


def last_visit_dates(visits: list[VisitRecord]) -> dict[str, date]:
    """Most recent visit date per candidate."""
    latest: dict[str, date] = {}
    for visit in visits:
        existing = latest.get(visit.candidate_id)
        if existing is None or visit.visit_date > existing:
            latest[visit.candidate_id] = visit.visit_date
    return latest


def days_since(last_visit: date | None, today: date) -> float:
    """Days between the last visit and today, or NEVER_VISITED_DAYS."""
    if last_visit is None:
        return NEVER_VISITED_DAYS
    return float(max(0, (today - last_visit).days))


def is_hard_violation(target_days: float, days_since_visit: float) -> bool:
    """True when a restrictive preference was visited far too recently."""
    return (
        target_days >= HARD_VIOLATION_MIN_TARGET_DAYS
        and days_since_visit < HARD_VIOLATION_RATIO * target_days
    )


def score_suggestions(
    candidates: list[Candidate],
    preferences: list[Preference],
    member_ids: list[str],
    visits: list[VisitRecord],
    top_n: int = 5,
    *,
    default_frequency: Frequency = Frequency.WEEKLY,
    rng: np.random.Generator | None = None,
    max_jitter: float = MAX_JITTER,
    today: date | None = None,
) -> list[ScoredCandidate]:
    """
    Rank candidates by how overdue they are for the group.

    A candidate is dropped if any member has it at "never", or if a member
    with a monthly-or-rarer preference would find it visited too recently.
    Survivors are scored by the mean over members of
    days_since_last_visit / target_days, plus a small jitter drawn from
    ``rng`` in [0, max_jitter). Members without an explicit preference for
    a candidate get ``default_frequency``.

    Returns at most ``top_n`` candidates, best first. An empty list means
    no candidate was eligible.
    """
    if not member_ids:
        raise ValueError("At least one member is required to score suggestions")

    if rng is None:
        rng = np.random.default_rng()
    if today is None:
        today = date.today()

    prefs_by_member = build_preference_lookup(preferences)
    last_visit = last_visit_dates(visits)

    def _frequency(member_id: str, candidate_id: str) -> Frequency:
        return prefs_by_member.get(member_id, {}).get(candidate_id, default_frequency)

    scored: list[ScoredCandidate] = []

    for candidate in candidates:
        cid = candidate.candidate_id

        vetoed_by = next(
            (m for m in member_ids if _frequency(m, cid) is Frequency.NEVER),
            None,
        )
        if vetoed_by is not None:
            logger.debug("Excluding %s: vetoed by %s", cid, vetoed_by)
            continue

        since = days_since(last_visit.get(cid), today)

        desire = np.zeros(len(member_ids))
        violated_by: str | None = None
        for m_idx, member_id in enumerate(member_ids):
            target_days = _frequency(member_id, cid).target_days

            if is_hard_violation(target_days, since):
                violated_by = member_id
                break

            jitter = rng.random() * max_jitter if max_jitter else 0.0
            desire[m_idx] = since / target_days + jitter

        if violated_by is not None:
            logger.debug(
                "Excluding %s: visited %.0f days ago, too soon for %s",
                cid,
                since,
                violated_by,
            )
            continue

        scored.append(ScoredCandidate(candidate_id=cid, score=float(np.mean(desire))))

    # sorted() is stable, so equal scores keep input order
    scored = sorted(scored, key=lambda s: -s.score)

    logger.info(
        "Scored %d of %d candidates for %d members",
        len(scored),
        len(candidates),
        len(member_ids),
    )
    return scored[: max(top_n, 0)]
