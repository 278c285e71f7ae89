"""Data models for lunchpick."""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Frequency(Enum):
    """How often a member wants to eat somewhere, with its target interval in days."""

    DAILY = ("daily", 1.0)
    WEEKLY = ("weekly", 7.0)
    BIWEEKLY = ("biweekly", 14.0)
    MONTHLY = ("monthly", 30.0)
    RARELY = ("rarely", 90.0)
    NEVER = ("never", math.inf)  # veto

    def __init__(self, label: str, target_days: float):
        self.label = label
        self.target_days = target_days

    @classmethod
    def from_label(cls, label: str) -> "Frequency":
        """Parse a frequency label such as "Weekly" (case-insensitive)."""
        normalized = label.strip().lower()
        for frequency in cls:
            if frequency.label == normalized:
                return frequency
        raise ValueError(f"Unknown frequency: {label!r}")


@dataclass(frozen=True)
class Candidate:
    """A restaurant that can be suggested to the group."""

    candidate_id: str
    restaurant_id: str
    name: str


@dataclass(frozen=True)
class Preference:
    """A member's desired visiting cadence for one candidate."""

    member_id: str
    candidate_id: str
    frequency: Frequency


@dataclass(frozen=True)
class VisitRecord:
    """The group ate at a candidate on a given day."""

    candidate_id: str
    visit_date: date


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate that survived filtering, with its averaged desire score."""

    candidate_id: str
    score: float


@dataclass
class Ballot:
    """One member's ranked choices."""

    ranks: dict[str, int] = field(default_factory=dict)
    # ranks maps candidate_id -> rank (1 = first choice)
    voter_id: str | None = None

    def ordered(self) -> list[str]:
        """Candidate ids from most to least preferred."""
        return [cid for cid, _ in sorted(self.ranks.items(), key=lambda item: item[1])]


@dataclass(frozen=True)
class RoundResult:
    """Vote counts for one instant-runoff round."""

    round_number: int
    tallies: dict[str, int]
    eliminated: str | None = None  # None on the round a majority is reached


@dataclass
class TallyResult:
    """Result of an instant-runoff tally."""

    winner: str
    rounds: list[RoundResult] = field(default_factory=list)
