"""CSV and YAML parsing for lunchpick."""

import csv
import logging
import re
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

import yaml

from lunchpick.models import Ballot, Candidate, Frequency, Preference, VisitRecord

logger = logging.getLogger(__name__)

METADATA_COLUMNS = {"Timestamp", "Email Address"}


def slugify(name: str) -> str:
    """Turn a restaurant name into a stable candidate id."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "restaurant"


def parse_preferences_csv(
    csv_path: Path,
) -> tuple[list[str], list[Candidate], list[Preference]]:
    """
    Parse the preferences CSV file.

    Each row is a member (keyed by "Email Address"); every other non-metadata
    column is a restaurant whose cells hold frequency labels. Blank cells are
    left out so the scoring default applies.

    Returns a tuple of (member ids, candidates, preferences).
    """
    member_ids: list[str] = []
    candidates: list[Candidate] = []
    preferences: list[Preference] = []

    with csv_path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or []

        if "Email Address" not in fieldnames:
            raise ValueError("Preferences CSV has no 'Email Address' column")

        restaurant_columns: list[str] = []
        seen_ids: set[str] = set()
        for col in fieldnames:
            # Skip metadata and empty columns (like "Column 5")
            if col in METADATA_COLUMNS or not col.strip() or col.startswith("Column "):
                continue
            name = col.strip()
            candidate_id = slugify(name)
            if candidate_id in seen_ids:
                raise ValueError(f"Duplicate restaurant column: {name!r}")
            seen_ids.add(candidate_id)
            restaurant_columns.append(col)
            candidates.append(
                Candidate(candidate_id=candidate_id, restaurant_id=candidate_id, name=name)
            )

        for row in reader:
            email = (row.get("Email Address") or "").strip()
            if not email:
                continue
            if email in member_ids:
                logger.warning("Duplicate row for %s, later answers win", email)
            else:
                member_ids.append(email)

            for col, candidate in zip(restaurant_columns, candidates):
                raw = (row.get(col) or "").strip()
                if not raw:
                    continue
                try:
                    frequency = Frequency.from_label(raw)
                except ValueError:
                    logger.warning(
                        "Ignoring unknown frequency %r from %s for %s", raw, email, candidate.name
                    )
                    continue
                preferences.append(
                    Preference(
                        member_id=email,
                        candidate_id=candidate.candidate_id,
                        frequency=frequency,
                    )
                )

    return member_ids, candidates, preferences


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValueError(f"Invalid visit date: {value!r}") from None


def parse_visits_yaml(yaml_path: Path, candidates: list[Candidate]) -> list[VisitRecord]:
    """
    Parse the visit history YAML file.

    Entries name a restaurant either by display name or candidate id.
    Visits to restaurants that are not candidates are skipped.
    """
    with yaml_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        return []
    if not isinstance(data, dict):
        raise ValueError("Visits file must be a mapping with a 'visits' list")
    if "visits" not in data:
        return []

    by_key: dict[str, Candidate] = {}
    for candidate in candidates:
        by_key[candidate.name.lower()] = candidate
        by_key[candidate.candidate_id] = candidate

    visits: list[VisitRecord] = []
    for entry in data["visits"] or []:
        if "restaurant" not in entry or "date" not in entry:
            raise ValueError(f"Visit entry needs 'restaurant' and 'date': {entry!r}")
        key = str(entry["restaurant"]).strip()
        candidate = by_key.get(key.lower())
        if candidate is None:
            logger.warning("Skipping visit to unknown restaurant %r", key)
            continue
        visits.append(
            VisitRecord(candidate_id=candidate.candidate_id, visit_date=_to_date(entry["date"]))
        )

    return visits


def filter_recent_visits(
    visits: list[VisitRecord],
    today: date,
    lookback_days: int,
) -> list[VisitRecord]:
    """Keep only visits within the lookback window ending today."""
    cutoff = today - timedelta(days=lookback_days)
    return [v for v in visits if v.visit_date >= cutoff]


def record_visit(yaml_path: Path, restaurant: str, visit_date: date) -> None:
    """
    Append a visit to the visit history YAML file, creating it if needed.

    The file is rewritten in place, so any comments in it are dropped.
    """
    data: dict[str, Any] = {}
    if yaml_path.exists():
        with yaml_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("Visits file must be a mapping with a 'visits' list")

    visits = data.get("visits") or []
    visits.append({"restaurant": restaurant, "date": visit_date})
    data["visits"] = visits

    with yaml_path.open("w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def _parse_ranks(entry: dict[str, Any], voter: str | None) -> dict[str, int]:
    if "order" in entry:
        order = [str(cid) for cid in entry["order"] or []]
        if len(set(order)) != len(order):
            raise ValueError(f"Ballot for {voter} lists a candidate twice")
        return {cid: rank for rank, cid in enumerate(order, start=1)}

    raw_ranks = entry.get("ranks") or {}
    ranks: dict[str, int] = {}
    for cid, rank in raw_ranks.items():
        if isinstance(rank, bool) or not isinstance(rank, int) or rank < 1:
            raise ValueError(f"Ballot for {voter} has invalid rank {rank!r} for {cid}")
        ranks[str(cid)] = rank
    if len(set(ranks.values())) != len(ranks):
        raise ValueError(f"Ballot for {voter} uses the same rank more than once")
    return ranks


def parse_ballots_yaml(yaml_path: Path) -> tuple[list[str], list[Ballot], dict[str, str]]:
    """
    Parse the ballots YAML file.

    Returns a tuple of (candidate ids, ballots, candidate id -> display name).
    Ballots give either ``ranks`` (candidate -> rank) or ``order`` (a list,
    first choice first). Ballots with no choices are dropped.
    """
    with yaml_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError("Ballots file must be a mapping with 'candidates' and 'ballots'")

    candidate_ids: list[str] = []
    names: dict[str, str] = {}
    for entry in data.get("candidates") or []:
        if isinstance(entry, dict):
            cid = str(entry["id"])
            names[cid] = str(entry.get("name", cid))
        else:
            cid = str(entry)
            names[cid] = cid
        candidate_ids.append(cid)

    ballots: list[Ballot] = []
    for entry in data.get("ballots") or []:
        voter = entry.get("voter")
        ranks = _parse_ranks(entry, voter)
        if not ranks:
            logger.warning("Dropping empty ballot from %s", voter)
            continue
        unknown = sorted(set(ranks) - set(candidate_ids))
        if unknown:
            logger.warning("Ballot from %s ranks unknown candidates: %s", voter, ", ".join(unknown))
        ballots.append(Ballot(ranks=ranks, voter_id=voter))

    return candidate_ids, ballots, names


def create_ballot_template(
    output_path: Path,
    candidates: list[Candidate],
    member_ids: list[str],
):
    """Create a ballots YAML file for the shortlisted candidates."""
    template = {
        "candidates": [{"id": c.candidate_id, "name": c.name} for c in candidates],
        "ballots": [
            {"voter": member_id, "order": [c.candidate_id for c in candidates]}
            for member_id in member_ids
        ],
    }

    # Add a comment header
    header = f"""\
# Ballots file for lunchpick
# Reorder each voter's list so their first choice comes first,
# then run: lunchpick tally {output_path.name}
#
# Candidates: {", ".join(c.name for c in candidates)}
#
# A ballot can also give explicit ranks (1 = first choice):
#   - voter: someone@example.com
#     ranks:
#       {candidates[0].candidate_id if candidates else "some-restaurant"}: 1

"""

    with output_path.open("w", encoding="utf-8") as f:
        f.write(header)
        yaml.dump(template, f, default_flow_style=False, sort_keys=False)
