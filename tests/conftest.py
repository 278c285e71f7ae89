"""Shared pytest fixtures for lunchpick tests."""

from datetime import date

import pytest

from lunchpick.models import Candidate

TODAY = date(2026, 10, 19)


@pytest.fixture
def today():
    """Fixed scoring date so day counts are exact."""
    return TODAY


@pytest.fixture
def make_candidates():
    """Build candidates whose id, restaurant id and name all match."""

    def _make(*ids: str) -> list[Candidate]:
        return [Candidate(candidate_id=cid, restaurant_id=cid, name=cid) for cid in ids]

    return _make


@pytest.fixture
def preferences_csv(tmp_path):
    """A small preferences CSV in the Google Forms export layout."""
    path = tmp_path / "preferences.csv"
    path.write_text(
        "Timestamp,Email Address,Taco Stand,Pho Place,Burger Barn,Column 6\n"
        "2026/10/01 12:00,alice@example.com,Weekly,Monthly,Never,\n"
        "2026/10/01 12:05,bob@example.com,Daily,,Weekly,\n",
        encoding="utf-8",
    )
    return path
