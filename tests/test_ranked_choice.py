"""Tests for the instant-runoff tally."""

import pytest

from lunchpick.models import Ballot, RoundResult
from lunchpick.ranked_choice import EmptyInputError, count_first_choices, instant_runoff


def _ballots(*orders: str) -> list[Ballot]:
    """Build ballots from strings like "ABC" (first choice first)."""
    return [Ballot(ranks={cid: rank for rank, cid in enumerate(order, start=1)}) for order in orders]


class TestInstantRunoff:
    """Test instant-runoff voting."""

    def test_redistribution_scenario(self):
        """C is eliminated and its ballot carries A over the line."""
        ballots = _ballots("ABC", "ABC", "ABC", "BCA", "BCA", "CAB")

        result = instant_runoff(["A", "B", "C"], ballots)

        assert result.winner == "A"
        assert result.rounds == [
            RoundResult(round_number=1, tallies={"A": 3, "B": 2, "C": 1}, eliminated="C"),
            RoundResult(round_number=2, tallies={"A": 4, "B": 2}, eliminated=None),
        ]

    def test_first_round_majority(self):
        ballots = _ballots("BA", "BA", "AB")

        result = instant_runoff(["A", "B"], ballots)

        assert result.winner == "B"
        assert len(result.rounds) == 1
        assert result.rounds[0].eliminated is None
        assert result.rounds[0].tallies == {"A": 1, "B": 2}

    def test_single_candidate_wins_without_rounds(self):
        result = instant_runoff(["only"], _ballots("x"))

        assert result.winner == "only"
        assert result.rounds == []

    def test_no_candidates(self):
        with pytest.raises(EmptyInputError, match="candidates"):
            instant_runoff([], _ballots("A"))

    def test_no_ballots(self):
        with pytest.raises(EmptyInputError, match="ballots"):
            instant_runoff(["A", "B"], [])

    def test_empty_input_error_is_value_error(self):
        assert issubclass(EmptyInputError, ValueError)

    def test_tie_eliminates_smallest_id(self):
        """Tied last place goes to the lexicographically smallest id, whatever the input order."""
        ballots = _ballots("z", "z", "m", "am")

        result = instant_runoff(["z", "m", "a"], ballots)

        assert result.rounds[0].eliminated == "a"
        assert result.rounds[1].tallies == {"z": 2, "m": 2}
        assert result.rounds[1].eliminated == "m"
        assert result.winner == "z"

    def test_tie_break_ignores_input_order(self):
        ballots = _ballots("q", "p", "r", "r")

        forward = instant_runoff(["p", "q", "r"], ballots)
        backward = instant_runoff(["r", "q", "p"], ballots)

        assert forward.rounds[0].eliminated == backward.rounds[0].eliminated == "p"
        assert forward.winner == backward.winner

    def test_exhausted_ballots_stop_counting(self):
        ballots = _ballots("AB", "AB", "BA", "BA", "C")

        result = instant_runoff(["A", "B", "C"], ballots)

        # C's ballot ranks nobody else, so round 2 only has 4 votes
        assert result.rounds[0].eliminated == "C"
        assert sum(result.rounds[1].tallies.values()) == 4
        assert result.rounds[1].eliminated == "A"
        assert result.winner == "B"

    def test_last_standing_when_no_votes_count(self):
        """Ballots naming only unknown candidates still produce a winner."""
        result = instant_runoff(["b", "a", "c"], _ballots("x", "y"))

        assert [r.eliminated for r in result.rounds] == ["a", "b"]
        assert result.winner == "c"

    def test_rounds_bounded_and_numbered(self):
        candidates = ["a", "b", "c", "d", "e"]
        ballots = _ballots("abcde", "bcdea", "cdeab", "deabc", "eabcd", "abced")

        result = instant_runoff(candidates, ballots)

        assert result.winner in candidates
        assert len(result.rounds) <= len(candidates) - 1
        assert [r.round_number for r in result.rounds] == list(range(1, len(result.rounds) + 1))

    def test_duplicate_candidate_ids_collapse(self):
        result = instant_runoff(["A", "A", "B"], _ballots("A", "A", "B"))

        assert result.rounds[0].tallies == {"A": 2, "B": 1}
        assert result.winner == "A"

    def test_partial_ballots(self):
        ballots = [Ballot(ranks={"B": 1}), Ballot(ranks={"A": 2, "B": 1}), Ballot(ranks={"A": 1})]

        result = instant_runoff(["A", "B"], ballots)

        assert result.winner == "B"


def test_count_first_choices_skips_eliminated():
    ordered = [["a", "b"], ["b"], ["c", "a"]]

    assert count_first_choices(ordered, ["a", "b"]) == {"a": 2, "b": 1}
