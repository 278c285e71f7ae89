"""Instant-runoff tally for lunchpick."""

import logging

from lunchpick.models import Ballot, RoundResult, TallyResult

logger = logging.getLogger(__name__)


class EmptyInputError(ValueError):
    """Raised when there are no candidates or no ballots to tally."""


def count_first_choices(
    ordered_ballots: list[list[str]],
    remaining: list[str],
) -> dict[str, int]:
    """Count each ballot's top choice among the remaining candidates."""
    tallies: dict[str, int] = {cid: 0 for cid in remaining}
    for ranked in ordered_ballots:
        top_choice = next((cid for cid in ranked if cid in tallies), None)
        if top_choice is not None:
            tallies[top_choice] += 1
    return tallies


def instant_runoff(candidate_ids: list[str], ballots: list[Ballot]) -> TallyResult:
    """
    Pick a winner by instant-runoff voting.

    Each round counts every ballot for its highest-ranked candidate still
    in the race. A candidate holding a majority (floor(votes / 2) + 1) wins.
    Otherwise the candidate with the fewest votes is eliminated, ties going
    to the lexicographically smallest id, and the next round begins.
    Ballots whose choices have all been eliminated stop counting.

    Returns a TallyResult with the winner and the round history. A lone
    candidate wins without any rounds being recorded.
    """
    if not candidate_ids:
        raise EmptyInputError("No candidates to tally")
    if not ballots:
        raise EmptyInputError("No ballots cast")

    remaining = list(dict.fromkeys(candidate_ids))
    ordered_ballots = [ballot.ordered() for ballot in ballots]
    rounds: list[RoundResult] = []

    while len(remaining) > 1:
        round_number = len(rounds) + 1
        tallies = count_first_choices(ordered_ballots, remaining)
        total_votes = sum(tallies.values())
        majority = total_votes // 2 + 1

        leader = next((cid for cid, count in tallies.items() if count >= majority), None)
        if leader is not None:
            rounds.append(RoundResult(round_number=round_number, tallies=tallies))
            logger.info(
                "%s wins with %d of %d votes in round %d",
                leader,
                tallies[leader],
                total_votes,
                round_number,
            )
            return TallyResult(winner=leader, rounds=rounds)

        eliminated = min(remaining, key=lambda cid: (tallies[cid], cid))
        rounds.append(
            RoundResult(round_number=round_number, tallies=tallies, eliminated=eliminated)
        )
        logger.debug("Round %d: %s, eliminating %s", round_number, tallies, eliminated)
        remaining.remove(eliminated)

    winner = remaining[0]
    logger.info("%s wins as last candidate standing after %d rounds", winner, len(rounds))
    return TallyResult(winner=winner, rounds=rounds)
