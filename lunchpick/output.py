"""Output formatting for lunchpick."""

from lunchpick.models import Candidate, ScoredCandidate, TallyResult


def format_suggestions(
    suggestions: list[ScoredCandidate],
    candidates: list[Candidate],
) -> str:
    """Format a scored shortlist for display."""
    lines: list[str] = []

    if not suggestions:
        lines.append("No suitable restaurants found.")
        lines.append("All may be vetoed or visited too recently.")
        return "\n".join(lines)

    names = {c.candidate_id: c.name for c in candidates}
    name_width = max(len(names.get(s.candidate_id, s.candidate_id)) for s in suggestions)

    lines.append("=== Suggested Restaurants ===")
    for position, suggestion in enumerate(suggestions, start=1):
        name = names.get(suggestion.candidate_id, suggestion.candidate_id)
        lines.append(f"{position:>2}. {name.ljust(name_width)}  score {suggestion.score:.2f}")

    return "\n".join(lines)


def format_tally(result: TallyResult, names: dict[str, str] | None = None) -> str:
    """Format instant-runoff rounds and the winner for display."""
    names = names or {}
    lines: list[str] = []

    if not result.rounds:
        lines.append("Only one candidate, no vote needed.")

    for round_result in result.rounds:
        lines.append(f"--- Round {round_result.round_number} ---")
        # Tied counts list by id, the same order elimination ties are broken in
        ranked = sorted(round_result.tallies.items(), key=lambda item: (-item[1], item[0]))
        for cid, votes in ranked:
            lines.append(f"  {names.get(cid, cid)}: {votes}")
        if round_result.eliminated is not None:
            eliminated = round_result.eliminated
            lines.append(f"  Eliminated: {names.get(eliminated, eliminated)}")
        lines.append("")

    lines.append("=== Winner ===")
    lines.append(names.get(result.winner, result.winner))

    return "\n".join(lines)
