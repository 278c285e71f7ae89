"""Command-line interface for lunchpick."""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import numpy as np
import yaml

from lunchpick.config import LunchConfig
from lunchpick.output import format_suggestions, format_tally
from lunchpick.parser import (
    create_ballot_template,
    filter_recent_visits,
    parse_ballots_yaml,
    parse_preferences_csv,
    parse_visits_yaml,
    record_visit,
)
from lunchpick.ranked_choice import EmptyInputError, instant_runoff
from lunchpick.suggest import score_suggestions

logger = logging.getLogger("lunchpick")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lunchpick",
        description="Suggest where the group should eat, then tally ranked votes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  lunchpick suggest preferences.csv --visits visits.yaml
  lunchpick suggest preferences.csv --visits visits.yaml --top-n 3 --seed 7
  lunchpick tally ballots_template.yaml
  lunchpick tally ballots_template.yaml --record-visit visits.yaml
""",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    suggest = subparsers.add_parser("suggest", help="Build a shortlist of restaurants")
    suggest.add_argument(
        "preferences_csv",
        type=Path,
        help="Path to the CSV file with member frequency preferences",
    )
    suggest.add_argument(
        "--visits",
        type=Path,
        help="Path to the visit history YAML file",
    )
    suggest.add_argument(
        "--config",
        type=Path,
        default=Path("lunchpick.yaml"),
        help="Path to the config YAML file (default: lunchpick.yaml)",
    )
    suggest.add_argument(
        "--top-n",
        type=int,
        help="Number of restaurants to suggest (default: 5)",
    )
    suggest.add_argument(
        "--seed",
        type=int,
        help="Seed for the score jitter, for repeatable shortlists",
    )
    suggest.add_argument(
        "--no-jitter",
        action="store_true",
        help="Disable the random jitter added to scores",
    )
    suggest.add_argument(
        "--today",
        type=date.fromisoformat,
        help="Date to score against, as YYYY-MM-DD (default: today)",
    )
    suggest.add_argument(
        "--output-template",
        type=Path,
        help="Path for the ballots template (default: ballots_template.yaml)",
    )

    tally = subparsers.add_parser("tally", help="Pick a winner from ranked ballots")
    tally.add_argument(
        "ballots_yaml",
        type=Path,
        help="Path to the ballots YAML file",
    )
    tally.add_argument(
        "--record-visit",
        type=Path,
        metavar="VISITS_YAML",
        help="Append the winner to this visit history file",
    )
    tally.add_argument(
        "--date",
        type=date.fromisoformat,
        help="Date of the recorded visit, as YYYY-MM-DD (default: today)",
    )

    return parser


def run_suggest(args: argparse.Namespace) -> int:
    """Score candidates and write a ballot template for the shortlist."""
    if not args.preferences_csv.exists():
        print(f"Error: Preferences file not found: {args.preferences_csv}", file=sys.stderr)
        return 1

    try:
        config = LunchConfig.from_yaml(args.config)
    except (ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Error reading config: {e}", file=sys.stderr)
        return 1

    if args.top_n is not None:
        config.top_n = args.top_n
    if args.seed is not None:
        config.seed = args.seed
    if args.no_jitter:
        config.max_jitter = 0.0
    if args.output_template is not None:
        config.ballot_template = args.output_template
    logger.debug("Config: %s", config.to_dict())

    today = args.today or date.today()

    try:
        member_ids, candidates, preferences = parse_preferences_csv(args.preferences_csv)
    except (ValueError, KeyError) as e:
        print(f"Error parsing preferences CSV: {e}", file=sys.stderr)
        return 1

    if not member_ids:
        print("Error: Preferences CSV has no members", file=sys.stderr)
        return 1

    print(f"Loaded {len(member_ids)} members and {len(candidates)} restaurants")

    visits = []
    if args.visits:
        if not args.visits.exists():
            print(f"Error: Visits file not found: {args.visits}", file=sys.stderr)
            return 1
        try:
            visits = parse_visits_yaml(args.visits, candidates)
        except (ValueError, TypeError, AttributeError, yaml.YAMLError) as e:
            print(f"Error parsing visits YAML: {e}", file=sys.stderr)
            return 1
        visits = filter_recent_visits(visits, today, config.lookback_days)
        print(f"Loaded {len(visits)} visits from the last {config.lookback_days} days")

    suggestions = score_suggestions(
        candidates=candidates,
        preferences=preferences,
        member_ids=member_ids,
        visits=visits,
        top_n=config.top_n,
        default_frequency=config.default_frequency,
        rng=np.random.default_rng(config.seed),
        max_jitter=config.max_jitter,
        today=today,
    )

    print()
    print(format_suggestions(suggestions, candidates))

    if not suggestions:
        return 1

    by_id = {c.candidate_id: c for c in candidates}
    shortlist = [by_id[s.candidate_id] for s in suggestions]
    create_ballot_template(config.ballot_template, shortlist, member_ids)
    print(f"\nCreated ballots template at: {config.ballot_template}")
    print("Have everyone reorder their list, then run the tally.")

    return 0


def run_tally(args: argparse.Namespace) -> int:
    """Tally ranked ballots and print the rounds and winner."""
    if not args.ballots_yaml.exists():
        print(f"Error: Ballots file not found: {args.ballots_yaml}", file=sys.stderr)
        return 1

    try:
        candidate_ids, ballots, names = parse_ballots_yaml(args.ballots_yaml)
    except (ValueError, KeyError, TypeError, AttributeError, yaml.YAMLError) as e:
        print(f"Error parsing ballots YAML: {e}", file=sys.stderr)
        return 1

    print(f"Loaded {len(ballots)} ballots for {len(candidate_ids)} candidates")

    try:
        result = instant_runoff(candidate_ids, ballots)
    except EmptyInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print()
    print(format_tally(result, names))

    if args.record_visit:
        visit_date = args.date or date.today()
        winner_name = names.get(result.winner, result.winner)
        try:
            record_visit(args.record_visit, winner_name, visit_date)
        except (ValueError, yaml.YAMLError) as e:
            print(f"Error recording visit: {e}", file=sys.stderr)
            return 1
        print(f"\nRecorded visit to {winner_name} on {visit_date} in {args.record_visit}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for lunchpick CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "suggest":
        return run_suggest(args)
    return run_tally(args)


if __name__ == "__main__":
    sys.exit(main())
