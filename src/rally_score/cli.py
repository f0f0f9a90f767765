# Area: Shared
"""
rally_score.cli — Command-line interface
========================================

Evaluates match records stored as JSON files and prints JSON.

Usage:
    python -m rally_score actions match.json --user u1 --organizer --mode required
    python -m rally_score label match.json
    python -m rally_score eligibility match.json roster.json
    python -m rally_score payload match.json roster.json --config config.json
    python -m rally_score panel matches.json

Thresholds and the DUPR club id come from --config and the environment
(see rally_score.config).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from ._shared.logging_config import setup_logging
from .config import build_context, load_config
from .eligibility import check_rating_eligibility
from .enums import RegulationMode
from .errors import RallyScoreError
from .models import as_match
from .permissions import get_available_score_actions
from .rating_panel import categorize_match, get_panel_stats
from .status import get_score_state_label, get_status_label
from .submission import build_submission_payload


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="rally_score",
        description="Rally Score - evaluate match score permissions and DUPR readiness",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m rally_score actions match.json --user u1
  python -m rally_score actions match.json --user org1 --organizer --mode required
  python -m rally_score eligibility match.json roster.json
  DUPR_CLUB_ID=1234 python -m rally_score payload match.json roster.json
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", type=str, help="Also write JSON logs to this file")

    commands = parser.add_subparsers(dest="command", required=True)

    actions = commands.add_parser("actions", help="Show which score actions a user may take")
    actions.add_argument("match", help="Match record JSON file")
    actions.add_argument("--user", required=True, help="Acting user id")
    actions.add_argument("--organizer", action="store_true", help="Acting user organises the event")
    actions.add_argument(
        "--mode",
        default=RegulationMode.NONE.value,
        choices=[mode.value for mode in RegulationMode],
        help="Event DUPR regulation mode (default: none)",
    )

    label = commands.add_parser("label", help="Show the match's status labels")
    label.add_argument("match", help="Match record JSON file")

    for name, text in (
        ("eligibility", "Check DUPR submission eligibility"),
        ("payload", "Build the DUPR submission payload"),
    ):
        sub = commands.add_parser(name, help=text)
        sub.add_argument("match", help="Match record JSON file")
        sub.add_argument("roster", help="Participants JSON file (list of {userId, displayName, duprId})")
        sub.add_argument(
            "--correction",
            action="store_true",
            help="Treat an already-submitted match as a correction",
        )

    panel = commands.add_parser("panel", help="Summarise matches for the organiser DUPR panel")
    panel.add_argument("matches", help="JSON file holding a list of match records")
    panel.add_argument("--by-match", action="store_true", help="Also list each match's category")

    return parser.parse_args(argv)


def _read_json(path: str) -> Any:
    with open(Path(path), encoding="utf-8") as f:
        return json.load(f)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def run_command(args: argparse.Namespace) -> Any:
    """Run one subcommand and return its JSON-serialisable output."""
    config = load_config(args.config)

    if args.command == "actions":
        context = build_context(args.mode, args.organizer, config)
        return get_available_score_actions(_read_json(args.match), args.user, context).to_dict()

    if args.command == "label":
        match = as_match(_read_json(args.match))
        return {
            "statusLabel": get_status_label(match),
            "scoreStateLabel": get_score_state_label(match),
        }

    if args.command == "eligibility":
        verdict = check_rating_eligibility(
            _read_json(args.match), _read_json(args.roster), config, args.correction
        )
        return verdict.to_dict()

    if args.command == "payload":
        return build_submission_payload(
            _read_json(args.match), _read_json(args.roster), config, args.correction
        )

    if args.command == "panel":
        matches = [as_match(record) for record in _read_json(args.matches)]
        output = {"stats": get_panel_stats(matches)}
        if args.by_match:
            output["matches"] = [
                {"id": match.id, "category": categorize_match(match).value}
                for match in matches
            ]
        return output

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(args.log_file, getattr(logging, args.log_level))

    try:
        output = run_command(args)
    except RallyScoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: Could not read input: {e}", file=sys.stderr)
        return 1

    _print_json(output)
    return 0
