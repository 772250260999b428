"""Command-line entry point."""

import argparse
import asyncio
import sys
from collections.abc import Sequence

import httpx
import structlog
from notion2noji_core.state import StateLoadError

from runner.config import ConfigurationError, Settings
from runner.tasks import (
    ConnectivityError,
    reset_state,
    run_batch,
    show_status,
    unmark_lesson,
)
from runner.tasks.helpers import configure_logging

logger = structlog.get_logger()

HELP_EPILOG = """\
commands:
  run                 process every lesson not yet sent to Noji (default)
  status              show processing progress and recent lessons
  reset, clear        forget all processed lessons
  unmark IDENTITY     reprocess one lesson on the next run
  help                show this message

environment:
  NOTION_TOKEN, NOTION_PAGE_ID, OPENAI_API_KEY, NOJI_BEARER_TOKEN and
  NOJI_DECK_ID are required for run. Set TSV_OUTPUT to a file path to
  append cards there instead of sending them to Noji; the NOJI_ variables
  are then optional. OPENAI_MODEL, NOJI_API_URL, STATE_FILE and LOG_LEVEL
  are optional. Values are also read from a .env file.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notion2noji",
        description="Generate Noji flashcards from Notion lesson pages.",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="run",
        choices=["run", "status", "reset", "clear", "unmark", "help"],
    )
    parser.add_argument("identity", nargs="?", help="Lesson identity for unmark")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings()
    configure_logging(settings.log_level)

    if args.command == "help":
        parser.print_help()
        return 0

    try:
        if args.command == "status":
            print(show_status(settings))
        elif args.command in ("reset", "clear"):
            print(reset_state(settings))
            print("State reset. All lessons will be processed on the next run.")
        elif args.command == "unmark":
            if not args.identity:
                parser.error("unmark requires a lesson identity")
            if not unmark_lesson(settings, args.identity):
                print(f"Lesson not found in state: {args.identity}")
                return 1
            print(f"Lesson {args.identity} will be processed on the next run.")
        else:
            summary = asyncio.run(run_batch(settings))
            if summary.no_op:
                print("All lessons have already been processed.")
            else:
                print(
                    f"Lessons processed: {summary.lessons_processed}\n"
                    f"Cards created: {summary.cards_created}\n"
                    f"Errors: {summary.errors}"
                )
    except (
        ConfigurationError,
        ConnectivityError,
        StateLoadError,
        httpx.HTTPError,
    ) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0
