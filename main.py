#!/usr/bin/env python3
"""
Shul Board - Synagogue display board with daily zmanim and schedule.

Usage:
    python main.py                          # Print today's board once
    python main.py --serve                  # Run the display, refreshing daily
    python main.py --import-settings FILE   # Save a new schedule configuration
"""

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime
from pathlib import Path

from dotenv import load_dotenv

from shul_board.board import DisplayBoard
from shul_board.config import Config
from shul_board.formatter import format_board, format_settings
from shul_board.models import OrchestrationState
from shul_board.store import parse_schedule_config

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Synagogue display board",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py                            Print today's board
    python main.py --date 2026-03-06          Print the board for a date
    python main.py --serve                    Keep the board running
    python main.py --export-settings > s.json Dump the schedule configuration
    python main.py --import-settings s.json   Save an edited configuration
        """,
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the board continuously, reprinting on every update",
    )
    parser.add_argument(
        "--date",
        type=str,
        help="Override the date for zmanim lookups (YYYY-MM-DD format)",
    )
    parser.add_argument(
        "--import-settings",
        metavar="FILE",
        help="Validate and save a schedule configuration JSON file",
    )
    parser.add_argument(
        "--export-settings",
        action="store_true",
        help="Print the current schedule configuration as JSON",
    )
    return parser.parse_args()


def import_settings(board: DisplayBoard, path: str) -> int:
    """Save a configuration file through the settings store."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 1

    settings = parse_schedule_config(raw)
    if settings is None:
        print(f"Invalid schedule configuration in {path}", file=sys.stderr)
        return 1

    board.save_settings(settings)
    print(
        f"Saved {len(settings.announcements)} announcements, "
        f"{len(settings.prayers)} prayers, {len(settings.lessons)} lessons"
    )
    return 0


async def preview(board: DisplayBoard) -> None:
    """Run the board once and print the result."""
    await board.start()
    await board.wait_idle()
    print(format_board(board.view()))


async def serve(board: DisplayBoard) -> None:
    """Run the board, reprinting whenever its state changes."""

    def on_state(state: OrchestrationState) -> None:
        logger.info(f"Board state: {type(state).__name__}")
        print(format_board(board.view()), flush=True)

    board.subscribe(on_state)
    await board.serve()


def main() -> int:
    """Main entry point."""
    load_dotenv()

    args = parse_args()

    try:
        config = Config.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    config.setup_logging()

    for_date = None
    if args.date:
        try:
            for_date = datetime.strptime(args.date, "%Y-%m-%d").date()
        except ValueError:
            print(f"Invalid date: {args.date}", file=sys.stderr)
            return 1

    board = DisplayBoard(config, for_date=for_date)

    if args.import_settings:
        return import_settings(board, args.import_settings)

    if args.export_settings:
        print(format_settings(board.settings))
        return 0

    logger.info(f"Shul Board starting ({for_date or date.today()})...")

    if args.serve:
        try:
            asyncio.run(serve(board))
        except KeyboardInterrupt:
            logger.info("Shul Board stopped")
        return 0

    asyncio.run(preview(board))
    return 0


if __name__ == "__main__":
    sys.exit(main())
