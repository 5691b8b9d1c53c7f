import argparse
import logging
from typing import Any, Dict, List, Optional

from .search import DEFAULT_DEADLINE_MS

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = "2048.log"
UI_CHOICES = ("curses", "console", "pygame")


def parse_args(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    parser = argparse.ArgumentParser(description="2048 with an alpha-beta move advisor")

    # Play settings
    parser.add_argument("-a", "--auto", action="store_true", help="Let the AI play every move")
    parser.add_argument("-t", "--time", type=int, default=DEFAULT_DEADLINE_MS,
                        help="AI deadline per move in milliseconds")
    parser.add_argument("-s", "--seed", type=int, default=None,
                        help="Seed for the opening position and tile spawns (default: clock)")
    parser.add_argument("--ui", choices=UI_CHOICES, default="curses", help="Front-end to play in")

    # Search settings
    parser.add_argument("-e", "--expectimax", action="store_true",
                        help="Average over tile spawns instead of assuming the worst one")
    parser.add_argument("--no-suggest", action="store_true",
                        help="Do not compute suggestions during interactive play")
    parser.add_argument("--max-depth", type=int, default=None,
                        help="Stop deepening at this depth even if time remains")

    # Logging settings
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    parser.add_argument("--log-file", type=str, default=None,
                        help=f"Log file (the curses front-end always logs to a file, default {DEFAULT_LOG_FILE})")

    args = parser.parse_args(argv)

    if args.time < 0:
        parser.error("--time must not be negative")
    if args.max_depth is not None and args.max_depth < 1:
        parser.error("--max-depth must be at least 1")

    config = {
        # Play settings
        "auto": args.auto,
        "deadline_ms": args.time,
        "seed": args.seed,
        "ui": args.ui,

        # Search settings
        "expectimax": args.expectimax,
        "suggest": not args.no_suggest,
        "max_depth": args.max_depth,

        # Logging settings
        "log_level": args.log_level,
        "log_file": args.log_file,
    }

    return config


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, console: bool = True) -> None:
    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
