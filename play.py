#!/usr/bin/env python3
"""
2048 with an alpha-beta move advisor

Interactive play in the terminal (arrows/WASD, ENTER takes the suggestion,
Q quits) or fully automated with -a.

Example usage:
    python play.py              # play, with suggestions computed in 300ms
    python play.py -a -t 100    # watch the AI play at 100ms per move
"""

import curses
import logging
import sys

from ai2048.config import DEFAULT_LOG_FILE, parse_args, setup_logging
from ai2048.controller import GameController
from ai2048.render import render_final
from ai2048.terminal import ConsoleInterface, CursesInterface

logger = logging.getLogger(__name__)


def build_controller(config, ui):
    return GameController(
        seed=config["seed"],
        deadline_ms=config["deadline_ms"],
        auto=config["auto"],
        suggest=config["suggest"],
        expectimax=config["expectimax"],
        max_depth=config["max_depth"],
        ui=ui,
    )


def run_curses(config):
    def play(stdscr):
        controller = build_controller(config, CursesInterface(stdscr))
        controller.run()
        return controller

    controller = curses.wrapper(play)
    # curses has restored the terminal by now
    print(render_final(controller.node))
    return controller


def run_console(config):
    controller = build_controller(config, ConsoleInterface())
    controller.run()
    return controller


def run_pygame(config):
    # only needed for the windowed front-end
    from ai2048.interface import PygameInterface

    controller = build_controller(config, PygameInterface())
    controller.run()
    print(render_final(controller.node))
    return controller


RUNNERS = {
    "curses": run_curses,
    "console": run_console,
    "pygame": run_pygame,
}


def main(argv=None):
    config = parse_args(argv)

    # the curses screen owns the terminal, so logs go to a file there
    if config["ui"] == "curses":
        setup_logging(config["log_level"], config["log_file"] or DEFAULT_LOG_FILE, console=False)
    else:
        setup_logging(config["log_level"], config["log_file"], console=True)

    try:
        RUNNERS[config["ui"]](config)
    except KeyboardInterrupt:
        logger.info("Game stopped by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
