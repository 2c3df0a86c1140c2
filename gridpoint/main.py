#!/usr/bin/env python3
"""
GridPoint: pick a screen pixel through a numbered grid and a zoom view,
then click it with xdotool.

The resolved coordinate is printed to stdout as ``x y``; logs go to stderr.
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from gridpoint.application.app import initialize_app
from gridpoint.domain.models.selection import ClickOutcome
from gridpoint.domain.services.i_background_task_service import IBackgroundTaskService
from gridpoint.domain.services.i_click_session_service import IClickSessionService
from gridpoint.domain.services.i_click_settings_service import IClickSettingsService
from gridpoint.domain.services.i_display_service import IDisplayService
from gridpoint.domain.services.i_logger_service import ILoggerService

EXIT_CLICKED = 0
EXIT_INJECTION_FAILED = 1
EXIT_NOT_CLICKED = 2


def display_number(text: str) -> int:
    """``--display`` value: displays are numbered from 1, as --list-displays prints them."""
    try:
        number = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid display number: {text!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"display numbers start at 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridpoint",
        description="Select a screen point through a grid overlay and a zoom view, then click it."
    )
    parser.add_argument("--rows", type=int, help="grid rows for this run")
    parser.add_argument("--cols", type=int, help="grid columns for this run")
    parser.add_argument("--display", type=display_number, metavar="N",
                        help="use display N (as numbered by --list-displays) instead of the largest")
    parser.add_argument("--print-only", action="store_true",
                        help="resolve and print the point without moving or clicking")
    parser.add_argument("--config", help="settings file (default: ~/.config/gridpoint/config.json)")
    parser.add_argument("--log-dir", help="also write logs to a dated file in this directory")
    parser.add_argument("--list-displays", action="store_true", help="list displays and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict:
    """Setting overrides for the flags that were given; absent flags map to None."""
    overrides = {
        "rows": args.rows,
        "cols": args.cols,
        "display_policy": None,
        "display_index": None,
        "inject_clicks": False if args.print_only else None,
    }
    if args.display is not None:
        overrides["display_policy"] = "index"
        overrides["display_index"] = args.display - 1
    return overrides


def exit_code_for(outcome: Optional[ClickOutcome]) -> int:
    if outcome is None or outcome.status == "cancelled":
        return EXIT_NOT_CLICKED
    if outcome.status == "failed":
        return EXIT_INJECTION_FAILED
    return EXIT_CLICKED


def list_displays(container) -> int:
    displays = container.resolve(IDisplayService).get_displays()
    if displays.is_failure:
        container.resolve(ILoggerService).error(str(displays.error))
        return EXIT_NOT_CLICKED
    print(f"Detected {len(displays.value)} display(s):")
    for display in displays.value:
        print(f"  {display.describe()}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("GridPoint")
    app.setQuitOnLastWindowClosed(False)

    container = initialize_app(
        config_file=args.config,
        log_level=logging.DEBUG if args.verbose else logging.INFO,
        log_dir=args.log_dir
    )
    logger = container.resolve(ILoggerService)

    if args.list_displays:
        return list_displays(container)

    container.resolve(IClickSettingsService).set_overrides(**overrides_from_args(args))
    session = container.resolve(IClickSessionService)

    outcomes: List[ClickOutcome] = []

    def on_session_ended(outcome: ClickOutcome):
        outcomes.append(outcome)
        if outcome.point is not None and outcome.status != "cancelled":
            print(f"{outcome.point.x} {outcome.point.y}", flush=True)
        app.quit()

    session.register_result_listener(on_session_ended)

    activation = session.activate()
    if activation.is_failure or not activation.value:
        logger.error("Grid overlay could not be activated")
        session.shutdown()
        return EXIT_NOT_CLICKED

    try:
        app.exec()
    finally:
        session.shutdown()
        container.resolve(IBackgroundTaskService).cancel_all_tasks()

    return exit_code_for(outcomes[-1] if outcomes else None)


if __name__ == "__main__":
    sys.exit(main())
