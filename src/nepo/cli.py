"""``nepo`` command line: pick a NEPO program and run it.

    nepo drive_square.xml
    nepo --dir programs/            # interactive selection
    nepo hello.xml --dry-run        # record effects, no sleeping
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

from pydantic import ValidationError

from nepo.errors import NepoError
from nepo.hardware import ConsoleHardware, RecordingHardware
from nepo.interpret import ExecutionContext, run
from nepo.markup import load_program
from nepo.picker import select_program
from nepo.settings import RunnerSettings

logger = logging.getLogger("nepo")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="nepo", description="Run Open Roberta NEPO programs")
    p.add_argument("program", nargs="?", help="Program file (.xml). Omit to choose interactively")
    p.add_argument("--dir", default=".", help="Directory to choose programs from (default: .)")
    p.add_argument("--dry-run", action="store_true",
                   help="Record hardware effects instead of performing them, then print them")
    p.add_argument("--poll-interval", type=int, default=50, metavar="MS",
                   help="Polling interval of wait-for-condition blocks (default: 50)")
    p.add_argument("--max-depth", type=int, default=64, metavar="N",
                   help="Maximum statement nesting depth (default: 64)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every executed block")
    return p


def _skip_sleep(milliseconds: int) -> None:
    pass


def _install_stop_handler(context: ExecutionContext) -> None:
    """First Ctrl-C stops the program cooperatively; a second one aborts."""
    if threading.current_thread() is not threading.main_thread():
        return

    def _handler(signum, frame):
        logger.info("Stop requested")
        context.stop()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    signal.signal(signal.SIGINT, _handler)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = RunnerSettings(
            program_dir=Path(args.dir),
            poll_interval_ms=args.poll_interval,
            max_depth=args.max_depth,
            dry_run=args.dry_run,
        )
    except ValidationError as exc:
        print(f"Invalid options: {exc}", file=sys.stderr)
        return 2

    if args.program is not None:
        program = Path(args.program)
    else:
        program = select_program(settings.program_dir)
        if program is None:
            print("No program selected", file=sys.stderr)
            return 1

    context = ExecutionContext(
        poll_interval_ms=settings.poll_interval_ms,
        max_depth=settings.max_depth,
    )
    if settings.dry_run:
        hardware = RecordingHardware()
        context.sleep = _skip_sleep
    else:
        hardware = ConsoleHardware()

    logger.info("Running %s", program)
    previous = signal.getsignal(signal.SIGINT)
    _install_stop_handler(context)
    try:
        run(load_program(program), hardware, context=context)
    except NepoError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if threading.current_thread() is threading.main_thread():
            signal.signal(signal.SIGINT, previous)

    if isinstance(hardware, RecordingHardware):
        for effect in hardware.effects():
            print(effect)

    for fault in context.faults:
        print(f"Fault in {fault.block_type}: {fault.error_type}: {fault.message}", file=sys.stderr)
    return 1 if context.faults else 0


if __name__ == "__main__":
    sys.exit(main())
