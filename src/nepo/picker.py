"""Interactive program selection for the CLI."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

PROGRAM_SUFFIX = ".xml"
CANCEL_ANSWERS = frozenset({"", "q", "quit"})


def list_programs(directory: Path) -> list[Path]:
    """Program files in *directory*, sorted by name."""
    if not directory.is_dir():
        return []
    return sorted(
        (p for p in directory.iterdir()
         if p.is_file() and p.suffix.lower() == PROGRAM_SUFFIX),
        key=lambda p: p.name.lower(),
    )


def select_program(
    directory: Path,
    *,
    prompt: Callable[[str], str] | None = None,
    out: Callable[[str], None] = print,
) -> Path | None:
    """Ask the user to pick a program from *directory*.

    Returns None when there is nothing to pick or the user cancels
    (blank answer, ``q``, or end of input).
    """
    prompt = prompt or input
    programs = list_programs(directory)
    if not programs:
        out(f"No {PROGRAM_SUFFIX} programs in {directory}")
        return None

    out("Select NEPO program:")
    for number, path in enumerate(programs, start=1):
        out(f"  {number}) {path.name}")

    while True:
        try:
            answer = prompt(f"Program [1-{len(programs)}, q to cancel]: ").strip().lower()
        except EOFError:
            return None
        if answer in CANCEL_ANSWERS:
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(programs):
            return programs[int(answer) - 1]
        out(f"Not a choice: {answer!r}")
