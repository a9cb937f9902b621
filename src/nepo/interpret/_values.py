"""Runtime values for the interpreter.

A runtime value is one of

- ``float``: Number
- ``str``: Text
- ``bool``: Boolean
- ``None``: Absent, "no usable value"; consumers treat it as false/no-op

Only the evaluator produces them.
"""

from __future__ import annotations

import math
from typing import TypeAlias

RuntimeValue: TypeAlias = float | str | bool | None

ABSENT: RuntimeValue = None


def parse_number(text: str) -> float:
    """Parse a numeric literal field; malformed text gives ``0.0``."""
    try:
        return float(text)
    except ValueError:
        return 0.0


def is_number(value: RuntimeValue) -> bool:
    return isinstance(value, float) and not isinstance(value, bool)


def is_true(value: RuntimeValue) -> bool:
    """Only Boolean ``True`` counts as true; Absent and other types do not."""
    return value is True


def truncate(value: float) -> int:
    """Truncate toward zero; NaN and infinities map to 0."""
    if math.isnan(value) or math.isinf(value):
        return 0
    return int(value)


def to_text(value: RuntimeValue) -> str:
    """Render a value for display or text joining."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
