"""Expression evaluator: reduces value blocks to runtime values.

Unsupported or type-mismatched operations produce Absent (``None``)
instead of raising.  Hardware faults during a sensor read are not caught
here; they propagate to the statement that asked for the value.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable

from nepo.hardware import Hardware
from nepo.model.blocks import Block, BlockKind

from ._context import ExecutionContext
from ._values import ABSENT, RuntimeValue, is_number, parse_number, to_text, truncate

logger = logging.getLogger(__name__)

TRUE_SENTINEL = "TRUE"


def _compare(op: str, a: float, b: float) -> bool | None:
    if op == "EQ":
        return a == b
    if op == "NEQ":
        return a != b
    if op == "LT":
        return a < b
    if op == "LTE":
        return a <= b
    if op == "GT":
        return a > b
    if op == "GTE":
        return a >= b
    return None


def _arithmetic(op: str, a: float, b: float) -> float | None:
    if op == "ADD":
        return a + b
    if op == "MINUS":
        return a - b
    if op == "MULTIPLY":
        return a * b
    if op == "DIVIDE":
        # Division by zero yields 0.0 on the brick
        return a / b if b != 0 else 0.0
    if op == "POWER":
        return _power(a, b)
    return None


# Math on the brick follows IEEE 754: out-of-domain input gives NaN and
# overflow gives an infinity instead of an error.

def _power(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        odd = b.is_integer() and int(b) % 2 == 1
        return -math.inf if a < 0 and odd else math.inf
    except ValueError:
        # Zero to a negative power, or a negative base with a fractional exponent
        return math.inf if a == 0 else math.nan


def _log(fn: Callable[[float], float]) -> Callable[[float], float]:
    def log(x: float) -> float:
        if x == 0:
            return -math.inf
        return fn(x) if x > 0 else math.nan
    return log


def _single(fn: Callable[[float], float], x: float) -> float:
    try:
        return float(fn(x))
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf


_SINGLE_OPS: dict[str, Callable[[float], float]] = {
    "ROOT": math.sqrt,
    "ABS": abs,
    "NEG": lambda x: -x,
    "LN": _log(math.log),
    "LOG10": _log(math.log10),
    "EXP": math.exp,
    "POW10": lambda x: _power(10.0, x),
    "SIN": lambda x: math.sin(math.radians(x)),
    "COS": lambda x: math.cos(math.radians(x)),
    "TAN": lambda x: math.tan(math.radians(x)),
    "ASIN": lambda x: math.degrees(math.asin(x)),
    "ACOS": lambda x: math.degrees(math.acos(x)),
    "ATAN": lambda x: math.degrees(math.atan(x)),
}


class ExpressionEvaluator:
    """Evaluates value blocks against a brick and an execution context.

    Parameters
    ----------
    hardware : Hardware
        Source of sensor readings.
    context : ExecutionContext
        Supplies the variable table.
    rng : random.Random
        Random source for ``math_random_int``.
    """

    def __init__(
        self,
        hardware: Hardware,
        context: ExecutionContext,
        rng: random.Random | None = None,
    ) -> None:
        self.hardware = hardware
        self.context = context
        self.rng = rng or random.Random()

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def evaluate(self, block: Block | None) -> RuntimeValue:
        """Evaluate *block*; missing blocks and non-value kinds give Absent."""
        if block is None:
            return ABSENT
        handler = self._EXPR_DISPATCH.get(block.kind)
        if handler is None:
            logger.debug("No value for block type %r", block.type_name)
            return ABSENT
        return handler(self, block)

    def value(self, block: Block, slot: str) -> RuntimeValue:
        """Evaluate the block plugged into value slot *slot* of *block*."""
        return self.evaluate(block.value(slot))

    # -----------------------------------------------------------------------
    # Literals
    # -----------------------------------------------------------------------

    def _eval_number(self, block: Block) -> RuntimeValue:
        text = block.field("NUM")
        if text is None:
            return ABSENT
        return parse_number(text)

    def _eval_text(self, block: Block) -> RuntimeValue:
        text = block.field("TEXT")
        return text if text is not None else ""

    def _eval_boolean(self, block: Block) -> RuntimeValue:
        return block.field("BOOL") == TRUE_SENTINEL

    # -----------------------------------------------------------------------
    # Sensors (never memoized; every evaluation samples the hardware)
    # -----------------------------------------------------------------------

    def _eval_touch(self, block: Block) -> RuntimeValue:
        port = block.field("SENSORPORT")
        if port is None:
            return ABSENT
        return bool(self.hardware.sensor(port).digital_read())

    def _eval_distance(self, block: Block) -> RuntimeValue:
        port = block.field("SENSORPORT")
        if port is None:
            return ABSENT
        return float(self.hardware.sensor(port).distance_read())

    def _eval_light(self, block: Block) -> RuntimeValue:
        port = block.field("SENSORPORT")
        if port is None:
            return ABSENT
        return float(self.hardware.sensor(port).light_read())

    def _eval_encoder(self, block: Block) -> RuntimeValue:
        port = block.field("MOTORPORT")
        if port is None:
            return ABSENT
        return float(self.hardware.motor(port).tacho_read())

    def _eval_motor_power(self, block: Block) -> RuntimeValue:
        port = block.field("MOTORPORT")
        if port is None:
            return ABSENT
        # Regulated speed back to percent, truncated
        return float(truncate(self.hardware.motor(port).speed_read() / 7))

    def _eval_timer(self, _block: Block) -> RuntimeValue:
        return self.context.elapsed_ms()

    # -----------------------------------------------------------------------
    # Operators
    # -----------------------------------------------------------------------

    def _eval_compare(self, block: Block) -> RuntimeValue:
        op = block.field("OP") or ""
        a = self.value(block, "A")
        b = self.value(block, "B")
        if not (is_number(a) and is_number(b)):
            return ABSENT
        return _compare(op, a, b)

    def _eval_logic_operation(self, block: Block) -> RuntimeValue:
        op = block.field("OP")
        a = self.value(block, "A")
        if op == "NOT":
            return (not a) if isinstance(a, bool) else ABSENT
        b = self.value(block, "B")
        if not (isinstance(a, bool) and isinstance(b, bool)):
            return ABSENT
        if op == "AND":
            return a and b
        if op == "OR":
            return a or b
        return ABSENT

    def _eval_negate(self, block: Block) -> RuntimeValue:
        a = self.value(block, "BOOL")
        return (not a) if isinstance(a, bool) else ABSENT

    def _eval_arithmetic(self, block: Block) -> RuntimeValue:
        op = block.field("OP") or ""
        a = self.value(block, "A")
        b = self.value(block, "B")
        if not (is_number(a) and is_number(b)):
            return ABSENT
        return _arithmetic(op, a, b)

    def _eval_single(self, block: Block) -> RuntimeValue:
        fn = _SINGLE_OPS.get(block.field("OP") or "")
        num = self.value(block, "NUM")
        if fn is None or not is_number(num):
            return ABSENT
        return _single(fn, num)

    def _eval_random_int(self, block: Block) -> RuntimeValue:
        low = self.value(block, "FROM")
        high = self.value(block, "TO")
        lo = truncate(low) if is_number(low) else 1
        hi = truncate(high) if is_number(high) else 100
        if lo > hi:
            lo, hi = hi, lo
        return float(self.rng.randint(lo, hi))

    def _eval_text_join(self, block: Block) -> RuntimeValue:
        return to_text(self.value(block, "A")) + to_text(self.value(block, "B"))

    def _eval_variable_get(self, block: Block) -> RuntimeValue:
        name = block.field("VAR")
        if name is None:
            return ABSENT
        value = self.context.variables.get(name)
        # Unset variables read as zero
        return 0.0 if value is None else value

    # Expression dispatch table
    _EXPR_DISPATCH: dict[BlockKind, Callable[[ExpressionEvaluator, Block], RuntimeValue]] = {
        BlockKind.MATH_NUMBER: _eval_number,
        BlockKind.TEXT: _eval_text,
        BlockKind.LOGIC_BOOLEAN: _eval_boolean,
        BlockKind.TOUCH_IS_PRESSED: _eval_touch,
        BlockKind.TOUCH_GET_SAMPLE: _eval_touch,
        BlockKind.ULTRASONIC_DISTANCE: _eval_distance,
        BlockKind.LIGHT_GET_SAMPLE: _eval_light,
        BlockKind.ENCODER_ROTATION: _eval_encoder,
        BlockKind.MOTOR_GET_POWER: _eval_motor_power,
        BlockKind.TIMER_GET: _eval_timer,
        BlockKind.LOGIC_COMPARE: _eval_compare,
        BlockKind.LOGIC_OPERATION: _eval_logic_operation,
        BlockKind.LOGIC_NEGATE: _eval_negate,
        BlockKind.MATH_ARITHMETIC: _eval_arithmetic,
        BlockKind.MATH_SINGLE: _eval_single,
        BlockKind.MATH_RANDOM_INT: _eval_random_int,
        BlockKind.TEXT_JOIN: _eval_text_join,
        BlockKind.VARIABLES_GET: _eval_variable_get,
    }
