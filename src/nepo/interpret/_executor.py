"""Statement executor: walks block chains and performs their effects.

A chain is followed through ``next`` links until it ends or the context
stops running.  Nested chains (start body, loop and conditional bodies)
re-enter ``run()``.

Faults raised while a block evaluates its operands or drives hardware are
caught at that block, recorded on the context, shown on the display, and
end the chain the block belongs to.  The chain that contains the faulted
chain (e.g. the loop owning a body) carries on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from nepo.errors import BlockExecutionError
from nepo.hardware import Hardware, Motor
from nepo.model.blocks import VALUE_KINDS, Block, BlockKind
from nepo.model.configuration import RobotConfiguration

from ._context import BlockFault, ExecutionContext
from ._evaluator import ExpressionEvaluator
from ._values import is_number, is_true, to_text, truncate

logger = logging.getLogger(__name__)

# Percent power to regulated speed in degrees/second
POWER_TO_SPEED = 7.2
MAX_SPEED = 900

DIFF_LEFT_PORT = "A"
DIFF_RIGHT_PORT = "C"


class StatementExecutor:
    """Tree-walking executor for statement chains.

    Parameters
    ----------
    hardware : Hardware
        The brick whose capabilities blocks invoke.
    context : ExecutionContext
        Running flag, variables, fault record, sleep hook.
    evaluator : ExpressionEvaluator
        Operand evaluator; built from *hardware* and *context* if omitted.
    configuration : RobotConfiguration | None
        When given, motor commands for undeclared ports are skipped.
    """

    def __init__(
        self,
        hardware: Hardware,
        context: ExecutionContext,
        evaluator: ExpressionEvaluator | None = None,
        configuration: RobotConfiguration | None = None,
    ) -> None:
        self.hardware = hardware
        self.context = context
        self.evaluator = evaluator or ExpressionEvaluator(hardware, context)
        self.configuration = configuration
        self._depth = 0

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def run(self, block: Block | None) -> None:
        """Execute the chain starting at *block*."""
        if block is None:
            return
        if self._depth >= self.context.max_depth:
            self._report_fault(block, BlockExecutionError(
                f"Statement nesting deeper than {self.context.max_depth}"
            ))
            return

        self._depth += 1
        try:
            while block is not None and self.context.running:
                try:
                    self._exec_block(block)
                except Exception as exc:
                    self._report_fault(block, exc)
                    return
                block = block.next
        finally:
            self._depth -= 1

    # -----------------------------------------------------------------------
    # Statement dispatch
    # -----------------------------------------------------------------------

    def _exec_block(self, block: Block) -> None:
        kind = block.kind
        logger.debug("Executing block %s", block.type_name)
        if kind in VALUE_KINDS:
            # Value blocks dropped into a chain have no effect
            return
        handler = self._STMT_DISPATCH.get(kind)
        if handler is None:
            raise BlockExecutionError(f"No handler for block kind {kind.name}")
        handler(self, block)

    def _exec_unsupported(self, block: Block) -> None:
        logger.warning(
            "Unsupported block type %r (id=%s); continuing",
            block.type_name, block.id,
        )

    def _exec_start(self, block: Block) -> None:
        self.run(block.statement("ST"))

    # -----------------------------------------------------------------------
    # Display and sound
    # -----------------------------------------------------------------------

    def _exec_display_text(self, block: Block) -> None:
        value = self.evaluator.value(block, "OUT")
        if value is None:
            return
        display = self.hardware.display
        display.clear()
        display.draw_text(to_text(value), 0)

    def _exec_display_clear(self, _block: Block) -> None:
        self.hardware.display.clear()

    def _exec_play_tone(self, block: Block) -> None:
        frequency = self.evaluator.value(block, "FREQUENCY")
        duration = self.evaluator.value(block, "DURATION")
        if not (is_number(frequency) and is_number(duration)):
            return
        duration_ms = truncate(duration)
        self.hardware.sound.play_tone(truncate(frequency), duration_ms)
        # Hold the chain while the tone plays
        self.context.sleep(duration_ms)

    # -----------------------------------------------------------------------
    # Motors
    # -----------------------------------------------------------------------

    def _motor(self, port: str) -> Motor | None:
        if self.configuration is not None and not self.configuration.has_motor(port):
            logger.warning("Motor port %s is not configured; command skipped", port)
            return None
        return self.hardware.motor(port)

    def _polarity(self, port: str) -> int:
        """-1 for a motor the configuration declares reversed, else 1."""
        if self.configuration is None:
            return 1
        motor = self.configuration.motors.get(port)
        return -1 if motor is not None and motor.reverse else 1

    @staticmethod
    def _move(motor: Motor, sign: int) -> None:
        if sign > 0:
            motor.forward()
        else:
            motor.backward()

    def _exec_motor_on(self, block: Block) -> None:
        port = block.field("MOTORPORT")
        mode = block.field("MOTORROTATION")
        power = self.evaluator.value(block, "POWER")
        amount = self.evaluator.value(block, "VALUE")
        if port is None or not is_number(power):
            return
        motor = self._motor(port)
        if motor is None:
            return

        motor.set_speed(truncate(abs(power) * POWER_TO_SPEED))
        sign = (1 if power >= 0 else -1) * self._polarity(port)
        if mode == "ROTATIONS" and is_number(amount):
            motor.rotate(sign * truncate(amount * 360))
        elif mode == "DEGREE" and is_number(amount):
            motor.rotate(sign * truncate(amount))
        else:
            self._move(motor, sign)

    def _exec_motor_stop(self, block: Block) -> None:
        port = block.field("MOTORPORT")
        if port is None:
            return
        motor = self._motor(port)
        if motor is not None:
            motor.stop()

    def _exec_motor_set_speed(self, block: Block) -> None:
        port = block.field("MOTORPORT")
        speed = self.evaluator.value(block, "SPEED")
        if port is None or not is_number(speed):
            return
        motor = self._motor(port)
        if motor is not None:
            motor.set_speed(max(0, min(MAX_SPEED, truncate(speed))))

    def _drive_pair(self, power: float) -> list[tuple[Motor, int]] | None:
        """Left and right drive motors with their polarity, set to *power*."""
        left = self._motor(DIFF_LEFT_PORT)
        right = self._motor(DIFF_RIGHT_PORT)
        if left is None or right is None:
            return None
        speed = truncate(abs(power) * POWER_TO_SPEED)
        left.set_speed(speed)
        right.set_speed(speed)
        return [
            (left, self._polarity(DIFF_LEFT_PORT)),
            (right, self._polarity(DIFF_RIGHT_PORT)),
        ]

    def _exec_motor_diff_on(self, block: Block) -> None:
        # "FOREWARD" is how the block markup spells it
        step = {"FOREWARD": 1, "BACKWARD": -1}.get(block.field("DIRECTION") or "")
        power = self.evaluator.value(block, "POWER")
        if not is_number(power):
            return
        pair = self._drive_pair(power)
        if pair is None or step is None:
            return
        for motor, polarity in pair:
            self._move(motor, step * polarity)

    def _exec_motor_diff_turn_for(self, block: Block) -> None:
        turn = {"RIGHT": 1, "LEFT": -1}.get(block.field("DIRECTION") or "")
        power = self.evaluator.value(block, "POWER")
        degrees = self.evaluator.value(block, "DEGREE")
        if not (is_number(power) and is_number(degrees)):
            return
        pair = self._drive_pair(power)
        if pair is None or turn is None:
            return
        (left, left_polarity), (right, right_polarity) = pair
        amount = truncate(degrees) * turn
        left.rotate(amount * left_polarity)
        right.rotate(-amount * right_polarity)

    # -----------------------------------------------------------------------
    # Waits
    # -----------------------------------------------------------------------

    def _exec_wait_time(self, block: Block) -> None:
        value = self.evaluator.value(block, "WAIT")
        if is_number(value):
            self.hardware.delay(truncate(value))

    def _wait_for(self, block: Block, slot: str) -> None:
        # No timeout: a condition that never holds blocks until stopped.
        while self.context.running:
            if is_true(self.evaluator.value(block, slot)):
                return
            self.context.sleep(self.context.poll_interval_ms)

    def _exec_wait(self, block: Block) -> None:
        self._wait_for(block, "WAIT0")

    def _exec_wait_until(self, block: Block) -> None:
        self._wait_for(block, "CONDITION")

    # -----------------------------------------------------------------------
    # Control flow
    # -----------------------------------------------------------------------

    def _exec_if(self, block: Block) -> None:
        if is_true(self.evaluator.value(block, "IF0")):
            self.run(block.statement("DO0"))

    def _exec_if_else(self, block: Block) -> None:
        if is_true(self.evaluator.value(block, "IF0")):
            self.run(block.statement("DO0"))
        else:
            self.run(block.statement("ELSE"))

    def _exec_repeat_times(self, block: Block) -> None:
        # The count is evaluated once, before the first iteration
        times = self.evaluator.value(block, "TIMES")
        count = truncate(times) if is_number(times) else 0
        body = block.statement("DO")
        for _ in range(count):
            if not self.context.running:
                break
            if body is not None:
                self.run(body)

    # -----------------------------------------------------------------------
    # Variables
    # -----------------------------------------------------------------------

    def _exec_variable_set(self, block: Block) -> None:
        name = block.field("VAR")
        value = self.evaluator.value(block, "VALUE")
        if name is not None and value is not None:
            self.context.variables[name] = value

    # Statement dispatch table
    _STMT_DISPATCH: dict[BlockKind, Callable[[StatementExecutor, Block], None]] = {
        BlockKind.START: _exec_start,
        BlockKind.DISPLAY_TEXT: _exec_display_text,
        BlockKind.DISPLAY_CLEAR: _exec_display_clear,
        BlockKind.PLAY_TONE: _exec_play_tone,
        BlockKind.MOTOR_ON: _exec_motor_on,
        BlockKind.MOTOR_STOP: _exec_motor_stop,
        BlockKind.MOTOR_SET_SPEED: _exec_motor_set_speed,
        BlockKind.MOTOR_DIFF_ON: _exec_motor_diff_on,
        BlockKind.MOTOR_DIFF_TURN_FOR: _exec_motor_diff_turn_for,
        BlockKind.WAIT_TIME: _exec_wait_time,
        BlockKind.WAIT: _exec_wait,
        BlockKind.WAIT_UNTIL: _exec_wait_until,
        BlockKind.IF: _exec_if,
        BlockKind.IF_ELSE: _exec_if_else,
        BlockKind.REPEAT_TIMES: _exec_repeat_times,
        BlockKind.VARIABLES_SET: _exec_variable_set,
        BlockKind.UNSUPPORTED: _exec_unsupported,
    }

    # -----------------------------------------------------------------------
    # Fault reporting
    # -----------------------------------------------------------------------

    def _report_fault(self, block: Block, exc: Exception) -> None:
        block_type = block.type_name
        logger.error("Error in block %s: %s", block_type, exc, exc_info=exc)
        self.context.faults.append(BlockFault(
            block_type=block_type,
            block_id=block.id,
            error_type=type(exc).__name__,
            message=str(exc),
        ))
        try:
            display = self.hardware.display
            display.clear()
            display.draw_text("Error in block:", 0)
            display.draw_text(block_type or "?", 1)
            display.draw_text(str(exc), 2)
        except Exception as display_exc:
            # Display failures never escape the fault boundary
            logger.error("Cannot show fault on display: %s", display_exc, exc_info=display_exc)
