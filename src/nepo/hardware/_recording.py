"""Recording brick: logs every hardware effect instead of performing it.

Used by ``nepo --dry-run`` and by the test suite.  Nothing sleeps;
sensor readings are scripted per port.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from ._ports import motor_port, sensor_port


class Effect(NamedTuple):
    """One recorded hardware interaction, e.g. ``("motor:A", "rotate", (360,))``."""

    target: str
    action: str
    args: tuple = ()

    def __str__(self) -> str:
        return f"{self.target}.{self.action}({', '.join(repr(a) for a in self.args)})"


class _Script:
    """Serves readings in order; the last one repeats forever."""

    def __init__(self, readings: Iterable) -> None:
        self._readings = list(readings)
        if not self._readings:
            raise ValueError("a sensor script needs at least one reading")
        self._next = 0

    def read(self):
        value = self._readings[min(self._next, len(self._readings) - 1)]
        self._next += 1
        return value


class RecordingMotor:
    def __init__(self, brick: RecordingHardware, port: str) -> None:
        self._brick = brick
        self.target = f"motor:{port}"
        self.speed = 0
        self.tacho_count = 0

    def forward(self) -> None:
        self._brick.record(self.target, "forward")

    def backward(self) -> None:
        self._brick.record(self.target, "backward")

    def stop(self) -> None:
        self._brick.record(self.target, "stop")

    def set_speed(self, speed: int) -> None:
        self.speed = speed
        self._brick.record(self.target, "set_speed", speed)

    def rotate(self, degrees: int) -> None:
        self.tacho_count += degrees
        self._brick.record(self.target, "rotate", degrees)

    def speed_read(self) -> int:
        self._brick.record(self.target, "speed_read")
        return self.speed

    def tacho_read(self) -> int:
        self._brick.record(self.target, "tacho_read")
        return self.tacho_count


class RecordingSensor:
    def __init__(self, brick: RecordingHardware, port: str) -> None:
        self._brick = brick
        self.target = f"sensor:{port}"
        self._digital = _Script([False])
        self._distance = _Script([255.0])
        self._light = _Script([0.0])

    def script(self, digital: Iterable[bool] | None = None,
               distance: Iterable[float] | None = None,
               light: Iterable[float] | None = None) -> None:
        if digital is not None:
            self._digital = _Script(digital)
        if distance is not None:
            self._distance = _Script(distance)
        if light is not None:
            self._light = _Script(light)

    def digital_read(self) -> bool:
        value = bool(self._digital.read())
        self._brick.record(self.target, "digital_read")
        return value

    def distance_read(self) -> float:
        value = float(self._distance.read())
        self._brick.record(self.target, "distance_read")
        return value

    def light_read(self) -> float:
        value = float(self._light.read())
        self._brick.record(self.target, "light_read")
        return value


class RecordingSound:
    def __init__(self, brick: RecordingHardware) -> None:
        self._brick = brick

    def play_tone(self, frequency_hz: int, duration_ms: int) -> None:
        self._brick.record("sound", "play_tone", frequency_hz, duration_ms)


class RecordingDisplay:
    def __init__(self, brick: RecordingHardware) -> None:
        self._brick = brick
        self.rows: dict[int, str] = {}

    def clear(self) -> None:
        self.rows.clear()
        self._brick.record("display", "clear")

    def draw_text(self, text: str, row: int) -> None:
        self.rows[row] = text
        self._brick.record("display", "draw_text", text, row)


class RecordingHardware:
    """In-memory brick that records effects in call order.

    Examples
    --------
    >>> hw = RecordingHardware()
    >>> hw.sensor("1").script(digital=[False, True])
    >>> hw.motor("A").forward()
    >>> [str(e) for e in hw.effects("forward")]
    ['motor:A.forward()']
    """

    def __init__(self) -> None:
        self.log: list[Effect] = []
        self._motors: dict[str, RecordingMotor] = {}
        self._sensors: dict[str, RecordingSensor] = {}
        self.sound = RecordingSound(self)
        self.display = RecordingDisplay(self)

    def record(self, target: str, action: str, *args: object) -> None:
        self.log.append(Effect(target, action, args))

    def effects(self, *actions: str) -> list[Effect]:
        """Recorded effects, optionally filtered to the given action names."""
        if not actions:
            return list(self.log)
        return [e for e in self.log if e.action in actions]

    def motor(self, port: str) -> RecordingMotor:
        port = motor_port(port)
        if port not in self._motors:
            self._motors[port] = RecordingMotor(self, port)
        return self._motors[port]

    def sensor(self, port: str) -> RecordingSensor:
        port = sensor_port(port)
        if port not in self._sensors:
            self._sensors[port] = RecordingSensor(self, port)
        return self._sensors[port]

    def delay(self, milliseconds: int) -> None:
        self.record("brick", "delay", milliseconds)
