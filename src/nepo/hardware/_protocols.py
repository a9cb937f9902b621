"""Hardware capability protocols consumed by the interpreter.

These ``@runtime_checkable`` protocols describe the brick primitives a
block may drive.  Any object providing the methods qualifies.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Motor(Protocol):
    """A regulated motor on port A, B or C."""

    def forward(self) -> None: ...

    def backward(self) -> None: ...

    def stop(self) -> None: ...

    def set_speed(self, speed: int) -> None: ...

    def rotate(self, degrees: int) -> None: ...

    def speed_read(self) -> int: ...

    def tacho_read(self) -> int: ...


@runtime_checkable
class Sensor(Protocol):
    """A sensor on port 1 to 4."""

    def digital_read(self) -> bool: ...

    def distance_read(self) -> float: ...

    def light_read(self) -> float: ...


@runtime_checkable
class Sound(Protocol):
    def play_tone(self, frequency_hz: int, duration_ms: int) -> None: ...


@runtime_checkable
class Display(Protocol):
    def clear(self) -> None: ...

    def draw_text(self, text: str, row: int) -> None: ...


@runtime_checkable
class Hardware(Protocol):
    """The full brick: devices by port plus sound, display and timing."""

    sound: Sound
    display: Display

    def motor(self, port: str) -> Motor: ...

    def sensor(self, port: str) -> Sensor: ...

    def delay(self, milliseconds: int) -> None: ...
