"""Console brick: a terminal stand-in for the robot.

Display writes go to stdout; motor and sound activity is logged.
``delay`` really sleeps.  Sensor readings are fixed at construction.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import TextIO

from ._ports import motor_port, sensor_port

logger = logging.getLogger(__name__)


class ConsoleMotor:
    def __init__(self, port: str) -> None:
        self.port = port
        self.speed = 0
        self.tacho_count = 0

    def forward(self) -> None:
        logger.info("Motor %s forward at %d deg/s", self.port, self.speed)

    def backward(self) -> None:
        logger.info("Motor %s backward at %d deg/s", self.port, self.speed)

    def stop(self) -> None:
        logger.info("Motor %s stop", self.port)

    def set_speed(self, speed: int) -> None:
        self.speed = speed

    def rotate(self, degrees: int) -> None:
        self.tacho_count += degrees
        logger.info("Motor %s rotate %d deg at %d deg/s", self.port, degrees, self.speed)

    def speed_read(self) -> int:
        return self.speed

    def tacho_read(self) -> int:
        return self.tacho_count


class ConsoleSensor:
    def __init__(self, port: str, pressed: bool, distance: float, light: float) -> None:
        self.port = port
        self.pressed = pressed
        self.distance = distance
        self.light = light

    def digital_read(self) -> bool:
        return self.pressed

    def distance_read(self) -> float:
        return self.distance

    def light_read(self) -> float:
        return self.light


class ConsoleSound:
    def play_tone(self, frequency_hz: int, duration_ms: int) -> None:
        logger.info("Tone %d Hz for %d ms", frequency_hz, duration_ms)


class ConsoleDisplay:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def clear(self) -> None:
        pass

    def draw_text(self, text: str, row: int) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        print(f"[LCD {row}] {text}", file=stream, flush=True)


class ConsoleHardware:
    """Terminal brick.

    Parameters
    ----------
    pressed : dict[str, bool]
        Touch state per sensor port (default released).
    distances : dict[str, float]
        Ultrasonic reading per sensor port in cm (default 255, nothing seen).
    lights : dict[str, float]
        Light sensor reading per port in percent (default 0).
    stream
        Where display lines are printed (default stdout).
    """

    def __init__(
        self,
        pressed: dict[str, bool] | None = None,
        distances: dict[str, float] | None = None,
        lights: dict[str, float] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self._pressed = pressed or {}
        self._distances = distances or {}
        self._lights = lights or {}
        self._motors: dict[str, ConsoleMotor] = {}
        self._sensors: dict[str, ConsoleSensor] = {}
        self.sound = ConsoleSound()
        self.display = ConsoleDisplay(stream)

    def motor(self, port: str) -> ConsoleMotor:
        port = motor_port(port)
        if port not in self._motors:
            self._motors[port] = ConsoleMotor(port)
        return self._motors[port]

    def sensor(self, port: str) -> ConsoleSensor:
        port = sensor_port(port)
        if port not in self._sensors:
            self._sensors[port] = ConsoleSensor(
                port,
                pressed=self._pressed.get(port, False),
                distance=self._distances.get(port, 255.0),
                light=self._lights.get(port, 0.0),
            )
        return self._sensors[port]

    def delay(self, milliseconds: int) -> None:
        if milliseconds > 0:
            time.sleep(milliseconds / 1000)
