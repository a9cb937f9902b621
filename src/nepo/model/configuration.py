"""Robot hardware configuration declared by a program's ``config`` section.

Which motor and sensor ports are in use, plus the drive geometry.  The
interpreter consults it to skip commands for motors the program never
declared and to flip the direction of motors marked ``reverse``.

The remaining fields (motor regulation and drive side, sensor types, wheel
diameter, track width) are informational: they are read and validated but
do not change how blocks execute.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

MOTOR_PORTS = ("A", "B", "C")
SENSOR_PORTS = ("1", "2", "3", "4")


class DriveSide(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    NONE = "NONE"


class SensorType(str, Enum):
    TOUCH = "touch"
    ULTRASONIC = "ultrasonic"
    LIGHT = "light"
    SOUND = "sound"
    GYRO = "gyro"
    COLOR = "color"
    UNKNOWN = "unknown"


class MotorConfig(BaseModel):
    port: str
    regulation: bool = True
    reverse: bool = False
    drive: DriveSide = DriveSide.NONE

    @field_validator("port")
    @classmethod
    def _check_port(cls, v: str) -> str:
        if v not in MOTOR_PORTS:
            raise ValueError(f"motor port must be one of {MOTOR_PORTS}, got {v!r}")
        return v


class SensorConfig(BaseModel):
    port: str
    sensor_type: SensorType = SensorType.UNKNOWN

    @field_validator("port")
    @classmethod
    def _check_port(cls, v: str) -> str:
        if v not in SENSOR_PORTS:
            raise ValueError(f"sensor port must be one of {SENSOR_PORTS}, got {v!r}")
        return v


class RobotConfiguration(BaseModel):
    wheel_diameter: float = Field(default=5.6, gt=0)
    track_width: float = Field(default=12.0, gt=0)
    motors: dict[str, MotorConfig] = {}
    sensors: dict[str, SensorConfig] = {}

    @model_validator(mode="after")
    def _keys_match_ports(self):
        for key, motor in self.motors.items():
            if key != motor.port:
                raise ValueError(f"motor registered under {key!r} but configured for {motor.port!r}")
        for key, sensor in self.sensors.items():
            if key != sensor.port:
                raise ValueError(f"sensor registered under {key!r} but configured for {sensor.port!r}")
        return self

    def has_motor(self, port: str) -> bool:
        return port in self.motors

    def sensor_type(self, port: str) -> SensorType | None:
        sensor = self.sensors.get(port)
        return sensor.sensor_type if sensor is not None else None
