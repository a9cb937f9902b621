"""Port validation shared by hardware implementations."""

from __future__ import annotations

from nepo.errors import HardwareError
from nepo.model.configuration import MOTOR_PORTS, SENSOR_PORTS


def motor_port(port: str) -> str:
    if port not in MOTOR_PORTS:
        raise HardwareError(f"No motor port {port!r}; expected one of {', '.join(MOTOR_PORTS)}")
    return port


def sensor_port(port: str) -> str:
    if port not in SENSOR_PORTS:
        raise HardwareError(f"No sensor port {port!r}; expected one of {', '.join(SENSOR_PORTS)}")
    return port
