"""Hardware capability layer.

Public API::

    from nepo.hardware import ConsoleHardware, RecordingHardware

    hw = RecordingHardware()
    hw.sensor("4").script(distance=[80.0, 40.0, 12.0])
"""

from ._console import ConsoleHardware
from ._protocols import Display, Hardware, Motor, Sensor, Sound
from ._recording import Effect, RecordingHardware

__all__ = [
    "ConsoleHardware",
    "Display",
    "Effect",
    "Hardware",
    "Motor",
    "RecordingHardware",
    "Sensor",
    "Sound",
]
