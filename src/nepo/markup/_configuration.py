"""Read the ``robBrick_`` configuration blocks of a program tree."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator

from pydantic import ValidationError

from nepo.model.blocks import BLOCK_TAG, Block
from nepo.model.configuration import (
    DriveSide,
    MotorConfig,
    RobotConfiguration,
    SensorConfig,
    SensorType,
)
from nepo.model.tree import Node, ProgramTree

logger = logging.getLogger(__name__)

CONFIG_TAG = "config"
BRICK_TYPE = "robBrick_EV3-Brick"

_MOTOR_TYPES = frozenset({"robBrick_motor_big", "robBrick_motor_medium"})

_SENSOR_TYPES: dict[str, SensorType] = {
    "robBrick_touch": SensorType.TOUCH,
    "robBrick_ultrasonic": SensorType.ULTRASONIC,
    "robBrick_light": SensorType.LIGHT,
    "robBrick_sound": SensorType.SOUND,
    "robBrick_gyro": SensorType.GYRO,
    "robBrick_color": SensorType.COLOR,
}


def read_configuration(tree: ProgramTree) -> RobotConfiguration | None:
    """Build the robot configuration declared by the program.

    Returns None when the program has no ``config`` section.  Without a
    brick block, device blocks anywhere in the section are read from the
    ``M<port>``/``S<port>`` slot that holds them; when none are found the
    result is None too, so no motor is gated.
    """
    config_node = next((n for n in tree.walk() if n.tag == CONFIG_TAG), None)
    if config_node is None:
        return None

    brick = _find_brick(tree, config_node)
    motors: dict[str, MotorConfig] = {}
    sensors: dict[str, SensorConfig] = {}
    if brick is not None:
        for slot in tree.children(brick.node, "value"):
            inner = tree.child(slot, BLOCK_TAG)
            if inner is not None:
                _register(slot.attribute("name") or "", Block(tree, inner), motors, sensors)
        return RobotConfiguration(
            wheel_diameter=_float_field(brick, "WHEEL_DIAMETER", 5.6),
            track_width=_float_field(brick, "TRACK_WIDTH", 12.0),
            motors=motors,
            sensors=sensors,
        )

    for node in _breadth_first(tree, config_node):
        device = node.attribute("type") if node.tag == BLOCK_TAG else None
        if device not in _MOTOR_TYPES and device not in _SENSOR_TYPES:
            continue
        slot = tree.parent(node)
        if slot is None or slot.tag != "value":
            logger.warning("Ignoring %s outside a port slot", device)
            continue
        _register(slot.attribute("name") or "", Block(tree, node), motors, sensors)

    if not motors and not sensors:
        logger.warning("Config section declares no devices; ports are not gated")
        return None
    logger.warning("Config section has no %s block; using the devices found", BRICK_TYPE)
    return RobotConfiguration(motors=motors, sensors=sensors)


def _breadth_first(tree: ProgramTree, start: Node) -> Iterator[Node]:
    queue = deque([start])
    while queue:
        node = queue.popleft()
        yield node
        queue.extend(tree.all_children(node))


def _find_brick(tree: ProgramTree, start: Node) -> Block | None:
    """Breadth-first search for the brick block below *start*."""
    for node in _breadth_first(tree, start):
        if node.tag == BLOCK_TAG and node.attribute("type") == BRICK_TYPE:
            return Block(tree, node)
    return None


def _register(
    slot_name: str,
    device: Block,
    motors: dict[str, MotorConfig],
    sensors: dict[str, SensorConfig],
) -> None:
    """Record *device* under the port its ``M<port>``/``S<port>`` slot names."""
    if len(slot_name) < 2:
        return
    port = slot_name[1:]
    try:
        if slot_name.startswith("M") and device.type_name in _MOTOR_TYPES:
            motors[port] = _motor_config(device, port)
        elif slot_name.startswith("S") and device.type_name in _SENSOR_TYPES:
            sensors[port] = SensorConfig(
                port=port, sensor_type=_SENSOR_TYPES[device.type_name],
            )
    except ValidationError as exc:
        logger.warning("Ignoring %s on slot %s: %s", device.type_name, slot_name, exc)


def _motor_config(device: Block, port: str) -> MotorConfig:
    drive = device.field("MOTOR_DRIVE")
    return MotorConfig(
        port=port,
        regulation=device.field("MOTOR_REGULATION") != "FALSE",
        reverse=device.field("MOTOR_REVERSE") == "ON",
        drive=DriveSide(drive) if drive in DriveSide.__members__ else DriveSide.NONE,
    )


def _float_field(block: Block, name: str, default: float) -> float:
    text = block.field(name)
    if text is None:
        return default
    try:
        value = float(text)
    except ValueError:
        return default
    return value if value > 0 else default
