"""Typed view over ``block`` nodes of a program tree.

Every NEPO block type the interpreter understands is a member of the
closed ``BlockKind`` enumeration.  Markup naming any other type (or no
type at all) maps to ``BlockKind.UNSUPPORTED``.
"""

from __future__ import annotations

from enum import Enum

from .tree import Node, ProgramTree

BLOCK_TAG = "block"
FIELD_TAG = "field"
VALUE_TAG = "value"
STATEMENT_TAG = "statement"
NEXT_TAG = "next"


class BlockKind(str, Enum):
    # Control
    START = "robControls_start"
    IF = "robControls_if"
    IF_ELSE = "robControls_ifElse"
    REPEAT_TIMES = "robControls_repeat_times"
    WAIT_TIME = "robControls_wait_time"
    WAIT = "robControls_wait"
    WAIT_UNTIL = "robControls_waitUntil"

    # Actions
    DISPLAY_TEXT = "robActions_display_text"
    DISPLAY_CLEAR = "robActions_display_clear"
    MOTOR_ON = "robActions_motor_on"
    MOTOR_STOP = "robActions_motor_stop"
    MOTOR_SET_SPEED = "robActions_motor_setSpeed"
    MOTOR_DIFF_ON = "robActions_motorDiff_on"
    MOTOR_DIFF_TURN_FOR = "robActions_motorDiff_turn_for"
    PLAY_TONE = "robActions_play_tone"
    MOTOR_GET_POWER = "robActions_motor_getPower"

    # Variables
    VARIABLES_SET = "variables_set"
    VARIABLES_GET = "variables_get"

    # Sensors
    TOUCH_IS_PRESSED = "robSensors_touch_isPressed"
    TOUCH_GET_SAMPLE = "robSensors_touch_getSample"
    ULTRASONIC_DISTANCE = "robSensors_ultrasonic_distance"
    LIGHT_GET_SAMPLE = "robSensors_light_getSample"
    ENCODER_ROTATION = "robSensors_encoder_rotation"
    TIMER_GET = "robSensors_timer_get"

    # Literals and operators
    MATH_NUMBER = "math_number"
    TEXT = "text"
    LOGIC_BOOLEAN = "logic_boolean"
    LOGIC_COMPARE = "logic_compare"
    LOGIC_OPERATION = "logic_operation"
    LOGIC_NEGATE = "logic_negate"
    MATH_ARITHMETIC = "math_arithmetic"
    MATH_SINGLE = "math_single"
    MATH_RANDOM_INT = "math_random_int"
    TEXT_JOIN = "text_join"

    UNSUPPORTED = "__unsupported__"

    @classmethod
    def of(cls, type_name: str | None) -> BlockKind:
        """Map a markup ``type`` attribute to its kind."""
        if type_name is None or type_name == cls.UNSUPPORTED.value:
            return cls.UNSUPPORTED
        try:
            return cls(type_name)
        except ValueError:
            return cls.UNSUPPORTED


VALUE_KINDS = frozenset({
    BlockKind.VARIABLES_GET,
    BlockKind.TOUCH_IS_PRESSED,
    BlockKind.TOUCH_GET_SAMPLE,
    BlockKind.ULTRASONIC_DISTANCE,
    BlockKind.LIGHT_GET_SAMPLE,
    BlockKind.ENCODER_ROTATION,
    BlockKind.TIMER_GET,
    BlockKind.MOTOR_GET_POWER,
    BlockKind.MATH_NUMBER,
    BlockKind.TEXT,
    BlockKind.LOGIC_BOOLEAN,
    BlockKind.LOGIC_COMPARE,
    BlockKind.LOGIC_OPERATION,
    BlockKind.LOGIC_NEGATE,
    BlockKind.MATH_ARITHMETIC,
    BlockKind.MATH_SINGLE,
    BlockKind.MATH_RANDOM_INT,
    BlockKind.TEXT_JOIN,
})
"""Kinds that produce a value and have no effect in statement position."""


class Block:
    """A ``block`` node together with the tree it lives in.

    Provides field, value-slot, statement-slot and successor lookup.
    Slot lookups return ``None`` when the slot or its nested block is
    missing.
    """

    __slots__ = ("tree", "node")

    def __init__(self, tree: ProgramTree, node: Node) -> None:
        if node.tag != BLOCK_TAG:
            raise ValueError(f"expected a <{BLOCK_TAG}> node, got <{node.tag}>")
        self.tree = tree
        self.node = node

    def __repr__(self) -> str:
        return f"Block({self.type_name!r}, index={self.node.index})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Block):
            return NotImplemented
        return self.tree is other.tree and self.node.index == other.node.index

    def __hash__(self) -> int:
        return hash((id(self.tree), self.node.index))

    @property
    def type_name(self) -> str | None:
        return self.node.attribute("type")

    @property
    def kind(self) -> BlockKind:
        return BlockKind.of(self.type_name)

    @property
    def id(self) -> str | None:
        return self.node.attribute("id")

    def field(self, name: str) -> str | None:
        """Text of the ``<field name=...>`` child, or None."""
        for field in self.tree.children(self.node, FIELD_TAG):
            if field.attribute("name") == name:
                return field.text
        return None

    def value(self, name: str) -> Block | None:
        """Block plugged into the ``<value name=...>`` slot."""
        return self._slot(VALUE_TAG, name)

    def statement(self, name: str) -> Block | None:
        """First block of the chain in the ``<statement name=...>`` slot."""
        return self._slot(STATEMENT_TAG, name)

    @property
    def next(self) -> Block | None:
        link = self.tree.child(self.node, NEXT_TAG)
        if link is None:
            return None
        return self._block_in(link)

    def _slot(self, tag: str, name: str) -> Block | None:
        for slot in self.tree.children(self.node, tag):
            if slot.attribute("name") == name:
                return self._block_in(slot)
        return None

    def _block_in(self, holder: Node) -> Block | None:
        inner = self.tree.child(holder, BLOCK_TAG)
        if inner is None:
            return None
        return Block(self.tree, inner)
