"""Shared test helpers for the nepo test suite."""

from xml.sax.saxutils import escape, quoteattr

from nepo.hardware import RecordingHardware
from nepo.interpret import ExecutionContext, run
from nepo.markup import parse_program
from nepo.model.blocks import Block

_CLOSE = "</block>"


def block(type_, *, fields=None, values=None, statements=None, id_=None):
    """Markup for a single block (no successor)."""
    attrs = f"type={quoteattr(type_)}"
    if id_ is not None:
        attrs += f" id={quoteattr(id_)}"
    parts = [f"<block {attrs}>"]
    for name, text in (fields or {}).items():
        parts.append(f"<field name={quoteattr(name)}>{escape(str(text))}</field>")
    for name, inner in (values or {}).items():
        parts.append(f"<value name={quoteattr(name)}>{inner}</value>")
    for name, inner in (statements or {}).items():
        parts.append(f"<statement name={quoteattr(name)}>{inner}</statement>")
    parts.append(_CLOSE)
    return "".join(parts)


def chain(*blocks):
    """Link blocks through ``<next>`` in the given order."""
    if not blocks:
        return ""
    head, rest = blocks[0], chain(*blocks[1:])
    if not rest:
        return head
    return head[: -len(_CLOSE)] + f"<next>{rest}</next>" + _CLOSE


def program(*statements, config=None):
    """A full ``block_set`` with a start block holding *statements*."""
    body = chain(*statements)
    start = block(
        "robControls_start",
        statements={"ST": body} if body else None,
    )
    config_xml = f"<config>{config}</config>" if config else ""
    return f"<block_set><instance x='0' y='0'>{start}</instance>{config_xml}</block_set>"


# -- value blocks ------------------------------------------------------------

def num(value):
    return block("math_number", fields={"NUM": value})


def text(value):
    return block("text", fields={"TEXT": value})


def boolean(value):
    return block("logic_boolean", fields={"BOOL": "TRUE" if value else "FALSE"})


def compare(op, a, b):
    return block("logic_compare", fields={"OP": op}, values={"A": a, "B": b})


def touch(port="1"):
    return block("robSensors_touch_isPressed", fields={"SENSORPORT": port})


def distance(port="4"):
    return block("robSensors_ultrasonic_distance", fields={"SENSORPORT": port})


# -- statement blocks --------------------------------------------------------

def display(value):
    return block("robActions_display_text", values={"OUT": value})


def wait(ms):
    return block("robControls_wait_time", values={"WAIT": num(ms)})


def tone(frequency, duration):
    return block(
        "robActions_play_tone",
        values={"FREQUENCY": num(frequency), "DURATION": num(duration)},
    )


def repeat(times, *body):
    return block(
        "robControls_repeat_times",
        values={"TIMES": times},
        statements={"DO": chain(*body)} if body else None,
    )


def if_(condition, *body):
    return block(
        "robControls_if",
        values={"IF0": condition},
        statements={"DO0": chain(*body)} if body else None,
    )


# -- running -----------------------------------------------------------------

def no_sleep(ms):
    pass


def make_context(**kwargs):
    kwargs.setdefault("sleep", no_sleep)
    return ExecutionContext(**kwargs)


def run_xml(xml, hw=None, context=None):
    """Parse and run *xml*; return ``(hardware, context)``."""
    hw = hw or RecordingHardware()
    ctx = run(parse_program(xml), hw, context=context or make_context())
    return hw, ctx


def value_block(xml):
    """Parse a lone block and return it as a ``Block`` view."""
    tree = parse_program(xml)
    return Block(tree, tree.root)
