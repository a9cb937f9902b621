"""NEPO XML → ``ProgramTree``."""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from nepo.errors import ProgramLoadError
from nepo.model.tree import ProgramTree, TreeBuilder

logger = logging.getLogger(__name__)


def _local_name(name: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix."""
    if name.startswith("{"):
        return name.rpartition("}")[2]
    return name


def parse_program(text: str | bytes) -> ProgramTree:
    """Parse NEPO XML markup into a program tree.

    Raises
    ------
    ProgramLoadError
        If the markup is not well-formed XML.
    """
    source = io.BytesIO(text.encode("utf-8") if isinstance(text, str) else text)
    builder = TreeBuilder()
    try:
        for event, elem in ET.iterparse(source, events=("start", "end")):
            if event == "start":
                builder.open(
                    _local_name(elem.tag),
                    {_local_name(k): v for k, v in elem.attrib.items()},
                )
            else:
                if elem.text:
                    builder.text(elem.text)
                builder.close()
    except ET.ParseError as exc:
        raise ProgramLoadError(f"Malformed program markup: {exc}") from exc

    tree = builder.build()
    logger.debug("Parsed program tree with %d nodes", len(tree.nodes))
    return tree


def load_program(path: str | Path) -> ProgramTree:
    """Read and parse a NEPO program file."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ProgramLoadError(f"Cannot read program {str(path)!r}: {exc}") from exc
    try:
        return parse_program(data)
    except ProgramLoadError as exc:
        raise ProgramLoadError(f"{path.name}: {exc}") from exc
