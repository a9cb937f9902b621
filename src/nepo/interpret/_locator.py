"""Find the program's entry block."""

from __future__ import annotations

from nepo.model.blocks import BLOCK_TAG, Block, BlockKind
from nepo.model.tree import Node, ProgramTree

INSTANCE_TAG = "instance"


def _is_start(node: Node | None) -> bool:
    return (
        node is not None
        and node.tag == BLOCK_TAG
        and node.attribute("type") == BlockKind.START.value
    )


def locate(tree: ProgramTree) -> Block | None:
    """Return the ``robControls_start`` block, or None.

    The conventional layout puts it at ``instance/block`` under the root.
    Otherwise the first start block in document (pre-)order wins.
    """
    instance = tree.child(tree.root, INSTANCE_TAG)
    if instance is not None:
        candidate = tree.child(instance, BLOCK_TAG)
        if _is_start(candidate):
            return Block(tree, candidate)

    for node in tree.walk():
        if _is_start(node):
            return Block(tree, node)
    return None
