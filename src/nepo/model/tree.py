"""Program tree: an immutable arena of markup nodes.

Nodes are stored in document pre-order and addressed by their index in
``ProgramTree.nodes``.  Parent/child relations are stored as indices, so
walking the tree never follows object references and the markup cannot
introduce cycles.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, model_validator


class Node(BaseModel):
    """A single markup element."""

    model_config = ConfigDict(frozen=True)

    index: int
    tag: str
    attributes: dict[str, str] = {}
    children: tuple[int, ...] = ()
    parent: int | None = None
    text: str = ""

    def attribute(self, name: str) -> str | None:
        return self.attributes.get(name)


class ProgramTree(BaseModel):
    """Immutable node arena with the root at index 0."""

    model_config = ConfigDict(frozen=True)

    nodes: tuple[Node, ...]

    @model_validator(mode="after")
    def _check_links(self):
        if not self.nodes:
            raise ValueError("a program tree needs at least a root node")
        for position, node in enumerate(self.nodes):
            if node.index != position:
                raise ValueError(
                    f"node at position {position} carries index {node.index}"
                )
            for child in node.children:
                # Children always follow their parent in pre-order.
                if child <= position or child >= len(self.nodes):
                    raise ValueError(
                        f"node {position} has invalid child index {child}"
                    )
                if self.nodes[child].parent != position:
                    raise ValueError(
                        f"node {child} does not point back to parent {position}"
                    )
        return self

    # -----------------------------------------------------------------------
    # Navigation
    # -----------------------------------------------------------------------

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def node(self, index: int) -> Node:
        return self.nodes[index]

    def all_children(self, node: Node) -> list[Node]:
        return [self.nodes[i] for i in node.children]

    def children(self, node: Node, tag: str) -> list[Node]:
        """All children of *node* with the given tag, in document order."""
        return [self.nodes[i] for i in node.children if self.nodes[i].tag == tag]

    def child(self, node: Node, tag: str) -> Node | None:
        """First child of *node* with the given tag."""
        for i in node.children:
            if self.nodes[i].tag == tag:
                return self.nodes[i]
        return None

    def parent(self, node: Node) -> Node | None:
        if node.parent is None:
            return None
        return self.nodes[node.parent]

    def walk(self, node: Node | None = None) -> Iterator[Node]:
        """Pre-order depth-first traversal starting at *node* (default root)."""
        start = self.root if node is None else node
        stack = [start.index]
        while stack:
            current = self.nodes[stack.pop()]
            yield current
            stack.extend(reversed(current.children))


class TreeBuilder:
    """Incrementally assembles a ``ProgramTree`` in document order.

    ``open()`` appends a node as a child of the currently open node;
    ``close()`` finishes it.  Text may be set while a node is open.
    """

    def __init__(self) -> None:
        self._records: list[dict] = []
        self._stack: list[int] = []

    def open(self, tag: str, attributes: dict[str, str] | None = None) -> int:
        index = len(self._records)
        parent = self._stack[-1] if self._stack else None
        if parent is None and self._records:
            raise ValueError("a program tree has exactly one root")
        self._records.append({
            "index": index,
            "tag": tag,
            "attributes": dict(attributes or {}),
            "children": [],
            "parent": parent,
            "text": "",
        })
        if parent is not None:
            self._records[parent]["children"].append(index)
        self._stack.append(index)
        return index

    def text(self, value: str) -> None:
        if not self._stack:
            raise ValueError("no open node to attach text to")
        self._records[self._stack[-1]]["text"] = value

    def close(self) -> None:
        if not self._stack:
            raise ValueError("close() without a matching open()")
        self._stack.pop()

    def build(self) -> ProgramTree:
        if self._stack:
            raise ValueError(f"{len(self._stack)} node(s) left open")
        return ProgramTree(nodes=tuple(
            Node(
                index=r["index"],
                tag=r["tag"],
                attributes=r["attributes"],
                children=tuple(r["children"]),
                parent=r["parent"],
                text=r["text"],
            )
            for r in self._records
        ))
