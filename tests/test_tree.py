"""Tests for the program tree and the markup reader."""

import pytest

from conftest import block, chain, num, program

from nepo.errors import ProgramLoadError
from nepo.markup import load_program, parse_program
from nepo.model.blocks import Block, BlockKind
from nepo.model.tree import Node, ProgramTree, TreeBuilder


# ---------------------------------------------------------------------------
# TreeBuilder / ProgramTree
# ---------------------------------------------------------------------------

class TestTreeBuilder:
    def _tree(self):
        b = TreeBuilder()
        b.open("root")
        b.open("a", {"name": "first"})
        b.text("hello")
        b.close()
        b.open("b")
        b.open("a", {"name": "nested"})
        b.close()
        b.close()
        b.open("a", {"name": "second"})
        b.close()
        b.close()
        return b.build()

    def test_preorder_indices(self):
        tree = self._tree()
        assert [n.tag for n in tree.nodes] == ["root", "a", "b", "a", "a"]
        assert [n.index for n in tree.nodes] == [0, 1, 2, 3, 4]

    def test_parent_links(self):
        tree = self._tree()
        assert tree.root.parent is None
        assert tree.parent(tree.root) is None
        assert tree.node(3).parent == 2
        assert tree.parent(tree.node(3)).tag == "b"

    def test_child_first_match(self):
        tree = self._tree()
        assert tree.child(tree.root, "a").attribute("name") == "first"
        assert tree.child(tree.root, "missing") is None

    def test_children_document_order(self):
        tree = self._tree()
        names = [n.attribute("name") for n in tree.children(tree.root, "a")]
        assert names == ["first", "second"]

    def test_walk_preorder(self):
        tree = self._tree()
        assert [n.index for n in tree.walk()] == [0, 1, 2, 3, 4]
        assert [n.index for n in tree.walk(tree.node(2))] == [2, 3]

    def test_text_and_attributes(self):
        tree = self._tree()
        assert tree.node(1).text == "hello"
        assert tree.node(2).text == ""
        assert tree.node(2).attribute("name") is None

    def test_nodes_are_frozen(self):
        tree = self._tree()
        with pytest.raises(Exception):
            tree.root.tag = "other"

    def test_second_root_rejected(self):
        b = TreeBuilder()
        b.open("root")
        b.close()
        with pytest.raises(ValueError, match="exactly one root"):
            b.open("again")

    def test_unclosed_node_rejected(self):
        b = TreeBuilder()
        b.open("root")
        with pytest.raises(ValueError, match="left open"):
            b.build()


class TestProgramTreeValidation:
    def test_empty_tree_rejected(self):
        with pytest.raises(ValueError):
            ProgramTree(nodes=())

    def test_backward_child_rejected(self):
        with pytest.raises(ValueError, match="invalid child"):
            ProgramTree(nodes=(
                Node(index=0, tag="root", children=(0,)),
            ))

    def test_broken_parent_link_rejected(self):
        with pytest.raises(ValueError, match="point back"):
            ProgramTree(nodes=(
                Node(index=0, tag="root", children=(1,)),
                Node(index=1, tag="a", parent=None),
            ))


# ---------------------------------------------------------------------------
# Markup reader
# ---------------------------------------------------------------------------

class TestParseProgram:
    def test_simple_document(self):
        tree = parse_program("<block_set><instance/></block_set>")
        assert tree.root.tag == "block_set"
        assert tree.child(tree.root, "instance") is not None

    def test_namespaces_stripped(self):
        xml = (
            '<export xmlns="http://de.fhg.iais.roberta.blockly">'
            '<program><block_set><instance>'
            '<block type="robControls_start"/>'
            '</instance></block_set></program></export>'
        )
        tree = parse_program(xml)
        tags = {n.tag for n in tree.walk()}
        assert tags == {"export", "program", "block_set", "instance", "block"}

    def test_bytes_accepted(self):
        tree = parse_program(b"<root a='1'/>")
        assert tree.root.attribute("a") == "1"

    def test_malformed_raises(self):
        with pytest.raises(ProgramLoadError, match="Malformed"):
            parse_program("<block_set><instance></block_set>")

    def test_empty_raises(self):
        with pytest.raises(ProgramLoadError):
            parse_program("")


class TestLoadProgram:
    def test_load_file(self, tmp_path):
        path = tmp_path / "hello.xml"
        path.write_text(program(block("robActions_display_clear")))
        tree = load_program(path)
        assert tree.root.tag == "block_set"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProgramLoadError, match="Cannot read"):
            load_program(tmp_path / "nope.xml")

    def test_malformed_file_names_file(self, tmp_path):
        path = tmp_path / "broken.xml"
        path.write_text("<block_set>")
        with pytest.raises(ProgramLoadError, match="broken.xml"):
            load_program(path)


# ---------------------------------------------------------------------------
# Block view
# ---------------------------------------------------------------------------

class TestBlockView:
    def _block(self, xml):
        tree = parse_program(xml)
        return Block(tree, tree.root)

    def test_kind_known(self):
        b = self._block(num(3))
        assert b.kind is BlockKind.MATH_NUMBER
        assert b.type_name == "math_number"

    def test_kind_unknown(self):
        assert self._block(block("robActions_led_on")).kind is BlockKind.UNSUPPORTED

    def test_kind_missing_type(self):
        assert self._block("<block/>").kind is BlockKind.UNSUPPORTED

    def test_kind_sentinel_not_matchable(self):
        assert BlockKind.of("__unsupported__") is BlockKind.UNSUPPORTED

    def test_field(self):
        b = self._block(num("12.5"))
        assert b.field("NUM") == "12.5"
        assert b.field("OTHER") is None

    def test_value_slot(self):
        b = self._block(block("robControls_wait_time", values={"WAIT": num(5)}))
        assert b.value("WAIT").kind is BlockKind.MATH_NUMBER
        assert b.value("OTHER") is None

    def test_empty_value_slot(self):
        b = self._block('<block type="robControls_wait_time"><value name="WAIT"/></block>')
        assert b.value("WAIT") is None

    def test_statement_slot(self):
        b = self._block(block(
            "robControls_repeat_times",
            statements={"DO": block("robActions_display_clear")},
        ))
        assert b.statement("DO").kind is BlockKind.DISPLAY_CLEAR
        assert b.statement("ELSE") is None

    def test_next_chain(self):
        b = self._block(chain(
            block("robActions_display_clear"),
            block("robActions_motor_stop"),
        ))
        assert b.next.kind is BlockKind.MOTOR_STOP
        assert b.next.next is None

    def test_requires_block_node(self):
        tree = parse_program("<field/>")
        with pytest.raises(ValueError, match="expected a <block>"):
            Block(tree, tree.root)

    def test_equality_by_node(self):
        tree = parse_program(num(1))
        assert Block(tree, tree.root) == Block(tree, tree.root)
