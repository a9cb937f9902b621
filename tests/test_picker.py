"""Tests for interactive program selection."""

from nepo.picker import list_programs, select_program


def answers(*replies):
    """Fake ``input``: serves *replies* in order, then end of input."""
    queue = list(replies)

    def prompt(_message):
        if not queue:
            raise EOFError
        return queue.pop(0)

    return prompt


def _programs(tmp_path, *names):
    for name in names:
        (tmp_path / name).write_text("<block_set/>")
    return tmp_path


class TestListPrograms:
    def test_sorted_xml_only(self, tmp_path):
        _programs(tmp_path, "b.xml", "A.XML", "notes.txt", "c.xml")
        (tmp_path / "dir.xml").mkdir()
        assert [p.name for p in list_programs(tmp_path)] == ["A.XML", "b.xml", "c.xml"]

    def test_missing_directory(self, tmp_path):
        assert list_programs(tmp_path / "nope") == []


class TestSelectProgram:
    def test_pick_by_number(self, tmp_path):
        _programs(tmp_path, "drive.xml", "hello.xml")
        out = []
        chosen = select_program(tmp_path, prompt=answers("2"), out=out.append)
        assert chosen == tmp_path / "hello.xml"
        assert out[0] == "Select NEPO program:"
        assert "  1) drive.xml" in out

    def test_invalid_then_valid(self, tmp_path):
        _programs(tmp_path, "hello.xml")
        out = []
        chosen = select_program(tmp_path, prompt=answers("7", "x", "1"), out=out.append)
        assert chosen == tmp_path / "hello.xml"
        assert out.count("Not a choice: '7'") == 1
        assert out.count("Not a choice: 'x'") == 1

    def test_cancel(self, tmp_path):
        _programs(tmp_path, "hello.xml")
        assert select_program(tmp_path, prompt=answers("q"), out=lambda s: None) is None
        assert select_program(tmp_path, prompt=answers(""), out=lambda s: None) is None

    def test_end_of_input(self, tmp_path):
        _programs(tmp_path, "hello.xml")
        assert select_program(tmp_path, prompt=answers(), out=lambda s: None) is None

    def test_nothing_to_pick(self, tmp_path):
        out = []
        prompt = answers("1")
        assert select_program(tmp_path, prompt=prompt, out=out.append) is None
        assert out[0].startswith("No .xml programs")
