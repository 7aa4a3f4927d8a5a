import pytest

from basmkit.linizer import Line, LineKind, Linizer
from basmkit.location import BasmError, FileLocation


SOURCE = "push 1 ; comment\n\n   loop:\n%const N = 10\n; only comment\nhalt"


def test_lines_are_classified():
    lines = list(Linizer(SOURCE, "prog.basm"))
    assert [line.kind for line in lines] == [
        LineKind.INSTRUCTION,
        LineKind.LABEL,
        LineKind.DIRECTIVE,
        LineKind.INSTRUCTION,
    ]
    assert lines[0].name == "push"
    assert lines[0].operand == "1"
    assert lines[1].name == "loop"
    assert lines[2].name == "const"
    assert lines[2].body == "N = 10"
    assert lines[3].name == "halt"
    assert lines[3].operand == ""


def test_line_numbers_skip_blank_and_comment_lines():
    lines = list(Linizer(SOURCE, "prog.basm"))
    assert [line.location.line_number for line in lines] == [1, 3, 4, 6]
    assert all(line.location.file_path == "prog.basm" for line in lines)


def test_peek_does_not_consume():
    linizer = Linizer("nop\nhalt\n")
    first = linizer.peek()
    assert linizer.peek() == first
    assert linizer.next() == first
    assert linizer.next().name == "halt"
    assert linizer.next() is None
    assert linizer.peek() is None


def test_empty_source_has_no_lines():
    assert list(Linizer("")) == []
    assert list(Linizer("\n\n ; nothing\n")) == []


def test_directive_takes_precedence_over_label():
    line = Linizer("%entry main:").next()
    assert line.kind is LineKind.DIRECTIVE
    assert line.name == "entry"
    assert line.body == "main:"


def test_label_name_stops_at_first_colon():
    line = Linizer("a:b:").next()
    assert line.kind is LineKind.LABEL
    assert line.name == "a"


def test_dump_formats():
    linizer = Linizer("push 1\nloop:\n%include \"x\"", "f.basm")
    dumps = [line.dump() for line in linizer]
    assert dumps == [
        "f.basm:1: INSTRUCTION: name: push, operand: 1",
        "f.basm:2: LABEL: name: loop",
        'f.basm:3: DIRECTIVE: name: include, body: "x"',
    ]


def test_expect_no_lines_passes_on_exhausted():
    linizer = Linizer("nop")
    assert linizer.next().name == "nop"
    linizer.expect_no_lines()
    assert linizer.next() is None


def test_expect_no_lines_raises():
    linizer = Linizer("nop\nloop:", "f.basm")
    linizer.next()
    with pytest.raises(BasmError) as info:
        linizer.expect_no_lines()
    assert info.value.message == "unexpected label line"
    assert info.value.location == FileLocation("f.basm", 2)


def test_from_file(tmp_path):
    path = tmp_path / "prog.basm"
    path.write_text("push 2\nhalt\n", encoding="utf-8")
    linizer = Linizer.from_file(path)
    lines = list(linizer)
    assert [line.name for line in lines] == ["push", "halt"]
    assert lines[0].location.file_path == str(path)


def test_from_file_missing(tmp_path):
    with pytest.raises(OSError):
        Linizer.from_file(tmp_path / "missing.basm")


def test_line_kind_string():
    assert str(LineKind.DIRECTIVE) == "directive"
    assert Line(LineKind.LABEL, "x").body == ""