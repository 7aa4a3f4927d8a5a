import pytest

from basmkit.expr import BinaryOp, BinaryOpKind, Binding, Funcall, LitInt, LitStr
from basmkit.linizer import Linizer
from basmkit.location import BasmError, FileLocation
from basmkit.parser import Parser, parse_source
from basmkit.statement import (
    Assert,
    Const,
    EmitInst,
    Entry,
    Error,
    For,
    Fundef,
    If,
    Include,
    InstDef,
    Label,
    Macrocall,
    Macrodef,
    Native,
    Scope,
)

PUSH = InstDef("push", True)
HALT = InstDef("halt", False)
INSTS = {"push": PUSH, "halt": HALT}
PATH = "t.basm"


def loc(n):
    return FileLocation(PATH, n)


def parse(text):
    return parse_source(text, PATH, INSTS)


def test_instructions_with_and_without_operand():
    result = parse("push 1\nhalt\n")
    assert result == (EmitInst(PUSH, LitInt(1), loc(1)), EmitInst(HALT, None, loc(2)))


def test_comments_and_blank_lines_are_skipped():
    result = parse("; header\n\n  push 2 ; two\n")
    assert result == (EmitInst(PUSH, LitInt(2), loc(3)),)


def test_unknown_instruction():
    with pytest.raises(BasmError) as info:
        parse("jump 1")
    assert info.value.message == "unknown instruction `jump`"
    assert info.value.location == loc(1)


def test_label():
    assert parse("loop:\nhalt") == (Label("loop", loc(1)), EmitInst(HALT, None, loc(2)))


def test_label_must_be_binding():
    with pytest.raises(BasmError):
        parse("1:")


def test_const():
    result = parse("%const N = 1 + 2")
    assert result == (Const("N", BinaryOp(BinaryOpKind.PLUS, LitInt(1), LitInt(2)), loc(1)),)


def test_const_requires_binding_name():
    with pytest.raises(BasmError):
        parse("%const 3 = 4")


def test_native():
    assert parse("%native write") == (Native("write", loc(1)),)


def test_include():
    assert parse('%include "lib.hasm"') == (Include("lib.hasm", loc(1)),)


def test_include_requires_string():
    with pytest.raises(BasmError):
        parse("%include lib")


def test_assert():
    result = parse("%assert N == 3")
    assert result == (Assert(BinaryOp(BinaryOpKind.EQUALS, Binding("N"), LitInt(3)), loc(1)),)


def test_entry_plain():
    assert parse("%entry main") == (Entry(Binding("main"), loc(1)),)


def test_entry_inline_adds_label():
    assert parse("%entry main:") == (Entry(Binding("main"), loc(1)), Label("main", loc(1)))


def test_error_directive():
    assert parse('%error "boom"') == (Error("boom", loc(1)),)


def test_if_else():
    result = parse("%if X\npush 1\n%else\npush 2\n%end")
    assert result == (
        If(Binding("X"),
           (EmitInst(PUSH, LitInt(1), loc(2)),),
           (EmitInst(PUSH, LitInt(2), loc(4)),),
           loc(1)),
    )


def test_if_without_else():
    result = parse("%if X\nhalt\n%end")
    assert result == (If(Binding("X"), (EmitInst(HALT, None, loc(2)),), (), loc(1)),)


def test_elif_chain_nests_if():
    (stmt,) = parse("%if A\nhalt\n%elif B\npush 1\n%end")
    assert stmt.condition == Binding("A")
    assert stmt.elze == (If(Binding("B"), (EmitInst(PUSH, LitInt(1), loc(4)),), (), loc(3)),)


def test_if_missing_end():
    with pytest.raises(BasmError):
        parse("%if X\nhalt\n")


def test_else_missing_end():
    with pytest.raises(BasmError):
        parse("%if X\nhalt\n%else\nhalt\n")


def test_scope():
    assert parse("%scope\nhalt\n%end") == (Scope((EmitInst(HALT, None, loc(2)),), loc(1)),)


def test_scope_missing_end():
    with pytest.raises(BasmError):
        parse("%scope\nhalt")


def test_for():
    result = parse("%for i from 0 to 3\npush i\n%end")
    assert result == (
        For("i", LitInt(0), LitInt(3), (EmitInst(PUSH, Binding("i"), loc(2)),), loc(1)),
    )


def test_for_missing_to():
    with pytest.raises(BasmError):
        parse("%for i from 0\n%end")


def test_func_with_guard():
    (stmt,) = parse("%func f(x) if x > 0 = x * 2")
    assert stmt == Fundef(
        "f", ("x",),
        BinaryOp(BinaryOpKind.MULT, Binding("x"), LitInt(2)),
        BinaryOp(BinaryOpKind.GT, Binding("x"), LitInt(0)),
        loc(1),
    )


def test_func_without_guard():
    (stmt,) = parse("%func g() = 1")
    assert stmt.args == () and stmt.guard is None and stmt.body == LitInt(1)


def test_func_without_body():
    with pytest.raises(BasmError):
        parse("%func f(x)")


def test_macro_definition():
    result = parse("%macro m(a, b)\npush a\n%end")
    assert result == (Macrodef("m", ("a", "b"), (EmitInst(PUSH, Binding("a"), loc(2)),), loc(1)),)


def test_macro_call():
    result = parse("%m(1, f(2))")
    assert result == (Macrocall("m", (LitInt(1), Funcall("f", (LitInt(2),))), loc(1)),)


def test_unknown_directive():
    with pytest.raises(BasmError) as info:
        parse("%bogus 1")
    assert info.value.message == "unknown directive `bogus`"


def test_stray_end_is_rejected():
    with pytest.raises(BasmError):
        parse("halt\n%end")


def test_parser_parse_directive_appends_to_output():
    parser = Parser(Linizer("%native write\nhalt", PATH), INSTS)
    output = []
    parser.parse_directive(output)
    assert output == [Native("write", loc(1))]
    assert parser.parse_block() == (EmitInst(HALT, None, loc(2)),)


def test_parser_parse_directive_rejects_non_directive():
    parser = Parser(Linizer("halt", PATH), INSTS)
    with pytest.raises(BasmError):
        parser.parse_directive([])


def test_parser_block_stops_at_end():
    linizer = Linizer("halt\n%end\npush 1", PATH)
    parser = Parser(linizer, INSTS)
    assert parser.parse_block() == (EmitInst(HALT, None, loc(1)),)
    assert linizer.next().name == "end"


def test_parse_if_else_body_direct():
    parser = Parser(Linizer("halt\n%end", PATH), INSTS)
    result = parser.parse_if_else_body(LitStr("c"), loc(0))
    assert result == If(LitStr("c"), (EmitInst(HALT, None, loc(1)),), (), loc(0))