"""Statements of the assembler and their text and dot dumps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from .expr import (
    DotGraph,
    Expr,
    dump_expr,
    expr_to_dot_edges,
    funcall_args_to_dot_edges,
    fundef_args_to_dot_edges,
)
from .location import FileLocation


@dataclass(frozen=True)
class InstDef:
    """What the assembler knows about one instruction."""

    name: str
    has_operand: bool = False


@dataclass(frozen=True)
class EmitInst:
    inst: InstDef
    operand: Optional[Expr] = None
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Label:
    name: str
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Const:
    name: str
    value: Expr
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Native:
    name: str
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Include:
    path: str
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Assert:
    condition: Expr
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Error:
    message: str
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Entry:
    value: Expr
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Block:
    statements: tuple = ()
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class If:
    """A conditional; an ``%elif`` chain is an If alone in the else block."""

    condition: Expr
    then: tuple = ()
    elze: tuple = ()
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Scope:
    statements: tuple = ()
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class For:
    var: str
    start: Expr
    end: Expr
    body: tuple = ()
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Fundef:
    name: str
    args: tuple
    body: Expr
    guard: Optional[Expr] = None
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Macrocall:
    name: str
    args: tuple = ()
    location: FileLocation = field(default_factory=FileLocation)


@dataclass(frozen=True)
class Macrodef:
    name: str
    args: tuple = ()
    body: tuple = ()
    location: FileLocation = field(default_factory=FileLocation)


Statement = Union[EmitInst, Label, Const, Native, Include, Assert, Error,
                  Entry, Block, If, Scope, For, Fundef, Macrocall, Macrodef]


def _pad(level: int) -> str:
    return " " * (level * 2)


def dump_block(statements: Iterable[Statement], level: int = 0) -> str:
    """An indented description of a block of statements."""
    parts = [f"{_pad(level)}Block:\n"]
    parts.extend(dump_statement(statement, level + 1) for statement in statements)
    return "".join(parts)


def dump_statement(statement: Statement, level: int = 0) -> str:
    """An indented, multi-line description of a statement."""
    pad, inner = _pad(level), _pad(level + 1)

    if isinstance(statement, EmitInst):
        operand = (dump_expr(statement.operand, level + 2)
                   if statement.operand is not None else "")
        return (f"{pad}Emit_Inst:\n"
                f"{inner}Inst_Type: {statement.inst.name}\n"
                f"{inner}Operand:\n{operand}")
    if isinstance(statement, Label):
        return f"{pad}Label:\n{inner}{statement.name}\n"
    if isinstance(statement, Const):
        return (f"{pad}Const:\n{inner}Name: {statement.name}\n"
                f"{inner}Value:\n{dump_expr(statement.value, level + 2)}")
    if isinstance(statement, Native):
        return f"{pad}Native:\n{inner}{statement.name}\n"
    if isinstance(statement, Include):
        return f"{pad}Include:\n{inner}{statement.path}\n"
    if isinstance(statement, Assert):
        return f"{pad}Assert:\n{dump_expr(statement.condition, level + 1)}"
    if isinstance(statement, Error):
        return f"{pad}Error: {statement.message}\n"
    if isinstance(statement, Entry):
        return f"{pad}Entry:\n{dump_expr(statement.value, level + 1)}"
    if isinstance(statement, Block):
        return dump_block(statement.statements, level)
    if isinstance(statement, If):
        return (f"{pad}If:\n"
                f"{inner}Condition:\n{dump_expr(statement.condition, level + 2)}"
                f"{inner}Then:\n{dump_block(statement.then, level + 2)}"
                f"{inner}Else:\n{dump_block(statement.elze, level + 2)}")
    if isinstance(statement, Scope):
        return f"{pad}Scope:\n{dump_block(statement.statements, level + 1)}"
    if isinstance(statement, For):
        return (f"{pad}For\n"
                f"{inner}Var: {statement.var}\n"
                f"{inner}From:\n{dump_expr(statement.start, level + 2)}"
                f"{inner}To:\n{dump_expr(statement.end, level + 2)}")
    if isinstance(statement, Fundef):
        args = "".join(f"{_pad(level + 2)}{name}\n" for name in statement.args)
        guard = ""
        if statement.guard is not None:
            guard = f"{inner}Guard:\n{dump_expr(statement.guard, level + 2)}"
        return (f"{pad}Fundef:\n{inner}Name: {statement.name}\n"
                f"{inner}Args:\n{args}{guard}"
                f"{inner}Body:\n{dump_expr(statement.body, level + 2)}")
    if isinstance(statement, Macrocall):
        args = "".join(f"{inner}Arg:\n{dump_expr(arg, level + 2)}"
                       for arg in statement.args)
        return f"{pad}Macrocall: {statement.name}\n{args}"
    if isinstance(statement, Macrodef):
        args = "".join(f"{_pad(level + 2)}{name}\n" for name in statement.args)
        return (f"{pad}Macrodef: {statement.name}\n{inner}Args:\n{args}"
                f"{dump_block(statement.body, level + 1)}")
    raise TypeError(f"not a statement: {statement!r}")


def block_to_dot_edges(graph: DotGraph, statements: Iterable[Statement]) -> int:
    """Add a block node chained to its statements in order; return its id."""
    node_id = graph.node("box", "Block")
    previous = node_id
    for statement in statements:
        current = statement_to_dot_edges(graph, statement)
        graph.edge(previous, current)
        previous = current
    return node_id


def _labelled_child(graph: DotGraph, parent: int, label: str) -> int:
    child = graph.node("box", label)
    graph.edge(parent, child)
    return child


def statement_to_dot_edges(graph: DotGraph, statement: Statement) -> int:
    """Add the nodes of a statement; return the id of its root."""
    if isinstance(statement, EmitInst):
        node_id = graph.node("box", statement.inst.name)
        if statement.inst.has_operand and statement.operand is not None:
            graph.edge(node_id, expr_to_dot_edges(graph, statement.operand), "dotted")
        return node_id
    if isinstance(statement, Label):
        return graph.node("diamond", f"Label: {statement.name}")
    if isinstance(statement, Const):
        node_id = graph.node("diamond", f"%const {statement.name}")
        graph.edge(node_id, expr_to_dot_edges(graph, statement.value), "dotted")
        return node_id
    if isinstance(statement, Native):
        return graph.node("diamond", f"%native {statement.name}")
    if isinstance(statement, Include):
        node_id = graph.node("diamond", "%include")
        graph.edge(node_id, graph.node("box", statement.path), "dotted")
        return node_id
    if isinstance(statement, Assert):
        node_id = graph.node("diamond", "%assert")
        graph.edge(node_id, expr_to_dot_edges(graph, statement.condition), "dotted")
        return node_id
    if isinstance(statement, Error):
        node_id = graph.node("diamond", "%error")
        graph.edge(node_id, graph.node("box", f'\\"{statement.message}\\"'), "dotted")
        return node_id
    if isinstance(statement, Entry):
        node_id = graph.node("diamond", "%entry")
        graph.edge(node_id, expr_to_dot_edges(graph, statement.value), "dotted")
        return node_id
    if isinstance(statement, Block):
        return block_to_dot_edges(graph, statement.statements)
    if isinstance(statement, If):
        node_id = graph.node("box", "If")
        condition = _labelled_child(graph, node_id, "Condition")
        graph.edge(condition, expr_to_dot_edges(graph, statement.condition))
        then = _labelled_child(graph, node_id, "Then")
        graph.edge(then, block_to_dot_edges(graph, statement.then))
        elze = _labelled_child(graph, node_id, "Else")
        graph.edge(elze, block_to_dot_edges(graph, statement.elze))
        return node_id
    if isinstance(statement, Scope):
        node_id = graph.node("box", "Scope")
        graph.edge(node_id, block_to_dot_edges(graph, statement.statements))
        return node_id
    if isinstance(statement, For):
        node_id = graph.node("box", "For")
        _labelled_child(graph, node_id, f"Var: {statement.var}")
        start = _labelled_child(graph, node_id, "From")
        graph.edge(start, expr_to_dot_edges(graph, statement.start))
        end = _labelled_child(graph, node_id, "To")
        graph.edge(end, expr_to_dot_edges(graph, statement.end))
        body = _labelled_child(graph, node_id, "Body")
        graph.edge(body, block_to_dot_edges(graph, statement.body))
        return node_id
    if isinstance(statement, Fundef):
        node_id = graph.node("box", "Fundef")
        name_id = _labelled_child(graph, node_id, f"Name: {statement.name}")
        for arg in statement.args:
            graph.edge(name_id, graph.node("box", arg))
        if statement.guard is not None:
            guard = _labelled_child(graph, node_id, "Guard")
            graph.edge(guard, expr_to_dot_edges(graph, statement.guard))
        body = _labelled_child(graph, node_id, "Body")
        graph.edge(body, expr_to_dot_edges(graph, statement.body))
        return node_id
    if isinstance(statement, Macrocall):
        node_id = graph.node("box", f"Macrocall: {statement.name}")
        graph.edge(node_id, funcall_args_to_dot_edges(graph, statement.args), "dotted")
        return node_id
    if isinstance(statement, Macrodef):
        node_id = graph.node("box", f"Macrodef: {statement.name}")
        graph.edge(node_id, fundef_args_to_dot_edges(graph, statement.args), "dotted")
        graph.edge(node_id, block_to_dot_edges(graph, statement.body), "dotted")
        return node_id
    raise TypeError(f"not a statement: {statement!r}")


def dump_statement_as_dot(statement: Statement) -> str:
    """The statement tree as a complete dot digraph."""
    graph = DotGraph("AST")
    statement_to_dot_edges(graph, statement)
    return graph.render()