"""Expressions of the assembler: their parser, text dump and dot graphs."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from .location import BasmError, FileLocation
from .tokenizer import Token, TokenKind, Tokenizer

MAX_PRECEDENCE = 2
_U64_MASK = (1 << 64) - 1
_LIT_CHAR_CAPACITY = 8


class BinaryOpKind(Enum):
    PLUS = "+"
    MINUS = "-"
    MULT = "*"
    DIV = "/"
    GT = ">"
    LT = "<"
    EQUALS = "=="
    MOD = "%"

    def precedence(self) -> int:
        """Binding strength: higher binds tighter."""
        return _PRECEDENCE[self]

    @classmethod
    def from_token_kind(cls, token_kind: TokenKind) -> "BinaryOpKind | None":
        """The operator a token denotes, or None if it is not an operator."""
        return _TOKEN_TO_BINARY_OP.get(token_kind)

    def __str__(self) -> str:
        return self.value


_PRECEDENCE = {
    BinaryOpKind.EQUALS: 0,
    BinaryOpKind.GT: 0,
    BinaryOpKind.LT: 0,
    BinaryOpKind.PLUS: 1,
    BinaryOpKind.MINUS: 1,
    BinaryOpKind.MOD: 2,
    BinaryOpKind.MULT: 2,
    BinaryOpKind.DIV: 2,
}

_TOKEN_TO_BINARY_OP = {
    TokenKind.PLUS: BinaryOpKind.PLUS,
    TokenKind.MINUS: BinaryOpKind.MINUS,
    TokenKind.MULT: BinaryOpKind.MULT,
    TokenKind.DIV: BinaryOpKind.DIV,
    TokenKind.GT: BinaryOpKind.GT,
    TokenKind.LT: BinaryOpKind.LT,
    TokenKind.EE: BinaryOpKind.EQUALS,
    TokenKind.MOD: BinaryOpKind.MOD,
}


@dataclass(frozen=True)
class Binding:
    name: str


@dataclass(frozen=True)
class LitInt:
    """An integer literal, held as an unsigned 64-bit value."""

    value: int


@dataclass(frozen=True)
class LitFloat:
    value: float


@dataclass(frozen=True)
class LitChar:
    """A character literal of up to eight bytes."""

    text: str

    def value(self) -> int:
        """The bytes of the literal packed big-end first into one word."""
        result = 0
        for byte in self.text.encode("utf-8"):
            result = ((result << 8) | byte) & _U64_MASK
        return result


@dataclass(frozen=True)
class LitStr:
    value: str


@dataclass(frozen=True)
class BinaryOp:
    kind: BinaryOpKind
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Funcall:
    name: str
    args: tuple = ()


Expr = Union[Binding, LitInt, LitFloat, LitChar, LitStr, BinaryOp, Funcall]


def _error(tokenizer: Tokenizer, message: str) -> BasmError:
    return BasmError(tokenizer.location, message)


def _comma_separated(tokenizer: Tokenizer, parse_item) -> tuple:
    tokenizer.expect_next(TokenKind.OPEN_PAREN)

    upcoming = tokenizer.peek()
    if upcoming is not None and upcoming.kind is TokenKind.CLOSING_PAREN:
        tokenizer.next()
        return ()

    items = []
    while True:
        items.append(parse_item())
        token = tokenizer.next()
        if token is None:
            raise _error(tokenizer, f"expected {TokenKind.CLOSING_PAREN.label()} "
                                    f"or {TokenKind.COMMA.label()}")
        if token.kind is not TokenKind.COMMA:
            break

    if token.kind is not TokenKind.CLOSING_PAREN:
        raise _error(tokenizer, f"expected {TokenKind.CLOSING_PAREN.label()}")

    return tuple(items)


def parse_funcall_args(tokenizer: Tokenizer) -> tuple:
    """Parse a parenthesised, comma separated list of argument expressions."""
    return _comma_separated(tokenizer, lambda: parse_expr_from_tokens(tokenizer))


def parse_fundef_args(tokenizer: Tokenizer) -> tuple:
    """Parse a parenthesised, comma separated list of parameter names."""
    return _comma_separated(
        tokenizer, lambda: tokenizer.expect_next(TokenKind.NAME).text)


def unescape_string_literal(text: str, location: FileLocation | None = None) -> str:
    """Resolve the \\0, \\n and \\xhh escapes of a string literal body."""
    location = location if location is not None else FileLocation()
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue

        if i + 1 >= len(text):
            raise BasmError(location, "unfinished string literal escape sequence")

        escape = text[i + 1]
        if escape == "0":
            out.append("\0")
            i += 2
        elif escape == "n":
            out.append("\n")
            i += 2
        elif escape == "x":
            if i + 3 >= len(text):
                raise BasmError(
                    location,
                    "unfinished string literal escape sequence. Expected format "
                    "`\\xhh` where `hh` are 2 hexadecimal digits")
            code = text[i + 2:i + 4]
            if not all(c in string.hexdigits for c in code):
                raise BasmError(location, "incorrect hexadecimal escape code")
            out.append(chr(int(code, 16)))
            i += 4
        else:
            raise BasmError(location, f"unknown escape character `{escape}`")

    return "".join(out)


def parse_lit_str(tokenizer: Tokenizer) -> str:
    """Consume a string token and return its unescaped contents."""
    token = tokenizer.expect_next(TokenKind.STR)
    return unescape_string_literal(token.text, tokenizer.location)


def _parse_number(tokenizer: Tokenizer) -> Expr:
    text = tokenizer.expect_next(TokenKind.NUMBER).text

    if text.startswith("0x"):
        try:
            value = int(text, 16)
        except ValueError:
            raise _error(tokenizer, f"`{text}` is not a hex literal") from None
        return LitInt(min(value, _U64_MASK))

    if text.isascii() and text.isdigit():
        return LitInt(min(int(text), _U64_MASK))

    try:
        return LitFloat(float(text))
    except ValueError:
        raise _error(tokenizer, f"`{text}` is not a number literal") from None


def _parse_primary(tokenizer: Tokenizer) -> Expr:
    token: Token | None = tokenizer.peek()
    if token is None:
        raise _error(tokenizer, "Cannot parse empty expression")

    kind = token.kind
    if kind is TokenKind.STR:
        return LitStr(parse_lit_str(tokenizer))

    if kind is TokenKind.CHAR:
        tokenizer.next()
        if len(token.text.encode("utf-8")) > _LIT_CHAR_CAPACITY:
            raise _error(tokenizer,
                         "the length of char literal has to be less or equal to 8 "
                         "to be able to fit into a 64 bit number")
        return LitChar(token.text)

    if kind is TokenKind.NAME:
        tokenizer.next()
        upcoming = tokenizer.peek()
        if upcoming is not None and upcoming.kind is TokenKind.OPEN_PAREN:
            return Funcall(token.text, parse_funcall_args(tokenizer))
        return Binding(token.text)

    if kind is TokenKind.NUMBER:
        return _parse_number(tokenizer)

    if kind is TokenKind.MINUS:
        tokenizer.next()
        number = _parse_number(tokenizer)
        if isinstance(number, LitInt):
            return LitInt((-number.value) & _U64_MASK)
        return LitFloat(-number.value)

    if kind is TokenKind.OPEN_PAREN:
        tokenizer.next()
        result = parse_expr_from_tokens(tokenizer)
        tokenizer.expect_next(TokenKind.CLOSING_PAREN)
        return result

    raise _error(tokenizer, f"expected primary expression but found {kind.label()}")


def _parse_binary_op(tokenizer: Tokenizer, precedence: int) -> Expr:
    if precedence > MAX_PRECEDENCE:
        return _parse_primary(tokenizer)

    left = _parse_binary_op(tokenizer, precedence + 1)
    while (token := tokenizer.peek()) is not None:
        op = BinaryOpKind.from_token_kind(token.kind)
        if op is None or op.precedence() != precedence:
            break
        tokenizer.next()
        right = _parse_binary_op(tokenizer, precedence + 1)
        left = BinaryOp(op, left, right)
    return left


def parse_expr_from_tokens(tokenizer: Tokenizer) -> Expr:
    """Parse one expression from the front of a token stream."""
    return _parse_binary_op(tokenizer, 0)


def parse_expr(source: str, location: FileLocation | None = None) -> Expr:
    """Parse a whole string as exactly one expression."""
    tokenizer = Tokenizer(source, location)
    result = parse_expr_from_tokens(tokenizer)
    tokenizer.expect_no_tokens()
    return result


def _indent(level: int) -> str:
    return " " * (level * 2)


def dump_expr(expr: Expr, level: int = 0) -> str:
    """An indented, multi-line description of an expression tree."""
    pad = _indent(level)
    if isinstance(expr, Binding):
        return f"{pad}Binding: {expr.name}\n"
    if isinstance(expr, LitInt):
        return f"{pad}Int Literal: {expr.value}\n"
    if isinstance(expr, LitFloat):
        return f"{pad}Float Literal: {expr.value:f}\n"
    if isinstance(expr, LitChar):
        return f"{pad}Char Literal: '{expr.text}'\n"
    if isinstance(expr, LitStr):
        return f'{pad}String Literal: "{expr.value}"\n'
    if isinstance(expr, BinaryOp):
        inner = _indent(level + 1)
        return (f"{pad}Binary Op: {expr.kind.value}\n"
                f"{inner}Left:\n{dump_expr(expr.left, level + 2)}"
                f"{inner}Right:\n{dump_expr(expr.right, level + 2)}")
    if isinstance(expr, Funcall):
        inner = _indent(level + 1)
        args = "".join(f"{inner}Arg:\n{dump_expr(arg, level + 2)}"
                       for arg in expr.args)
        return f"{pad}Funcall: {expr.name}\n{args}"
    raise TypeError(f"not an expression: {expr!r}")


class DotGraph:
    """Builds a Graphviz digraph whose nodes are numbered in creation order."""

    def __init__(self, name: str = "Expr") -> None:
        self.name = name
        self._lines: list[str] = []
        self._counter = 0

    def node(self, shape: str, label: str) -> int:
        """Add a node and return its id."""
        node_id = self._counter
        self._counter += 1
        self._lines.append(f'Expr_{node_id} [shape={shape} label="{label}"]')
        return node_id

    def edge(self, source: int, target: int, style: str | None = None) -> None:
        """Add an edge between two nodes, optionally styled."""
        line = f"Expr_{source} -> Expr_{target}"
        if style:
            line += f" [style={style}]"
        self._lines.append(line)

    def render(self) -> str:
        """The graph in dot syntax."""
        body = "".join(f"{line}\n" for line in self._lines)
        return f"digraph {self.name} {{\n{body}}}\n"


def fundef_args_to_dot_edges(graph: DotGraph, args: Iterable[str]) -> int:
    """Add a node for a parameter list and its names; return its id."""
    node_id = graph.node("box", "Args")
    for name in args:
        graph.edge(node_id, graph.node("box", name))
    return node_id


def funcall_args_to_dot_edges(graph: DotGraph, args: Iterable[Expr]) -> int:
    """Add a node for an argument list and its expressions; return its id."""
    node_id = graph.node("box", "Args")
    for arg in args:
        graph.edge(node_id, expr_to_dot_edges(graph, arg))
    return node_id


def expr_to_dot_edges(graph: DotGraph, expr: Expr) -> int:
    """Add the nodes of an expression tree; return the id of its root."""
    if isinstance(expr, Binding):
        return graph.node("box", expr.name)
    if isinstance(expr, LitInt):
        return graph.node("circle", str(expr.value))
    if isinstance(expr, LitFloat):
        return graph.node("circle", f"{expr.value:f}")
    if isinstance(expr, LitChar):
        return graph.node("circle", f"'{expr.text}'")
    if isinstance(expr, LitStr):
        return graph.node("circle", expr.value)
    if isinstance(expr, BinaryOp):
        node_id = graph.node("diamond", expr.kind.value)
        left_id = expr_to_dot_edges(graph, expr.left)
        right_id = expr_to_dot_edges(graph, expr.right)
        graph.edge(node_id, left_id)
        graph.edge(node_id, right_id)
        return node_id
    if isinstance(expr, Funcall):
        node_id = graph.node("diamond", expr.name)
        graph.edge(node_id, funcall_args_to_dot_edges(graph, expr.args))
        return node_id
    raise TypeError(f"not an expression: {expr!r}")


def dump_expr_as_dot(expr: Expr) -> str:
    """The expression tree as a complete dot digraph."""
    graph = DotGraph("Expr")
    expr_to_dot_edges(graph, expr)
    return graph.render()