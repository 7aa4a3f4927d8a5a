"""Turning assembler source lines into a tree of statements."""

from __future__ import annotations

from typing import Mapping

from .expr import (
    Binding,
    LitStr,
    parse_expr,
    parse_expr_from_tokens,
    parse_funcall_args,
    parse_fundef_args,
    parse_lit_str,
)
from .linizer import Line, LineKind, Linizer
from .location import BasmError, FileLocation
from .statement import (
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
    Statement,
)
from .tokenizer import TokenKind, Tokenizer

_BLOCK_STOP_DIRECTIVES = frozenset({"end", "else", "elif"})
_WHITESPACE = " \t\n\v\f\r"


def _is_directive(line: Line | None, name: str | None = None) -> bool:
    if line is None or line.kind is not LineKind.DIRECTIVE:
        return False
    return name is None or line.name == name


class Parser:
    """Builds statements from the lines of a linizer.

    ``instructions`` maps instruction names to what is known about them.
    """

    def __init__(self, linizer: Linizer,
                 instructions: Mapping[str, InstDef] | None = None) -> None:
        self.linizer = linizer
        self.instructions = dict(instructions or {})

    def _error(self, message: str, note_location: FileLocation | None = None,
               note: str = "") -> BasmError:
        if note_location is not None:
            message = f"{message}\n{note_location}: NOTE: {note}"
        return BasmError(self.linizer.location, message)

    def _expect_end(self, block_name: str, start: FileLocation) -> None:
        line = self.linizer.next()
        if not _is_directive(line, "end"):
            raise self._error(
                f"expected `%end` directive at the end of the `%{block_name}` block",
                start, f"the %{block_name} block starts here")

    def parse_block(self) -> tuple:
        """Parse statements until the end of input or a block stop directive."""
        result: list[Statement] = []
        while (line := self.linizer.peek()) is not None:
            location = line.location
            if line.kind is LineKind.INSTRUCTION:
                inst = self.instructions.get(line.name)
                if inst is None:
                    raise BasmError(location, f"unknown instruction `{line.name}`")
                operand = parse_expr(line.operand, location) if inst.has_operand else None
                result.append(EmitInst(inst, operand, location))
                self.linizer.next()
            elif line.kind is LineKind.LABEL:
                label = parse_expr(line.name, location)
                if not isinstance(label, Binding):
                    raise BasmError(location, "expected binding name for a label")
                result.append(Label(label.name, location))
                self.linizer.next()
            else:
                if line.name in _BLOCK_STOP_DIRECTIVES:
                    break
                self.parse_directive(result)
        return tuple(result)

    def parse_if_else_body(self, condition, location: FileLocation) -> If:
        """Parse the branches of an ``%if`` whose condition is already read."""
        then = self.parse_block()

        line = self.linizer.next()
        if not _is_directive(line):
            raise self._error("expected `%end` or `%else` or `%elif` after `%if`",
                              location, "%if is here")

        elze: tuple = ()
        if line.name == "else":
            else_location = line.location
            elze = self.parse_block()
            if not _is_directive(self.linizer.next(), "end"):
                raise self._error("expected `%end` after `%else`",
                                  else_location, "%else is here")
        elif line.name == "end":
            pass
        elif line.name == "elif":
            elif_condition = parse_expr(line.body, line.location)
            elze = (self.parse_if_else_body(elif_condition, line.location),)
        else:
            raise self._error(
                f"expected `%end` or `%else` after `%if`, but got `{line.name}`",
                location, "%if is here")

        return If(condition, then, elze, location)

    def parse_directive(self, output: list) -> None:
        """Parse the next line, which must be a directive, appending to output."""
        line = self.linizer.next()
        if not _is_directive(line):
            raise self._error("expected a directive line")

        location = line.location
        name = line.name
        body = line.body

        if name == "include":
            path = parse_expr(body, location)
            if not isinstance(path, LitStr):
                raise BasmError(location,
                                "expected string literal as path for %include directive")
            output.append(Include(path.value, location))
        elif name == "const":
            tokenizer = Tokenizer(body, location)
            binding = parse_expr_from_tokens(tokenizer)
            if not isinstance(binding, Binding):
                raise BasmError(location, "expected binding name for %const binding")
            tokenizer.expect_next(TokenKind.EQ)
            value = parse_expr_from_tokens(tokenizer)
            tokenizer.expect_no_tokens()
            output.append(Const(binding.name, value, location))
        elif name == "native":
            tokenizer = Tokenizer(body, location)
            binding = parse_expr_from_tokens(tokenizer)
            if not isinstance(binding, Binding):
                raise BasmError(location, "expected binding name for %native binding")
            tokenizer.expect_no_tokens()
            output.append(Native(binding.name, location))
        elif name == "assert":
            output.append(Assert(parse_expr(body, location), location))
        elif name == "entry":
            body = body.strip(_WHITESPACE)
            inline_entry = body.endswith(":")
            if inline_entry:
                body = body[:-1]
            expr = parse_expr(body, location)
            output.append(Entry(expr, location))
            if inline_entry:
                if not isinstance(expr, Binding):
                    raise BasmError(location, "expected binding name for a label")
                output.append(Label(expr.name, location))
        elif name == "error":
            tokenizer = Tokenizer(body, location)
            message = parse_lit_str(tokenizer)
            tokenizer.expect_no_tokens()
            output.append(Error(message, location))
        elif name == "if":
            condition = parse_expr(body, location)
            output.append(self.parse_if_else_body(condition, location))
        elif name == "scope":
            statements = self.parse_block()
            self._expect_end("scope", location)
            output.append(Scope(statements, location))
        elif name == "for":
            tokenizer = Tokenizer(body, location)
            var = tokenizer.expect_next(TokenKind.NAME).text
            tokenizer.expect_next(TokenKind.FROM)
            start = parse_expr_from_tokens(tokenizer)
            tokenizer.expect_next(TokenKind.TO)
            end = parse_expr_from_tokens(tokenizer)
            tokenizer.expect_no_tokens()
            loop_body = self.parse_block()
            self._expect_end("for", location)
            output.append(For(var, start, end, loop_body, location))
        elif name == "func":
            tokenizer = Tokenizer(body, location)
            func_name = tokenizer.expect_next(TokenKind.NAME).text
            args = parse_fundef_args(tokenizer)
            guard = None
            token = tokenizer.peek()
            if token is not None and token.kind is TokenKind.IF:
                tokenizer.next()
                guard = parse_expr_from_tokens(tokenizer)
            token = tokenizer.peek()
            if token is None or token.kind is not TokenKind.EQ:
                raise BasmError(location,
                                f"expected either `{TokenKind.IF.label()}` "
                                f"or `{TokenKind.EQ.label()}`")
            tokenizer.next()
            func_body = parse_expr_from_tokens(tokenizer)
            output.append(Fundef(func_name, args, func_body, guard, location))
        elif name == "end":
            raise BasmError(location, "unexpected `%end` directive")
        elif name == "macro":
            tokenizer = Tokenizer(body, location)
            macro_name = tokenizer.expect_next(TokenKind.NAME).text
            args = parse_fundef_args(tokenizer)
            tokenizer.expect_no_tokens()
            macro_body = self.parse_block()
            self._expect_end("macro", location)
            output.append(Macrodef(macro_name, args, macro_body, location))
        else:
            tokenizer = Tokenizer(body, location)
            token = tokenizer.peek()
            if token is None or token.kind is not TokenKind.OPEN_PAREN:
                raise BasmError(location, f"unknown directive `{name}`")
            args = parse_funcall_args(tokenizer)
            tokenizer.expect_no_tokens()
            output.append(Macrocall(name, args, location))


def parse_source(source: str, file_path: str = "",
                 instructions: Mapping[str, InstDef] | None = None) -> tuple:
    """Parse a whole source text into its top-level statements."""
    linizer = Linizer(source, file_path)
    statements = Parser(linizer, instructions).parse_block()
    linizer.expect_no_lines()
    return statements