"""Splitting assembler source into instruction, label and directive lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from itertools import takewhile
from pathlib import Path
from typing import Iterator

from .location import BasmError, FileLocation
from .tokenizer import is_name

COMMENT_SYMBOL = ";"
PP_SYMBOL = "%"

_WHITESPACE = " \t\n\v\f\r"


class LineKind(Enum):
    INSTRUCTION = "instruction"
    LABEL = "label"
    DIRECTIVE = "directive"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Line:
    """One meaningful source line.

    ``body`` holds the operand of an instruction or the body of a directive;
    it is empty for labels.
    """

    kind: LineKind
    name: str
    body: str = ""
    location: FileLocation = field(default_factory=FileLocation)

    @property
    def operand(self) -> str:
        return self.body

    def dump(self) -> str:
        """A one-line human readable description of the line."""
        if self.kind is LineKind.INSTRUCTION:
            return (f"{self.location}: INSTRUCTION: name: {self.name}, "
                    f"operand: {self.body}")
        if self.kind is LineKind.LABEL:
            return f"{self.location}: LABEL: name: {self.name}"
        return (f"{self.location}: DIRECTIVE: name: {self.name}, "
                f"body: {self.body}")


def _classify(text: str, location: FileLocation) -> Line:
    if text.startswith(PP_SYMBOL):
        rest = text[1:]
        end = len("".join(takewhile(is_name, rest)))
        return Line(LineKind.DIRECTIVE, rest[:end].strip(_WHITESPACE),
                    rest[end:].strip(_WHITESPACE), location)
    if text.endswith(":"):
        name = text.partition(":")[0].strip(_WHITESPACE)
        return Line(LineKind.LABEL, name, "", location)
    name, _, operand = text.partition(" ")
    return Line(LineKind.INSTRUCTION, name.strip(_WHITESPACE),
                operand.strip(_WHITESPACE), location)


class Linizer:
    """A peekable stream of non-empty lines with comments removed."""

    def __init__(self, source: str, file_path: str = "") -> None:
        self.source = source
        self.location = FileLocation(str(file_path), 0)
        self._peeked: Line | None = None

    @classmethod
    def from_file(cls, file_path) -> "Linizer":
        """Read a whole source file into a new linizer."""
        source = Path(file_path).read_text(encoding="utf-8")
        return cls(source, str(file_path))

    def peek(self) -> Line | None:
        """Return the next line without consuming it, or None at the end."""
        if self._peeked is not None:
            return self._peeked

        while True:
            raw, _, self.source = self.source.partition("\n")
            text = raw.strip(_WHITESPACE).partition(COMMENT_SYMBOL)[0]
            text = text.strip(_WHITESPACE)
            self.location = FileLocation(self.location.file_path,
                                         self.location.line_number + 1)
            if text or not self.source:
                break

        if not text:
            return None

        self._peeked = _classify(text, self.location)
        return self._peeked

    def next(self) -> Line | None:
        """Consume and return the next line, or None at the end."""
        line = self.peek()
        self._peeked = None
        return line

    def expect_no_lines(self) -> None:
        """Fail if any line is left."""
        line = self.next()
        if line is not None:
            raise BasmError(line.location, f"unexpected {line.kind.value} line")

    def __iter__(self) -> Iterator[Line]:
        while (line := self.next()) is not None:
            yield line