"""Splitting expression text into tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .location import BasmError, FileLocation

_WHITESPACE = " \t\n\v\f\r"


class TokenKind(Enum):
    STR = auto()
    CHAR = auto()
    PLUS = auto()
    MINUS = auto()
    MULT = auto()
    DIV = auto()
    NUMBER = auto()
    NAME = auto()
    OPEN_PAREN = auto()
    CLOSING_PAREN = auto()
    OPEN_CURLY = auto()
    CLOSING_CURLY = auto()
    COMMA = auto()
    GT = auto()
    EQ = auto()
    EE = auto()
    LT = auto()
    MOD = auto()
    FROM = auto()
    TO = auto()
    IF = auto()
    PROC = auto()
    SEMICOLON = auto()

    def label(self) -> str:
        """The human readable name used in diagnostics."""
        return _TOKEN_LABELS[self]


_TOKEN_LABELS = {
    TokenKind.STR: "string",
    TokenKind.CHAR: "character",
    TokenKind.PLUS: "plus",
    TokenKind.MINUS: "minus",
    TokenKind.DIV: "div",
    TokenKind.MULT: "multiply",
    TokenKind.NUMBER: "number",
    TokenKind.NAME: "name",
    TokenKind.OPEN_PAREN: "(",
    TokenKind.CLOSING_PAREN: ")",
    TokenKind.OPEN_CURLY: "{",
    TokenKind.CLOSING_CURLY: "}",
    TokenKind.COMMA: "comma",
    TokenKind.GT: ">",
    TokenKind.LT: "<",
    TokenKind.EQ: "=",
    TokenKind.EE: "==",
    TokenKind.FROM: "from",
    TokenKind.TO: "to",
    TokenKind.MOD: "%",
    TokenKind.IF: "if",
    TokenKind.PROC: "proc",
    TokenKind.SEMICOLON: ";",
}

_SINGLE_CHAR_TOKENS = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSING_PAREN,
    "{": TokenKind.OPEN_CURLY,
    "}": TokenKind.CLOSING_CURLY,
    "/": TokenKind.DIV,
    ",": TokenKind.COMMA,
    "%": TokenKind.MOD,
    ";": TokenKind.SEMICOLON,
    ">": TokenKind.GT,
    "<": TokenKind.LT,
    "*": TokenKind.MULT,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
}

_KEYWORDS = {
    "to": TokenKind.TO,
    "from": TokenKind.FROM,
    "if": TokenKind.IF,
    "proc": TokenKind.PROC,
}


def is_name(ch: str) -> bool:
    """True for characters allowed inside a name."""
    return (ch.isascii() and ch.isalnum()) or ch == "_"


def is_number(ch: str) -> bool:
    """True for characters allowed inside a number literal."""
    return (ch.isascii() and ch.isalnum()) or ch == "."


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str


def _take_while(source: str, predicate) -> int:
    end = 0
    while end < len(source) and predicate(source[end]):
        end += 1
    return end


class Tokenizer:
    """A peekable stream of tokens over a piece of source text."""

    def __init__(self, source: str, location: FileLocation | None = None) -> None:
        self.source = source
        self.location = location if location is not None else FileLocation()
        self._peeked: Token | None = None

    def _error(self, message: str) -> BasmError:
        return BasmError(self.location, message)

    def _quoted(self, quote: str, kind: TokenKind) -> Token:
        body = self.source[1:]
        end = body.find(quote)
        if end < 0:
            raise self._error(f"Could not find closing {quote}")
        self.source = body[end + 1:]
        return Token(kind, body[:end])

    def _scan(self) -> Token | None:
        self.source = self.source.lstrip(_WHITESPACE)
        if not self.source:
            return None

        first = self.source[0]
        if first in _SINGLE_CHAR_TOKENS:
            self.source = self.source[1:]
            return Token(_SINGLE_CHAR_TOKENS[first], first)
        if first == "=":
            if self.source.startswith("=="):
                self.source = self.source[2:]
                return Token(TokenKind.EE, "==")
            self.source = self.source[1:]
            return Token(TokenKind.EQ, "=")
        if first == '"':
            return self._quoted('"', TokenKind.STR)
        if first == "'":
            return self._quoted("'", TokenKind.CHAR)
        if first.isascii() and first.isalpha():
            end = _take_while(self.source, is_name)
            text, self.source = self.source[:end], self.source[end:]
            return Token(_KEYWORDS.get(text, TokenKind.NAME), text)
        if first.isascii() and first.isdigit():
            end = _take_while(self.source, is_number)
            text, self.source = self.source[:end], self.source[end:]
            return Token(TokenKind.NUMBER, text)
        raise self._error(f"Unknown token starts with {first}")

    def peek(self) -> Token | None:
        """Return the next token without consuming it, or None at the end."""
        if self._peeked is None:
            self._peeked = self._scan()
        return self._peeked

    def next(self) -> Token | None:
        """Consume and return the next token, or None at the end."""
        token = self.peek()
        self._peeked = None
        return token

    def expect_next(self, kind: TokenKind) -> Token:
        """Consume the next token, which must be of the given kind."""
        token = self.next()
        if token is None:
            raise self._error(f"expected token `{kind.label()}`")
        if token.kind is not kind:
            raise self._error(
                f"expected token `{kind.label()}`, but got `{token.kind.label()}`"
            )
        return token

    def expect_no_tokens(self) -> None:
        """Fail if any token is left."""
        token = self.next()
        if token is not None:
            raise self._error(f"unexpected token `{token.text}`")