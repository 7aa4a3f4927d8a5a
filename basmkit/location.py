"""Source locations and the error type that carries them."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FileLocation:
    """A position in a source file: its path and a 1-based line number."""

    file_path: str = ""
    line_number: int = 0

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line_number}"


class BasmError(Exception):
    """An error found in assembler source, tied to where it was found."""

    def __init__(self, location: FileLocation, message: str) -> None:
        self.location = location
        self.message = message
        super().__init__(f"{location}: ERROR: {message}")