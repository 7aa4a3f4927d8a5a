"""Tokenizer, line splitter, expression and statement parser, and dot dumps for a small stack-machine assembly language."""

__version__ = "0.1.0"

__all__ = ["__version__"]