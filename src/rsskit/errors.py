from __future__ import annotations

from typing import Optional


class ParseError(ValueError):
    """Base class for everything that can go wrong while reading a feed."""


class DecodeError(ParseError):
    """The document is declared (or assumed) UTF-8 but is not valid UTF-8."""


class MalformedXMLError(ParseError):
    """The tokenizer rejected the document."""

    def __init__(self, message: str, position: Optional[tuple[int, int]] = None):
        super().__init__(message)
        self.position = position


class UnexpectedEOFError(ParseError):
    """Input ended inside an open element or before a complete channel."""

    def __init__(
        self,
        message: str = "reached end of input without finding a complete channel",
        position: Optional[tuple[int, int]] = None,
    ):
        super().__init__(message)
        self.position = position


class MissingFieldError(ParseError):
    def __init__(self, field: str):
        super().__init__(f"Invalid RSS feed: channel is missing <{field}>")
        self.field = field


class ValidationError(ValueError):
    """A field holds a value the RSS 2.0 rules do not allow."""
