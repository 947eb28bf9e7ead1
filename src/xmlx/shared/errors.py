"""Exception types raised by xmlx.

Failures of the underlying byte source (``OSError``, ``requests`` errors) are
not wrapped; they reach the caller unchanged.
"""

from typing import Optional


class XMLxError(Exception):
    """Base class for all errors raised by xmlx itself."""


class XMLSyntaxError(XMLxError):
    """Malformed XML reported while decoding or tokenizing a document.

    Attributes:
        message: Description of the problem
        line: 1-based line of the offending markup, if known
        column: 1-based column of the offending markup, if known
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is None:
            return f"XML syntax error: {self.message}"
        if self.column is None:
            return f"XML syntax error on line {self.line}: {self.message}"
        return (
            f"XML syntax error on line {self.line}, column {self.column}: "
            f"{self.message}"
        )
