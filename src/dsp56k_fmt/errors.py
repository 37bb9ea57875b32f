"""
dsp56k-fmt Error Hierarchy
==========================

This module defines the exception hierarchy for the formatter. All
exceptions inherit from FormatterError, allowing callers to catch every
formatter-related error with a single except clause.

Exception Hierarchy
-------------------
FormatterError (base)
├── ParseError - a line could not be split into fields
└── ConfigError - malformed column configuration

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class FormatterError(Exception):
    """
    Base exception for all formatter errors.

        try:
            formatter.format_region(0, buffer.line_count())
        except FormatterError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in a source buffer, used for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (0-indexed, matching the column model of
            the formatter where the first character sits in column 0)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Formatter Exceptions
# =============================================================================

class ParseError(FormatterError):
    """
    A line could not be parsed into fields.

    Raised by the line parser when the leading token is not a known
    mnemonic and the classification callback declines to accept it as a
    macro. The error is fatal for that one line only; the enclosing
    formatter decides whether the batch continues.

    Attributes:
        message: The error description
        token: The token that could not be classified (optional)
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The raw line text (optional)
    """

    def __init__(
        self,
        message: str,
        token: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.token = token
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.asm:12:4: error: cannot classify line
                fmac    a,b
                ^
            hint: 'fmac' is not a known instruction, directive or macro
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            padding = " " * (4 + self.location.column)
            parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class ConfigError(FormatterError):
    """
    Invalid formatter configuration.

    Examples:
        - Column list with the wrong number of entries
        - Non-integer or negative column values
    """
    pass
