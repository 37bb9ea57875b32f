"""
Source Formatter
================

Drives the formatting pipeline over a text buffer:

    raw line -> LineParser -> normalize() -> render_line() -> buffer
                               IndentResolver (lines above) -^

Lines are formatted strictly top to bottom: the base column of line N is
resolved from the already-rendered text of lines 0..N-1, so a region can
never be processed out of order.

Buffers
-------
The formatter talks to text through the small SourceBuffer interface
(get_line, set_line, current_line_index, move_to, line_count). An editor
integration implements it over its own buffer; TextBuffer is the in-memory
implementation used by the command-line tool and the tests.

Example
-------
>>> from dsp56k_fmt.formatter import format_text
>>> print(format_text(" do #4,_end\\n nop\\n_end\\n"), end="")
    do        #4,_end
      nop
_end
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional
import logging

from dsp56k_fmt.config import IndentConfig
from dsp56k_fmt.errors import ParseError
from dsp56k_fmt.mnemonics import MnemonicTable
from dsp56k_fmt.normalizer import normalize
from dsp56k_fmt.parser import Classifier, LineParser, ParsedLine
from dsp56k_fmt.renderer import render_line
from dsp56k_fmt.resolver import IndentResolver


logger = logging.getLogger(__name__)


# =============================================================================
# Text Buffers
# =============================================================================

class SourceBuffer(ABC):
    """
    Line-addressed text with a cursor.

    Line indices are 0-based.
    """

    @abstractmethod
    def get_line(self, index: int) -> str:
        """Text of a line, without its terminator."""
        pass

    @abstractmethod
    def set_line(self, index: int, text: str) -> None:
        """Replace the text of a line."""
        pass

    @abstractmethod
    def current_line_index(self) -> int:
        """Index of the line holding the cursor."""
        pass

    @abstractmethod
    def move_to(self, index: int) -> None:
        """Move the cursor to a line."""
        pass

    @abstractmethod
    def line_count(self) -> int:
        """Number of lines."""
        pass


class TextBuffer(SourceBuffer):
    """
    In-memory SourceBuffer over a list of lines.

    Usage:
        buffer = TextBuffer.from_text(path.read_text())
        Formatter(buffer).format_region(0, buffer.line_count())
        path.write_text(buffer.text())
    """

    def __init__(self, lines: Optional[list[str]] = None, trailing_newline: bool = True):
        self.lines: list[str] = list(lines or [])
        self.trailing_newline = trailing_newline
        self._cursor = 0

    @classmethod
    def from_text(cls, text: str) -> "TextBuffer":
        """
        Split text into lines, remembering whether it ended with a newline.

        Only "\\n" ends a line (a "\\r" before it is dropped). Form feeds
        and other separators that str.splitlines() breaks on stay inside
        their line, so line numbers match an editor's.
        """
        if not text:
            return cls([], trailing_newline=False)
        lines = text.split("\n")
        trailing_newline = text.endswith("\n")
        if trailing_newline:
            lines.pop()
        return cls([line.removesuffix("\r") for line in lines], trailing_newline)

    def text(self) -> str:
        """Join the lines back into a single string."""
        joined = "\n".join(self.lines)
        if self.lines and self.trailing_newline:
            joined += "\n"
        return joined

    def get_line(self, index: int) -> str:
        return self.lines[index]

    def set_line(self, index: int, text: str) -> None:
        self.lines[index] = text

    def current_line_index(self) -> int:
        return self._cursor

    def move_to(self, index: int) -> None:
        if not 0 <= index < max(1, len(self.lines)):
            raise IndexError(f"line {index} out of range (0..{len(self.lines) - 1})")
        self._cursor = index

    def line_count(self) -> int:
        return len(self.lines)


# =============================================================================
# Formatting Results
# =============================================================================

class ErrorPolicy(Enum):
    """What a region pass does when a line cannot be parsed."""
    SKIP = "skip"     # Leave the line untouched and continue
    ABORT = "abort"   # Propagate the ParseError


@dataclass
class FormatReport:
    """
    Outcome of a region pass.

    Attributes:
        lines_formatted: Lines processed successfully
        lines_changed: Lines whose text was replaced
        errors: ParseErrors for lines left untouched
    """
    lines_formatted: int = 0
    lines_changed: int = 0
    errors: list[ParseError] = field(default_factory=list)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def get_error_report(self) -> str:
        return "\n".join(str(e) for e in self.errors)


# =============================================================================
# Formatter
# =============================================================================

class Formatter:
    """
    Formats lines of a SourceBuffer in place.

    The formatter owns the mnemonic table for its session: macros accepted
    by the classifier on one line stay known for every later line and
    every later pass.

    Attributes:
        buffer: Text being formatted
        config: Column layout, fixed for the lifetime of the formatter
        table: Mnemonic table shared with parser and resolver
        on_error: Region error policy
    """

    def __init__(
        self,
        buffer: SourceBuffer,
        config: Optional[IndentConfig] = None,
        table: Optional[MnemonicTable] = None,
        classify: Optional[Classifier] = None,
        on_error: ErrorPolicy = ErrorPolicy.SKIP,
        filename: str = "<input>",
    ):
        self.buffer = buffer
        self.config = config if config is not None else IndentConfig()
        self.table = table if table is not None else MnemonicTable.default()
        self.on_error = on_error
        self.parser = LineParser(self.table, classify, filename)
        self.resolver = IndentResolver(self.table, self.config)

    def parse_line(self, index: Optional[int] = None) -> ParsedLine:
        """
        Parse a line without changing it.

        Args:
            index: Line to parse (the cursor line if None)
        """
        if index is None:
            index = self.buffer.current_line_index()
        return self.parser.parse(self.buffer.get_line(index), line_number=index + 1)

    def format_line(self) -> bool:
        """
        Format the line at the cursor in place.

        Returns:
            True if the line text changed

        Raises:
            ParseError: If the line cannot be classified; the line is
                left unmodified
        """
        index = self.buffer.current_line_index()
        text = self.buffer.get_line(index)

        parsed = normalize(self.parse_line(index))
        base = self.resolver.resolve(self._lines_above(index))
        rendered = render_line(parsed, base, self.config, self.table)

        if rendered == text:
            return False
        self.buffer.set_line(index, rendered)
        return True

    def format_region(self, start: int, end: int) -> FormatReport:
        """
        Format lines [start, end) top to bottom.

        The cursor is restored afterwards. With ErrorPolicy.SKIP an
        unparseable line is left as is and recorded in the report; with
        ErrorPolicy.ABORT the ParseError propagates and lines below it are
        not touched.

        Returns:
            A FormatReport for the pass
        """
        count = self.buffer.line_count()
        if start < 0 or start > end:
            raise ValueError(f"invalid region [{start}, {end})")
        end = min(end, count)

        report = FormatReport()
        if start >= end:
            return report

        cursor = self.buffer.current_line_index()
        try:
            for index in range(start, end):
                self.buffer.move_to(index)
                try:
                    changed = self.format_line()
                except ParseError as e:
                    if self.on_error is ErrorPolicy.ABORT:
                        raise
                    logger.warning(f"Line {index + 1} left unformatted: cannot classify '{e.token}'")
                    report.errors.append(e)
                    continue
                report.lines_formatted += 1
                if changed:
                    report.lines_changed += 1
        finally:
            self.buffer.move_to(min(cursor, max(0, count - 1)))

        logger.debug(
            f"Formatted lines {start + 1}-{end}: {report.lines_changed} changed, "
            f"{len(report.errors)} skipped"
        )
        return report

    def _lines_above(self, index: int) -> Iterator[str]:
        """Rendered lines above index, nearest first."""
        for i in range(index - 1, -1, -1):
            yield self.buffer.get_line(i)


# =============================================================================
# Convenience Function
# =============================================================================

def format_text(
    text: str,
    config: Optional[IndentConfig] = None,
    table: Optional[MnemonicTable] = None,
    classify: Optional[Classifier] = None,
    on_error: ErrorPolicy = ErrorPolicy.SKIP,
) -> str:
    """
    Format a whole source text.

    Args:
        text: Source text
        config: Column layout (defaults if None)
        table: Mnemonic table (a freshly seeded one if None)
        classify: Callback for unknown leading tokens
        on_error: Region error policy

    Returns:
        The formatted text
    """
    buffer = TextBuffer.from_text(text)
    Formatter(buffer, config, table, classify, on_error).format_region(0, buffer.line_count())
    return buffer.text()
