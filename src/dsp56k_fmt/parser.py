"""
DSP56000 Source Line Parser
===========================

This module splits one line of DSP56000 assembly source into the six
fields the formatter lays out in columns:

    label  instruction  args  pmove1  pmove2  ;comment

```asm
_loop   mac     x0,y0,a   x:(r0)+,x0   y:(r4)+,y0    ; filter tap
```

Every field is optional and records the column it started in. Columns
are 0-indexed and computed after tab expansion (tab stops every 8).

Field Rules
-----------
1. **Label**: an identifier in column 0 (optionally followed by ``:``),
   or an indented identifier immediately followed by ``:``
2. **Comment-only**: if nothing but whitespace or a ``;`` comment
   follows, the rest of the line is the comment and nothing else is parsed
3. **Instruction**: the next token, looked up case-insensitively in the
   mnemonic table. Unknown tokens are offered to a classification
   callback; accepting registers a new macro, declining raises ParseError
4. **Operands**: up to three whitespace-separated fields (args, pmove1,
   pmove2). A single-quoted literal is atomic; a trailing comma continues
   the current field across whitespace
5. **Comment**: any remaining ``;`` text

Example
-------
>>> from dsp56k_fmt.parser import parse_line
>>> p = parse_line("  asl a x:(r0)+,x0   y:(r4)+,y0 ; shift")
>>> p.instruction, p.args, p.pmove1, p.pmove2, p.comment
('asl', 'a', 'x:(r0)+,x0', 'y:(r4)+,y0', '; shift')
"""

from dataclasses import dataclass, replace
from typing import Callable, Iterator, Optional
import logging
import string

from dsp56k_fmt.errors import ParseError, SourceLocation
from dsp56k_fmt.mnemonics import MnemonicInfo, MnemonicTable


logger = logging.getLogger(__name__)


COMMENT_MARKER = ";"
QUOTE = "'"
TAB_SIZE = 8
PAGE_BREAK = "\f"

# Decides whether an unknown leading token is a user macro
Classifier = Callable[[str], bool]


LIGHT_COMMENT = 2   # ";;" follows the code indentation
HEAVY_COMMENT = 3   # ";;;" and more sit flush left


def comment_level(comment: Optional[str]) -> int:
    """Number of leading comment markers (0 for no comment)."""
    if not comment:
        return 0
    return len(comment) - len(comment.lstrip(COMMENT_MARKER))


def accept_all(token: str) -> bool:
    """Classifier that accepts every unknown token as a macro."""
    return True


def decline_all(token: str) -> bool:
    """Classifier that declines every unknown token."""
    return False


# =============================================================================
# Parsed Line
# =============================================================================

@dataclass
class ParsedLine:
    """
    The fields of one source line.

    Built fresh for every line on every pass; never cached.

    Attributes:
        label: Label name without its colon
        label_column: Column the label started in
        label_colon: True if the label was written with a trailing ':'
        instruction: Instruction, directive or macro as written
        instruction_column: Column the instruction started in
        args: Argument field (may be a comma-separated list)
        args_column: Column the argument field started in
        pmove1: First parallel-move field
        pmove1_column: Column of pmove1
        pmove2: Second parallel-move field
        pmove2_column: Column of pmove2
        comment: Comment text, always starting with ';'
        comment_column: Column the comment started in
        page_break: True for a blank line holding a form feed
    """
    label: Optional[str] = None
    label_column: Optional[int] = None
    label_colon: bool = False
    instruction: Optional[str] = None
    instruction_column: Optional[int] = None
    args: Optional[str] = None
    args_column: Optional[int] = None
    pmove1: Optional[str] = None
    pmove1_column: Optional[int] = None
    pmove2: Optional[str] = None
    pmove2_column: Optional[int] = None
    comment: Optional[str] = None
    comment_column: Optional[int] = None
    page_break: bool = False

    @property
    def is_blank(self) -> bool:
        """No fields at all (an empty or whitespace-only line)."""
        return self.label is None and self.instruction is None and self.comment is None

    @property
    def is_comment_only(self) -> bool:
        """Only a comment, no label or instruction."""
        return self.label is None and self.instruction is None and self.comment is not None

    def fields(self) -> Iterator[tuple[str, str, int]]:
        """Yield (field name, text, column) for every present field."""
        for name in ("label", "instruction", "args", "pmove1", "pmove2", "comment"):
            value = getattr(self, name)
            if value is not None:
                yield name, value, getattr(self, f"{name}_column")

    def copy(self) -> "ParsedLine":
        return replace(self)


# =============================================================================
# Line Scanner
# =============================================================================

class _LineScanner:
    """Character cursor over a single line."""

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos >= len(self.text):
            return ""
        return self.text[pos]

    def advance(self) -> str:
        if self.at_end():
            return ""
        char = self.text[self.pos]
        self.pos += 1
        return char

    def skip_whitespace(self) -> None:
        # Note: '' in string.whitespace is True, so check for non-empty first
        while self.peek() and self.peek() in string.whitespace:
            self.pos += 1

    def at_comment(self) -> bool:
        return self.peek() == COMMENT_MARKER

    def scan_identifier(self) -> Optional[str]:
        """Consume an identifier at the cursor, if there is one."""
        if not (self.peek() and self.peek() in self.IDENT_START):
            return None
        start = self.pos
        while self.peek() and self.peek() in self.IDENT_CHARS:
            self.pos += 1
        return self.text[start:self.pos]

    def scan_token(self) -> str:
        """Consume a run of non-whitespace, non-comment characters."""
        start = self.pos
        while self.peek() and self.peek() not in string.whitespace and not self.at_comment():
            self.pos += 1
        return self.text[start:self.pos]

    def scan_quoted(self) -> None:
        """
        Consume a single-quoted literal.

        An unterminated literal runs to the end of the line.
        """
        self.advance()  # opening quote
        while not self.at_end() and self.peek() != QUOTE:
            self.advance()
        self.advance()  # closing quote, if any

    def scan_field(self, greedy: bool = False) -> str:
        """
        Consume one operand field.

        The field ends at whitespace, unless the whitespace follows a comma
        (operand list continues) or greedy is set (last field swallows
        everything up to the comment). It always ends at a comment marker
        outside a quoted literal.
        """
        start = self.pos
        while not self.at_end():
            char = self.peek()
            if char == QUOTE:
                self.scan_quoted()
                continue
            if char == COMMENT_MARKER:
                break
            if char in string.whitespace:
                ahead = self.pos
                while ahead < len(self.text) and self.text[ahead] in string.whitespace:
                    ahead += 1
                if ahead >= len(self.text) or self.text[ahead] == COMMENT_MARKER:
                    break
                if greedy or self.text[self.pos - 1] == ",":
                    self.pos = ahead
                    continue
                break
            self.advance()
        return self.text[start:self.pos].rstrip()


def _verbatim(raw: str, column: int) -> str:
    """
    Text of the unexpanded line from a column of its tab-expanded form.

    Columns count tabs to the next multiple of TAB_SIZE; the returned text
    keeps its tabs. Trailing whitespace is trimmed.
    """
    current = 0
    for index, char in enumerate(raw):
        if current >= column:
            return raw[index:].rstrip()
        current = (current // TAB_SIZE + 1) * TAB_SIZE if char == "\t" else current + 1
    return ""


# =============================================================================
# Parser Implementation
# =============================================================================

class LineParser:
    """
    Parses source lines into ParsedLine records.

    The parser shares the formatter's mnemonic table. When the classifier
    accepts an unknown leading token, the token is registered as a macro
    in that table and stays known for every later line.

    Usage:
        parser = LineParser(MnemonicTable.default(), classify=accept_all)
        parsed = parser.parse("loop  do  #16,_end")

    Attributes:
        table: Mnemonic table used for classification
        classify: Callback for unknown leading tokens (None declines)
        filename: Name used in error locations
    """

    def __init__(
        self,
        table: MnemonicTable,
        classify: Optional[Classifier] = None,
        filename: str = "<input>",
    ):
        self.table = table
        self.classify = classify
        self.filename = filename

    def parse(self, text: str, line_number: Optional[int] = None) -> ParsedLine:
        """
        Parse one line of source.

        Args:
            text: Raw line text (without line terminator)
            line_number: 1-indexed line number for error messages

        Returns:
            The parsed fields

        Raises:
            ParseError: If the leading token is unknown and not accepted
        """
        raw = text.rstrip("\r\n")
        text = raw.expandtabs(TAB_SIZE)
        scanner = _LineScanner(text)
        parsed = ParsedLine()

        self._parse_label(scanner, parsed)

        # Comment-only (or label-only) line
        scanner.skip_whitespace()
        if scanner.at_end() or scanner.at_comment():
            if not scanner.at_end():
                parsed.comment = _verbatim(raw, scanner.pos)
                parsed.comment_column = scanner.pos
            elif parsed.label is None and PAGE_BREAK in raw:
                parsed.page_break = True
            return parsed

        # Instruction
        column = scanner.pos
        token = scanner.scan_token()
        self._classify(token, column, text, line_number)
        parsed.instruction = token
        parsed.instruction_column = column

        # Operand fields
        for name in ("args", "pmove1", "pmove2"):
            scanner.skip_whitespace()
            if scanner.at_end() or scanner.at_comment():
                break
            column = scanner.pos
            value = scanner.scan_field(greedy=(name == "pmove2"))
            setattr(parsed, name, value)
            setattr(parsed, f"{name}_column", column)

        # Trailing comment
        scanner.skip_whitespace()
        if scanner.at_comment():
            parsed.comment_column = scanner.pos
            parsed.comment = _verbatim(raw, scanner.pos)

        return parsed

    def _parse_label(self, scanner: _LineScanner, parsed: ParsedLine) -> None:
        """Recognise a label at the start of the line."""
        if scanner.peek() and scanner.peek() not in string.whitespace:
            # Column 0: any identifier is a label
            name = scanner.scan_identifier()
            if name is None:
                return
            colon = scanner.peek() == ":"
            if colon:
                scanner.advance()
            if (not colon and scanner.peek()
                    and scanner.peek() not in string.whitespace and not scanner.at_comment()):
                # Not a clean label (e.g. "abc+1"); leave it for the instruction
                scanner.pos = 0
                return
            parsed.label, parsed.label_column, parsed.label_colon = name, 0, colon
            return

        # Indented: only "name:" is a label
        scanner.skip_whitespace()
        start = scanner.pos
        name = scanner.scan_identifier()
        if name is not None and scanner.peek() == ":":
            scanner.advance()
            parsed.label, parsed.label_column, parsed.label_colon = name, start, True
        else:
            scanner.pos = start

    def _classify(
        self,
        token: str,
        column: int,
        text: str,
        line_number: Optional[int],
    ) -> MnemonicInfo:
        """Resolve the leading token, asking the classifier if unknown."""
        info = self.table.lookup(token)
        if info is not None and not info.is_function:
            return info

        if self.classify is not None and self.classify(token):
            logger.debug(f"Registered macro '{token.lower()}'")
            return self.table.register_macro(token)

        location = None
        if line_number is not None:
            location = SourceLocation(self.filename, line_number, column)
        raise ParseError(
            "cannot classify line",
            token=token,
            location=location,
            hint=f"'{token}' is not a known instruction, directive or macro",
            source_line=text,
        )


# =============================================================================
# Convenience Function
# =============================================================================

def parse_line(
    text: str,
    table: Optional[MnemonicTable] = None,
    classify: Optional[Classifier] = None,
) -> ParsedLine:
    """
    Parse a single line without a formatter.

    Used by tooling that needs field boundaries but no rendering.

    Args:
        text: Raw line text
        table: Mnemonic table (a freshly seeded one if None)
        classify: Callback for unknown leading tokens

    Returns:
        The parsed fields
    """
    if table is None:
        table = MnemonicTable.default()
    return LineParser(table, classify).parse(text)
