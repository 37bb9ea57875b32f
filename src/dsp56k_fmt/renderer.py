"""
Line Renderer
=============

Turns a normalised ParsedLine and its resolved base column into the
replacement text for that line.

Line Kinds
----------
| Kind                      | Rendering                                     |
|---------------------------|-----------------------------------------------|
| blank                     | spaces up to the base column                  |
| page break (form feed)    | the form feed alone                           |
| heavy comment (";;;"...)  | flush left                                    |
| light comment (";;")      | at the base column (+ embedded adjustment)    |
| plain comment (";")       | at the comment column                         |
| code                      | fields at the configured columns              |

Code Lines
----------
The instruction column is computed in this order:

1. start from the resolved base column
2. replace it with the mnemonic's fixed column, if any
3. add the adjustment embedded in the comment (``;+2;``, ``;-4;``)
4. add the mnemonic's indent_self delta

A nested label sits two columns left of the instruction with a trailing
colon; a top-level label stays in column 0. Arguments and parallel moves
go to their configured columns, and a trailing comment is right-aligned
against the line width when it fits after the comment column.

Example (columns 4,14,24,37,50,80):

    "    do        #1,_end0                                          ;comment a"
"""

from typing import Optional
import re

from dsp56k_fmt.config import IndentConfig
from dsp56k_fmt.mnemonics import MnemonicInfo, MnemonicTable
from dsp56k_fmt.parser import (
    HEAVY_COMMENT,
    LIGHT_COMMENT,
    PAGE_BREAK,
    ParsedLine,
    comment_level,
)


# A signed integer between two comment markers, e.g. ";-2;"
ADJUSTMENT_PATTERN = re.compile(r";([+-]?\d+);")

# Distance between a nested label and its instruction
LABEL_OFFSET = 2


def extract_adjustment(comment: Optional[str]) -> int:
    """
    Return the column adjustment embedded in a comment.

    Args:
        comment: Comment text (may be None)

    Returns:
        The first ";<signed int>;" value found, or 0
    """
    if not comment:
        return 0
    match = ADJUSTMENT_PATTERN.search(comment)
    return int(match.group(1)) if match else 0


def _place(line: str, column: int, text: str) -> str:
    """Append text at column, or one space after the line if it is past it."""
    if len(line) < column:
        line = line + " " * (column - len(line))
    elif line:
        line = line + " "
    return line + text


def _place_comment(line: str, comment: str, config: IndentConfig) -> str:
    """Right-align a trailing comment against the line width when it fits."""
    start = config.line_width - len(comment)
    if start >= config.comment_column and start > len(line):
        return _place(line, start, comment)
    return _place(line, config.comment_column, comment)


def instruction_column(
    parsed: ParsedLine,
    base_column: int,
    info: Optional[MnemonicInfo],
) -> int:
    """Final column of the instruction field of a code line."""
    column = base_column
    if info is not None and info.indent_fixed is not None:
        column = info.indent_fixed
    column += extract_adjustment(parsed.comment)
    if info is not None and info.indent_self:
        column += info.indent_self
    # Column 0 belongs to labels
    return max(1, column)


def render_line(
    parsed: ParsedLine,
    base_column: int,
    config: IndentConfig,
    table: MnemonicTable,
) -> str:
    """
    Render one line.

    Args:
        parsed: Normalised fields of the line
        base_column: Column from the indent resolver
        config: Column layout
        table: Mnemonic table (for fixed columns, deltas and case)

    Returns:
        The replacement line text, without a line terminator
    """
    base_column = max(0, base_column)

    if parsed.is_blank:
        if parsed.page_break:
            return PAGE_BREAK
        return " " * base_column

    if parsed.is_comment_only:
        return _render_comment(parsed.comment, base_column, config)

    info = table.lookup(parsed.instruction) if parsed.instruction is not None else None
    column = instruction_column(parsed, base_column, info)

    line = ""
    if parsed.label is not None:
        if parsed.label_column == 0:
            line = parsed.label
        else:
            # Nested labels never reach column 0, where they would read as top level
            line = _place("", max(1, column - LABEL_OFFSET), parsed.label + ":")

    if parsed.instruction is not None:
        text = parsed.instruction
        if info is not None and info.upper_case:
            text = text.upper()
        line = _place(line, column, text)

        for value, target in (
            (parsed.args, config.args_column),
            (parsed.pmove1, config.pmove1_column),
            (parsed.pmove2, config.pmove2_column),
        ):
            if value is not None:
                line = _place(line, target, value)

    if parsed.comment is not None:
        line = _place_comment(line, parsed.comment, config)

    return line


def _render_comment(comment: str, base_column: int, config: IndentConfig) -> str:
    level = comment_level(comment)
    if level >= HEAVY_COMMENT:
        return comment
    if level == LIGHT_COMMENT:
        column = max(0, base_column + extract_adjustment(comment))
        return " " * column + comment
    return " " * config.comment_column + comment
