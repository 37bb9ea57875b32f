"""
Indent Resolver
===============

Computes the base column of a line from the text of the lines already
rendered above it. There is no block stack: nesting is inferred from the
rendered columns plus the per-mnemonic indent deltas.

The lines above are scanned most recent first; the first rule that
matches wins:

| Rule | Previous line                      | Base column                   |
|------|------------------------------------|-------------------------------|
| a    | instruction with a fixed column    | fixed column + indent_next    |
| b    | any other instruction              | its column + indent_next      |
| c    | label only                         | its column (0 -> instruction) |
| d    | light comment (exactly ";;")       | its comment column            |
| e    | anything else                      | keep scanning                 |

With no match the configured instruction column is used.

Example
-------
    do      #1,_end0        base 4 (top of file)
      nop                   base 6 (do has indent_next=2)
_end0                       label in column 0
    nop                     base 4 (configured instruction column)
"""

from typing import Iterable, Optional, Sequence
import logging

from dsp56k_fmt.config import IndentConfig
from dsp56k_fmt.errors import ParseError
from dsp56k_fmt.mnemonics import MnemonicTable
from dsp56k_fmt.parser import LIGHT_COMMENT, LineParser, ParsedLine, comment_level


logger = logging.getLogger(__name__)


class IndentResolver:
    """
    Resolves base columns by scanning previously rendered lines.

    The resolver re-parses earlier lines without a classifier, so it never
    prompts and never registers macros; a line that does not parse is
    skipped as if it carried no indentation information.

    Attributes:
        table: Mnemonic table shared with the formatter
        config: Column layout
    """

    def __init__(self, table: MnemonicTable, config: IndentConfig):
        self.table = table
        self.config = config
        self._parser = LineParser(table)

    def resolve(self, previous_lines: Iterable[str]) -> int:
        """
        Compute the base column for the next line.

        Args:
            previous_lines: Rendered lines above the current one, most
                recent first. Consumed lazily; scanning stops at the first
                matching line.

        Returns:
            A non-negative column
        """
        for distance, text in enumerate(previous_lines, start=1):
            try:
                parsed = self._parser.parse(text)
            except ParseError:
                logger.debug(f"Skipping unparseable line {distance} back: {text!r}")
                continue

            column = self.match(parsed)
            if column is not None:
                logger.debug(f"Base column {column} from line {distance} back")
                return max(0, column)

        return self.config.instruction_column

    def match(self, parsed: ParsedLine) -> Optional[int]:
        """
        Apply the resolution rules to one earlier line.

        Returns:
            The base column this line grants, or None to keep scanning
        """
        if parsed.instruction is not None:
            info = self.table.lookup(parsed.instruction)
            indent_next = (info.indent_next or 0) if info is not None else 0
            if info is not None and info.indent_fixed is not None:
                return info.indent_fixed + indent_next
            return parsed.instruction_column + indent_next

        if parsed.label is not None:
            return parsed.label_column or self.config.instruction_column

        if parsed.is_comment_only and comment_level(parsed.comment) == LIGHT_COMMENT:
            return parsed.comment_column

        return None


def resolve_indent(
    history: Sequence[str],
    table: Optional[MnemonicTable] = None,
    config: Optional[IndentConfig] = None,
) -> int:
    """
    Resolve the base column following a list of rendered lines.

    Args:
        history: Rendered lines, oldest first
        table: Mnemonic table (a freshly seeded one if None)
        config: Column layout (defaults if None)
    """
    resolver = IndentResolver(table or MnemonicTable.default(), config or IndentConfig())
    return resolver.resolve(reversed(history))
