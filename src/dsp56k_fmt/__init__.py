"""
dsp56k-fmt - Source Formatter for DSP56000 Assembly
===================================================

This package reformats Motorola DSP56000/DSP56300 assembly source into a
canonical column layout:

    label   instruction  args  pmove1  pmove2          ;comment

Block structure (``do`` loops, ``if``/``else``/``endif``, ``macro``/``endm``)
is indented from the rendered text of the lines above, using per-mnemonic
indent metadata.

Main Components
---------------
- **mnemonics**: Mnemonic metadata table (instructions, directives, macros)
- **parser**: Splits a source line into its six fields
- **normalizer**: Orders parallel moves X before Y
- **resolver**: Infers the base column from the lines above
- **renderer**: Lays the fields out at the configured columns
- **formatter**: Drives the pipeline over a text buffer

Quick Start
-----------
Format a file:
    >>> from dsp56k_fmt import format_text
    >>> formatted = format_text(open("filter.asm").read())

Parse a line:
    >>> from dsp56k_fmt import parse_line
    >>> parse_line("loop  mac x0,y0,a x:(r0)+,x0 y:(r4)+,y0").pmove2
    'y:(r4)+,y0'

Or use the command-line tools:
    $ dspfmt -i filter.asm
    $ dspparse filter.asm
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from dsp56k_fmt.config import IndentConfig
from dsp56k_fmt.errors import (
    FormatterError,
    ParseError,
    ConfigError,
    SourceLocation,
)
from dsp56k_fmt.mnemonics import (
    MnemonicInfo,
    MnemonicTable,
    CONDITION_CODES,
    expand_condition_codes,
)
from dsp56k_fmt.parser import (
    ParsedLine,
    LineParser,
    Classifier,
    parse_line,
    accept_all,
    decline_all,
)
from dsp56k_fmt.normalizer import normalize
from dsp56k_fmt.resolver import IndentResolver, resolve_indent
from dsp56k_fmt.renderer import render_line, extract_adjustment
from dsp56k_fmt.formatter import (
    SourceBuffer,
    TextBuffer,
    Formatter,
    FormatReport,
    ErrorPolicy,
    format_text,
)

__all__ = [
    "__version__",
    # Configuration
    "IndentConfig",
    # Exception hierarchy
    "FormatterError",
    "ParseError",
    "ConfigError",
    "SourceLocation",
    # Metadata table
    "MnemonicInfo",
    "MnemonicTable",
    "CONDITION_CODES",
    "expand_condition_codes",
    # Parser
    "ParsedLine",
    "LineParser",
    "Classifier",
    "parse_line",
    "accept_all",
    "decline_all",
    # Pipeline stages
    "normalize",
    "IndentResolver",
    "resolve_indent",
    "render_line",
    "extract_adjustment",
    # Formatter
    "SourceBuffer",
    "TextBuffer",
    "Formatter",
    "FormatReport",
    "ErrorPolicy",
    "format_text",
]
