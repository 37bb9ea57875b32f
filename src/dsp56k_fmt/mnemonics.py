"""
DSP56000 Mnemonic Metadata
==========================

This module defines the metadata table the formatter consults to classify
the leading token of a line and to decide how that line, and the line
after it, are indented.

The table covers three kinds of mnemonic:

1. **Instructions**: DSP56000/DSP56300 machine instructions
   - Data ALU instructions may carry up to two parallel moves
     (e.g. ``mac x0,y0,a x:(r0)+,x0 y:(r4)+,y0``)
   - Conditional families (``jcc``, ``tcc``, ...) are expanded into one
     entry per condition code

2. **Directives**: Motorola DSP assembler directives (``org``, ``dc``,
   ``if``/``else``/``endif``, ``macro``/``endm``, ...)

3. **Built-in functions**: assembler functions such as ``@def`` or
   ``@cvi``; carried so that other tooling can classify them

User macros are added at runtime once confirmed, through
``MnemonicTable.register_macro``.

Indent Metadata
---------------
Block structure is expressed with three optional per-mnemonic values:

| Property     | Effect                                              |
|--------------|-----------------------------------------------------|
| indent_next  | added to this line's column to indent the next line |
| indent_self  | added to this line's own resolved column            |
| indent_fixed | this line always renders at the given column        |

Openers (``do``, ``if``, ``macro``, ``dup``) grant +2 to the following
line; closers (``endif``, ``endm``) pull themselves back by -2 and
``else`` does both.

Reference
---------
- Motorola DSP56000 Family Manual, Appendix A (instruction set)
- Motorola DSP Assembler Reference Manual (directives and functions)
"""

from dataclasses import dataclass, replace
from typing import Iterator, Optional

from dsp56k_fmt.config import DEFAULT_INSTRUCTION_COLUMN


# =============================================================================
# Mnemonic Information
# =============================================================================

@dataclass(frozen=True)
class MnemonicInfo:
    """
    Properties of one mnemonic.

    This dataclass is immutable (frozen); the table replaces entries
    rather than mutating them.

    Attributes:
        name: Lowercase mnemonic
        is_instruction: Machine instruction
        is_directive: Assembler directive
        is_macro: User macro (registered at runtime)
        is_function: Assembler built-in function (``@name``)
        argc: Number of comma-separated operands, None when variable/unknown
        has_parallel_move: Instruction accepts parallel moves
        indent_next: Column delta granted to the following line
        indent_self: Column delta applied to this line
        indent_fixed: Column this mnemonic always renders at
    """
    name: str
    is_instruction: bool = False
    is_directive: bool = False
    is_macro: bool = False
    is_function: bool = False
    argc: Optional[int] = None
    has_parallel_move: bool = False
    indent_next: Optional[int] = None
    indent_self: Optional[int] = None
    indent_fixed: Optional[int] = None

    @property
    def upper_case(self) -> bool:
        """Directives and macros are rendered in upper case."""
        return self.is_directive or self.is_macro


# =============================================================================
# Condition Codes
# =============================================================================
# The "cc" suffix of a conditional family is replaced with each of these.
# "hs" and "lo" are aliases of "cc" and "cs".
# =============================================================================

CONDITION_CODES: tuple[str, ...] = (
    "cc", "hs", "cs", "lo", "ec", "eq", "es", "ge", "gt",
    "lc", "le", "ls", "lt", "mi", "ne", "nn", "nr", "pl",
)


def expand_condition_codes(stem: str) -> list[str]:
    """
    Expand a conditional family stem into concrete mnemonics.

    Args:
        stem: Family name ending in "cc" (e.g. "jscc")

    Returns:
        One mnemonic per condition code, e.g. ["jscc", "jshs", "jscs", ...]

    Raises:
        ValueError: If the stem does not end in "cc"
    """
    stem = stem.lower()
    if not stem.endswith("cc"):
        raise ValueError(f"conditional family '{stem}' must end in 'cc'")
    base = stem[:-2]
    return [base + code for code in CONDITION_CODES]


# =============================================================================
# Instruction Set
# =============================================================================
# Key: mnemonic
# Value: (argc, has_parallel_move)
# =============================================================================

INSTRUCTIONS: dict[str, tuple[Optional[int], bool]] = {
    # Data ALU instructions with parallel moves
    "abs": (1, True),
    "adc": (2, True),
    "add": (2, True),
    "addl": (2, True),
    "addr": (2, True),
    "and": (2, True),
    "asl": (1, True),
    "asr": (1, True),
    "clr": (1, True),
    "cmp": (2, True),
    "cmpm": (2, True),
    "eor": (2, True),
    "lsl": (1, True),
    "lsr": (1, True),
    "mac": (3, True),
    "macr": (3, True),
    "max": (2, True),
    "maxm": (2, True),
    "move": (0, True),     # Parallel moves only
    "mpy": (3, True),
    "mpyr": (3, True),
    "neg": (1, True),
    "not": (1, True),
    "or": (2, True),
    "rnd": (1, True),
    "rol": (1, True),
    "ror": (1, True),
    "sbc": (2, True),
    "sub": (2, True),
    "subl": (2, True),
    "subr": (2, True),
    "tfr": (2, True),
    "tst": (1, True),

    # Arithmetic without parallel moves
    "clb": (2, False),
    "cmpu": (2, False),
    "dec": (1, False),
    "div": (2, False),
    "dmac": (3, False),
    "inc": (1, False),
    "macsu": (3, False),
    "macuu": (3, False),
    "mpysu": (3, False),
    "mpyuu": (3, False),
    "norm": (2, False),
    "normf": (2, False),

    # Logical and bit field
    "andi": (2, False),
    "ori": (2, False),
    "extract": (3, False),
    "extractu": (3, False),
    "insert": (3, False),
    "merge": (2, False),

    # Bit manipulation
    "bchg": (2, False),
    "bclr": (2, False),
    "bset": (2, False),
    "btst": (2, False),

    # Program control
    "bra": (1, False),
    "brclr": (3, False),
    "brset": (3, False),
    "bsclr": (3, False),
    "bsr": (1, False),
    "bsset": (3, False),
    "do": (2, False),
    "dor": (2, False),
    "enddo": (0, False),
    "jclr": (3, False),
    "jmp": (1, False),
    "jsclr": (3, False),
    "jset": (3, False),
    "jsr": (1, False),
    "jsset": (3, False),
    "rep": (1, False),
    "rti": (0, False),
    "rts": (0, False),

    # Moves
    "lra": (2, False),
    "lua": (2, False),
    "movec": (2, False),
    "movem": (2, False),
    "movep": (2, False),
    "vsl": (2, False),

    # System and cache control
    "debug": (0, False),
    "illegal": (0, False),
    "nop": (0, False),
    "pflush": (0, False),
    "pflushun": (0, False),
    "pfree": (0, False),
    "plock": (1, False),
    "plockr": (1, False),
    "punlock": (1, False),
    "punlockr": (1, False),
    "reset": (0, False),
    "stop": (0, False),
    "swi": (0, False),
    "trap": (0, False),
    "wait": (0, False),
}

# Conditional families, expanded with expand_condition_codes()
CONDITIONAL_FAMILIES: dict[str, Optional[int]] = {
    "bcc": 1,
    "bscc": 1,
    "brkcc": 0,
    "debugcc": 0,
    "jcc": 1,
    "jscc": 1,
    "tcc": 2,
    "trapcc": 0,
}


# =============================================================================
# Directives
# =============================================================================
# Key: directive
# Value: (indent_next, indent_self, indent_fixed)
# =============================================================================

BLOCK_INDENT = 2

DIRECTIVES: dict[str, tuple[Optional[int], Optional[int], Optional[int]]] = {
    # Block openers
    "dup": (BLOCK_INDENT, None, None),
    "dupa": (BLOCK_INDENT, None, None),
    "dupc": (BLOCK_INDENT, None, None),
    "dupf": (BLOCK_INDENT, None, None),
    "if": (BLOCK_INDENT, None, None),
    "macro": (BLOCK_INDENT, None, None),
    "pmacro": (None, None, None),

    # Block closers
    "else": (BLOCK_INDENT, -BLOCK_INDENT, None),
    "endif": (None, -BLOCK_INDENT, None),
    "endm": (None, -BLOCK_INDENT, None),
    "exitm": (None, None, None),

    # Program structure, always at the top-level instruction column
    "end": (None, None, DEFAULT_INSTRUCTION_COLUMN),
    "endsec": (None, None, DEFAULT_INSTRUCTION_COLUMN),
    "org": (None, None, DEFAULT_INSTRUCTION_COLUMN),
    "section": (None, None, DEFAULT_INSTRUCTION_COLUMN),

    # Symbols
    "define": (None, None, None),
    "equ": (None, None, None),
    "global": (None, None, None),
    "gset": (None, None, None),
    "local": (None, None, None),
    "set": (None, None, None),
    "undef": (None, None, None),
    "xdef": (None, None, None),
    "xref": (None, None, None),

    # Data definition and storage
    "baddr": (None, None, None),
    "bsb": (None, None, None),
    "bsc": (None, None, None),
    "bsm": (None, None, None),
    "buffer": (None, None, None),
    "dc": (None, None, None),
    "dcb": (None, None, None),
    "ds": (None, None, None),
    "dsm": (None, None, None),
    "dsr": (None, None, None),
    "endbuf": (None, None, None),

    # Assembly control
    "comment": (None, None, None),
    "fail": (None, None, None),
    "force": (None, None, None),
    "himem": (None, None, None),
    "include": (None, None, None),
    "lomem": (None, None, None),
    "maclib": (None, None, None),
    "mode": (None, None, None),
    "msg": (None, None, None),
    "radix": (None, None, None),
    "rdirect": (None, None, None),
    "scsjmp": (None, None, None),
    "scsreg": (None, None, None),
    "warn": (None, None, None),

    # Listing control
    "cobj": (None, None, None),
    "ident": (None, None, None),
    "list": (None, None, None),
    "lstcol": (None, None, None),
    "nolist": (None, None, None),
    "opt": (None, None, None),
    "page": (None, None, None),
    "prctl": (None, None, None),
    "stitle": (None, None, None),
    "symobj": (None, None, None),
    "tabs": (None, None, None),
    "title": (None, None, None),
}


# =============================================================================
# Built-in Functions
# =============================================================================

FUNCTIONS: frozenset[str] = frozenset({
    "@abs", "@acs", "@arg", "@asn", "@at2", "@atn", "@cel", "@chk",
    "@cnt", "@coh", "@cos", "@ctr", "@cvf", "@cvi", "@cvs", "@def",
    "@exp", "@fld", "@flr", "@frc", "@int", "@l10", "@lcv", "@len",
    "@lfr", "@lng", "@log", "@lst", "@lun", "@mac", "@max", "@min",
    "@msp", "@mxp", "@pos", "@pow", "@rel", "@rnd", "@rvb", "@scp",
    "@sgn", "@sin", "@snh", "@sqt", "@tan", "@tnh", "@unf", "@xpn",
})

# Loop instructions open a block closed by their end label
LOOP_INSTRUCTIONS: frozenset[str] = frozenset({"do", "dor"})


# =============================================================================
# Mnemonic Table
# =============================================================================

class MnemonicTable:
    """
    Case-insensitive registry of mnemonic metadata.

    One table is owned by each Formatter and passed by reference to the
    parser and the indent resolver. The only mutation after seeding is
    the registration of user macros, which persists for the lifetime of
    the table.

    Usage:
        table = MnemonicTable.default()
        table.lookup("MOVE").has_parallel_move   # True
        table.register_macro("save_regs")
    """

    def __init__(self) -> None:
        self._entries: dict[str, MnemonicInfo] = {}

    @classmethod
    def default(cls) -> "MnemonicTable":
        """Create a table seeded with every known mnemonic."""
        table = cls()
        table._seed()
        return table

    def _seed(self) -> None:
        for name, (argc, pmove) in INSTRUCTIONS.items():
            self.register(name, MnemonicInfo(
                name=name,
                is_instruction=True,
                argc=argc,
                has_parallel_move=pmove,
                indent_next=BLOCK_INDENT if name in LOOP_INSTRUCTIONS else None,
            ))

        for stem, argc in CONDITIONAL_FAMILIES.items():
            for name in expand_condition_codes(stem):
                self.register(name, MnemonicInfo(
                    name=name, is_instruction=True, argc=argc,
                ))

        for name, (indent_next, indent_self, indent_fixed) in DIRECTIVES.items():
            self.register(name, MnemonicInfo(
                name=name,
                is_directive=True,
                indent_next=indent_next,
                indent_self=indent_self,
                indent_fixed=indent_fixed,
            ))

        for name in FUNCTIONS:
            self.register(name, MnemonicInfo(name=name, is_function=True))

    # =========================================================================
    # Registry Operations
    # =========================================================================

    def register(self, name: str, info: MnemonicInfo) -> MnemonicInfo:
        """
        Insert or overwrite an entry.

        Args:
            name: Mnemonic, any case
            info: Properties to store; its name is normalised to lowercase

        Returns:
            The stored MnemonicInfo
        """
        key = name.lower()
        if info.name != key:
            info = replace(info, name=key)
        self._entries[key] = info
        return info

    def register_macro(self, name: str) -> MnemonicInfo:
        """Register a confirmed user macro (argc unknown)."""
        return self.register(name, MnemonicInfo(name=name, is_macro=True))

    def lookup(self, name: str) -> Optional[MnemonicInfo]:
        """
        Look up a mnemonic case-insensitively.

        Returns:
            MnemonicInfo if known, None otherwise
        """
        return self._entries.get(name.lower())

    def copy(self) -> "MnemonicTable":
        """Return an independent table with the same entries."""
        other = MnemonicTable()
        other._entries = dict(self._entries)
        return other

    def macros(self) -> list[str]:
        """Names of all registered user macros, sorted."""
        return sorted(n for n, info in self._entries.items() if info.is_macro)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
