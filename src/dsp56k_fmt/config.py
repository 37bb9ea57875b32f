"""
Formatter Configuration
=======================

Column layout used when rendering lines. Configuration can come from:
- Default values (defined here)
- The DSPFMT_COLUMNS environment variable
- The --columns command-line option

A layout is six columns, in this order:

| Index | Field            | Default |
|-------|------------------|---------|
| 0     | instruction      | 4       |
| 1     | arguments        | 14      |
| 2     | parallel move 1  | 24      |
| 3     | parallel move 2  | 37      |
| 4     | comment          | 50      |
| 5     | line width       | 80      |

Comments are right-aligned against the line width when they fit and
otherwise start at the comment column.
"""

from dataclasses import astuple, dataclass
from typing import Iterator
import os

from dsp56k_fmt.errors import ConfigError


DEFAULT_INSTRUCTION_COLUMN = 4

ENV_COLUMNS = "DSPFMT_COLUMNS"


@dataclass(frozen=True)
class IndentConfig:
    """
    Column layout for rendered lines.

    The configuration is read once at the start of a formatting pass and
    is not modified during it, hence frozen. It also behaves as the
    ordered 6-tuple ``(instruction, args, pmove1, pmove2, comment, width)``.

    Attributes:
        instruction_column: Column of the instruction at top level
        args_column: Column of the argument field
        pmove1_column: Column of the first (X memory) parallel move
        pmove2_column: Column of the second (Y memory) parallel move
        comment_column: Earliest column of a trailing comment
        line_width: Column trailing comments are right-aligned against
    """

    instruction_column: int = DEFAULT_INSTRUCTION_COLUMN
    args_column: int = 14
    pmove1_column: int = 24
    pmove2_column: int = 37
    comment_column: int = 50
    line_width: int = 80

    def __post_init__(self) -> None:
        for name, value in zip(self._field_names(), astuple(self)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigError(f"{name} must not be negative, got {value}")

    @staticmethod
    def _field_names() -> tuple[str, ...]:
        return (
            "instruction_column", "args_column", "pmove1_column",
            "pmove2_column", "comment_column", "line_width",
        )

    # Tuple behaviour

    def __iter__(self) -> Iterator[int]:
        return iter(astuple(self))

    def __getitem__(self, index: int) -> int:
        return astuple(self)[index]

    def __len__(self) -> int:
        return 6

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_sequence(cls, columns) -> "IndentConfig":
        """
        Create a config from six integers.

        Raises:
            ConfigError: If there are not exactly six values
        """
        values = list(columns)
        if len(values) != 6:
            raise ConfigError(f"expected 6 columns, got {len(values)}")
        return cls(*values)

    @classmethod
    def parse(cls, text: str) -> "IndentConfig":
        """
        Parse a column spec such as "4,14,24,37,50,80".

        Whitespace around values is ignored; spaces may also separate
        values.

        Raises:
            ConfigError: If the spec is malformed
        """
        parts = [p for p in text.replace(",", " ").split() if p]
        try:
            values = [int(p) for p in parts]
        except ValueError:
            raise ConfigError(f"invalid column spec {text!r}: columns must be integers")
        return cls.from_sequence(values)

    @classmethod
    def from_env(cls) -> "IndentConfig":
        """
        Create an IndentConfig from the environment.

        Environment variables (optional):
            DSPFMT_COLUMNS: Six comma-separated columns

        Invalid values are ignored and the defaults used instead.
        """
        if spec := os.environ.get(ENV_COLUMNS):
            try:
                return cls.parse(spec)
            except ConfigError:
                pass  # Ignore invalid values
        return cls()

    def __str__(self) -> str:
        return ",".join(str(v) for v in self)
