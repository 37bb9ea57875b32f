"""
Parallel-Move Normalizer
========================

Puts the two parallel-move slots of a parsed line into the canonical
X-then-Y order used by the column layout:

    mac  x0,y0,a   y:(r4)+,y0  x:(r0)+,x0      (as written)
    mac  x0,y0,a   x:(r0)+,x0  y:(r4)+,y0      (normalised)

A bare ``move`` has no ALU operation, so its operands are parallel moves
and are shifted one slot to the right before ordering:

    move  a,x:(r0)+              args="a,x:(r0)+"
    move  a,x:(r0)+              pmove1="a,x:(r0)+"
"""

from typing import Optional

from dsp56k_fmt.parser import ParsedLine


# Instruction whose operands are all parallel moves
GENERIC_MOVE = "move"

X_TAG = "x:"
Y_TAG = "y:"


def _has_tag(field: Optional[str], tag: str) -> bool:
    return field is not None and tag in field.lower()


def normalize(parsed: ParsedLine) -> ParsedLine:
    """
    Return a copy of the line with parallel moves in X/Y order.

    Args:
        parsed: Line as parsed

    Returns:
        A new ParsedLine; the input is not modified
    """
    line = parsed.copy()

    if line.instruction is not None and line.instruction.lower() == GENERIC_MOVE:
        overflow = line.pmove2
        line.pmove2, line.pmove2_column = line.pmove1, line.pmove1_column
        if overflow is not None and line.pmove2 is not None:
            # A third move field has no slot of its own; keep its text
            line.pmove2 = f"{line.pmove2} {overflow}"
        line.pmove1, line.pmove1_column = line.args, line.args_column
        line.args, line.args_column = None, None

    if _has_tag(line.pmove1, Y_TAG) or _has_tag(line.pmove2, X_TAG):
        line.pmove1, line.pmove2 = line.pmove2, line.pmove1
        line.pmove1_column, line.pmove2_column = line.pmove2_column, line.pmove1_column

    return line
