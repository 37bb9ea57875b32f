# =============================================================================
# test_renderer.py - Line Renderer Tests
# =============================================================================
# Tests for laying out a parsed line at the configured columns.
#
# Test coverage includes:
#   - Blank lines and the three comment weights
#   - Instruction column: fixed columns, comment adjustments, indent_self
#   - Labels in column 0 and nested labels
#   - Operand columns, overflow and upper-casing of directives and macros
#   - Right-aligned trailing comments
# =============================================================================

import pytest
from dsp56k_fmt.config import IndentConfig
from dsp56k_fmt.mnemonics import MnemonicTable
from dsp56k_fmt.normalizer import normalize
from dsp56k_fmt.parser import parse_line
from dsp56k_fmt.renderer import extract_adjustment, instruction_column, render_line


@pytest.fixture
def table():
    return MnemonicTable.default()


@pytest.fixture
def render(table):
    """Parse, normalise and render one line with the default columns."""
    config = IndentConfig()

    def _render(text: str, base: int = 4) -> str:
        return render_line(normalize(parse_line(text, table)), base, config, table)

    return _render


# =============================================================================
# Comment Adjustment Tests
# =============================================================================

class TestAdjustment:
    """Test the ;N; column adjustment."""

    def test_positive(self):
        assert extract_adjustment(";+4; wider") == 4

    def test_unsigned(self):
        assert extract_adjustment("; keep ;3; here") == 3

    def test_negative(self):
        assert extract_adjustment(";;-12;") == -12

    def test_none(self):
        assert extract_adjustment("; plain") == 0
        assert extract_adjustment("; 3; spaced") == 0
        assert extract_adjustment(None) == 0


# =============================================================================
# Blank and Comment Line Tests
# =============================================================================

class TestCommentLines:
    """Test comment-only and blank lines."""

    def test_blank_line_pads_to_base(self, render):
        assert render("", 6) == "      "

    def test_page_break_line(self, render):
        assert render("  \f", 6) == "\f"

    def test_heavy_comment_flush_left(self, render):
        assert render("      ;;; Filter section", 8) == ";;; Filter section"

    def test_light_comment_at_base(self, render):
        assert render(";; setup", 6) == "      ;; setup"

    def test_light_comment_adjusted(self, render):
        assert render(";;-2; note", 6) == "    ;;-2; note"

    def test_light_comment_never_negative(self, render):
        assert render(";;-9; note", 4) == ";;-9; note"

    def test_plain_comment_at_comment_column(self, render):
        assert render("  ; note", 6) == " " * 50 + "; note"


# =============================================================================
# Instruction Column Tests
# =============================================================================

class TestInstructionColumn:
    """Test the final instruction column."""

    def test_base_column(self, render):
        assert render(" nop", 6) == "      nop"

    def test_comment_adjustment(self, render):
        assert render(" nop ;+2;", 6) == "        nop".ljust(76) + ";+2;"

    def test_fixed_column_overrides_base(self, render):
        assert render("  org p:$100 ;-2;", 10) == "  ORG".ljust(14) + "p:$100".ljust(62) + ";-2;"

    def test_indent_self_clamped_to_column_one(self, render):
        assert render("  endif", 0) == " ENDIF"

    def test_closer_steps_back(self, render):
        assert render("  endm", 6) == "    ENDM"

    def test_instruction_column_function(self, table):
        parsed = parse_line("  else ;+1;")
        assert instruction_column(parsed, 6, table.lookup("else")) == 5
        assert instruction_column(parsed, 6, None) == 7


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label placement."""

    def test_top_level_label_alone(self, render):
        assert render("_end0:", 6) == "_end0"

    def test_top_level_label_with_instruction(self, render):
        assert render("lp nop", 4) == "lp  nop"

    def test_long_label_pushes_instruction(self, render):
        assert render("loop nop", 4) == "loop nop"

    def test_nested_label(self, render):
        assert render(" _end1:", 6) == "    _end1:"

    def test_nested_label_stays_off_column_zero(self, render):
        assert render(" _x:", 2) == " _x:"

    def test_nested_label_with_instruction(self, render):
        assert render("   _x: nop", 8) == "      _x: nop"


# =============================================================================
# Operand Layout Tests
# =============================================================================

class TestOperands:
    """Test operand columns, case and trailing comments."""

    def test_all_columns(self, render):
        result = render("  mac x0,y0,a x:(r0)+,x0 y:(r4)+,y0", 4)
        assert result == (
            "    mac".ljust(14) + "x0,y0,a".ljust(10) + "x:(r0)+,x0".ljust(13) + "y:(r4)+,y0"
        )

    def test_move_operands_use_move_columns(self, render):
        assert render(" move a,x:(r0)+", 6) == "      move".ljust(24) + "a,x:(r0)+"

    def test_instruction_case_preserved(self, render):
        assert render("  MAC x0,y0,a", 4) == "    MAC       x0,y0,a"

    def test_directive_upper_cased(self, render):
        assert render("  dc 1,2", 4) == "    DC        1,2"

    def test_macro_upper_cased(self, table, render):
        table.register_macro("save_regs")
        assert render(" save_regs r0", 4) == "    SAVE_REGS r0"

    def test_long_operand_list_stays_one_field(self, render):
        result = render("  jclr #3,x:$ffe9,_wait_for_transmit", 4)
        assert result == "    jclr      #3,x:$ffe9,_wait_for_transmit"

    def test_overflowing_field_gets_one_space(self, render):
        result = render(" move #$123456,x:(r0)+ y:(r4)+,y0", 4)
        assert result == "    move".ljust(24) + "#$123456,x:(r0)+ y:(r4)+,y0"

    def test_wide_instruction_gets_one_space(self, table, render):
        table.register_macro("initialise_codec")
        assert render(" initialise_codec 1", 4) == "    INITIALISE_CODEC 1"


class TestTrailingComment:
    """Test trailing comment placement."""

    def test_right_aligned(self, render):
        result = render(" do #1,_end0 ;comment a", 4)
        assert result == "    do        #1,_end0".ljust(70) + ";comment a"
        assert len(result) == 80

    def test_long_comment_at_comment_column(self, render):
        comment = ";" + "x" * 39
        assert render(" nop " + comment, 4) == "    nop".ljust(50) + comment

    def test_comment_after_long_code(self, render):
        code = "  mac x0,y0,a x:(r0)+,x0 y:(r4)+,y0_long_long_long_long"
        comment = "; twenty characters."
        result = render(code + " " + comment, 4)
        expected_code = (
            "    mac".ljust(14) + "x0,y0,a".ljust(10) + "x:(r0)+,x0".ljust(13)
            + "y:(r4)+,y0_long_long_long_long"
        )
        assert result == expected_code + " " + comment

    def test_custom_columns(self, table):
        config = IndentConfig(8, 16, 28, 42, 56, 72)
        parsed = normalize(parse_line(" nop ; idle", table))
        assert render_line(parsed, 8, config, table) == "        nop".ljust(66) + "; idle"
