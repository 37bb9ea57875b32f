"""
Tests for the dspfmt and dspparse Command-Line Tools
====================================================

These tests drive the click commands through CliRunner against small
source files written to a temporary directory.
"""

import json

import pytest
from click.testing import CliRunner

from dsp56k_fmt import __version__
from dsp56k_fmt.cli.dspfmt import main as dspfmt
from dsp56k_fmt.cli.dspparse import main as dspparse, parse_file_fields
from dsp56k_fmt.config import ENV_COLUMNS
from dsp56k_fmt.mnemonics import MnemonicTable
from dsp56k_fmt.parser import LineParser


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_source(tmp_path):
    """Write an assembly file and return its path."""
    def _write(text: str, name: str = "prog.asm"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write


# =============================================================================
# dspfmt Output Modes
# =============================================================================

class TestDspfmtOutput:
    """Printing, in-place rewriting and checking."""

    def test_prints_formatted_source(self, runner, write_source):
        path = write_source(" do #1,_x\n nop\n_x\n")
        result = runner.invoke(dspfmt, [str(path)])
        assert result.exit_code == 0
        assert result.output == "    do        #1,_x\n      nop\n_x\n"

    def test_print_leaves_file_alone(self, runner, write_source):
        path = write_source(" nop\n")
        runner.invoke(dspfmt, [str(path)])
        assert path.read_text() == " nop\n"

    def test_in_place(self, runner, write_source):
        path = write_source(" nop\n rts\n")
        result = runner.invoke(dspfmt, ["-i", str(path)])
        assert result.exit_code == 0
        assert result.output == ""
        assert path.read_text() == "    nop\n    rts\n"

    def test_in_place_keeps_page_break(self, runner, write_source):
        path = write_source(" nop\n\f\n nop\n")
        result = runner.invoke(dspfmt, ["-i", str(path)])
        assert result.exit_code == 0
        assert path.read_text() == "    nop\n\f\n    nop\n"

    def test_in_place_several_files(self, runner, write_source):
        first = write_source(" nop\n", "a.asm")
        second = write_source(" rts\n", "b.asm")
        result = runner.invoke(dspfmt, ["--in-place", str(first), str(second)])
        assert result.exit_code == 0
        assert first.read_text() == "    nop\n"
        assert second.read_text() == "    rts\n"

    def test_check_clean_file(self, runner, write_source):
        path = write_source("    nop\n")
        result = runner.invoke(dspfmt, ["--check", str(path)])
        assert result.exit_code == 0
        assert result.output == ""

    def test_check_reports_changes(self, runner, write_source):
        path = write_source(" nop\n")
        result = runner.invoke(dspfmt, ["--check", str(path)])
        assert result.exit_code == 1
        assert f"would reformat {path}" in result.output
        assert path.read_text() == " nop\n"

    def test_line_range(self, runner, write_source):
        path = write_source("    do #1,_x\n nop\n nop\n")
        result = runner.invoke(dspfmt, ["--lines", "2:2", str(path)])
        assert result.exit_code == 0
        assert result.output == "    do #1,_x\n      nop\n nop\n"

    def test_columns_option(self, runner, write_source):
        path = write_source(" nop\n")
        result = runner.invoke(dspfmt, ["-c", "8,16,28,42,56,100", str(path)])
        assert result.output == "        nop\n"

    def test_columns_from_environment(self, runner, write_source):
        path = write_source(" nop\n")
        result = runner.invoke(dspfmt, [str(path)], env={ENV_COLUMNS: "2,10,20,30,40,72"})
        assert result.output == "  nop\n"


# =============================================================================
# dspfmt Macros and Errors
# =============================================================================

class TestDspfmtMacros:
    """Unknown mnemonics on the command line."""

    def test_unknown_mnemonic_is_reported(self, runner, write_source):
        path = write_source(" save_regs\n nop\n")
        result = runner.invoke(dspfmt, [str(path)])
        assert result.exit_code == 1
        assert "cannot classify line" in result.output
        assert " save_regs\n    nop\n" in result.output

    def test_declared_macro(self, runner, write_source):
        path = write_source(" save_regs\n")
        result = runner.invoke(dspfmt, ["-m", "save_regs", str(path)])
        assert result.exit_code == 0
        assert result.output == "    SAVE_REGS\n"

    def test_accept_macros(self, runner, write_source):
        path = write_source(" save_regs\n restore_regs\n")
        result = runner.invoke(dspfmt, ["--accept-macros", str(path)])
        assert result.exit_code == 0
        assert result.output == "    SAVE_REGS\n    RESTORE_REGS\n"

    def test_interactive_accept(self, runner, write_source):
        path = write_source(" save_regs\n save_regs\n")
        result = runner.invoke(dspfmt, ["--interactive", "-i", str(path)], input="y\n")
        assert result.exit_code == 0
        assert result.output.count("Treat it as a macro?") == 1
        assert path.read_text() == "    SAVE_REGS\n    SAVE_REGS\n"

    def test_interactive_decline(self, runner, write_source):
        path = write_source(" save_regs\n")
        result = runner.invoke(dspfmt, ["--interactive", "-i", str(path)], input="n\n")
        assert result.exit_code == 1
        assert path.read_text() == " save_regs\n"

    def test_abort_on_error(self, runner, write_source):
        path = write_source(" nop\n fmac a\n nop\n")
        result = runner.invoke(dspfmt, ["--abort", "-i", str(path)])
        assert result.exit_code == 1
        assert f"{path}:2:1: error: cannot classify line" in result.output
        assert path.read_text() == " nop\n fmac a\n nop\n"


# =============================================================================
# dspfmt Argument Validation
# =============================================================================

class TestDspfmtArguments:
    """Invalid argument combinations exit with status 2."""

    def test_bad_columns(self, runner, write_source):
        path = write_source(" nop\n")
        result = runner.invoke(dspfmt, ["--columns", "4,14,24", str(path)])
        assert result.exit_code == 2
        assert "expected 6 columns" in result.output

    def test_bad_line_range(self, runner, write_source):
        path = write_source(" nop\n")
        result = runner.invoke(dspfmt, ["--lines", "a:b", str(path)])
        assert result.exit_code == 2

    def test_several_files_need_in_place(self, runner, write_source):
        first = write_source(" nop\n", "a.asm")
        second = write_source(" nop\n", "b.asm")
        result = runner.invoke(dspfmt, [str(first), str(second)])
        assert result.exit_code == 2

    def test_in_place_and_check_conflict(self, runner, write_source):
        path = write_source(" nop\n")
        result = runner.invoke(dspfmt, ["-i", "--check", str(path)])
        assert result.exit_code == 2

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(dspfmt, [str(tmp_path / "missing.asm")])
        assert result.exit_code == 2

    def test_version(self, runner):
        result = runner.invoke(dspfmt, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# =============================================================================
# dspparse
# =============================================================================

class TestDspparse:
    """JSON field dumps."""

    def test_field_records(self, runner, write_source):
        path = write_source("loop mac x0,y0,a x:(r0)+,x0 ; tap\n")
        result = runner.invoke(dspparse, [str(path)])
        assert result.exit_code == 0
        records = json.loads(result.output)
        assert records == [{
            "line": 1,
            "fields": {
                "label": {"text": "loop", "column": 0},
                "instruction": {"text": "mac", "column": 5},
                "args": {"text": "x0,y0,a", "column": 9},
                "pmove1": {"text": "x:(r0)+,x0", "column": 17},
                "comment": {"text": "; tap", "column": 28},
            },
        }]

    def test_error_record(self, runner, write_source):
        path = write_source(" nop\n fmac a\n")
        records = json.loads(runner.invoke(dspparse, [str(path)]).output)
        assert records[1] == {"line": 2, "error": "cannot classify line", "token": "fmac"}

    def test_accept_macros(self, runner, write_source):
        path = write_source(" fmac a\n")
        records = json.loads(runner.invoke(dspparse, ["--accept-macros", str(path)]).output)
        assert records[0]["fields"]["instruction"] == {"text": "fmac", "column": 1}

    def test_line_numbers_across_page_break(self, runner, write_source):
        path = write_source(" nop\n\f\n fmac a\n")
        records = json.loads(runner.invoke(dspparse, [str(path)]).output)
        assert len(records) == 3
        assert records[1] == {"line": 2, "fields": {}}
        assert records[2]["line"] == 3
        assert records[2]["token"] == "fmac"

    def test_blank_line_has_no_fields(self):
        parser = LineParser(MnemonicTable.default())
        assert parse_file_fields("\n nop\n", parser)[0] == {"line": 1, "fields": {}}
