"""
dspfmt - DSP56000 Source Formatter Command-Line Interface
=========================================================

Reformats DSP56000 assembly source into the canonical column layout.

Usage Examples
--------------
Print the formatted file:
    $ dspfmt filter.asm

Rewrite files in place:
    $ dspfmt -i filter.asm fft.asm

Check formatting (exit status 1 if anything would change):
    $ dspfmt --check src/*.asm

Custom columns and known macros:
    $ dspfmt -c 8,16,28,42,56,100 -m save_regs -m restore_regs filter.asm

Format only lines 10 to 40:
    $ dspfmt -i --lines 10:40 filter.asm
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click

from dsp56k_fmt import __version__
from dsp56k_fmt.cli.errors import ExitCode, handle_cli_exception
from dsp56k_fmt.config import ENV_COLUMNS, IndentConfig
from dsp56k_fmt.errors import ConfigError
from dsp56k_fmt.formatter import ErrorPolicy, Formatter, TextBuffer
from dsp56k_fmt.mnemonics import MnemonicTable
from dsp56k_fmt.parser import Classifier, accept_all


logger = logging.getLogger(__name__)


# =============================================================================
# Option Parsing
# =============================================================================

def _parse_columns(ctx, param, value: Optional[str]) -> Optional[IndentConfig]:
    if value is None:
        return None
    try:
        return IndentConfig.parse(value)
    except ConfigError as e:
        raise click.BadParameter(str(e))


def _parse_lines(ctx, param, value: Optional[str]) -> Optional[tuple[int, int]]:
    """Parse a 1-based inclusive START:END range into a [start, end) pair."""
    if value is None:
        return None
    start_text, sep, end_text = value.partition(":")
    try:
        start = int(start_text) if start_text else 1
        end = int(end_text) if sep and end_text else (start if not sep else sys.maxsize)
    except ValueError:
        raise click.BadParameter(f"expected START:END, got {value!r}")
    if start < 1 or end < start:
        raise click.BadParameter(f"invalid line range {value!r}")
    return start - 1, end


def _make_classifier(accept_macros: bool, interactive: bool) -> Optional[Classifier]:
    if interactive:
        def confirm(token: str) -> bool:
            return click.confirm(f"Unknown mnemonic '{token}'. Treat it as a macro?", default=False)
        return confirm
    if accept_macros:
        return accept_all
    return None


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-i", "--in-place",
    is_flag=True,
    help="Rewrite files instead of printing the result",
)
@click.option(
    "--check",
    is_flag=True,
    help="Report files that would change and exit with status 1; write nothing",
)
@click.option(
    "-c", "--columns",
    callback=_parse_columns,
    help="Six comma-separated columns: instruction,args,pmove1,pmove2,comment,width "
         f"(default: 4,14,24,37,50,80, or ${ENV_COLUMNS})",
)
@click.option(
    "-L", "--lines",
    callback=_parse_lines,
    help="Only format lines START:END (1-based, inclusive)",
)
@click.option(
    "-m", "--macro",
    multiple=True,
    help="Register a macro name before formatting (can be repeated)",
)
@click.option(
    "--accept-macros",
    is_flag=True,
    help="Treat every unknown mnemonic as a macro",
)
@click.option(
    "--interactive",
    is_flag=True,
    help="Ask whether each unknown mnemonic is a macro",
)
@click.option(
    "--keep-going/--abort",
    default=True,
    help="On an unparseable line, skip it (default) or stop formatting",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="dspfmt")
def main(
    files: tuple[Path, ...],
    in_place: bool,
    check: bool,
    columns: Optional[IndentConfig],
    lines: Optional[tuple[int, int]],
    macro: tuple[str, ...],
    accept_macros: bool,
    interactive: bool,
    keep_going: bool,
    verbose: bool,
) -> None:
    """
    Format DSP56000 assembly source.

    FILES are the assembly sources to format. A single file is printed to
    standard output unless -i/--in-place or --check is given.

    \b
    Examples:
        dspfmt filter.asm              # Print formatted source
        dspfmt -i *.asm                # Format in place
        dspfmt --check *.asm           # Exit 1 if anything would change
        dspfmt -m save_regs prog.asm   # Declare a macro
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )

    if in_place and check:
        raise click.UsageError("-i/--in-place and --check are mutually exclusive")
    if len(files) > 1 and not (in_place or check):
        raise click.UsageError("formatting several files requires -i/--in-place or --check")

    config = columns if columns is not None else IndentConfig.from_env()
    table = MnemonicTable.default()
    for name in macro:
        table.register_macro(name)
    classify = _make_classifier(accept_macros, interactive)
    policy = ErrorPolicy.SKIP if keep_going else ErrorPolicy.ABORT

    if verbose:
        click.echo(f"Columns: {config}", err=True)
        if macro:
            click.echo(f"Macros: {', '.join(table.macros())}", err=True)

    failed = False
    try:
        for path in files:
            source = path.read_text()
            buffer = TextBuffer.from_text(source)
            formatter = Formatter(buffer, config, table, classify, policy, filename=str(path))

            start, end = lines if lines is not None else (0, buffer.line_count())
            report = formatter.format_region(start, end)
            if report.has_errors():
                click.echo(report.get_error_report(), err=True)
                failed = True

            result = buffer.text()
            if check:
                if result != source:
                    click.echo(f"would reformat {path}", err=True)
                    failed = True
            elif in_place:
                if result != source:
                    path.write_text(result)
                if verbose:
                    click.echo(f"{path}: {report.lines_changed} line(s) changed", err=True)
            else:
                click.echo(result, nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Format")

    if failed:
        sys.exit(ExitCode.FORMAT_ERROR)


if __name__ == "__main__":
    main()
