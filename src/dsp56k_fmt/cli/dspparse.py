"""
dspparse - Dump DSP56000 Source Fields
======================================

Prints the field boundaries of every line of a source file as JSON, for
tools (symbol lookup, highlighting) that need to know where the label,
instruction, operands and comment of a line are without reformatting it.

Usage Examples
--------------
    $ dspparse filter.asm
    $ dspparse --accept-macros filter.asm > fields.json

Output
------
    [
      {"line": 1, "fields": {"instruction": {"text": "do", "column": 4}, ...}},
      {"line": 2, "error": "cannot classify line", "token": "fmac"}
    ]
"""

from pathlib import Path
import json

import click

from dsp56k_fmt import __version__
from dsp56k_fmt.cli.errors import handle_cli_exception
from dsp56k_fmt.errors import ParseError
from dsp56k_fmt.formatter import TextBuffer
from dsp56k_fmt.mnemonics import MnemonicTable
from dsp56k_fmt.parser import LineParser, accept_all


def parse_file_fields(source: str, parser: LineParser) -> list[dict]:
    """
    Parse every line of a source text into JSON-ready records.

    Lines that cannot be classified produce an "error" record instead of
    stopping the dump.
    """
    records = []
    for number, text in enumerate(TextBuffer.from_text(source).lines, start=1):
        try:
            parsed = parser.parse(text, line_number=number)
        except ParseError as e:
            records.append({"line": number, "error": e.message, "token": e.token})
            continue
        fields = {
            name: {"text": value, "column": column}
            for name, value, column in parsed.fields()
        }
        records.append({"line": number, "fields": fields})
    return records


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-m", "--macro",
    multiple=True,
    help="Register a macro name before parsing (can be repeated)",
)
@click.option(
    "--accept-macros",
    is_flag=True,
    help="Treat every unknown mnemonic as a macro",
)
@click.option(
    "--indent",
    type=int,
    default=2,
    show_default=True,
    help="JSON indentation",
)
@click.version_option(version=__version__, prog_name="dspparse")
def main(input_file: Path, macro: tuple[str, ...], accept_macros: bool, indent: int) -> None:
    """
    Print the fields of every line of INPUT_FILE as JSON.
    """
    try:
        table = MnemonicTable.default()
        for name in macro:
            table.register_macro(name)
        parser = LineParser(table, accept_all if accept_macros else None, str(input_file))

        records = parse_file_fields(input_file.read_text(), parser)
        click.echo(json.dumps(records, indent=indent))
    except Exception as e:
        handle_cli_exception(e, error_type="Parse")


if __name__ == "__main__":
    main()
