"""
ginevra - Macro Substitution Command-Line Interface
===================================================

Reads a C/C++ source file, records its ``#define NAME value`` directives
and prints the text with every later NAME replaced by its value.
Comments are removed and blanks are collapsed on the way.

Usage Examples
--------------
Basic run:
    $ ginevra fruit.h

Predefine a macro:
    $ ginevra -D APPLE=8 fruit.cpp

Only accept #define in column 1:
    $ ginevra --column-one fruit.h

Verbose mode (debug logging and a summary on stderr):
    $ ginevra -v fruit.h

Output goes to stdout as it is produced; warnings and errors go to stderr.
"""

import logging
import sys
from pathlib import Path

import click

from ginevra import __version__
from ginevra.cli.errors import ExitCode, handle_cli_exception
from ginevra.driver import Driver, DriverOptions
from ginevra.errors import Diagnostics, InputFileError
from ginevra.scanner import Scanner

logger = logging.getLogger(__name__)

USAGE = "usage: ginevra filename[.cpp,.h]"

# Accepted input suffixes (exact, case-sensitive)
VALID_EXTENSIONS = (".h", ".cpp")


# =============================================================================
# Helpers
# =============================================================================

def setup_logging(verbose: bool) -> None:
    """Send debug logging to stderr when verbose."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s: %(message)s",
            stream=sys.stderr,
        )


def check_extension(path: str) -> None:
    """
    Raises:
        InputFileError: If path does not end in .h or .cpp
    """
    if not path.endswith(VALID_EXTENSIONS):
        raise InputFileError(path, "Invalid file extension")


def parse_defines(defines: tuple[str, ...]) -> dict[str, str]:
    """
    Parse -D options of the form NAME=VALUE or NAME (value "1").

    Raises:
        click.BadParameter: If a name is empty
    """
    predefined = {}
    for defn in defines:
        name, sep, value = defn.partition("=")
        name = name.strip()
        if not name:
            raise click.BadParameter(f"invalid macro definition '{defn}'", param_hint="-D")
        predefined[name] = value.strip() if sep else "1"
    return predefined


# =============================================================================
# CLI Definition
# =============================================================================

class UsageCommand(click.Command):
    """Report click's own usage errors like a wrong argument count."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            click.echo(f"Error: {e.format_message()}", err=True)
            click.echo(USAGE)
            ctx.exit(ExitCode.FAILURE)


@click.command(cls=UsageCommand)
@click.argument("paths", nargs=-1, metavar="FILE")
@click.option(
    "-D", "--define", "defines",
    multiple=True,
    metavar="NAME[=VALUE]",
    help="Predefine a macro (can be repeated)",
)
@click.option(
    "--column-one",
    is_flag=True,
    help="Only recognize #define starting in column 1",
)
@click.option(
    "--expand-definitions",
    is_flag=True,
    help="Substitute known macros inside a value when it is defined",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Debug logging and a summary on stderr",
)
@click.version_option(version=__version__, prog_name="ginevra")
def main(
    paths: tuple[str, ...],
    defines: tuple[str, ...],
    column_one: bool,
    expand_definitions: bool,
    verbose: bool,
) -> None:
    """
    Substitute #define macros in a C/C++ source file.

    FILE must end in .h or .cpp.

    \b
    Examples:
        ginevra fruit.h               # Print substituted text
        ginevra -D APPLE=8 fruit.cpp  # Predefine APPLE
        ginevra --column-one fruit.h  # #define must start a line
    """
    if len(paths) != 1:
        click.echo(USAGE)
        sys.exit(ExitCode.FAILURE)

    setup_logging(verbose)
    path = paths[0]

    try:
        check_extension(path)
        options = DriverOptions(
            directive_column_one=column_one,
            expand_definitions=expand_definitions,
            predefined=parse_defines(defines),
        )
        diagnostics = Diagnostics(
            listener=lambda message: click.echo(message, err=True),
            max_errors=options.max_errors,
        )

        try:
            source = open(path, encoding="utf-8")
        except OSError as e:
            raise InputFileError(path, e.strerror or "cannot open file") from e

        with source:
            logger.debug("preprocessing %s", path)
            driver = Driver(Scanner(source, path), options, diagnostics=diagnostics)
            driver.run(lambda text: click.echo(text, nl=False))

        if verbose:
            click.echo(f"{Path(path).name}: {diagnostics.summary()}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
