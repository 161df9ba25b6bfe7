"""
tinyasm - Assembler Command-Line Interface
==========================================

Command-line front end for the one-pass assembler.

Usage Examples
--------------
Assemble and print the listing:
    $ tinyasm count.asm

Target the 16-bit machine and write the binary image:
    $ tinyasm count.asm -m m1024n16 -o count.bin

Write listing and symbol files without printing:
    $ tinyasm count.asm -q -l count.lst -s count.sym

The machine can also be chosen with the TINYASM_MACHINE environment
variable; -m takes precedence.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from tinyasm import __version__
from tinyasm.assembler import Assembler
from tinyasm.cli.errors import handle_cli_exception
from tinyasm.machine import DEFAULT_MACHINE, MACHINE_PRESETS


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-m", "--machine",
    type=click.Choice(sorted(MACHINE_PRESETS), case_sensitive=False),
    default=DEFAULT_MACHINE,
    envvar="TINYASM_MACHINE",
    show_default=True,
    help="Target machine. m256n8: 256 x 8-bit words, opcode and operand in "
         "separate bytes. m1024n16: 1024 x 16-bit words, packed 6+10 bits.",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the raw memory image (big-endian words)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write symbol file",
)
@click.option(
    "--allow-unresolved",
    is_flag=True,
    help="Do not fail on labels that are referenced but never defined",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Do not print the listing to stdout",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="tinyasm")
def main(
    input_file: Path,
    machine: str,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    allow_unresolved: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Assemble a program for the minimal accumulator machine.

    INPUT_FILE holds one instruction per line in one of the shapes
    'L OPC OPRD', 'L OPC', 'OPC OPRD' or 'OPC'.

    \b
    Examples:
        tinyasm prog.asm                  # Print listing
        tinyasm prog.asm -o prog.bin      # Write memory image
        tinyasm -m m1024n16 prog.asm      # 16-bit packed machine
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        asm = Assembler(machine, allow_unresolved=allow_unresolved)

        if verbose:
            click.echo(f"Target machine: {asm.machine}")
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        if not quiet:
            click.echo(asm.get_listing())

        if output:
            asm.write_binary(output)
            if verbose:
                click.echo(f"Wrote {len(asm.get_code())} bytes to {output}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            click.echo(
                f"Assembly complete: {asm.location_counter} of "
                f"{asm.machine.word_count} words used"
            )
            click.echo(f"Defined {len(asm.get_symbols())} symbols")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
