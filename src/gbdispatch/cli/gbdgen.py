"""
gbdgen - SM83 Dispatch Generator Command-Line Interface
=======================================================

This module implements the command-line interface of the dispatch
generator. It loads an instruction table (or the bundled SM83 table),
generates the dispatch entries of both opcode spaces and writes them as
Rust match arms.

Usage Examples
--------------
Generate both spaces from the bundled table to stdout:
    $ gbdgen generate

From an instr.json file into a Rust source file:
    $ gbdgen -t instr.json generate -o src/dispatch.rs

Only the CB-prefixed space, as bare arms:
    $ gbdgen generate --space cbprefixed --no-match

Grouped arms (one per handler):
    $ gbdgen generate --grouped

Inspect a single opcode:
    $ gbdgen show 0x22
    $ gbdgen show 0x46 --prefixed

Handlers that need memory write-back:
    $ gbdgen analyze

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
from pathlib import Path
from typing import Optional

import click

from gbdispatch import __version__
from gbdispatch.analysis import family_summary, memory_destination_mnemonics
from gbdispatch.cli.errors import handle_cli_exception
from gbdispatch.config import GeneratorConfig
from gbdispatch.emitter import RustEmitter
from gbdispatch.generator import DispatchGenerator
from gbdispatch.isa.table import InstructionTable, OpcodeSpace

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the table path and verbosity given to the main group.
    """

    def __init__(self) -> None:
        self.table_path: Optional[Path] = None
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )

    def load_table(self) -> InstructionTable:
        """Load the table given with --table, or the bundled SM83 table."""
        if self.table_path is None:
            logger.info("Using bundled SM83 instruction table")
            return InstructionTable.bundled()
        logger.info(f"Loading instruction table {self.table_path}")
        return InstructionTable.from_file(self.table_path)


pass_context = click.make_pass_decorator(Context, ensure=True)


def parse_opcode(text: str) -> int:
    """
    Parse an opcode argument.

    Accepts 0x22, $22 and plain hex (22).

    Raises:
        click.BadParameter: If the text is not a hex byte
    """
    value = text.strip()
    if value.lower().startswith("0x"):
        value = value[2:]
    elif value.startswith("$"):
        value = value[1:]
    try:
        opcode = int(value, 16)
    except ValueError:
        raise click.BadParameter(f"'{text}' is not a hex opcode") from None
    if not 0 <= opcode <= 0xFF:
        raise click.BadParameter(f"opcode '{text}' is out of range 0x00-0xFF")
    return opcode


def _selected_spaces(space: str) -> list[OpcodeSpace]:
    if space == "all":
        return list(OpcodeSpace)
    return [OpcodeSpace(space)]


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-t", "--table",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Instruction table in instr.json format (default: bundled SM83 table)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="gbdgen")
@pass_context
def main(ctx: Context, table: Optional[Path], verbose: bool) -> None:
    """
    Generate SM83 dispatch code from an instruction table.

    Every opcode of the unprefixed and 0xCB-prefixed spaces becomes one
    match arm calling its handler with canonical operand references.

    Use 'gbdgen generate --help' for output options.
    """
    ctx.table_path = table
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Generate Command
# =============================================================================

@main.command()
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout)",
)
@click.option(
    "-s", "--space",
    type=click.Choice(["unprefixed", "cbprefixed", "all"]),
    default="all",
    help="Opcode space to generate (default: all)",
)
@click.option(
    "-g", "--grouped",
    is_flag=True,
    help="Emit one arm per handler instead of one arm per opcode",
)
@click.option(
    "--match/--no-match", "wrap_match",
    default=True,
    help="Wrap the arms in a complete match block (default: enabled)",
)
@click.option(
    "--receiver",
    type=str,
    default=None,
    help="Handler receiver expression (default: self)",
)
@click.option(
    "--scope-prefix",
    type=str,
    default=None,
    help="Prefix of scoped operand references (default: Self::)",
)
@click.option(
    "--write-prefix",
    type=str,
    default=None,
    help="Prefix of read-modify-write references (default: set_)",
)
@pass_context
def generate(
    ctx: Context,
    output: Optional[Path],
    space: str,
    grouped: bool,
    wrap_match: bool,
    receiver: Optional[str],
    scope_prefix: Optional[str],
    write_prefix: Optional[str],
) -> None:
    """
    Generate dispatch match arms.

    The whole output is rendered before anything is written: a table
    with an unclassifiable operand never leaves a partial file behind.

    \b
    Examples:
        gbdgen generate                       # both spaces to stdout
        gbdgen -t instr.json generate -o dispatch.rs
        gbdgen generate --space cbprefixed --no-match
    """
    try:
        config = GeneratorConfig.from_env()
        if receiver is not None:
            config.receiver = receiver
        if scope_prefix is not None:
            config.scope_prefix = scope_prefix
        if write_prefix is not None:
            config.write_prefix = write_prefix

        table = ctx.load_table()
        generator = DispatchGenerator(table)
        entries = {s: generator.generate(s) for s in _selected_spaces(space)}

        text = RustEmitter(config).render_file(
            entries,
            source=table.source,
            grouped=grouped,
            wrap_match=wrap_match,
        )

        if output is None:
            click.echo(text, nl=False)
        else:
            output.write_text(text, encoding="utf-8")
            if ctx.verbose:
                count = sum(len(e) for e in entries.values())
                click.echo(f"Wrote {count} dispatch entries to {output}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Show Command
# =============================================================================

@main.command()
@click.argument("opcode")
@click.option(
    "-c", "--prefixed",
    is_flag=True,
    help="Look the opcode up in the 0xCB-prefixed space",
)
@pass_context
def show(ctx: Context, opcode: str, prefixed: bool) -> None:
    """
    Show how one opcode is dispatched.

    OPCODE is a hex byte (0x22, $22 or 22).

    \b
    Example:
        gbdgen show 0x22
        gbdgen show 0x46 --prefixed
    """
    try:
        value = parse_opcode(opcode)
        space = OpcodeSpace.CBPREFIXED if prefixed else OpcodeSpace.UNPREFIXED

        generator = DispatchGenerator(ctx.load_table())
        instr = generator.table.get(value, space)
        if instr is None:
            raise click.BadParameter(f"opcode 0x{value:02X} is not in the {space} table")

        entry = generator.entry(value, space)
        click.echo(f"{space} 0x{value:02X}: {instr}")
        click.echo(f"  handler: {entry.handler}")
        for index, ref in enumerate(entry.operands):
            click.echo(f"  [{index}] {ref.name:<18} {ref.access}, scope {ref.scope.name.lower()}")
        click.echo(f"  arm: {RustEmitter(GeneratorConfig.from_env()).render_entry(entry)}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Analyze Command
# =============================================================================

@main.command()
@pass_context
def analyze(ctx: Context) -> None:
    """
    Report handlers that write to memory and family coverage.

    Lists the unprefixed mnemonics whose destination is a data class or
    (HL): their handlers must support memory write-back.
    """
    try:
        table = ctx.load_table()

        click.echo("Memory destination mnemonics:")
        for mnemonic in memory_destination_mnemonics(table):
            click.echo(f"  {mnemonic}")

        click.echo("\nOpcodes per instruction family:")
        for family, count in family_summary(table).items():
            click.echo(f"  {str(family):<17} {count:3d}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


if __name__ == "__main__":
    main()
