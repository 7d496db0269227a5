"""
Dispatch Generator
==================

Runs the per-opcode pipeline over both opcode spaces of an instruction
table:

    InstructionDescriptor
        -> classify_operand()      canonical READ references
        -> rewrite_operands()      family rewrite + write-target resolution
        -> DispatchEntry

No state is carried from one opcode to the next. Output preserves the
table's opcode order, so generating twice from the same table yields
identical entries.

Generation is all-or-nothing: the first unclassifiable operand aborts
the run with an UnclassifiableOperandError carrying the opcode, opcode
space, mnemonic and operand index.

Usage:
    generator = DispatchGenerator(InstructionTable.bundled())
    for entry in generator.generate(OpcodeSpace.UNPREFIXED):
        print(entry)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
from typing import Optional

from gbdispatch.errors import UnclassifiableOperandError
from gbdispatch.generator.canonical import classify_operand
from gbdispatch.generator.entries import DispatchEntry
from gbdispatch.generator.rewriter import rewrite_operands
from gbdispatch.isa.table import InstructionDescriptor, InstructionTable, OpcodeSpace

logger = logging.getLogger(__name__)


def build_entry(instr: InstructionDescriptor) -> DispatchEntry:
    """
    Build the dispatch entry of one instruction.

    Args:
        instr: The table instruction

    Returns:
        The DispatchEntry for the instruction's opcode

    Raises:
        UnclassifiableOperandError: If an operand matches no canonical rule
    """
    refs = []
    for index, operand in enumerate(instr.operands):
        try:
            refs.append(classify_operand(instr.mnemonic, operand))
        except UnclassifiableOperandError as e:
            raise e.with_context(
                operand_index=index,
                opcode=instr.opcode,
                space=str(instr.space),
                mnemonic=instr.mnemonic,
            ) from None

    return DispatchEntry(
        opcode=instr.opcode,
        space=instr.space,
        handler=instr.mnemonic.lower(),
        operands=rewrite_operands(instr.mnemonic, refs),
    )


class DispatchGenerator:
    """
    Generates dispatch entries for an instruction table.

    Attributes:
        table: The instruction table to generate from
    """

    def __init__(self, table: Optional[InstructionTable] = None):
        """
        Initialize the generator.

        Args:
            table: Instruction table; the bundled SM83 table when omitted
        """
        self.table = table if table is not None else InstructionTable.bundled()

    def generate(self, space: OpcodeSpace) -> list[DispatchEntry]:
        """
        Generate the entries of one opcode space, in opcode order.

        Raises:
            UnclassifiableOperandError: On the first operand that matches no rule
        """
        entries = []
        for instr in self.table.instructions(space):
            try:
                entries.append(build_entry(instr))
            except UnclassifiableOperandError as e:
                logger.error(f"Cannot classify operand: {e.message} at {space} 0x{instr.opcode:02X}")
                raise

        logger.debug(f"Generated {len(entries)} {space} dispatch entries")
        return entries

    def generate_all(self) -> dict[OpcodeSpace, list[DispatchEntry]]:
        """
        Generate both opcode spaces.

        Both spaces are generated completely before anything is returned,
        so a failure in the prefixed space never leaves a half-built
        result behind.
        """
        return {space: self.generate(space) for space in OpcodeSpace}

    def entry(self, opcode: int, space: OpcodeSpace = OpcodeSpace.UNPREFIXED) -> Optional[DispatchEntry]:
        """Build the entry of a single opcode, or None if the table lacks it."""
        instr = self.table.get(opcode, space)
        if instr is None:
            return None
        return build_entry(instr)
