"""
Instruction Table Analysis
==========================

Small reports over an instruction table and its dispatch entries, used
while writing the handlers the generated dispatch code calls.

- memory_destination_mnemonics(): which handlers must support writing a
  result to memory, because at least one of their opcodes has a data
  class or (HL) as destination.
- handler_groups(): opcodes that share a handler, in first-seen order;
  the data behind grouped match arms.
- family_summary(): how many opcodes each instruction family covers.
"""

from collections import Counter
from typing import Iterable

from gbdispatch.generator.entries import DispatchEntry
from gbdispatch.isa.families import InstructionFamily, family_of
from gbdispatch.isa.operands import DATA_CLASSES
from gbdispatch.isa.table import InstructionTable, OpcodeSpace


def memory_destination_mnemonics(
    table: InstructionTable,
    space: OpcodeSpace = OpcodeSpace.UNPREFIXED,
) -> list[str]:
    """
    Find mnemonics whose first operand is a memory or data destination.

    A first operand counts when it is a data class (n8, n16, e8, a8, a16)
    or the register pair HL used indirectly, i.e. (HL), (HL+) or (HL-).

    Args:
        table: Instruction table
        space: Opcode space to scan

    Returns:
        Sorted list of distinct mnemonics
    """
    found = set()
    for instr in table.instructions(space):
        if not instr.operands:
            continue
        first = instr.operands[0]
        if first.name in DATA_CLASSES or (first.name == "HL" and not first.immediate):
            found.add(instr.mnemonic)
    return sorted(found)


def handler_groups(entries: Iterable[DispatchEntry]) -> dict[str, list[int]]:
    """
    Group opcodes by handler.

    Returns:
        Mapping of handler name to its opcodes, handlers in first-seen
        order and opcodes in entry order
    """
    groups: dict[str, list[int]] = {}
    for entry in entries:
        groups.setdefault(entry.handler, []).append(entry.opcode)
    return groups


def family_summary(table: InstructionTable) -> dict[InstructionFamily, int]:
    """Count the opcodes of both spaces per instruction family."""
    counts: Counter[InstructionFamily] = Counter()
    for space in OpcodeSpace:
        for instr in table.instructions(space):
            counts[family_of(instr.mnemonic)] += 1
    return {family: counts[family] for family in InstructionFamily if counts[family]}
