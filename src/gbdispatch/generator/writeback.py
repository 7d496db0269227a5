"""
Write-Target Resolver
=====================

Decides whether an instruction writes through its first operand and, if
so, turns that reference into its read-modify-write form.

Position 0 is the write target when either:
- the instruction has more than one operand and its mnemonic is not in
  the no-write-back set (ADD, ADC, SUB, SBC, CP, BIT, JP, JR, CALL), or
- the mnemonic is a single-operand read-modify-write (INC, DEC and the
  CB rotate/shift family).

Compare, test and control-transfer instructions model their effect as
flag or control-flow side effects, never as an operand write. Bare
literals (bit indices, RST vectors) are never write targets.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from typing import Sequence

from gbdispatch.generator.entries import OperandRef, Scope
from gbdispatch.isa.families import is_no_write_back, is_read_modify_write


def is_write_back(mnemonic: str, operand_count: int) -> bool:
    """
    Check if position 0 of an instruction is a write target.

    Args:
        mnemonic: Instruction mnemonic
        operand_count: Number of operands after any family trimming

    Returns:
        True if the first operand receives the result
    """
    if is_read_modify_write(mnemonic):
        return operand_count > 0
    return operand_count > 1 and not is_no_write_back(mnemonic)


def resolve_write_targets(mnemonic: str, refs: Sequence[OperandRef]) -> tuple[OperandRef, ...]:
    """
    Mark the write target of an operand list.

    Returns a new tuple; the input references are left untouched.
    """
    refs = tuple(refs)
    if not is_write_back(mnemonic, len(refs)):
        return refs

    first = refs[0]
    if first.scope is Scope.NONE:
        return refs
    return (first.as_write(),) + refs[1:]
