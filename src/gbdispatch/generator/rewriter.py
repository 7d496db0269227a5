"""
Instruction-Family Rewriter
===========================

Applies the per-family structural rewrites that turn canonical operand
references into the exact argument list a handler receives.

    Family            Input refs          Output refs
    ----------------  ------------------  --------------------------------
    ACCUMULATOR       [a, r]              [r]                (A implicit)
    INC_DEC           [r]                 [write(r), read(r)]
    ROTATE_SHIFT      [r]                 [write(r), read(r)]
    BIT_TEST          [bit, r]            [bit, read(r)]
    BIT_MODIFY        [bit, r]            [bit, write(r), read(r)]
    CONTROL_TRANSFER  [cc, target]        [cc, target]       (no write)
    GENERIC           [dst, src, ...]     [write(dst), src, ...]

Every rewrite is a pure function returning a new tuple.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from typing import Callable, Sequence

from gbdispatch.generator.entries import OperandRef
from gbdispatch.generator.writeback import resolve_write_targets
from gbdispatch.isa.families import InstructionFamily, family_of

Rewrite = Callable[[str, tuple[OperandRef, ...]], tuple[OperandRef, ...]]


def _default(mnemonic: str, refs: tuple[OperandRef, ...]) -> tuple[OperandRef, ...]:
    return resolve_write_targets(mnemonic, refs)


def _accumulator(mnemonic: str, refs: tuple[OperandRef, ...]) -> tuple[OperandRef, ...]:
    return resolve_write_targets(mnemonic, refs[1:])


def _read_modify_write(mnemonic: str, refs: tuple[OperandRef, ...]) -> tuple[OperandRef, ...]:
    if not refs:
        return refs
    target = resolve_write_targets(mnemonic, refs)[0]
    return (target, target.as_read()) + refs[1:]


def _bit_test(mnemonic: str, refs: tuple[OperandRef, ...]) -> tuple[OperandRef, ...]:
    return tuple(ref.as_read() for ref in refs)


def _bit_modify(mnemonic: str, refs: tuple[OperandRef, ...]) -> tuple[OperandRef, ...]:
    if len(refs) < 2:
        return _default(mnemonic, refs)
    bit, target = refs[0], refs[1]
    return (bit, target.as_write(), target.as_read()) + refs[2:]


REWRITES: dict[InstructionFamily, Rewrite] = {
    InstructionFamily.ACCUMULATOR: _accumulator,
    InstructionFamily.INC_DEC: _read_modify_write,
    InstructionFamily.ROTATE_SHIFT: _read_modify_write,
    InstructionFamily.BIT_TEST: _bit_test,
    InstructionFamily.BIT_MODIFY: _bit_modify,
    InstructionFamily.CONTROL_TRANSFER: _default,
    InstructionFamily.GENERIC: _default,
}


def rewrite_operands(mnemonic: str, refs: Sequence[OperandRef]) -> tuple[OperandRef, ...]:
    """
    Apply the family rewrite of a mnemonic to its canonical references.

    Args:
        mnemonic: Instruction mnemonic
        refs: READ references in table order, one per table operand

    Returns:
        The handler argument list
    """
    return REWRITES[family_of(mnemonic)](mnemonic, tuple(refs))
