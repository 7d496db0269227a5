"""
SM83 Instruction Families
=========================

Groups SM83 mnemonics into the families that need distinct treatment when
dispatch entries are synthesized. Family membership is an explicit enum
rather than ad hoc list checks, so each family maps to exactly one
rewrite rule in the generator.

Families
--------
1. **ACCUMULATOR**: ADD, ADC, SUB, SBC, AND, OR, XOR, CP
   - The first operand (the accumulator) is implicit in the handler.

2. **INC_DEC**: INC, DEC
   - The sole operand is read, modified and written back.

3. **ROTATE_SHIFT**: RLC, RRC, RL, RR, SLA, SRA, SRL, SWAP
   - Same read-modify-write shape as INC_DEC.

4. **BIT_TEST**: BIT
   - Flags only, never writes through an operand.

5. **BIT_MODIFY**: RES, SET
   - Writes the target operand, keeps the bit index as a literal.

6. **CONTROL_TRANSFER**: JP, JR, CALL
   - Operands are jump targets and conditions, never written.

7. **GENERIC**: everything else (LD, PUSH, POP, RET, RST, ...)
   - Position 0 is the destination when there are two or more operands.

Note that ADD/ADC/SUB/SBC/CP belong to the no-write-back set even though
they are accumulator arithmetic: their result goes to the implicit
accumulator, not through an operand reference.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from enum import Enum, auto


# =============================================================================
# Family Enumeration
# =============================================================================

class InstructionFamily(Enum):
    """Instruction families with distinct dispatch rewrites."""
    ACCUMULATOR = auto()       # Implicit A destination, first operand dropped
    INC_DEC = auto()           # INC / DEC read-modify-write
    ROTATE_SHIFT = auto()      # CB rotate/shift read-modify-write
    BIT_TEST = auto()          # BIT b,r
    BIT_MODIFY = auto()        # RES b,r / SET b,r
    CONTROL_TRANSFER = auto()  # JP / JR / CALL
    GENERIC = auto()           # Default destination-first rule

    def __str__(self) -> str:
        return self.name.lower()


# =============================================================================
# Mnemonic Sets
# =============================================================================

ACCUMULATOR_MNEMONICS: frozenset[str] = frozenset({
    "ADD", "ADC", "SUB", "SBC", "AND", "OR", "XOR", "CP",
})

INC_DEC_MNEMONICS: frozenset[str] = frozenset({"INC", "DEC"})

ROTATE_SHIFT_MNEMONICS: frozenset[str] = frozenset({
    "RLC", "RRC", "RL", "RR", "SLA", "SRA", "SRL", "SWAP",
})

BIT_MODIFY_MNEMONICS: frozenset[str] = frozenset({"RES", "SET"})

CONTROL_TRANSFER_MNEMONICS: frozenset[str] = frozenset({"JP", "JR", "CALL"})

# Multi-operand mnemonics that never write through an operand reference.
NO_WRITE_BACK_MNEMONICS: frozenset[str] = frozenset({
    "ADD", "ADC", "SUB", "SBC", "CP", "BIT", "JP", "JR", "CALL",
})

# Single-operand mnemonics forced into read-modify-write form.
READ_MODIFY_WRITE_MNEMONICS: frozenset[str] = INC_DEC_MNEMONICS | ROTATE_SHIFT_MNEMONICS


# Family lookup. ACCUMULATOR is checked before CONTROL_TRANSFER, and
# neither overlaps another family.
_FAMILY_TABLE: dict[str, InstructionFamily] = {
    **{m: InstructionFamily.ACCUMULATOR for m in ACCUMULATOR_MNEMONICS},
    **{m: InstructionFamily.INC_DEC for m in INC_DEC_MNEMONICS},
    **{m: InstructionFamily.ROTATE_SHIFT for m in ROTATE_SHIFT_MNEMONICS},
    "BIT": InstructionFamily.BIT_TEST,
    **{m: InstructionFamily.BIT_MODIFY for m in BIT_MODIFY_MNEMONICS},
    **{m: InstructionFamily.CONTROL_TRANSFER for m in CONTROL_TRANSFER_MNEMONICS},
}


# =============================================================================
# Helper Functions
# =============================================================================

def normalize_mnemonic(mnemonic: str) -> str:
    """Return the upper-case, whitespace-stripped form of a mnemonic."""
    return mnemonic.strip().upper()


def family_of(mnemonic: str) -> InstructionFamily:
    """
    Get the instruction family of a mnemonic.

    Unknown mnemonics are not an error: they fall into GENERIC, whose
    destination-first rule is safe for every remaining SM83 mnemonic.

    Args:
        mnemonic: Instruction mnemonic (case-insensitive)

    Returns:
        The InstructionFamily for the mnemonic
    """
    return _FAMILY_TABLE.get(normalize_mnemonic(mnemonic), InstructionFamily.GENERIC)


def is_control_transfer(mnemonic: str) -> bool:
    """Check if mnemonic is JP, JR or CALL."""
    return normalize_mnemonic(mnemonic) in CONTROL_TRANSFER_MNEMONICS


def is_no_write_back(mnemonic: str) -> bool:
    """Check if mnemonic is in the no-write-back set."""
    return normalize_mnemonic(mnemonic) in NO_WRITE_BACK_MNEMONICS


def is_read_modify_write(mnemonic: str) -> bool:
    """Check if mnemonic is a single-operand read-modify-write (INC, DEC, rotate/shift)."""
    return normalize_mnemonic(mnemonic) in READ_MODIFY_WRITE_MNEMONICS
