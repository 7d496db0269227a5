"""
SM83 Instruction Set Description
================================

This package holds the input side of the generator: the operand
vocabulary, the instruction families, and the instruction table loader.

Main Components
---------------
- **OperandDescriptor / OperandRole**: one table operand, tagged with its
  semantic role (register, condition, bit index, ...)
- **InstructionFamily**: mnemonic families with distinct dispatch rewrites
- **InstructionTable**: both opcode spaces of an instr.json document
- **build_sm83_table**: the bundled SM83 table

Example Usage
-------------
>>> from gbdispatch.isa import InstructionTable, OpcodeSpace
>>> table = InstructionTable.bundled()
>>> str(table.get(0x22))
'LD (HL+),A'
>>> str(table.get(0x46, OpcodeSpace.CBPREFIXED))
'BIT 0,(HL)'
"""

from gbdispatch.isa.families import (
    InstructionFamily,
    ACCUMULATOR_MNEMONICS,
    BIT_MODIFY_MNEMONICS,
    CONTROL_TRANSFER_MNEMONICS,
    INC_DEC_MNEMONICS,
    NO_WRITE_BACK_MNEMONICS,
    READ_MODIFY_WRITE_MNEMONICS,
    ROTATE_SHIFT_MNEMONICS,
    family_of,
    is_control_transfer,
    is_no_write_back,
    is_read_modify_write,
    normalize_mnemonic,
)
from gbdispatch.isa.operands import (
    OperandDescriptor,
    OperandRole,
    CONDITIONS,
    DATA_CLASSES,
    REGISTER_PAIRS,
    REGISTERS_8,
    infer_role,
    parse_role,
)
from gbdispatch.isa.table import (
    InstructionDescriptor,
    InstructionTable,
    OpcodeSpace,
    parse_opcode_key,
)
from gbdispatch.isa.sm83 import build_sm83_table

__all__ = [
    # Families
    "InstructionFamily",
    "ACCUMULATOR_MNEMONICS",
    "BIT_MODIFY_MNEMONICS",
    "CONTROL_TRANSFER_MNEMONICS",
    "INC_DEC_MNEMONICS",
    "NO_WRITE_BACK_MNEMONICS",
    "READ_MODIFY_WRITE_MNEMONICS",
    "ROTATE_SHIFT_MNEMONICS",
    "family_of",
    "is_control_transfer",
    "is_no_write_back",
    "is_read_modify_write",
    "normalize_mnemonic",
    # Operands
    "OperandDescriptor",
    "OperandRole",
    "CONDITIONS",
    "DATA_CLASSES",
    "REGISTER_PAIRS",
    "REGISTERS_8",
    "infer_role",
    "parse_role",
    # Table
    "InstructionDescriptor",
    "InstructionTable",
    "OpcodeSpace",
    "parse_opcode_key",
    "build_sm83_table",
]
