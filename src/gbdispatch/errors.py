"""
gbdispatch Error Hierarchy
==========================

This module defines the exception hierarchy for the dispatch generator.
All exceptions inherit from DispatchError, allowing callers to catch all
generator-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
DispatchError (base)
├── TableError (instruction table loading)
│   └── TableFormatError - malformed instr.json content
└── GenerationError (dispatch entry synthesis)
    └── UnclassifiableOperandError - operand matches no canonical rule

Design Philosophy
-----------------
Generation is an all-or-nothing batch job. A table that cannot be
classified must never produce a partially correct dispatch table, since
a CPU core compiled against wrong operand references fails silently
rather than crashing. Every GenerationError therefore carries the opcode
context needed to find the offending table entry.

Error messages follow this format:
    unprefixed 0x22 (LD): error: description
    hint: suggestion for fixing (when available)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class DispatchError(Exception):
    """
    Base exception for all gbdispatch errors.

    Callers can catch every generator error with a single clause:

        try:
            generator.generate_all()
        except DispatchError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Table Exceptions
# =============================================================================

class TableError(DispatchError):
    """Base exception for instruction table errors."""
    pass


class TableFormatError(TableError):
    """
    Invalid instruction table content.

    Raised by the table loader when the JSON document does not follow
    the instr.json schema:
    - Invalid JSON syntax
    - Missing opcode space section ("unprefixed" / "cbprefixed")
    - Opcode key that is not a hex string in range 0x00-0xFF
    - Instruction without a mnemonic
    - Operand with both increment and decrement set
    """
    pass


# =============================================================================
# Generation Exceptions
# =============================================================================

class GenerationError(DispatchError):
    """
    Base exception for dispatch generation errors.

    Attributes:
        message: The error description
        opcode: Opcode of the offending instruction (optional)
        space: Opcode space name, e.g. "unprefixed" (optional)
        mnemonic: Mnemonic of the offending instruction (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        opcode: Optional[int] = None,
        space: Optional[str] = None,
        mnemonic: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.opcode = opcode
        self.space = space
        self.mnemonic = mnemonic
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with opcode context and hint.

        Example output:
            cbprefixed 0x46 (BIT): error: operand 0 ('') matches no operand class
            hint: check the operand names in the instruction table
        """
        parts = []

        if self.opcode is not None:
            where = f"0x{self.opcode:02X}"
            if self.space:
                where = f"{self.space} {where}"
            if self.mnemonic:
                where = f"{where} ({self.mnemonic})"
            parts.append(f"{where}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class UnclassifiableOperandError(GenerationError):
    """
    Operand descriptor matches no canonicalization rule.

    Raised when an operand name is empty or outside the known operand
    vocabulary (registers, register pairs, immediate classes, conditions,
    bit indices, jump vectors). The canonicalizer raises it without
    opcode context; the generator re-raises it with the opcode, space
    and operand index filled in via with_context().
    """

    def __init__(
        self,
        operand_name: str,
        operand_index: Optional[int] = None,
        opcode: Optional[int] = None,
        space: Optional[str] = None,
        mnemonic: Optional[str] = None,
    ):
        self.operand_name = operand_name
        self.operand_index = operand_index

        if operand_index is not None:
            message = f"operand {operand_index} ({operand_name!r}) matches no operand class"
        else:
            message = f"operand {operand_name!r} matches no operand class"

        super().__init__(
            message,
            opcode=opcode,
            space=space,
            mnemonic=mnemonic,
            hint="check the operand names in the instruction table",
        )

    def with_context(
        self,
        operand_index: int,
        opcode: int,
        space: str,
        mnemonic: str,
    ) -> "UnclassifiableOperandError":
        """Return a copy of this error carrying full opcode context."""
        return UnclassifiableOperandError(
            self.operand_name,
            operand_index=operand_index,
            opcode=opcode,
            space=space,
            mnemonic=mnemonic,
        )
