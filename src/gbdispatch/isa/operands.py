"""
SM83 Operand Descriptors
========================

This module defines the operand vocabulary of the SM83 instruction table
and the immutable descriptor every table operand is loaded into.

Operand Vocabulary
------------------
The instruction table names every operand with a short token:

1. **8-bit registers**: A, B, C, D, E, F, H, L
2. **16-bit register pairs**: AF, BC, DE, HL, SP
3. **Data classes**: n8, n16 (immediate data), e8 (signed offset),
   a8 (high-page address $FF00+n), a16 (absolute address)
4. **Conditions**: Z, NZ, C, NC (and N, H, NH for completeness)
5. **Bit indices**: 0-7 (BIT/RES/SET in the CB space)
6. **Jump vectors**: $00, $08, ... $38 (RST targets)

Each operand also carries addressing attributes:
- immediate: False means the operand is dereferenced, e.g. (HL)
- increment / decrement: post-increment or post-decrement, e.g. (HL+)

Role Tagging
------------
"C" is overloaded: a register in LD C,n8 and the carry condition in
JR C,e8. "H" could be read the same way (register or half-carry), but no
SM83 instruction uses it as a condition. Rather than sniffing names
inside the generator, every operand is tagged with an OperandRole once,
when the table is loaded, by infer_role(). A table can override the
inferred role with an explicit "role" key on the operand object. The
generator only ever dispatches on the role.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Any, Optional

from gbdispatch.errors import TableFormatError
from gbdispatch.isa.families import is_control_transfer


# =============================================================================
# Operand Role Enumeration
# =============================================================================

class OperandRole(Enum):
    """
    Semantic role of an operand.

    The role is the discriminator of the operand tagged union; it decides
    which canonicalization rule applies.
    """
    REGISTER = auto()       # 8-bit register (A, B, C, ...)
    REGISTER_PAIR = auto()  # 16-bit register pair (BC, HL, SP, ...)
    DATA = auto()           # Immediate data or address (n8, a16, ...)
    CONDITION = auto()      # Flag condition (Z, NZ, C, NC, ...)
    BIT_INDEX = auto()      # Fixed bit number (0-7)
    JUMP_VECTOR = auto()    # Fixed RST target ($00-$38)

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


# =============================================================================
# Vocabulary
# =============================================================================

REGISTERS_8: frozenset[str] = frozenset({"A", "B", "C", "D", "E", "F", "H", "L"})

REGISTER_PAIRS: frozenset[str] = frozenset({"AF", "BC", "DE", "HL", "SP"})

DATA_CLASSES: frozenset[str] = frozenset({"n8", "n16", "e8", "a8", "a16"})

CONDITIONS: frozenset[str] = frozenset({"Z", "NZ", "N", "H", "C", "NC", "NH"})

JUMP_VECTOR_MARKER = "$"


# =============================================================================
# Table Field Parsing
# =============================================================================

def _flag(data: dict[str, Any], key: str, default: bool) -> bool:
    """Read an addressing flag, which must be a JSON boolean."""
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise TableFormatError(
            f"operand {data.get('name')!r}: '{key}' must be true or false, got {value!r}"
        )
    return value


def parse_role(value: Any, name: str = "") -> OperandRole:
    """
    Parse an explicit role tag such as "condition" or "register_pair".

    Matching is case-insensitive; a space may stand for the underscore.

    Raises:
        TableFormatError: If the value names no OperandRole
    """
    if isinstance(value, str):
        key = value.strip().upper().replace(" ", "_")
        if key in OperandRole.__members__:
            return OperandRole[key]
    choices = ", ".join(role.name.lower() for role in OperandRole)
    raise TableFormatError(
        f"operand {name!r}: unknown role {value!r} (expected one of {choices})"
    )


# =============================================================================
# Operand Descriptor
# =============================================================================

@dataclass(frozen=True)
class OperandDescriptor:
    """
    One operand of an instruction table entry.

    Instances are immutable; use with_role() to obtain a tagged copy.

    Attributes:
        name: Operand token from the table (e.g. "HL", "n8", "$38")
        immediate: False if the operand is dereferenced, e.g. (HL)
        increment: Post-increment addressing, e.g. (HL+)
        decrement: Post-decrement addressing, e.g. (HL-)
        role: Semantic role, or None if not yet tagged
    """
    name: str
    immediate: bool = True
    increment: bool = False
    decrement: bool = False
    role: Optional[OperandRole] = None

    def __post_init__(self) -> None:
        if self.increment and self.decrement:
            raise TableFormatError(
                f"operand {self.name!r} cannot both increment and decrement"
            )

    def with_role(self, role: Optional[OperandRole]) -> "OperandDescriptor":
        """Return a copy tagged with the given role."""
        return replace(self, role=role)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        mnemonic: Optional[str] = None,
    ) -> "OperandDescriptor":
        """
        Create a descriptor from an instr.json operand object.

        An optional "role" key tags the operand explicitly, e.g.
        {"name": "H", "role": "condition"} for a half-carry test. Without
        it, the role is inferred from the owning mnemonic.

        Args:
            data: Operand object, e.g. {"name": "HL", "immediate": false}
            mnemonic: Owning instruction mnemonic; when given, an untagged
                      descriptor gets its inferred role

        Raises:
            TableFormatError: If the object has no name, a flag is not a
                              boolean or the role is unknown
        """
        if not isinstance(data, dict) or "name" not in data:
            raise TableFormatError(f"operand without a name: {data!r}")

        name = str(data["name"])
        operand = cls(
            name=name,
            immediate=_flag(data, "immediate", True),
            increment=_flag(data, "increment", False),
            decrement=_flag(data, "decrement", False),
        )
        if "role" in data:
            return operand.with_role(parse_role(data["role"], name))
        if mnemonic is not None:
            operand = operand.with_role(infer_role(mnemonic, name))
        return operand

    def to_dict(self, mnemonic: Optional[str] = None) -> dict[str, Any]:
        """
        Convert to an instr.json operand object.

        The role is written only when it differs from what infer_role()
        would give for the owning mnemonic.
        """
        result: dict[str, Any] = {"name": self.name, "immediate": self.immediate}
        if self.increment:
            result["increment"] = True
        if self.decrement:
            result["decrement"] = True
        if self.role is not None:
            inferred = infer_role(mnemonic, self.name) if mnemonic is not None else None
            if self.role != inferred:
                result["role"] = self.role.name.lower()
        return result

    def __str__(self) -> str:
        text = self.name
        if self.increment:
            text += "+"
        elif self.decrement:
            text += "-"
        return text if self.immediate else f"({text})"


# =============================================================================
# Role Inference
# =============================================================================

def is_jump_vector(name: str) -> bool:
    """Check if name is an RST target literal such as "$38"."""
    if not name.startswith(JUMP_VECTOR_MARKER) or len(name) < 2:
        return False
    try:
        int(name[1:], 16)
    except ValueError:
        return False
    return True


def is_bit_index(name: str) -> bool:
    """Check if name is a bit index literal, a single digit 0-7."""
    return len(name) == 1 and name in "01234567"


def infer_role(mnemonic: str, name: str) -> Optional[OperandRole]:
    """
    Determine the semantic role of an operand token.

    This is the single place where operand names are interpreted. C is
    the carry condition under JP, JR and CALL and a register everywhere
    else, RET included. H is always the register: no SM83 instruction
    tests the half-carry flag directly, so a half-carry condition must be
    tagged explicitly ("role": "condition" in the table).

    Args:
        mnemonic: Owning instruction mnemonic
        name: Operand token

    Returns:
        The OperandRole, or None if the token is not part of the vocabulary
    """
    if name == "C" and is_control_transfer(mnemonic):
        return OperandRole.CONDITION
    if name in CONDITIONS and name not in REGISTERS_8:
        return OperandRole.CONDITION
    if name in REGISTERS_8:
        return OperandRole.REGISTER
    if name in REGISTER_PAIRS:
        return OperandRole.REGISTER_PAIR
    if name in DATA_CLASSES:
        return OperandRole.DATA
    if is_jump_vector(name):
        return OperandRole.JUMP_VECTOR
    if is_bit_index(name):
        return OperandRole.BIT_INDEX
    return None
