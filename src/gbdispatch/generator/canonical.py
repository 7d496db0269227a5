"""
Operand Canonicalizer
=====================

Maps one table operand to the canonical, lowercase name that a handler
uses to reach it, plus the scope the name is resolved in.

Canonical Names
---------------
Rules are applied per operand role (see gbdispatch.isa.operands):

    Role            Operand              Canonical name
    --------------  -------------------  --------------------
    REGISTER        B                    b
                    C   (JP/JR/CALL)     carry
                    (C) (LDH [C],A)      c_indirect
                    C                    c
    REGISTER_PAIR   HL                   hl
                    (HL)                 hl_indirect
                    (HL+)                hl_inc_indirect
                    SP+  (LD HL,SP+e8)   sp_inc
    DATA            n8 / n16 / e8        immediate8 / immediate16 / immediate8
                    (a8)                 indirect_abs8
                    (a16)                indirect_abs16
    CONDITION       Z NZ N H C NC NH     z nz n hcarry carry ncarry nhcarry
    JUMP_VECTOR     $38                  38
    BIT_INDEX       3                    3

The increment/decrement suffix always comes before the indirection
suffix: the pointer register is stepped as part of the indirect access.

Any operand that fits none of the rules raises UnclassifiableOperandError.
An empty or generic name would compile into dispatch code that quietly
targets the wrong CPU state.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from typing import Callable

from gbdispatch.errors import UnclassifiableOperandError
from gbdispatch.generator.entries import OperandRef, Scope
from gbdispatch.isa.families import is_control_transfer
from gbdispatch.isa.operands import (
    DATA_CLASSES,
    REGISTER_PAIRS,
    REGISTERS_8,
    OperandDescriptor,
    OperandRole,
    infer_role,
    is_bit_index,
    is_jump_vector,
)


# Canonical names of the flag conditions
CONDITION_NAMES: dict[str, str] = {
    "Z": "z",
    "NZ": "nz",
    "N": "n",
    "H": "hcarry",
    "C": "carry",
    "NC": "ncarry",
    "NH": "nhcarry",
}

# Scope each role is resolved in
ROLE_SCOPES: dict[OperandRole, Scope] = {
    OperandRole.REGISTER: Scope.INSTANCE,
    OperandRole.REGISTER_PAIR: Scope.INSTANCE,
    OperandRole.DATA: Scope.INSTANCE,
    OperandRole.CONDITION: Scope.SELF,
    OperandRole.BIT_INDEX: Scope.NONE,
    OperandRole.JUMP_VECTOR: Scope.NONE,
}


def _step_suffix(operand: OperandDescriptor) -> str:
    if operand.increment:
        return "_inc"
    if operand.decrement:
        return "_dec"
    return ""


# =============================================================================
# Per-Role Rules
# =============================================================================

def _register(mnemonic: str, operand: OperandDescriptor) -> tuple[str, Scope]:
    name = operand.name
    if name not in REGISTERS_8:
        raise UnclassifiableOperandError(name)

    if name == "C":
        if is_control_transfer(mnemonic):
            return "carry", Scope.SELF
        if not operand.immediate:
            # LDH [C],A: high-page access through C
            return "c_indirect", Scope.INSTANCE
    return name, Scope.INSTANCE


def _register_pair(mnemonic: str, operand: OperandDescriptor) -> tuple[str, Scope]:
    if operand.name not in REGISTER_PAIRS:
        raise UnclassifiableOperandError(operand.name)

    result = operand.name + _step_suffix(operand)
    if not operand.immediate:
        result += "_indirect"
    return result, Scope.INSTANCE


def _data(mnemonic: str, operand: OperandDescriptor) -> tuple[str, Scope]:
    name = operand.name
    if name not in DATA_CLASSES:
        raise UnclassifiableOperandError(name)

    width = name[1:]
    if operand.immediate:
        result = "immediate" + width
    else:
        result = "indirect" + ("_zero" if "n" in name else "_abs") + width
    return result + _step_suffix(operand), Scope.INSTANCE


def _condition(mnemonic: str, operand: OperandDescriptor) -> tuple[str, Scope]:
    try:
        return CONDITION_NAMES[operand.name], Scope.SELF
    except KeyError:
        raise UnclassifiableOperandError(operand.name) from None


def _jump_vector(mnemonic: str, operand: OperandDescriptor) -> tuple[str, Scope]:
    if not is_jump_vector(operand.name):
        raise UnclassifiableOperandError(operand.name)
    return operand.name[1:], Scope.NONE


def _bit_index(mnemonic: str, operand: OperandDescriptor) -> tuple[str, Scope]:
    if not is_bit_index(operand.name):
        raise UnclassifiableOperandError(operand.name)
    return operand.name, Scope.NONE


_RULES: dict[OperandRole, Callable[[str, OperandDescriptor], tuple[str, Scope]]] = {
    OperandRole.REGISTER: _register,
    OperandRole.REGISTER_PAIR: _register_pair,
    OperandRole.DATA: _data,
    OperandRole.CONDITION: _condition,
    OperandRole.JUMP_VECTOR: _jump_vector,
    OperandRole.BIT_INDEX: _bit_index,
}


# =============================================================================
# Public API
# =============================================================================

def classify_operand(mnemonic: str, operand: OperandDescriptor) -> OperandRef:
    """
    Build the read reference for one operand.

    Untagged operands are tagged on the fly with infer_role(), so plain
    descriptors built by hand behave exactly like loaded ones.

    Args:
        mnemonic: Mnemonic of the owning instruction
        operand: The table operand

    Returns:
        A READ OperandRef with canonical name and scope

    Raises:
        UnclassifiableOperandError: If the operand matches no rule
    """
    role = operand.role
    if role is None:
        role = infer_role(mnemonic, operand.name)
    if role is None:
        raise UnclassifiableOperandError(operand.name)

    name, scope = _RULES[role](mnemonic.upper(), operand)
    return OperandRef(name=name.lower(), scope=scope)


def canonicalize_operand(mnemonic: str, operand: OperandDescriptor) -> str:
    """
    Get the canonical name of one operand.

    Example:
        >>> canonicalize_operand("LD", OperandDescriptor("HL", immediate=False, increment=True))
        'hl_inc_indirect'
        >>> canonicalize_operand("JP", OperandDescriptor("C"))
        'carry'

    Raises:
        UnclassifiableOperandError: If the operand matches no rule
    """
    return classify_operand(mnemonic, operand).name
