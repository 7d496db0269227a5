"""
Dispatch Entry Model
====================

Output data structures of the generator: operand references and the
per-opcode dispatch entry that the emitter serializes.

An OperandRef pairs a canonical operand name with:
- an access mode: READ, or READ_MODIFY_WRITE for the write-back target
- a scope: how the handler resolves the name
    INSTANCE - live CPU state accessor (registers, memory, immediates)
    SELF     - self-scoped selector constant (flag conditions)
    NONE     - bare literal (bit indices, RST vectors)

Everything here is immutable. Changing the access mode returns a new
reference (as_write() / as_read()).
"""

from dataclasses import dataclass, replace
from enum import Enum, auto

from gbdispatch.isa.table import OpcodeSpace


class AccessMode(Enum):
    """How a handler uses an operand reference."""
    READ = auto()
    READ_MODIFY_WRITE = auto()

    def __str__(self) -> str:
        return "read" if self is AccessMode.READ else "read-modify-write"


class Scope(Enum):
    """Namespacing of an operand reference."""
    INSTANCE = auto()  # Resolved against live CPU state
    SELF = auto()      # Self-scoped selector constant
    NONE = auto()      # Bare literal, no namespace

    @property
    def is_scoped(self) -> bool:
        return self is not Scope.NONE


@dataclass(frozen=True)
class OperandRef:
    """
    One operand reference of a dispatch entry.

    Attributes:
        name: Canonical operand name (e.g. "hl_inc_indirect", "nz", "3")
        access: READ or READ_MODIFY_WRITE
        scope: INSTANCE, SELF or NONE
    """
    name: str
    access: AccessMode = AccessMode.READ
    scope: Scope = Scope.INSTANCE

    @property
    def is_write(self) -> bool:
        return self.access is AccessMode.READ_MODIFY_WRITE

    def as_write(self) -> "OperandRef":
        """Return this reference in read-modify-write form."""
        return replace(self, access=AccessMode.READ_MODIFY_WRITE)

    def as_read(self) -> "OperandRef":
        """Return this reference in read form."""
        return replace(self, access=AccessMode.READ)

    def __str__(self) -> str:
        return f"write({self.name})" if self.is_write else f"read({self.name})"


@dataclass(frozen=True)
class DispatchEntry:
    """
    The dispatch entry of one opcode.

    Attributes:
        opcode: Opcode byte within its space
        space: Opcode space of the entry
        handler: Handler name (lowercased mnemonic)
        operands: Operand references passed to the handler, in order
    """
    opcode: int
    space: OpcodeSpace
    handler: str
    operands: tuple[OperandRef, ...] = ()

    @property
    def names(self) -> tuple[str, ...]:
        """Canonical names of the operand references."""
        return tuple(ref.name for ref in self.operands)

    @property
    def has_write(self) -> bool:
        return any(ref.is_write for ref in self.operands)

    def __str__(self) -> str:
        refs = ", ".join(str(ref) for ref in self.operands)
        return f"{self.space} 0x{self.opcode:02X}: {self.handler}({refs})"
