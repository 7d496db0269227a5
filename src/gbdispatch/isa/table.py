"""
Instruction Table Loader
========================

Loads the SM83 instruction table in the community instr.json schema and
exposes each opcode space as an ordered mapping from opcode to
InstructionDescriptor.

File Format
-----------
The document holds one object per opcode space, keyed by hex opcode:

    {
      "unprefixed": {
        "0x00": {"mnemonic": "NOP", "bytes": 1, "cycles": [4], "operands": []},
        "0x22": {"mnemonic": "LD", "bytes": 1, "cycles": [8], "operands": [
            {"name": "HL", "immediate": false, "increment": true},
            {"name": "A", "immediate": true}]}
      },
      "cbprefixed": {
        "0x46": {"mnemonic": "BIT", "bytes": 2, "cycles": [12], "operands": [
            {"name": "0", "immediate": true},
            {"name": "HL", "immediate": false}]}
      }
    }

Keys the generator does not need (flags, immediate at instruction level)
are ignored. An operand may carry an explicit "role" (e.g. "condition",
"register") that overrides the role inferred from its name. Entries are
always exposed in ascending opcode order so that regeneration produces
identical output regardless of key order in the file.

Usage:
    table = InstructionTable.from_file("instr.json")
    for instr in table.instructions(OpcodeSpace.UNPREFIXED):
        print(instr)

    # Without a file, the bundled SM83 table is used
    table = InstructionTable.bundled()

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from gbdispatch.errors import TableFormatError
from gbdispatch.isa.families import normalize_mnemonic
from gbdispatch.isa.operands import OperandDescriptor
from gbdispatch.isa.sm83 import build_sm83_table

logger = logging.getLogger(__name__)


# =============================================================================
# Opcode Spaces
# =============================================================================

class OpcodeSpace(Enum):
    """
    The two SM83 opcode spaces.

    The value is the section name used in instr.json.
    """
    UNPREFIXED = "unprefixed"
    CBPREFIXED = "cbprefixed"

    @property
    def prefix(self) -> Optional[int]:
        """Prefix byte that selects this space, or None for the primary space."""
        return 0xCB if self is OpcodeSpace.CBPREFIXED else None

    @property
    def is_prefixed(self) -> bool:
        return self is OpcodeSpace.CBPREFIXED

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Instruction Descriptor
# =============================================================================

@dataclass(frozen=True)
class InstructionDescriptor:
    """
    One entry of the instruction table.

    Attributes:
        opcode: Opcode byte within its space (0x00-0xFF)
        mnemonic: Upper-case mnemonic (e.g. "LD", "BIT")
        operands: Operands in table order (destination first)
        space: The opcode space the entry belongs to
        bytes: Encoded instruction length, including the prefix byte
        cycles: T-cycle counts (taken / not taken for conditionals)
    """
    opcode: int
    mnemonic: str
    operands: tuple[OperandDescriptor, ...] = ()
    space: OpcodeSpace = OpcodeSpace.UNPREFIXED
    bytes: int = 1
    cycles: tuple[int, ...] = ()

    @classmethod
    def from_dict(
        cls,
        opcode: int,
        data: dict[str, Any],
        space: OpcodeSpace = OpcodeSpace.UNPREFIXED,
    ) -> "InstructionDescriptor":
        """
        Create a descriptor from an instr.json instruction object.

        Every operand without an explicit "role" is tagged with the role
        inferred from the instruction's mnemonic.

        Raises:
            TableFormatError: If the object has no mnemonic or malformed operands
        """
        if not isinstance(data, dict):
            raise TableFormatError(
                f"{space} 0x{opcode:02X}: instruction must be an object, got {type(data).__name__}"
            )
        if not data.get("mnemonic"):
            raise TableFormatError(f"{space} 0x{opcode:02X}: instruction without a mnemonic")

        mnemonic = normalize_mnemonic(str(data["mnemonic"]))
        raw_operands = data.get("operands", [])
        if not isinstance(raw_operands, list):
            raise TableFormatError(f"{space} 0x{opcode:02X}: operands must be a list")

        try:
            operands = tuple(
                OperandDescriptor.from_dict(op, mnemonic=mnemonic)
                for op in raw_operands
            )
        except TableFormatError as e:
            raise TableFormatError(f"{space} 0x{opcode:02X} ({mnemonic}): {e}") from e

        try:
            length = int(data.get("bytes", 1))
            cycles = tuple(int(c) for c in data.get("cycles", ()))
        except (TypeError, ValueError) as e:
            raise TableFormatError(
                f"{space} 0x{opcode:02X} ({mnemonic}): bad bytes or cycles: {e}"
            ) from e

        return cls(
            opcode=opcode,
            mnemonic=mnemonic,
            operands=operands,
            space=space,
            bytes=length,
            cycles=cycles,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to an instr.json instruction object."""
        return {
            "mnemonic": self.mnemonic,
            "bytes": self.bytes,
            "cycles": list(self.cycles),
            "operands": [op.to_dict(self.mnemonic) for op in self.operands],
        }

    def __str__(self) -> str:
        text = self.mnemonic
        if self.operands:
            text += " " + ",".join(str(op) for op in self.operands)
        return text


# =============================================================================
# Instruction Table
# =============================================================================

def parse_opcode_key(key: str) -> int:
    """
    Parse an instr.json opcode key such as "0x3E".

    Raises:
        TableFormatError: If the key is not a hex byte
    """
    text = key.strip().lower()
    if not text.startswith("0x"):
        raise TableFormatError(f"opcode key {key!r} is not a hex string")
    try:
        opcode = int(text[2:], 16)
    except ValueError:
        raise TableFormatError(f"opcode key {key!r} is not a hex string") from None
    if not 0 <= opcode <= 0xFF:
        raise TableFormatError(f"opcode key {key!r} is out of range 0x00-0xFF")
    return opcode


@dataclass
class InstructionTable:
    """
    Both opcode spaces of an instruction table.

    Attributes:
        spaces: Per-space mapping of opcode to instruction, in opcode order
        source: Where the table was loaded from (for messages)
    """
    spaces: dict[OpcodeSpace, dict[int, InstructionDescriptor]] = field(default_factory=dict)
    source: str = "<input>"

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<input>") -> "InstructionTable":
        """
        Build a table from a parsed instr.json document.

        Raises:
            TableFormatError: If a section is missing or any entry is malformed
        """
        if not isinstance(data, dict):
            raise TableFormatError(f"{source}: instruction table must be a JSON object")

        spaces: dict[OpcodeSpace, dict[int, InstructionDescriptor]] = {}
        for space in OpcodeSpace:
            section = data.get(space.value)
            if not isinstance(section, dict):
                raise TableFormatError(f"{source}: missing '{space.value}' section")

            entries = {}
            for key, raw in section.items():
                opcode = parse_opcode_key(key)
                if opcode in entries:
                    raise TableFormatError(f"{source}: duplicate opcode {key!r} in '{space.value}'")
                entries[opcode] = InstructionDescriptor.from_dict(opcode, raw, space=space)

            spaces[space] = dict(sorted(entries.items()))
            logger.debug(f"Loaded {len(entries)} {space} instructions from {source}")

        return cls(spaces=spaces, source=source)

    @classmethod
    def from_json(cls, text: str, source: str = "<input>") -> "InstructionTable":
        """Build a table from instr.json text."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse instruction table {source}: {e}")
            raise TableFormatError(f"{source}: invalid JSON: {e}") from e
        return cls.from_dict(data, source=source)

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "InstructionTable":
        """
        Load a table from an instr.json file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            TableFormatError: If the file cannot be parsed
        """
        filepath = Path(filepath)
        return cls.from_json(filepath.read_text(encoding="utf-8"), source=str(filepath))

    @classmethod
    def bundled(cls) -> "InstructionTable":
        """Return the bundled SM83 table."""
        return cls.from_dict(build_sm83_table(), source="<bundled sm83>")

    def space(self, space: OpcodeSpace) -> dict[int, InstructionDescriptor]:
        """Get the opcode -> instruction mapping of one space."""
        return self.spaces.get(space, {})

    def instructions(self, space: OpcodeSpace) -> Iterator[InstructionDescriptor]:
        """Iterate over the instructions of one space in opcode order."""
        yield from self.space(space).values()

    def get(self, opcode: int, space: OpcodeSpace = OpcodeSpace.UNPREFIXED) -> Optional[InstructionDescriptor]:
        """Look up one instruction, or None if the opcode is absent."""
        return self.space(space).get(opcode)

    def mnemonics(self, space: Optional[OpcodeSpace] = None) -> list[str]:
        """Sorted distinct mnemonics of one space, or of both when space is None."""
        spaces = [space] if space is not None else list(OpcodeSpace)
        return sorted({
            instr.mnemonic
            for s in spaces
            for instr in self.instructions(s)
        })

    def to_dict(self) -> dict[str, Any]:
        """Convert back to an instr.json document."""
        return {
            space.value: {
                f"0x{opcode:02X}": instr.to_dict()
                for opcode, instr in self.space(space).items()
            }
            for space in OpcodeSpace
        }

    def __len__(self) -> int:
        return sum(len(entries) for entries in self.spaces.values())
