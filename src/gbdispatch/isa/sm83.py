"""
Bundled SM83 Instruction Table
==============================

Builds the complete SM83 (Game Boy CPU) instruction table in the
instr.json schema, so the generator can run without an external file.

The SM83 opcode map is highly regular. Opcodes decompose into fields

    x = opcode >> 6, y = (opcode >> 3) & 7, z = opcode & 7
    p = y >> 1,      q = y & 1

and most blocks are a function of these fields:

- 0x40-0x7F: LD r[y],r[z] (0x76 is HALT)
- 0x80-0xBF: ALU[y] A,r[z]
- CB 0x00-0x3F: ROT[y] r[z]
- CB 0x40-0xFF: BIT/RES/SET y,r[z]

The remaining blocks are built per z column, following the same field
decomposition used in the SM83 decoding tables.

Reference
---------
- Pan Docs, CPU Instruction Set: https://gbdev.io/pandocs/CPU_Instruction_Set.html
- gbdev opcode table: https://gbdev.io/gb-opcodes/optables/

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from typing import Any


# =============================================================================
# Operand Field Tables
# =============================================================================

# r[z]: index 6 is the (HL) memory operand
R8 = ("B", "C", "D", "E", "H", "L", "(HL)", "A")

# rp[p] and rp2[p]
RP = ("BC", "DE", "HL", "SP")
RP2 = ("BC", "DE", "HL", "AF")

# cc[y] for the conditional JR/JP/CALL/RET forms
CC = ("NZ", "Z", "NC", "C")

ALU = ("ADD", "ADC", "SUB", "SBC", "AND", "XOR", "OR", "CP")
ROT = ("RLC", "RRC", "RL", "RR", "SLA", "SRA", "SWAP", "SRL")
ACC_OPS = ("RLCA", "RRCA", "RLA", "RRA", "DAA", "CPL", "SCF", "CCF")

ILLEGAL_OPCODES = (0xD3, 0xDB, 0xDD, 0xE3, 0xE4, 0xEB, 0xEC, 0xED, 0xF4, 0xFC, 0xFD)


# =============================================================================
# Entry Builders
# =============================================================================

def _op(name: str, immediate: bool = True, increment: bool = False, decrement: bool = False) -> dict[str, Any]:
    operand: dict[str, Any] = {"name": name, "immediate": immediate}
    if increment:
        operand["increment"] = True
    if decrement:
        operand["decrement"] = True
    return operand


def _r8(index: int) -> dict[str, Any]:
    name = R8[index]
    if name == "(HL)":
        return _op("HL", immediate=False)
    return _op(name)


def _entry(mnemonic: str, operands: list[dict[str, Any]], size: int, cycles: list[int]) -> dict[str, Any]:
    return {
        "mnemonic": mnemonic,
        "bytes": size,
        "cycles": cycles,
        "operands": operands,
    }


def _unprefixed_block0(y: int, z: int) -> dict[str, Any]:
    """Opcodes 0x00-0x3F."""
    p, q = y >> 1, y & 1

    if z == 0:
        if y == 0:
            return _entry("NOP", [], 1, [4])
        if y == 1:
            return _entry("LD", [_op("a16", immediate=False), _op("SP")], 3, [20])
        if y == 2:
            return _entry("STOP", [_op("n8")], 2, [4])
        if y == 3:
            return _entry("JR", [_op("e8")], 2, [12])
        return _entry("JR", [_op(CC[y - 4]), _op("e8")], 2, [12, 8])

    if z == 1:
        if q == 0:
            return _entry("LD", [_op(RP[p]), _op("n16")], 3, [12])
        return _entry("ADD", [_op("HL"), _op(RP[p])], 1, [8])

    if z == 2:
        pointer = {
            0: _op("BC", immediate=False),
            1: _op("DE", immediate=False),
            2: _op("HL", immediate=False, increment=True),
            3: _op("HL", immediate=False, decrement=True),
        }[p]
        if q == 0:
            return _entry("LD", [pointer, _op("A")], 1, [8])
        return _entry("LD", [_op("A"), pointer], 1, [8])

    if z == 3:
        mnemonic = "INC" if q == 0 else "DEC"
        return _entry(mnemonic, [_op(RP[p])], 1, [8])

    if z in (4, 5):
        mnemonic = "INC" if z == 4 else "DEC"
        return _entry(mnemonic, [_r8(y)], 1, [12 if y == 6 else 4])

    if z == 6:
        return _entry("LD", [_r8(y), _op("n8")], 2, [12 if y == 6 else 8])

    return _entry(ACC_OPS[y], [], 1, [4])


def _unprefixed_block3(opcode: int, y: int, z: int) -> dict[str, Any]:
    """Opcodes 0xC0-0xFF."""
    p, q = y >> 1, y & 1

    if opcode in ILLEGAL_OPCODES:
        return _entry(f"ILLEGAL_{opcode:02X}", [], 1, [4])

    if z == 0:
        if y < 4:
            return _entry("RET", [_op(CC[y])], 1, [20, 8])
        return {
            4: _entry("LDH", [_op("a8", immediate=False), _op("A")], 2, [12]),
            5: _entry("ADD", [_op("SP"), _op("e8")], 2, [16]),
            6: _entry("LDH", [_op("A"), _op("a8", immediate=False)], 2, [12]),
            7: _entry("LD", [_op("HL"), _op("SP", increment=True), _op("e8")], 2, [12]),
        }[y]

    if z == 1:
        if q == 0:
            return _entry("POP", [_op(RP2[p])], 1, [12])
        return {
            0: _entry("RET", [], 1, [16]),
            1: _entry("RETI", [], 1, [16]),
            2: _entry("JP", [_op("HL")], 1, [4]),
            3: _entry("LD", [_op("SP"), _op("HL")], 1, [8]),
        }[p]

    if z == 2:
        if y < 4:
            return _entry("JP", [_op(CC[y]), _op("a16")], 3, [16, 12])
        return {
            4: _entry("LDH", [_op("C", immediate=False), _op("A")], 1, [8]),
            5: _entry("LD", [_op("a16", immediate=False), _op("A")], 3, [16]),
            6: _entry("LDH", [_op("A"), _op("C", immediate=False)], 1, [8]),
            7: _entry("LD", [_op("A"), _op("a16", immediate=False)], 3, [16]),
        }[y]

    if z == 3:
        return {
            0: _entry("JP", [_op("a16")], 3, [16]),
            1: _entry("PREFIX", [], 1, [4]),
            6: _entry("DI", [], 1, [4]),
            7: _entry("EI", [], 1, [4]),
        }[y]

    if z == 4:
        return _entry("CALL", [_op(CC[y]), _op("a16")], 3, [24, 12])

    if z == 5:
        if q == 0:
            return _entry("PUSH", [_op(RP2[p])], 1, [16])
        return _entry("CALL", [_op("a16")], 3, [24])

    if z == 6:
        return _entry(ALU[y], [_op("A"), _op("n8")], 2, [8])

    return _entry("RST", [_op(f"${y * 8:02X}")], 1, [16])


def build_unprefixed() -> dict[str, dict[str, Any]]:
    """Build the 256 entries of the primary opcode space."""
    table = {}
    for opcode in range(0x100):
        x, y, z = opcode >> 6, (opcode >> 3) & 7, opcode & 7

        if x == 0:
            entry = _unprefixed_block0(y, z)
        elif x == 1:
            if opcode == 0x76:
                entry = _entry("HALT", [], 1, [4])
            else:
                memory = y == 6 or z == 6
                entry = _entry("LD", [_r8(y), _r8(z)], 1, [8 if memory else 4])
        elif x == 2:
            entry = _entry(ALU[y], [_op("A"), _r8(z)], 1, [8 if z == 6 else 4])
        else:
            entry = _unprefixed_block3(opcode, y, z)

        table[f"0x{opcode:02X}"] = entry
    return table


def build_cbprefixed() -> dict[str, dict[str, Any]]:
    """Build the 256 entries of the 0xCB-prefixed opcode space."""
    table = {}
    for opcode in range(0x100):
        x, y, z = opcode >> 6, (opcode >> 3) & 7, opcode & 7
        memory = z == 6

        if x == 0:
            entry = _entry(ROT[y], [_r8(z)], 2, [16 if memory else 8])
        else:
            mnemonic = ("BIT", "RES", "SET")[x - 1]
            if memory:
                cycles = 12 if mnemonic == "BIT" else 16
            else:
                cycles = 8
            entry = _entry(mnemonic, [_op(str(y)), _r8(z)], 2, [cycles])

        table[f"0x{opcode:02X}"] = entry
    return table


def build_sm83_table() -> dict[str, dict[str, dict[str, Any]]]:
    """
    Build the complete SM83 table as an instr.json document.

    Returns:
        Dict with "unprefixed" and "cbprefixed" sections of 256 entries each
    """
    return {
        "unprefixed": build_unprefixed(),
        "cbprefixed": build_cbprefixed(),
    }
