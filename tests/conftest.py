"""
Shared pytest fixtures for the gbdispatch test suite.
"""

import json

import pytest

from gbdispatch.config import set_default_config
from gbdispatch.isa.table import InstructionTable


def _instr(mnemonic, *operands, size=1, cycles=(4,)):
    return {
        "mnemonic": mnemonic,
        "bytes": size,
        "cycles": list(cycles),
        "operands": list(operands),
    }


def _op(name, immediate=True, **flags):
    operand = {"name": name, "immediate": immediate}
    operand.update(flags)
    return operand


# A few representative opcodes of each space, keys deliberately unsorted
SMALL_TABLE = {
    "unprefixed": {
        "0x80": _instr("ADD", _op("A"), _op("B")),
        "0x00": _instr("NOP"),
        "0x22": _instr("LD", _op("HL", False, increment=True), _op("A"), cycles=(8,)),
        "0x04": _instr("INC", _op("B")),
        "0x20": _instr("JR", _op("NZ"), _op("e8"), size=2, cycles=(12, 8)),
    },
    "cbprefixed": {
        "0x86": _instr("RES", _op("0"), _op("HL", False), size=2, cycles=(16,)),
        "0x00": _instr("RLC", _op("B"), size=2, cycles=(8,)),
        "0x46": _instr("BIT", _op("0"), _op("HL", False), size=2, cycles=(12,)),
    },
}


@pytest.fixture(autouse=True)
def reset_default_config():
    """Make every test start from a fresh default emitter configuration."""
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture(scope="session")
def bundled_table():
    """The bundled SM83 instruction table."""
    return InstructionTable.bundled()


@pytest.fixture
def small_table_data():
    """A small instr.json document (fresh copy per test)."""
    return json.loads(json.dumps(SMALL_TABLE))


@pytest.fixture
def small_table(small_table_data):
    """The small instr.json document loaded as an InstructionTable."""
    return InstructionTable.from_dict(small_table_data, source="small.json")


@pytest.fixture
def small_table_file(tmp_path, small_table_data):
    """The small instr.json document written to disk."""
    path = tmp_path / "instr.json"
    path.write_text(json.dumps(small_table_data), encoding="utf-8")
    return path
