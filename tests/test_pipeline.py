"""
Integration Tests for the Dispatch Generator
============================================

End-to-end tests of the per-opcode pipeline: instruction table in,
dispatch entries out, over both opcode spaces of the bundled SM83 table
and small hand-written tables.
"""

import pytest

from gbdispatch.config import GeneratorConfig
from gbdispatch.emitter import RustEmitter
from gbdispatch.errors import DispatchError, GenerationError, UnclassifiableOperandError
from gbdispatch.generator import DispatchGenerator, build_entry
from gbdispatch.generator.entries import AccessMode, Scope
from gbdispatch.isa.table import InstructionTable, OpcodeSpace


def entry_text(generator, opcode, space=OpcodeSpace.UNPREFIXED):
    return str(generator.entry(opcode, space))


# =============================================================================
# Bundled Table Tests
# =============================================================================

class TestBundledDispatch:
    """Dispatch entries generated from the bundled SM83 table."""

    def setup_method(self):
        """Create a generator over the bundled table."""
        self.generator = DispatchGenerator()

    @pytest.mark.parametrize("opcode,expected", [
        (0x00, "nop()"),
        (0x01, "ld(write(bc), read(immediate16))"),
        (0x02, "ld(write(bc_indirect), read(a))"),
        (0x03, "inc(write(bc), read(bc))"),
        (0x04, "inc(write(b), read(b))"),
        (0x08, "ld(write(indirect_abs16), read(sp))"),
        (0x09, "add(read(bc))"),
        (0x0A, "ld(write(a), read(bc_indirect))"),
        (0x0E, "ld(write(c), read(immediate8))"),
        (0x10, "stop(read(immediate8))"),
        (0x18, "jr(read(immediate8))"),
        (0x20, "jr(read(nz), read(immediate8))"),
        (0x22, "ld(write(hl_inc_indirect), read(a))"),
        (0x32, "ld(write(hl_dec_indirect), read(a))"),
        (0x34, "inc(write(hl_indirect), read(hl_indirect))"),
        (0x38, "jr(read(carry), read(immediate8))"),
        (0x3D, "dec(write(a), read(a))"),
        (0x4E, "ld(write(c), read(hl_indirect))"),
        (0x77, "ld(write(hl_indirect), read(a))"),
        (0x80, "add(read(b))"),
        (0xA6, "and(read(hl_indirect))"),
        (0xC0, "ret(read(nz))"),
        (0xC1, "pop(read(bc))"),
        (0xC5, "push(read(bc))"),
        (0xC7, "rst(read(00))"),
        (0xCB, "prefix()"),
        (0xD8, "ret(read(c))"),
        (0xDA, "jp(read(carry), read(immediate16))"),
        (0xDC, "call(read(carry), read(immediate16))"),
        (0xE0, "ldh(write(indirect_abs8), read(a))"),
        (0xE2, "ldh(write(c_indirect), read(a))"),
        (0xE8, "add(read(immediate8))"),
        (0xE9, "jp(read(hl))"),
        (0xEA, "ld(write(indirect_abs16), read(a))"),
        (0xF0, "ldh(write(a), read(indirect_abs8))"),
        (0xF2, "ldh(write(a), read(c_indirect))"),
        (0xF8, "ld(write(hl), read(sp_inc), read(immediate8))"),
        (0xFE, "cp(read(immediate8))"),
        (0xFF, "rst(read(38))"),
        (0xD3, "illegal_d3()"),
    ])
    def test_unprefixed(self, opcode, expected):
        assert entry_text(self.generator, opcode) == f"unprefixed 0x{opcode:02X}: {expected}"

    @pytest.mark.parametrize("opcode,expected", [
        (0x00, "rlc(write(b), read(b))"),
        (0x06, "rlc(write(hl_indirect), read(hl_indirect))"),
        (0x11, "rl(write(c), read(c))"),
        (0x37, "swap(write(a), read(a))"),
        (0x46, "bit(read(0), read(hl_indirect))"),
        (0x5E, "bit(read(3), read(hl_indirect))"),
        (0x86, "res(read(0), write(hl_indirect), read(hl_indirect))"),
        (0xC7, "set(read(0), write(a), read(a))"),
        (0xFE, "set(read(7), write(hl_indirect), read(hl_indirect))"),
    ])
    def test_cbprefixed(self, opcode, expected):
        text = entry_text(self.generator, opcode, OpcodeSpace.CBPREFIXED)
        assert text == f"cbprefixed 0x{opcode:02X}: {expected}"

    def test_conditions_are_self_scoped(self):
        entry = self.generator.entry(0x20)
        assert entry.operands[0].scope == Scope.SELF

    def test_literals_are_unscoped(self):
        assert self.generator.entry(0xFF).operands[0].scope == Scope.NONE
        assert self.generator.entry(0x46, OpcodeSpace.CBPREFIXED).operands[0].scope == Scope.NONE

    def test_every_opcode_generates(self):
        """Both spaces generate completely, in opcode order."""
        result = self.generator.generate_all()

        for space in OpcodeSpace:
            assert [e.opcode for e in result[space]] == list(range(0x100))

    def test_at_most_one_write_per_entry(self):
        for entries in self.generator.generate_all().values():
            for entry in entries:
                writes = [ref for ref in entry.operands if ref.is_write]
                assert len(writes) <= 1, str(entry)

    def test_no_write_back_family_never_writes(self):
        for entry in self.generator.generate(OpcodeSpace.UNPREFIXED):
            if entry.handler in ("add", "adc", "sub", "sbc", "cp", "jp", "jr", "call"):
                assert not entry.has_write, str(entry)

    def test_bit_never_writes(self):
        for entry in self.generator.generate(OpcodeSpace.CBPREFIXED):
            if entry.handler == "bit":
                assert not entry.has_write, str(entry)

    def test_read_modify_write_shape(self):
        """Every INC/DEC/rotate entry is (write(x), read(x))."""
        for entries in self.generator.generate_all().values():
            for entry in entries:
                if entry.handler in ("inc", "dec", "rlc", "rrc", "rl", "rr", "sla", "sra", "srl", "swap"):
                    first, second = entry.operands
                    assert first.access == AccessMode.READ_MODIFY_WRITE
                    assert second.access == AccessMode.READ
                    assert first.name == second.name

    def test_bit_modify_shape(self):
        """Every RES/SET entry is (bit, write(x), read(x))."""
        for entry in self.generator.generate(OpcodeSpace.CBPREFIXED):
            if entry.handler in ("res", "set"):
                index, target, source = entry.operands
                assert index.scope == Scope.NONE
                assert target.is_write
                assert not source.is_write
                assert target.name == source.name

    def test_regeneration_is_identical(self):
        """Two independent passes over the bundled table render the same bytes."""
        texts = []
        for _ in range(2):
            generator = DispatchGenerator(InstructionTable.bundled())
            text = RustEmitter(GeneratorConfig()).render_file(
                generator.generate_all(),
                source=generator.table.source,
            )
            texts.append(text.encode("utf-8"))

        assert texts[0] == texts[1]
        assert self.generator.generate_all() == DispatchGenerator().generate_all()

    def test_grouped_regeneration_is_identical(self):
        first = RustEmitter(GeneratorConfig()).render_file(
            DispatchGenerator(InstructionTable.bundled()).generate_all(), grouped=True,
        )
        second = RustEmitter(GeneratorConfig()).render_file(
            DispatchGenerator(InstructionTable.bundled()).generate_all(), grouped=True,
        )
        assert first == second

    def test_entry_missing_opcode(self, small_table):
        assert DispatchGenerator(small_table).entry(0x01) is None


# =============================================================================
# Small Table Tests
# =============================================================================

class TestSmallTable:
    """Generation over a hand-written table."""

    def test_generate_in_opcode_order(self, small_table):
        entries = DispatchGenerator(small_table).generate(OpcodeSpace.UNPREFIXED)

        assert [e.opcode for e in entries] == [0x00, 0x04, 0x20, 0x22, 0x80]
        assert [e.handler for e in entries] == ["nop", "inc", "jr", "ld", "add"]

    def test_names(self, small_table):
        entry = build_entry(small_table.get(0x22))
        assert entry.names == ("hl_inc_indirect", "a")

    def test_order_independent_of_keys(self, small_table_data):
        """Reordering keys in the document does not change the output."""
        reordered = dict(reversed(list(small_table_data["unprefixed"].items())))
        first = DispatchGenerator(InstructionTable.from_dict(small_table_data))
        small_table_data["unprefixed"] = reordered
        second = DispatchGenerator(InstructionTable.from_dict(small_table_data))

        assert first.generate_all() == second.generate_all()

    def test_tagged_half_carry_condition(self):
        """A table can tag H as the half-carry test of JP H,a16."""
        table = InstructionTable.from_dict({
            "unprefixed": {
                "0x00": {
                    "mnemonic": "JP",
                    "operands": [{"name": "H", "role": "condition"}, {"name": "a16"}],
                },
            },
            "cbprefixed": {},
        })
        entry = DispatchGenerator(table).entry(0x00)

        assert str(entry) == "unprefixed 0x00: jp(read(hcarry), read(immediate16))"
        assert entry.operands[0].scope == Scope.SELF

    def test_untagged_h_stays_register(self):
        table = InstructionTable.from_dict({
            "unprefixed": {"0x00": {"mnemonic": "JP", "operands": [{"name": "H"}, {"name": "a16"}]}},
            "cbprefixed": {},
        })
        entry = DispatchGenerator(table).entry(0x00)

        assert entry.names == ("h", "immediate16")
        assert entry.operands[0].scope == Scope.INSTANCE


# =============================================================================
# Failure Tests
# =============================================================================

class TestUnclassifiableOperand:
    """Generation must abort with full opcode context."""

    def _table(self, small_table_data, space, key, instr):
        small_table_data[space][key] = instr
        return InstructionTable.from_dict(small_table_data, source="bad.json")

    def test_error_context(self, small_table_data):
        table = self._table(small_table_data, "unprefixed", "0x99", {
            "mnemonic": "LD",
            "operands": [{"name": "B", "immediate": True}, {"name": "XYZ", "immediate": True}],
        })

        with pytest.raises(UnclassifiableOperandError) as exc_info:
            DispatchGenerator(table).generate(OpcodeSpace.UNPREFIXED)

        error = exc_info.value
        assert error.opcode == 0x99
        assert error.space == "unprefixed"
        assert error.mnemonic == "LD"
        assert error.operand_index == 1
        assert error.operand_name == "XYZ"
        assert str(error).startswith("unprefixed 0x99 (LD): error: operand 1 ('XYZ')")

    def test_empty_name_in_prefixed_space(self, small_table_data):
        table = self._table(small_table_data, "cbprefixed", "0x47", {
            "mnemonic": "BIT",
            "operands": [{"name": "", "immediate": True}, {"name": "A", "immediate": True}],
        })

        with pytest.raises(UnclassifiableOperandError) as exc_info:
            DispatchGenerator(table).generate_all()

        assert exc_info.value.space == "cbprefixed"
        assert exc_info.value.operand_index == 0

    def test_error_hierarchy(self, small_table_data):
        table = self._table(small_table_data, "unprefixed", "0x99", {
            "mnemonic": "LD",
            "operands": [{"name": "IX", "immediate": True}],
        })

        with pytest.raises(GenerationError):
            DispatchGenerator(table).generate(OpcodeSpace.UNPREFIXED)
        with pytest.raises(DispatchError):
            DispatchGenerator(table).generate(OpcodeSpace.UNPREFIXED)

    def test_other_space_unaffected(self, small_table_data):
        """A bad prefixed entry does not stop the primary space on its own."""
        table = self._table(small_table_data, "cbprefixed", "0x47", {
            "mnemonic": "BIT",
            "operands": [{"name": "?", "immediate": True}],
        })

        entries = DispatchGenerator(table).generate(OpcodeSpace.UNPREFIXED)
        assert len(entries) == 5
