"""
Unit Tests for the Rust Emitter
===============================

Tests for gbdispatch.emitter.RustEmitter: operand rendering, match arms,
grouped arms, match blocks and complete files.
"""

from gbdispatch import __version__
from gbdispatch.config import GeneratorConfig, set_default_config
from gbdispatch.emitter import RustEmitter
from gbdispatch.generator import DispatchGenerator
from gbdispatch.generator.entries import AccessMode, DispatchEntry, OperandRef, Scope
from gbdispatch.isa.table import OpcodeSpace


# =============================================================================
# Operand and Arm Rendering
# =============================================================================

class TestRenderEntry:
    """Tests for single operands and arms."""

    def setup_method(self):
        """Create an emitter with default configuration and a bundled generator."""
        self.emitter = RustEmitter(GeneratorConfig())
        self.generator = DispatchGenerator()

    def render(self, opcode, space=OpcodeSpace.UNPREFIXED):
        return self.emitter.render_entry(self.generator.entry(opcode, space))

    def test_render_operand(self):
        assert self.emitter.render_operand(OperandRef("a")) == "Self::a"
        assert self.emitter.render_operand(OperandRef("nz", scope=Scope.SELF)) == "Self::nz"
        assert self.emitter.render_operand(OperandRef("3", scope=Scope.NONE)) == "3"

    def test_render_write_operand(self):
        ref = OperandRef("hl_indirect", access=AccessMode.READ_MODIFY_WRITE)
        assert self.emitter.render_operand(ref) == "Self::set_hl_indirect"

    def test_load_with_increment(self):
        assert self.render(0x22) == "0x22 => self.ld(Self::set_hl_inc_indirect, Self::a),"

    def test_inc(self):
        assert self.render(0x04) == "0x04 => self.inc(Self::set_b, Self::b),"

    def test_no_operands(self):
        assert self.render(0x00) == "0x00 => self.nop(),"
        assert self.render(0xCB) == "0xCB => self.prefix(),"

    def test_conditional_jump(self):
        assert self.render(0x38) == "0x38 => self.jr(Self::carry, Self::immediate8),"

    def test_rst(self):
        assert self.render(0xFF) == "0xFF => self.rst(38),"

    def test_accumulator(self):
        assert self.render(0x80) == "0x80 => self.add(Self::b),"

    def test_bit(self):
        text = self.render(0x5E, OpcodeSpace.CBPREFIXED)
        assert text == "0x5E => self.bit(3, Self::hl_indirect),"

    def test_res(self):
        text = self.render(0x86, OpcodeSpace.CBPREFIXED)
        assert text == "0x86 => self.res(0, Self::set_hl_indirect, Self::hl_indirect),"

    def test_custom_config(self):
        config = GeneratorConfig(
            receiver="cpu",
            scope_prefix="Op::",
            write_prefix="mut_",
            operand_separator=",",
        )
        emitter = RustEmitter(config)

        text = emitter.render_entry(self.generator.entry(0x22))
        assert text == "0x22 => cpu.ld(Op::mut_hl_inc_indirect,Op::a),"

    def test_default_config_is_shared(self):
        config = GeneratorConfig(receiver="core")
        set_default_config(config)

        assert RustEmitter().config is config


# =============================================================================
# Arm Lists and Match Blocks
# =============================================================================

class TestRenderBlocks:
    """Tests for arm lists, grouped arms and match blocks."""

    def setup_method(self):
        self.emitter = RustEmitter(GeneratorConfig())

    def test_arms_in_order(self, small_table):
        entries = DispatchGenerator(small_table).generate(OpcodeSpace.UNPREFIXED)
        arms = self.emitter.render_arms(entries)

        assert arms == [
            "0x00 => self.nop(),",
            "0x04 => self.inc(Self::set_b, Self::b),",
            "0x20 => self.jr(Self::nz, Self::immediate8),",
            "0x22 => self.ld(Self::set_hl_inc_indirect, Self::a),",
            "0x80 => self.add(Self::b),",
        ]

    def test_grouped_arms(self):
        entries = DispatchGenerator().generate(OpcodeSpace.UNPREFIXED)
        arms = self.emitter.render_grouped_arms(entries)

        assert arms[0] == "0x00 => self.nop(&instr.operands),"
        assert arms[1].startswith("0x01 | 0x02 | 0x06 | 0x08 | 0x0a | 0x0e")
        assert arms[1].endswith(" => self.ld(&instr.operands),")
        assert len([a for a in arms if "self.ld(" in a]) == 1

    def test_render_entries_empty(self):
        assert self.emitter.render_entries([]) == ""

    def test_render_match(self, small_table):
        entries = DispatchGenerator(small_table).generate(OpcodeSpace.CBPREFIXED)
        text = self.emitter.render_match(entries)

        assert text == (
            "    match opcode {\n"
            "      0x00 => self.rlc(Self::set_b, Self::b),\n"
            "      0x46 => self.bit(0, Self::hl_indirect),\n"
            "      0x86 => self.res(0, Self::set_hl_indirect, Self::hl_indirect),\n"
            "      _ => unreachable!(),\n"
            "    }\n"
        )

    def test_render_match_without_fallback(self):
        emitter = RustEmitter(GeneratorConfig(indent=2, fallback_arm=""))
        entry = DispatchEntry(0x00, OpcodeSpace.UNPREFIXED, "nop")

        assert emitter.render_match([entry]) == "match opcode {\n  0x00 => self.nop(),\n}\n"

    def test_render_file(self, small_table):
        generator = DispatchGenerator(small_table)
        text = self.emitter.render_file(generator.generate_all(), source="small.json")

        assert f"// Generated by gbdispatch {__version__} from small.json" in text
        assert "// unprefixed\n    match opcode {" in text
        assert "// cbprefixed (prefix 0xCB)\n    match opcode {" in text
        assert text.index("// unprefixed") < text.index("// cbprefixed")

    def test_render_file_bare_arms(self, small_table):
        generator = DispatchGenerator(small_table)
        text = self.emitter.render_file(generator.generate_all(), wrap_match=False)

        assert "match" not in text
        assert "// unprefixed\n0x00 => self.nop(),\n" in text
