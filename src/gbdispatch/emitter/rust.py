"""
Rust Dispatch Emitter
=====================

Serializes dispatch entries into Rust match arms. The emitter adds no
semantics: every decision about names, access modes and scopes has
already been made by the generator.

Output Forms
------------
Per-opcode arms, one per entry:

    0x22 => self.ld(Self::set_hl_inc_indirect, Self::a),
    0xCB => self.prefix(),
    0xFF => self.rst(38),

Grouped arms, one per handler, passing the decoded operand slice:

    0x01 | 0x02 | 0x06 => self.ld(&instr.operands),

Either form can be wrapped in a complete match block:

    match opcode {
      0x00 => self.nop(),
      ...
      _ => unreachable!(),
    }

Reference Rendering
-------------------
    Scope     Access              Rendered
    --------  ------------------  ---------------------
    INSTANCE  READ                Self::hl_indirect
    INSTANCE  READ_MODIFY_WRITE   Self::set_hl_indirect
    SELF      READ                Self::nz
    NONE      READ                3

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from typing import Iterable, Mapping, Optional

from gbdispatch import __version__
from gbdispatch.analysis import handler_groups
from gbdispatch.config import GeneratorConfig, get_default_config
from gbdispatch.generator.entries import DispatchEntry, OperandRef
from gbdispatch.isa.table import OpcodeSpace


class RustEmitter:
    """
    Renders dispatch entries as Rust source text.

    Attributes:
        config: Rendering configuration
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config if config is not None else get_default_config()

    # -------------------------------------------------------------------------
    # Single entries
    # -------------------------------------------------------------------------

    def render_operand(self, ref: OperandRef) -> str:
        """Render one operand reference."""
        name = f"{self.config.write_prefix}{ref.name}" if ref.is_write else ref.name
        if ref.scope.is_scoped:
            return f"{self.config.scope_prefix}{name}"
        return name

    def render_call(self, entry: DispatchEntry) -> str:
        """Render the handler call of an entry, e.g. "self.inc(Self::set_b, Self::b)"."""
        args = self.config.operand_separator.join(
            self.render_operand(ref) for ref in entry.operands
        )
        return f"{self.config.receiver}.{entry.handler}({args})"

    def render_entry(self, entry: DispatchEntry) -> str:
        """Render one match arm without indentation."""
        return f"0x{entry.opcode:02X} => {self.render_call(entry)},"

    # -------------------------------------------------------------------------
    # Arm lists
    # -------------------------------------------------------------------------

    def render_arms(self, entries: Iterable[DispatchEntry]) -> list[str]:
        """Render one arm per entry, in entry order."""
        return [self.render_entry(entry) for entry in entries]

    def render_grouped_arms(self, entries: Iterable[DispatchEntry]) -> list[str]:
        """Render one arm per handler, opcodes joined with ' | '."""
        arms = []
        for handler, opcodes in handler_groups(entries).items():
            pattern = " | ".join(f"0x{opcode:02x}" for opcode in opcodes)
            arms.append(
                f"{pattern} => {self.config.receiver}.{handler}({self.config.operands_argument}),"
            )
        return arms

    def render_entries(self, entries: Iterable[DispatchEntry], grouped: bool = False) -> str:
        """Render arms as text, one per line, without a match block."""
        arms = self.render_grouped_arms(entries) if grouped else self.render_arms(entries)
        return "\n".join(arms) + "\n" if arms else ""

    # -------------------------------------------------------------------------
    # Match blocks and files
    # -------------------------------------------------------------------------

    def render_match(self, entries: Iterable[DispatchEntry], grouped: bool = False) -> str:
        """Render a complete match block around the arms."""
        arms = self.render_grouped_arms(entries) if grouped else self.render_arms(entries)
        arm_indent = " " * self.config.indent
        outer_indent = " " * max(0, self.config.indent - 2)

        lines = [f"{outer_indent}match {self.config.match_subject} {{"]
        lines.extend(f"{arm_indent}{arm}" for arm in arms)
        if self.config.fallback_arm:
            lines.append(f"{arm_indent}{self.config.fallback_arm}")
        lines.append(f"{outer_indent}}}")
        return "\n".join(lines) + "\n"

    def render_file(
        self,
        entries_by_space: Mapping[OpcodeSpace, Iterable[DispatchEntry]],
        source: str = "<input>",
        grouped: bool = False,
        wrap_match: bool = True,
    ) -> str:
        """
        Render the dispatch code of several opcode spaces as one text.

        Each space gets a comment header naming it, followed by either a
        match block or the bare arms.
        """
        lines = [
            "// =============================================================================",
            "// SM83 dispatch table",
            "// =============================================================================",
            f"// Generated by gbdispatch {__version__} from {source}",
            "// Do not edit by hand: rerun gbdgen instead.",
            "// =============================================================================",
            "",
        ]
        text = "\n".join(lines) + "\n"

        sections = []
        for space, entries in entries_by_space.items():
            header = f"// {space.value}"
            if space.prefix is not None:
                header += f" (prefix 0x{space.prefix:02X})"
            body = (
                self.render_match(entries, grouped=grouped)
                if wrap_match
                else self.render_entries(entries, grouped=grouped)
            )
            sections.append(f"{header}\n{body}")

        return text + "\n".join(sections)
