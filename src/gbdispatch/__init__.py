"""
gbdispatch - SM83 Dispatch Code Generator
=========================================

This package turns a declarative SM83 (Game Boy CPU) instruction table
into dispatch code for a CPU interpreter: one match arm per opcode that
calls the right handler with correctly shaped operand references.

The SM83 has two opcode spaces: the primary space and the 0xCB-prefixed
space (rotates, shifts and single-bit operations). Both are processed by
the same pipeline, one opcode at a time.

Main Components
---------------
- **isa**: instruction table loading and the operand vocabulary
    Reads the instr.json schema or the bundled SM83 table

- **generator**: operand classification and dispatch entry synthesis
    Canonical operand names, write-target resolution, family rewrites

- **emitter**: Rust match arm rendering

- **cli**: the gbdgen command-line tool

Quick Start
-----------
Generate dispatch entries:
    >>> from gbdispatch import DispatchGenerator, OpcodeSpace
    >>> generator = DispatchGenerator()
    >>> entries = generator.generate(OpcodeSpace.UNPREFIXED)

Render them as Rust:
    >>> from gbdispatch import RustEmitter
    >>> print(RustEmitter().render_match(entries))

Or use the command-line tool:
    $ gbdgen generate -o dispatch.rs
    $ gbdgen generate -t instr.json --space cbprefixed
    $ gbdgen show 0x22

Reference Documentation
-----------------------
- Pan Docs: https://gbdev.io/pandocs/
- SM83 opcode table: https://gbdev.io/gb-opcodes/optables/

Version History
---------------
1.0.0 - Initial release with generator, Rust emitter and gbdgen CLI

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from gbdispatch.errors import (
    DispatchError,
    TableError,
    TableFormatError,
    GenerationError,
    UnclassifiableOperandError,
)

from gbdispatch.isa import (
    InstructionDescriptor,
    InstructionFamily,
    InstructionTable,
    OpcodeSpace,
    OperandDescriptor,
    OperandRole,
    build_sm83_table,
    family_of,
)

from gbdispatch.generator import (
    AccessMode,
    DispatchEntry,
    DispatchGenerator,
    OperandRef,
    Scope,
    build_entry,
    canonicalize_operand,
    classify_operand,
    resolve_write_targets,
    rewrite_operands,
)

from gbdispatch.config import GeneratorConfig
from gbdispatch.emitter import RustEmitter

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Exception hierarchy
    "DispatchError",
    "TableError",
    "TableFormatError",
    "GenerationError",
    "UnclassifiableOperandError",
    # Instruction set
    "InstructionDescriptor",
    "InstructionFamily",
    "InstructionTable",
    "OpcodeSpace",
    "OperandDescriptor",
    "OperandRole",
    "build_sm83_table",
    "family_of",
    # Generator
    "AccessMode",
    "DispatchEntry",
    "DispatchGenerator",
    "OperandRef",
    "Scope",
    "build_entry",
    "canonicalize_operand",
    "classify_operand",
    "resolve_write_targets",
    "rewrite_operands",
    # Emission
    "GeneratorConfig",
    "RustEmitter",
]
