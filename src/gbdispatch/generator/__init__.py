"""
Dispatch Entry Generator
========================

This package holds the core of gbdispatch: the algorithm that turns each
table instruction into a handler call with correctly shaped operand
references.

Main Components
---------------
- **classify_operand / canonicalize_operand**: operand -> canonical name
- **resolve_write_targets**: marks the read-modify-write operand
- **rewrite_operands**: per-family argument list rewrites
- **DispatchGenerator**: runs the pipeline over both opcode spaces

Example Usage
-------------
>>> from gbdispatch.generator import DispatchGenerator
>>> generator = DispatchGenerator()
>>> str(generator.entry(0x04))
'unprefixed 0x04: inc(write(b), read(b))'
"""

from gbdispatch.generator.entries import (
    AccessMode,
    DispatchEntry,
    OperandRef,
    Scope,
)
from gbdispatch.generator.canonical import (
    CONDITION_NAMES,
    canonicalize_operand,
    classify_operand,
)
from gbdispatch.generator.writeback import is_write_back, resolve_write_targets
from gbdispatch.generator.rewriter import REWRITES, rewrite_operands
from gbdispatch.generator.pipeline import DispatchGenerator, build_entry

__all__ = [
    "AccessMode",
    "DispatchEntry",
    "OperandRef",
    "Scope",
    "CONDITION_NAMES",
    "canonicalize_operand",
    "classify_operand",
    "is_write_back",
    "resolve_write_targets",
    "REWRITES",
    "rewrite_operands",
    "DispatchGenerator",
    "build_entry",
]
