"""
Dispatch Emitter
================

Textual serialization of generated dispatch entries.

>>> from gbdispatch.emitter import RustEmitter
>>> from gbdispatch.generator import DispatchGenerator
>>> emitter = RustEmitter()
>>> emitter.render_entry(DispatchGenerator().entry(0x77))
'0x77 => self.ld(Self::set_hl_indirect, Self::a),'
"""

from gbdispatch.emitter.rust import RustEmitter

__all__ = ["RustEmitter"]
