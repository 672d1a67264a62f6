"""Artifacts derived from a validated schema."""

from .docs import render_module_docs, write_module_docs
from .ir_json import build_ir, load_ir, save_ir

__all__ = ["build_ir", "load_ir", "render_module_docs", "save_ir", "write_module_docs"]
