import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from .. import APPLET_API_FORMAT_VERSION
from ..file_io.source_location import SourceLocation, format_source
from ..models.field_types import Callback, Integer, Pointer
from ..models.ir import IR_VERSION, FieldData, FieldTypeData, IrPayload, ItemData
from ..models.items import Enumeration, Field, Function, Item, Module
from ..validation.validator import validate

logger = logging.getLogger(__name__)


def _field_type_data(f: Field) -> FieldTypeData:
    if isinstance(f.type, Integer):
        return {"kind": "integer", "signed": f.type.signed, "bits": f.type.bits}
    if isinstance(f.type, Pointer):
        return {"kind": "pointer", "mutable": f.type.mutable, "length": f.type.length}
    if isinstance(f.type, Callback):
        return {"kind": "callback", "abi_slots": list(f.type.abi_slots(f.name))}
    raise TypeError(f"Unknown field type {f.type!r}")


def _field_data(f: Field) -> FieldData:
    return {
        "name": f.name,
        "docs": f.docs,
        "type": _field_type_data(f),
        "shape": f.render_type(),
        "enum": f.enum,
    }


def item_data(item: Item, path: str) -> ItemData:
    """Convert a schema item (recursively for modules) to plain data."""
    if isinstance(item, Module):
        return {
            "kind": "module",
            "name": item.name,
            "path": path,
            "docs": item.docs,
            "items": [item_data(child, f"{path}/{child.name}") for child in item.items],
        }
    if isinstance(item, Function):
        return {
            "kind": "function",
            "name": item.name,
            "path": path,
            "docs": item.docs,
            "link": item.link,
            "params": [_field_data(p) for p in item.params],
            "results": [_field_data(r) for r in item.results],
        }
    if isinstance(item, Enumeration):
        return {
            "kind": "enum",
            "name": item.name,
            "path": path,
            "docs": item.docs,
            "variants": [{"name": v.name, "value": v.value, "docs": v.docs} for v in item.variants],
        }
    raise TypeError(f"Unknown item {item!r}")


def build_ir(root: Module) -> IrPayload:
    """Build a versioned IR payload from a schema tree, validating it first."""

    validate(root)
    return {
        "schema_version": IR_VERSION,
        "metadata": {
            "name": root.name,
            "format_version": APPLET_API_FORMAT_VERSION,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "symbols": sorted(fn.link for _, fn in root.functions()),
        },
        "data": item_data(root, root.name),
    }


def save_ir(output_path: str, root: Module) -> Dict[str, Any]:
    """Build and save the IR payload to JSON."""

    payload = build_ir(root)
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    try:
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=True)
        logger.info(f"Saved schema IR JSON: {output_path}")
    except OSError as e:
        src = SourceLocation(file_path=Path(output_path))
        logger.error(f"Failed to save schema IR JSON: {output_path}: {e}{format_source(src)}")
        raise
    return payload


def load_ir(input_path: str) -> Dict[str, Any]:
    """Load an IR payload from JSON."""

    try:
        with open(input_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        src = SourceLocation(file_path=Path(input_path))
        logger.error(f"Failed to load schema IR JSON: {input_path}: {e}{format_source(src)}")
        raise
