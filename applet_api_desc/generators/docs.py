# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Markdown reference documentation for a schema tree."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from ..file_io.template_renderer import TemplateRenderer
from ..models.field_types import Callback, Pointer
from ..models.items import Enumeration, Field, Function, Module
from ..validation.validator import validate

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "module.md.jinja2"


def _field_view(f: Field) -> Dict[str, Any]:
    note = ""
    if isinstance(f.type, Pointer):
        note = f" (length in `{f.type.length}`)"
    elif isinstance(f.type, Callback):
        slots = ", ".join(f"`{s}`" for s in f.type.abi_slots(f.name))
        note = f" (callback passed as {slots})"
    elif f.enum is not None:
        note = f" (one of `{f.enum}`)"
    return {"name": f.name, "shape": f.render_type(), "docs": f.docs, "note": note}


def format_signature(function: Function) -> str:
    params = ", ".join(f"{p.name}: {p.render_type()}" for p in function.params)
    results = ", ".join(f"{r.name}: {r.render_type()}" for r in function.results)
    return f"{function.name}({params}) -> ({results})"


def _module_view(path: str, module: Module) -> Dict[str, Any]:
    functions = [item for item in module.items if isinstance(item, Function)]
    enums = [item for item in module.items if isinstance(item, Enumeration)]
    return {
        "path": path,
        "docs": module.docs,
        "functions": [
            {
                "name": fn.name,
                "link": fn.link,
                "docs": fn.docs,
                "signature": format_signature(fn),
                "params": [_field_view(p) for p in fn.params],
                "results": [_field_view(r) for r in fn.results],
            }
            for fn in functions
        ],
        "enums": [
            {
                "name": enum.name,
                "docs": enum.docs,
                "variants": [{"name": v.name, "value": v.value, "docs": v.docs} for v in enum.variants],
            }
            for enum in enums
        ],
    }


def _docs_context(root: Module, title: Optional[str]) -> Dict[str, Any]:
    validate(root)
    modules: List[Dict[str, Any]] = [
        _module_view(path, item) for path, item in root.walk() if isinstance(item, Module)
    ]
    return {
        "title": title or f"Applet API reference: {root.name}",
        "root": root.name,
        "modules": modules,
    }


def render_module_docs(
    root: Module,
    title: Optional[str] = None,
    renderer: Optional[TemplateRenderer] = None,
) -> str:
    """Render reference docs for every module of the tree.

    The tree is validated first; an invalid tree raises before anything is rendered.
    """
    context = _docs_context(root, title)
    renderer = renderer or TemplateRenderer()
    return renderer.render_template(TEMPLATE_NAME, **context)


def write_module_docs(root: Module, output_dir: str, title: Optional[str] = None) -> str:
    """Render docs to ``<output_dir>/<root>.md`` and return the file path."""
    context = _docs_context(root, title)
    output_path = os.path.join(output_dir, f"{root.name}.md")
    TemplateRenderer().render_template_to_file(TEMPLATE_NAME, output_path, **context)
    logger.info(f"Wrote API reference: {output_path}")
    return output_path
