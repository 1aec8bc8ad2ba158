from __future__ import annotations

"""Project validation for effect documents.

UI-agnostic, opt-in checker. Load and spawn never call it; the host runs it
on demand (Validate action, before export, selftests).

Contract:
- Validation is deterministic and never mutates the document.
- Errors mark a document that cannot spawn as authored (bad texture slot,
  capacity above the editor bound).
- Warnings mark documents that spawn but silently differ from what the
  author probably meant (unresolved parents, duplicate names, placeholders,
  unsorted gradient keys, modifiers in the wrong phase list).
"""

from dataclasses import fields
from typing import Any, Dict, List

from models.expr import placeholders
from models.modifiers import INIT, UPDATE, gradient_is_ordered
from models.project import MAX_CAPACITY, PARTICLE_TEXTURES, ProjectDocument


def _expr_fields(mod):
    for f in fields(mod):
        if f.type == "ExprNode":
            yield f.name, getattr(mod, f.name)


def _check_modifiers(label: str, mods, phase: str, warnings: List[str]) -> None:
    for j, m in enumerate(mods):
        where = f"{label}[{j}] {type(m).__name__}"
        if getattr(m, "phase", None) != phase:
            warnings.append(f"{where}: {m.phase} modifier in the {phase} list is ignored")
        for fname, node in _expr_fields(m):
            n = placeholders(node)
            if n:
                warnings.append(f"{where}.{fname}: {n} unset value(s) compile to 0.0")


def validate_document(doc: ProjectDocument) -> Dict[str, Any]:
    """Return validation snapshot: {'ok': bool, 'errors': [...], 'warnings': [...]}"""
    errors: List[str] = []
    warnings: List[str] = []

    seen = set()
    names = set(doc.names())
    for i, e in enumerate(doc.effects):
        label = f"effect '{e.name}'"

        if e.texture_index is not None and not (0 <= e.texture_index < len(PARTICLE_TEXTURES)):
            errors.append(f"{label}: texture_index {e.texture_index} out of range (0..{len(PARTICLE_TEXTURES) - 1})")
        if e.capacity > MAX_CAPACITY:
            errors.append(f"{label}: capacity {e.capacity} above {MAX_CAPACITY}")

        if e.name in seen:
            warnings.append(f"{label}: duplicate name; it and later effects link to this one")
        seen.add(e.name)
        if e.parent is not None:
            if e.parent == e.name:
                warnings.append(f"{label}: parents itself")
            elif e.parent not in seen:
                if e.parent in names:
                    warnings.append(f"{label}: parent '{e.parent}' is listed after it; link is ignored")
                else:
                    warnings.append(f"{label}: parent '{e.parent}' does not exist")

        _check_modifiers(f"{label}.init_modifiers", e.init_modifiers, INIT, warnings)
        _check_modifiers(f"{label}.update_modifiers", e.update_modifiers, UPDATE, warnings)
        for j, r in enumerate(e.render_modifiers):
            if not gradient_is_ordered(r.gradient):
                warnings.append(f"{label}.render_modifiers[{j}] {type(r).__name__}: gradient keys out of time order")

    return {"ok": not errors, "errors": errors, "warnings": warnings}
