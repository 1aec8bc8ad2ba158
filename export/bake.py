from __future__ import annotations

"""Baked export: a project compiled ahead of time.

The export file holds one record per effect (name, parent, texture_index and
the compiled asset) in document order. It is one-way: a baked file can be
spawned again but not edited.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from compiler.effect_compiler import compile_effect
from compiler.instructions import CompiledEffect
from export.asset_codec import compiled_effect_from_dict, compiled_effect_to_dict
from models.io import NEWLINE, ProjectFormatError, _fail, _list, _need, _tag
from models.project import BAKED_SUFFIX, PROJECT_SUFFIX, ProjectDocument


@dataclass(frozen=True)
class ExportedEffect:
    name: str
    parent: Optional[str]
    texture_index: Optional[int]
    effect_asset: CompiledEffect


def bake_project(doc: ProjectDocument) -> List[ExportedEffect]:
    return [
        ExportedEffect(e.name, e.parent, e.texture_index, compile_effect(e))
        for e in doc.effects
    ]


def export_path_for(path) -> Path:
    """Baked file next to ``path``: the project suffix, or any other last
    suffix, is replaced by the baked one."""
    p = Path(path)
    name = p.name
    if name.endswith(PROJECT_SUFFIX):
        name = name[: -len(PROJECT_SUFFIX)]
    elif p.suffix:
        name = p.stem
    return p.with_name(name + BAKED_SUFFIX)


def baked_to_dict(records: List[ExportedEffect]) -> Dict[str, Any]:
    return {
        "effects": [
            {
                "name": r.name,
                "parent": r.parent,
                "texture_index": r.texture_index,
                "effect_asset": compiled_effect_to_dict(r.effect_asset),
            }
            for r in records
        ]
    }


def export_project(path, doc: ProjectDocument) -> Path:
    """Compile ``doc`` and write it next to ``path``; returns the written path."""
    out = export_path_for(path)
    text = json.dumps(baked_to_dict(bake_project(doc)), indent=2, ensure_ascii=False) + NEWLINE
    with open(out, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    return out


def baked_from_dict(raw: Any) -> List[ExportedEffect]:
    out: List[ExportedEffect] = []
    for i, d in enumerate(_list(_need(raw, "effects", ""), "effects")):
        p = f"effects[{i}]"
        name = _tag(d, "name", p)
        parent = d.get("parent")
        if parent is not None and not isinstance(parent, str):
            raise _fail(p + ".parent", f"expected a string or null, got {parent!r}")
        tex = d.get("texture_index")
        if tex is not None and (isinstance(tex, bool) or not isinstance(tex, int)):
            raise _fail(p + ".texture_index", f"expected an integer or null, got {tex!r}")
        out.append(
            ExportedEffect(
                name=name,
                parent=parent,
                texture_index=tex,
                effect_asset=compiled_effect_from_dict(_need(d, "effect_asset", p), p + ".effect_asset"),
            )
        )
    return out


def load_baked(path) -> List[ExportedEffect]:
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProjectFormatError(str(e)) from e
    return baked_from_dict(raw)
