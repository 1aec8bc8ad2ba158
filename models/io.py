from __future__ import annotations

"""Project file codec.

Project files are JSON documents with a single top-level ``effects`` list.
Every tagged record (expression node, modifier, render modifier) carries an
explicit ``type`` discriminator. Field order in the written file follows the
dataclass field order, so saving an unchanged project is byte-stable.

Errors:
- file-system errors propagate unchanged (FileNotFoundError, PermissionError, ...)
- malformed content raises ProjectFormatError, an OSError subclass, so hosts
  can report both through one channel.
"""

import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List

from models.attributes import attribute
from models.expr import (
    Age,
    AttributeRead,
    ExprNode,
    Literal,
    Operator,
    Placeholder,
    RandomUniform,
    Time,
)
from models.modifiers import (
    MODIFIER_TYPES,
    RENDER_MODIFIER_TYPES,
    ColorOverLifetime,
)
from models.project import EffectDescriptor, ProjectDocument, SpawnerSettings

NEWLINE = "\n"

_MODIFIERS_BY_NAME = {cls.__name__: cls for cls in MODIFIER_TYPES}
_RENDER_MODIFIERS_BY_NAME = {cls.__name__: cls for cls in RENDER_MODIFIER_TYPES}


class ProjectFormatError(OSError):
    """Project text could not be decoded into a ProjectDocument."""


def _fail(path: str, msg: str) -> ProjectFormatError:
    return ProjectFormatError(f"{path}: {msg}" if path else msg)


# ---------------- encode ----------------

def expr_to_dict(node: ExprNode) -> Dict[str, Any]:
    if isinstance(node, Placeholder):
        return {"type": "placeholder"}
    if isinstance(node, Literal):
        v = list(node.value) if isinstance(node.value, tuple) else node.value
        return {"type": node.kind, "value": v}
    if isinstance(node, RandomUniform):
        return {"type": "rand", "value_type": node.kind}
    if isinstance(node, Time):
        return {"type": "time"}
    if isinstance(node, Age):
        return {"type": "age"}
    if isinstance(node, AttributeRead):
        return {"type": "attr", "attribute": node.attribute.tag, "parent": bool(node.parent)}
    if isinstance(node, Operator):
        return {"type": "op", "op": node.op, "args": [expr_to_dict(a) for a in node.args]}
    raise TypeError(f"Unsupported expression node: {type(node).__name__}")


def _record_to_dict(rec) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": type(rec).__name__}
    for f in fields(rec):
        v = getattr(rec, f.name)
        if f.type == "ExprNode":
            out[f.name] = expr_to_dict(v)
        elif f.type == "AttributeRef":
            out[f.name] = v.tag
        elif f.name == "gradient":
            out[f.name] = [[float(t), list(val)] for t, val in v]
        else:
            out[f.name] = v
    return out


def spawner_to_dict(s: SpawnerSettings) -> Dict[str, Any]:
    return {
        "count": list(s.count),
        "spawn_duration": list(s.spawn_duration),
        "period": list(s.period),
        "cycle_count": s.cycle_count,
        "starts_active": s.starts_active,
        "emit_on_start": s.emit_on_start,
    }


def effect_to_dict(e: EffectDescriptor) -> Dict[str, Any]:
    return {
        "name": e.name,
        "parent": e.parent,
        "capacity": e.capacity,
        "spawner_settings": spawner_to_dict(e.spawner_settings),
        "texture_index": e.texture_index,
        "init_modifiers": [_record_to_dict(m) for m in e.init_modifiers],
        "update_modifiers": [_record_to_dict(m) for m in e.update_modifiers],
        "render_modifiers": [_record_to_dict(m) for m in e.render_modifiers],
    }


def project_to_dict(doc: ProjectDocument) -> Dict[str, Any]:
    return {"effects": [effect_to_dict(e) for e in doc.effects]}


def dumps_project(doc: ProjectDocument) -> str:
    text = json.dumps(project_to_dict(doc), indent=2, ensure_ascii=False)
    return text + NEWLINE


def save_project(path: Path, doc: ProjectDocument) -> None:
    # newline="" keeps "\n" on every platform
    with open(Path(path), "w", encoding="utf-8", newline="") as f:
        f.write(dumps_project(doc))


# ---------------- decode ----------------

def _need(d: Any, key: str, path: str) -> Any:
    if not isinstance(d, dict):
        raise _fail(path, f"expected an object, got {type(d).__name__}")
    if key not in d:
        raise _fail(path, f"missing field '{key}'")
    return d[key]


def _list(v: Any, path: str) -> list:
    if not isinstance(v, list):
        raise _fail(path, f"expected a list, got {type(v).__name__}")
    return v


def _number(v: Any, path: str) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise _fail(path, f"expected a number, got {v!r}")
    return float(v)


def _uint(v: Any, path: str) -> int:
    if isinstance(v, bool) or not isinstance(v, int) or v < 0:
        raise _fail(path, f"expected an unsigned integer, got {v!r}")
    return v


def _text(v: Any, path: str) -> str:
    if not isinstance(v, str):
        raise _fail(path, f"expected a string, got {v!r}")
    return v


def _tag(d: Any, key: str, path: str) -> str:
    return _text(_need(d, key, path), f"{path}.{key}")


def _attribute(v: Any, path: str):
    try:
        return attribute(_text(v, path))
    except KeyError as e:
        raise _fail(path, str(e.args[0])) from None


def expr_from_dict(d: Any, path: str = "expr") -> ExprNode:
    t = _tag(d, "type", path)
    try:
        if t == "placeholder":
            return Placeholder()
        if t in ("float", "u32", "vec3", "vec4"):
            v = _need(d, "value", path)
            if t == "float":
                v = _number(v, path + ".value")
            elif t == "u32":
                v = _uint(v, path + ".value")
            else:
                v = tuple(_number(x, path + ".value") for x in _list(v, path + ".value"))
            return Literal(t, v)
        if t == "rand":
            return RandomUniform(_tag(d, "value_type", path))
        if t == "time":
            return Time()
        if t == "age":
            return Age()
        if t == "attr":
            a = _attribute(_need(d, "attribute", path), path + ".attribute")
            return AttributeRead(a, parent=bool(d.get("parent", False)))
        if t == "op":
            args = _list(_need(d, "args", path), path + ".args")
            children = tuple(expr_from_dict(a, f"{path}.args[{i}]") for i, a in enumerate(args))
            return Operator(_tag(d, "op", path), children)
    except (TypeError, ValueError) as e:
        raise _fail(path, str(e)) from None
    raise _fail(path, f"unknown expression type {t!r}")


def _gradient_from_list(v: Any, width: int, path: str) -> List[tuple]:
    keys = []
    for i, k in enumerate(_list(v, path)):
        kp = f"{path}[{i}]"
        k = _list(k, kp)
        if len(k) != 2:
            raise _fail(kp, "gradient key must be [time, value]")
        val = tuple(_number(x, kp) for x in _list(k[1], kp))
        if len(val) != width:
            raise _fail(kp, f"gradient value needs {width} components")
        keys.append((_number(k[0], kp), val))
    return keys


def _record_from_dict(d: Any, registry: Dict[str, type], what: str, path: str):
    t = _tag(d, "type", path)
    cls = registry.get(t)
    if cls is None:
        raise _fail(path, f"unknown {what} type {t!r}")
    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in d:
            continue  # dataclass default
        v = d[f.name]
        fp = f"{path}.{f.name}"
        if f.type == "ExprNode":
            kwargs[f.name] = expr_from_dict(v, fp)
        elif f.type == "AttributeRef":
            kwargs[f.name] = _attribute(v, fp)
        elif f.name == "gradient":
            kwargs[f.name] = _gradient_from_list(v, 4 if cls is ColorOverLifetime else 3, fp)
        elif f.type == "int":
            kwargs[f.name] = _uint(v, fp)
        else:
            kwargs[f.name] = v
    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise _fail(path, str(e)) from None


def _range_from(v: Any, path: str) -> tuple:
    v = _list(v, path)
    if len(v) != 2:
        raise _fail(path, "range must be [min, max]")
    return (_number(v[0], path), _number(v[1], path))


def spawner_from_dict(d: Any, path: str = "spawner_settings") -> SpawnerSettings:
    base = SpawnerSettings()
    return SpawnerSettings(
        count=_range_from(_need(d, "count", path), path + ".count"),
        spawn_duration=_range_from(_need(d, "spawn_duration", path), path + ".spawn_duration"),
        period=_range_from(_need(d, "period", path), path + ".period"),
        cycle_count=_uint(_need(d, "cycle_count", path), path + ".cycle_count"),
        starts_active=bool(d.get("starts_active", base.starts_active)),
        emit_on_start=bool(d.get("emit_on_start", base.emit_on_start)),
    )


def effect_from_dict(d: Any, path: str = "effect") -> EffectDescriptor:
    name = _need(d, "name", path)
    if not isinstance(name, str):
        raise _fail(path + ".name", "expected a string")
    parent = d.get("parent")
    if parent is not None and not isinstance(parent, str):
        raise _fail(path + ".parent", "expected a string or null")
    tex = d.get("texture_index")
    if tex is not None:
        tex = _uint(tex, path + ".texture_index")

    def mods(key: str) -> list:
        items = _list(d.get(key, []), f"{path}.{key}")
        return [_record_from_dict(m, _MODIFIERS_BY_NAME, "modifier", f"{path}.{key}[{i}]") for i, m in enumerate(items)]

    render = [
        _record_from_dict(m, _RENDER_MODIFIERS_BY_NAME, "render modifier", f"{path}.render_modifiers[{i}]")
        for i, m in enumerate(_list(d.get("render_modifiers", []), path + ".render_modifiers"))
    ]
    return EffectDescriptor(
        name=name,
        parent=parent,
        capacity=_uint(_need(d, "capacity", path), path + ".capacity"),
        spawner_settings=spawner_from_dict(_need(d, "spawner_settings", path), path + ".spawner_settings"),
        texture_index=tex,
        init_modifiers=mods("init_modifiers"),
        update_modifiers=mods("update_modifiers"),
        render_modifiers=render,
    )


def project_from_dict(raw: Any) -> ProjectDocument:
    effects = _list(_need(raw, "effects", ""), "effects")
    return ProjectDocument(effects=[effect_from_dict(e, f"effects[{i}]") for i, e in enumerate(effects)])


def loads_project(text: str) -> ProjectDocument:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProjectFormatError(str(e)) from e
    return project_from_dict(raw)


def load_project(path: Path) -> ProjectDocument:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ProjectFormatError(str(e)) from e
    return loads_project(text)
