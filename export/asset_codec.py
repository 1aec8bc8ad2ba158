from __future__ import annotations

"""CompiledEffect <-> plain dict.

Module entries are written as ``{"kind": ...}`` records in handle order, so a
handle is just the entry's position in the list. Instructions are written as
``{"type": ...}`` records where the type is the instruction name without its
``Instr`` suffix (``SetAttribute``, ``ParticleTexture``, ``Orient``, ...).
"""

from dataclasses import fields
from typing import Any, Dict, List

from compiler.instructions import INSTRUCTION_TYPES, CompiledEffect, Gradient
from compiler.module import FrozenModule, ModuleEntry
from models.io import _fail, _list, _need, _number, _tag, _text, _uint, spawner_from_dict, spawner_to_dict

_INSTR_BY_TYPE = {cls.__name__[: -len("Instr")]: cls for cls in INSTRUCTION_TYPES}


def _instr_type(instr) -> str:
    return type(instr).__name__[: -len("Instr")]


# ---------------- encode ----------------

def entry_to_dict(e: ModuleEntry) -> Dict[str, Any]:
    if e.kind == "lit":
        v = list(e.value) if isinstance(e.value, tuple) else e.value
        return {"kind": "lit", "literal_type": e.literal_type, "value": v}
    if e.kind == "rand":
        return {"kind": "rand", "value_type": e.value}
    if e.kind == "time":
        return {"kind": "time"}
    if e.kind in ("attr", "parent_attr"):
        return {"kind": e.kind, "attribute": e.value}
    if e.kind == "op":
        return {"kind": "op", "op": e.value, "args": list(e.args)}
    raise TypeError(f"Unsupported module entry kind: {e.kind!r}")


def instruction_to_dict(instr) -> Dict[str, Any]:
    if not isinstance(instr, INSTRUCTION_TYPES):
        raise TypeError(f"Unsupported instruction: {type(instr).__name__}")
    out: Dict[str, Any] = {"type": _instr_type(instr)}
    for f in fields(instr):
        v = getattr(instr, f.name)
        if isinstance(v, Gradient):
            v = [[t, list(val)] for t, val in v.keys]
        out[f.name] = v
    return out


def compiled_effect_to_dict(c: CompiledEffect) -> Dict[str, Any]:
    return {
        "name": c.name,
        "capacity": c.capacity,
        "spawner_settings": spawner_to_dict(c.spawner_settings),
        "alpha_mode": c.alpha_mode,
        "module": {
            "entries": [entry_to_dict(e) for e in c.module.entries],
            "texture_slots": list(c.module.texture_slots),
        },
        "init": [instruction_to_dict(i) for i in c.init],
        "update": [instruction_to_dict(i) for i in c.update],
        "render": [instruction_to_dict(i) for i in c.render],
    }


# ---------------- decode ----------------

def _gradient(v: Any, path: str) -> Gradient:
    keys = []
    for i, k in enumerate(_list(v, path)):
        kp = f"{path}[{i}]"
        k = _list(k, kp)
        if len(k) != 2:
            raise _fail(kp, "gradient key must be [time, value]")
        keys.append((_number(k[0], kp), tuple(_number(x, kp) for x in _list(k[1], kp))))
    return Gradient(keys=tuple(keys))


def entry_from_dict(d: Any, path: str) -> ModuleEntry:
    kind = _tag(d, "kind", path)
    if kind == "lit":
        lt = _tag(d, "literal_type", path)
        v = _need(d, "value", path)
        if isinstance(v, list):
            v = tuple(_number(x, path + ".value") for x in v)
        elif lt == "u32":
            v = _uint(v, path + ".value")
        else:
            v = _number(v, path + ".value")
        return ModuleEntry("lit", v, literal_type=lt)
    if kind == "rand":
        return ModuleEntry("rand", _tag(d, "value_type", path))
    if kind == "time":
        return ModuleEntry("time")
    if kind in ("attr", "parent_attr"):
        return ModuleEntry(kind, _tag(d, "attribute", path))
    if kind == "op":
        args = tuple(_list(_need(d, "args", path), path + ".args"))
        return ModuleEntry("op", _tag(d, "op", path), args=args)
    raise _fail(path, f"unknown module entry kind {kind!r}")


def module_from_dict(d: Any, path: str = "module") -> FrozenModule:
    entries: List[ModuleEntry] = []
    for i, raw in enumerate(_list(_need(d, "entries", path), path + ".entries")):
        ep = f"{path}.entries[{i}]"
        e = entry_from_dict(raw, ep)
        if e.kind == "op" and any(isinstance(h, bool) or not isinstance(h, int) or not (0 <= h < i) for h in e.args):
            raise _fail(ep, f"op {e.value!r} refers to a handle that is not defined before it")
        entries.append(e)
    slots = _list(d.get("texture_slots", []), path + ".texture_slots")
    return FrozenModule(
        entries=tuple(entries),
        texture_slots=tuple(_text(s, f"{path}.texture_slots[{i}]") for i, s in enumerate(slots)),
    )


def _field_value(ftype: str, v: Any, path: str) -> Any:
    if ftype == "Gradient":
        return _gradient(v, path)
    if ftype == "int":
        return _uint(v, path)
    if ftype == "Optional[int]":
        return None if v is None else _uint(v, path)
    if ftype == "bool":
        if not isinstance(v, bool):
            raise _fail(path, f"expected true or false, got {v!r}")
        return v
    return _text(v, path)


def instruction_from_dict(d: Any, path: str):
    t = _tag(d, "type", path)
    cls = _INSTR_BY_TYPE.get(t)
    if cls is None:
        raise _fail(path, f"unknown instruction type {t!r}")
    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name in d:
            kwargs[f.name] = _field_value(f.type, d[f.name], f"{path}.{f.name}")
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise _fail(path, str(e)) from None


def _instructions(d: Any, key: str, path: str) -> tuple:
    items: List[Any] = _list(_need(d, key, path), f"{path}.{key}")
    return tuple(instruction_from_dict(x, f"{path}.{key}[{i}]") for i, x in enumerate(items))


def compiled_effect_from_dict(d: Any, path: str = "effect_asset") -> CompiledEffect:
    return CompiledEffect(
        name=_tag(d, "name", path),
        capacity=_uint(_need(d, "capacity", path), path + ".capacity"),
        spawner_settings=spawner_from_dict(_need(d, "spawner_settings", path), path + ".spawner_settings"),
        module=module_from_dict(_need(d, "module", path), path + ".module"),
        init=_instructions(d, "init", path),
        update=_instructions(d, "update", path),
        render=_instructions(d, "render", path),
        alpha_mode=_text(d.get("alpha_mode", "blend"), path + ".alpha_mode"),
    )
