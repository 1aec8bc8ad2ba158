from __future__ import annotations

"""Particle attribute catalog.

Fixed set of per-particle fields an effect can read or write. The tag is the
stable identity used in project files and compiled assets; the label is what
an editor shows.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class AttributeRef:
    tag: str
    label: str
    value_type: str  # u32 | i32 | f32 | vec2 | vec3 | vec4


ALL_ATTRS: List[AttributeRef] = [
    AttributeRef("ID", "ID", "u32"),
    AttributeRef("PARTICLE_COUNTER", "Particle Counter", "u32"),
    AttributeRef("POSITION", "Position", "vec3"),
    AttributeRef("VELOCITY", "Velocity", "vec3"),
    AttributeRef("AGE", "Age", "f32"),
    AttributeRef("LIFETIME", "Lifetime", "f32"),
    AttributeRef("COLOR", "Color", "u32"),
    AttributeRef("HDR_COLOR", "HDR Color", "vec4"),
    AttributeRef("ALPHA", "Alpha", "f32"),
    AttributeRef("SIZE", "Size", "f32"),
    AttributeRef("SIZE2", "Size2", "vec2"),
    AttributeRef("SIZE3", "Size3", "vec3"),
    AttributeRef("PREV", "Prev", "u32"),
    AttributeRef("NEXT", "Next", "u32"),
    AttributeRef("AXIS_X", "Axis X", "vec3"),
    AttributeRef("AXIS_Y", "Axis Y", "vec3"),
    AttributeRef("AXIS_Z", "Axis Z", "vec3"),
    AttributeRef("SPRITE_INDEX", "Sprite Index", "i32"),
    AttributeRef("F32_0", "F32_0", "f32"),
    AttributeRef("F32_1", "F32_1", "f32"),
    AttributeRef("F32_2", "F32_2", "f32"),
    AttributeRef("F32_3", "F32_3", "f32"),
    AttributeRef("F32X2_0", "F32X2_0", "vec2"),
    AttributeRef("F32X2_1", "F32X2_1", "vec2"),
    AttributeRef("F32X2_2", "F32X2_2", "vec2"),
    AttributeRef("F32X2_3", "F32X2_3", "vec2"),
    AttributeRef("F32X3_0", "F32X3_0", "vec3"),
    AttributeRef("F32X3_1", "F32X3_1", "vec3"),
    AttributeRef("F32X3_2", "F32X3_2", "vec3"),
    AttributeRef("F32X3_3", "F32X3_3", "vec3"),
    AttributeRef("F32X4_0", "F32X4_0", "vec4"),
    AttributeRef("F32X4_1", "F32X4_1", "vec4"),
    AttributeRef("F32X4_2", "F32X4_2", "vec4"),
    AttributeRef("F32X4_3", "F32X4_3", "vec4"),
    AttributeRef("U32_0", "U32_0", "u32"),
    AttributeRef("U32_1", "U32_1", "u32"),
    AttributeRef("U32_2", "U32_2", "u32"),
    AttributeRef("U32_3", "U32_3", "u32"),
    AttributeRef("RIBBON_ID", "Ribbon ID", "u32"),
]

_BY_TAG: Dict[str, AttributeRef] = {a.tag: a for a in ALL_ATTRS}

# Shortcuts for the attributes the compiler and defaults refer to directly.
ID = _BY_TAG["ID"]
AGE = _BY_TAG["AGE"]
LIFETIME = _BY_TAG["LIFETIME"]
POSITION = _BY_TAG["POSITION"]
VELOCITY = _BY_TAG["VELOCITY"]


def attribute(tag: str) -> AttributeRef:
    """Return the catalog entry for ``tag``. Raises KeyError for unknown tags."""
    try:
        return _BY_TAG[str(tag)]
    except KeyError:
        raise KeyError(f"Unknown particle attribute: {tag!r}") from None


def attr_to_label(tag: str) -> str:
    a = _BY_TAG.get(str(tag))
    return a.label if a is not None else "None"
