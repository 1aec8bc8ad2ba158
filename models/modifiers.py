from __future__ import annotations

"""Modifier descriptors.

Editable modifier records attached to an effect. Init/update modifiers hold
expression trees plus enumerated options; render modifiers hold gradients.
Defaults match what a freshly added modifier looks like in the editor.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Union

from models.attributes import ID, AttributeRef
from models.expr import (
    ExprNode,
    Placeholder,
    RandomUniform,
    lit_float,
    lit_u32,
    lit_vec3,
    op,
)

SHAPE_DIMENSIONS = ("surface", "volume")
EMIT_CONDITIONS = ("always", "on_die")
COLOR_BLEND_MODES = ("modulate", "overwrite", "add")
COLOR_MASK_CHANNELS = "RGBA"

INIT = "init"
UPDATE = "update"

Vec3 = Tuple[float, float, float]
Vec4 = Tuple[float, float, float, float]


def _zero() -> ExprNode:
    return lit_vec3(0.0, 0.0, 0.0)


def _up() -> ExprNode:
    return lit_vec3(0.0, 1.0, 0.0)


def _check_choice(name: str, value: str, choices) -> None:
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)} (got {value!r})")


# ---- init modifiers ---------------------------------------------------------

@dataclass
class SetAttribute:
    attribute: AttributeRef = ID
    value: ExprNode = field(default_factory=lambda: lit_float(0.0))

    label = "SetAttributeModifier"
    phase = INIT


@dataclass
class InheritAttribute:
    attribute: AttributeRef = ID

    label = "InheritAttributeModifier"
    phase = INIT


@dataclass
class SetPositionCircle:
    center: ExprNode = field(default_factory=_zero)
    axis: ExprNode = field(default_factory=_up)
    radius: ExprNode = field(default_factory=lambda: lit_float(0.2))
    dimension: str = "surface"

    label = "SetPositionCircleModifier"
    phase = INIT

    def __post_init__(self):
        _check_choice("dimension", self.dimension, SHAPE_DIMENSIONS)


@dataclass
class SetPositionSphere:
    center: ExprNode = field(default_factory=_zero)
    radius: ExprNode = field(default_factory=lambda: lit_float(0.2))
    dimension: str = "surface"

    label = "SetPositionSphereModifier"
    phase = INIT

    def __post_init__(self):
        _check_choice("dimension", self.dimension, SHAPE_DIMENSIONS)


@dataclass
class SetVelocityCircle:
    center: ExprNode = field(default_factory=_zero)
    axis: ExprNode = field(default_factory=_up)
    speed: ExprNode = field(default_factory=lambda: lit_float(0.5))

    label = "SetVelocityCircleModifier"
    phase = INIT


@dataclass
class SetVelocitySphere:
    center: ExprNode = field(default_factory=_zero)
    speed: ExprNode = field(default_factory=lambda: lit_float(0.5))

    label = "SetVelocitySphereModifier"
    phase = INIT


@dataclass
class SetVelocityTangent:
    origin: ExprNode = field(default_factory=_zero)
    axis: ExprNode = field(default_factory=_up)
    speed: ExprNode = field(default_factory=lambda: op("uniform", lit_float(0.2), lit_float(1.0)))

    label = "SetVelocityTangentModifier"
    phase = INIT


# ---- update modifiers -------------------------------------------------------

@dataclass
class Accel:
    accel: ExprNode = field(
        default_factory=lambda: op(
            "sub",
            op("mul", RandomUniform("vec3"), lit_vec3(2.0, 2.0, 2.0)),
            lit_vec3(1.0, 1.0, 1.0),
        )
    )

    label = "AccelModifier"
    phase = UPDATE


@dataclass
class LinearDrag:
    drag: ExprNode = field(default_factory=Placeholder)

    label = "LinearDragModifier"
    phase = UPDATE


@dataclass
class EmitSpawnEvent:
    condition: str = "on_die"
    count: ExprNode = field(default_factory=lambda: lit_u32(0))
    child_index: int = 0

    label = "EmitSpawnEvent"
    phase = UPDATE

    def __post_init__(self):
        _check_choice("condition", self.condition, EMIT_CONDITIONS)
        self.child_index = int(self.child_index)
        if self.child_index < 0:
            raise ValueError("child_index must be >= 0")


@dataclass
class ConformToSphere:
    origin: ExprNode = field(default_factory=_zero)
    radius: ExprNode = field(default_factory=lambda: lit_float(1.0))
    influence_dist: ExprNode = field(default_factory=lambda: lit_float(10.0))
    attraction_accel: ExprNode = field(default_factory=lambda: lit_float(2.0))
    max_attraction_speed: ExprNode = field(default_factory=lambda: lit_float(2.0))

    label = "ConformToSphereModifier"
    phase = UPDATE


ModifierDescriptor = Union[
    SetAttribute,
    InheritAttribute,
    SetPositionCircle,
    SetPositionSphere,
    SetVelocityCircle,
    SetVelocitySphere,
    SetVelocityTangent,
    Accel,
    LinearDrag,
    EmitSpawnEvent,
    ConformToSphere,
]

INIT_MODIFIER_TYPES = (
    SetAttribute,
    SetPositionCircle,
    SetPositionSphere,
    SetVelocityCircle,
    SetVelocitySphere,
    SetVelocityTangent,
    InheritAttribute,
)

UPDATE_MODIFIER_TYPES = (
    Accel,
    LinearDrag,
    EmitSpawnEvent,
    ConformToSphere,
)

MODIFIER_TYPES = INIT_MODIFIER_TYPES + UPDATE_MODIFIER_TYPES


# ---- render modifiers -------------------------------------------------------

@dataclass
class SizeOverLifetime:
    # (t, size) keys, kept exactly as authored
    gradient: List[Tuple[float, Vec3]] = field(
        default_factory=lambda: [(0.3, (0.1, 0.1, 0.1)), (1.0, (1.0, 1.0, 1.0))]
    )
    screen_space_size: bool = False

    label = "SizeOverLifetime"


@dataclass
class ColorOverLifetime:
    gradient: List[Tuple[float, Vec4]] = field(
        default_factory=lambda: [
            (0.0, (0.0, 4.0, 4.0, 0.0)),
            (0.1, (0.0, 4.0, 4.0, 1.0)),
            (0.3, (4.0, 4.0, 0.0, 1.0)),
            (0.6, (4.0, 0.0, 0.0, 0.0)),
            (1.0, (4.0, 0.0, 0.0, 0.0)),
        ]
    )
    blend: str = "modulate"
    mask: str = "RGBA"

    label = "ColorOverLifetime"

    def __post_init__(self):
        _check_choice("blend", self.blend, COLOR_BLEND_MODES)
        if any(c not in COLOR_MASK_CHANNELS for c in self.mask):
            raise ValueError(f"mask may only contain the channels {COLOR_MASK_CHANNELS} (got {self.mask!r})")


RenderModifierDescriptor = Union[SizeOverLifetime, ColorOverLifetime]

RENDER_MODIFIER_TYPES = (SizeOverLifetime, ColorOverLifetime)


def gradient_is_ordered(keys) -> bool:
    """True when key times never decrease."""
    times = [float(k[0]) for k in keys]
    return all(a <= b for a, b in zip(times, times[1:]))
