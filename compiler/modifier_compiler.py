from __future__ import annotations

"""Modifier compiler: descriptor -> runtime instruction.

Expression fields are compiled against the effect's shared module in field
declaration order; enumerated options pass through unchanged.
"""

from typing import Optional

from compiler.diagnostics import Diagnostics, report
from compiler.expr_compiler import compile_expr
from compiler.instructions import (
    AccelInstr,
    ColorOverLifetimeInstr,
    ConformToSphereInstr,
    EmitSpawnEventInstr,
    Gradient,
    InheritAttributeInstr,
    Instruction,
    LinearDragInstr,
    SetAttributeInstr,
    SetPositionCircleInstr,
    SetPositionSphereInstr,
    SetVelocityCircleInstr,
    SetVelocitySphereInstr,
    SetVelocityTangentInstr,
    SizeOverLifetimeInstr,
)
from compiler.module import ExprModule
from models.modifiers import (
    Accel,
    ColorOverLifetime,
    ConformToSphere,
    EmitSpawnEvent,
    InheritAttribute,
    LinearDrag,
    ModifierDescriptor,
    RenderModifierDescriptor,
    SetAttribute,
    SetPositionCircle,
    SetPositionSphere,
    SetVelocityCircle,
    SetVelocitySphere,
    SetVelocityTangent,
    SizeOverLifetime,
    gradient_is_ordered,
)


def compile_modifier(mod: ModifierDescriptor, module: ExprModule, diagnostics: Optional[Diagnostics] = None, path: str = "modifier") -> Instruction:
    def x(name: str) -> int:
        return compile_expr(getattr(mod, name), module, diagnostics, f"{path}.{name}")

    if isinstance(mod, SetAttribute):
        return SetAttributeInstr(attribute=mod.attribute.tag, value=x("value"))
    if isinstance(mod, InheritAttribute):
        return InheritAttributeInstr(attribute=mod.attribute.tag)
    if isinstance(mod, SetPositionCircle):
        return SetPositionCircleInstr(center=x("center"), axis=x("axis"), radius=x("radius"), dimension=mod.dimension)
    if isinstance(mod, SetPositionSphere):
        return SetPositionSphereInstr(center=x("center"), radius=x("radius"), dimension=mod.dimension)
    if isinstance(mod, SetVelocityCircle):
        return SetVelocityCircleInstr(center=x("center"), axis=x("axis"), speed=x("speed"))
    if isinstance(mod, SetVelocitySphere):
        return SetVelocitySphereInstr(center=x("center"), speed=x("speed"))
    if isinstance(mod, SetVelocityTangent):
        return SetVelocityTangentInstr(origin=x("origin"), axis=x("axis"), speed=x("speed"))
    if isinstance(mod, Accel):
        return AccelInstr(accel=x("accel"))
    if isinstance(mod, LinearDrag):
        return LinearDragInstr(drag=x("drag"))
    if isinstance(mod, EmitSpawnEvent):
        return EmitSpawnEventInstr(condition=mod.condition, count=x("count"), child_index=mod.child_index)
    if isinstance(mod, ConformToSphere):
        return ConformToSphereInstr(
            origin=x("origin"),
            radius=x("radius"),
            influence_dist=x("influence_dist"),
            attraction_accel=x("attraction_accel"),
            max_attraction_speed=x("max_attraction_speed"),
        )
    raise TypeError(f"Unsupported modifier: {type(mod).__name__}")


def compile_gradient(keys, diagnostics: Optional[Diagnostics] = None, path: str = "gradient") -> Gradient:
    """Copy keyframes verbatim: no sorting, dedup or clamping."""
    if not gradient_is_ordered(keys):
        report(diagnostics, "gradient_order", path, "gradient keys are not in time order")
    return Gradient(keys=tuple((float(t), tuple(v)) for t, v in keys))


def compile_render_modifier(mod: RenderModifierDescriptor, diagnostics: Optional[Diagnostics] = None, path: str = "render_modifier") -> Instruction:
    if isinstance(mod, SizeOverLifetime):
        return SizeOverLifetimeInstr(
            gradient=compile_gradient(mod.gradient, diagnostics, path + ".gradient"),
            screen_space_size=bool(mod.screen_space_size),
        )
    if isinstance(mod, ColorOverLifetime):
        return ColorOverLifetimeInstr(
            gradient=compile_gradient(mod.gradient, diagnostics, path + ".gradient"),
            blend=mod.blend,
            mask=mod.mask,
        )
    raise TypeError(f"Unsupported render modifier: {type(mod).__name__}")
