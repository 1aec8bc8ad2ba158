from __future__ import annotations

"""Runtime instructions and the compiled effect asset.

Instructions are what the simulation engine executes. Expression-valued
parameters are handles into the owning effect's expression module; enumerated
options are plain strings.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from compiler.module import FrozenModule
from models.project import SpawnerSettings


@dataclass(frozen=True)
class SetAttributeInstr:
    attribute: str
    value: int


@dataclass(frozen=True)
class InheritAttributeInstr:
    attribute: str


@dataclass(frozen=True)
class SetPositionCircleInstr:
    center: int
    axis: int
    radius: int
    dimension: str


@dataclass(frozen=True)
class SetPositionSphereInstr:
    center: int
    radius: int
    dimension: str


@dataclass(frozen=True)
class SetVelocityCircleInstr:
    center: int
    axis: int
    speed: int


@dataclass(frozen=True)
class SetVelocitySphereInstr:
    center: int
    speed: int


@dataclass(frozen=True)
class SetVelocityTangentInstr:
    origin: int
    axis: int
    speed: int


@dataclass(frozen=True)
class AccelInstr:
    accel: int


@dataclass(frozen=True)
class LinearDragInstr:
    drag: int


@dataclass(frozen=True)
class EmitSpawnEventInstr:
    condition: str
    count: int
    child_index: int


@dataclass(frozen=True)
class ConformToSphereInstr:
    origin: int
    radius: int
    influence_dist: int
    attraction_accel: int
    max_attraction_speed: int


@dataclass(frozen=True)
class Gradient:
    keys: Tuple[Tuple[float, Tuple[float, ...]], ...]


@dataclass(frozen=True)
class SizeOverLifetimeInstr:
    gradient: Gradient
    screen_space_size: bool = False


@dataclass(frozen=True)
class ColorOverLifetimeInstr:
    gradient: Gradient
    blend: str = "modulate"
    mask: str = "RGBA"


@dataclass(frozen=True)
class ParticleTextureInstr:
    texture_slot: int  # module handle of the slot index literal
    texture_index: Optional[int]  # built-in texture bound to that slot
    sample_mapping: str = "modulate_opacity_from_r"


@dataclass(frozen=True)
class OrientInstr:
    mode: str = "along_velocity"


Instruction = Union[
    SetAttributeInstr,
    InheritAttributeInstr,
    SetPositionCircleInstr,
    SetPositionSphereInstr,
    SetVelocityCircleInstr,
    SetVelocitySphereInstr,
    SetVelocityTangentInstr,
    AccelInstr,
    LinearDragInstr,
    EmitSpawnEventInstr,
    ConformToSphereInstr,
    SizeOverLifetimeInstr,
    ColorOverLifetimeInstr,
    ParticleTextureInstr,
    OrientInstr,
]

INSTRUCTION_TYPES = (
    SetAttributeInstr,
    InheritAttributeInstr,
    SetPositionCircleInstr,
    SetPositionSphereInstr,
    SetVelocityCircleInstr,
    SetVelocitySphereInstr,
    SetVelocityTangentInstr,
    AccelInstr,
    LinearDragInstr,
    EmitSpawnEventInstr,
    ConformToSphereInstr,
    SizeOverLifetimeInstr,
    ColorOverLifetimeInstr,
    ParticleTextureInstr,
    OrientInstr,
)


@dataclass(frozen=True)
class CompiledEffect:
    """Immutable effect asset handed to the runtime."""
    name: str
    capacity: int
    spawner_settings: SpawnerSettings
    module: FrozenModule
    init: Tuple[Instruction, ...]
    update: Tuple[Instruction, ...]
    render: Tuple[Instruction, ...]
    alpha_mode: str = "blend"
