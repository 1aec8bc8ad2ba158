from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from models.modifiers import ModifierDescriptor, RenderModifierDescriptor

# Editor bound for EffectDescriptor.capacity.
MAX_CAPACITY = 16384

PROJECT_SUFFIX = ".omagari.json"
BAKED_SUFFIX = ".omagari-baked.json"


@dataclass(frozen=True)
class ParticleTexture:
    filename: str
    ui_label: str


# Built-in textures; EffectDescriptor.texture_index points into this table.
PARTICLE_TEXTURES: Tuple[ParticleTexture, ...] = (
    ParticleTexture("cloud.png", "Cloud1"),
    ParticleTexture("cloud2.png", "Cloud2"),
    ParticleTexture("spark1.png", "Spark1"),
    ParticleTexture("spark2.png", "Spark2"),
    ParticleTexture("spark3.png", "Spark3"),
    ParticleTexture("glow1.png", "Glow1"),
    ParticleTexture("splat1.png", "Splat1"),
)


Range = Tuple[float, float]


@dataclass(frozen=True)
class SpawnerSettings:
    # count/spawn_duration/period are (min, max); equal bounds mean a constant.
    count: Range = (500.0, 500.0)
    spawn_duration: Range = (1.0, 1.0)
    period: Range = (1.0, 1.0)
    cycle_count: int = 0  # 0 = repeat forever
    starts_active: bool = True
    emit_on_start: bool = True

    def __post_init__(self):
        object.__setattr__(self, "count", _range(self.count))
        object.__setattr__(self, "spawn_duration", _range(self.spawn_duration))
        object.__setattr__(self, "period", _range(self.period))
        object.__setattr__(self, "cycle_count", int(self.cycle_count))
        if self.cycle_count < 0:
            raise ValueError("cycle_count must be >= 0")

    @staticmethod
    def rate(count: float) -> "SpawnerSettings":
        """Continuous emission of ``count`` particles per second."""
        return SpawnerSettings(count=(count, count), spawn_duration=(1.0, 1.0), period=(1.0, 1.0), cycle_count=0)

    @staticmethod
    def once(count: float) -> "SpawnerSettings":
        """A single burst of ``count`` particles."""
        return SpawnerSettings(count=(count, count), spawn_duration=(0.0, 0.0), period=(0.0, 0.0), cycle_count=1)


def _range(v) -> Range:
    if isinstance(v, (int, float)):
        return (float(v), float(v))
    lo, hi = v
    return (float(lo), float(hi))


@dataclass
class EffectDescriptor:
    name: str = "Name your effect"
    parent: Optional[str] = None
    capacity: int = MAX_CAPACITY
    spawner_settings: SpawnerSettings = field(default_factory=lambda: SpawnerSettings.rate(500.0))
    texture_index: Optional[int] = 0
    init_modifiers: List[ModifierDescriptor] = field(default_factory=list)
    update_modifiers: List[ModifierDescriptor] = field(default_factory=list)
    render_modifiers: List[RenderModifierDescriptor] = field(default_factory=list)

    def __post_init__(self):
        self.capacity = int(self.capacity)
        if self.capacity < 0:
            raise ValueError("capacity must be >= 0")


@dataclass
class ProjectDocument:
    # Order matters: parents resolve only against effects listed earlier.
    effects: List[EffectDescriptor] = field(default_factory=list)

    def names(self) -> List[str]:
        return [e.name for e in self.effects]
