from __future__ import annotations

from .scene import EffectRuntime, InMemoryRuntime, SceneEntity
from .spawner import (
    ParentLink,
    SpawnReport,
    SpawnSession,
    TextureIndexError,
    resolve_parents,
)

__all__ = [
    "EffectRuntime",
    "InMemoryRuntime",
    "ParentLink",
    "SceneEntity",
    "SpawnReport",
    "SpawnSession",
    "TextureIndexError",
    "resolve_parents",
]
