from __future__ import annotations

"""
Effect runtime contract (engine boundary)

The simulation/rendering engine that runs compiled effects lives outside this
package. The spawner talks to it only through EffectRuntime:

- add_asset / remove_asset   : compiled effect asset registry
- spawn / despawn            : scene entities holding one asset each
- set_parent                 : parent link used by child effects (spawn events,
                               parent attribute reads)

InMemoryRuntime is a dict-backed implementation for headless hosts and tests.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from compiler.instructions import CompiledEffect


class EffectRuntime:
    """Base class for engine adapters. Override every method."""

    def add_asset(self, asset: CompiledEffect) -> Any:
        raise NotImplementedError

    def remove_asset(self, handle: Any) -> None:
        raise NotImplementedError

    def spawn(self, name: str, asset_handle: Any, material: Optional[Any] = None) -> Any:
        raise NotImplementedError

    def set_parent(self, entity: Any, parent: Any) -> None:
        raise NotImplementedError

    def despawn(self, entity: Any) -> None:
        raise NotImplementedError


@dataclass
class SceneEntity:
    id: int
    name: str
    asset: int
    material: Optional[Any] = None
    parent: Optional[int] = None


class InMemoryRuntime(EffectRuntime):
    def __init__(self) -> None:
        self.assets: Dict[int, CompiledEffect] = {}
        self.entities: Dict[int, SceneEntity] = {}
        self._next_asset = 1
        self._next_entity = 1

    def add_asset(self, asset: CompiledEffect) -> int:
        h = self._next_asset
        self._next_asset += 1
        self.assets[h] = asset
        return h

    def remove_asset(self, handle: int) -> None:
        self.assets.pop(handle, None)

    def spawn(self, name: str, asset_handle: int, material: Optional[Any] = None) -> int:
        if asset_handle not in self.assets:
            raise KeyError(f"unknown effect asset handle: {asset_handle}")
        eid = self._next_entity
        self._next_entity += 1
        self.entities[eid] = SceneEntity(eid, str(name), asset_handle, material)
        return eid

    def set_parent(self, entity: int, parent: int) -> None:
        if parent not in self.entities:
            raise KeyError(f"unknown parent entity: {parent}")
        self.entities[entity].parent = parent

    def despawn(self, entity: int) -> None:
        self.entities.pop(entity, None)

    # ---- inspection helpers ----
    def by_name(self, name: str) -> List[SceneEntity]:
        return [e for e in self.entities.values() if e.name == name]

    def parent_name(self, entity: int) -> Optional[str]:
        p = self.entities[entity].parent
        return None if p is None else self.entities[p].name
