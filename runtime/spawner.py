from __future__ import annotations

"""Name resolution and scene spawning.

Effects are processed in document order. An effect records its own name before
looking up its parent, so a child must be listed after its parent (or be its
own parent). When two effects share a name, the later one rebinds it from
that point on.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from compiler.diagnostics import Diagnostics, report
from compiler.effect_compiler import compile_effect
from models.project import PARTICLE_TEXTURES, ProjectDocument
from runtime.scene import EffectRuntime

LINK_NONE = "none"
LINK_LINKED = "linked"
LINK_UNRESOLVED = "unresolved"


class TextureIndexError(IndexError):
    """Effect asks for a texture slot the host did not provide."""


@dataclass(frozen=True)
class ParentLink:
    index: int
    name: str
    parent: Optional[str] = None
    parent_index: Optional[int] = None
    status: str = LINK_NONE


def resolve_parents(effects, diagnostics: Optional[Diagnostics] = None) -> List[ParentLink]:
    """One forward pass; returns a ParentLink per effect, in order.

    ``effects`` is a ProjectDocument or any sequence of objects with ``name``
    and ``parent`` attributes (baked records included).
    """
    if isinstance(effects, ProjectDocument):
        effects = effects.effects

    seen: Dict[str, int] = {}
    out: List[ParentLink] = []
    for i, e in enumerate(effects):
        if e.name in seen:
            report(diagnostics, "duplicate_name", f"effects[{i}]", f"'{e.name}' rebinds the name of effects[{seen[e.name]}]")
        seen[e.name] = i

        parent = e.parent
        if parent is None:
            link = ParentLink(i, e.name)
        elif parent in seen:
            link = ParentLink(i, e.name, parent, seen[parent], LINK_LINKED)
            if seen[parent] == i:
                report(diagnostics, "self_parent", f"effects[{i}]", f"'{e.name}' is its own parent")
        else:
            report(diagnostics, "unresolved_parent", f"effects[{i}]", f"parent '{parent}' of '{e.name}' is not spawned before it")
            link = ParentLink(i, e.name, parent, None, LINK_UNRESOLVED)
        out.append(link)
    return out


@dataclass
class SpawnReport:
    entities: List[Any] = field(default_factory=list)
    assets: List[Any] = field(default_factory=list)
    links: List[ParentLink] = field(default_factory=list)

    def linked(self) -> List[ParentLink]:
        return [l for l in self.links if l.status == LINK_LINKED]


class SpawnSession:
    """Owns what it spawned into a runtime; every spawn replaces the previous one."""

    def __init__(self, runtime: EffectRuntime, textures: Sequence[Any] = PARTICLE_TEXTURES):
        self.runtime = runtime
        self.textures = list(textures)
        self._entities: List[Any] = []
        self._assets: List[Any] = []

    def clear(self) -> None:
        for ent in reversed(self._entities):
            self.runtime.despawn(ent)
        for h in self._assets:
            self.runtime.remove_asset(h)
        self._entities = []
        self._assets = []

    def _material(self, name: str, texture_index: Optional[int]) -> Any:
        if texture_index is None:
            return None
        if not (0 <= texture_index < len(self.textures)):
            raise TextureIndexError(
                f"effect '{name}': texture_index {texture_index} out of range (0..{len(self.textures) - 1})"
            )
        return self.textures[texture_index]

    def _spawn_all(self, items: Iterable[tuple], links: List[ParentLink]) -> SpawnReport:
        rep = SpawnReport(links=links)
        for (name, texture_index, asset), link in zip(items, links):
            h = self.runtime.add_asset(asset)
            self._assets.append(h)
            rep.assets.append(h)
            ent = self.runtime.spawn(name, h, material=self._material(name, texture_index))
            self._entities.append(ent)
            rep.entities.append(ent)
            if link.status == LINK_LINKED:
                self.runtime.set_parent(ent, rep.entities[link.parent_index])
        return rep

    def spawn(self, document: ProjectDocument, diagnostics: Optional[Diagnostics] = None) -> SpawnReport:
        self.clear()
        links = resolve_parents(document, diagnostics)

        def items():
            for e in document.effects:
                yield e.name, e.texture_index, compile_effect(e, diagnostics)

        return self._spawn_all(items(), links)

    def spawn_baked(self, records, diagnostics: Optional[Diagnostics] = None) -> SpawnReport:
        """Spawn pre-compiled records (name, parent, texture_index, effect_asset)."""
        records = list(records)
        self.clear()
        links = resolve_parents(records, diagnostics)
        items = ((r.name, r.texture_index, r.effect_asset) for r in records)
        return self._spawn_all(items, links)

