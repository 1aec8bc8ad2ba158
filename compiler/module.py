from __future__ import annotations

"""Expression module: the per-effect instruction graph.

Append-only list of entries. A handle is the index of an entry; operator
entries refer to earlier entries by handle, so the list is always in
dependency order.
"""

from dataclasses import dataclass, field
from typing import Any, List, Tuple


@dataclass(frozen=True)
class ModuleEntry:
    kind: str  # lit | rand | time | attr | parent_attr | op
    value: Any = None  # literal value, random value type, attribute tag or op name
    literal_type: str = ""  # lit only: float | u32 | vec3 | vec4
    args: Tuple[int, ...] = ()  # op only


@dataclass
class ExprModule:
    entries: List[ModuleEntry] = field(default_factory=list)
    texture_slots: List[str] = field(default_factory=list)

    def _push(self, entry: ModuleEntry) -> int:
        self.entries.append(entry)
        return len(self.entries) - 1

    def lit(self, literal_type: str, value: Any) -> int:
        return self._push(ModuleEntry("lit", value, literal_type=literal_type))

    def rand(self, value_type: str) -> int:
        return self._push(ModuleEntry("rand", value_type))

    def time(self) -> int:
        return self._push(ModuleEntry("time"))

    def attr(self, tag: str) -> int:
        return self._push(ModuleEntry("attr", tag))

    def parent_attr(self, tag: str) -> int:
        return self._push(ModuleEntry("parent_attr", tag))

    def op(self, name: str, args: Tuple[int, ...]) -> int:
        for h in args:
            if not (0 <= h < len(self.entries)):
                raise ValueError(f"op {name!r} refers to unknown handle {h}")
        return self._push(ModuleEntry("op", name, args=tuple(args)))

    def add_texture_slot(self, name: str) -> int:
        self.texture_slots.append(str(name))
        return len(self.texture_slots) - 1

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, handle: int) -> ModuleEntry:
        return self.entries[handle]

    def freeze(self) -> "FrozenModule":
        return FrozenModule(tuple(self.entries), tuple(self.texture_slots))


@dataclass(frozen=True)
class FrozenModule:
    entries: Tuple[ModuleEntry, ...] = ()
    texture_slots: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, handle: int) -> ModuleEntry:
        return self.entries[handle]
