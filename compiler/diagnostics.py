from __future__ import annotations

"""Opt-in diagnostics channel.

The compiler and spawner degrade silently on authoring hazards (placeholders,
unresolved parents, unsorted gradient keys, ...). Callers that want to see
them pass a Diagnostics collector; passing None keeps the silent default.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Diagnostic:
    code: str  # placeholder | gradient_order | wrong_phase | unresolved_parent | duplicate_name | self_parent
    path: str
    message: str


class Diagnostics:
    def __init__(self) -> None:
        self.items: List[Diagnostic] = []

    def warn(self, code: str, path: str, message: str) -> None:
        self.items.append(Diagnostic(code, path, message))

    def codes(self) -> List[str]:
        return [d.code for d in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


def report(diagnostics: Optional[Diagnostics], code: str, path: str, message: str) -> None:
    if diagnostics is not None:
        diagnostics.warn(code, path, message)
