from __future__ import annotations

"""Editing helpers shared by the host UI.

EditorContext is passed explicitly to editing calls; there is no module-level
editor state. ListCommand is the one structural edit every list in a
document supports (effects, modifiers, gradient keys).
"""

from dataclasses import dataclass, field
from typing import List, MutableSequence, Optional

from models.expr import ExprNode

REMOVE = "remove"
SWAP = "swap"


@dataclass
class EditorContext:
    expr_clipboard: Optional[ExprNode] = None
    visible_effects: List[str] = field(default_factory=list)
    filename: Optional[str] = None

    def copy_expr(self, node: ExprNode) -> None:
        # Nodes are immutable, so the clipboard can hold the node itself.
        self.expr_clipboard = node

    def paste_expr(self) -> Optional[ExprNode]:
        return self.expr_clipboard

    def parent_choices(self, effect_name: str) -> List[str]:
        """Names offered in the parent picker for ``effect_name``."""
        return [n for n in self.visible_effects if n != effect_name]


@dataclass(frozen=True)
class ListCommand:
    kind: str
    a: int
    b: int = -1

    @staticmethod
    def remove(index: int) -> "ListCommand":
        return ListCommand(REMOVE, index)

    @staticmethod
    def swap(a: int, b: int) -> "ListCommand":
        return ListCommand(SWAP, a, b)

    def apply(self, items: MutableSequence) -> None:
        n = len(items)
        if self.kind == REMOVE:
            if not (0 <= self.a < n):
                raise IndexError(f"remove index {self.a} out of range for {n} items")
            del items[self.a]
            return
        if self.kind == SWAP:
            if not (0 <= self.a < n and 0 <= self.b < n):
                raise IndexError(f"swap ({self.a}, {self.b}) out of range for {n} items")
            items[self.a], items[self.b] = items[self.b], items[self.a]
            return
        raise ValueError(f"Unknown list command: {self.kind!r}")


def item_commands(index: int, length: int) -> List[ListCommand]:
    """Commands the row at ``index`` offers: remove, move up, move down."""
    out = [ListCommand.remove(index)]
    if index > 0:
        out.append(ListCommand.swap(index, index - 1))
    if index < length - 1:
        out.append(ListCommand.swap(index, index + 1))
    return out
