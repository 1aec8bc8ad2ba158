from __future__ import annotations

"""Expression compiler.

Lowers one expression tree into the shared ExprModule of an effect and
returns the handle of the root entry. Post-order: an operator's arguments are
emitted first (left to right), then the operator entry itself.

There is no failure path. Placeholder lowers to the float literal 0.0, and
Age lowers to a read of the AGE attribute. Parent attribute reads are emitted
as-is; whether a parent exists is a runtime concern.

The walk uses an explicit stack so tree depth is not bounded by the
interpreter recursion limit.
"""

from typing import List, Optional, Tuple

from compiler.diagnostics import Diagnostics, report
from compiler.module import ExprModule
from models.attributes import AGE
from models.expr import (
    Age,
    AttributeRead,
    ExprNode,
    Literal,
    Operator,
    Placeholder,
    RandomUniform,
    Time,
)


def _emit_leaf(node: ExprNode, module: ExprModule, diagnostics: Optional[Diagnostics], path: str) -> int:
    if isinstance(node, Literal):
        return module.lit(node.kind, node.value)
    if isinstance(node, RandomUniform):
        return module.rand(node.kind)
    if isinstance(node, Time):
        return module.time()
    if isinstance(node, Age):
        return module.attr(AGE.tag)
    if isinstance(node, AttributeRead):
        if node.parent:
            return module.parent_attr(node.attribute.tag)
        return module.attr(node.attribute.tag)
    if isinstance(node, Placeholder):
        report(diagnostics, "placeholder", path, "unset expression compiled as 0.0")
        return module.lit("float", 0.0)
    raise TypeError(f"Unsupported expression node: {type(node).__name__}")


def compile_expr(node: ExprNode, module: ExprModule, diagnostics: Optional[Diagnostics] = None, path: str = "expr") -> int:
    """Compile ``node`` into ``module``; return the root handle."""
    # (node, path, children_done)
    work: List[Tuple[ExprNode, str, bool]] = [(node, path, False)]
    handles: List[int] = []
    while work:
        n, p, done = work.pop()
        if not isinstance(n, Operator):
            handles.append(_emit_leaf(n, module, diagnostics, p))
            continue
        if done:
            k = len(n.args)
            args = tuple(handles[-k:])
            del handles[-k:]
            handles.append(module.op(n.op, args))
            continue
        work.append((n, p, True))
        for i in range(len(n.args) - 1, -1, -1):
            work.append((n.args[i], f"{p}.{n.op}[{i}]", False))
    return handles[-1]
