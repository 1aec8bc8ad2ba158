from __future__ import annotations

"""Expression nodes.

Value expressions authored inside modifier parameters. The variant set is
closed: every node is one of the frozen dataclasses below, and a tree owns
its children outright (nodes are immutable values, so a subtree can be
reused by copying the reference without creating shared mutable state).

Operators have a fixed arity per op:

    unary      sin, cos, normalize, pack4x8unorm
    binary     add, sub, mul, distance, uniform
    ternary    vec3
    quaternary vec4
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple, Union

from models.attributes import AttributeRef


LITERAL_KINDS = ("float", "u32", "vec3", "vec4")
RANDOM_KINDS = ("float", "u32", "vec3")

OPERATOR_ARITY: Dict[str, int] = {
    "sin": 1,
    "cos": 1,
    "normalize": 1,
    "pack4x8unorm": 1,
    "add": 2,
    "sub": 2,
    "mul": 2,
    "distance": 2,
    "uniform": 2,
    "vec3": 3,
    "vec4": 4,
}

LiteralValue = Union[float, int, Tuple[float, ...]]


def _coerce_literal(kind: str, value) -> LiteralValue:
    if kind == "float":
        return float(value)
    if kind == "u32":
        v = int(value)
        if v < 0 or v > 0xFFFFFFFF:
            raise ValueError(f"u32 literal out of range: {v}")
        return v
    n = 3 if kind == "vec3" else 4
    vals = tuple(float(x) for x in value)
    if len(vals) != n:
        raise ValueError(f"{kind} literal needs {n} components (got {len(vals)})")
    return vals


@dataclass(frozen=True)
class Placeholder:
    """Unset slot. Compiles to literal 0.0."""


@dataclass(frozen=True)
class Literal:
    kind: str
    value: LiteralValue

    def __post_init__(self):
        if self.kind not in LITERAL_KINDS:
            raise ValueError(f"Unknown literal kind: {self.kind!r}")
        object.__setattr__(self, "value", _coerce_literal(self.kind, self.value))


@dataclass(frozen=True)
class RandomUniform:
    kind: str = "float"

    def __post_init__(self):
        if self.kind not in RANDOM_KINDS:
            raise ValueError(f"Unknown random kind: {self.kind!r}")


@dataclass(frozen=True)
class Time:
    pass


@dataclass(frozen=True)
class Age:
    pass


@dataclass(frozen=True)
class AttributeRead:
    attribute: AttributeRef
    parent: bool = False


@dataclass(frozen=True)
class Operator:
    op: str
    args: Tuple["ExprNode", ...] = field(default_factory=tuple)

    def __post_init__(self):
        arity = OPERATOR_ARITY.get(self.op)
        if arity is None:
            raise ValueError(f"Unknown operator: {self.op!r}")
        args = tuple(self.args)
        if len(args) != arity:
            raise ValueError(f"Operator {self.op!r} takes {arity} argument(s), got {len(args)}")
        object.__setattr__(self, "args", args)


ExprNode = Union[Placeholder, Literal, RandomUniform, Time, Age, AttributeRead, Operator]


# ---- constructors -----------------------------------------------------------

def lit_float(v: float) -> Literal:
    return Literal("float", v)


def lit_u32(v: int) -> Literal:
    return Literal("u32", v)


def lit_vec3(x: float, y: float, z: float) -> Literal:
    return Literal("vec3", (x, y, z))


def lit_vec4(x: float, y: float, z: float, w: float) -> Literal:
    return Literal("vec4", (x, y, z, w))


def op(name: str, *args: ExprNode) -> Operator:
    return Operator(name, tuple(args))


def attr(a: AttributeRef) -> AttributeRead:
    return AttributeRead(a, parent=False)


def parent_attr(a: AttributeRef) -> AttributeRead:
    return AttributeRead(a, parent=True)


def random_normalized_vector() -> Operator:
    """normalize(rand_vec3 * 2.0 - 1.0): a random direction."""
    return op(
        "normalize",
        op("sub", op("mul", RandomUniform("vec3"), lit_float(2.0)), lit_float(1.0)),
    )


# ---- traversal --------------------------------------------------------------

def walk(node: ExprNode) -> Iterator[ExprNode]:
    """Pre-order traversal without recursion."""
    stack = [node]
    while stack:
        n = stack.pop()
        yield n
        if isinstance(n, Operator):
            stack.extend(reversed(n.args))


def placeholders(node: ExprNode) -> int:
    return sum(1 for n in walk(node) if isinstance(n, Placeholder))

