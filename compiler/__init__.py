"""Effect compiler: expression trees and modifiers -> runtime effect assets."""

from compiler.diagnostics import Diagnostic, Diagnostics
from compiler.effect_compiler import compile_effect
from compiler.expr_compiler import compile_expr
from compiler.instructions import CompiledEffect
from compiler.module import ExprModule, FrozenModule

__all__ = [
    "CompiledEffect",
    "Diagnostic",
    "Diagnostics",
    "ExprModule",
    "FrozenModule",
    "compile_effect",
    "compile_expr",
]
