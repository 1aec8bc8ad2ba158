from __future__ import annotations

"""Effect compiler: EffectDescriptor -> CompiledEffect.

One fresh ExprModule per effect, shared by all of its modifiers. Init and
update modifiers are compiled in authoring order, then the texture slot is
allocated, then render modifiers. Every effect ends its render list with the
same two instructions: a texture sample (opacity from the red channel) and
orient-along-velocity.
"""

from typing import List, Optional

from compiler.diagnostics import Diagnostics, report
from compiler.instructions import CompiledEffect, Instruction, OrientInstr, ParticleTextureInstr
from compiler.modifier_compiler import compile_modifier, compile_render_modifier
from compiler.module import ExprModule
from models.modifiers import INIT, UPDATE
from models.project import EffectDescriptor

ALPHA_MODE = "blend"
TEXTURE_SLOT_NAME = "color"


def _compile_phase(mods, phase: str, module: ExprModule, diagnostics: Optional[Diagnostics], path: str) -> List[Instruction]:
    out: List[Instruction] = []
    for i, m in enumerate(mods):
        p = f"{path}[{i}]"
        instr = compile_modifier(m, module, diagnostics, p)
        if getattr(m, "phase", None) != phase:
            # Compiled for its expressions, but only the matching phase runs it.
            report(diagnostics, "wrong_phase", p, f"{type(m).__name__} is an {m.phase} modifier; dropped from {phase} list")
            continue
        out.append(instr)
    return out


def compile_effect(effect: EffectDescriptor, diagnostics: Optional[Diagnostics] = None) -> CompiledEffect:
    module = ExprModule()
    path = f"effect '{effect.name}'"

    init = _compile_phase(effect.init_modifiers, INIT, module, diagnostics, path + ".init_modifiers")
    update = _compile_phase(effect.update_modifiers, UPDATE, module, diagnostics, path + ".update_modifiers")

    texture_slot = module.lit("u32", 0)
    module.add_texture_slot(TEXTURE_SLOT_NAME)

    render: List[Instruction] = [
        compile_render_modifier(m, diagnostics, f"{path}.render_modifiers[{i}]")
        for i, m in enumerate(effect.render_modifiers)
    ]
    render.append(ParticleTextureInstr(texture_slot=texture_slot, texture_index=effect.texture_index))
    render.append(OrientInstr(mode="along_velocity"))

    return CompiledEffect(
        name=effect.name,
        capacity=effect.capacity,
        spawner_settings=effect.spawner_settings,
        module=module.freeze(),
        init=tuple(init),
        update=tuple(update),
        render=tuple(render),
        alpha_mode=ALPHA_MODE,
    )
