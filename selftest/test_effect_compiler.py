"""Selftests for compile_modifier / compile_effect.

Run:
  python -m selftest.test_effect_compiler
"""

from dataclasses import FrozenInstanceError, fields

from compiler import Diagnostics, ExprModule, FrozenModule, compile_effect
from compiler.instructions import (
    AccelInstr,
    ColorOverLifetimeInstr,
    ConformToSphereInstr,
    EmitSpawnEventInstr,
    Gradient,
    LinearDragInstr,
    OrientInstr,
    ParticleTextureInstr,
    SetAttributeInstr,
    SetVelocityTangentInstr,
    SizeOverLifetimeInstr,
)
from compiler.modifier_compiler import compile_modifier, compile_render_modifier
from models.attributes import LIFETIME
from models.expr import lit_float
from models.modifiers import (
    Accel,
    ColorOverLifetime,
    ConformToSphere,
    EmitSpawnEvent,
    LinearDrag,
    SetAttribute,
    SetPositionSphere,
    SetVelocityTangent,
    SizeOverLifetime,
)
from models.project import EffectDescriptor, SpawnerSettings


def _fire() -> EffectDescriptor:
    return EffectDescriptor(
        name="Fire",
        capacity=1000,
        texture_index=2,
        init_modifiers=[SetAttribute(attribute=LIFETIME, value=lit_float(2.0))],
    )


def test_fire_scenario():
    c = compile_effect(_fire())
    assert c.name == "Fire"
    assert c.capacity == 1000
    assert c.alpha_mode == "blend"
    assert c.init == (SetAttributeInstr(attribute="LIFETIME", value=0),)
    assert c.update == ()
    assert len(c.render) == 2
    tex, orient = c.render
    assert isinstance(tex, ParticleTextureInstr)
    assert tex.texture_index == 2
    assert tex.sample_mapping == "modulate_opacity_from_r"
    assert c.module.get(tex.texture_slot).literal_type == "u32"
    assert c.module.get(tex.texture_slot).value == 0
    assert orient == OrientInstr(mode="along_velocity")
    assert c.module.texture_slots == ("color",)


def test_render_tail_after_render_modifiers():
    e = EffectDescriptor(render_modifiers=[SizeOverLifetime(), ColorOverLifetime()])
    c = compile_effect(e)
    assert [type(r) for r in c.render] == [SizeOverLifetimeInstr, ColorOverLifetimeInstr, ParticleTextureInstr, OrientInstr]


def test_texture_slot_follows_update_expressions():
    e = EffectDescriptor(
        init_modifiers=[SetAttribute(attribute=LIFETIME, value=lit_float(1.0))],
        update_modifiers=[Accel()],
    )
    c = compile_effect(e)
    # 1 init literal + 5 accel entries, then the slot literal
    assert len(c.module) == 7
    assert c.render[-2].texture_slot == 6
    assert c.update == (AccelInstr(accel=5),)


def test_gradient_copied_verbatim():
    keys = [(1.0, (2.0, 2.0, 2.0)), (0.3, (0.1, 0.1, 0.1))]
    diags = Diagnostics()
    instr = compile_render_modifier(SizeOverLifetime(gradient=keys), diags)
    assert instr.gradient == Gradient(keys=((1.0, (2.0, 2.0, 2.0)), (0.3, (0.1, 0.1, 0.1))))
    assert diags.codes() == ["gradient_order"]

    ok = compile_render_modifier(SizeOverLifetime(gradient=[(0.3, (0.1, 0.1, 0.1)), (1.0, (1.0, 1.0, 1.0))]))
    assert ok.gradient.keys[0] == (0.3, (0.1, 0.1, 0.1))


def test_color_options_pass_through():
    instr = compile_render_modifier(ColorOverLifetime(blend="add", mask="RGB"))
    assert (instr.blend, instr.mask) == ("add", "RGB")
    assert len(instr.gradient.keys) == 5


def test_modifier_fields_in_declaration_order():
    m = ExprModule()
    instr = compile_modifier(SetVelocityTangent(), m)
    # origin, axis, then uniform(0.2, 1.0) as lit, lit, op
    assert instr == SetVelocityTangentInstr(origin=0, axis=1, speed=4)
    assert m.get(4).value == "uniform" and m.get(4).args == (2, 3)

    m = ExprModule()
    instr = compile_modifier(ConformToSphere(), m)
    assert instr == ConformToSphereInstr(origin=0, radius=1, influence_dist=2, attraction_accel=3, max_attraction_speed=4)
    assert [f.name for f in fields(ConformToSphereInstr)] == ["origin", "radius", "influence_dist", "attraction_accel", "max_attraction_speed"]

    m = ExprModule()
    assert compile_modifier(EmitSpawnEvent(condition="always", child_index=3), m) == EmitSpawnEventInstr("always", 0, 3)
    assert (EmitSpawnEvent.label, EmitSpawnEvent.phase) == ("EmitSpawnEvent", "update")
    assert (SetVelocityTangent.label, SetVelocityTangent.phase) == ("SetVelocityTangentModifier", "init")


def test_linear_drag_placeholder():
    diags = Diagnostics()
    c = compile_effect(EffectDescriptor(update_modifiers=[LinearDrag()]), diags)
    assert c.update == (LinearDragInstr(drag=0),)
    assert c.module.get(0).value == 0.0
    assert diags.codes() == ["placeholder"]


def test_wrong_phase_dropped_but_compiled():
    diags = Diagnostics()
    e = EffectDescriptor(init_modifiers=[Accel(), SetPositionSphere()], update_modifiers=[SetAttribute()])
    c = compile_effect(e, diags)
    assert len(c.init) == 1
    assert c.update == ()
    # accel (5) + sphere (2) + set attribute (1) + texture slot (1)
    assert len(c.module) == 9
    assert diags.codes() == ["wrong_phase", "wrong_phase"]


def test_unknown_modifier_type():
    try:
        compile_modifier(object(), ExprModule())
        raise AssertionError("expected TypeError")
    except TypeError:
        pass


def test_deterministic():
    e = EffectDescriptor(
        name="Sparks",
        spawner_settings=SpawnerSettings.once(40),
        texture_index=None,
        init_modifiers=[SetVelocityTangent(), SetAttribute(attribute=LIFETIME, value=lit_float(0.8))],
        update_modifiers=[Accel(), ConformToSphere()],
        render_modifiers=[ColorOverLifetime()],
    )
    a = compile_effect(e)
    b = compile_effect(e)
    assert a == b
    assert hash(a) == hash(b)
    assert a.render[-2].texture_index is None
    assert a.spawner_settings == SpawnerSettings.once(40)


def test_compiled_effect_is_immutable():
    e = EffectDescriptor(name="Smoke", init_modifiers=[SetAttribute(attribute=LIFETIME, value=lit_float(1.5))])
    c = compile_effect(e)
    assert hash(c) == hash(compile_effect(e))
    assert isinstance(c.module, FrozenModule)
    try:
        c.module.entries.append(c.module.get(0))
        raise AssertionError("expected AttributeError")
    except AttributeError:
        pass
    try:
        c.spawner_settings.cycle_count = 3
        raise AssertionError("expected FrozenInstanceError")
    except FrozenInstanceError:
        pass
    # editing the source document leaves the compiled asset alone
    e.spawner_settings = SpawnerSettings.once(5)
    e.init_modifiers.clear()
    assert c.spawner_settings == SpawnerSettings.rate(500.0)
    assert len(c.module) == 2 and len(c.init) == 1



def main():
    test_fire_scenario()
    test_render_tail_after_render_modifiers()
    test_texture_slot_follows_update_expressions()
    test_gradient_copied_verbatim()
    test_color_options_pass_through()
    test_modifier_fields_in_declaration_order()
    test_linear_drag_placeholder()
    test_wrong_phase_dropped_but_compiled()
    test_unknown_modifier_type()
    test_deterministic()
    test_compiled_effect_is_immutable()
    print("OK: effect compiler selftests passed")


if __name__ == "__main__":
    main()
