"""Selftests for resolve_parents / SpawnSession against the in-memory runtime.

Run:
  python -m selftest.test_spawner
"""

from compiler.diagnostics import Diagnostics
from models.project import PARTICLE_TEXTURES, EffectDescriptor, ProjectDocument
from runtime import InMemoryRuntime, SpawnSession, TextureIndexError, resolve_parents


def _doc(*effects: EffectDescriptor) -> ProjectDocument:
    return ProjectDocument(effects=list(effects))


def test_parent_listed_first_links():
    rt = InMemoryRuntime()
    rep = SpawnSession(rt).spawn(_doc(EffectDescriptor(name="A"), EffectDescriptor(name="B", parent="A")))
    a, b = rep.entities
    assert rt.entities[b].parent == a
    assert rt.parent_name(b) == "A"
    assert [l.status for l in rep.links] == ["none", "linked"]
    assert rep.links[1].parent_index == 0


def test_parent_listed_after_is_dropped():
    rt = InMemoryRuntime()
    diags = Diagnostics()
    rep = SpawnSession(rt).spawn(_doc(EffectDescriptor(name="B", parent="A"), EffectDescriptor(name="A")), diags)
    b, a = rep.entities
    assert rt.entities[b].parent is None
    assert rep.links[0].status == "unresolved"
    assert rep.linked() == []
    assert diags.codes() == ["unresolved_parent"]


def test_missing_parent_is_silent_without_diagnostics():
    rt = InMemoryRuntime()
    rep = SpawnSession(rt).spawn(_doc(EffectDescriptor(name="B", parent="Ghost")))
    assert len(rt.entities) == 1
    assert rep.links[0].status == "unresolved"


def test_duplicate_names_latest_wins():
    diags = Diagnostics()
    doc = _doc(
        EffectDescriptor(name="A"),
        EffectDescriptor(name="C", parent="A"),
        EffectDescriptor(name="A"),
        EffectDescriptor(name="D", parent="A"),
    )
    rt = InMemoryRuntime()
    rep = SpawnSession(rt).spawn(doc, diags)
    a1, c, a2, d = rep.entities
    assert rt.entities[c].parent == a1
    assert rt.entities[d].parent == a2
    assert diags.codes() == ["duplicate_name"]


def test_self_parent_links_to_itself():
    diags = Diagnostics()
    links = resolve_parents(_doc(EffectDescriptor(name="Loop", parent="Loop")), diags)
    assert links[0].status == "linked"
    assert links[0].parent_index == 0
    assert diags.codes() == ["self_parent"]

    rt = InMemoryRuntime()
    rep = SpawnSession(rt).spawn(_doc(EffectDescriptor(name="Loop", parent="Loop")))
    (loop,) = rep.entities
    assert rt.entities[loop].parent == loop


def test_duplicate_rebinds_before_own_parent_lookup():
    diags = Diagnostics()
    rt = InMemoryRuntime()
    rep = SpawnSession(rt).spawn(_doc(EffectDescriptor(name="A"), EffectDescriptor(name="A", parent="A")), diags)
    a1, a2 = rep.entities
    assert rep.links[1].parent_index == 1
    assert rt.entities[a2].parent == a2
    assert rt.entities[a1].parent is None
    assert diags.codes() == ["duplicate_name", "self_parent"]


def test_materials():
    rt = InMemoryRuntime()
    rep = SpawnSession(rt).spawn(_doc(EffectDescriptor(name="A", texture_index=2), EffectDescriptor(name="B", texture_index=None)))
    a, b = rep.entities
    assert rt.entities[a].material == PARTICLE_TEXTURES[2]
    assert rt.entities[b].material is None


def test_spawn_replaces_previous_scene():
    rt = InMemoryRuntime()
    s = SpawnSession(rt)
    s.spawn(_doc(EffectDescriptor(name="A"), EffectDescriptor(name="B"), EffectDescriptor(name="C")))
    assert len(rt.entities) == 3 and len(rt.assets) == 3
    rep = s.spawn(_doc(EffectDescriptor(name="X")))
    assert len(rt.entities) == 1 and len(rt.assets) == 1
    assert rt.entities[rep.entities[0]].name == "X"
    assert rt.assets[rep.assets[0]].name == "X"


def test_bad_texture_index_aborts_midway():
    rt = InMemoryRuntime()
    s = SpawnSession(rt, textures=["t0", "t1"])
    doc = _doc(EffectDescriptor(name="A", texture_index=1), EffectDescriptor(name="B", texture_index=5), EffectDescriptor(name="C"))
    try:
        s.spawn(doc)
        raise AssertionError("expected TextureIndexError")
    except TextureIndexError as e:
        assert isinstance(e, IndexError)
        assert "'B'" in str(e)
    # no rollback: A stays until the next spawn
    assert [e.name for e in rt.entities.values()] == ["A"]

    s.spawn(_doc(EffectDescriptor(name="Z", texture_index=0)))
    assert [e.name for e in rt.entities.values()] == ["Z"]
    assert len(rt.assets) == 1


def test_compiler_sees_each_effect_once():
    rt = InMemoryRuntime()
    doc = _doc(EffectDescriptor(name="A", capacity=10), EffectDescriptor(name="B", capacity=20))
    rep = SpawnSession(rt).spawn(doc)
    assert [rt.assets[h].capacity for h in rep.assets] == [10, 20]


def main():
    test_parent_listed_first_links()
    test_parent_listed_after_is_dropped()
    test_missing_parent_is_silent_without_diagnostics()
    test_duplicate_names_latest_wins()
    test_self_parent_links_to_itself()
    test_duplicate_rebinds_before_own_parent_lookup()
    test_materials()
    test_spawn_replaces_previous_scene()
    test_bad_texture_index_aborts_midway()
    test_compiler_sees_each_effect_once()
    print("OK: spawner selftests passed")


if __name__ == "__main__":
    main()
