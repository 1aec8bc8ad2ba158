"""Selftests for the project file codec (models.io).

Run:
  python -m selftest.test_project_io
"""

import json
import tempfile
from pathlib import Path

from models.attributes import LIFETIME, VELOCITY
from models.expr import Age, RandomUniform, Time, lit_float, lit_vec4, op, parent_attr
from models.io import ProjectFormatError, dumps_project, load_project, loads_project, save_project
from models.modifiers import (
    Accel,
    ColorOverLifetime,
    ConformToSphere,
    EmitSpawnEvent,
    InheritAttribute,
    LinearDrag,
    SetAttribute,
    SetPositionCircle,
    SetPositionSphere,
    SetVelocityCircle,
    SetVelocitySphere,
    SetVelocityTangent,
    SizeOverLifetime,
)
from models.project import EffectDescriptor, ProjectDocument, SpawnerSettings


def _doc() -> ProjectDocument:
    fire = EffectDescriptor(
        name="Fire",
        capacity=1000,
        texture_index=2,
        init_modifiers=[
            SetAttribute(attribute=LIFETIME, value=lit_float(2.0)),
            SetPositionCircle(dimension="volume"),
            SetPositionSphere(),
            SetVelocityCircle(),
            SetVelocitySphere(),
            SetVelocityTangent(),
            InheritAttribute(attribute=VELOCITY),
        ],
        update_modifiers=[
            Accel(),
            EmitSpawnEvent(condition="always", child_index=1),
            ConformToSphere(),
        ],
        render_modifiers=[
            SizeOverLifetime(),
            ColorOverLifetime(blend="overwrite", mask="RG"),
        ],
    )
    smoke = EffectDescriptor(
        name="Smoke",
        parent="Fire",
        spawner_settings=SpawnerSettings(count=(10.0, 20.0), spawn_duration=(0.5, 1.5), period=(2.0, 2.0), cycle_count=3, starts_active=False),
        texture_index=None,
        init_modifiers=[
            SetAttribute(attribute=VELOCITY, value=op("mul", parent_attr(VELOCITY), op("vec3", Time(), Age(), RandomUniform("float")))),
            SetAttribute(value=lit_vec4(1, 2, 3, 4)),
        ],
    )
    return ProjectDocument(effects=[fire, smoke])


def test_round_trip():
    doc = _doc()
    assert loads_project(dumps_project(doc)) == doc


def test_file_round_trip_and_format():
    doc = _doc()
    with tempfile.TemporaryDirectory() as d:
        p = Path(d) / "demo.omagari.json"
        save_project(p, doc)
        raw = p.read_bytes()
        assert b"\r\n" not in raw
        assert raw.endswith(b"}\n")
        assert raw.startswith(b'{\n  "effects": [')
        assert load_project(p) == doc
        # saving an unchanged document is byte-stable
        save_project(p, load_project(p))
        assert p.read_bytes() == raw


def test_field_order():
    d = json.loads(dumps_project(_doc()))
    e = d["effects"][0]
    assert list(e.keys()) == [
        "name", "parent", "capacity", "spawner_settings", "texture_index",
        "init_modifiers", "update_modifiers", "render_modifiers",
    ]
    assert e["init_modifiers"][0] == {"type": "SetAttribute", "attribute": "LIFETIME", "value": {"type": "float", "value": 2.0}}
    assert e["render_modifiers"][0]["gradient"] == [[0.3, [0.1, 0.1, 0.1]], [1.0, [1.0, 1.0, 1.0]]]


def test_placeholder_encodes():
    doc = ProjectDocument(effects=[EffectDescriptor(update_modifiers=[LinearDrag()])])
    d = json.loads(dumps_project(doc))
    assert d["effects"][0]["update_modifiers"][0]["drag"] == {"type": "placeholder"}
    assert loads_project(dumps_project(doc)) == doc


def _expect_format_error(text: str, needle: str):
    try:
        loads_project(text)
    except ProjectFormatError as e:
        assert isinstance(e, OSError)
        assert needle in str(e), str(e)
        return
    raise AssertionError("expected ProjectFormatError")


def test_decode_errors():
    _expect_format_error("{not json", "Expecting")
    _expect_format_error("[]", "expected an object")
    _expect_format_error('{"effects": 3}', "expected a list")

    d = json.loads(dumps_project(_doc()))
    d["effects"][0]["init_modifiers"][1] = {"type": "Foo"}
    _expect_format_error(json.dumps(d), "effects[0].init_modifiers[1]: unknown modifier type 'Foo'")

    d = json.loads(dumps_project(_doc()))
    d["effects"][0]["init_modifiers"][0]["attribute"] = "NOPE"
    _expect_format_error(json.dumps(d), "effects[0].init_modifiers[0].attribute")

    d = json.loads(dumps_project(_doc()))
    d["effects"][0]["init_modifiers"][0]["value"] = {"type": "op", "op": "sin", "args": []}
    _expect_format_error(json.dumps(d), "effects[0].init_modifiers[0].value")

    d = json.loads(dumps_project(_doc()))
    d["effects"][1]["capacity"] = -4
    _expect_format_error(json.dumps(d), "effects[1].capacity")



def test_non_string_tags_rejected():
    d = json.loads(dumps_project(_doc()))
    d["effects"][0]["init_modifiers"][0]["type"] = ["SetAttribute"]
    _expect_format_error(json.dumps(d), "effects[0].init_modifiers[0].type: expected a string")

    d = json.loads(dumps_project(_doc()))
    d["effects"][0]["init_modifiers"][0]["value"] = {"type": {"x": 1}}
    _expect_format_error(json.dumps(d), "effects[0].init_modifiers[0].value.type")

    d = json.loads(dumps_project(_doc()))
    d["effects"][0]["init_modifiers"][0]["value"] = {"type": "op", "op": ["add"], "args": []}
    _expect_format_error(json.dumps(d), "effects[0].init_modifiers[0].value.op")

    d = json.loads(dumps_project(_doc()))
    d["effects"][0]["init_modifiers"][0]["value"] = {"type": "rand", "value_type": 3}
    _expect_format_error(json.dumps(d), "effects[0].init_modifiers[0].value.value_type")

    d = json.loads(dumps_project(_doc()))
    d["effects"][0]["init_modifiers"][0]["attribute"] = ["LIFETIME"]
    _expect_format_error(json.dumps(d), "effects[0].init_modifiers[0].attribute")

def test_missing_file_is_raw_oserror():
    with tempfile.TemporaryDirectory() as d:
        try:
            load_project(Path(d) / "missing.omagari.json")
        except ProjectFormatError:
            raise AssertionError("file errors must not be wrapped")
        except FileNotFoundError:
            return
    raise AssertionError("expected FileNotFoundError")


def main():
    test_round_trip()
    test_file_round_trip_and_format()
    test_field_order()
    test_placeholder_encodes()
    test_decode_errors()
    test_non_string_tags_rejected()
    test_missing_file_is_raw_oserror()
    print("OK: project io selftests passed")


if __name__ == "__main__":
    main()
