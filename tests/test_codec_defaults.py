"""Default-value codec: omission, sentinels and structural type errors."""

import pytest

from gltfcodec.codec import decode_entity, dumps, encode_entity, loads
from gltfcodec.constants import NO_INDEX, ComponentType
from gltfcodec.errors import (
    E_SCHEMA_INDEX,
    E_SCHEMA_JSON,
    E_SCHEMA_MISSING_FIELD,
    E_SCHEMA_TYPE,
    SchemaError,
)
from gltfcodec.model import (
    Accessor,
    AnimationSampler,
    Channel,
    Buffer,
    Document,
    Material,
    Node,
    NormalTexture,
    OcclusionTexture,
    Sampler,
    TextureInfo,
)


def test_default_node_encodes_empty():
    assert encode_entity(Node()) == {}


def test_default_material_encodes_empty():
    assert encode_entity(Material()) == {}


def test_default_document_keeps_only_asset():
    assert dumps(Document()) == b'{"asset":{"version":"2.0"}}'


def test_scene_sentinel_omitted_and_restored():
    doc = Document()
    assert doc.scene == NO_INDEX
    data = dumps(doc)
    assert b'"scene"' not in data
    assert loads(data).scene == NO_INDEX


def test_explicit_scene_zero_survives():
    doc = loads(b'{"asset":{"version":"2.0"},"scene":0}')
    assert doc.scene == 0
    assert b'"scene":0' in dumps(doc)


def test_optional_references_dropped_at_sentinel():
    assert "bufferView" not in encode_entity(Accessor(count=3))
    assert encode_entity(Node(mesh=0)) == {"mesh": 0}


def test_required_fields_always_emitted():
    assert encode_entity(Buffer()) == {"byteLength": 0}
    assert encode_entity(Accessor()) == {
        "componentType": ComponentType.FLOAT,
        "count": 0,
        "type": "SCALAR",
    }


def test_animation_sampler_references_written_as_minus_one():
    assert encode_entity(AnimationSampler()) == {"input": -1, "output": -1}


def test_unset_texture_and_channel_references_dropped():
    assert encode_entity(TextureInfo()) == {}
    assert encode_entity(NormalTexture(scale=0.5)) == {"scale": 0.5}
    assert encode_entity(OcclusionTexture()) == {}
    assert encode_entity(Channel()) == {"target": {"path": "translation"}}
    assert decode_entity(TextureInfo, {}).index == NO_INDEX
    assert decode_entity(Channel, {"target": {"path": "scale"}}).sampler == NO_INDEX


def test_texture_index_zero_kept():
    assert encode_entity(TextureInfo(index=0)) == {"index": 0}
    assert encode_entity(Channel(sampler=0)) == {
        "sampler": 0,
        "target": {"path": "translation"},
    }


def test_non_default_scalars_kept():
    assert encode_entity(NormalTexture(index=2)) == {"index": 2}
    assert encode_entity(NormalTexture(index=2, scale=0.5)) == {
        "index": 2,
        "scale": 0.5,
    }
    assert encode_entity(Sampler(mag_filter=9728)) == {"magFilter": 9728}


def test_decode_overlays_present_fields_only():
    node = decode_entity(Node, {"mesh": 1, "translation": [1, 2, 3]})
    assert node.mesh == 1
    assert node.translation == [1, 2, 3]
    assert node.scale == [1.0, 1.0, 1.0]
    assert node.camera == NO_INDEX


def test_integers_stay_integers():
    node = decode_entity(Node, {"translation": [1, 2.5, 3]})
    assert [type(v) for v in node.translation] == [int, float, int]


def test_missing_required_field():
    with pytest.raises(SchemaError) as ei:
        decode_entity(Buffer, {"uri": "a.bin"}, "$.buffers[0]")
    assert ei.value.code == E_SCHEMA_MISSING_FIELD
    assert ei.value.context["path"] == "$.buffers[0]"
    assert ei.value.context["field"] == "byteLength"


def test_missing_asset_rejected():
    with pytest.raises(SchemaError) as ei:
        loads(b"{}")
    assert ei.value.code == E_SCHEMA_MISSING_FIELD


@pytest.mark.parametrize(
    "obj, path",
    [
        ({"mesh": "0"}, "$.mesh"),
        ({"mesh": True}, "$.mesh"),
        ({"matrix": [1, 0, 0]}, "$.matrix"),
        ({"scale": [1, "x", 1]}, "$.scale[1]"),
        ({"children": [-1]}, "$.children[0]"),
        ({"name": 3}, "$.name"),
    ],
)
def test_structural_type_errors(obj, path):
    with pytest.raises(SchemaError) as ei:
        decode_entity(Node, obj)
    assert ei.value.code == E_SCHEMA_TYPE
    assert ei.value.context["path"] == path


def test_reference_below_sentinel_rejected():
    with pytest.raises(SchemaError) as ei:
        decode_entity(Node, {"mesh": -2})
    assert ei.value.code == E_SCHEMA_INDEX


def test_entity_must_be_object():
    with pytest.raises(SchemaError) as ei:
        loads(b'{"asset":{"version":"2.0"},"nodes":[1]}')
    assert ei.value.code == E_SCHEMA_TYPE
    assert ei.value.context["path"] == "$.nodes[0]"


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"{",
        b'{"asset":{"version":"2.0"},"extras":NaN}',
        b"\xff\xfe",
    ],
)
def test_invalid_json_rejected(data):
    with pytest.raises(SchemaError) as ei:
        loads(data)
    assert ei.value.code == E_SCHEMA_JSON
