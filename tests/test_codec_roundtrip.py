"""Codec round trips: per kind and byte-for-byte for whole documents."""

import json

import pytest

from gltfcodec.codec import CODECS, decode_entity, dumps, encode_entity, loads
from gltfcodec.model import (
    Accessor,
    Animation,
    AnimationSampler,
    Camera,
    Channel,
    ChannelTarget,
    Image,
    Material,
    Mesh,
    NormalTexture,
    PBRMetallicRoughness,
    Perspective,
    Primitive,
    Sparse,
    SparseIndices,
    SparseValues,
    TextureInfo,
)

# Keys follow the encoder's per-kind field order.
FULL_DOCUMENT = {
    "extensionsUsed": ["KHR_materials_unlit"],
    "accessors": [
        {
            "name": "positions",
            "bufferView": 0,
            "componentType": 5126,
            "count": 3,
            "type": "VEC3",
            "max": [1, 1, 0],
            "min": [0, 0, 0],
        }
    ],
    "animations": [
        {
            "channels": [{"sampler": 0, "target": {"node": 0, "path": "rotation"}}],
            "samplers": [{"input": 1, "interpolation": "STEP", "output": 2}],
        }
    ],
    "asset": {"generator": "unit-test", "version": "2.0"},
    "buffers": [{"byteLength": 36}],
    "bufferViews": [{"buffer": 0, "byteLength": 36, "target": 34962}],
    "cameras": [{"perspective": {"yfov": 0.8, "znear": 0.01}, "type": "perspective"}],
    "images": [{"uri": "tex.png"}],
    "materials": [
        {
            "name": "unlit",
            "pbrMetallicRoughness": {
                "baseColorFactor": [1, 0.5, 0.5, 1],
                "baseColorTexture": {"index": 0},
            },
            "extensions": {"KHR_materials_unlit": {}},
        }
    ],
    "meshes": [{"primitives": [{"attributes": {"POSITION": 0}, "material": 0}]}],
    "nodes": [{"name": "root", "mesh": 0, "translation": [0, 1, 0]}],
    "samplers": [{"magFilter": 9729, "wrapS": 33071}],
    "scene": 0,
    "scenes": [{"nodes": [0]}],
    "textures": [{"sampler": 0, "source": 0}],
    "extras": {"note": "ünïcode"},
}


def _compact(obj) -> bytes:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode(
        "utf-8"
    )


def test_document_bytes_reproduced():
    data = _compact(FULL_DOCUMENT)
    assert dumps(loads(data)) == data


def test_minimal_document_bytes_reproduced():
    data = b'{"asset":{"version":"2.0"}}'
    assert dumps(loads(data)) == data


@pytest.mark.parametrize(
    "entity",
    [
        Accessor(
            buffer_view=1,
            count=4,
            type="VEC2",
            sparse=Sparse(
                count=1,
                indices=SparseIndices(buffer_view=2, component_type=5123),
                values=SparseValues(buffer_view=3, byte_offset=8),
            ),
        ),
        Animation(
            name="walk",
            channels=[Channel(sampler=0, target=ChannelTarget(node=2, path="scale"))],
            samplers=[AnimationSampler(input=0, output=1, interpolation="CUBICSPLINE")],
        ),
        Camera(perspective=Perspective(aspect_ratio=1.5, yfov=0.7, znear=0.1)),
        Image(mime_type="image/png", buffer_view=3),
        Material(
            normal_texture=NormalTexture(index=1, scale=2.0),
            pbr_metallic_roughness=PBRMetallicRoughness(
                metallic_factor=0.0,
                metallic_roughness_texture=TextureInfo(index=2, tex_coord=1),
            ),
            alpha_mode="MASK",
            double_sided=True,
        ),
        Mesh(
            primitives=[
                Primitive(
                    attributes={"POSITION": 0, "NORMAL": 1},
                    indices=2,
                    mode=1,
                    targets=[{"POSITION": 3}],
                )
            ],
            weights=[0.5],
            extras={"lod": 0},
        ),
    ],
)
def test_entity_roundtrip(entity):
    encoded = encode_entity(entity)
    assert decode_entity(type(entity), encoded) == entity


def test_every_kind_default_roundtrips():
    for cls, codec in CODECS.items():
        assert codec.decode(codec.encode(cls())) == cls(), cls.__name__


def test_buffer_payload_never_serialized():
    doc = loads(b'{"asset":{"version":"2.0"},"buffers":[{"byteLength":2}]}')
    doc.buffers[0].data = b"\x01\x02"
    assert b"data" not in dumps(doc)
