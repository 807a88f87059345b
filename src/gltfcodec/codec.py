"""Default-value aware JSON codec for glTF entities.

Every entity kind gets an :class:`EntityCodec`: a pair of pure functions
driven by a per-kind field table.

- ``decode`` starts from the kind's canonical default instance (``cls()``)
  and overlays only the fields present in the input object.
- ``encode`` walks the same table in order and drops every optional field
  whose value equals the canonical default. Required fields are always
  emitted; a required reference still at ``NO_INDEX`` is written as ``-1``
  so that omission never turns "unset" into "index 0".

Sentinel-defaulted optional references (``Node.mesh``, ``Document.scene``,
texture-info ``index``, ``Channel.sampler`` and friends) therefore round-trip
as "field omitted" <-> ``NO_INDEX``, while an explicit ``0`` stays ``0``.
``AnimationSampler.input``/``output`` are the required references.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Sequence, Tuple, Type, TypeVar

from .constants import MAX_UINT32, NO_INDEX
from .errors import (
    E_SCHEMA_INDEX,
    E_SCHEMA_JSON,
    E_SCHEMA_MISSING_FIELD,
    E_SCHEMA_TYPE,
    schema_error,
)
from . import model as m

__all__ = [
    "EntityCodec",
    "Field",
    "CODECS",
    "codec_for",
    "decode_entity",
    "encode_entity",
    "decode_document",
    "encode_document",
    "loads",
    "dumps",
]

T = TypeVar("T")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _type_error(path: str, expected: str, value: Any):
    return schema_error(
        E_SCHEMA_TYPE,
        f"{path}: expected {expected}, got {type(value).__name__}",
        path,
    )


# Converters ---------------------------------------------------------------


class Converter:
    """Maps one field between its JSON value and its in-memory value."""

    def decode(self, value: Any, path: str) -> Any:
        raise NotImplementedError

    def encode(self, value: Any) -> Any:
        return _plain(value)


class _Index(Converter):
    def decode(self, value: Any, path: str) -> int:
        if not _is_int(value):
            raise _type_error(path, "integer index", value)
        if value < NO_INDEX or value > MAX_UINT32:
            raise schema_error(
                E_SCHEMA_INDEX, f"{path}: invalid index {value}", path
            )
        return value


class _UInt(Converter):
    def decode(self, value: Any, path: str) -> int:
        if not _is_int(value):
            raise _type_error(path, "unsigned integer", value)
        if value < 0 or value > MAX_UINT32:
            raise _type_error(path, "unsigned 32-bit integer", value)
        return value


class _Number(Converter):
    def decode(self, value: Any, path: str) -> float:
        if not _is_number(value):
            raise _type_error(path, "number", value)
        return value


class _Bool(Converter):
    def decode(self, value: Any, path: str) -> bool:
        if not isinstance(value, bool):
            raise _type_error(path, "boolean", value)
        return value


class _Str(Converter):
    def decode(self, value: Any, path: str) -> str:
        if not isinstance(value, str):
            raise _type_error(path, "string", value)
        return value


class _Object(Converter):
    def decode(self, value: Any, path: str) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise _type_error(path, "object", value)
        return value


class _Any(Converter):
    def decode(self, value: Any, path: str) -> Any:
        return value


class _Array(Converter):
    def __init__(self, item: Converter, length: int | None = None) -> None:
        self.item = item
        self.length = length

    def decode(self, value: Any, path: str) -> List[Any]:
        if not isinstance(value, list):
            raise _type_error(path, "array", value)
        if self.length is not None and len(value) != self.length:
            raise schema_error(
                E_SCHEMA_TYPE,
                f"{path}: expected {self.length} elements, got {len(value)}",
                path,
            )
        return [self.item.decode(v, f"{path}[{i}]") for i, v in enumerate(value)]

    def encode(self, value: Sequence[Any]) -> List[Any]:
        return [self.item.encode(v) for v in value]


class _Mapping(Converter):
    def __init__(self, item: Converter) -> None:
        self.item = item

    def decode(self, value: Any, path: str) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise _type_error(path, "object", value)
        return {k: self.item.decode(v, f"{path}.{k}") for k, v in value.items()}

    def encode(self, value: Dict[str, Any]) -> Dict[str, Any]:
        return {k: self.item.encode(v) for k, v in value.items()}


class _Nested(Converter):
    def __init__(self, cls: type) -> None:
        self.cls = cls

    def decode(self, value: Any, path: str) -> Any:
        return codec_for(self.cls).decode(value, path)

    def encode(self, value: Any) -> Dict[str, Any]:
        return codec_for(self.cls).encode(value)


INDEX = _Index()
UINT = _UInt()
NUMBER = _Number()
BOOL = _Bool()
STR = _Str()
OBJECT = _Object()
ANY = _Any()
UINTS = _Array(UINT)
NUMBERS = _Array(NUMBER)
STRS = _Array(STR)
ATTRIBUTES = _Mapping(UINT)


def _vec(n: int) -> _Array:
    return _Array(NUMBER, n)


def _one(cls: type) -> _Nested:
    return _Nested(cls)


def _many(cls: type) -> _Array:
    return _Array(_Nested(cls))


# Entity codec -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Field:
    attr: str
    key: str
    conv: Converter
    required: bool = False


def _f(attr: str, key: str, conv: Converter, required: bool = False) -> Field:
    return Field(attr, key, conv, required)


def _common(*fields: Field) -> Tuple[Field, ...]:
    return fields + (
        Field("extensions", "extensions", OBJECT),
        Field("extras", "extras", ANY),
    )


class EntityCodec(Generic[T]):
    def __init__(self, cls: Type[T], fields: Tuple[Field, ...]) -> None:
        self.cls = cls
        self.fields = fields
        self.defaults = cls()

    @property
    def kind(self) -> str:
        return self.cls.__name__

    def decode(self, obj: Any, path: str = "$") -> T:
        if not isinstance(obj, dict):
            raise schema_error(
                E_SCHEMA_TYPE,
                f"{path}: {self.kind} must be an object, got {type(obj).__name__}",
                path,
            )
        entity = self.cls()
        for f in self.fields:
            if f.key not in obj:
                if f.required:
                    raise schema_error(
                        E_SCHEMA_MISSING_FIELD,
                        f"{path}: {self.kind} is missing required '{f.key}'",
                        path,
                        field=f.key,
                    )
                continue
            setattr(entity, f.attr, f.conv.decode(obj[f.key], f"{path}.{f.key}"))
        return entity

    def encode(self, entity: T) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in self.fields:
            value = getattr(entity, f.attr)
            if not f.required and value == getattr(self.defaults, f.attr):
                continue
            out[f.key] = f.conv.encode(value)
        return out


_TABLES: Dict[type, Tuple[Field, ...]] = {
    m.Asset: _common(
        _f("copyright", "copyright", STR),
        _f("generator", "generator", STR),
        _f("version", "version", STR, required=True),
        _f("min_version", "minVersion", STR),
    ),
    m.Buffer: _common(
        _f("name", "name", STR),
        _f("uri", "uri", STR),
        _f("byte_length", "byteLength", UINT, required=True),
    ),
    m.BufferView: _common(
        _f("name", "name", STR),
        _f("buffer", "buffer", INDEX),
        _f("byte_offset", "byteOffset", UINT),
        _f("byte_length", "byteLength", UINT, required=True),
        _f("byte_stride", "byteStride", UINT),
        _f("target", "target", UINT),
    ),
    m.SparseIndices: _common(
        _f("buffer_view", "bufferView", UINT, required=True),
        _f("byte_offset", "byteOffset", UINT),
        _f("component_type", "componentType", UINT, required=True),
    ),
    m.SparseValues: _common(
        _f("buffer_view", "bufferView", UINT, required=True),
        _f("byte_offset", "byteOffset", UINT),
    ),
    m.Sparse: _common(
        _f("count", "count", UINT, required=True),
        _f("indices", "indices", _one(m.SparseIndices), required=True),
        _f("values", "values", _one(m.SparseValues), required=True),
    ),
    m.Accessor: _common(
        _f("name", "name", STR),
        _f("buffer_view", "bufferView", INDEX),
        _f("byte_offset", "byteOffset", UINT),
        _f("component_type", "componentType", UINT, required=True),
        _f("normalized", "normalized", BOOL),
        _f("count", "count", UINT, required=True),
        _f("type", "type", STR, required=True),
        _f("max", "max", NUMBERS),
        _f("min", "min", NUMBERS),
        _f("sparse", "sparse", _one(m.Sparse)),
    ),
    m.Scene: _common(
        _f("name", "name", STR),
        _f("nodes", "nodes", UINTS),
    ),
    m.Node: _common(
        _f("name", "name", STR),
        _f("camera", "camera", INDEX),
        _f("children", "children", UINTS),
        _f("skin", "skin", INDEX),
        _f("matrix", "matrix", _vec(16)),
        _f("mesh", "mesh", INDEX),
        _f("rotation", "rotation", _vec(4)),
        _f("scale", "scale", _vec(3)),
        _f("translation", "translation", _vec(3)),
        _f("weights", "weights", NUMBERS),
    ),
    m.Skin: _common(
        _f("name", "name", STR),
        _f("inverse_bind_matrices", "inverseBindMatrices", INDEX),
        _f("skeleton", "skeleton", INDEX),
        _f("joints", "joints", UINTS, required=True),
    ),
    m.Orthographic: _common(
        _f("xmag", "xmag", NUMBER, required=True),
        _f("ymag", "ymag", NUMBER, required=True),
        _f("zfar", "zfar", NUMBER, required=True),
        _f("znear", "znear", NUMBER, required=True),
    ),
    m.Perspective: _common(
        _f("aspect_ratio", "aspectRatio", NUMBER),
        _f("yfov", "yfov", NUMBER, required=True),
        _f("zfar", "zfar", NUMBER),
        _f("znear", "znear", NUMBER, required=True),
    ),
    m.Camera: _common(
        _f("name", "name", STR),
        _f("orthographic", "orthographic", _one(m.Orthographic)),
        _f("perspective", "perspective", _one(m.Perspective)),
        _f("type", "type", STR, required=True),
    ),
    m.Primitive: _common(
        _f("attributes", "attributes", ATTRIBUTES, required=True),
        _f("indices", "indices", INDEX),
        _f("material", "material", INDEX),
        _f("mode", "mode", UINT),
        _f("targets", "targets", _Array(ATTRIBUTES)),
    ),
    m.Mesh: _common(
        _f("name", "name", STR),
        _f("primitives", "primitives", _many(m.Primitive), required=True),
        _f("weights", "weights", NUMBERS),
    ),
    m.TextureInfo: _common(
        _f("index", "index", INDEX),
        _f("tex_coord", "texCoord", UINT),
    ),
    m.NormalTexture: _common(
        _f("index", "index", INDEX),
        _f("tex_coord", "texCoord", UINT),
        _f("scale", "scale", NUMBER),
    ),
    m.OcclusionTexture: _common(
        _f("index", "index", INDEX),
        _f("tex_coord", "texCoord", UINT),
        _f("strength", "strength", NUMBER),
    ),
    m.PBRMetallicRoughness: _common(
        _f("base_color_factor", "baseColorFactor", _vec(4)),
        _f("base_color_texture", "baseColorTexture", _one(m.TextureInfo)),
        _f("metallic_factor", "metallicFactor", NUMBER),
        _f("roughness_factor", "roughnessFactor", NUMBER),
        _f(
            "metallic_roughness_texture",
            "metallicRoughnessTexture",
            _one(m.TextureInfo),
        ),
    ),
    m.Material: _common(
        _f("name", "name", STR),
        _f(
            "pbr_metallic_roughness",
            "pbrMetallicRoughness",
            _one(m.PBRMetallicRoughness),
        ),
        _f("normal_texture", "normalTexture", _one(m.NormalTexture)),
        _f("occlusion_texture", "occlusionTexture", _one(m.OcclusionTexture)),
        _f("emissive_texture", "emissiveTexture", _one(m.TextureInfo)),
        _f("emissive_factor", "emissiveFactor", _vec(3)),
        _f("alpha_mode", "alphaMode", STR),
        _f("alpha_cutoff", "alphaCutoff", NUMBER),
        _f("double_sided", "doubleSided", BOOL),
    ),
    m.Texture: _common(
        _f("name", "name", STR),
        _f("sampler", "sampler", INDEX),
        _f("source", "source", INDEX),
    ),
    m.Sampler: _common(
        _f("name", "name", STR),
        _f("mag_filter", "magFilter", UINT),
        _f("min_filter", "minFilter", UINT),
        _f("wrap_s", "wrapS", UINT),
        _f("wrap_t", "wrapT", UINT),
    ),
    m.Image: _common(
        _f("name", "name", STR),
        _f("uri", "uri", STR),
        _f("mime_type", "mimeType", STR),
        _f("buffer_view", "bufferView", INDEX),
    ),
    m.AnimationSampler: _common(
        _f("input", "input", INDEX, required=True),
        _f("interpolation", "interpolation", STR),
        _f("output", "output", INDEX, required=True),
    ),
    m.ChannelTarget: _common(
        _f("node", "node", INDEX),
        _f("path", "path", STR, required=True),
    ),
    m.Channel: _common(
        _f("sampler", "sampler", INDEX),
        _f("target", "target", _one(m.ChannelTarget), required=True),
    ),
    m.Animation: _common(
        _f("name", "name", STR),
        _f("channels", "channels", _many(m.Channel), required=True),
        _f("samplers", "samplers", _many(m.AnimationSampler), required=True),
    ),
    m.Document: _common(
        _f("extensions_used", "extensionsUsed", STRS),
        _f("extensions_required", "extensionsRequired", STRS),
        _f("accessors", "accessors", _many(m.Accessor)),
        _f("animations", "animations", _many(m.Animation)),
        _f("asset", "asset", _one(m.Asset), required=True),
        _f("buffers", "buffers", _many(m.Buffer)),
        _f("buffer_views", "bufferViews", _many(m.BufferView)),
        _f("cameras", "cameras", _many(m.Camera)),
        _f("images", "images", _many(m.Image)),
        _f("materials", "materials", _many(m.Material)),
        _f("meshes", "meshes", _many(m.Mesh)),
        _f("nodes", "nodes", _many(m.Node)),
        _f("samplers", "samplers", _many(m.Sampler)),
        # In memory NO_INDEX means "no default scene"; it is written by
        # omission and never as the wire's implicit 0.
        _f("scene", "scene", INDEX),
        _f("scenes", "scenes", _many(m.Scene)),
        _f("skins", "skins", _many(m.Skin)),
        _f("textures", "textures", _many(m.Texture)),
    ),
}

CODECS: Dict[type, EntityCodec[Any]] = {
    cls: EntityCodec(cls, fields) for cls, fields in _TABLES.items()
}


def codec_for(cls: Type[T]) -> EntityCodec[T]:
    return CODECS[cls]


def decode_entity(cls: Type[T], obj: Any, path: str = "$") -> T:
    return codec_for(cls).decode(obj, path)


def encode_entity(entity: Any) -> Dict[str, Any]:
    return codec_for(type(entity)).encode(entity)


def decode_document(obj: Any) -> m.Document:
    return CODECS[m.Document].decode(obj, "$")


def encode_document(doc: m.Document) -> Dict[str, Any]:
    return CODECS[m.Document].encode(doc)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def loads(data: bytes | str) -> m.Document:
    """Parse a JSON document and decode it into a :class:`Document`."""
    try:
        if isinstance(data, (bytes, bytearray, memoryview)):
            data = bytes(data).decode("utf-8")
        obj = json.loads(data, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise schema_error(E_SCHEMA_JSON, f"invalid JSON document: {e}") from e
    return decode_document(obj)


def dumps(doc: m.Document) -> bytes:
    """Encode a :class:`Document` to compact UTF-8 JSON."""
    try:
        text = json.dumps(
            encode_document(doc),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise schema_error(E_SCHEMA_TYPE, f"document is not encodable: {e}") from e
    return text.encode("utf-8")
