"""Dataclass models for glTF documents.

Each entity's no-argument constructor produces the canonical default
instance the codec decodes onto and compares against when encoding.
Cross-references are plain indices into a sibling collection of the owning
:class:`Document`; ``NO_INDEX`` (-1) means "no reference".
"""

from __future__ import annotations
import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import (
    BUFFER_DATA_URI_PREFIXES,
    IDENTITY_MATRIX,
    IMAGE_DATA_URI_PREFIXES,
    MIMETYPE_APPLICATION_OCTET,
    NO_INDEX,
    AccessorType,
    AlphaMode,
    CameraType,
    ComponentType,
    Interpolation,
    PrimitiveMode,
    TRSProperty,
    WrappingMode,
)
from .errors import E_RES_DATA_URI, resource_error


@dataclass(slots=True)
class Asset:
    version: str = "2.0"
    generator: str = ""
    copyright: str = ""
    min_version: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Buffer:
    """A span of raw bytes; ``data`` is filled in by the decoder."""

    byte_length: int = 0
    uri: str = ""
    name: str = ""
    data: bytes = b""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None

    def is_embedded_resource(self) -> bool:
        return self.uri.startswith(BUFFER_DATA_URI_PREFIXES)

    def embed(self) -> None:
        """Point ``uri`` at an inline base64 copy of ``data``."""
        self.uri = encode_data_uri(self.data)


@dataclass(slots=True)
class BufferView:
    buffer: int = NO_INDEX
    byte_length: int = 0
    byte_offset: int = 0
    byte_stride: int = 0
    target: Optional[int] = None
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class SparseIndices:
    buffer_view: int = 0
    byte_offset: int = 0
    component_type: int = ComponentType.UNSIGNED_INT
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class SparseValues:
    buffer_view: int = 0
    byte_offset: int = 0
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Sparse:
    count: int = 0
    indices: SparseIndices = field(default_factory=SparseIndices)
    values: SparseValues = field(default_factory=SparseValues)
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Accessor:
    buffer_view: int = NO_INDEX
    byte_offset: int = 0
    component_type: int = ComponentType.FLOAT
    normalized: bool = False
    count: int = 0
    type: str = AccessorType.SCALAR
    max: List[float] = field(default_factory=list)
    min: List[float] = field(default_factory=list)
    sparse: Optional[Sparse] = None
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Scene:
    nodes: List[int] = field(default_factory=list)
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Node:
    """A node carries either ``matrix`` or the TRS triple; both default to identity."""

    camera: int = NO_INDEX
    children: List[int] = field(default_factory=list)
    skin: int = NO_INDEX
    matrix: List[float] = field(default_factory=lambda: list(IDENTITY_MATRIX))
    mesh: int = NO_INDEX
    rotation: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0, 1.0])
    scale: List[float] = field(default_factory=lambda: [1.0, 1.0, 1.0])
    translation: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    weights: List[float] = field(default_factory=list)
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Skin:
    inverse_bind_matrices: int = NO_INDEX
    skeleton: int = NO_INDEX
    joints: List[int] = field(default_factory=list)
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Orthographic:
    xmag: float = 0.0
    ymag: float = 0.0
    zfar: float = 0.0
    znear: float = 0.0
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Perspective:
    # aspect_ratio/zfar: None means "not specified" (zfar None is infinite).
    aspect_ratio: Optional[float] = None
    yfov: float = 0.0
    zfar: Optional[float] = None
    znear: float = 0.0
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Camera:
    type: str = CameraType.PERSPECTIVE
    orthographic: Optional[Orthographic] = None
    perspective: Optional[Perspective] = None
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Primitive:
    attributes: Dict[str, int] = field(default_factory=dict)
    indices: int = NO_INDEX
    material: int = NO_INDEX
    mode: int = PrimitiveMode.TRIANGLES
    targets: List[Dict[str, int]] = field(default_factory=list)
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Mesh:
    primitives: List[Primitive] = field(default_factory=list)
    weights: List[float] = field(default_factory=list)
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class TextureInfo:
    index: int = NO_INDEX
    tex_coord: int = 0
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class NormalTexture:
    index: int = NO_INDEX
    tex_coord: int = 0
    scale: float = 1.0
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class OcclusionTexture:
    index: int = NO_INDEX
    tex_coord: int = 0
    strength: float = 1.0
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class PBRMetallicRoughness:
    base_color_factor: List[float] = field(
        default_factory=lambda: [1.0, 1.0, 1.0, 1.0]
    )
    base_color_texture: Optional[TextureInfo] = None
    metallic_factor: float = 1.0
    roughness_factor: float = 1.0
    metallic_roughness_texture: Optional[TextureInfo] = None
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Material:
    pbr_metallic_roughness: Optional[PBRMetallicRoughness] = None
    normal_texture: Optional[NormalTexture] = None
    occlusion_texture: Optional[OcclusionTexture] = None
    emissive_texture: Optional[TextureInfo] = None
    emissive_factor: List[float] = field(
        default_factory=lambda: [0.0, 0.0, 0.0]
    )
    alpha_mode: str = AlphaMode.OPAQUE
    alpha_cutoff: float = 0.5
    double_sided: bool = False
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Texture:
    sampler: int = NO_INDEX
    source: int = NO_INDEX
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Sampler:
    mag_filter: Optional[int] = None
    min_filter: Optional[int] = None
    wrap_s: int = WrappingMode.REPEAT
    wrap_t: int = WrappingMode.REPEAT
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Image:
    """Image data referenced by URI or by buffer view (``mime_type`` then required)."""

    uri: str = ""
    mime_type: str = ""
    buffer_view: int = NO_INDEX
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None

    def is_embedded_resource(self) -> bool:
        return self.uri.startswith(IMAGE_DATA_URI_PREFIXES)

    def embedded_data(self) -> bytes:
        """Decode an inline PNG/JPEG data URI; empty when not embedded."""
        if not self.is_embedded_resource():
            return b""
        return decode_data_uri(self.uri)


@dataclass(slots=True)
class AnimationSampler:
    input: int = NO_INDEX
    interpolation: str = Interpolation.LINEAR
    output: int = NO_INDEX
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class ChannelTarget:
    node: int = NO_INDEX
    path: str = TRSProperty.TRANSLATION
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Channel:
    sampler: int = NO_INDEX
    target: ChannelTarget = field(default_factory=ChannelTarget)
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Animation:
    channels: List[Channel] = field(default_factory=list)
    samplers: List[AnimationSampler] = field(default_factory=list)
    name: str = ""
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


@dataclass(slots=True)
class Document:
    """Root aggregate of a glTF asset.

    ``scene`` defaults to ``NO_INDEX`` (no default scene), which is distinct
    from the wire format's implicit ``0``.
    """

    asset: Asset = field(default_factory=Asset)
    scene: int = NO_INDEX
    extensions_used: List[str] = field(default_factory=list)
    extensions_required: List[str] = field(default_factory=list)
    accessors: List[Accessor] = field(default_factory=list)
    animations: List[Animation] = field(default_factory=list)
    buffers: List[Buffer] = field(default_factory=list)
    buffer_views: List[BufferView] = field(default_factory=list)
    cameras: List[Camera] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)
    materials: List[Material] = field(default_factory=list)
    meshes: List[Mesh] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)
    samplers: List[Sampler] = field(default_factory=list)
    scenes: List[Scene] = field(default_factory=list)
    skins: List[Skin] = field(default_factory=list)
    textures: List[Texture] = field(default_factory=list)
    extensions: Optional[Dict[str, Any]] = None
    extras: Any = None


def encode_data_uri(
    data: bytes, mimetype: str = MIMETYPE_APPLICATION_OCTET
) -> str:
    return f"{mimetype},{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> bytes:
    _, sep, payload = uri.partition(",")
    if not sep:
        raise resource_error(E_RES_DATA_URI, "data URI has no payload")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise resource_error(
            E_RES_DATA_URI, f"invalid base64 payload: {e}"
        ) from e


__all__ = [
    "Asset",
    "Buffer",
    "BufferView",
    "SparseIndices",
    "SparseValues",
    "Sparse",
    "Accessor",
    "Scene",
    "Node",
    "Skin",
    "Orthographic",
    "Perspective",
    "Camera",
    "Primitive",
    "Mesh",
    "TextureInfo",
    "NormalTexture",
    "OcclusionTexture",
    "PBRMetallicRoughness",
    "Material",
    "Texture",
    "Sampler",
    "Image",
    "AnimationSampler",
    "ChannelTarget",
    "Channel",
    "Animation",
    "Document",
    "encode_data_uri",
    "decode_data_uri",
]
