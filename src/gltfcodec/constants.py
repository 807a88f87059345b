"""Wire-format constants for glTF documents and GLB containers."""

from __future__ import annotations

from enum import Enum, IntEnum

# Binary container ---------------------------------------------------------
GLB_MAGIC = b"glTF"
GLB_VERSION = 2
GLB_HEADER_SIZE = 12
GLB_CHUNK_HEADER_SIZE = 8
CHUNK_TYPE_JSON = 0x4E4F534A  # b"JSON"
CHUNK_TYPE_BIN = 0x004E4942  # b"BIN\0"
CHUNK_ALIGNMENT = 4
# A BIN chunk may be padded past the buffer's byteLength up to alignment.
MAX_CHUNK_PADDING = CHUNK_ALIGNMENT - 1
# Largest single read() request issued against an untrusted stream.
READ_BLOCK_SIZE = 64 * 1024

# Embedded resources -------------------------------------------------------
MIMETYPE_APPLICATION_OCTET = "data:application/octet-stream;base64"
MIMETYPE_GLTF_BUFFER = "data:application/gltf-buffer;base64"
MIMETYPE_IMAGE_PNG = "data:image/png;base64"
MIMETYPE_IMAGE_JPG = "data:image/jpeg;base64"
BUFFER_DATA_URI_PREFIXES = (MIMETYPE_APPLICATION_OCTET, MIMETYPE_GLTF_BUFFER)
IMAGE_DATA_URI_PREFIXES = (MIMETYPE_IMAGE_PNG, MIMETYPE_IMAGE_JPG)

# File extensions ----------------------------------------------------------
EXTENSION_GLTF = ".gltf"
EXTENSION_GLB = ".glb"

# References ---------------------------------------------------------------
NO_INDEX = -1
MAX_UINT32 = 0xFFFFFFFF

# Quotas -------------------------------------------------------------------
DEFAULT_MAX_SINGLE_ALLOCATION = MAX_UINT32
DEFAULT_MAX_BUFFER_COUNT = 10

IDENTITY_MATRIX = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)  # fmt: skip


class ComponentType(IntEnum):
    BYTE = 5120
    UNSIGNED_BYTE = 5121
    SHORT = 5122
    UNSIGNED_SHORT = 5123
    UNSIGNED_INT = 5125
    FLOAT = 5126


class Target(IntEnum):
    ARRAY_BUFFER = 34962
    ELEMENT_ARRAY_BUFFER = 34963


class PrimitiveMode(IntEnum):
    POINTS = 0
    LINES = 1
    LINE_LOOP = 2
    LINE_STRIP = 3
    TRIANGLES = 4
    TRIANGLE_STRIP = 5
    TRIANGLE_FAN = 6


class MagFilter(IntEnum):
    NEAREST = 9728
    LINEAR = 9729


class MinFilter(IntEnum):
    NEAREST = 9728
    LINEAR = 9729
    NEAREST_MIPMAP_NEAREST = 9984
    LINEAR_MIPMAP_NEAREST = 9985
    NEAREST_MIPMAP_LINEAR = 9986
    LINEAR_MIPMAP_LINEAR = 9987


class WrappingMode(IntEnum):
    CLAMP_TO_EDGE = 33071
    MIRRORED_REPEAT = 33648
    REPEAT = 10497


class AccessorType(str, Enum):
    SCALAR = "SCALAR"
    VEC2 = "VEC2"
    VEC3 = "VEC3"
    VEC4 = "VEC4"
    MAT2 = "MAT2"
    MAT3 = "MAT3"
    MAT4 = "MAT4"


class AlphaMode(str, Enum):
    OPAQUE = "OPAQUE"
    MASK = "MASK"
    BLEND = "BLEND"


class Interpolation(str, Enum):
    LINEAR = "LINEAR"
    STEP = "STEP"
    CUBICSPLINE = "CUBICSPLINE"


class TRSProperty(str, Enum):
    TRANSLATION = "translation"
    ROTATION = "rotation"
    SCALE = "scale"
    WEIGHTS = "weights"


class CameraType(str, Enum):
    PERSPECTIVE = "perspective"
    ORTHOGRAPHIC = "orthographic"


__all__ = [
    "GLB_MAGIC",
    "GLB_VERSION",
    "GLB_HEADER_SIZE",
    "GLB_CHUNK_HEADER_SIZE",
    "CHUNK_TYPE_JSON",
    "CHUNK_TYPE_BIN",
    "CHUNK_ALIGNMENT",
    "MAX_CHUNK_PADDING",
    "READ_BLOCK_SIZE",
    "MIMETYPE_APPLICATION_OCTET",
    "MIMETYPE_GLTF_BUFFER",
    "MIMETYPE_IMAGE_PNG",
    "MIMETYPE_IMAGE_JPG",
    "BUFFER_DATA_URI_PREFIXES",
    "IMAGE_DATA_URI_PREFIXES",
    "EXTENSION_GLTF",
    "EXTENSION_GLB",
    "NO_INDEX",
    "MAX_UINT32",
    "DEFAULT_MAX_SINGLE_ALLOCATION",
    "DEFAULT_MAX_BUFFER_COUNT",
    "IDENTITY_MATRIX",
    "ComponentType",
    "Target",
    "PrimitiveMode",
    "MagFilter",
    "MinFilter",
    "WrappingMode",
    "AccessorType",
    "AlphaMode",
    "Interpolation",
    "TRSProperty",
    "CameraType",
]
