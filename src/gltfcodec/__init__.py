"""gltfcodec: glTF 2.0 / GLB document codec."""

from .api import inspect_document, open_document, save_document
from .codec import decode_entity, dumps, encode_entity, loads
from .container import Framed, read_framed, write_container
from .decoder import DocumentDecoder, decode
from .encoder import DocumentEncoder, encode
from .errors import (
    FramingError,
    GltfError,
    QuotaExceeded,
    ResourceError,
    SchemaError,
    ValidationError,
)
from .model import Document
from .quotas import UNLIMITED, ReadQuotas
from .utils.io import FileSystemReader, FileSystemWriter

__version__ = "0.1.0"

__all__ = [
    "Document",
    "DocumentDecoder",
    "DocumentEncoder",
    "decode",
    "encode",
    "decode_entity",
    "encode_entity",
    "loads",
    "dumps",
    "Framed",
    "read_framed",
    "write_container",
    "ReadQuotas",
    "UNLIMITED",
    "GltfError",
    "FramingError",
    "SchemaError",
    "QuotaExceeded",
    "ResourceError",
    "ValidationError",
    "FileSystemReader",
    "FileSystemWriter",
    "open_document",
    "save_document",
    "inspect_document",
]
