"""Error definitions for gltfcodec.

Every failure raised by the decoder/encoder is a :class:`GltfError` subclass
carrying a stable ``code`` so callers can tell failure conditions apart
without parsing messages.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Framing
E_FRAME_DUP_JSON = "E_FRAME_DUP_JSON"
E_FRAME_VERSION = "E_FRAME_VERSION"
E_FRAME_LENGTH = "E_FRAME_LENGTH"
E_FRAME_NO_JSON = "E_FRAME_NO_JSON"
E_FRAME_TRUNCATED = "E_FRAME_TRUNCATED"
# Schema
E_SCHEMA_JSON = "E_SCHEMA_JSON"
E_SCHEMA_TYPE = "E_SCHEMA_TYPE"
E_SCHEMA_MISSING_FIELD = "E_SCHEMA_MISSING_FIELD"
E_SCHEMA_INDEX = "E_SCHEMA_INDEX"
# Quota
E_QUOTA_ALLOCATION = "E_QUOTA_ALLOCATION"
E_QUOTA_BUFFER_COUNT = "E_QUOTA_BUFFER_COUNT"
# Resource
E_RES_ZERO_LENGTH = "E_RES_ZERO_LENGTH"
E_RES_NO_URI = "E_RES_NO_URI"
E_RES_TRAVERSAL = "E_RES_TRAVERSAL"
E_RES_READ = "E_RES_READ"
E_RES_WRITE = "E_RES_WRITE"
E_RES_SIZE_MISMATCH = "E_RES_SIZE_MISMATCH"
E_RES_DATA_URI = "E_RES_DATA_URI"
E_RES_NO_CHUNK = "E_RES_NO_CHUNK"
# Validation (surfaced from the validation layer)
E_VALIDATION = "E_VALIDATION"


@dataclass
class GltfError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class FramingError(GltfError):
    pass


class SchemaError(GltfError):
    pass


class QuotaExceeded(GltfError):
    pass


class ResourceError(GltfError):
    pass


class ValidationError(GltfError):
    pass


def schema_error(
    code: str, message: str, path: str = "", **context: Any
) -> SchemaError:
    ctx: Dict[str, Any] = {"path": path} if path else {}
    ctx.update(context)
    return SchemaError(code=code, message=message, context=ctx or None)


def resource_error(
    code: str, message: str, **context: Any
) -> ResourceError:
    return ResourceError(code=code, message=message, context=context or None)


def framing_error(code: str, message: str, **context: Any) -> FramingError:
    return FramingError(code=code, message=message, context=context or None)


__all__ = [
    "GltfError",
    "FramingError",
    "SchemaError",
    "QuotaExceeded",
    "ResourceError",
    "ValidationError",
    "schema_error",
    "resource_error",
    "framing_error",
    "E_FRAME_DUP_JSON",
    "E_FRAME_VERSION",
    "E_FRAME_LENGTH",
    "E_FRAME_NO_JSON",
    "E_FRAME_TRUNCATED",
    "E_SCHEMA_JSON",
    "E_SCHEMA_TYPE",
    "E_SCHEMA_MISSING_FIELD",
    "E_SCHEMA_INDEX",
    "E_QUOTA_ALLOCATION",
    "E_QUOTA_BUFFER_COUNT",
    "E_RES_ZERO_LENGTH",
    "E_RES_NO_URI",
    "E_RES_TRAVERSAL",
    "E_RES_READ",
    "E_RES_WRITE",
    "E_RES_SIZE_MISMATCH",
    "E_RES_DATA_URI",
    "E_RES_NO_CHUNK",
    "E_VALIDATION",
]
