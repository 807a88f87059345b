"""Buffer payload resolution.

A buffer's bytes come from exactly one source, tried in this order:

1. an embedded ``data:`` URI carrying base64 bytes,
2. an external relative URI handed to the injected read capability,
3. the container's binary chunk (first buffer of a GLB only, no URI).

Each path checks the declared ``byteLength`` against the quota before the
payload is allocated and requires the materialized length to match it.
"""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass
from pathlib import PurePosixPath, PureWindowsPath
from typing import BinaryIO, Callable, Optional
from urllib.parse import unquote, urlsplit

from .constants import MAX_CHUNK_PADDING
from .container import read_at_most
from .errors import (
    E_RES_NO_CHUNK,
    E_RES_NO_URI,
    E_RES_READ,
    E_RES_SIZE_MISMATCH,
    E_RES_TRAVERSAL,
    E_RES_ZERO_LENGTH,
    GltfError,
    resource_error,
)
from .model import Buffer, decode_data_uri
from .quotas import QuotaEnforcer

__all__ = [
    "ReadHandler",
    "BufferResolver",
    "check_relative_uri",
]

ReadHandler = Callable[[str], BinaryIO]


def check_relative_uri(uri: str) -> str:
    """Return the percent-decoded path of ``uri`` if it stays inside its base.

    Rejects URIs with a scheme, absolute paths and any ``..`` segment.
    """
    if not uri:
        raise resource_error(E_RES_NO_URI, "buffer has no URI")
    if urlsplit(uri).scheme and not PureWindowsPath(uri).drive:
        raise resource_error(
            E_RES_TRAVERSAL, f"URI '{uri}' is not a relative reference", uri=uri
        )
    path = unquote(uri)
    posix = PurePosixPath(path.replace("\\", "/"))
    if (
        posix.is_absolute()
        or PureWindowsPath(path).drive
        or ".." in posix.parts
    ):
        raise resource_error(
            E_RES_TRAVERSAL, f"URI '{uri}' escapes the document directory", uri=uri
        )
    return path


def _check_length(buffer: Buffer, index: int, actual: int, source: str) -> None:
    if actual != buffer.byte_length:
        raise resource_error(
            E_RES_SIZE_MISMATCH,
            f"buffers[{index}]: {source} payload has {actual} bytes, "
            f"byteLength declares {buffer.byte_length}",
            index=index,
            declared=buffer.byte_length,
            actual=actual,
        )


@dataclass(frozen=True, slots=True)
class BufferResolver:
    enforcer: QuotaEnforcer
    read_handler: Optional[ReadHandler] = None

    def resolve(
        self,
        buffer: Buffer,
        index: int,
        binary_chunk: Optional[bytes] = None,
        in_container: bool = False,
    ) -> bytes:
        if buffer.byte_length == 0:
            raise resource_error(
                E_RES_ZERO_LENGTH,
                f"buffers[{index}]: byteLength must be greater than zero",
                index=index,
            )
        if buffer.is_embedded_resource():
            return self._resolve_embedded(buffer, index)
        if buffer.uri:
            return self._resolve_external(buffer, index)
        if in_container and index == 0:
            return self._resolve_container(buffer, index, binary_chunk)
        raise resource_error(
            E_RES_NO_URI,
            f"buffers[{index}]: no URI and no container chunk to bind to",
            index=index,
        )

    def _resolve_embedded(self, buffer: Buffer, index: int) -> bytes:
        what = f"buffers[{index}] (embedded)"
        self.enforcer.check_allocation(buffer.byte_length, what)
        _, _, payload = buffer.uri.partition(",")
        # base64 decodes to at most 3 bytes per 4 characters.
        self.enforcer.check_allocation(len(payload) * 3 // 4, what)
        data = decode_data_uri(buffer.uri)
        _check_length(buffer, index, len(data), "embedded")
        return data

    def _resolve_external(self, buffer: Buffer, index: int) -> bytes:
        check_relative_uri(buffer.uri)
        self.enforcer.check_allocation(
            buffer.byte_length, f"buffers[{index}] ({buffer.uri})"
        )
        if self.read_handler is None:
            raise resource_error(
                E_RES_READ,
                f"buffers[{index}]: no read capability for external URI '{buffer.uri}'",
                index=index,
                uri=buffer.uri,
            )
        try:
            stream = self.read_handler(buffer.uri)
            with closing(stream):
                # One extra byte tells an oversized resource from an exact one.
                data = read_at_most(stream, buffer.byte_length + 1)
        except GltfError:
            raise
        except Exception as e:
            raise resource_error(
                E_RES_READ,
                f"buffers[{index}]: cannot read '{buffer.uri}': {e}",
                index=index,
                uri=buffer.uri,
            ) from e
        _check_length(buffer, index, len(data), "external")
        return data

    def _resolve_container(
        self, buffer: Buffer, index: int, binary_chunk: Optional[bytes]
    ) -> bytes:
        if binary_chunk is None:
            raise resource_error(
                E_RES_NO_CHUNK,
                f"buffers[{index}]: container has no binary chunk",
                index=index,
            )
        self.enforcer.check_allocation(
            buffer.byte_length, f"buffers[{index}] (binary chunk)"
        )
        padding = len(binary_chunk) - buffer.byte_length
        if padding < 0 or padding > MAX_CHUNK_PADDING:
            _check_length(buffer, index, len(binary_chunk), "binary chunk")
        return binary_chunk[: buffer.byte_length]
