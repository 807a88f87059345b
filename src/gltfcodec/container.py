"""GLB container framing.

Public functions:
- read_framed(stream, enforcer) -> Framed
- write_container(json_bytes, binary) -> bytes

The reader only ever reads byte counts promised by header or chunk-length
fields it has already checked against the declared total length and the
allocation quota.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional
import struct

from .constants import (
    CHUNK_ALIGNMENT,
    CHUNK_TYPE_BIN,
    CHUNK_TYPE_JSON,
    GLB_CHUNK_HEADER_SIZE,
    GLB_HEADER_SIZE,
    GLB_MAGIC,
    GLB_VERSION,
    MAX_UINT32,
    READ_BLOCK_SIZE,
)
from .errors import (
    E_FRAME_DUP_JSON,
    E_FRAME_LENGTH,
    E_FRAME_NO_JSON,
    E_FRAME_TRUNCATED,
    E_FRAME_VERSION,
    framing_error,
)
from .quotas import QuotaEnforcer

__all__ = [
    "ChunkInfo",
    "Framed",
    "is_container",
    "read_at_most",
    "read_framed",
    "write_container",
]


@dataclass(frozen=True, slots=True)
class ChunkInfo:
    type: int
    length: int

    @property
    def tag(self) -> str:
        return struct.pack("<I", self.type).rstrip(b"\x00").decode(
            "ascii", errors="replace"
        )


@dataclass(frozen=True, slots=True)
class Framed:
    """Result of framing detection: the JSON text and the optional binary chunk."""

    json: bytes
    binary: Optional[bytes] = None
    is_container: bool = False
    version: int = 0
    total_length: int = 0
    chunks: List[ChunkInfo] = field(default_factory=list)


def is_container(head: bytes) -> bool:
    return head[: len(GLB_MAGIC)] == GLB_MAGIC


def read_at_most(stream: BinaryIO, limit: int) -> bytes:
    """Read up to ``limit`` bytes, requesting at most one block per ``read``."""
    buf = bytearray()
    while len(buf) < limit:
        part = stream.read(min(limit - len(buf), READ_BLOCK_SIZE))
        if not part:
            break
        buf += part
    return bytes(buf)


def _read_exact(stream: BinaryIO, size: int, label: str) -> bytes:
    data = read_at_most(stream, size)
    if len(data) < size:
        raise framing_error(
            E_FRAME_TRUNCATED,
            f"stream ended while reading {label}: got {len(data)} of {size} bytes",
            label=label,
            expected=size,
            received=len(data),
        )
    return data


def _skip_exact(stream: BinaryIO, size: int, label: str) -> None:
    remaining = size
    while remaining:
        step = min(remaining, READ_BLOCK_SIZE)
        _read_exact(stream, step, label)
        remaining -= step


def _read_plain(head: bytes, stream: BinaryIO, enforcer: QuotaEnforcer) -> bytes:
    limit = enforcer.quotas.max_single_allocation
    if limit is None:
        return head + stream.read()
    # One byte over the limit is enough to know the document is too large.
    data = head + read_at_most(stream, max(limit - len(head), 0) + 1)
    enforcer.check_allocation(len(data), "JSON document")
    return data


def read_framed(stream: BinaryIO, enforcer: QuotaEnforcer) -> Framed:
    """Detect the representation of ``stream`` and split it into chunks."""
    head = stream.read(len(GLB_MAGIC))
    if not is_container(head):
        return Framed(json=_read_plain(head, stream, enforcer))

    version, total_length = struct.unpack(
        "<II", _read_exact(stream, GLB_HEADER_SIZE - len(GLB_MAGIC), "header")
    )
    if version != GLB_VERSION:
        raise framing_error(
            E_FRAME_VERSION,
            f"unsupported container version {version}, expected {GLB_VERSION}",
            version=version,
        )
    consumed = GLB_HEADER_SIZE
    chunks: List[ChunkInfo] = []
    json_bytes: Optional[bytes] = None
    binary: Optional[bytes] = None
    while consumed < total_length or json_bytes is None:
        label = f"chunk[{len(chunks)}]"
        length, ctype = struct.unpack(
            "<II", _read_exact(stream, GLB_CHUNK_HEADER_SIZE, f"{label} header")
        )
        if json_bytes is None and ctype != CHUNK_TYPE_JSON:
            raise framing_error(
                E_FRAME_NO_JSON,
                f"first chunk must be JSON, found type 0x{ctype:08X}",
                chunk_type=ctype,
            )
        if json_bytes is not None and ctype == CHUNK_TYPE_JSON:
            raise framing_error(
                E_FRAME_DUP_JSON,
                "container holds more than one JSON chunk",
                chunk_type=ctype,
            )
        consumed += GLB_CHUNK_HEADER_SIZE
        if consumed + length > total_length:
            raise framing_error(
                E_FRAME_LENGTH,
                f"{label} of {length} bytes overruns declared total length {total_length}",
                total_length=total_length,
                chunk_length=length,
            )
        chunks.append(ChunkInfo(ctype, length))
        if json_bytes is None:
            enforcer.check_allocation(length, "JSON chunk")
            json_bytes = _read_exact(stream, length, f"{label} payload")
        elif binary is None:
            enforcer.check_allocation(length, "binary chunk")
            binary = _read_exact(stream, length, f"{label} payload")
        else:
            _skip_exact(stream, length, f"{label} payload")
        consumed += length
        if consumed < total_length and total_length - consumed < GLB_CHUNK_HEADER_SIZE:
            raise framing_error(
                E_FRAME_LENGTH,
                f"{total_length - consumed} trailing bytes cannot hold a chunk",
                total_length=total_length,
                consumed=consumed,
            )
    return Framed(
        json=json_bytes,
        binary=binary,
        is_container=True,
        version=version,
        total_length=total_length,
        chunks=chunks,
    )


def _pad(data: bytes, fill: bytes) -> bytes:
    pad = (CHUNK_ALIGNMENT - (len(data) % CHUNK_ALIGNMENT)) % CHUNK_ALIGNMENT
    return data + fill * pad


def write_container(json_bytes: bytes, binary: Optional[bytes] = None) -> bytes:
    """Frame a JSON chunk and an optional binary chunk into a GLB container."""
    json_chunk = _pad(json_bytes, b" ")
    parts = [struct.pack("<II", len(json_chunk), CHUNK_TYPE_JSON), json_chunk]
    if binary is not None:
        bin_chunk = _pad(binary, b"\x00")
        parts += [struct.pack("<II", len(bin_chunk), CHUNK_TYPE_BIN), bin_chunk]
    body = b"".join(parts)
    total_length = GLB_HEADER_SIZE + len(body)
    if total_length > MAX_UINT32:
        raise framing_error(
            E_FRAME_LENGTH,
            f"container of {total_length} bytes exceeds the 32-bit length field",
            total_length=total_length,
        )
    return struct.pack("<4sII", GLB_MAGIC, GLB_VERSION, total_length) + body
