"""Document encoding: the inverse of :mod:`gltfcodec.decoder`.

Buffer payload placement:

- embedded (``data:`` URI) buffers are re-encoded from their current bytes,
- external buffers keep their URI; their bytes go to the write capability,
- buffers without a URI become the binary chunk (first buffer, GLB output)
  or are embedded as data URIs.

The caller's document is never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import BinaryIO, Callable, List, Optional, Tuple

from .codec import dumps
from .container import write_container
from .errors import E_RES_SIZE_MISMATCH, E_RES_WRITE, GltfError, resource_error
from .model import Buffer, Document, encode_data_uri
from .resolver import check_relative_uri

__all__ = ["WriteHandler", "DocumentEncoder", "encode"]

WriteHandler = Callable[[str, bytes], None]


def _check_payload(buffer: Buffer, index: int) -> None:
    if len(buffer.data) != buffer.byte_length:
        raise resource_error(
            E_RES_SIZE_MISMATCH,
            f"buffers[{index}]: payload has {len(buffer.data)} bytes, "
            f"byteLength declares {buffer.byte_length}",
            index=index,
            declared=buffer.byte_length,
            actual=len(buffer.data),
        )


@dataclass(frozen=True, slots=True)
class DocumentEncoder:
    write_handler: Optional[WriteHandler] = None
    as_binary: bool = False
    # Inline external buffers as data URIs instead of writing them out.
    embed_external: bool = False

    def encode(self, doc: Document) -> bytes:
        buffers, binary = self._place_buffers(doc.buffers)
        json_bytes = dumps(replace(doc, buffers=buffers))
        if self.as_binary:
            return write_container(json_bytes, binary)
        return json_bytes

    def encode_to(self, doc: Document, stream: BinaryIO) -> int:
        data = self.encode(doc)
        stream.write(data)
        return len(data)

    def _place_buffers(
        self, buffers: List[Buffer]
    ) -> Tuple[List[Buffer], Optional[bytes]]:
        placed: List[Buffer] = []
        binary: Optional[bytes] = None
        for index, buffer in enumerate(buffers):
            external = bool(buffer.uri) and not buffer.is_embedded_resource()
            if external and not buffer.data:
                # Reference-only buffer: nothing to write.
                check_relative_uri(buffer.uri)
                placed.append(buffer)
                continue
            _check_payload(buffer, index)
            if external and not self.embed_external:
                self._write_external(buffer, index)
                placed.append(buffer)
            elif not buffer.uri and self.as_binary and index == 0:
                binary = buffer.data
                placed.append(buffer)
            else:
                placed.append(replace(buffer, uri=encode_data_uri(buffer.data)))
        return placed, binary

    def _write_external(self, buffer: Buffer, index: int) -> None:
        check_relative_uri(buffer.uri)
        if self.write_handler is None:
            return
        try:
            self.write_handler(buffer.uri, buffer.data)
        except GltfError:
            raise
        except Exception as e:
            raise resource_error(
                E_RES_WRITE,
                f"buffers[{index}]: cannot write '{buffer.uri}': {e}",
                index=index,
                uri=buffer.uri,
            ) from e


def encode(doc: Document, as_binary: bool = False) -> bytes:
    return DocumentEncoder(as_binary=as_binary).encode(doc)
