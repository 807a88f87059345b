"""Document decoding pipeline.

detect framing -> split container chunks -> codec-decode the JSON ->
quota-check the buffer count -> resolve every buffer payload -> validate.

:meth:`DocumentDecoder.decode` runs every stage and the first failing stage
raises, so a partially built document never escapes it. ``parse``,
``resolve_buffers`` and ``validate`` expose the stages one by one for callers
that report progress between them.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field, replace
from typing import BinaryIO, Callable, Optional, Tuple, Union

from .codec import loads
from .container import Framed, read_framed
from .model import Buffer, Document
from .quotas import QuotaEnforcer, ReadQuotas
from .resolver import BufferResolver, ReadHandler

__all__ = ["Validator", "BufferCallback", "DocumentDecoder", "decode"]

Validator = Callable[[Document], None]
BufferCallback = Callable[[int, Buffer], None]
Source = Union[BinaryIO, bytes, bytearray, memoryview]


@dataclass(frozen=True, slots=True)
class DocumentDecoder:
    """Immutable decoder; safe to share between concurrent decode calls.

    ``validator`` is an optional hook for the semantic validation layer. It
    runs on the fully materialized document and reports problems by raising
    :class:`~gltfcodec.errors.ValidationError`.
    """

    read_handler: Optional[ReadHandler] = None
    quotas: ReadQuotas = field(default_factory=ReadQuotas)
    validator: Optional[Validator] = None

    def with_quotas(self, quotas: ReadQuotas) -> "DocumentDecoder":
        return replace(self, quotas=quotas)

    def decode(self, source: Source) -> Document:
        doc, _ = self.decode_framed(source)
        return doc

    def decode_framed(self, source: Source) -> Tuple[Document, Framed]:
        doc, framed = self.parse(source)
        self.resolve_buffers(doc, framed)
        self.validate(doc)
        return doc, framed

    def parse(self, source: Source) -> Tuple[Document, Framed]:
        """Framing and codec stages; buffer payloads are left empty."""
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        enforcer = QuotaEnforcer(self.quotas)
        framed = read_framed(source, enforcer)
        doc = loads(framed.json)
        enforcer.check_buffer_count(len(doc.buffers))
        return doc, framed

    def resolve_buffers(
        self,
        doc: Document,
        framed: Framed,
        on_buffer: Optional[BufferCallback] = None,
    ) -> None:
        resolver = BufferResolver(QuotaEnforcer(self.quotas), self.read_handler)
        for index, buffer in enumerate(doc.buffers):
            buffer.data = resolver.resolve(
                buffer, index, framed.binary, framed.is_container
            )
            if on_buffer is not None:
                on_buffer(index, buffer)

    def validate(self, doc: Document) -> None:
        if self.validator is not None:
            self.validator(doc)


def decode(
    source: Source,
    read_handler: Optional[ReadHandler] = None,
    quotas: Optional[ReadQuotas] = None,
) -> Document:
    decoder = DocumentDecoder(read_handler, quotas or ReadQuotas())
    return decoder.decode(source)
