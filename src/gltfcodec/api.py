"""High-level file API for gltfcodec.

Thin wrappers binding the decoder/encoder to the filesystem, with reporter
tasks and logging around each step.
"""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import EXTENSION_GLB
from .container import Framed
from .decoder import DocumentDecoder
from .encoder import DocumentEncoder
from .logging import get_logger
from .model import Document
from .quotas import ReadQuotas
from .reporting import task
from .utils.io import FileSystemReader, FileSystemWriter

__all__ = [
    "open_document",
    "open_document_framed",
    "save_document",
    "inspect_document",
]

# Top-level collections reported by inspect_document, in wire order.
_COLLECTIONS = (
    "accessors",
    "animations",
    "buffers",
    "buffer_views",
    "cameras",
    "images",
    "materials",
    "meshes",
    "nodes",
    "samplers",
    "scenes",
    "skins",
    "textures",
)


def open_document_framed(
    path: str | Path, quotas: Optional[ReadQuotas] = None
) -> tuple[Document, Framed]:
    p = Path(path)
    logger = get_logger()
    decoder = DocumentDecoder(
        read_handler=FileSystemReader(p.parent),
        quotas=quotas or ReadQuotas(),
    )
    with task("document.parse", f"Parse {p.name}") as rep:
        with p.open("rb") as f:
            doc, framed = decoder.parse(f)
        rep.update(
            "document.parse", chunks=len(framed.chunks), bytes=len(framed.json)
        )
        rep.verbose(f"{p.name}: container={framed.is_container}")
    if doc.buffers:
        with task(
            "document.buffers", "Resolve buffers", total=len(doc.buffers)
        ) as rep:
            decoder.resolve_buffers(
                doc,
                framed,
                on_buffer=lambda i, _b: rep.advance(
                    "document.buffers", current_item=f"buffers[{i}]"
                ),
            )
            rep.update(
                "document.buffers",
                buffers=len(doc.buffers),
                bytes=sum(len(b.data) for b in doc.buffers),
            )
    decoder.validate(doc)
    logger.info(
        "Decoded %s: buffers=%d nodes=%d meshes=%d",
        p.name,
        len(doc.buffers),
        len(doc.nodes),
        len(doc.meshes),
    )
    return doc, framed


def open_document(
    path: str | Path, quotas: Optional[ReadQuotas] = None
) -> Document:
    """Decode a ``.gltf``/``.glb`` file.

    External buffers are resolved relative to the file's directory.
    """
    doc, _ = open_document_framed(path, quotas)
    return doc


def save_document(
    doc: Document,
    path: str | Path,
    as_binary: Optional[bool] = None,
    embed_external: bool = False,
) -> int:
    """Encode ``doc`` to ``path`` and return the number of bytes written.

    Output is a GLB container when the suffix is ``.glb`` unless ``as_binary``
    says otherwise. External buffers are written next to the file.
    """
    p = Path(path)
    if as_binary is None:
        as_binary = p.suffix.lower() == EXTENSION_GLB
    encoder = DocumentEncoder(
        write_handler=FileSystemWriter(p.parent),
        as_binary=as_binary,
        embed_external=embed_external,
    )
    with task("document.save", f"Encode {p.name}") as rep:
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("wb") as f:
            written = encoder.encode_to(doc, f)
        rep.update("document.save", buffers=len(doc.buffers), bytes=written)
        rep.verbose(f"{p.name}: {written} bytes (binary={as_binary})")
    get_logger().info("Wrote %s (%d bytes)", p.name, written)
    return written


def _buffer_source(index: int, uri: str, embedded: bool, framed: Optional[Framed]) -> str:
    if embedded:
        return "embedded"
    if uri:
        return "external"
    if framed is not None and framed.is_container and index == 0:
        return "binary-chunk"
    return "none"


def inspect_document(
    doc: Document, framed: Optional[Framed] = None
) -> Dict[str, Any]:
    """Return a JSON-serialisable summary of ``doc``."""
    counts = {name: len(getattr(doc, name)) for name in _COLLECTIONS}
    buffers = []
    for index, buffer in enumerate(doc.buffers):
        embedded = buffer.is_embedded_resource()
        buffers.append(
            {
                "index": index,
                "name": buffer.name,
                "byte_length": buffer.byte_length,
                "loaded": len(buffer.data),
                "source": _buffer_source(index, buffer.uri, embedded, framed),
                "uri": "" if embedded else buffer.uri,
            }
        )
    asset = {
        f.name: getattr(doc.asset, f.name)
        for f in fields(doc.asset)
        if f.name not in ("extensions", "extras")
    }
    summary: Dict[str, Any] = {
        "asset": asset,
        "scene": doc.scene,
        "counts": counts,
        "buffers": buffers,
        "extensions_used": list(doc.extensions_used),
        "extensions_required": list(doc.extensions_required),
    }
    if framed is not None:
        summary["container"] = {
            "is_container": framed.is_container,
            "version": framed.version,
            "total_length": framed.total_length,
            "chunks": [{"type": c.tag, "length": c.length} for c in framed.chunks],
        }
    return summary
