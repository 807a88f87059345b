"""Path utilities (safe resolution)."""

from __future__ import annotations
from pathlib import Path

from ..errors import E_RES_TRAVERSAL, resource_error
from ..resolver import check_relative_uri

__all__ = ["safe_file_path"]


def safe_file_path(base_dir: Path, uri: str) -> Path:
    base_dir = base_dir.resolve()
    resolved = (base_dir / check_relative_uri(uri)).resolve()
    try:
        resolved.relative_to(base_dir)  # symlinks may still escape
    except ValueError as e:
        raise resource_error(
            E_RES_TRAVERSAL, f"'{uri}' resolves outside {base_dir}", uri=uri
        ) from e
    return resolved
