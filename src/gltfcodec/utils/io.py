"""Filesystem read/write capabilities rooted at a directory."""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .paths import safe_file_path

__all__ = ["FileSystemReader", "FileSystemWriter"]


@dataclass(frozen=True, slots=True)
class FileSystemReader:
    base_dir: Path

    def __call__(self, uri: str) -> BinaryIO:
        return safe_file_path(Path(self.base_dir), uri).open("rb")


@dataclass(frozen=True, slots=True)
class FileSystemWriter:
    base_dir: Path

    def __call__(self, uri: str, data: bytes) -> None:
        path = safe_file_path(Path(self.base_dir), uri)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
