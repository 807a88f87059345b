"""Quota configuration loading (JSON/YAML files, environment overrides)."""

from __future__ import annotations
from pathlib import Path
from typing import Any, Mapping, Optional
import json
import os

import yaml

from .quotas import UNLIMITED, ReadQuotas

__all__ = ["load_quotas", "quotas_from_mapping", "quotas_from_env"]

ENV_MAX_SINGLE_ALLOCATION = "GLTFCODEC_MAX_SINGLE_ALLOCATION"
ENV_MAX_BUFFER_COUNT = "GLTFCODEC_MAX_BUFFER_COUNT"

_KEYS = ("max_single_allocation", "max_buffer_count")


def _parse_bound(name: str, raw: Any) -> Optional[int]:
    if raw is None:
        return UNLIMITED
    if isinstance(raw, str):
        text = raw.strip().lower()
        if text in ("unlimited", "none", "null"):
            return UNLIMITED
        try:
            return int(text)
        except ValueError as e:
            raise ValueError(f"{name}: invalid bound {raw!r}") from e
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{name}: invalid bound {raw!r}")
    return raw


def quotas_from_mapping(
    data: Mapping[str, Any], base: Optional[ReadQuotas] = None
) -> ReadQuotas:
    base = base or ReadQuotas()
    unknown = set(data) - set(_KEYS)
    if unknown:
        raise ValueError(f"Unknown quota keys: {sorted(unknown)}")
    values = {k: getattr(base, k) for k in _KEYS}
    for key in _KEYS:
        if key in data:
            values[key] = _parse_bound(key, data[key])
    return ReadQuotas(**values)


def load_quotas(path: str | Path, base: Optional[ReadQuotas] = None) -> ReadQuotas:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        try:
            data: Any = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"{p}: invalid YAML: {e}") from e
    else:
        data = json.loads(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Root of quota configuration must be an object")
    # Accept either a bare mapping or one nested under "quotas".
    if isinstance(data.get("quotas"), dict):
        data = data["quotas"]
    return quotas_from_mapping(data, base)


def quotas_from_env(
    base: Optional[ReadQuotas] = None, environ: Optional[Mapping[str, str]] = None
) -> ReadQuotas:
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    if ENV_MAX_SINGLE_ALLOCATION in env:
        overrides["max_single_allocation"] = env[ENV_MAX_SINGLE_ALLOCATION]
    if ENV_MAX_BUFFER_COUNT in env:
        overrides["max_buffer_count"] = env[ENV_MAX_BUFFER_COUNT]
    return quotas_from_mapping(overrides, base)
