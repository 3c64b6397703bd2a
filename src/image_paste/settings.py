# SPDX-License-Identifier: AGPL-3.0-or-later
"""Central configuration loader with YAML + environment support."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .sniff import DEFAULT_EXTENSION, is_supported_image_extension, normalize_ext

HASH_ALGORITHMS = ("sha256", "sha3_256", "blake2s")


class AssetSettings(BaseModel):
    """Layout of the asset directory and the files written into it."""

    suffix: str = "_assets"
    default_extension: str = DEFAULT_EXTENSION
    hash_algorithm: str = "sha256"

    @field_validator("suffix")
    @classmethod
    def _valid_suffix(cls, value: str) -> str:  # noqa: D401
        value = value.strip()
        if not value:
            raise ValueError("suffix must not be empty")
        if "/" in value or "\\" in value:
            raise ValueError("suffix must not contain path separators")
        return value

    @field_validator("default_extension")
    @classmethod
    def _supported_extension(cls, value: str) -> str:  # noqa: D401
        ext = normalize_ext(value)
        if not is_supported_image_extension(ext):
            raise ValueError(f"default_extension '{ext}' is not a supported image type")
        return ext

    @field_validator("hash_algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:  # noqa: D401
        name = value.strip().lower().replace("-", "_")
        if name not in HASH_ALGORITHMS:
            raise ValueError(f"hash_algorithm must be one of {', '.join(HASH_ALGORITHMS)}")
        return name


class PasteSettings(BaseModel):
    """Composite settings object loaded from YAML + environment variables."""

    assets: AssetSettings = Field(default_factory=AssetSettings)
    max_workers: int = Field(default=1, ge=1)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:  # noqa: D401
        return value.strip().upper() or "WARNING"


def _base_dir() -> Path:
    return Path(__file__).resolve().parents[2]


def _default_settings_path() -> Path:
    return _base_dir() / "configs" / "settings.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings YAML at {path} must contain a dictionary")
    return data


def _resolve_settings_path(explicit: Optional[str | Path]) -> Path:
    if explicit:
        return Path(explicit).expanduser()
    env_path = os.getenv("IMAGE_PASTE_SETTINGS_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return _default_settings_path()


def _resolve_env_path() -> Optional[Path]:
    candidate = os.getenv("IMAGE_PASTE_DOTENV")
    if candidate:
        return Path(candidate).expanduser()
    default = _base_dir() / ".env"
    return default if default.exists() else None


def _collect_env_overrides() -> Dict[str, Any]:
    prefix = "IMAGE_PASTE_"
    reserved = {"SETTINGS_PATH", "DOTENV"}
    overrides: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(prefix) or key[len(prefix) :] in reserved:
            continue
        parts = key[len(prefix) :].split("__")
        cursor = overrides
        for idx, part in enumerate(parts):
            normalized = part.lower()
            if idx == len(parts) - 1:
                cursor[normalized] = value
            else:
                cursor = cursor.setdefault(normalized, {})  # type: ignore[assignment]
    return overrides


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@lru_cache(maxsize=1)
def get_settings(path: Path | None = None) -> PasteSettings:
    """Load the global paste settings, caching the resulting object."""

    env_path = _resolve_env_path()
    if env_path is not None:
        load_dotenv(dotenv_path=env_path, override=False)
    data = _read_yaml(_resolve_settings_path(path))
    merged = _deep_merge(data, _collect_env_overrides())
    return PasteSettings.model_validate(merged)


def reset_settings_cache() -> None:
    """Clear the cached settings instance (useful for tests)."""

    get_settings.cache_clear()  # type: ignore[attr-defined]


__all__ = [
    "AssetSettings",
    "HASH_ALGORITHMS",
    "PasteSettings",
    "get_settings",
    "reset_settings_cache",
]
