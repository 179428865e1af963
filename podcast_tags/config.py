from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .versioned import DEFAULT_VERSION, HEADER_SIZE, SUPPORTED_VERSIONS


class CodecSettings(BaseModel):
    # None disables the limit; a corrupt header can then stall the download.
    max_tag_size: Optional[int] = Field(default=64 * 1024 * 1024, gt=HEADER_SIZE)
    chunk_size: int = Field(default=64 * 1024, gt=0)
    default_version: int = DEFAULT_VERSION

    @field_validator("default_version")
    @classmethod
    def _check_version(cls, value: int) -> int:
        if value not in SUPPORTED_VERSIONS:
            raise ValueError(f"default_version must be one of {SUPPORTED_VERSIONS}")
        return value


class ShowSettings(BaseModel):
    genre: Optional[str] = "Podcast"
    artist: Optional[str] = None


class Settings(BaseModel):
    codec: CodecSettings = CodecSettings()
    show: ShowSettings = ShowSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path] = None) -> Settings:
    path = find_config(explicit_path)
    if path is None:
        return Settings()
    return Settings.load(path)
