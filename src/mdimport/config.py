"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from mdimport.core.render import is_known_preset


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDIMPORT_"


class Settings(BaseModel):
    app_name:      str = "mdimport"
    db_url:        str = "sqlite:///mdimport.db"
    root_id:       int = Field(default=1, ge=0, description="Container under which top-level pages are created")
    fallback_id:   Optional[int] = Field(default=None, ge=0, description="Container for pages whose parent is unresolved; None = root_id")
    hierarchy:     str = Field(default="flat", pattern="^(flat|rooted)$", description="flat or rooted parent convention")
    parser_config: str = Field(default="commonmark", description="MarkdownIt preset for rich text rendering")
    extensions:    list[str] = Field(default=[".md"], description="File suffixes treated as Markdown sources")
    log_level:     str = Field(default="WARNING", description="Root logger level")

    @field_validator("parser_config")
    @classmethod
    def _known_preset(cls, value: str) -> str:
        if not is_known_preset(value):
            raise ValueError(f"unknown markdown-it preset '{value}'")
        return value

    @field_validator("extensions", mode="before")
    @classmethod
    def _split_extensions(cls, value: Any) -> Any:
        """Accept a comma separated string (env var form) as well as a list."""
        if isinstance(value, str):
            value = [v.strip() for v in value.split(",") if v.strip()]
        return [v if v.startswith(".") else f".{v}" for v in value]

    @property
    def fallback_container(self) -> int:
        return self.root_id if self.fallback_id is None else self.fallback_id


def _file_values(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        return yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {path.name}: {e}") from e


def _env_values() -> dict[str, str]:
    """Settings fields set through MDIMPORT_<FIELD> variables."""
    values = {}
    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            values[name] = val
    return values


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Settings from config.yaml, then env vars, then non-None overrides; later sources win.

    Raises ValueError for unparsable YAML or values that fail validation.
    """
    data = _file_values(Path(CONFIG_FILE))
    data.update(_env_values())
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return Settings(**data)
