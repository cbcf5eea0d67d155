from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator
import yaml

from console_remover.exceptions import ConfigError

DEFAULT_INCLUDE: list[str] = ["**/*.js", "**/*.jsx", "**/*.ts", "**/*.tsx"]
DEFAULT_EXCLUDE: list[str] = ["**/node_modules/**"]


class WorkspaceConfig(BaseModel):
    """Which files a workspace run touches and how they are read."""

    include: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDE),
        description="Glob patterns, relative to the workspace root, of files to process",
    )
    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE),
        description="Glob patterns of files to skip even when included",
    )
    encoding: str = Field(default="utf-8", description="Text encoding of source files")

    @field_validator("include")
    @classmethod
    def _require_include(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("include must list at least one glob pattern")
        return value

    @field_validator("include", "exclude")
    @classmethod
    def _strip_patterns(cls, value: list[str]) -> list[str]:
        patterns = [p.strip() for p in value]
        if any(not p for p in patterns):
            raise ValueError("glob patterns must not be empty")
        return patterns


def load_config(path: str | Path | None = None, **overrides) -> WorkspaceConfig:
    """Build a ``WorkspaceConfig`` from an optional YAML file plus overrides.

    Overrides whose value is ``None`` or empty are ignored, so CLI options
    that were not given fall back to the file and then to the defaults.

    Raises:
        ConfigError: If the file cannot be read or does not validate
    """
    data: dict = {}
    if path is not None:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")

    data.update({k: v for k, v in overrides.items() if v})
    try:
        return WorkspaceConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
