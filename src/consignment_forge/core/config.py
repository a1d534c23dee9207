# src/consignment_forge/core/config.py
"""Settings for consignment-forge.

Uses Pydantic for validation with a frozen (immutable) model.
Configuration precedence: overrides > YAML file > defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class ForgeSettings(BaseModel):
    """Locations and behaviour of the attack generator."""

    model_config = {"frozen": True, "extra": "forbid"}

    scratch_root: Path = Field(
        default=Path("tests/fixtures/temp"),
        description="Directory holding one scratch DOM per attack name",
    )
    output_dir: Path = Field(
        default=Path("tests/fixtures"),
        description="Directory receiving attack_<name><suffix> artifacts",
    )
    artifact_suffix: str = Field(
        default=".rgb",
        description="File extension for rebuilt consignments",
    )
    keep_scratch: bool = Field(
        default=True,
        description="Keep the exploded scratch tree after a successful attack build",
    )

    @field_validator("artifact_suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        """Require a leading dot and no path separators."""
        if not v.startswith(".") or "/" in v or "\\" in v:
            raise ValueError(f"artifact_suffix must look like '.ext', got {v!r}")
        return v

    def scratch_dir(self, attack: str) -> Path:
        return self.scratch_root / attack

    def artifact_path(self, attack: str) -> Path:
        return self.output_dir / f"attack_{attack}{self.artifact_suffix}"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dicts, with override taking precedence.

    Args:
        base: Base configuration dict.
        override: Override values (takes precedence).

    Returns:
        Merged configuration dict (new dict, does not mutate inputs).
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(
    *,
    config_file: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ForgeSettings:
    """Load settings with precedence handling.

    Precedence (highest to lowest):
    1. overrides - Direct overrides (CLI flags)
    2. config_file - User's YAML configuration file
    3. defaults - Built-in Pydantic defaults

    Raises:
        FileNotFoundError: If config_file does not exist.
        yaml.YAMLError: If YAML is malformed.
        ValueError: If the config file is not a YAML mapping.
        pydantic.ValidationError: If the final settings fail validation.
    """
    config_dict: dict[str, Any] = {}

    if config_file is not None:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        with config_file.open() as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {config_file} must be a YAML mapping, got {type(loaded).__name__}")
        config_dict = deep_merge(config_dict, loaded)

    if overrides is not None:
        config_dict = deep_merge(config_dict, overrides)

    return ForgeSettings(**config_dict)
