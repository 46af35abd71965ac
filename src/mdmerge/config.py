"""Merge settings schema and .mdmerge.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = ".mdmerge.yaml"
ENV_PREFIX = "MDMERGE_"


class Settings(BaseModel):
    preference:              str   = Field(default="destination", pattern="^(template|destination)$", description="Side that wins for matched blocks")
    add_template_only_nodes: bool  = Field(default=False, description="Carry over blocks found only in the template")
    freeze_token:            str   = Field(default="merge", min_length=1, description="Token in <!-- token:freeze --> markers")
    parser_preset:           str   = Field(default="gfm-like", description="MarkdownIt parser preset name")
    fuzzy_tables:            bool  = Field(default=False, description="Pair unmatched tables by header similarity")
    table_match_threshold:   float = Field(default=0.5, ge=0.0, le=1.0, description="Minimum similarity for fuzzy table pairs")


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {path.name}: expected a mapping, got {type(data).__name__}")
    return data


def load_config(overrides: dict[str, Any] = None, path: Optional[Path] = None) -> Settings:
    """Load Settings from a config file, then MDMERGE_<FIELD> env vars, then non-None CLI overrides.

    The config file is `path` when given (it must exist), else .mdmerge.yaml
    in the working directory if present.
    """
    data: dict[str, Any] = {}
    if path is not None:
        if not path.is_file():
            raise ValueError(f"Config file not found: {path}")
        data = _read_config_file(path)
    elif Path(CONFIG_FILE).exists():
        data = _read_config_file(Path(CONFIG_FILE))

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
