from __future__ import annotations
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_SETTINGS_FILE = Path(".pydepth.yaml")


class ConfigError(Exception):
    pass


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    over: int = Field(0, description="Report functions with depth > over only")
    top: Optional[int] = Field(None, ge=0, description="Report the N deepest functions only")
    avg: bool = Field(False, description="Print the average depth")
    format: Literal["text", "table", "json"] = "text"
    exclude: List[str] = Field(default_factory=list, description="Glob patterns skipped while walking")
    gitignore: bool = Field(True, description="Honour .gitignore of walked directories")


def load_settings(settings_path: Path | None) -> Settings:
    """Read settings from YAML. A missing default file yields the defaults."""
    p = settings_path or DEFAULT_SETTINGS_FILE
    if not p.exists():
        if settings_path is not None:
            raise ConfigError(f"config file not found: {p}")
        return Settings()
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read {p}: {e}") from e
    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: expected a mapping at top level")
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{p}: {e}") from e
