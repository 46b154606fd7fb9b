"""
Settings loader for Empower Journey.

Reads an optional YAML settings file, then applies environment overrides
(EMPOWER_DATA_DIR, EMPOWER_STORAGE_KEY, EMPOWER_LOG_LEVEL). A .env file in
the working directory is loaded first.
"""

import os
from pathlib import Path
from typing import Any, Optional

import pydantic
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from empowerjourney.classroom.store import DEFAULT_DATA_DIR, DEFAULT_STORAGE_KEY
from empowerjourney.errors import ConfigError


DEFAULT_SETTINGS_FILE = "settings.yaml"

ENV_OVERRIDES = {
    "EMPOWER_DATA_DIR": "data_dir",
    "EMPOWER_STORAGE_KEY": "storage_key",
    "EMPOWER_LOG_LEVEL": "log_level",
}


class Settings(BaseModel):
    data_dir: Path = DEFAULT_DATA_DIR
    db_filename: str = "journey.db"
    storage_key: str = DEFAULT_STORAGE_KEY
    log_level: str = Field(default="WARNING", pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$')

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_filename


def read_settings_file(file_path: Path) -> dict[str, Any]:
    """
    Parse a YAML settings file.

    Args:
        file_path: Path to the YAML file

    Returns:
        Dict of settings (empty if the file is empty)

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Settings file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def load_settings(
    path: Optional[Path] = None,
    dotenv_path: Optional[Path] = None,
) -> Settings:
    """
    Build settings from file and environment.

    Args:
        path: YAML settings file (default: settings.yaml if present)
        dotenv_path: .env file to load (default: search from the working directory)

    Returns:
        Settings with environment values taking precedence over the file

    Raises:
        ConfigError: missing or malformed settings file, or invalid values
    """
    load_dotenv(dotenv_path)

    settings_file = Path(path) if path is not None else Path(DEFAULT_SETTINGS_FILE)
    values: dict[str, Any] = {}
    if path is not None or settings_file.exists():
        try:
            data = read_settings_file(settings_file)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read settings file {settings_file}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {settings_file} must contain a mapping")
        values.update(data)

    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            values[field_name] = value

    if "log_level" in values:
        values["log_level"] = str(values["log_level"]).upper()
    try:
        return Settings(**values)
    except pydantic.ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
