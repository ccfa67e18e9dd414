import os
import sys
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ValidationError

from .errors import ConfigError

_TRUTHY = {"1", "true", "yes", "on"}


def default_config_path() -> Path:
    r"""
    Returns the platform-appropriate default config path.

    Returns:
        Path: Default config path for the current platform
            - Linux/WSL/Termux: ~/.config/clipboard_manager/config.yml
            - Windows: %APPDATA%\clipboard_manager\config.yml
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if not appdata:
            return Path.home() / "AppData" / "Roaming" / "clipboard_manager" / "config.yml"
        return Path(appdata) / "clipboard_manager" / "config.yml"
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "clipboard_manager" / "config.yml"
    return Path.home() / ".config" / "clipboard_manager" / "config.yml"


def default_temporary_dir() -> Path:
    if os.name == "nt":
        return Path(os.environ.get("LOCALAPPDATA", str(Path.home() / "AppData" / "Local"))) / "clipboard_manager"
    return Path(os.environ.get("XDG_STATE_HOME", str(Path.home() / ".local" / "state"))) / "clipboard_manager"


def default_persistent_dir() -> Path:
    return Path.home() / ".clipboard_manager"


class Settings(BaseModel):
    temporary_dir: Path
    persistent_dir: Path
    default_clipboard: str = "0"
    always_persist: bool = False
    silent: bool = False
    use_safe_copy: bool = False
    conflict_policy: str = "ask"
    show_preview_chars: int = 250


def _env_flag(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip().lower() in _TRUTHY


def _env_overrides() -> dict:
    overrides = {}
    if os.environ.get("CLIPBOARD_TMPDIR"):
        overrides["temporary_dir"] = Path(os.environ["CLIPBOARD_TMPDIR"]).expanduser()
    if os.environ.get("CLIPBOARD_PERSISTDIR"):
        overrides["persistent_dir"] = Path(os.environ["CLIPBOARD_PERSISTDIR"]).expanduser()
    for env_name, key in (
        ("CLIPBOARD_ALWAYS_PERSIST", "always_persist"),
        ("CLIPBOARD_SILENT", "silent"),
        ("CLIPBOARD_SAFE_COPY", "use_safe_copy"),
    ):
        flag = _env_flag(env_name)
        if flag is not None:
            overrides[key] = flag
    if os.environ.get("CLIPBOARD_CONFLICT"):
        overrides["conflict_policy"] = os.environ["CLIPBOARD_CONFLICT"].strip().lower()
    return overrides


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """
    Loads settings from the YAML config file (if any) and the environment.

    An explicitly given config path must exist; the default one is optional.
    Environment variables take precedence over the file.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid
    """
    path = config_path if config_path else default_config_path()
    data = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Error parsing YAML file at {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid configuration in {path}: expected a mapping")
    elif config_path is not None:
        raise ConfigError(f"Configuration file not found at: {path}")

    data.setdefault("temporary_dir", default_temporary_dir())
    data.setdefault("persistent_dir", default_persistent_dir())
    data.update(_env_overrides())

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}")
