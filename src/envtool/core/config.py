"""
Configuration loading for envtool.

Settings are layered, later sources winning:
1. Built-in defaults
2. YAML config file (--config, or ~/.envtool.yaml)
3. ENVTOOL_* environment variables
4. Command-line flags (applied by the CLI)

Example ~/.envtool.yaml:

    env-file: .env.local
    init:
      user: true
      zsh: true
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml


CONFIG_NAME = ".envtool"
CONFIG_EXTENSIONS = (".yaml", ".yml")
ENV_PREFIX = "ENVTOOL_"

DEFAULT_ENV_FILE = ".env"
DEFAULT_BASHRC_PATH = "/etc/bash.bashrc"
DEFAULT_ZSHRC_PATH = "/etc/zsh/zshrc"

_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Raised when a config file is missing, unreadable or malformed."""


@dataclass
class InitSettings:
    """Defaults for the `init` command."""
    bashrc: str = DEFAULT_BASHRC_PATH
    zshrc: str = DEFAULT_ZSHRC_PATH
    user: bool = False
    bash: bool = False
    zsh: bool = False


@dataclass
class Settings:
    """Resolved settings. `config_file` is the YAML file read, if any."""
    env_file: str = DEFAULT_ENV_FILE
    init: InitSettings = field(default_factory=InitSettings)
    config_file: Optional[str] = None


def env_bool(name: str, default: bool, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Read a boolean flag from the environment."""
    environ = os.environ if environ is None else environ
    value = environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in _FALSE_VALUES


def find_config_file(home: Optional[Path] = None) -> Optional[Path]:
    """
    Locate the default config file in the home directory.

    Args:
        home: Home directory (defaults to Path.home())

    Returns:
        Path to ~/.envtool.yaml or ~/.envtool.yml, or None
    """
    if home is None:
        try:
            home = Path.home()
        except RuntimeError:
            return None

    for ext in CONFIG_EXTENSIONS:
        candidate = home / f"{CONFIG_NAME}{ext}"
        if candidate.is_file():
            return candidate
    return None


def _expect(value: Any, kind: type, key: str) -> Any:
    if not isinstance(value, kind):
        raise ConfigError(f"'{key}' must be a {kind.__name__}, got {type(value).__name__}")
    return value


def _path_value(value: Any, key: str) -> str:
    # YAML reads bare numbers as ints; paths are always strings here
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    return os.path.expanduser(_expect(value, str, key))


def _apply_yaml(settings: Settings, data: Mapping[str, Any]) -> None:
    if "env-file" in data:
        settings.env_file = _path_value(data["env-file"], "env-file")

    init = data.get("init")
    if init is None:
        return
    _expect(init, dict, "init")

    if "bashrc" in init:
        settings.init.bashrc = _path_value(init["bashrc"], "init.bashrc")
    if "zshrc" in init:
        settings.init.zshrc = _path_value(init["zshrc"], "init.zshrc")
    for flag in ("user", "bash", "zsh"):
        if flag in init:
            setattr(settings.init, flag, _expect(init[flag], bool, f"init.{flag}"))


def load_config_file(path: Path) -> Mapping[str, Any]:
    """
    Read a YAML config file.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    return data


def _apply_environ(settings: Settings, environ: Mapping[str, str]) -> None:
    env_file = environ.get(f"{ENV_PREFIX}ENV_FILE")
    if env_file:
        settings.env_file = env_file

    bashrc = environ.get(f"{ENV_PREFIX}INIT_BASHRC")
    if bashrc:
        settings.init.bashrc = bashrc
    zshrc = environ.get(f"{ENV_PREFIX}INIT_ZSHRC")
    if zshrc:
        settings.init.zshrc = zshrc

    for flag in ("user", "bash", "zsh"):
        name = f"{ENV_PREFIX}INIT_{flag.upper()}"
        setattr(settings.init, flag, env_bool(name, getattr(settings.init, flag), environ))


def environ_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Defaults with ENVTOOL_* overrides applied, ignoring any config file."""
    settings = Settings()
    _apply_environ(settings, os.environ if environ is None else environ)
    return settings


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Settings:
    """
    Resolve settings from defaults, config file and environment.

    Args:
        config_path: Explicit config file; must exist when given
        environ: Environment mapping (defaults to os.environ)
        home: Home directory searched for the default config file

    Returns:
        Settings instance

    Raises:
        ConfigError: If the config file is missing (when explicit) or malformed
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    if config_path:
        path = Path(config_path).expanduser()
        if not path.is_file():
            raise ConfigError(f"config file not found: {config_path}")
    else:
        path = find_config_file(home)

    if path is not None:
        _apply_yaml(settings, load_config_file(path))
        settings.config_file = str(path)

    _apply_environ(settings, environ)
    return settings
