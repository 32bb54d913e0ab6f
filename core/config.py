"""
Configuration Management - YAML-based configuration with environment overrides
=============================================================================

This module handles all configuration aspects including:
- Loading from YAML files
- Environment variable overrides
- Default values
- Configuration validation
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, List
from dataclasses import dataclass, field, asdict

from .exceptions import ConfigError


DEFAULT_FALLBACK_REPLY = (
    "I'm here to help. Please describe your medical question and "
    "I'll provide expert guidance."
)


@dataclass
class AssistantConfig:
    """
    Response selector configuration.

    Labels attached to every chat reply, the reply used when the
    selector fails unexpectedly, and an optional rules file that
    replaces the built-in rule table.
    """
    provider: str = "MediAI Expert System"
    fallback_provider: str = "Medical Assistant"
    confidence: str = "high"
    fallback_reply: str = DEFAULT_FALLBACK_REPLY

    # Empty = <config_dir>/rules.yaml if present, else built-in rules
    rules_file: str = ""

    def validate(self) -> None:
        """Validate assistant configuration."""
        if not self.provider.strip():
            raise ConfigError("assistant.provider must not be empty")

        if not self.fallback_reply.strip():
            raise ConfigError("assistant.fallback_reply must not be empty")


@dataclass
class StoreConfig:
    """In-memory store configuration."""
    seed_sample_patients: bool = True

    def validate(self) -> None:
        """Nothing to check yet; kept for a uniform section interface."""


@dataclass
class UIConfig:
    """
    User interface configuration.

    Controls settings for both the terminal chat and the web API.
    """
    # Web settings
    web_host: str = "127.0.0.1"
    web_port: int = 8080
    web_debug: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # Terminal UI settings
    tui_theme: str = "dark"

    def validate(self) -> None:
        """Validate UI configuration."""
        if self.web_port < 1 or self.web_port > 65535:
            raise ConfigError(f"Invalid web port: {self.web_port}")

        if self.tui_theme not in ("dark", "light"):
            raise ConfigError(f"Invalid TUI theme: {self.tui_theme}")


@dataclass
class Config:
    """
    Main configuration container.

    Aggregates all configuration sections into a single object
    and provides methods for validating and exporting.
    """
    app_name: str = "MediAI Pro"
    version: str = "1.0.0"
    debug: bool = False

    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # Paths (set at runtime)
    config_dir: str = ""
    data_dir: str = ""
    log_dir: str = ""

    def validate(self) -> None:
        """
        Validate all configuration sections.

        Raises:
            ConfigError: If any configuration section is invalid
        """
        self.assistant.validate()
        self.store.validate()
        self.ui.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "app_name": self.app_name,
            "version": self.version,
            "debug": self.debug,
            "assistant": asdict(self.assistant),
            "store": asdict(self.store),
            "ui": asdict(self.ui),
        }

    @property
    def rules_path(self) -> Optional[Path]:
        """Rules file to load, or None to use the built-in table."""
        if self.assistant.rules_file:
            return Path(self.assistant.rules_file)
        if self.config_dir:
            candidate = Path(self.config_dir) / "rules.yaml"
            if candidate.exists():
                return candidate
        return None


def get_default_config_dir() -> Path:
    """
    Get the default configuration directory path.

    Returns:
        Path to the configuration directory
    """
    if "MEDIAI_CONFIG_DIR" in os.environ:
        return Path(os.environ["MEDIAI_CONFIG_DIR"])

    if "XDG_CONFIG_HOME" in os.environ:
        return Path(os.environ["XDG_CONFIG_HOME"]) / "mediai-pro"

    return Path.home() / ".config" / "mediai-pro"


def get_default_data_dir() -> Path:
    """
    Get the default data directory path.

    Returns:
        Path to the data directory
    """
    if "MEDIAI_DATA_DIR" in os.environ:
        return Path(os.environ["MEDIAI_DATA_DIR"])

    if "XDG_DATA_HOME" in os.environ:
        return Path(os.environ["XDG_DATA_HOME"]) / "mediai-pro"

    return Path.home() / ".local" / "share" / "mediai-pro"


def load_config(config_path: Optional[str] = None, load_env: bool = True) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    This function loads configuration in the following order:
    1. Default values from dataclass
    2. Values from YAML file
    3. Environment variable overrides

    Args:
        config_path: Path to configuration file (optional)
        load_env: Whether to load environment variable overrides

    Returns:
        Config object with loaded values

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    config = Config()

    config.config_dir = str(get_default_config_dir())
    config.data_dir = str(get_default_data_dir())
    config.log_dir = str(Path(config.data_dir) / "logs")

    if load_env:
        _load_env_file(Path(config.config_dir) / ".env")

    if config_path:
        yaml_path = Path(config_path)
    else:
        yaml_path = Path(config.config_dir) / "config.yaml"

    if yaml_path.exists():
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file: {e}", {"path": str(yaml_path)})
        except IOError as e:
            raise ConfigError(f"Failed to read config file: {e}", {"path": str(yaml_path)})

        if not isinstance(yaml_config, dict):
            raise ConfigError("Config file must contain a mapping", {"path": str(yaml_path)})

        _apply_yaml_config(config, yaml_config)

    if load_env:
        _apply_env_overrides(config)

    config.validate()

    return config


def _load_env_file(env_file: Path) -> None:
    """Export KEY=VALUE lines from a .env file without overriding the environment."""
    if not env_file.exists():
        return

    try:
        with open(env_file, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except IOError as e:
        raise ConfigError(f"Failed to read env file: {e}", {"path": str(env_file)})

    for line in lines:
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, value = line.split("=", 1)
            key = key.strip()
            if key and value and key not in os.environ:
                os.environ[key] = value.strip()


def _apply_yaml_config(config: Config, yaml_config: Dict[str, Any]) -> None:
    """
    Apply YAML configuration values to Config object.

    Unknown keys are ignored.

    Args:
        config: Config object to update
        yaml_config: Dictionary of configuration values from YAML
    """
    for key in ("app_name", "version", "debug"):
        if key in yaml_config:
            setattr(config, key, yaml_config[key])

    for section_name in ("assistant", "store", "ui"):
        section_cfg = yaml_config.get(section_name) or {}
        if not isinstance(section_cfg, dict):
            raise ConfigError(f"Config section '{section_name}' must be a mapping")

        section = getattr(config, section_name)
        for key, value in section_cfg.items():
            if hasattr(section, key):
                setattr(section, key, value)


def _apply_env_overrides(config: Config) -> None:
    """
    Apply environment variable overrides to Config object.

    Environment variables follow the pattern: MEDIAI_SECTION_KEY
    For example: MEDIAI_UI_WEB_PORT, MEDIAI_ASSISTANT_RULES_FILE

    Args:
        config: Config object to update
    """
    env_mappings = {
        "MEDIAI_DEBUG": (None, "debug", bool),

        # Assistant settings
        "MEDIAI_ASSISTANT_PROVIDER": ("assistant", "provider"),
        "MEDIAI_ASSISTANT_CONFIDENCE": ("assistant", "confidence"),
        "MEDIAI_ASSISTANT_RULES_FILE": ("assistant", "rules_file"),

        # Store settings
        "MEDIAI_STORE_SEED_SAMPLE_PATIENTS": ("store", "seed_sample_patients", bool),

        # UI settings
        "MEDIAI_UI_WEB_HOST": ("ui", "web_host"),
        "MEDIAI_UI_WEB_PORT": ("ui", "web_port", int),
        "MEDIAI_UI_WEB_DEBUG": ("ui", "web_debug", bool),
    }

    for env_var, mapping in env_mappings.items():
        value = os.environ.get(env_var)
        if value is None:
            continue

        section, key = mapping[0], mapping[1]
        converter = mapping[2] if len(mapping) > 2 else str
        target = config if section is None else getattr(config, section)

        if converter == bool:
            converted = value.lower() in ("true", "1", "yes", "on")
        else:
            try:
                converted = converter(value)
            except ValueError:
                raise ConfigError(f"Invalid value for {env_var}: {value!r}")

        setattr(target, key, converted)


def save_config(config: Config, config_path: Optional[str] = None) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Config object to save
        config_path: Path to save configuration (optional)

    Raises:
        ConfigError: If configuration cannot be saved
    """
    if config_path:
        yaml_path = Path(config_path)
    else:
        yaml_path = Path(config.config_dir) / "config.yaml"

    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    except IOError as e:
        raise ConfigError(f"Failed to save config file: {e}", {"path": str(yaml_path)})


def create_default_config(
    config_dir: Optional[str] = None,
    config_path: Optional[str] = None
) -> Config:
    """
    Create a default configuration file with sensible defaults.

    Args:
        config_dir: Directory to create configuration in (optional)
        config_path: Exact file to write; defaults to config.yaml in config_dir

    Returns:
        Config object with default values
    """
    config = Config()

    if config_dir:
        config.config_dir = config_dir
        config.data_dir = str(Path(config_dir) / "data")
        config.log_dir = str(Path(config_dir) / "logs")
    else:
        config.config_dir = str(get_default_config_dir())
        config.data_dir = str(get_default_data_dir())
        config.log_dir = str(Path(config.data_dir) / "logs")

    for directory in (config.config_dir, config.data_dir, config.log_dir):
        Path(directory).mkdir(parents=True, exist_ok=True)

    save_config(config, config_path)

    return config
