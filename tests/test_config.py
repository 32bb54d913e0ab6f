"""
Test Configuration Module
========================

Unit tests for configuration loading and validation.
"""

import os
import pytest
import yaml
from pathlib import Path

# Add parent directory to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import (
    Config, AssistantConfig, StoreConfig, UIConfig,
    load_config, save_config, create_default_config, DEFAULT_FALLBACK_REPLY
)
from core.exceptions import ConfigError


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point every default path at a temporary directory."""
    monkeypatch.setenv("MEDIAI_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("MEDIAI_DATA_DIR", str(tmp_path / "data"))
    for var in (
        "MEDIAI_DEBUG", "MEDIAI_ASSISTANT_PROVIDER", "MEDIAI_ASSISTANT_CONFIDENCE",
        "MEDIAI_ASSISTANT_RULES_FILE", "MEDIAI_STORE_SEED_SAMPLE_PATIENTS",
        "MEDIAI_UI_WEB_HOST", "MEDIAI_UI_WEB_PORT", "MEDIAI_UI_WEB_DEBUG",
    ):
        monkeypatch.delenv(var, raising=False)
    return tmp_path / "config"


class TestAssistantConfig:
    """Tests for AssistantConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        config = AssistantConfig()
        assert config.provider == "MediAI Expert System"
        assert config.fallback_provider == "Medical Assistant"
        assert config.confidence == "high"
        assert config.fallback_reply == DEFAULT_FALLBACK_REPLY
        assert config.rules_file == ""

    def test_validation_valid(self):
        """Test valid configuration passes validation."""
        AssistantConfig(provider="Clinic Bot").validate()  # Should not raise

    def test_validation_empty_provider(self):
        config = AssistantConfig(provider="  ")
        with pytest.raises(ConfigError):
            config.validate()

    def test_validation_empty_fallback_reply(self):
        config = AssistantConfig(fallback_reply="")
        with pytest.raises(ConfigError):
            config.validate()


class TestUIConfig:
    """Tests for UIConfig."""

    def test_default_values(self):
        config = UIConfig()
        assert config.web_host == "127.0.0.1"
        assert config.web_port == 8080
        assert config.cors_origins == ["*"]

    def test_validation_invalid_port(self):
        with pytest.raises(ConfigError):
            UIConfig(web_port=70000).validate()

    def test_validation_invalid_theme(self):
        with pytest.raises(ConfigError):
            UIConfig(tui_theme="neon").validate()


class TestConfig:
    """Tests for main Config class."""

    def test_default_values(self):
        """Test default configuration values."""
        config = Config()
        assert config.app_name == "MediAI Pro"
        assert config.assistant is not None
        assert isinstance(config.store, StoreConfig)
        assert config.store.seed_sample_patients is True

    def test_to_dict(self):
        """Test conversion to dictionary."""
        d = Config().to_dict()
        assert "app_name" in d
        assert "assistant" in d
        assert "store" in d
        assert "ui" in d
        assert "config_dir" not in d

    def test_rules_path_defaults_to_builtin(self, tmp_path):
        config = Config(config_dir=str(tmp_path))
        assert config.rules_path is None

    def test_rules_path_picks_up_rules_yaml(self, tmp_path):
        (tmp_path / "rules.yaml").write_text("rules: []\n")
        config = Config(config_dir=str(tmp_path))
        assert config.rules_path == tmp_path / "rules.yaml"

    def test_rules_path_explicit_file_wins(self, tmp_path):
        (tmp_path / "rules.yaml").write_text("rules: []\n")
        config = Config(config_dir=str(tmp_path))
        config.assistant.rules_file = "/elsewhere/custom.yaml"
        assert config.rules_path == Path("/elsewhere/custom.yaml")


class TestLoadConfig:
    """Tests for loading from YAML, .env and the environment."""

    def test_defaults_without_file(self, config_dir):
        config = load_config()
        assert config.app_name == "MediAI Pro"
        assert config.config_dir == str(config_dir)
        assert config.log_dir.endswith("logs")

    def test_yaml_values_applied(self, config_dir, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump({
            "debug": True,
            "assistant": {"provider": "Clinic Bot", "unknown_key": 1},
            "store": {"seed_sample_patients": False},
            "ui": {"web_port": 9000},
        }))

        config = load_config(str(path))

        assert config.debug is True
        assert config.assistant.provider == "Clinic Bot"
        assert config.store.seed_sample_patients is False
        assert config.ui.web_port == 9000

    def test_invalid_yaml_raises(self, config_dir, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("assistant: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_non_mapping_section_raises(self, config_dir, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("ui: 42\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_env_overrides(self, config_dir, monkeypatch):
        monkeypatch.setenv("MEDIAI_UI_WEB_PORT", "9100")
        monkeypatch.setenv("MEDIAI_STORE_SEED_SAMPLE_PATIENTS", "false")
        monkeypatch.setenv("MEDIAI_ASSISTANT_PROVIDER", "Night Shift")

        config = load_config()

        assert config.ui.web_port == 9100
        assert config.store.seed_sample_patients is False
        assert config.assistant.provider == "Night Shift"

    def test_env_override_bad_int(self, config_dir, monkeypatch):
        monkeypatch.setenv("MEDIAI_UI_WEB_PORT", "eighty")
        with pytest.raises(ConfigError):
            load_config()

    def test_env_file_loaded(self, config_dir, monkeypatch):
        config_dir.mkdir(parents=True)
        (config_dir / ".env").write_text("# comment\nMEDIAI_UI_WEB_HOST=0.0.0.0\n")

        try:
            config = load_config()
        finally:
            # .env values are exported straight into os.environ
            os.environ.pop("MEDIAI_UI_WEB_HOST", None)

        assert config.ui.web_host == "0.0.0.0"

    def test_invalid_values_rejected(self, config_dir, monkeypatch):
        monkeypatch.setenv("MEDIAI_UI_WEB_PORT", "0")
        with pytest.raises(ConfigError):
            load_config()


class TestSaveConfig:
    """Tests for writing configuration files."""

    def test_save_and_reload(self, config_dir):
        config = load_config()
        config.assistant.confidence = "medium"
        save_config(config)

        assert (config_dir / "config.yaml").exists()
        assert load_config().assistant.confidence == "medium"

    def test_create_default_config(self, tmp_path):
        config = create_default_config(str(tmp_path / "fresh"))

        assert (tmp_path / "fresh" / "config.yaml").exists()
        assert Path(config.log_dir).is_dir()
        assert Path(config.data_dir).is_dir()

    def test_create_default_config_custom_path(self, tmp_path):
        config_path = tmp_path / "fresh" / "clinic.yaml"

        create_default_config(str(tmp_path / "fresh"), str(config_path))

        assert config_path.exists()
        assert not (tmp_path / "fresh" / "config.yaml").exists()
