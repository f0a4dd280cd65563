"""Test configuration management."""

from pathlib import Path

import pytest
import yaml

from media_shelf.config import Config, ConfigManager
from media_shelf.utils import ConfigurationError


def test_config_manager_loads_config(config_manager, media_dir, import_dir):
    """Test that config manager loads configuration correctly."""
    config = config_manager.load_config()

    assert isinstance(config, Config)
    assert config.catalog.media_dir == media_dir
    assert config.catalog.import_dir == import_dir
    assert config.tmdb.api_key == "test-tmdb-key"
    assert config.tmdb.enabled
    assert config.logging.level == "DEBUG"


def test_config_manager_caches_config(config_manager):
    """Test that config manager caches loaded configuration."""
    config1 = config_manager.load_config()
    config2 = config_manager.get_config()

    assert config1 is config2


def test_config_manager_reload_config(config_manager):
    """Test that config manager can reload configuration."""
    config1 = config_manager.load_config()
    config2 = config_manager.reload_config()

    assert config1 is not config2
    assert config1.catalog.media_dir == config2.catalog.media_dir


def test_config_manager_missing_file():
    """Test that config manager raises error for missing file."""
    config_manager = ConfigManager(Path("nonexistent.yaml"), load_env_file=False)

    with pytest.raises(FileNotFoundError):
        config_manager.load_config()


def test_missing_media_dir_is_configuration_error(tmp_path):
    """A catalog root that does not exist fails at startup."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(f'catalog:\n  media_dir: "{tmp_path / "missing"}"\n')

    with pytest.raises(ConfigurationError):
        ConfigManager(config_file, load_env_file=False).load_config()


def test_unset_placeholders_disable_optional_settings(tmp_path, media_dir, monkeypatch):
    """Unresolved ${VAR} placeholders leave optional settings empty."""
    monkeypatch.delenv("IMPORT_DIR", raising=False)
    monkeypatch.delenv("TMDB_API_KEY", raising=False)
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        f'catalog:\n  media_dir: "{media_dir}"\n  import_dir: "${{IMPORT_DIR}}"\n'
        'tmdb:\n  api_key: "${TMDB_API_KEY}"\n'
    )

    config = ConfigManager(config_file, load_env_file=False).load_config()

    assert config.catalog.import_dir is None
    assert config.tmdb.api_key == ""
    assert not config.tmdb.enabled


def test_yaml_expands_environment_variables(tmp_path, media_dir, monkeypatch):
    """Environment variables in YAML are expanded before validation."""
    monkeypatch.setenv("TEST_MEDIA_DIR", str(media_dir))
    monkeypatch.setenv("TEST_PREFIX", "smb://nas")
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        'catalog:\n  media_dir: "${TEST_MEDIA_DIR}"\n'
        'playback:\n  url_prefix: "${TEST_PREFIX}"\n'
    )

    config = ConfigManager(config_file, load_env_file=False).load_config()

    assert config.catalog.media_dir == media_dir
    assert config.playback.url_prefix == "smb://nas"


def test_config_from_environment(media_dir, import_dir, monkeypatch, tmp_path):
    """Without a config file the environment is used."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("MEDIA_SHELF_CONFIG", raising=False)
    monkeypatch.setenv("MEDIA_DIR", str(media_dir))
    monkeypatch.setenv("IMPORT_DIR", str(import_dir))
    monkeypatch.setenv("TMDB_API_KEY", "env-key")
    monkeypatch.setenv("PLAY_URL_PREFIX", "file://")

    config = ConfigManager(load_env_file=False).load_config()

    assert config.catalog.media_dir == media_dir
    assert config.catalog.import_dir == import_dir
    assert config.tmdb.api_key == "env-key"
    assert config.playback.url_prefix == "file://"


def test_config_from_environment_requires_media_dir(monkeypatch, tmp_path):
    """MEDIA_DIR is mandatory when no config file exists."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("MEDIA_SHELF_CONFIG", raising=False)
    monkeypatch.delenv("MEDIA_DIR", raising=False)

    with pytest.raises(ConfigurationError):
        ConfigManager(load_env_file=False).load_config()


def test_config_path_from_environment(temp_config_file, media_dir, monkeypatch, tmp_path):
    """MEDIA_SHELF_CONFIG points at the config file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MEDIA_SHELF_CONFIG", str(temp_config_file))

    config = ConfigManager(load_env_file=False).load_config()

    assert config.catalog.media_dir == media_dir


def test_staging_prefix_must_be_hidden(tmp_path, media_dir):
    """Staging directories must not be visible to catalog scans."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(f'catalog:\n  media_dir: "{media_dir}"\n  staging_prefix: "tmp-"\n')

    with pytest.raises(ConfigurationError):
        ConfigManager(config_file, load_env_file=False).load_config()


def test_invalid_logging_level(tmp_path, media_dir):
    """Test config validation with invalid logging level."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(f'catalog:\n  media_dir: "{media_dir}"\nlogging:\n  level: "LOUD"\n')

    with pytest.raises(ConfigurationError):
        ConfigManager(config_file, load_env_file=False).load_config()


def test_create_default_config(tmp_path, media_dir):
    """Test creating default configuration file."""
    output_path = tmp_path / "default_config.yaml"

    ConfigManager.create_default_config(output_path, media_dir=media_dir)

    assert output_path.exists()
    content = yaml.safe_load(output_path.read_text())
    assert content["catalog"]["media_dir"] == str(media_dir)
    assert content["catalog"]["import_dir"] == "${IMPORT_DIR}"
    assert "tmdb" in content
    assert "playback" in content

    config_manager = ConfigManager(output_path, load_env_file=False)
    assert config_manager.validate_config_file(output_path)
