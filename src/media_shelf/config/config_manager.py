"""Configuration management."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..utils.exceptions import ConfigurationError
from .models import Config

DEFAULT_CONFIG_TEMPLATE: Dict[str, Any] = {
    "catalog": {
        "media_dir": "${MEDIA_DIR}",
        "import_dir": "${IMPORT_DIR}",
        "persist_size_cache": True,
    },
    "tmdb": {
        "api_key": "${TMDB_API_KEY}",
        "language": "en-US",
    },
    "playback": {
        "url_prefix": "",
    },
    "logging": {
        "level": "INFO",
    },
}


class ConfigManager:
    """Manages application configuration loading and validation."""

    def __init__(self, config_path: Optional[Path] = None, load_env_file: bool = True):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file. If None, searches standard locations
                and falls back to environment variables.
            load_env_file: Whether to read a ``.env`` file into the environment first.
        """
        self._config_path = config_path
        self._config: Optional[Config] = None
        if load_env_file:
            load_dotenv(override=False)

    def load_config(self) -> Config:
        """Load and validate configuration.

        Returns:
            Validated configuration object.

        Raises:
            FileNotFoundError: If an explicit configuration file is missing.
            ConfigurationError: If configuration is invalid or absent.
            yaml.YAMLError: If YAML parsing fails.
        """
        if self._config is not None:
            return self._config

        config_path = self._find_config_file()
        if config_path is not None:
            raw_config = self._load_yaml_file(config_path)
        else:
            raw_config = self._config_from_environment()

        try:
            self._config = Config(**raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        return self._config

    def reload_config(self) -> Config:
        """Reload configuration from file.

        Returns:
            Newly loaded configuration object.
        """
        self._config = None
        return self.load_config()

    def get_config(self) -> Config:
        """Get current configuration, loading if necessary.

        Returns:
            Current configuration object.
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def _find_config_file(self) -> Optional[Path]:
        """Find configuration file in standard locations.

        Returns:
            Path to configuration file, or None to use the environment.

        Raises:
            FileNotFoundError: If an explicitly requested file does not exist.
        """
        if self._config_path is not None:
            if self._config_path.exists():
                return self._config_path
            raise FileNotFoundError(f"Configuration file not found: {self._config_path}")

        search_paths = [
            Path.cwd() / "config" / "config.yaml",
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "media_shelf" / "config.yaml",
        ]

        env_config = os.getenv("MEDIA_SHELF_CONFIG")
        if env_config:
            search_paths.insert(0, Path(env_config))

        for path in search_paths:
            if path.exists():
                return path

        return None

    def _config_from_environment(self) -> Dict[str, Any]:
        """Build raw configuration from environment variables.

        Returns:
            Raw configuration dictionary.

        Raises:
            ConfigurationError: If MEDIA_DIR is not set.
        """
        media_dir = os.getenv("MEDIA_DIR")
        if not media_dir:
            raise ConfigurationError(
                "No configuration file found and MEDIA_DIR is not set"
            )

        return {
            "catalog": {
                "media_dir": media_dir,
                "import_dir": os.getenv("IMPORT_DIR") or None,
            },
            "tmdb": {"api_key": os.getenv("TMDB_API_KEY", "")},
            "playback": {"url_prefix": os.getenv("PLAY_URL_PREFIX", "")},
        }

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load YAML file with environment variable expansion.

        Args:
            path: Path to YAML file.

        Returns:
            Parsed YAML data with environment variables expanded.

        Raises:
            yaml.YAMLError: If YAML parsing fails.
        """
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        # Expand environment variables
        content = os.path.expandvars(content)

        try:
            result = yaml.safe_load(content)
            if not isinstance(result, dict):
                raise yaml.YAMLError(f"YAML file {path} must contain a dictionary at root level")
            return result
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}")

    @classmethod
    def create_default_config(
        cls,
        output_path: Path,
        media_dir: Optional[Path] = None,
        import_dir: Optional[Path] = None,
    ) -> None:
        """Create a default configuration file.

        Args:
            output_path: Path where to create the configuration file.
            media_dir: Catalog root to write instead of the ``${MEDIA_DIR}`` placeholder.
            import_dir: Import root to write instead of the ``${IMPORT_DIR}`` placeholder.
        """
        default_config = {
            section: dict(values) for section, values in DEFAULT_CONFIG_TEMPLATE.items()
        }
        if media_dir is not None:
            default_config["catalog"]["media_dir"] = str(media_dir)
        if import_dir is not None:
            default_config["catalog"]["import_dir"] = str(import_dir)

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(default_config, f, default_flow_style=False, indent=2, sort_keys=False)

    def validate_config_file(self, config_path: Path) -> bool:
        """Validate a configuration file without loading it as current config.

        Args:
            config_path: Path to configuration file to validate.

        Returns:
            True if configuration is valid, False otherwise.
        """
        try:
            raw_config = self._load_yaml_file(config_path)
            Config(**raw_config)
            return True
        except (ValidationError, yaml.YAMLError, FileNotFoundError):
            return False
