"""
load the config from config.yaml and .env
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

# Environment variable -> nested config key
ENV_MAPPINGS = {
    'ARTICLE_BASE_URL': ('fetcher', 'base_url'),
    'ARTICLE_USER_AGENT': ('fetcher', 'user_agent'),
    'ARTICLE_TIMEOUT': ('fetcher', 'timeout'),
    'ARTICLE_MAX_RESPONSE_SIZE': ('fetcher', 'max_response_size'),
    'ARTICLE_MARKDOWN_PRESET': ('renderer', 'preset'),
    'ARTICLE_HIGHLIGHT_CLASS': ('highlight', 'css_class'),
    'ARTICLE_DISCARD_STALE': ('loader', 'discard_stale'),
    'LOG_LEVEL': ('logging', 'level'),
    'LOG_FORMAT': ('logging', 'format'),
}


class Config:
    """Configuration loader that reads from config.yaml and environment variables."""

    def __init__(self, config_path: Optional[str] = None, env_file: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to config.yaml file. If None, uses config.yaml
                        at the repository root.
            env_file: Optional .env file loaded before overrides are applied.
                        If None, python-dotenv searches from the working directory.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        load_dotenv(env_file)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file and override with environment variables."""
        try:
            with open(self.config_path, 'r') as f:
                config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        return self._apply_env_overrides(config)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        for env_var, config_path in ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                current = config
                for key in config_path[:-1]:
                    if not isinstance(current.get(key), dict):
                        current[key] = {}
                    current = current[key]

                current[config_path[-1]] = self._convert_env_value(env_value)

        return config

    def _convert_env_value(self, value: str):
        """Convert environment variable string to appropriate Python type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        if value.lower() in ('null', 'none'):
            return None

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, *keys: str, default: Any = None) -> Any:
        """Get a configuration value by nested keys.

        Args:
            *keys: Configuration keys (e.g., 'fetcher', 'base_url')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current = self._config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def _section(self, name: str) -> Dict[str, Any]:
        return self.get(name, default=None) or {}

    @property
    def fetcher(self) -> Dict[str, Any]:
        """Get HTTP fetcher configuration."""
        return self._section('fetcher')

    @property
    def renderer(self) -> Dict[str, Any]:
        """Get Markdown renderer configuration."""
        return self._section('renderer')

    @property
    def highlight(self) -> Dict[str, Any]:
        """Get syntax highlighting configuration."""
        return self._section('highlight')

    @property
    def loader(self) -> Dict[str, Any]:
        """Get document loader configuration."""
        return self._section('loader')

    @property
    def page(self) -> Dict[str, Any]:
        """Get page/region configuration."""
        return self._section('page')

    @property
    def logging(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self._section('logging')
