"""
Configuration management for ncmtag

This module handles loading and validation of tagging settings from YAML
files and environment variables. It provides a centralized configuration
system that the tag writers consult for defaults the caller did not pass.

The configuration is organized into logical sections using dataclasses:
- Network settings (cover art download timeout, user agent)
- Metadata options (cover art policy, ID3 version)
- Logging settings (level, file output, rotation)

Environment variables take precedence over YAML values so that deployments
can override behavior without editing configuration files.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass
from dotenv import load_dotenv

from .. import __version__

# Load environment variables from .env file if present
load_dotenv()


COVER_POLICIES = ('append', 'replace')
ID3_VERSIONS = ('2.3', '2.4')


@dataclass
class NetworkConfig:
    """
    Network and HTTP configuration settings

    Controls the single cover art download performed when a track has a
    cover URL but no embedded image data.
    """
    user_agent: str = f"ncmtag/{__version__}"
    request_timeout: float = 30


@dataclass
class MetadataConfig:
    """
    Metadata and tag configuration

    cover_policy decides what happens to pictures already in the file:
    "append" keeps them and adds the new one, "replace" removes them first.
    Text fields are always merge-only regardless of this setting.
    """
    cover_policy: str = "append"
    id3_version: str = "2.4"


@dataclass
class LoggingConfig:
    """
    Logging configuration and output settings

    Controls log level, optional rotating file output and console formatting.
    """
    level: str = "INFO"
    file: str = ""
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


class Settings:
    """
    Main settings class that manages all configuration

    Loads settings from the first YAML file found, then applies environment
    variable overrides. Settings are read-only for the tag writers.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings from config file and environment variables

        Args:
            config_path: Path to custom config file, if None uses default locations
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".ncmtag"

        self.network = NetworkConfig()
        self.metadata = MetadataConfig()
        self.logging = LoggingConfig()

        self._load_config()
        self._load_environment_variables()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file

        Searches for configuration files in order of precedence. The first
        file found is used.
        """
        config_paths = [
            self.config_path,
            self.config_dir / "config.yaml",
            Path("config/config.yaml"),
            Path("config.yaml")
        ]

        config_data = {}
        for path in config_paths:
            if path and Path(path).exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        config_data = yaml.safe_load(f) or {}
                    break
                except (OSError, yaml.YAMLError) as e:
                    print(f"Warning: Failed to load config from {path}: {e}")

        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Apply configuration data to dataclass instances

        Only attributes that exist on the section dataclass are updated,
        unknown keys are ignored.

        Args:
            config_data: Dictionary containing configuration sections
        """
        config_mapping = {
            'network': self.network,
            'metadata': self.metadata,
            'logging': self.logging,
        }

        for section_name, section_data in config_data.items():
            if section_name in config_mapping and isinstance(section_data, dict):
                config_obj = config_mapping[section_name]
                for key, value in section_data.items():
                    if hasattr(config_obj, key):
                        setattr(config_obj, key, value)

    def _load_environment_variables(self) -> None:
        """
        Load configuration overrides from environment variables
        """
        env_mappings = {
            'NCMTAG_REQUEST_TIMEOUT': lambda v: setattr(self.network, 'request_timeout', float(v)),
            'NCMTAG_USER_AGENT': lambda v: setattr(self.network, 'user_agent', v),
            'NCMTAG_COVER_POLICY': lambda v: setattr(self.metadata, 'cover_policy', v.lower()),
            'NCMTAG_ID3_VERSION': lambda v: setattr(self.metadata, 'id3_version', v),
            'NCMTAG_LOG_LEVEL': lambda v: setattr(self.logging, 'level', v.upper()),
        }

        for env_var, setter in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                try:
                    setter(value)
                except ValueError as e:
                    print(f"Warning: Ignoring invalid {env_var}={value!r}: {e}")

    def get_config_directory(self) -> Path:
        """
        Get the expanded config directory path

        Returns:
            Path object for the configuration directory
        """
        return self.config_dir.expanduser()

    def save_config(self, path: Optional[str] = None) -> None:
        """
        Save current configuration to a YAML file

        Args:
            path: Custom path to save config, defaults to user config directory
        """
        if not path:
            path = self.get_config_directory() / "config.yaml"
        else:
            path = Path(path)

        config_data = {
            'network': dict(self.network.__dict__),
            'metadata': dict(self.metadata.__dict__),
            'logging': dict(self.logging.__dict__),
        }

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2)

    def validate(self) -> bool:
        """
        Validate current configuration

        Returns:
            True if configuration is valid, False otherwise
        """
        errors = []

        if self.metadata.cover_policy not in COVER_POLICIES:
            errors.append(f"Invalid cover policy: {self.metadata.cover_policy}")

        if str(self.metadata.id3_version) not in ID3_VERSIONS:
            errors.append(f"Invalid ID3 version: {self.metadata.id3_version}")

        try:
            if float(self.network.request_timeout) <= 0:
                errors.append(f"Request timeout must be positive: {self.network.request_timeout}")
        except (TypeError, ValueError):
            errors.append(f"Invalid request timeout: {self.network.request_timeout}")

        if errors:
            print("Configuration validation errors:")
            for error in errors:
                print(f"  - {error}")
            return False

        return True

    def __str__(self) -> str:
        sections = [
            f"Cover: {self.metadata.cover_policy}",
            f"ID3: v{self.metadata.id3_version}",
            f"Timeout: {self.network.request_timeout}s",
        ]
        return f"Settings({', '.join(sections)})"


# Global settings instance, loaded on first access
settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance

    Returns:
        The global Settings instance
    """
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings from configuration files and environment

    Args:
        config_path: Optional path to specific config file

    Returns:
        New Settings instance with reloaded configuration
    """
    global settings
    settings = Settings(config_path)
    return settings
