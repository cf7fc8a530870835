"""
Configuration package for ncmtag

Settings are loaded from YAML files and environment variables and exposed
through a lazily created module-level instance:

    from ncmtag.config import get_settings

    settings = get_settings()
    timeout = settings.network.request_timeout
"""

from .settings import (
    get_settings,
    reload_settings,
    Settings,
    NetworkConfig,
    MetadataConfig,
    LoggingConfig,
    COVER_POLICIES,
    ID3_VERSIONS,
)

__all__ = [
    'get_settings',
    'reload_settings',
    'Settings',
    'NetworkConfig',
    'MetadataConfig',
    'LoggingConfig',
    'COVER_POLICIES',
    'ID3_VERSIONS',
]
