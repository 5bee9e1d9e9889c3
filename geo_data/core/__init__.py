"""
geo-data Core Package
=====================

Configuration and file helpers shared by the registry and the CLI.
"""

from geo_data.core.config import (
    CONFIG_FILE,
    VALID_LANGUAGES,
    ConfigResult,
    ConfigStatus,
    GeoDataConfig,
    RegistrySettings,
    detect_defaults,
    get_config_result,
    get_settings,
    set_settings,
    validate_config,
)

from geo_data.core.files import (
    write_json_atomic,
    write_text_atomic,
)

__all__ = [
    # Config
    "CONFIG_FILE",
    "VALID_LANGUAGES",
    "ConfigResult",
    "ConfigStatus",
    "GeoDataConfig",
    "RegistrySettings",
    "detect_defaults",
    "get_config_result",
    "get_settings",
    "set_settings",
    "validate_config",
    # Files
    "write_json_atomic",
    "write_text_atomic",
]
