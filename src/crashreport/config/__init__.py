"""Configuration loading and validation."""

from .loader import load_config, validate_config
from .schema import (
    DEFAULT_ENDPOINT,
    ClientConfig,
    CrashReportConfig,
    IntrospectionConfig,
    LoggingConfig,
    RaygunConfig,
)

__all__ = [
    # Loader
    "load_config",
    "validate_config",
    # Root config
    "CrashReportConfig",
    # Sections
    "ClientConfig",
    "IntrospectionConfig",
    "LoggingConfig",
    "RaygunConfig",
    "DEFAULT_ENDPOINT",
]
