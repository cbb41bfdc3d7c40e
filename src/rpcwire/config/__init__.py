"""rpcwire configuration: YAML files with environment interpolation."""

from .loader import ConfigLoader, get_config_loader, load_config, resolve_env_vars
from .models import (
    DEFAULT_TIMEOUT,
    BasicAuthConfig,
    ClientConfig,
    IDConfig,
    LoggingConfig,
)

__all__ = [
    # Loader
    "ConfigLoader",
    "get_config_loader",
    "load_config",
    "resolve_env_vars",
    # Models
    "ClientConfig",
    "BasicAuthConfig",
    "IDConfig",
    "LoggingConfig",
    "DEFAULT_TIMEOUT",
]
