"""rpcwire configuration data models."""

from dataclasses import dataclass, field

from rpcwire.types import LogFormat, LogLevel

DEFAULT_TIMEOUT = 30.0


@dataclass
class BasicAuthConfig:
    """HTTP basic-auth credentials. Empty username or password disables auth."""

    username: str = ""
    password: str = ""


@dataclass
class IDConfig:
    """Request id allocation settings."""

    auto_increment: bool = True
    start: int = 0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED


@dataclass
class ClientConfig:
    """Root configuration for one JSON-RPC endpoint."""

    endpoint: str = ""
    timeout: float = DEFAULT_TIMEOUT  # seconds, applied to the default httpx handle
    headers: dict[str, str] = field(default_factory=dict)
    auth: BasicAuthConfig = field(default_factory=BasicAuthConfig)
    ids: IDConfig = field(default_factory=IDConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
