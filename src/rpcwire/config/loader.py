"""rpcwire configuration loader."""

import dataclasses
import logging
import os
import re
import typing
from dataclasses import fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from rpcwire.errors import create_error
from rpcwire.types import LogFormat, LogLevel, ValidationIssue, ValidationResult

from .models import ClientConfig

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "RPCWIRE_CONFIG_PATH"
LOCAL_CONFIG_NAME = "rpcwire.yaml"

# ${NAME}, ${NAME:-fallback} or ${NAME:?message}
_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+)(?::(?P<op>[-?])(?P<arg>[^}]*))?\}")


def resolve_env_vars(value: str) -> str:
    """Expand environment references in a config string.

    ``${NAME}`` must be set. ``${NAME:-fallback}`` uses the fallback when
    ``NAME`` is unset, and ``${NAME:?message}`` fails with ``message``.

    Raises:
        RPCWireError(CONFIG_INVALID): If a required variable is unset
    """

    def expand(ref: re.Match[str]) -> str:
        name = ref.group("name")
        if name in os.environ:
            return os.environ[name]
        if ref.group("op") == "-":
            return ref.group("arg") or ""
        if ref.group("op") == "?" and ref.group("arg"):
            reason = ref.group("arg")
        else:
            reason = f"Environment variable {name} is not set"
        raise create_error("CONFIG_INVALID", detail=reason)

    return _ENV_REF.sub(expand, value)


def _expand_tree(data: Any) -> Any:
    """Apply resolve_env_vars to every string in a parsed YAML document."""
    if isinstance(data, str):
        return resolve_env_vars(data)
    if isinstance(data, dict):
        return {key: _expand_tree(item) for key, item in data.items()}
    if isinstance(data, list):
        return [_expand_tree(item) for item in data]
    return data


def _enum_value(enum_type: type[Enum], value: Any) -> Enum | None:
    """Look up an enum member by value, ignoring case."""
    if not isinstance(value, str):
        return None
    for member in enum_type:
        if member.value.lower() == value.lower():
            return member
    return None


class ConfigLoader:
    """Reads a ClientConfig from YAML, validating it on the way in."""

    def __init__(self) -> None:
        self._config: ClientConfig | None = None
        self._config_path: Path | None = None

    @property
    def config_path(self) -> Path | None:
        """File the current configuration came from (None for dicts and defaults)."""
        return self._config_path

    def load(self, path: str | Path | None = None, use_defaults: bool = True) -> ClientConfig:
        """Read configuration from a YAML file.

        Without ``path`` the first of these is used: the file named by
        ``RPCWIRE_CONFIG_PATH``, ``./rpcwire.yaml``, ``~/.rpcwire/config.yaml``.

        Args:
            path: Explicit config file
            use_defaults: Fall back to ClientConfig() when the file is missing

        Returns:
            Loaded ClientConfig

        Raises:
            RPCWireError(CONFIG_INVALID): If the file is missing (and
                use_defaults is False), unreadable, or fails validation
        """
        source = Path(path) if path is not None else self._resolve_config_path()

        if not source.is_file():
            if not use_defaults:
                raise create_error("CONFIG_INVALID", detail=f"Config file {source} not found")
            logger.info("Config file %s not found, using defaults", source)
            return self.load_defaults()

        try:
            document = yaml.safe_load(source.read_text()) or {}
        except yaml.YAMLError as e:
            raise create_error("CONFIG_INVALID", detail=f"{source} is not valid YAML: {e}") from e

        if not isinstance(document, dict):
            raise create_error(
                "CONFIG_INVALID",
                detail=f"{source} must hold a mapping at top level, not {type(document).__name__}",
            )

        return self.load_from_dict(_expand_tree(document), source)

    def load_defaults(self) -> ClientConfig:
        """Use the built-in defaults."""
        return self.load_from_dict({})

    def load_from_dict(self, data: dict[str, Any], config_path: Path | None = None) -> ClientConfig:
        """Build a ClientConfig from an already parsed mapping.

        Args:
            data: Parsed configuration
            config_path: File the mapping was read from, if any

        Raises:
            RPCWireError(CONFIG_INVALID): If validation fails
        """
        result = self.validate(data)
        for issue in result.warnings:
            logger.warning("Config warning at %s: %s", issue.path, issue.message)
        if not result.valid:
            problems = "\n".join(f"- {issue.path}: {issue.message}" for issue in result.errors)
            raise create_error("CONFIG_INVALID", detail=f"Invalid configuration:\n{problems}")

        try:
            config = self._dict_to_config(data)
        except (TypeError, ValueError) as e:
            raise create_error("CONFIG_INVALID", detail=f"Cannot build configuration: {e}") from e

        self._config, self._config_path = config, config_path
        logger.debug("Configuration loaded (endpoint=%s)", config.endpoint or "<unset>")
        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading.

        Args:
            data: Configuration dictionary

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        valid_keys = {f.name for f in fields(ClientConfig)}
        for key in data:
            if key not in valid_keys:
                warnings.append(
                    ValidationIssue(
                        path=key,
                        message=f"Unknown configuration key: {key}",
                        severity="warning",
                    )
                )

        endpoint = data.get("endpoint")
        if endpoint is not None:
            if not isinstance(endpoint, str):
                errors.append(ValidationIssue(path="endpoint", message="endpoint must be a string"))
            elif endpoint and not endpoint.startswith(("http://", "https://")):
                errors.append(
                    ValidationIssue(
                        path="endpoint",
                        message="endpoint must be an http:// or https:// URL",
                    )
                )

        timeout = data.get("timeout")
        if timeout is not None and (
            isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
        ):
            errors.append(ValidationIssue(path="timeout", message="timeout must be a positive number"))

        headers = data.get("headers")
        if headers is not None:
            if not isinstance(headers, dict):
                errors.append(ValidationIssue(path="headers", message="headers must be a dictionary"))
            else:
                for name, value in headers.items():
                    if not isinstance(value, str):
                        errors.append(
                            ValidationIssue(
                                path=f"headers.{name}",
                                message="header values must be strings",
                            )
                        )

        auth = data.get("auth")
        if auth is not None:
            if not isinstance(auth, dict):
                errors.append(ValidationIssue(path="auth", message="auth must be a dictionary"))
            else:
                for key in ("username", "password"):
                    if key in auth and not isinstance(auth[key], str):
                        errors.append(
                            ValidationIssue(path=f"auth.{key}", message=f"{key} must be a string")
                        )

        ids = data.get("ids")
        if ids is not None:
            if not isinstance(ids, dict):
                errors.append(ValidationIssue(path="ids", message="ids must be a dictionary"))
            else:
                start = ids.get("start")
                if start is not None and (
                    isinstance(start, bool) or not isinstance(start, int) or start < 0
                ):
                    errors.append(
                        ValidationIssue(path="ids.start", message="start must be a non-negative integer")
                    )
                auto = ids.get("auto_increment")
                if auto is not None and not isinstance(auto, bool):
                    errors.append(
                        ValidationIssue(path="ids.auto_increment", message="auto_increment must be a boolean")
                    )

        log_config = data.get("logging")
        if log_config is not None:
            if not isinstance(log_config, dict):
                errors.append(ValidationIssue(path="logging", message="logging must be a dictionary"))
            else:
                if "level" in log_config and _enum_value(LogLevel, log_config["level"]) is None:
                    errors.append(
                        ValidationIssue(
                            path="logging.level",
                            message=f"level must be one of {[m.value for m in LogLevel]}",
                        )
                    )
                if "format" in log_config and _enum_value(LogFormat, log_config["format"]) is None:
                    errors.append(
                        ValidationIssue(
                            path="logging.format",
                            message=f"format must be one of {[m.value for m in LogFormat]}",
                        )
                    )

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def get(self) -> ClientConfig:
        """Return the configuration loaded last.

        Raises:
            RPCWireError(CONFIG_INVALID): If nothing has been loaded yet
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="No configuration has been loaded")
        return self._config

    def _resolve_config_path(self) -> Path:
        from_env = os.environ.get(CONFIG_PATH_ENV)
        if from_env:
            return Path(from_env)

        candidates = [Path(LOCAL_CONFIG_NAME), Path.home() / ".rpcwire" / "config.yaml"]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return candidates[0]

    def _dict_to_config(self, data: dict[str, Any]) -> ClientConfig:
        return self._build(ClientConfig, data)

    def _build(self, model: type, data: dict[str, Any]) -> Any:
        """Instantiate a config dataclass from the keys of ``data`` it defines."""
        hints = typing.get_type_hints(model)
        values = {
            f.name: self._convert_field(hints[f.name], data[f.name])
            for f in fields(model)
            if f.name in data
        }
        return model(**values)

    def _convert_field(self, field_type: Any, value: Any) -> Any:
        """Coerce one YAML value to the declared field type."""
        if value is None:
            return None
        if dataclasses.is_dataclass(field_type) and isinstance(value, dict):
            return self._build(field_type, value)
        if typing.get_origin(field_type) is dict and isinstance(value, dict):
            return {str(key): item for key, item in value.items()}
        if isinstance(field_type, type) and issubclass(field_type, Enum):
            member = _enum_value(field_type, value)
            if member is None:
                raise ValueError(f"{value!r} is not a valid {field_type.__name__}")
            return member
        if field_type is float and isinstance(value, int):
            return float(value)
        return value


# Convenience singleton
_default_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get default config loader singleton."""
    global _default_loader  # noqa: PLW0603
    if _default_loader is None:
        _default_loader = ConfigLoader()
    return _default_loader


def load_config(path: str | Path | None = None) -> ClientConfig:
    """Convenience function to load config.

    Args:
        path: Optional path to config file

    Returns:
        Loaded ClientConfig instance
    """
    return get_config_loader().load(path)
