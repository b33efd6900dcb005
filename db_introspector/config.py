"""Configuration loading for the introspector CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Mapping

import yaml

from .shared.errors import ConfigError
from .typegen.types import DEFAULT_MINIMUM_VERSION, MinimumVersion, RenderConfig

DEFAULT_OUTPUT_FILENAME: Final[str] = "table_types.py"

CONNECTION_STRING_ENV: Final[str] = "DATABASE_URL"

CONFIG_KEYS: Final[frozenset[str]] = frozenset({
    "connection_string",
    "schema",
    "output_filename",
    "minimum_python_version",
    "backwards_compat_forced",
})


@dataclass(frozen=True, slots=True)
class IntrospectorConfig:
    """Fully resolved settings for one introspection run."""

    connection_string: str
    schema: str
    output_filename: Path = Path(DEFAULT_OUTPUT_FILENAME)
    minimum_python_version: MinimumVersion = DEFAULT_MINIMUM_VERSION
    backwards_compat_forced: bool = False

    @property
    def render_config(self) -> RenderConfig:
        return RenderConfig(
            minimum_version=self.minimum_python_version,
            forced=self.backwards_compat_forced,
        )


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load settings from a YAML file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        The parsed settings mapping.

    Raises:
        ConfigError: If the file cannot be read, parsed or contains unknown keys.
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}", str(config_path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", str(config_path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping", str(config_path))

    unknown = sorted(str(key) for key in data if key not in CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown keys: {', '.join(unknown)}", str(config_path))

    return data


def parse_minimum_version(value: Any, config_path: str | None = None) -> MinimumVersion:
    """Parse ``"3.6"``, ``"3.8"`` or ``"3.10"`` into a :class:`MinimumVersion`."""
    if isinstance(value, MinimumVersion):
        return value
    if isinstance(value, float):
        # YAML reads an unquoted 3.10 as the float 3.1
        raise ConfigError(
            f"must be a quoted string such as '3.10', got {value!r}",
            config_path,
            key="minimum_python_version",
        )
    try:
        return MinimumVersion(str(value))
    except ValueError as e:
        choices = ", ".join(version.value for version in MinimumVersion)
        raise ConfigError(
            f"unsupported version {value!r} (choose from {choices})",
            config_path,
            key="minimum_python_version",
        ) from e


def resolve_config(
    overrides: Mapping[str, Any],
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> IntrospectorConfig:
    """Merge CLI values, the optional YAML file and the environment.

    Values that are ``None`` in ``overrides`` fall through to the config file,
    then to the environment, then to built-in defaults.

    Raises:
        ConfigError: If a required setting is missing or a value is invalid.
    """
    environ = os.environ if environ is None else environ
    path_label = str(config_path) if config_path is not None else None
    file_values = load_config_file(config_path) if config_path is not None else {}

    def pick(key: str) -> Any:
        value = overrides.get(key)
        if value is None:
            value = file_values.get(key)
        return value

    connection_string = pick("connection_string") or environ.get(CONNECTION_STRING_ENV)
    if not connection_string:
        raise ConfigError(
            f"a connection string is required (--connection-string or ${CONNECTION_STRING_ENV})",
            path_label,
            key="connection_string",
        )

    schema = pick("schema")
    if not schema:
        raise ConfigError("a schema name is required (--schema)", path_label, key="schema")

    output_filename = pick("output_filename") or DEFAULT_OUTPUT_FILENAME

    raw_version = pick("minimum_python_version")
    minimum_version = (
        DEFAULT_MINIMUM_VERSION
        if raw_version is None
        else parse_minimum_version(raw_version, path_label)
    )

    forced = pick("backwards_compat_forced")
    if forced is not None and not isinstance(forced, bool):
        raise ConfigError(
            f"must be true or false, got {forced!r}",
            path_label,
            key="backwards_compat_forced",
        )

    return IntrospectorConfig(
        connection_string=str(connection_string),
        schema=str(schema),
        output_filename=Path(output_filename),
        minimum_python_version=minimum_version,
        backwards_compat_forced=bool(forced),
    )
