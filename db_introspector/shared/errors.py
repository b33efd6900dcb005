"""Custom exceptions for the introspector."""

from __future__ import annotations


class IntrospectorError(Exception):
    """Base exception for introspection errors."""


class ConfigError(IntrospectorError):
    """Raised when the configuration is missing, unreadable or invalid."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        key: str | None = None,
    ) -> None:
        self.config_path = config_path
        self.key = key
        if key:
            message = f"Key '{key}': {message}"
        full_message = message if not config_path else f"[{config_path}] {message}"
        super().__init__(full_message)


class DatabaseConnectionError(IntrospectorError, ConnectionError):
    """Raised when the database cannot be reached or queried."""

    def __init__(self, message: str, target: str | None = None) -> None:
        self.target = target
        super().__init__(message)


class UnsupportedDialectError(IntrospectorError):
    """Raised when a connection target names a dialect we cannot introspect."""

    def __init__(self, dialect: str) -> None:
        self.dialect = dialect
        super().__init__(
            f"Dialect '{dialect}' is not supported; "
            "use a postgres:// or mysql:// connection string"
        )


class CatalogError(IntrospectorError):
    """Raised when the column catalog returns a value we cannot interpret."""

    def __init__(self, message: str, table_name: str | None = None) -> None:
        self.table_name = table_name
        if table_name:
            message = f"Table '{table_name}': {message}"
        super().__init__(message)


class EmptySchemaError(IntrospectorError):
    """Raised when the requested schema has no columns to introspect."""

    def __init__(self, schema: str) -> None:
        self.schema = schema
        super().__init__(f"Schema '{schema}' contains no tables")
