"""Column catalog queries for PostgreSQL and MySQL.

Reads ``information_schema.COLUMNS`` for one schema and returns the rows as
:class:`ColumnRecord` values ordered by table name, then column name.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any, Final, Mapping
from urllib.parse import SplitResult, unquote, urlsplit

import aiomysql
import asyncpg

from ..shared.errors import CatalogError, DatabaseConnectionError, UnsupportedDialectError
from ..typegen.types import ColumnRecord

logger = logging.getLogger(__name__)

DEFAULT_MYSQL_PORT: Final[int] = 3306

POSTGRES_SCHEMES: Final[frozenset[str]] = frozenset({"postgres", "postgresql"})
MYSQL_SCHEMES: Final[frozenset[str]] = frozenset({"mysql"})

POSTGRES_COLUMNS_QUERY: Final[str] = """
    SELECT table_name, column_name, is_nullable, data_type
    FROM information_schema.COLUMNS
    WHERE table_schema = $1
    ORDER BY table_name, column_name
"""

MYSQL_COLUMNS_QUERY: Final[str] = """
    SELECT
        TABLE_NAME AS table_name,
        COLUMN_NAME AS column_name,
        IS_NULLABLE AS is_nullable,
        DATA_TYPE AS data_type
    FROM information_schema.COLUMNS
    WHERE table_schema = %s
    ORDER BY TABLE_NAME, COLUMN_NAME
"""


class Dialect(enum.Enum):
    POSTGRES = "postgres"
    MYSQL = "mysql"


def detect_dialect(connection_target: str) -> Dialect:
    """Pick the dialect from the connection string's URL scheme.

    Raises:
        DatabaseConnectionError: If the target has no URL scheme at all.
        UnsupportedDialectError: If the scheme names another database.
    """
    scheme, separator, _ = connection_target.partition("://")
    scheme = scheme.lower()
    if not separator or not scheme:
        raise DatabaseConnectionError(
            "Malformed connection string; expected mysql://... or postgres://...",
            _redact(connection_target),
        )
    if scheme in POSTGRES_SCHEMES:
        return Dialect.POSTGRES
    if scheme in MYSQL_SCHEMES:
        return Dialect.MYSQL
    raise UnsupportedDialectError(scheme)


def _redact(connection_target: str) -> str:
    """Drop the password from a connection string for error messages."""
    try:
        parts = urlsplit(connection_target)
    except ValueError:
        return "<unparseable connection string>"
    if parts.password is None:
        return connection_target
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return parts._replace(netloc=netloc).geturl()


def _as_text(value: Any) -> str:
    # Some MySQL servers report information_schema values as binary strings
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return str(value)


def parse_nullable(value: Any, table_name: str | None = None) -> bool:
    """Translate information_schema's ``YES``/``NO`` into a bool.

    Raises:
        CatalogError: For any other value.
    """
    text = _as_text(value)
    if text == "YES":
        return True
    if text == "NO":
        return False
    raise CatalogError(f"Unexpected value for is_nullable: {text!r}", table_name)


def record_from_row(row: Mapping[str, Any]) -> ColumnRecord:
    """Build a :class:`ColumnRecord` from one catalog row."""
    table_name = _as_text(row["table_name"])
    return ColumnRecord(
        table_name=table_name,
        column_name=_as_text(row["column_name"]),
        nullable=parse_nullable(row["is_nullable"], table_name),
        native_type=_as_text(row["data_type"]),
    )


async def _fetch_postgres(connection_target: str, schema: str) -> list[Mapping[str, Any]]:
    try:
        conn = await asyncpg.connect(dsn=connection_target)
    except (
        OSError,
        asyncio.TimeoutError,
        ValueError,
        asyncpg.PostgresError,
        asyncpg.InterfaceError,
    ) as e:
        raise DatabaseConnectionError(
            f"Unable to connect to database: {e}", _redact(connection_target)
        ) from e

    try:
        return await conn.fetch(POSTGRES_COLUMNS_QUERY, schema)
    except (
        OSError,
        asyncio.TimeoutError,
        asyncpg.PostgresError,
        asyncpg.InterfaceError,
    ) as e:
        raise DatabaseConnectionError(
            f"Column catalog query failed: {e}", _redact(connection_target)
        ) from e
    finally:
        await conn.close()


def _mysql_connect_kwargs(parts: SplitResult) -> dict[str, Any]:
    try:
        port = parts.port or DEFAULT_MYSQL_PORT
    except ValueError as e:
        raise DatabaseConnectionError(f"Invalid port in connection string: {e}") from e

    if not parts.hostname:
        raise DatabaseConnectionError("Connection string is missing a host")

    kwargs: dict[str, Any] = {
        "host": parts.hostname,
        "port": port,
        "user": unquote(parts.username) if parts.username else None,
        "password": unquote(parts.password) if parts.password else "",
        "autocommit": True,
    }
    database = parts.path.lstrip("/")
    if database:
        kwargs["db"] = unquote(database)
    return kwargs


async def _fetch_mysql(connection_target: str, schema: str) -> list[Mapping[str, Any]]:
    try:
        parts = urlsplit(connection_target)
    except ValueError as e:
        raise DatabaseConnectionError(f"Malformed connection string: {e}") from e

    kwargs = _mysql_connect_kwargs(parts)
    try:
        conn = await aiomysql.connect(**kwargs)
    except (OSError, asyncio.TimeoutError, aiomysql.Error) as e:
        raise DatabaseConnectionError(
            f"Unable to connect to database: {e}", _redact(connection_target)
        ) from e

    try:
        async with conn.cursor(aiomysql.DictCursor) as cursor:
            await cursor.execute(MYSQL_COLUMNS_QUERY, (schema,))
            return list(await cursor.fetchall())
    except (OSError, asyncio.TimeoutError, aiomysql.Error) as e:
        raise DatabaseConnectionError(
            f"Column catalog query failed: {e}", _redact(connection_target)
        ) from e
    finally:
        conn.close()


async def fetch_columns_async(connection_target: str, schema: str) -> list[ColumnRecord]:
    """Fetch every column of ``schema`` from the database's catalog.

    Args:
        connection_target: ``postgres://`` or ``mysql://`` connection string.
        schema: Schema (MySQL: database) to introspect.

    Returns:
        Column records ordered by table name, then column name.

    Raises:
        UnsupportedDialectError: If the connection string names another database.
        DatabaseConnectionError: If the database cannot be reached or queried.
        CatalogError: If a catalog row cannot be interpreted.
    """
    dialect = detect_dialect(connection_target)
    logger.debug("Introspecting schema %r via %s", schema, dialect.value)

    if dialect is Dialect.POSTGRES:
        rows = await _fetch_postgres(connection_target, schema)
    else:
        rows = await _fetch_mysql(connection_target, schema)

    records = [record_from_row(row) for row in rows]
    logger.debug("Fetched %d column(s) from schema %r", len(records), schema)
    return records


def fetch_columns(connection_target: str, schema: str) -> list[ColumnRecord]:
    """Synchronous wrapper around :func:`fetch_columns_async`.

    Must not be called from inside a running event loop.
    """
    return asyncio.run(fetch_columns_async(connection_target, schema))
