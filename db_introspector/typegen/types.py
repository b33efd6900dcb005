"""Data model and native type classification for TypedDict generation."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Final


class MinimumVersion(enum.Enum):
    """Oldest Python grammar the generated module must remain valid under."""

    PY36 = "3.6"
    PY38 = "3.8"
    PY310 = "3.10"

    @property
    def is_oldest(self) -> bool:
        # Class-based TypedDict syntax is not available before 3.8
        return self is MinimumVersion.PY36

    @property
    def supports_union_operator(self) -> bool:
        return self is MinimumVersion.PY310


DEFAULT_MINIMUM_VERSION: Final[MinimumVersion] = MinimumVersion.PY310


class PrimitiveKind(enum.Enum):
    """Closed set of target-side types a native column type maps onto."""

    STRING = "String"
    INTEGER = "Integer"
    LONG = "Long"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    DATE = "Date"
    BINARY = "Binary"
    ANY = "Any"

    @property
    def python_type(self) -> str:
        return PYTHON_TYPES[self]


# Canonical Python spelling for each primitive kind
PYTHON_TYPES: Final[dict[PrimitiveKind, str]] = {
    PrimitiveKind.STRING: "str",
    PrimitiveKind.INTEGER: "int",
    PrimitiveKind.LONG: "int",
    PrimitiveKind.FLOAT: "float",
    PrimitiveKind.BOOLEAN: "bool",
    PrimitiveKind.DATETIME: "datetime.datetime",
    PrimitiveKind.DATE: "datetime.date",
    PrimitiveKind.BINARY: "bytes",
    PrimitiveKind.ANY: "Any",
}


@dataclass(frozen=True, slots=True)
class TypeRule:
    """Maps one native catalog type name onto a primitive kind."""

    native_type: str
    kind: PrimitiveKind
    dialect: str


def _rules(dialect: str, kind: PrimitiveKind, *native_types: str) -> list[TypeRule]:
    return [TypeRule(native, kind, dialect) for native in native_types]


# Evaluated top to bottom, first match wins. MySQL rules take priority over
# PostgreSQL rules when both dialects spell a type the same way.
TYPE_RULES: Final[tuple[TypeRule, ...]] = (
    # mysql
    *_rules(
        "mysql",
        PrimitiveKind.STRING,
        "varchar",
        "char",
        "text",
        "tinytext",
        "mediumtext",
        "longtext",
        "json",
        "enum",
        "set",
    ),
    *_rules("mysql", PrimitiveKind.INTEGER, "smallint", "mediumint", "int"),
    *_rules("mysql", PrimitiveKind.LONG, "bigint"),
    *_rules("mysql", PrimitiveKind.FLOAT, "float", "double", "decimal"),
    # tinyint(1) is how MySQL stores BOOLEAN; information_schema drops the width
    *_rules("mysql", PrimitiveKind.BOOLEAN, "tinyint"),
    *_rules("mysql", PrimitiveKind.DATETIME, "datetime", "timestamp"),
    *_rules("mysql", PrimitiveKind.DATE, "date"),
    *_rules(
        "mysql",
        PrimitiveKind.BINARY,
        "binary",
        "varbinary",
        "blob",
        "tinyblob",
        "mediumblob",
        "longblob",
    ),
    # postgres
    *_rules(
        "postgres",
        PrimitiveKind.STRING,
        "character varying",
        "character",
        "text",
        "jsonb",
        "json",
        # user-defined types are typically enums
        "USER-DEFINED",
    ),
    *_rules("postgres", PrimitiveKind.INTEGER, "smallint", "integer"),
    *_rules("postgres", PrimitiveKind.LONG, "bigint"),
    *_rules("postgres", PrimitiveKind.FLOAT, "real", "double precision", "numeric"),
    *_rules("postgres", PrimitiveKind.BOOLEAN, "boolean"),
    *_rules(
        "postgres",
        PrimitiveKind.DATETIME,
        "timestamp with time zone",
        "timestamp without time zone",
    ),
    *_rules("postgres", PrimitiveKind.DATE, "date"),
    *_rules("postgres", PrimitiveKind.BINARY, "bytea"),
)


def classify(native_type: str) -> PrimitiveKind:
    """Map a native catalog type name onto a :class:`PrimitiveKind`.

    Matching is exact and case-sensitive. Unknown names fall back to
    ``PrimitiveKind.ANY``; this function never raises.
    """
    for rule in TYPE_RULES:
        if rule.native_type == native_type:
            return rule.kind
    return PrimitiveKind.ANY


@dataclass(frozen=True, slots=True)
class ColumnRecord:
    """One row of the column catalog: a single column of a single table."""

    table_name: str
    column_name: str
    nullable: bool
    native_type: str


@dataclass(frozen=True, slots=True)
class Property:
    """A TypedDict key with its classified value type."""

    name: str
    nullable: bool
    kind: PrimitiveKind

    @classmethod
    def from_column(cls, record: ColumnRecord) -> Property:
        return cls(
            name=record.column_name,
            nullable=record.nullable,
            kind=classify(record.native_type),
        )

    def annotation(self, minimum_version: MinimumVersion) -> str:
        """Render the value type, wrapping nullable columns for the target version."""
        base = self.kind.python_type
        if not self.nullable:
            return base
        if minimum_version.supports_union_operator:
            return f"{base} | None"
        return f"Optional[{base}]"


@dataclass(frozen=True, slots=True)
class Declaration:
    """One generated TypedDict, corresponding to one database table."""

    identifier: str
    properties: tuple[Property, ...] = field(default_factory=tuple)


class SyntaxForm(enum.Enum):
    """The two mutually exclusive ways a TypedDict can be declared."""

    BLOCK = "block"
    CONSTRUCTOR_CALL = "constructor_call"


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Formatting parameters threaded through every rendering call."""

    minimum_version: MinimumVersion = DEFAULT_MINIMUM_VERSION
    forced: bool = False
