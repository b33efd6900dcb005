"""Generate Python TypedDict declarations from a MySQL or Postgres schema."""

__version__ = "0.1.0"
