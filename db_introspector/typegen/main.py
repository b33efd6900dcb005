"""
TypedDict Generator - Renders Python TypedDict declarations from a column catalog.

This module turns a flat stream of catalog rows into one importable Python
module with:
- One TypedDict per table, sorted by name
- Class syntax where the target Python version and the column names allow it
- The functional ``TypedDict('Name', {...})`` syntax everywhere else
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from functools import lru_cache
from operator import attrgetter
from pathlib import Path
from typing import Final, Iterable, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..shared import (
    EmptySchemaError,
    IntrospectorError,
    is_reserved_name,
    is_valid_field_name,
    starts_with_digit,
    to_pascal_case,
)
from .types import (
    ColumnRecord,
    Declaration,
    MinimumVersion,
    Property,
    RenderConfig,
    SyntaxForm,
)

logger = logging.getLogger(__name__)

# Template configuration
TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"

DECLARATION_SEPARATOR: Final[str] = "\n\n"


@dataclass(frozen=True, slots=True)
class PropertyView:
    """Pre-computed strings for one property line of a template."""

    name: str
    key_literal: str
    annotation: str


@dataclass
class GeneratorContext:
    """Context for code generation with cached resources."""

    template_env: Environment = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
            auto_reload=False,  # Disable auto-reload for performance
        )
        # Pre-compile templates
        self._class_template = self.template_env.get_template("typed_dict_class.py.j2")
        self._call_template = self.template_env.get_template("typed_dict_call.py.j2")
        self._module_template = self.template_env.get_template("module.py.j2")

    @property
    def class_template(self):
        return self._class_template

    @property
    def call_template(self):
        return self._call_template

    @property
    def module_template(self):
        return self._module_template


@lru_cache(maxsize=1)
def _default_context() -> GeneratorContext:
    return GeneratorContext()


def group(records: Iterable[ColumnRecord]) -> list[Declaration]:
    """Group catalog rows by table into declarations sorted by identifier.

    Properties keep the order in which their rows were encountered.
    """
    pending: dict[str, tuple[str, list[Property]]] = {}

    for record in records:
        entry = pending.get(record.table_name)
        if entry is None:
            entry = (to_pascal_case(record.table_name), [])
            pending[record.table_name] = entry
        entry[1].append(Property.from_column(record))

    declarations = [
        Declaration(identifier=identifier, properties=tuple(properties))
        for identifier, properties in pending.values()
    ]
    return sorted(declarations, key=attrgetter("identifier"))


def is_renderable(declaration: Declaration) -> bool:
    """Return False for declarations that must be left out of the output.

    System tables carry a ``$`` in their name, and a leading digit cannot
    start a Python identifier. Keywords (``none`` becomes ``None``) and names
    with other punctuation cannot be bound either.
    """
    identifier = declaration.identifier
    if not identifier:
        return False
    if "$" in identifier:
        return False
    if starts_with_digit(identifier):
        return False
    if is_reserved_name(identifier):
        return False
    return identifier.isidentifier()


def requires_alternate_syntax(
    declaration: Declaration,
    forced: bool,
    minimum_version: MinimumVersion,
) -> bool:
    """Decide whether a declaration must use the ``TypedDict(...)`` call form.

    The decision covers the whole declaration: a single property that cannot
    be written as a class-body annotation switches every property over.
    """
    if forced or minimum_version.is_oldest:
        return True
    return any(not is_valid_field_name(prop.name) for prop in declaration.properties)


def resolve_syntax_form(declaration: Declaration, config: RenderConfig) -> SyntaxForm:
    if requires_alternate_syntax(declaration, config.forced, config.minimum_version):
        return SyntaxForm.CONSTRUCTOR_CALL
    return SyntaxForm.BLOCK


def _property_views(
    declaration: Declaration,
    minimum_version: MinimumVersion,
) -> list[PropertyView]:
    return [
        PropertyView(
            name=prop.name,
            key_literal=repr(prop.name),
            annotation=prop.annotation(minimum_version),
        )
        for prop in declaration.properties
    ]


def render_block(
    declaration: Declaration,
    minimum_version: MinimumVersion,
    ctx: GeneratorContext | None = None,
) -> str:
    """Render ``class Name(TypedDict):`` with one annotation per line."""
    ctx = ctx or _default_context()
    return ctx.class_template.render(
        identifier=declaration.identifier,
        properties=_property_views(declaration, minimum_version),
    )


def render_constructor_call(
    declaration: Declaration,
    minimum_version: MinimumVersion,
    ctx: GeneratorContext | None = None,
) -> str:
    """Render ``Name = TypedDict('Name', {...})``.

    The last key carries no trailing comma and the closing ``})`` is not
    followed by a newline.
    """
    ctx = ctx or _default_context()
    return ctx.call_template.render(
        identifier=declaration.identifier,
        identifier_literal=repr(declaration.identifier),
        properties=_property_views(declaration, minimum_version),
    )


def render(
    declaration: Declaration,
    minimum_version: MinimumVersion,
    use_alternate: bool,
    ctx: GeneratorContext | None = None,
) -> str:
    """Render a single declaration in the requested syntax form."""
    if use_alternate:
        return render_constructor_call(declaration, minimum_version, ctx)
    return render_block(declaration, minimum_version, ctx)


def typing_imports(minimum_version: MinimumVersion) -> list[str]:
    """Names the generated module imports from :mod:`typing`."""
    if minimum_version.supports_union_operator:
        # Nullable columns are spelled ``T | None``, Optional is never used
        return ["Any", "TypedDict"]
    return ["Any", "Optional", "TypedDict"]


def render_module(
    declarations: Iterable[Declaration],
    config: RenderConfig,
    ctx: GeneratorContext | None = None,
) -> str:
    """Assemble the import preamble and every renderable declaration."""
    ctx = ctx or _default_context()
    rendered: list[str] = []

    for declaration in sorted(declarations, key=attrgetter("identifier")):
        if not is_renderable(declaration):
            logger.debug("Skipping table declaration %r", declaration.identifier)
            continue

        form = resolve_syntax_form(declaration, config)
        logger.debug("Rendering %s as %s", declaration.identifier, form.value)
        rendered.append(
            render(
                declaration,
                config.minimum_version,
                form is SyntaxForm.CONSTRUCTOR_CALL,
                ctx,
            )
        )

    return ctx.module_template.render(
        typing_imports=typing_imports(config.minimum_version),
        body=DECLARATION_SEPARATOR.join(rendered),
    )


def generate_source(
    records: Iterable[ColumnRecord],
    config: RenderConfig | None = None,
    ctx: GeneratorContext | None = None,
) -> str:
    """Run the whole pipeline: group catalog rows, then render the module."""
    return render_module(group(records), config or RenderConfig(), ctx)


def write_output(source: str, output_path: Path) -> None:
    """Write generated source verbatim, creating parent directories."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(source, encoding="utf-8")


def generate(
    records: Sequence[ColumnRecord],
    output_path: Path,
    config: RenderConfig | None = None,
) -> int:
    """Render catalog rows into ``output_path``.

    Args:
        records: Catalog rows, ordered by table then column name.
        output_path: File the generated module is written to.
        config: Formatting parameters; defaults to the newest Python tier.

    Returns:
        Number of declarations written.
    """
    config = config or RenderConfig()
    ctx = GeneratorContext()
    declarations = group(records)
    source = render_module(declarations, config, ctx)
    write_output(source, output_path)
    return sum(1 for declaration in declarations if is_renderable(declaration))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="db-introspector",
        description=(
            "Introspect a MySQL or Postgres schema and write a Python module with "
            "one TypedDict per table"
        ),
    )
    parser.add_argument(
        "-c",
        "--connection-string",
        default=None,
        help="Connection string in the format mysql://___ or postgres://___ "
        "(defaults to $DATABASE_URL)",
    )
    parser.add_argument(
        "-s",
        "--schema",
        default=None,
        help="Database schema to introspect",
    )
    parser.add_argument(
        "-o",
        "--output-filename",
        type=Path,
        default=None,
        help="Python source file to write (default: table_types.py)",
    )
    parser.add_argument(
        "-m",
        "--minimum-python-version",
        choices=[version.value for version in MinimumVersion],
        default=None,
        help="Oldest Python version the output must support (default: 3.10)",
    )
    parser.add_argument(
        "-b",
        "--backwards-compat-forced",
        action="store_true",
        default=None,
        help="Use the functional TypedDict syntax for every table",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file providing defaults for the options above",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the generated module instead of writing a file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    # Imported here so rendering stays usable without the database drivers
    from ..catalog import fetch_columns
    from ..config import resolve_config

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = resolve_config(
            {
                "connection_string": args.connection_string,
                "schema": args.schema,
                "output_filename": args.output_filename,
                "minimum_python_version": args.minimum_python_version,
                "backwards_compat_forced": args.backwards_compat_forced,
            },
            config_path=args.config,
        )

        records = fetch_columns(config.connection_string, config.schema)
        if not records:
            raise EmptySchemaError(config.schema)

        if args.stdout:
            sys.stdout.write(generate_source(records, config.render_config))
            return

        count = generate(records, config.output_filename, config.render_config)
        logger.debug("Rendered %d declaration(s)", count)
        print(f"Successfully created {config.output_filename}")
    except (IntrospectorError, OSError) as e:
        raise SystemExit(f"Error: {e}") from e


if __name__ == "__main__":
    main()
