"""TypedDict Generator - Renders Python TypedDict declarations from a column catalog."""

from .types import (
    ColumnRecord,
    Declaration,
    MinimumVersion,
    PrimitiveKind,
    Property,
    RenderConfig,
    SyntaxForm,
    TYPE_RULES,
    classify,
)
from .main import (
    GeneratorContext,
    generate,
    generate_source,
    group,
    main,
    render,
    render_module,
    requires_alternate_syntax,
)

__all__ = [
    "ColumnRecord",
    "Declaration",
    "MinimumVersion",
    "PrimitiveKind",
    "Property",
    "RenderConfig",
    "SyntaxForm",
    "TYPE_RULES",
    "classify",
    "GeneratorContext",
    "generate",
    "generate_source",
    "group",
    "main",
    "render",
    "render_module",
    "requires_alternate_syntax",
]
