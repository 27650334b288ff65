"""C# source rendering: escaping helpers, templates and the rendering engine."""
from .engine import SourceRenderer, get_renderer, render_source
from .formatting import (
    HELPERS, escape_identifier, escape_namespace, escape_type, escape_xmldoc,
    literal, ref_id,
)

__all__ = [
    "HELPERS",
    "SourceRenderer",
    "escape_identifier",
    "escape_namespace",
    "escape_type",
    "escape_xmldoc",
    "get_renderer",
    "literal",
    "ref_id",
    "render_source",
]
