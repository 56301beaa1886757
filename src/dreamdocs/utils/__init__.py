from .html import escape_html
from .redact import redact
from .slug import slugify

__all__ = [
    "escape_html",
    "redact",
    "slugify",
]
