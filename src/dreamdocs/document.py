"""HTML document assembly.

:func:`build_document` wraps converted content, an optional table of
contents, and theme CSS in a complete HTML5 page ready for the external
paginated renderer.  Theme storage, fonts and colour variables live outside
this package; callers pass the resulting CSS through *styles*.
"""

from __future__ import annotations

import textwrap

from dreamdocs.converter.markdown import highlight_styles
from dreamdocs.utils import escape_html

_BASE_STYLES = """\
    *, *::before, *::after {
      box-sizing: border-box;
    }

    html {
      -webkit-print-color-adjust: exact;
      print-color-adjust: exact;
    }

    body {
      margin: 0;
      padding: 0;
    }"""

# Token colours for the spans emitted by the code highlighter.
_HIGHLIGHT_STYLES = textwrap.indent(highlight_styles("pre code"), "    ")

# After the token colours so the theme's code background wins.
_CODE_STYLES = """\
    pre code {
      display: block;
      overflow-x: auto;
      padding: 1em;
      background: var(--doc-code-bg, #f5f5f5);
    }"""


def build_document(
    title: str,
    content: str,
    toc: str,
    theme_id: str,
    show_toc: bool,
    styles: str = "",
) -> str:
    """Return a complete HTML document.

    Parameters
    ----------
    title:
        Document title; HTML-escaped into ``<title>``.
    content:
        Rendered body HTML.
    toc:
        Table-of-contents markup from
        :func:`~dreamdocs.converter.markdown.render_toc_html`.  Inserted
        before the content only when *show_toc* is set and *toc* is
        non-empty.
    theme_id:
        Theme identifier, recorded on the ``<article>`` element.
    show_toc:
        Whether to include the table of contents.
    styles:
        Theme CSS.  Missing styles contribute nothing.
    """
    toc_markup = toc if show_toc and toc else ""
    theme_styles = styles or ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape_html(title)}</title>
  <style>
{_BASE_STYLES}

    /* Syntax highlighting */
{_HIGHLIGHT_STYLES}

{_CODE_STYLES}

    /* Theme styles */
{theme_styles}
  </style>
</head>
<body>
  <article class="document" data-theme="{escape_html(theme_id)}">
{toc_markup}
{content}
  </article>
</body>
</html>
"""
