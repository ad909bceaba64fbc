"""String-in, string-out conversions used by the editor views.

Every function here is pure and never raises on malformed content; empty or
``None`` input yields an empty string.
"""

from __future__ import annotations

from .markdown_parser import parse_markdown
from .markdown_writer import render_markdown
from .markup_parser import parse_markup
from .markup_scanner import EntitySpan, TextSpan, decode_entity, scan_markup
from .markup_writer import render_markup


def markup_to_markdown(markup: str | None) -> str:
    """Convert editor markup to the extended Markdown dialect."""
    if not markup:
        return ""
    return render_markdown(parse_markup(markup))


def markdown_to_markup(markdown: str | None) -> str:
    """Convert extended Markdown to canonical editor markup."""
    if not markdown:
        return ""
    return render_markup(parse_markdown(markdown))


def plain_text(markup: str | None) -> str:
    """Visible text of ``markup``: tags dropped, every entity decoded."""
    parts: list[str] = []
    for span in scan_markup(markup or ""):
        if isinstance(span, TextSpan):
            parts.append(span.raw)
        elif isinstance(span, EntitySpan):
            parts.append(decode_entity(span))
    return "".join(parts)


html_to_markdown = markup_to_markdown
markdown_to_html = markdown_to_markup
