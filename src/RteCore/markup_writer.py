from __future__ import annotations

import re
from typing import Iterable, List

from .model import (
    Block,
    Bold,
    Document,
    Heading,
    InlineElement,
    InlineImage,
    InlineLink,
    InlineText,
    Italic,
    LineBreak,
    ListBlock,
    Paragraph,
    Underline,
)

_BARE_AMPERSAND = re.compile(r"&(?!#[0-9]+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)")

_EMPHASIS_TAGS = (
    (Bold, "strong"),
    (Italic, "em"),
    (Underline, "u"),
)


def render_markup(document: Document) -> str:
    return "".join(_render_block(block) for block in document.blocks)


def _render_block(block: Block) -> str:
    if isinstance(block, Heading):
        tag = f"h{min(max(block.level, 1), 6)}"
        return f"<{tag}{_align_attribute(block.align)}>{render_inline(block.inline)}</{tag}>"
    if isinstance(block, Paragraph):
        return f"<p{_align_attribute(block.align)}>{render_inline(block.inline)}</p>"
    if isinstance(block, ListBlock):
        tag = "ol" if block.ordered else "ul"
        items = "".join(f"<li>{render_inline(item.inline)}</li>" for item in block.items)
        return f"<{tag}>{items}</{tag}>"
    return ""


def render_inline(inlines: Iterable[InlineElement]) -> str:
    parts: List[str] = []
    for inline in inlines:
        if isinstance(inline, InlineText):
            parts.append(escape_text(inline.text))
        elif isinstance(inline, LineBreak):
            parts.append("<br>")
        elif isinstance(inline, InlineImage):
            parts.append(f'<img src="{escape_attribute(inline.src)}" alt="{escape_attribute(inline.alt)}" />')
        elif isinstance(inline, InlineLink):
            parts.append(f'<a href="{escape_attribute(inline.url)}">{render_inline(inline.children)}</a>')
        else:
            for node_type, tag in _EMPHASIS_TAGS:
                if isinstance(inline, node_type):
                    parts.append(f"<{tag}>{render_inline(inline.children)}</{tag}>")
                    break
    return "".join(parts)


def escape_text(text: str) -> str:
    """Escape markup-significant characters, leaving entity references intact."""
    text = _BARE_AMPERSAND.sub("&amp;", text)
    return text.replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(value: str) -> str:
    return escape_text(value).replace('"', "&quot;")


def _align_attribute(align: str) -> str:
    if not align or align == "left":
        return ""
    return f' style="text-align: {align}"'
