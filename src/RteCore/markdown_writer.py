"""Serialize a Document to the extended Markdown dialect.

Dialect extensions (not understood by other Markdown tools):

* ``==text==`` underline
* ``{>}``, ``{^}``, ``{=}`` at line start: right, center, justify alignment
"""

from __future__ import annotations

import logging
import re
import string
import unicodedata
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

logger = logging.getLogger(__name__)

ALIGN_MARKERS = {"right": "{>}", "center": "{^}", "justify": "{=}"}

_DECODED_ENTITIES = {"nbsp": " ", "amp": "&", "lt": "<", "gt": ">", "quot": '"'}
_ENTITY_PASS = re.compile(r"&(nbsp|amp|lt|gt|quot);")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_SPECIAL_CHARS = re.compile(r"[\\*\[\]]|(?<![A-Za-z0-9])_|_(?![A-Za-z0-9])|=(?==)|(?<==)=")
# Text that would be read back as block syntax when it starts a line.
_LINE_START_SYNTAX = re.compile(r"^([ \t]*)(#{1,6}(?=[ \t]|$)|[-+](?=[ \t])|\d+(?=[.)][ \t])|\{(?=[>^=]\}))", re.MULTILINE)
# A trailing `#` run would be dropped as an ATX closing sequence.
_HEADING_CLOSER = re.compile(r"(^|[ \t])(#+)$")

_EMPHASIS = (
    (Bold, "**"),
    (Italic, "*"),
    (Underline, "=="),
)


def render_markdown(document: Document) -> str:
    chunks = [_render_block(block) for block in document.blocks]
    markdown = "\n\n".join(chunk for chunk in chunks if chunk)
    return _EXCESS_NEWLINES.sub("\n\n", markdown).strip()


def _render_block(block: Block) -> str:
    if isinstance(block, Heading):
        text = render_inline(block.inline, single_line=True).strip()
        if not text:
            return ""
        text = _HEADING_CLOSER.sub(r"\1\\\2", text)
        return f"{ALIGN_MARKERS.get(block.align, '')}{'#' * block.level} {text}"
    if isinstance(block, Paragraph):
        text = _strip_lines(_escape_line_starts(render_inline(block.inline)))
        if not text:
            return ""
        return f"{ALIGN_MARKERS.get(block.align, '')}{text}"
    if isinstance(block, ListBlock):
        lines: list[str] = []
        for item in block.items:
            text = _strip_lines(_escape_line_starts(render_inline(item.inline)))
            if not text:
                continue
            marker = f"{len(lines) + 1}." if block.ordered else "-"
            lines.append(f"{marker} {text}")
        return "\n".join(lines)
    return ""


def render_inline(
    inlines: Iterable[InlineElement],
    single_line: bool = False,
    before: str = "",
    after: str = "",
) -> str:
    """Render inline nodes.

    ``before`` and ``after`` are the characters just outside this run; they
    decide whether emphasis markers at its edges can open or close.
    """
    inlines = list(inlines)
    parts: List[str] = []
    for index, inline in enumerate(inlines):
        if isinstance(inline, InlineText):
            parts.append(_escape_text(decode_entities(inline.text)))
        elif isinstance(inline, LineBreak):
            parts.append(" " if single_line else "\n")
        elif isinstance(inline, InlineImage):
            parts.append(f"![{inline.alt}]({_destination(inline.src)})")
        elif isinstance(inline, InlineLink):
            label = render_inline(inline.children, single_line=True).strip()
            if parts and parts[-1].endswith("!"):
                # "!" right before "[" would turn the link into an image
                parts[-1] = parts[-1][:-1] + "\\!"
            parts.append(f"[{label}]({_destination(inline.url)})")
        else:
            for node_type, marker in _EMPHASIS:
                if isinstance(inline, node_type):
                    preceding = "".join(parts) or before
                    following = after
                    if index + 1 < len(inlines):
                        following = render_inline(inlines[index + 1 : index + 2], single_line) or after
                    parts.append(_wrap(inline, marker, single_line, preceding, following))
                    break
    return "".join(parts)


def decode_entities(text: str) -> str:
    """Decode the five entities the editor emits; ``&nbsp;`` becomes a space."""
    return _ENTITY_PASS.sub(lambda m: _DECODED_ENTITIES[m.group(1)], text)


def _wrap(inline: InlineElement, marker: str, single_line: bool, preceding: str, following: str) -> str:
    """Wrap an emphasis node's content in ``marker``.

    Edge whitespace stays outside the markers. When the markers could not
    open or close where they land, the content is written without them.
    """
    char = marker[0]
    before = preceding.rstrip(char)[-1:]
    after = following.lstrip(char)[:1]
    inner = render_inline(inline.children, single_line, before, after)  # type: ignore[attr-defined]
    core = inner.strip()
    if not core:
        return inner
    leading = inner[: len(inner) - len(inner.lstrip())]
    trailing = inner[len(inner.rstrip()) :]
    can_open = _left_flanking(leading[-1:] or before, core.lstrip(char)[:1])
    can_close = _right_flanking(core.rstrip(char)[-1:], trailing[:1] or after)
    if not (can_open and can_close):
        logger.debug("Dropping %s around %r: markers would not pair", marker, core)
        return inner
    return f"{leading}{marker}{core}{marker}{trailing}"


def _left_flanking(before: str, after: str) -> bool:
    if not after or after.isspace():
        return False
    if _is_punctuation(after):
        return not before or before.isspace() or _is_punctuation(before)
    return True


def _right_flanking(before: str, after: str) -> bool:
    if not before or before.isspace():
        return False
    if _is_punctuation(before):
        return not after or after.isspace() or _is_punctuation(after)
    return True


def _is_punctuation(char: str) -> bool:
    return char in string.punctuation or unicodedata.category(char).startswith("P")


def _destination(url: str) -> str:
    if re.search(r"[\s()]", url):
        return f"<{url}>"
    return url


def _escape_text(text: str) -> str:
    return _SPECIAL_CHARS.sub(lambda m: "\\" + m.group(0), text)


def _escape_line_starts(text: str) -> str:
    def escape(match: re.Match) -> str:
        indent, syntax = match.group(1), match.group(2)
        if syntax.isdigit():
            return f"{indent}{syntax}\\"
        return f"{indent}\\{syntax}"

    return _LINE_START_SYNTAX.sub(escape, text)


def _strip_lines(text: str) -> str:
    return "\n".join(line.strip() for line in text.strip().split("\n"))
