"""Entity/tag scanner for editor markup.

Classifies a markup string into tag, text and entity spans without building
a tree. Malformed constructs are passed through as literal text so callers
never see an exception for bad input.
"""

from __future__ import annotations

import html as html_module
import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Union

logger = logging.getLogger(__name__)

VOID_TAGS = frozenset(("area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"))
# Elements whose content is opaque to the editor.
SKIP_CONTENT_TAGS = frozenset(("script", "style", "noscript", "template", "head", "title"))

_TAG_NAME = re.compile(r"(/?)([A-Za-z][A-Za-z0-9:-]*)")
_ATTRIBUTE = re.compile(
    r"""([^\s"'<>/=]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?""",
)
_ENTITY = re.compile(r"&(#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{0,31});")


@dataclass(frozen=True)
class TagSpan:
    name: str
    attributes: dict[str, str] = field(default_factory=dict, compare=False)
    closing: bool = False
    self_closing: bool = False
    raw: str = ""


@dataclass(frozen=True)
class TextSpan:
    raw: str


@dataclass(frozen=True)
class EntitySpan:
    name: str
    raw: str


Span = Union[TagSpan, TextSpan, EntitySpan]


def scan_markup(markup: str | None) -> Iterator[Span]:
    """Yield classified spans for ``markup`` in document order.

    Adjacent literal characters are merged into a single ``TextSpan``.
    Concatenating ``raw`` of every span reproduces the input exactly.
    """
    if not markup:
        return
    text: list[str] = []
    i = 0
    n = len(markup)
    while i < n:
        char = markup[i]
        if char == "<":
            tag, end = _read_tag(markup, i)
            if tag is None:
                logger.debug("Unparseable tag at offset %d, keeping '<' as text", i)
                text.append("<")
                i += 1
                continue
            if text:
                yield TextSpan("".join(text))
                text = []
            yield tag
            i = end
        elif char == "&":
            match = _ENTITY.match(markup, i)
            if match is None:
                text.append("&")
                i += 1
                continue
            if text:
                yield TextSpan("".join(text))
                text = []
            yield EntitySpan(name=match.group(1), raw=match.group(0))
            i = match.end()
        else:
            next_special = _next_special(markup, i)
            text.append(markup[i:next_special])
            i = next_special
    if text:
        yield TextSpan("".join(text))


def decode_entity(span: EntitySpan) -> str:
    """Decode any entity reference; ``&nbsp;`` becomes a plain space."""
    return html_module.unescape(span.raw).replace("\u00a0", " ")


def _next_special(markup: str, start: int) -> int:
    lt = markup.find("<", start)
    amp = markup.find("&", start)
    candidates = [pos for pos in (lt, amp) if pos != -1]
    return min(candidates) if candidates else len(markup)


def _read_tag(markup: str, start: int) -> tuple[TagSpan | None, int]:
    """Read one tag starting at ``start`` (which holds ``<``).

    Returns ``(None, start)`` when no well-formed tag begins here.
    """
    if markup.startswith("<!--", start):
        close = markup.find("-->", start + 4)
        if close == -1:
            return None, start
        end = close + 3
        return TagSpan(name="!--", self_closing=True, raw=markup[start:end]), end
    if markup.startswith("<!", start) or markup.startswith("<?", start):
        close = markup.find(">", start + 2)
        if close == -1:
            return None, start
        end = close + 1
        return TagSpan(name="!", self_closing=True, raw=markup[start:end]), end

    name_match = _TAG_NAME.match(markup, start + 1)
    if name_match is None:
        return None, start
    end = _find_tag_end(markup, name_match.end())
    if end == -1:
        return None, start

    closing = bool(name_match.group(1))
    name = name_match.group(2).lower()
    body = markup[name_match.end() : end - 1]
    explicit_self_close = body.rstrip().endswith("/")
    attributes = {} if closing else _parse_attributes(body)
    return (
        TagSpan(
            name=name,
            attributes=attributes,
            closing=closing,
            self_closing=not closing and (explicit_self_close or name in VOID_TAGS),
            raw=markup[start:end],
        ),
        end,
    )


def _find_tag_end(markup: str, pos: int) -> int:
    """Index just past the closing ``>``, skipping quoted attribute values."""
    quote: str | None = None
    previous = ""
    n = len(markup)
    while pos < n:
        char = markup[pos]
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            # Only an attribute value opens a quote: it must follow '='.
            if previous == "=":
                quote = char
        elif char == ">":
            return pos + 1
        elif char == "<":
            return -1
        if not char.isspace():
            previous = char
        pos += 1
    return -1


def _parse_attributes(body: str) -> dict[str, str]:
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE.finditer(body):
        name = match.group(1).lower()
        value = next((group for group in match.group(2, 3, 4) if group is not None), "")
        attributes.setdefault(name, html_module.unescape(value))
    return attributes
