from __future__ import annotations

import logging
import re
from typing import List

from .markup_scanner import SKIP_CONTENT_TAGS, EntitySpan, TagSpan, TextSpan, scan_markup
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
    ListItem,
    Paragraph,
    Underline,
    is_blank,
)

logger = logging.getLogger(__name__)

HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}
PARAGRAPH_TAGS = frozenset(("p", "div"))
LIST_TAGS = frozenset(("ul", "ol"))
# Block containers outside the supported subset; their content becomes a paragraph.
FOREIGN_BLOCK_TAGS = frozenset(
    (
        "address",
        "article",
        "aside",
        "blockquote",
        "dd",
        "dl",
        "dt",
        "figcaption",
        "figure",
        "footer",
        "header",
        "main",
        "nav",
        "pre",
        "section",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "hr",
    )
)

_INLINE_TYPES = {
    "b": Bold,
    "strong": Bold,
    "em": Italic,
    "i": Italic,
    "u": Underline,
}

_TEXT_ALIGN = re.compile(r"text-align\s*:\s*(left|right|center|justify)", re.IGNORECASE)
_WHITESPACE_RUN = re.compile(r"[ \t\r\n\f]+")


def parse_markup(markup: str | None) -> Document:
    """Parse editor markup into a Document.

    Never raises: unknown tags are demoted or ignored and unclosed tags are
    closed at the end of input.
    """
    builder = _DocumentBuilder()
    for span in scan_markup(markup or ""):
        if isinstance(span, TagSpan):
            builder.tag(span)
        elif isinstance(span, EntitySpan):
            builder.text(span.raw, collapse=False)
        elif isinstance(span, TextSpan):
            builder.text(span.raw)
    return builder.finish()


def parse_alignment(style: str | None) -> str:
    if not style:
        return "left"
    match = _TEXT_ALIGN.search(style)
    return match.group(1).lower() if match else "left"


class _DocumentBuilder:
    """Incremental block builder fed by scanner spans."""

    def __init__(self) -> None:
        self.blocks: List[Block] = []
        self.block: Block | None = None
        self.inline_stack: List[InlineElement] = []
        self.root: List[InlineElement] | None = None
        self.list_depth = 0
        self.skip_tag: str | None = None

    # -- spans -----------------------------------------------------------------

    def tag(self, span: TagSpan) -> None:
        name = span.name
        if self.skip_tag is not None:
            if span.closing and name == self.skip_tag:
                self.skip_tag = None
            return
        if name in SKIP_CONTENT_TAGS and not span.closing and not span.self_closing:
            self.skip_tag = name
            return
        if name in ("!", "!--"):
            return

        if isinstance(self.block, ListBlock) and self._list_tag(span):
            return
        if name in HEADING_TAGS or name in PARAGRAPH_TAGS or name in FOREIGN_BLOCK_TAGS:
            if isinstance(self.block, ListBlock):
                # Block markup inside a list item stays part of the item.
                if name == "hr":
                    return
                if span.closing:
                    return
                if self.root is not None and self.root:
                    self._append(LineBreak())
                return
            if span.closing or span.self_closing:
                self._close_block()
            else:
                self._open_block(span)
            return
        if name in LIST_TAGS and not span.closing:
            self._close_block()
            self.block = ListBlock(items=[], ordered=name == "ol")
            self.list_depth = 1
            self.root = None
            self.inline_stack = []
            return
        if name == "li" and not span.closing:
            # Stray item outside a list: open an implicit unordered list.
            self._close_block()
            self.block = ListBlock(items=[], ordered=False)
            self.list_depth = 1
            self._start_item()
            return
        self._inline_tag(span)

    def text(self, raw: str, collapse: bool = True) -> None:
        if self.skip_tag is not None:
            return
        value = _WHITESPACE_RUN.sub(" ", raw) if collapse else raw
        if self.block is None:
            if not value.strip():
                return
            self._open_implicit_paragraph()
        elif isinstance(self.block, ListBlock) and self.root is None:
            if not value.strip():
                return
            self._start_item()
        self._append(InlineText(value))

    def finish(self) -> Document:
        self._close_block()
        return Document(blocks=self.blocks)

    # -- blocks ----------------------------------------------------------------

    def _open_block(self, span: TagSpan) -> None:
        self._close_block()
        align = parse_alignment(span.attributes.get("style"))
        if span.name in HEADING_TAGS:
            self.block = Heading(level=HEADING_TAGS[span.name], inline=[], align=align)
        else:
            if span.name in FOREIGN_BLOCK_TAGS:
                logger.debug("Demoting <%s> to a paragraph", span.name)
                align = "left"
            self.block = Paragraph(inline=[], align=align)
        self.root = self.block.inline
        self.inline_stack = []

    def _open_implicit_paragraph(self) -> None:
        self.block = Paragraph(inline=[])
        self.root = self.block.inline
        self.inline_stack = []

    def _close_block(self) -> None:
        if self.block is None:
            return
        block = self.block
        self.block = None
        self.root = None
        self.inline_stack = []
        self.list_depth = 0
        if isinstance(block, ListBlock):
            for item in block.items:
                _trim_edges(item.inline)
            block.items = [item for item in block.items if not is_blank(item.inline)]
            if block.items:
                self.blocks.append(block)
        elif isinstance(block, (Heading, Paragraph)):
            _trim_edges(block.inline)
            if not is_blank(block.inline):
                self.blocks.append(block)

    def _list_tag(self, span: TagSpan) -> bool:
        """Handle list structure while a list block is open."""
        name = span.name
        if name in LIST_TAGS:
            if span.closing:
                self.list_depth -= 1
                if self.list_depth <= 0:
                    self._close_block()
            else:
                self.list_depth += 1
                self.root = None
                self.inline_stack = []
            return True
        if name == "li":
            if span.closing:
                self.root = None
                self.inline_stack = []
            else:
                self._start_item()
            return True
        return False

    def _start_item(self) -> None:
        assert isinstance(self.block, ListBlock)
        item = ListItem(inline=[])
        self.block.items.append(item)
        self.root = item.inline
        self.inline_stack = []

    # -- inline ----------------------------------------------------------------

    def _inline_tag(self, span: TagSpan) -> None:
        name = span.name
        if span.closing:
            self._close_inline(name)
            return
        node: InlineElement | None = None
        container = False
        if name in _INLINE_TYPES:
            node = _INLINE_TYPES[name]()
            container = True
        elif name == "a" and "href" in span.attributes:
            node = InlineLink(url=span.attributes["href"])
            container = True
        elif name == "img":
            node = InlineImage(src=span.attributes.get("src", ""), alt=span.attributes.get("alt", ""))
        elif name == "br":
            node = LineBreak()
        if node is None:
            return
        if self.block is None:
            self._open_implicit_paragraph()
        elif isinstance(self.block, ListBlock) and self.root is None:
            self._start_item()
        if container and not span.self_closing and self._continue_previous(node):
            return
        self._append(node)
        if container and not span.self_closing:
            self.inline_stack.append(node)

    def _close_inline(self, name: str) -> None:
        if name == "a":
            wanted: tuple[type, ...] = (InlineLink,)
        elif name in _INLINE_TYPES:
            wanted = (_INLINE_TYPES[name],)
        else:
            return
        for index in range(len(self.inline_stack) - 1, -1, -1):
            if isinstance(self.inline_stack[index], wanted):
                del self.inline_stack[index:]
                return

    def _continue_previous(self, node: InlineElement) -> bool:
        """Reopen the previous sibling when it carries the same formatting.

        Pasted markup often splits one run into ``<b>a</b><b>b</b>``.
        """
        children = self._children()
        if not children or type(children[-1]) is not type(node):
            return False
        previous = children[-1]
        if isinstance(node, InlineLink) and previous.url != node.url:  # type: ignore[attr-defined]
            return False
        self.inline_stack.append(previous)
        return True

    def _children(self) -> List[InlineElement]:
        if self.inline_stack:
            return self.inline_stack[-1].children  # type: ignore[attr-defined]
        assert self.root is not None
        return self.root

    def _append(self, node: InlineElement) -> None:
        children = self._children()
        if isinstance(node, InlineText) and children and isinstance(children[-1], InlineText):
            children[-1] = InlineText(children[-1].text + node.text)
        else:
            children.append(node)


def _trim_edges(inlines: List[InlineElement]) -> None:
    """Strip whitespace at the very start and end of a block's text."""
    if inlines and isinstance(inlines[0], InlineText):
        inlines[0] = InlineText(inlines[0].text.lstrip())
        if not inlines[0].text:
            inlines.pop(0)
    if inlines and isinstance(inlines[-1], InlineText):
        inlines[-1] = InlineText(inlines[-1].text.rstrip())
        if not inlines[-1].text:
            inlines.pop()
