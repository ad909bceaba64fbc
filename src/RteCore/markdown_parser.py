from __future__ import annotations

import re
from typing import List, Sequence

from markdown_it import MarkdownIt

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
from .underline_rule import underline_plugin

ALIGN_BY_MARKER = {">": "right", "^": "center", "=": "justify"}

# CommonMark constructs outside the editor dialect stay literal text.
_DISABLED_RULES = [
    "code",
    "fence",
    "blockquote",
    "hr",
    "html_block",
    "lheading",
    "reference",
    "backticks",
    "html_inline",
    "autolink",
    "entity",
]

_ALIGN_PREFIX = re.compile(r"^\{([>^=])\}")
_LIST_LINE = re.compile(r"^[ \t]*(?:[-*+]|\d{1,9}[.)])(?:[ \t]|$)")

_CONTAINERS = {
    "strong_open": Bold,
    "em_open": Italic,
    "mark_open": Underline,
}
_CLOSERS = {
    "strong_close": Bold,
    "em_close": Italic,
    "mark_close": Underline,
    "link_close": InlineLink,
}


def build_parser() -> MarkdownIt:
    return MarkdownIt("commonmark", {"html": False}).use(underline_plugin).disable(_DISABLED_RULES)


def parse_markdown(text: str | None) -> Document:
    source, alignments = _extract_alignment(text or "")
    tokens = build_parser().parse(source)
    lines = source.split("\n")
    blocks = _parse_blocks(tokens, alignments, lines)
    return Document(blocks=blocks)


def _extract_alignment(text: str) -> tuple[str, dict[int, str]]:
    """Strip line-leading alignment markers, remembering the line they were on.

    A marked line is forced to start a new block by inserting a blank line
    before it when it would otherwise continue the previous paragraph.
    """
    lines: list[str] = []
    alignments: dict[int, str] = {}
    for line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        match = _ALIGN_PREFIX.match(line)
        if match:
            rest = line[match.end() :]
            if rest.strip() and not _LIST_LINE.match(rest):
                if lines and lines[-1].strip():
                    lines.append("")
                alignments[len(lines)] = ALIGN_BY_MARKER[match.group(1)]
                lines.append(rest)
                continue
        lines.append(line)
    return "\n".join(lines), alignments


def _parse_blocks(tokens: Sequence, alignments: dict[int, str], lines: list[str]) -> List[Block]:
    blocks: List[Block] = []
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok.type == "heading_open":
            level = int(tok.tag[1])
            inline = _parse_inline(tokens[i + 1].children or [])
            if not is_blank(inline):
                blocks.append(Heading(level=level, inline=inline, align=_align_for(tok, alignments)))
            i += 3
        elif tok.type == "paragraph_open":
            inline = _parse_inline(tokens[i + 1].children or [])
            if not is_blank(inline):
                blocks.append(Paragraph(inline=inline, align=_align_for(tok, alignments)))
            i += 3
        elif tok.type in ("bullet_list_open", "ordered_list_open"):
            list_blocks, i = _parse_list(tokens, i, lines)
            blocks.extend(list_blocks)
        else:
            i += 1
    return blocks


def _align_for(tok, alignments: dict[int, str]) -> str:
    if tok.map is None:
        return "left"
    return alignments.get(tok.map[0], "left")


def _parse_list(tokens: Sequence, index: int, lines: list[str]) -> tuple[List[ListBlock], int]:
    """Collect one list, flattening nested lists into the outer item run.

    A blank line in front of an item ends the current list and starts
    another of the same kind.
    """
    opener = tokens[index]
    ordered = opener.type == "ordered_list_open"
    close_type = "ordered_list_close" if ordered else "bullet_list_close"
    current = ListBlock(items=[], ordered=ordered)
    result = [current]
    item: ListItem | None = None
    i = index + 1
    while i < len(tokens):
        tok = tokens[i]
        if tok.type == close_type and tok.level == opener.level:
            break
        if tok.type == "list_item_open":
            start = tok.map[0] if tok.map else 0
            if current.items and start > 0 and not lines[start - 1].strip():
                current = ListBlock(items=[], ordered=ordered)
                result.append(current)
            item = ListItem(inline=[])
            current.items.append(item)
        elif tok.type == "inline" and item is not None:
            inline = _parse_inline(tok.children or [])
            if item.inline and inline:
                item.inline.append(LineBreak())
            item.inline.extend(inline)
        i += 1
    for block in result:
        block.items = [entry for entry in block.items if not is_blank(entry.inline)]
    return [block for block in result if block.items], i + 1


def _parse_inline(children: Sequence) -> List[InlineElement]:
    root: List[InlineElement] = []
    stack: List[InlineElement] = []

    def append(node: InlineElement) -> None:
        target = stack[-1].children if stack else root  # type: ignore[attr-defined]
        if isinstance(node, InlineText) and target and isinstance(target[-1], InlineText):
            target[-1] = InlineText(target[-1].text + node.text)
        else:
            target.append(node)

    for tok in children:
        if tok.type in ("text", "text_special"):
            append(InlineText(tok.content))
        elif tok.type in ("softbreak", "hardbreak"):
            append(LineBreak())
        elif tok.type in _CONTAINERS:
            node = _CONTAINERS[tok.type]()
            append(node)
            stack.append(node)
        elif tok.type == "link_open":
            node = InlineLink(url=tok.attrGet("href") or "")
            append(node)
            stack.append(node)
        elif tok.type in _CLOSERS:
            wanted = _CLOSERS[tok.type]
            if stack and isinstance(stack[-1], wanted):
                stack.pop()
        elif tok.type == "image":
            src = tok.attrGet("src") or ""
            alt = tok.content or tok.attrGet("alt") or ""
            append(InlineImage(src=src, alt=alt))
        elif tok.content:
            append(InlineText(tok.content))
    return root
