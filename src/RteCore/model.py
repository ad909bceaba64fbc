from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Literal, Mapping

Align = Literal["left", "right", "center", "justify"]


@dataclass
class Block:
    """Base class for block-level nodes."""


@dataclass
class Document:
    blocks: List[Block]


@dataclass
class Heading(Block):
    level: int
    inline: List["InlineElement"]
    align: Align = "left"


@dataclass
class Paragraph(Block):
    inline: List["InlineElement"]
    align: Align = "left"


@dataclass
class ListItem:
    inline: List["InlineElement"]


@dataclass
class ListBlock(Block):
    items: List[ListItem]
    ordered: bool


@dataclass
class InlineElement:
    """Base class for inline nodes."""


@dataclass
class InlineText(InlineElement):
    text: str


@dataclass
class Bold(InlineElement):
    children: List[InlineElement] = field(default_factory=list)


@dataclass
class Italic(InlineElement):
    children: List[InlineElement] = field(default_factory=list)


@dataclass
class Underline(InlineElement):
    children: List[InlineElement] = field(default_factory=list)


@dataclass
class InlineLink(InlineElement):
    url: str
    children: List[InlineElement] = field(default_factory=list)


@dataclass
class InlineImage(InlineElement):
    src: str
    alt: str = ""


@dataclass
class LineBreak(InlineElement):
    """Hard line break inside a block."""


def is_blank(inlines: List[InlineElement]) -> bool:
    """True when a run holds nothing but whitespace and line breaks."""
    for inline in inlines:
        if isinstance(inline, InlineText):
            if inline.text.strip():
                return False
        elif isinstance(inline, LineBreak):
            continue
        elif isinstance(inline, (Bold, Italic, Underline)):
            if not is_blank(inline.children):
                return False
        else:
            return False
    return True


@dataclass
class HighlightColor:
    hex: str | None = None
    text: str | None = None
    css_class: str | None = None

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any] | None) -> "HighlightColor":
        if not value:
            return cls()
        return cls(
            hex=_optional_str(value.get("hex")),
            text=_optional_str(value.get("text")),
            css_class=_optional_str(value.get("class") or value.get("css_class")),
        )


@dataclass
class HighlightEntry:
    word: str
    color: HighlightColor = field(default_factory=HighlightColor)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> "HighlightEntry":
        color = value.get("color")
        if isinstance(color, HighlightColor):
            return cls(word=str(value.get("word") or ""), color=color)
        return cls(word=str(value.get("word") or ""), color=HighlightColor.from_mapping(color))


@dataclass
class HighlightSpec:
    """Words to highlight in the preview: a flat word list or colored entries."""

    words: List[str] = field(default_factory=list)
    css_class: str = "rte-highlight"
    entries: List[HighlightEntry] = field(default_factory=list)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
