"""Keyword highlighting for the read-only preview.

Works on markup text through the scanner rather than on the document tree,
so the caller's inline styling survives untouched. Only text outside tags is
searched, entity references are never cut, and text that already sits inside
a highlight span is left alone. Applying the injector to its own output
therefore changes nothing.

Overlapping words are resolved in one pass: the leftmost match wins, and at
a given position the longest of all requested words wins.
"""

from __future__ import annotations

import html as html_module
import logging
import re
from typing import Any, Callable, Iterable, List, Mapping, Sequence

from .markup_scanner import SKIP_CONTENT_TAGS, EntitySpan, TagSpan, TextSpan, scan_markup
from .model import HighlightColor, HighlightEntry, HighlightSpec

logger = logging.getLogger(__name__)

DEFAULT_CLASS = "rte-highlight"
DEFAULT_TEXT_COLOR = "#000000"

_WORD_CHAR = re.compile(r"[A-Za-z0-9'_-]")
_EDGE_PUNCTUATION = "'-"

Wrapper = Callable[[str], str]


def highlight_single(markup: str | None, words: Iterable[str] | None, css_class: str = DEFAULT_CLASS) -> str:
    """Wrap every occurrence of ``words`` in ``<span class="css_class">``."""
    if not markup:
        return markup or ""
    cleaned = _clean_words(words or [])
    if not cleaned:
        return markup
    css_class = css_class or DEFAULT_CLASS
    span_open = f'<span class="{html_module.escape(css_class)}">'
    wrappers = [(word, _span_wrapper(span_open)) for word in cleaned]
    return _inject(markup, wrappers, marker_classes={DEFAULT_CLASS, *css_class.split()})


def highlight_multi(markup: str | None, entries: Sequence[HighlightEntry | Mapping[str, Any]] | None) -> str:
    """Wrap each entry's word in a span styled by that entry's color."""
    if not markup:
        return markup or ""
    wrappers: list[tuple[str, Wrapper]] = []
    for entry in entries or []:
        if not isinstance(entry, HighlightEntry):
            entry = HighlightEntry.from_mapping(entry)
        word = entry.word.strip()
        if not word:
            continue
        wrappers.append((word, _span_wrapper(color_span_open(entry.color))))
    if not wrappers:
        return markup
    return _inject(markup, wrappers, marker_classes={DEFAULT_CLASS})


def highlight(markup: str | None, spec: HighlightSpec) -> str:
    if spec.entries:
        return highlight_multi(markup, spec.entries)
    return highlight_single(markup, spec.words, spec.css_class)


def color_span_open(color: HighlightColor) -> str:
    if color.hex:
        text_color = color.text or DEFAULT_TEXT_COLOR
        style = f"background-color: {color.hex}; color: {text_color};"
        return f'<span class="{DEFAULT_CLASS}" style="{html_module.escape(style)}">'
    if color.css_class:
        classes = " ".join(part for part in (DEFAULT_CLASS, color.css_class, color.text) if part)
        return f'<span class="{html_module.escape(classes)}">'
    return f'<span class="{DEFAULT_CLASS}">'


def word_at_offset(text: str | None, offset: int) -> str | None:
    """Return the word covering ``offset`` in rendered text, lower-cased.

    The word is the run of letters, digits, ``'``, ``_`` and ``-`` ending at
    ``offset`` joined with the run starting there. Leading and trailing
    apostrophes and hyphens are dropped; tokens of one character or less
    give ``None``.
    """
    if not text:
        return None
    offset = min(max(offset, 0), len(text))
    start = offset
    while start > 0 and _WORD_CHAR.match(text[start - 1]):
        start -= 1
    end = offset
    while end < len(text) and _WORD_CHAR.match(text[end]):
        end += 1
    token = text[start:end].strip(_EDGE_PUNCTUATION).lower()
    if len(token) <= 1:
        return None
    return token


def _clean_words(words: Iterable[str]) -> List[str]:
    return [word.strip() for word in words if word and word.strip()]


def _span_wrapper(span_open: str) -> Wrapper:
    return lambda matched: f"{span_open}{matched}</span>"


def _build_pattern(wrappers: Sequence[tuple[str, Wrapper]]) -> tuple[re.Pattern, dict[str, Wrapper]]:
    """One alternation over all words, longest first, one named group each."""
    seen: set[str] = set()
    ordered: list[tuple[str, Wrapper]] = []
    for word, wrapper in sorted(wrappers, key=lambda pair: len(pair[0]), reverse=True):
        key = word.casefold()
        if key in seen:
            continue
        seen.add(key)
        ordered.append((word, wrapper))
    groups: dict[str, Wrapper] = {}
    alternatives: list[str] = []
    for index, (word, wrapper) in enumerate(ordered):
        name = f"w{index}"
        groups[name] = wrapper
        alternatives.append(f"(?P<{name}>{re.escape(html_module.escape(word, quote=False))})")
    pattern = re.compile(r"(?<!\w)(?:" + "|".join(alternatives) + r")(?!\w)", re.IGNORECASE)
    return pattern, groups


def _inject(markup: str, wrappers: Sequence[tuple[str, Wrapper]], marker_classes: set[str]) -> str:
    pattern, groups = _build_pattern(wrappers)
    out: list[str] = []
    run: list[str] = []
    entity_ranges: list[tuple[int, int]] = []
    run_length = 0
    span_stack: list[bool] = []
    skip_tag: str | None = None

    def flush() -> None:
        nonlocal run_length
        if run:
            text = "".join(run)
            if any(span_stack):
                out.append(text)
            else:
                out.append(_wrap_matches(text, entity_ranges, pattern, groups))
        run.clear()
        entity_ranges.clear()
        run_length = 0

    for span in scan_markup(markup):
        if skip_tag is not None:
            # Raw text of script/style passes through untouched.
            if isinstance(span, TagSpan) and span.closing and span.name == skip_tag:
                skip_tag = None
            out.append(span.raw)
            continue
        if isinstance(span, TagSpan):
            flush()
            if span.name in SKIP_CONTENT_TAGS and not span.closing and not span.self_closing:
                skip_tag = span.name
            elif span.name == "span" and not span.self_closing:
                if span.closing:
                    if span_stack:
                        span_stack.pop()
                else:
                    classes = set(span.attributes.get("class", "").split())
                    span_stack.append(bool(classes & marker_classes))
            out.append(span.raw)
        elif isinstance(span, EntitySpan):
            entity_ranges.append((run_length, run_length + len(span.raw)))
            run.append(span.raw)
            run_length += len(span.raw)
        elif isinstance(span, TextSpan):
            run.append(span.raw)
            run_length += len(span.raw)
    flush()
    return "".join(out)


def _wrap_matches(
    text: str,
    entity_ranges: Sequence[tuple[int, int]],
    pattern: re.Pattern,
    groups: Mapping[str, Wrapper],
) -> str:
    pieces: list[str] = []
    position = 0
    search_from = 0
    while True:
        match = pattern.search(text, search_from)
        if match is None:
            break
        if _cuts_entity(match.start(), match.end(), entity_ranges):
            logger.debug("Skipping match %r that would split an entity", match.group(0))
            search_from = match.start() + 1
            continue
        pieces.append(text[position : match.start()])
        pieces.append(groups[match.lastgroup](match.group(0)))
        position = search_from = match.end()
    pieces.append(text[position:])
    return "".join(pieces)


def _cuts_entity(start: int, end: int, entity_ranges: Sequence[tuple[int, int]]) -> bool:
    for entity_start, entity_end in entity_ranges:
        if start < entity_end and end > entity_start:
            if not (start <= entity_start and end >= entity_end):
                return True
    return False
