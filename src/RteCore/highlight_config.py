from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml

from .highlighter import DEFAULT_CLASS
from .model import HighlightColor, HighlightEntry, HighlightSpec


def parse_highlight_spec(text: str) -> HighlightSpec:
    """Parse a YAML highlight spec.

    Two shapes are accepted::

        words: [cat, dog]
        class: rte-highlight        # optional

        entries:
          - word: cat
            color: {hex: "#fde68a", text: "#92400e"}
          - word: dog
            color: {class: bg-blue-200}
    """
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("Highlight spec root must be a mapping.")

    css_class = str(data.get("class") or data.get("css_class") or DEFAULT_CLASS)
    words = _normalize_words(data.get("words"))
    entries = _parse_entries(data.get("entries"))
    return HighlightSpec(words=words, css_class=css_class, entries=entries)


def load_highlight_spec(path: str | Path) -> HighlightSpec:
    return parse_highlight_spec(Path(path).read_text(encoding="utf-8"))


def _normalize_words(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None and str(v).strip()]
    if isinstance(value, str):
        return [value] if value.strip() else []
    raise ValueError("'words' must be a string or a list of strings.")


def _parse_entries(value: Any) -> List[HighlightEntry]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("'entries' must be a list.")
    entries: List[HighlightEntry] = []
    for position, entry in enumerate(value, start=1):
        if isinstance(entry, str):
            entries.append(HighlightEntry(word=entry))
            continue
        if not isinstance(entry, dict) or not entry.get("word"):
            raise ValueError(f"Entry {position} needs a 'word'.")
        color = entry.get("color")
        if color is not None and not isinstance(color, dict):
            raise ValueError(f"Entry {position}: 'color' must be a mapping.")
        entries.append(HighlightEntry(word=str(entry["word"]), color=HighlightColor.from_mapping(color)))
    return entries
