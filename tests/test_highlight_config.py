import textwrap

import pytest

from RteCore.highlight_config import load_highlight_spec, parse_highlight_spec
from RteCore.model import HighlightColor, HighlightEntry


def test_parse_word_list():
    spec = parse_highlight_spec("words: [cat, dog]\nclass: keyword\n")
    assert spec.words == ["cat", "dog"]
    assert spec.css_class == "keyword"
    assert spec.entries == []


def test_parse_colored_entries():
    yaml_text = textwrap.dedent(
        """
        entries:
          - word: cat
            color:
              hex: "#fde68a"
              text: "#92400e"
          - word: dog
            color:
              class: bg-blue-200
          - bird
        """
    )
    spec = parse_highlight_spec(yaml_text)
    assert spec.css_class == "rte-highlight"
    assert spec.entries == [
        HighlightEntry(word="cat", color=HighlightColor(hex="#fde68a", text="#92400e")),
        HighlightEntry(word="dog", color=HighlightColor(css_class="bg-blue-200")),
        HighlightEntry(word="bird"),
    ]


def test_empty_spec():
    spec = parse_highlight_spec("")
    assert spec.words == [] and spec.entries == []


def test_invalid_specs_raise():
    with pytest.raises(ValueError):
        parse_highlight_spec("- cat\n- dog\n")
    with pytest.raises(ValueError):
        parse_highlight_spec("entries:\n  - color: {hex: '#fff'}\n")
    with pytest.raises(ValueError):
        parse_highlight_spec("entries: cat\n")


def test_load_from_file(tmp_path):
    path = tmp_path / "spec.yaml"
    path.write_text("words:\n  - alpha\n", encoding="utf-8")
    assert load_highlight_spec(path).words == ["alpha"]
