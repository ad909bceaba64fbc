from pathlib import Path

import pytest
from docx import Document as DocxReader

from RteCore.cli import main


def test_to_markdown_writes_output(tmp_path: Path):
    source = tmp_path / "note.html"
    source.write_text('<h2 style="text-align: center">Hi</h2><p><u>there</u></p>', encoding="utf-8")
    out = tmp_path / "note.md"
    main(["to-markdown", str(source), "-o", str(out)])
    assert out.read_text(encoding="utf-8") == "{^}## Hi\n\n==there=="


def test_to_markup_prints_to_stdout(tmp_path: Path, capsys):
    source = tmp_path / "note.md"
    source.write_text("**bold**", encoding="utf-8")
    main(["to-markup", str(source)])
    assert capsys.readouterr().out == "<p><strong>bold</strong></p>\n"


def test_plain_text_count(tmp_path: Path, capsys):
    source = tmp_path / "note.html"
    source.write_text("<p>A&nbsp;B</p>", encoding="utf-8")
    main(["plain-text", str(source), "--count"])
    assert capsys.readouterr().out == "3\n"


def test_highlight_with_yaml_spec(tmp_path: Path, capsys):
    source = tmp_path / "note.html"
    source.write_text("<p>cat and dog</p>", encoding="utf-8")
    spec = tmp_path / "words.yaml"
    spec.write_text("words: [dog]\n", encoding="utf-8")
    main(["highlight", str(source), "--spec", str(spec)])
    assert capsys.readouterr().out == '<p>cat and <span class="rte-highlight">dog</span></p>\n'


def test_export_docx_defaults_next_to_input(tmp_path: Path):
    source = tmp_path / "note.md"
    source.write_text("# Title\n\n- one\n- two", encoding="utf-8")
    main(["export-docx", str(source)])
    output = tmp_path / "note.docx"
    assert output.exists()
    texts = [p.text for p in DocxReader(output).paragraphs]
    assert texts == ["Title", "• one", "• two"]


def test_missing_input_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        main(["to-markdown", str(tmp_path / "absent.html")])


def test_missing_spec_raises(tmp_path: Path):
    source = tmp_path / "note.html"
    source.write_text("<p>x</p>", encoding="utf-8")
    with pytest.raises(FileNotFoundError):
        main(["highlight", str(source), "--spec", str(tmp_path / "absent.yaml")])
