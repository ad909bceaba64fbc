from pathlib import Path

from docx import Document as DocxReader
from docx.enum.text import WD_ALIGN_PARAGRAPH

from RteCore.model import (
    Bold,
    Document,
    Heading,
    InlineImage,
    InlineLink,
    InlineText,
    LineBreak,
    ListBlock,
    ListItem,
    Paragraph,
    Underline,
)
from RteCore.renderer_docx import render_document


def test_render_creates_docx(tmp_path: Path):
    doc = Document(
        blocks=[
            Heading(level=1, inline=[InlineText("Title")], align="center"),
            Paragraph(inline=[InlineText("Example paragraph.")]),
        ]
    )
    output_file = tmp_path / "out" / "report.docx"
    render_document(doc, output_file)
    assert output_file.exists()
    assert output_file.stat().st_size > 0


def test_render_formatting_and_alignment(tmp_path: Path):
    doc = Document(
        blocks=[
            Heading(level=2, inline=[InlineText("Right")], align="right"),
            Paragraph(
                inline=[
                    InlineText("Plain "),
                    Bold([InlineText("bold")]),
                    InlineText(" and "),
                    Underline([InlineText("under")]),
                    LineBreak(),
                    InlineLink(url="https://example.com", children=[InlineText("link")]),
                ],
                align="justify",
            ),
            ListBlock(items=[ListItem([InlineText("first")]), ListItem([InlineText("second")])], ordered=True),
            ListBlock(items=[ListItem([InlineText("dot")])], ordered=False),
        ]
    )
    out = tmp_path / "formatted.docx"
    render_document(doc, out)
    reader = DocxReader(out)
    paragraphs = reader.paragraphs

    assert paragraphs[0].text == "Right"
    assert paragraphs[0].style.name == "Heading 2"
    assert paragraphs[0].alignment == WD_ALIGN_PARAGRAPH.RIGHT

    body = paragraphs[1]
    assert body.alignment == WD_ALIGN_PARAGRAPH.JUSTIFY
    runs = {run.text: run for run in body.runs if run.text}
    assert runs["bold"].bold
    assert runs["under"].underline
    assert runs["link"].underline
    assert not runs["Plain "].bold

    assert [p.text for p in paragraphs[2:]] == ["1. first", "2. second", "• dot"]


def test_missing_image_becomes_placeholder(tmp_path: Path):
    doc = Document(blocks=[Paragraph(inline=[InlineImage(src="missing.png", alt="Diagram")])])
    out = tmp_path / "image.docx"
    render_document(doc, out, asset_root=tmp_path)
    reader = DocxReader(out)
    assert reader.paragraphs[0].text == "[Diagram]"


def test_entities_are_decoded_in_runs(tmp_path: Path):
    doc = Document(blocks=[Paragraph(inline=[InlineText("Fish &amp; chips")])])
    out = tmp_path / "entities.docx"
    render_document(doc, out)
    assert DocxReader(out).paragraphs[0].text == "Fish & chips"
