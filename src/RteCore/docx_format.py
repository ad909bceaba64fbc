from __future__ import annotations

from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Cm, Pt, RGBColor

FONT_NAME = "Calibri"
FONT_SIZE_PT = 11
LINE_SPACING = 1.15
LIST_INDENT_CM = 0.75

MARGIN_CM = 2.0

LINK_COLOR = RGBColor(0x1D, 0x4E, 0xD8)

ALIGNMENT = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}


def apply_page_layout(doc) -> None:
    """Apply uniform margins to the first section."""
    section = doc.sections[0]
    section.left_margin = Cm(MARGIN_CM)
    section.right_margin = Cm(MARGIN_CM)
    section.top_margin = Cm(MARGIN_CM)
    section.bottom_margin = Cm(MARGIN_CM)


def apply_block_format(paragraph, align: str = "left") -> None:
    paragraph.alignment = ALIGNMENT.get(align, WD_ALIGN_PARAGRAPH.LEFT)
    paragraph.paragraph_format.space_before = Pt(0)
    paragraph.paragraph_format.space_after = Pt(FONT_SIZE_PT * 0.6)
    paragraph.paragraph_format.line_spacing = LINE_SPACING


def apply_list_item_format(paragraph) -> None:
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.left_indent = Cm(LIST_INDENT_CM)
    paragraph.paragraph_format.space_before = Pt(0)
    paragraph.paragraph_format.space_after = Pt(0)
    paragraph.paragraph_format.line_spacing = LINE_SPACING


def set_run_font(run, bold: bool = False, italic: bool = False, underline: bool = False, link: bool = False) -> None:
    run.font.name = FONT_NAME
    run.font.size = Pt(FONT_SIZE_PT)
    set_run_style(run, bold=bold, italic=italic, underline=underline, link=link)


def set_run_style(run, bold: bool = False, italic: bool = False, underline: bool = False, link: bool = False) -> None:
    """Character formatting only; headings keep their style's font."""
    run.bold = bold or None
    run.italic = italic or None
    run.underline = underline or link or None
    if link:
        run.font.color.rgb = LINK_COLOR
