from __future__ import annotations

import html as html_module
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable

from docx import Document as DocxDocument
from docx.image.exceptions import UnrecognizedImageError
from docx.shared import Cm

from . import docx_format
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
    Paragraph,
    Underline,
)

logger = logging.getLogger(__name__)

MAX_IMAGE_WIDTH_CM = 15.0


@dataclass
class RenderState:
    asset_root: Path | None = None
    missing_images: int = 0


@dataclass(frozen=True)
class _RunStyle:
    bold: bool = False
    italic: bool = False
    underline: bool = False
    link: bool = False


def render_document(doc: Document, output_path: str | Path, asset_root: Path | None = None) -> None:
    output_path = Path(output_path)
    state = RenderState(asset_root=asset_root)
    docx = DocxDocument()
    docx_format.apply_page_layout(docx)

    for block in doc.blocks:
        _dispatch_block(docx, block, state)

    if state.missing_images:
        logger.warning("%d image(s) could not be embedded", state.missing_images)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    docx.save(output_path)


def _dispatch_block(docx: DocxDocument, block: Block, state: RenderState) -> None:
    if isinstance(block, Heading):
        paragraph = docx.add_heading("", level=min(max(block.level, 1), 6))
        _render_inline(paragraph, block.inline, _RunStyle(), state, heading=True)
        paragraph.alignment = docx_format.ALIGNMENT.get(block.align)
    elif isinstance(block, Paragraph):
        paragraph = docx.add_paragraph()
        _render_inline(paragraph, block.inline, _RunStyle(), state)
        docx_format.apply_block_format(paragraph, block.align)
    elif isinstance(block, ListBlock):
        _render_list(docx, block, state)


def _render_list(docx: DocxDocument, block: ListBlock, state: RenderState) -> None:
    for idx, item in enumerate(block.items, start=1):
        paragraph = docx.add_paragraph()
        prefix = f"{idx}. " if block.ordered else "• "
        docx_format.set_run_font(paragraph.add_run(prefix))
        _render_inline(paragraph, item.inline, _RunStyle(), state)
        docx_format.apply_list_item_format(paragraph)


def _render_inline(
    paragraph,
    inlines: Iterable[InlineElement],
    style: _RunStyle,
    state: RenderState,
    heading: bool = False,
) -> None:
    for inline in inlines:
        if isinstance(inline, InlineText):
            run = paragraph.add_run(html_module.unescape(inline.text))
            _style_run(run, style, heading)
        elif isinstance(inline, LineBreak):
            paragraph.add_run().add_break()
        elif isinstance(inline, Bold):
            _render_inline(paragraph, inline.children, replace(style, bold=True), state, heading)
        elif isinstance(inline, Italic):
            _render_inline(paragraph, inline.children, replace(style, italic=True), state, heading)
        elif isinstance(inline, Underline):
            _render_inline(paragraph, inline.children, replace(style, underline=True), state, heading)
        elif isinstance(inline, InlineLink):
            _render_inline(paragraph, inline.children, replace(style, link=True), state, heading)
        elif isinstance(inline, InlineImage):
            _render_image(paragraph, inline, state)


def _render_image(paragraph, image: InlineImage, state: RenderState) -> None:
    image_path = Path(image.src)
    if state.asset_root and not image_path.is_absolute():
        image_path = state.asset_root / image.src
    run = paragraph.add_run()
    try:
        picture = run.add_picture(str(image_path))
    except (OSError, UnrecognizedImageError) as exc:
        logger.debug("Cannot embed image %s: %s", image_path, exc)
        state.missing_images += 1
        run.add_text(f"[{image.alt or image.src}]")
        docx_format.set_run_font(run, italic=True)
        return
    max_width = Cm(MAX_IMAGE_WIDTH_CM)
    if picture.width > max_width:
        picture.height = int(picture.height * max_width / picture.width)
        picture.width = max_width


def _style_run(run, style: _RunStyle, heading: bool) -> None:
    if heading:
        docx_format.set_run_style(run, style.bold, style.italic, style.underline, style.link)
    else:
        docx_format.set_run_font(run, style.bold, style.italic, style.underline, style.link)

