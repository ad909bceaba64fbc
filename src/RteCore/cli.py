from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import convert, highlight_config, highlighter, markdown_parser, markup_parser, renderer_docx
from .utils import configure_logging, is_markdown_path, read_text, resolve_output_path, write_text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rte-core",
        description="Convert between editor markup and extended Markdown, highlight words, export DOCX.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    to_markdown = commands.add_parser("to-markdown", help="Convert markup to extended Markdown")
    to_markdown.add_argument("input", type=str, help="Path to a markup file")
    to_markdown.add_argument("-o", "--output", type=str, help="Output path (default: stdout)")

    to_markup = commands.add_parser("to-markup", help="Convert extended Markdown to markup")
    to_markup.add_argument("input", type=str, help="Path to a Markdown file")
    to_markup.add_argument("-o", "--output", type=str, help="Output path (default: stdout)")

    plain = commands.add_parser("plain-text", help="Print the visible text of a markup file")
    plain.add_argument("input", type=str, help="Path to a markup file")
    plain.add_argument("--count", action="store_true", help="Print the character count instead")

    highlight = commands.add_parser("highlight", help="Highlight words in a markup file for preview")
    highlight.add_argument("input", type=str, help="Path to a markup file")
    highlight.add_argument("--spec", type=str, required=True, help="YAML highlight spec")
    highlight.add_argument("-o", "--output", type=str, help="Output path (default: stdout)")

    export = commands.add_parser("export-docx", help="Render a markup or Markdown file to DOCX")
    export.add_argument("input", type=str, help="Path to a markup or Markdown file")
    export.add_argument("-o", "--output", type=str, help="Output DOCX path")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    logging.info("Reading %s", input_path)
    source = read_text(input_path)
    logging.debug("Input length: %d chars", len(source))

    if args.command == "to-markdown":
        _emit(convert.markup_to_markdown(source), args.output)
    elif args.command == "to-markup":
        _emit(convert.markdown_to_markup(source), args.output)
    elif args.command == "plain-text":
        text = convert.plain_text(source)
        _emit(str(len(text)) if args.count else text, None)
    elif args.command == "highlight":
        spec_path = Path(args.spec).expanduser()
        if not spec_path.exists():
            raise FileNotFoundError(f"Highlight spec not found: {spec_path}")
        spec = highlight_config.load_highlight_spec(spec_path)
        logging.info("Highlighting %d word(s)", len(spec.entries) or len(spec.words))
        _emit(highlighter.highlight(source, spec), args.output)
    elif args.command == "export-docx":
        output_path = resolve_output_path(input_path, args.output, ".docx")
        logging.info("Parsing %s...", "markdown" if is_markdown_path(input_path) else "markup")
        if is_markdown_path(input_path):
            document = markdown_parser.parse_markdown(source)
        else:
            document = markup_parser.parse_markup(source)
        logging.info("Rendering DOCX to %s", output_path)
        renderer_docx.render_document(document, output_path=output_path, asset_root=input_path.parent)
        logging.info("Done. Saved to %s", output_path)


def _emit(text: str, output: str | None) -> None:
    if output:
        write_text(Path(output), text)
        logging.info("Saved to %s", output)
    else:
        sys.stdout.write(text + "\n")


if __name__ == "__main__":
    main()
