from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from slidestudio.builders.deck_emitter import write_presentation
from slidestudio.extractors.data_types import DraftSlide, ReferenceDeck
from slidestudio.extractors.serialization import (
    deserialize_extraction,
    serialize_extraction,
)
from slidestudio.extractors.util.identifiers import random_id
from slidestudio.intake import (
    UploadedFile,
    format_bytes,
    import_reference_decks,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slidestudio",
        description="Extract reusable snippets from .pptx files and build new decks from drafts.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log analysis progress to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser(
        "analyze",
        help="Analyze reference decks and print their snippets.",
    )
    analyze.add_argument(
        "paths",
        type=Path,
        nargs="+",
        help="Presentation files to analyze, processed in the given order.",
    )
    analyze.add_argument(
        "--json",
        action="store_true",
        help="Emit the analyzed decks as JSON instead of plain text.",
    )

    build = subparsers.add_parser(
        "build",
        help="Build a .pptx file from a JSON list of draft slides.",
    )
    build.add_argument(
        "draft",
        type=Path,
        help="JSON file holding a list of slides with title, body, bullets and notes.",
    )
    build.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory to write the presentation into (default: current directory).",
    )
    return parser


def _format_deck(deck: ReferenceDeck) -> str:
    lines = [
        f"{deck.file_name} ({format_bytes(deck.file_size)}, {deck.slide_count} slides)"
    ]
    for slide in deck.slides:
        count = len(slide.text_snippets)
        lines.append(f"  {slide.name} ({count} snippet{'' if count == 1 else 's'})")
        lines.extend(f"    - {snippet}" for snippet in slide.text_snippets)
    return "\n".join(lines)


def _load_draft(path: Path) -> list[DraftSlide]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a JSON list of slides")
    slides = []
    for item in payload:
        slide = deserialize_extraction(item, DraftSlide)
        if not slide.id:
            slide.id = random_id()
        slides.append(slide)
    return slides


def _run_analyze(args: argparse.Namespace) -> int:
    uploads = [UploadedFile.from_path(path) for path in args.paths]
    result = import_reference_decks(uploads)

    for name in result.skipped:
        print(f"slidestudio: skipping {name}: not a .pptx file", file=sys.stderr)
    if result.error:
        print(f"slidestudio: {result.error}", file=sys.stderr)
        return 1

    if args.json:
        json.dump([serialize_extraction(deck) for deck in result.decks], sys.stdout)
        sys.stdout.write("\n")
    elif result.decks:
        sys.stdout.write("\n\n".join(_format_deck(deck) for deck in result.decks))
        sys.stdout.write("\n")

    for failure in result.failures:
        print(f"slidestudio: {failure.message}", file=sys.stderr)
    return 1 if result.failures else 0


def _run_build(args: argparse.Namespace) -> int:
    slides = _load_draft(args.draft)
    generated = write_presentation(slides, args.output_dir)
    sys.stdout.write(f"{generated.path}\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args, unknown = parser.parse_known_args(argv)
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        return code

    if unknown:
        unknown_str = " ".join(unknown)
        print(
            f"slidestudio: warning: unsupported arguments: {unknown_str}",
            file=sys.stderr,
        )
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "analyze":
            return _run_analyze(args)
        return _run_build(args)
    except Exception as exc:
        print(f"slidestudio: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
