"""
Deck emitter using python-pptx.

Renders draft slides into a new .pptx file. Only plain strings from the
draft (title, body, bullets, notes) are used; nothing from the analyzed
reference archives ends up in the output.
"""

import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Inches, Pt

from slidestudio.config import DEFAULT_DECK_STYLE, DeckStyle
from slidestudio.exceptions import DeckBuildError, EmptyDraftError
from slidestudio.extractors.data_types import DraftSlide

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "Generated-Presentation.pptx"
MAX_TITLE_CHARS_IN_FILE_NAME = 40
BLANK_LAYOUT_INDEX = 6

# Hanging indent for bullet paragraphs, in EMU
_BULLET_MARGIN = 342900


@dataclass
class GeneratedDeck:
    file_name: str
    data: bytes
    path: Optional[Path] = None


def presentation_file_name(slides: List[DraftSlide]) -> str:
    if slides and slides[0].has_title():
        return f"{slides[0].title.strip()[:MAX_TITLE_CHARS_IN_FILE_NAME]}.pptx"
    return DEFAULT_FILE_NAME


def _style_run(run, size: int, color: str, bold: bool = False) -> None:
    run.font.size = Pt(size)
    run.font.bold = bold
    run.font.color.rgb = RGBColor.from_string(color)


def _add_textbox(slide, left: float, top: float, width: float, style: DeckStyle):
    shape = slide.shapes.add_textbox(
        Inches(left), Inches(top), Inches(width), Inches(style.box_height)
    )
    text_frame = shape.text_frame
    text_frame.word_wrap = True
    return text_frame


def _set_bullet(paragraph, char: str) -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    p_pr.set("marL", str(_BULLET_MARGIN))
    p_pr.set("indent", str(-_BULLET_MARGIN))
    bu_char = OxmlElement("a:buChar")
    bu_char.set("char", char)
    p_pr.append(bu_char)


def _bullets_top(slide: DraftSlide, style: DeckStyle) -> float:
    if slide.has_body():
        return style.bullets_top_after_body
    if slide.has_title():
        return style.bullets_top_after_title
    return style.bullets_top_alone


def _render_slide(prs, draft: DraftSlide, style: DeckStyle) -> None:
    slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT_INDEX])

    if draft.has_title():
        text_frame = _add_textbox(
            slide, style.left, style.title_top, style.body_width, style
        )
        run = text_frame.paragraphs[0].add_run()
        run.text = draft.title.strip()
        _style_run(run, style.title_font_size, style.title_color, bold=True)

    if draft.has_body():
        top = (
            style.body_top_with_title
            if draft.has_title()
            else style.body_top_without_title
        )
        text_frame = _add_textbox(slide, style.left, top, style.body_width, style)
        paragraph = text_frame.paragraphs[0]
        paragraph.line_spacing = Pt(style.line_spacing)
        run = paragraph.add_run()
        run.text = draft.body.strip()
        _style_run(run, style.body_font_size, style.body_color)

    bullets = draft.filled_bullets()
    if bullets:
        text_frame = _add_textbox(
            slide,
            style.bullets_left,
            _bullets_top(draft, style),
            style.bullets_width,
            style,
        )
        for index, bullet in enumerate(bullets):
            paragraph = (
                text_frame.paragraphs[0] if index == 0 else text_frame.add_paragraph()
            )
            paragraph.line_spacing = Pt(style.line_spacing)
            _set_bullet(paragraph, style.bullet_char)
            run = paragraph.add_run()
            run.text = bullet
            _style_run(run, style.bullets_font_size, style.bullets_color)

    notes = draft.notes.strip()
    if notes:
        slide.notes_slide.notes_text_frame.text = notes


def build_presentation(
    slides: Iterable[DraftSlide], style: DeckStyle = DEFAULT_DECK_STYLE
) -> bytes:
    """
    Render draft slides to .pptx bytes.

    Slides without a title, body or bullet are skipped.

    Raises:
        EmptyDraftError: If no slide has any content.
        DeckBuildError: If python-pptx fails while rendering.
    """
    drafts = [slide for slide in slides if slide.has_content()]
    if not drafts:
        raise EmptyDraftError("Please add some content before generating.")

    try:
        prs = Presentation()
        for draft in drafts:
            _render_slide(prs, draft, style)
        buffer = io.BytesIO()
        prs.save(buffer)
    except Exception as exc:
        raise DeckBuildError("Failed to build presentation", cause=exc) from exc

    logger.info(f"Built presentation with {len(drafts)} slides")
    return buffer.getvalue()


def _safe_file_name(name: str) -> str:
    return re.sub(r"[\\/]", "-", name)


def write_presentation(
    slides: List[DraftSlide],
    directory: str | Path = ".",
    style: DeckStyle = DEFAULT_DECK_STYLE,
) -> GeneratedDeck:
    """Build the presentation and write it into ``directory``."""
    data = build_presentation(slides, style)
    file_name = presentation_file_name(slides)
    path = Path(directory) / _safe_file_name(file_name)
    path.write_bytes(data)
    logger.debug(f"Wrote presentation to [{path}]")
    return GeneratedDeck(file_name=file_name, data=data, path=path)
