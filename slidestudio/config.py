from __future__ import annotations

from dataclasses import dataclass

from slidestudio.extractors.util.zip_bomb import DEFAULT_ZIP_BOMB_LIMITS, ZipBombLimits

MAX_SNIPPETS_PER_SLIDE = 6


@dataclass(frozen=True)
class AnalyzerConfig:
    """Knobs of the reference-deck analysis."""

    max_snippets: int = MAX_SNIPPETS_PER_SLIDE
    # Attribute values are harvested together with element text unless this
    # is set.
    ignore_attributes: bool = False
    # Numeric element text ("2024", "3.5") is dropped instead of harvested
    # when this is set.
    parse_numbers: bool = False
    zip_limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS


DEFAULT_ANALYZER_CONFIG = AnalyzerConfig()


@dataclass(frozen=True)
class DeckStyle:
    """
    Layout of generated slides. Positions and widths are in inches, font
    sizes and line spacing in points, colors as RRGGBB hex strings.
    """

    left: float = 0.5
    title_top: float = 0.5
    title_font_size: int = 32
    title_color: str = "2E3A59"

    body_width: float = 8.0
    body_top_with_title: float = 1.5
    body_top_without_title: float = 0.8
    body_font_size: int = 20
    body_color: str = "334155"

    bullets_left: float = 0.75
    bullets_width: float = 7.5
    bullets_top_after_body: float = 3.0
    bullets_top_after_title: float = 2.0
    bullets_top_alone: float = 1.0
    bullets_font_size: int = 18
    bullets_color: str = "1E293B"
    bullet_char: str = "•"

    line_spacing: int = 28
    box_height: float = 1.0


DEFAULT_DECK_STYLE = DeckStyle()
