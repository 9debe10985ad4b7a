"""
Slide Part Extractor
====================

Turns the raw XML of one ``ppt/slides/slideN.xml`` part into a
:class:`ReferenceSlideSummary`.

Extraction runs in two stages:

1. Structured: the markup is parsed with lxml into a plain tree and every
   leaf string is harvested (see ``text_harvester``). The outcome records
   why it did or did not produce text.
2. Fallback: when the structured stage yields nothing, either because the
   markup did not parse or because the tree had no text, the raw markup is
   scanned for DrawingML text runs (``<a:t>...</a:t>``).

Whatever the stage, the candidates go through the snippet normalizer.

Only ``&lt;``, ``&gt;`` and ``&amp;`` are decoded by the fallback scan.
Quote entities and numeric character references stay as written.
"""

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from lxml import etree

from slidestudio.config import DEFAULT_ANALYZER_CONFIG, AnalyzerConfig
from slidestudio.extractors.data_types import ReferenceSlideSummary
from slidestudio.extractors.snippet_normalizer import summarize_snippets
from slidestudio.extractors.text_harvester import collect_text, xml_to_tree
from slidestudio.extractors.util.identifiers import IdFactory, random_id

logger = logging.getLogger(__name__)

TEXT_RUN_PATTERN = re.compile(r"<a:t>(.*?)</a:t>")

# Order matters: &amp; last, so "&amp;lt;" becomes "&lt;" and not "<"
_BASIC_ENTITIES = (("&lt;", "<"), ("&gt;", ">"), ("&amp;", "&"))


class ParseReason(enum.Enum):
    STRUCTURED_CONTENT = "structured-content"
    STRUCTURED_EMPTY = "structured-empty"
    STRUCTURED_FAILED = "structured-failed"


@dataclass
class ParseOutcome:
    reason: ParseReason
    candidates: List[str] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def needs_fallback(self) -> bool:
        return self.reason is not ParseReason.STRUCTURED_CONTENT


def parse_slide_xml(
    raw: str, *, ignore_attributes: bool = False, parse_numbers: bool = False
) -> ParseOutcome:
    """Structured stage. Never raises on malformed markup."""
    try:
        tree = xml_to_tree(
            raw, ignore_attributes=ignore_attributes, parse_numbers=parse_numbers
        )
    except (etree.XMLSyntaxError, ValueError) as e:
        logger.warning(f"Failed to parse slide XML, falling back to text runs: {e}")
        return ParseOutcome(reason=ParseReason.STRUCTURED_FAILED, error=e)

    candidates = collect_text(tree)
    if not candidates:
        return ParseOutcome(reason=ParseReason.STRUCTURED_EMPTY)
    return ParseOutcome(reason=ParseReason.STRUCTURED_CONTENT, candidates=candidates)


def decode_basic_entities(text: str) -> str:
    for entity, char in _BASIC_ENTITIES:
        text = text.replace(entity, char)
    return text


def scan_text_runs(raw: str) -> List[str]:
    """Fallback stage: text of every ``<a:t>`` run found directly in the markup."""
    runs: List[str] = []
    for match in TEXT_RUN_PATTERN.finditer(raw):
        text = decode_basic_entities(match.group(1)).strip()
        if text:
            runs.append(text)
    return runs


def extract_slide_snippets(
    raw: str, config: AnalyzerConfig = DEFAULT_ANALYZER_CONFIG
) -> List[str]:
    outcome = parse_slide_xml(
        raw,
        ignore_attributes=config.ignore_attributes,
        parse_numbers=config.parse_numbers,
    )
    candidates = outcome.candidates
    if outcome.needs_fallback:
        candidates = scan_text_runs(raw)
        logger.debug(
            f"Fallback scan ({outcome.reason.value}) found {len(candidates)} text runs"
        )
    return summarize_snippets(candidates, max_snippets=config.max_snippets)


def extract_slide_summary(
    raw: str,
    position: int,
    *,
    id_factory: IdFactory = random_id,
    config: AnalyzerConfig = DEFAULT_ANALYZER_CONFIG,
) -> ReferenceSlideSummary:
    """
    Summarize one slide part.

    Args:
        raw: The slide part's XML as text.
        position: 1-based position of the part among the sorted slide parts.
        id_factory: Source of the summary's identifier.
        config: Snippet cap and attribute handling.
    """
    return ReferenceSlideSummary(
        id=id_factory(),
        name=f"Slide {position}",
        order=position,
        text_snippets=extract_slide_snippets(raw, config),
    )
