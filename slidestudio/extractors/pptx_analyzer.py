"""
Reference Deck Analyzer
=======================

Opens an uploaded .pptx package and summarizes every slide into a short list
of reusable text snippets.

File Format Background
----------------------
A .pptx file is a ZIP archive of Office Open XML parts. Only the numbered
slide parts are read:

    ppt/slides/slide1.xml, slide2.xml, ..., slide10.xml

Slide layouts, masters, notes, media and relationship parts are ignored.
Parts are processed in the order of their embedded number, so slide10.xml
comes after slide2.xml. The resulting ``order`` of a slide is its position in
that sorted sequence, so gaps in the numbering are closed up.

Failure Handling
----------------
- Bytes that cannot be opened as a ZIP archive (or that trip the ZIP-bomb
  guard, or that are an encrypted or damaged OLE wrapper) raise a
  :class:`DeckArchiveError` subclass. No partial deck is returned.
- A slide entry that cannot be read back (bad CRC, password-protected entry,
  unsupported compression method) raises :class:`DeckArchiveError` as well.
- A slide part that fails to parse as XML is not an error: its snippets come
  from the fallback text-run scan instead.
- An archive without slide parts yields a deck with ``slide_count == 0``.

Usage
-----
    >>> import io
    >>> from slidestudio.extractors.pptx_analyzer import analyze_pptx
    >>>
    >>> with open("kickoff.pptx", "rb") as f:
    ...     deck = analyze_pptx(io.BytesIO(f.read()), file_name="kickoff.pptx")
    >>> for slide in deck.slides:
    ...     print(slide.name, slide.text_snippets)
"""

import io
import logging
import zipfile
import zlib
from pathlib import Path
from typing import List

from olefile.olefile import OleFileError

from slidestudio.config import DEFAULT_ANALYZER_CONFIG, AnalyzerConfig
from slidestudio.exceptions import DeckArchiveError, DeckEncryptedError
from slidestudio.extractors.data_types import ReferenceDeck, ReferenceSlideSummary
from slidestudio.extractors.slide_part_extractor import extract_slide_summary
from slidestudio.extractors.util.encryption import is_ooxml_encrypted
from slidestudio.extractors.util.identifiers import (
    Clock,
    IdFactory,
    random_id,
    upload_clock,
)
from slidestudio.extractors.util.zip_context import ZipContext

logger = logging.getLogger(__name__)


def _open_archive(
    file_like: io.BytesIO, file_name: str, config: AnalyzerConfig
) -> ZipContext:
    try:
        if is_ooxml_encrypted(file_like):
            raise DeckEncryptedError(
                file_name,
                f"Could not read {file_name}: presentation is password-protected",
            )
        return ZipContext(file_like, limits=config.zip_limits, source=file_name)
    except DeckArchiveError:
        raise
    except (
        OleFileError,
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        OSError,
        EOFError,
    ) as exc:
        raise DeckArchiveError(file_name, cause=exc) from exc


def analyze_pptx(
    file_like: io.BytesIO,
    file_name: str,
    file_size: int | None = None,
    *,
    config: AnalyzerConfig = DEFAULT_ANALYZER_CONFIG,
    id_factory: IdFactory = random_id,
    clock: Clock = upload_clock,
) -> ReferenceDeck:
    """
    Analyze an uploaded presentation.

    Args:
        file_like: BytesIO with the complete file content. The stream
            position is reset before reading.
        file_name: Name of the uploaded file, copied into the deck.
        file_size: Size reported by the upload. Defaults to the number of
            bytes in ``file_like``.
        config: Snippet cap, attribute handling and ZIP limits.
        id_factory: Source of the deck and slide identifiers.
        clock: Source of the ``uploaded_at`` timestamp.

    Returns:
        ReferenceDeck with one summary per slide part, ordered by position.

    Raises:
        DeckArchiveError: If the bytes cannot be opened as a presentation
            archive. Subclasses signal encryption and ZIP bombs.
    """
    logger.debug(f"Analyzing reference deck [{file_name}]")
    if file_size is None:
        file_size = len(file_like.getvalue())

    with _open_archive(file_like, file_name, config) as ctx:
        slide_parts = ctx.slide_parts()
        slides: List[ReferenceSlideSummary] = []
        for position, part_name in enumerate(slide_parts, start=1):
            logger.debug(f"Processing slide part [{part_name}] as slide {position}")
            try:
                raw = ctx.read_text(part_name)
            except (
                zipfile.BadZipFile,
                zlib.error,
                OSError,
                EOFError,
                # encrypted entries, unsupported compression methods
                RuntimeError,
                NotImplementedError,
            ) as exc:
                raise DeckArchiveError(
                    file_name,
                    f"Could not read {file_name}: {part_name} is corrupt",
                    cause=exc,
                ) from exc
            slides.append(
                extract_slide_summary(
                    raw, position, id_factory=id_factory, config=config
                )
            )

    deck = ReferenceDeck(
        id=id_factory(),
        file_name=file_name,
        file_size=file_size,
        slide_count=len(slide_parts),
        uploaded_at=clock(),
        slides=slides,
    )
    snippet_total = sum(len(slide.text_snippets) for slide in slides)
    logger.info(
        f"Analyzed [{file_name}]: {deck.slide_count} slides, {snippet_total} snippets"
    )
    return deck


def analyze_file(
    path: str | Path,
    *,
    config: AnalyzerConfig = DEFAULT_ANALYZER_CONFIG,
    id_factory: IdFactory = random_id,
    clock: Clock = upload_clock,
) -> ReferenceDeck:
    """Analyze a presentation stored on disk."""
    path = Path(path)
    with open(path, "rb") as f:
        data = f.read()
    return analyze_pptx(
        io.BytesIO(data),
        file_name=path.name,
        file_size=len(data),
        config=config,
        id_factory=id_factory,
        clock=clock,
    )
