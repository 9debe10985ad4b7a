"""
slidestudio: build new presentations from snippets of existing ones.

Reference .pptx files are analyzed into short per-slide text snippets. Draft
slides are composed from hand-written text plus selected snippets and
rendered into a new .pptx file.
"""

from pathlib import Path
from typing import Iterable

from slidestudio.builders.deck_emitter import (
    GeneratedDeck,
    build_presentation,
    write_presentation,
)
from slidestudio.extractors.data_types import (
    DraftReference,
    DraftSlide,
    ReferenceDeck,
    ReferenceSlideSummary,
)
from slidestudio.extractors.pptx_analyzer import analyze_file, analyze_pptx
from slidestudio.intake import (
    ImportResult,
    UploadedFile,
    import_reference_decks,
    is_supported_file,
)
from slidestudio.session import StudioSession

__version__ = "0.1.0"


def import_files(paths: Iterable[str | Path]) -> ImportResult:
    """
    Analyze files from disk as one upload batch.

    Example:
        >>> import slidestudio
        >>> result = slidestudio.import_files(["q1.pptx", "q2.pptx"])
        >>> for deck in result.decks:
        ...     print(deck.file_name, deck.slide_count)
        >>> for failure in result.failures:
        ...     print(failure.message)
    """
    return import_reference_decks(UploadedFile.from_path(path) for path in paths)


__all__ = [
    # Version
    "__version__",
    # Analysis
    "analyze_pptx",
    "analyze_file",
    "import_files",
    "import_reference_decks",
    "is_supported_file",
    "ImportResult",
    "UploadedFile",
    # Composition
    "StudioSession",
    "build_presentation",
    "write_presentation",
    "GeneratedDeck",
    # Data types
    "ReferenceDeck",
    "ReferenceSlideSummary",
    "DraftSlide",
    "DraftReference",
]
