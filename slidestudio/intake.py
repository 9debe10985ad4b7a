import io
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from slidestudio.config import DEFAULT_ANALYZER_CONFIG, AnalyzerConfig
from slidestudio.exceptions import DeckArchiveError
from slidestudio.extractors.data_types import ReferenceDeck
from slidestudio.extractors.pptx_analyzer import analyze_pptx
from slidestudio.extractors.util.identifiers import (
    Clock,
    IdFactory,
    random_id,
    upload_clock,
)

logger = logging.getLogger(__name__)

ACCEPTED_MIME = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation"
)
ACCEPTED_SUFFIX = ".pptx"

NO_CANDIDATES_MESSAGE = "Only .pptx files are supported right now."

mimetypes.add_type(ACCEPTED_MIME, ACCEPTED_SUFFIX)


@dataclass
class UploadedFile:
    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadedFile":
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes())


@dataclass
class ImportFailure:
    file_name: str
    message: str
    error: Optional[Exception] = None


@dataclass
class ImportResult:
    decks: List[ReferenceDeck] = field(default_factory=list)
    failures: List[ImportFailure] = field(default_factory=list)
    # Names dropped before analysis because they are not .pptx files
    skipped: List[str] = field(default_factory=list)
    # Set when the batch held no file worth analyzing at all
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.failures and self.error is None


def is_supported_file(name: str) -> bool:
    """Checks the file name only; content is not inspected."""
    mime_type, encoding = mimetypes.guess_type(name.lower())
    # "deck.pptx.gz" guesses the pptx type with a gzip encoding
    return mime_type == ACCEPTED_MIME and encoding is None


def unreadable_file_message(file_name: str) -> str:
    return f"Could not read {file_name}. Please verify the file is not corrupted."


def import_reference_decks(
    files: Iterable[UploadedFile],
    *,
    config: AnalyzerConfig = DEFAULT_ANALYZER_CONFIG,
    id_factory: IdFactory = random_id,
    clock: Clock = upload_clock,
) -> ImportResult:
    """
    Analyze a batch of uploads one after the other, in the given order.

    Files without a .pptx suffix are skipped. A file that cannot be read is
    reported in ``failures`` and the remaining files are still analyzed.
    """
    result = ImportResult()
    candidates: List[UploadedFile] = []
    for upload in files:
        if is_supported_file(upload.name):
            candidates.append(upload)
        else:
            logger.debug(f"File [{upload.name}] is not supported, skipping")
            result.skipped.append(upload.name)

    if not candidates:
        result.error = NO_CANDIDATES_MESSAGE
        return result

    for upload in candidates:
        try:
            deck = analyze_pptx(
                io.BytesIO(upload.data),
                file_name=upload.name,
                file_size=upload.size,
                config=config,
                id_factory=id_factory,
                clock=clock,
            )
        except DeckArchiveError as exc:
            logger.warning(f"Failed to analyse PPTX [{upload.name}]: {exc}")
            result.failures.append(
                ImportFailure(
                    file_name=upload.name,
                    message=unreadable_file_message(upload.name),
                    error=exc,
                )
            )
            continue
        result.decks.append(deck)
    return result


def format_bytes(size: int) -> str:
    """Human readable size: ``0 B``, ``512.0 B``, ``1.5 KB``, ``2.0 MB``."""
    if size == 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{value:.1f} {units[index]}"
