from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass

from slidestudio.exceptions import DeckZipBombError


@dataclass(frozen=True)
class ZipBombLimits:
    """
    Heuristics for rejecting probable ZIP bombs before any slide is read.

    Presentations are small compared to SharePoint exports, but decks with
    embedded video easily reach a few hundred megabytes, so the size limits
    stay generous.
    """

    max_entries: int = 10_000
    max_total_uncompressed_bytes: int = 2 * 1024 * 1024 * 1024  # 2 GiB
    max_single_uncompressed_bytes: int = 512 * 1024 * 1024  # 512 MiB
    max_total_compression_ratio: float = 200.0
    max_entry_compression_ratio: float = 500.0


DEFAULT_ZIP_BOMB_LIMITS = ZipBombLimits()


def _reject(reason: str, source: str | None) -> DeckZipBombError:
    name = source or "<archive>"
    return DeckZipBombError(name, f"Could not read {name}: {reason}")


def validate_zipfile(
    zf: zipfile.ZipFile,
    *,
    limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS,
    source: str | None = None,
) -> None:
    """
    Validate a ZIP container against high-confidence ZIP-bomb indicators.

    This is a best-effort DoS mitigation, not a complete sandbox.
    """
    infos = zf.infolist()

    if len(infos) > limits.max_entries:
        raise _reject(
            f"too many entries ({len(infos)} > {limits.max_entries})", source
        )

    total_uncompressed = 0
    total_compressed = 0

    for info in infos:
        if info.is_dir():
            continue

        file_size = info.file_size
        compressed_size = info.compress_size

        if file_size > limits.max_single_uncompressed_bytes:
            raise _reject(
                f"entry {info.filename} too large "
                f"({file_size} bytes > {limits.max_single_uncompressed_bytes})",
                source,
            )

        if file_size > 0:
            if compressed_size <= 0:
                raise _reject(
                    f"entry {info.filename} has zero compressed size", source
                )
            ratio = file_size / compressed_size
            if ratio > limits.max_entry_compression_ratio:
                raise _reject(
                    f"entry {info.filename} compression ratio too high "
                    f"({ratio:.1f} > {limits.max_entry_compression_ratio})",
                    source,
                )

        total_uncompressed += file_size
        total_compressed += compressed_size

        if total_uncompressed > limits.max_total_uncompressed_bytes:
            raise _reject(
                f"total uncompressed size too large ({total_uncompressed} bytes "
                f"> {limits.max_total_uncompressed_bytes})",
                source,
            )

    if total_uncompressed > 0:
        if total_compressed <= 0:
            raise _reject("zero total compressed size", source)
        total_ratio = total_uncompressed / total_compressed
        if total_ratio > limits.max_total_compression_ratio:
            raise _reject(
                f"total compression ratio too high "
                f"({total_ratio:.1f} > {limits.max_total_compression_ratio})",
                source,
            )


def open_zipfile(
    file_like: io.BytesIO,
    *,
    limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS,
    source: str | None = None,
) -> zipfile.ZipFile:
    """
    Open a ZIP file and validate it for ZIP-bomb indicators.

    Caller owns the returned ZipFile and must close it.
    """
    file_like.seek(0)
    zf = zipfile.ZipFile(file_like, "r")
    try:
        validate_zipfile(zf, limits=limits, source=source)
    except Exception:
        zf.close()
        raise
    return zf
