import io
import re

from slidestudio.extractors.util.zip_bomb import (
    DEFAULT_ZIP_BOMB_LIMITS,
    ZipBombLimits,
    open_zipfile,
)

# Numbered slide parts only; slideLayouts, slideMasters and the _rels
# folder below ppt/slides/ never match.
SLIDE_PART_PATTERN = re.compile(r"^ppt/slides/slide\d+\.xml$")
SLIDE_NUMBER_PATTERN = re.compile(r"slide(\d+)\.xml$")


def slide_number(name: str) -> int:
    """Numeric index embedded in a slide part name, 0 if there is none."""
    match = SLIDE_NUMBER_PATTERN.search(name)
    if match is None:
        return 0
    return int(match.group(1))


class ZipContext:
    """Open presentation archive with helpers for locating and reading slide parts."""

    def __init__(
        self,
        file_like: io.BytesIO,
        *,
        limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS,
        source: str | None = None,
    ):
        self.file_like = file_like
        self.file_like.seek(0)
        self._zip = open_zipfile(self.file_like, limits=limits, source=source)
        # infolist keeps archive order, which the numeric sort below relies on
        # as its tie breaker
        self._names = [info.filename for info in self._zip.infolist()]

    def __enter__(self) -> "ZipContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def slide_parts(self) -> list[str]:
        """Slide part names sorted by their numeric index, not lexically."""
        names = [name for name in self._names if SLIDE_PART_PATTERN.match(name)]
        return sorted(names, key=slide_number)

    def read_text(self, path: str) -> str:
        return self._zip.read(path).decode("utf-8-sig", errors="replace")

    def close(self) -> None:
        self._zip.close()
