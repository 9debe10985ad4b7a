class SlideStudioError(Exception):
    """Base class for all errors raised by slidestudio."""

    def __init__(self, message: str = "", *, cause: Exception | None = None):
        super().__init__(message)
        self.__cause__ = cause  # Optional chaining for debugging


class DeckArchiveError(SlideStudioError):
    """Raised when an uploaded file cannot be opened as a presentation archive."""

    def __init__(
        self,
        file_name: str,
        message: str | None = None,
        *,
        cause: Exception | None = None,
    ):
        self.file_name = file_name
        if message is None:
            message = f"Could not read {file_name}"
        super().__init__(message, cause=cause)


class DeckEncryptedError(DeckArchiveError):
    """Raised when the presentation is encrypted or password-protected."""


class DeckZipBombError(DeckArchiveError):
    """Raised when the archive trips one of the ZIP-bomb heuristics."""


class EmptyDraftError(SlideStudioError):
    """Raised when a deck is requested from draft slides without any content."""


class DeckBuildError(SlideStudioError):
    """Raised when the presentation file could not be rendered."""
