import typing
from abc import abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Protocol


class ExtractionInterface(Protocol):
    @abstractmethod
    def iterator(self) -> typing.Iterator[str]:
        """
        Returns an iterator over the extracted text, one unit per slide.
        Each unit holds the slide's snippets separated by newlines; slides
        without snippets produce an empty string so that units line up with
        slide positions.
        """
        ...

    @abstractmethod
    def get_full_text(self) -> str:
        """Full text of the slide deck as one single block of text"""
        ...


##################
# Reference decks
##################


@dataclass(frozen=True)
class ReferenceSlideSummary:
    id: str = ""
    name: str = ""  # "Slide {order}"
    order: int = 0  # 1-based position among the sorted slide parts
    text_snippets: List[str] = field(default_factory=list)

    def get_text(self) -> str:
        return "\n".join(self.text_snippets)


@dataclass(frozen=True)
class ReferenceDeck(ExtractionInterface):
    id: str = ""
    file_name: str = ""
    file_size: int = 0
    slide_count: int = 0
    uploaded_at: int = 0  # milliseconds since the epoch
    slides: List[ReferenceSlideSummary] = field(default_factory=list)

    def iterator(self) -> typing.Iterator[str]:
        for slide in self.slides:
            yield slide.get_text()

    def get_full_text(self) -> str:
        return "\n".join(self.iterator())

    def get_slide(self, slide_id: str) -> Optional[ReferenceSlideSummary]:
        return next((slide for slide in self.slides if slide.id == slide_id), None)

    def to_json(self) -> dict:
        from slidestudio.extractors.serialization import serialize_extraction

        return serialize_extraction(self)


################
# Draft slides
################


@dataclass(frozen=True)
class DraftReference:
    """A snippet attached to a draft slide, with the deck/slide it came from."""

    deck_id: str = ""
    deck_name: str = ""
    slide_id: Optional[str] = None
    text: str = ""


@dataclass
class DraftSlide:
    id: str = ""
    title: str = ""
    body: str = ""
    bullets: List[str] = field(default_factory=lambda: [""])
    notes: str = ""
    references: List[DraftReference] = field(default_factory=list)

    def has_title(self) -> bool:
        return bool(self.title.strip())

    def has_body(self) -> bool:
        return bool(self.body.strip())

    def has_bullets(self) -> bool:
        return any(bullet.strip() for bullet in self.bullets)

    def has_content(self) -> bool:
        return self.has_title() or self.has_body() or self.has_bullets()

    def filled_bullets(self) -> List[str]:
        """Trimmed bullets, blanks dropped."""
        return [bullet.strip() for bullet in self.bullets if bullet.strip()]

    def to_json(self) -> dict:
        from slidestudio.extractors.serialization import serialize_extraction

        return serialize_extraction(self)


def create_empty_draft_slide(id_factory: typing.Callable[[], str]) -> DraftSlide:
    return DraftSlide(id=id_factory())
