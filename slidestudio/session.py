"""
Draft composition state.

A :class:`StudioSession` holds everything a user works with while composing a
presentation: the reference decks imported so far and the draft slides being
edited. Nothing is persisted; the session lives as long as the object.

Draft slides are replaced, never mutated in place, so a slide object handed
out earlier keeps its content.
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional

from slidestudio.builders.deck_emitter import (
    GeneratedDeck,
    build_presentation,
    presentation_file_name,
)
from slidestudio.config import DEFAULT_DECK_STYLE, DeckStyle
from slidestudio.exceptions import DeckBuildError
from slidestudio.extractors.data_types import (
    DraftReference,
    DraftSlide,
    ReferenceDeck,
    create_empty_draft_slide,
)
from slidestudio.extractors.util.identifiers import IdFactory, random_id

logger = logging.getLogger(__name__)

ALREADY_IMPORTED_MESSAGE = "These presentations were already imported."
EMPTY_DRAFT_MESSAGE = "Please add some content before generating."
GENERATED_MESSAGE = "Presentation downloaded successfully."
GENERATION_FAILED_MESSAGE = (
    "Something went wrong while generating the PowerPoint. Please try again."
)


def set_bullet(slide: DraftSlide, index: int, value: str) -> DraftSlide:
    bullets = list(slide.bullets)
    bullets[index] = value
    return replace(slide, bullets=bullets)


def add_bullet(slide: DraftSlide) -> DraftSlide:
    return replace(slide, bullets=[*slide.bullets, ""])


def remove_bullet(slide: DraftSlide, index: int) -> DraftSlide:
    bullets = [bullet for i, bullet in enumerate(slide.bullets) if i != index]
    return replace(slide, bullets=bullets or [""])


def attach_snippet(
    slide: DraftSlide, deck: ReferenceDeck, slide_id: Optional[str], text: str
) -> DraftSlide:
    """
    Put a snippet on a draft slide.

    The snippet becomes a bullet unless an identical bullet is already there;
    it fills the first blank bullet before a new one is appended. The
    reference is recorded once per (text, deck, source slide).
    """
    snippet = text.strip()

    bullets = list(slide.bullets)
    if not any(bullet.strip() == snippet for bullet in bullets):
        blank = next(
            (i for i, bullet in enumerate(bullets) if not bullet.strip()), None
        )
        if blank is None:
            bullets.append(snippet)
        else:
            bullets[blank] = snippet

    references = list(slide.references)
    already_attached = any(
        reference.text.strip() == snippet
        and reference.deck_id == deck.id
        and reference.slide_id == slide_id
        for reference in references
    )
    if not already_attached:
        references.append(
            DraftReference(
                deck_id=deck.id,
                deck_name=deck.file_name,
                slide_id=slide_id,
                text=snippet,
            )
        )

    return replace(slide, bullets=bullets, references=references)


class StudioSession:
    def __init__(self, id_factory: IdFactory = random_id):
        self._id_factory = id_factory
        self.reference_decks: List[ReferenceDeck] = []
        first = create_empty_draft_slide(id_factory)
        self.draft_slides: List[DraftSlide] = [first]
        self.active_slide_id: str = first.id
        self.status_message: Optional[str] = None

    @property
    def active_slide(self) -> Optional[DraftSlide]:
        return self.get_slide(self.active_slide_id)

    def get_slide(self, slide_id: str) -> Optional[DraftSlide]:
        return next(
            (slide for slide in self.draft_slides if slide.id == slide_id), None
        )

    def get_deck(self, deck_id: str) -> Optional[ReferenceDeck]:
        return next(
            (deck for deck in self.reference_decks if deck.id == deck_id), None
        )

    #################
    # Reference decks
    #################

    def add_decks(self, decks: Iterable[ReferenceDeck]) -> List[ReferenceDeck]:
        """
        Add freshly analyzed decks, newest first. Decks whose id or file name
        is already known are dropped. Returns the decks actually added.
        """
        known_ids = {deck.id for deck in self.reference_decks}
        known_names = {deck.file_name for deck in self.reference_decks}
        accepted = [
            deck
            for deck in decks
            if deck.id not in known_ids and deck.file_name not in known_names
        ]
        if not accepted:
            self.status_message = ALREADY_IMPORTED_MESSAGE
            return []

        self.status_message = (
            f"Loaded {accepted[0].file_name}"
            if len(accepted) == 1
            else f"Loaded {len(accepted)} presentations"
        )
        self.reference_decks = accepted + self.reference_decks
        return accepted

    ##############
    # Draft slides
    ##############

    def add_slide(self) -> DraftSlide:
        slide = create_empty_draft_slide(self._id_factory)
        self.draft_slides.append(slide)
        self.active_slide_id = slide.id
        return slide

    def select_slide(self, slide_id: str) -> None:
        if self.get_slide(slide_id) is not None:
            self.active_slide_id = slide_id

    def update_slide(self, slide_id: str, slide: DraftSlide) -> None:
        self.draft_slides = [
            slide if current.id == slide_id else current
            for current in self.draft_slides
        ]

    def delete_slide(self, slide_id: str) -> None:
        remaining = [slide for slide in self.draft_slides if slide.id != slide_id]
        if not remaining:
            fresh = create_empty_draft_slide(self._id_factory)
            self.draft_slides = [fresh]
            self.active_slide_id = fresh.id
            return

        if slide_id == self.active_slide_id:
            self.active_slide_id = remaining[0].id
        self.draft_slides = remaining

    def select_snippet(
        self, deck_id: str, slide_id: Optional[str], text: str
    ) -> Optional[DraftSlide]:
        """
        Attach a snippet from a reference deck to the active draft slide,
        or to the first slide when none is active.

        Returns the updated slide, or None if the deck is unknown.
        """
        deck = self.get_deck(deck_id)
        if deck is None or not self.draft_slides:
            return None

        target = self.active_slide
        if target is None:
            target = self.draft_slides[0]
            self.active_slide_id = target.id

        updated = attach_snippet(target, deck, slide_id, text)
        self.update_slide(target.id, updated)
        return updated

    ############
    # Generation
    ############

    def has_content(self) -> bool:
        return any(slide.has_content() for slide in self.draft_slides)

    def generate_deck(
        self, style: DeckStyle = DEFAULT_DECK_STYLE
    ) -> Optional[GeneratedDeck]:
        if not self.has_content():
            self.status_message = EMPTY_DRAFT_MESSAGE
            return None

        self.status_message = None
        try:
            data = build_presentation(self.draft_slides, style)
        except DeckBuildError:
            logger.exception("Failed to build presentation")
            self.status_message = GENERATION_FAILED_MESSAGE
            return None

        self.status_message = GENERATED_MESSAGE
        return GeneratedDeck(
            file_name=presentation_file_name(self.draft_slides), data=data
        )
