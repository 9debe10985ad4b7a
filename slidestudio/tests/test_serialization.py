import io
import json
import logging
import unittest
import zipfile

import pytest

from slidestudio.extractors.data_types import (
    DraftReference,
    DraftSlide,
    ReferenceDeck,
    ReferenceSlideSummary,
)
from slidestudio.extractors.pptx_analyzer import analyze_pptx
from slidestudio.extractors.serialization import (
    deserialize_extraction,
    serialize_extraction,
)

logger = logging.getLogger(__name__)

tc = unittest.TestCase()
tc.maxDiff = None


def _analyzed_deck() -> ReferenceDeck:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("ppt/slides/slide1.xml", "<s><a>Intro</a><b>Agenda</b></s>")
        zf.writestr("ppt/slides/slide2.xml", "<s/>")
    buffer.seek(0)
    return analyze_pptx(buffer, "serialize.pptx")


def test_serialize_for_json() -> None:
    deck = _analyzed_deck()
    payload = deck.to_json()
    tc.assertIsInstance(payload, dict)
    tc.assertEqual("ReferenceDeck", payload["_type"])
    tc.assertEqual("ReferenceSlideSummary", payload["slides"][0]["_type"])
    tc.assertEqual(["Intro", "Agenda"], payload["slides"][0]["text_snippets"])

    try:
        json.dumps(payload)
    except Exception as e:
        tc.fail("Unexpected exception: {}".format(e))


def test_deserialize_reference_deck() -> None:
    original = _analyzed_deck()
    restored = deserialize_extraction(json.loads(json.dumps(original.to_json())))

    tc.assertIsInstance(restored, ReferenceDeck)
    tc.assertIsInstance(restored.slides[0], ReferenceSlideSummary)
    tc.assertEqual(original, restored)
    tc.assertEqual(original.get_full_text(), restored.get_full_text())


def test_deserialize_draft_slide_with_references() -> None:
    original = DraftSlide(
        id="d1",
        title="Plan",
        bullets=["One", ""],
        references=[DraftReference("deck", "deck.pptx", None, "One")],
    )
    restored = deserialize_extraction(original.to_json())
    tc.assertEqual(original, restored)


def test_deserialize_hand_written_draft() -> None:
    data = {
        "title": "Hand written",
        "bullets": ["a", "b"],
        "references": [{"deck_id": "x", "deck_name": "x.pptx", "text": "a"}],
    }
    slide = deserialize_extraction(data, DraftSlide)
    tc.assertIsInstance(slide, DraftSlide)
    tc.assertEqual("", slide.body)
    tc.assertEqual(["a", "b"], slide.bullets)
    tc.assertEqual(DraftReference("x", "x.pptx", None, "a"), slide.references[0])


def test_deserialize_requires_type_information() -> None:
    with pytest.raises(ValueError):
        deserialize_extraction({"title": "no type"})
    with pytest.raises(ValueError):
        deserialize_extraction(["not", "a", "dict"])


def test_serialize_plain_values() -> None:
    tc.assertEqual({"value": [1, "a"]}, serialize_extraction((1, "a")))
