import io
import logging
import unittest
import zipfile

from slidestudio.exceptions import DeckArchiveError
from slidestudio.extractors.util.identifiers import SequentialIds
from slidestudio.intake import (
    NO_CANDIDATES_MESSAGE,
    UploadedFile,
    format_bytes,
    import_reference_decks,
    is_supported_file,
)

logger = logging.getLogger(__name__)

tc = unittest.TestCase()


def _pptx_bytes(text: str) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(
            "ppt/slides/slide1.xml",
            '<p:sld xmlns:a="urn:a" xmlns:p="urn:p"><a:t>' + text + "</a:t></p:sld>",
        )
    return buffer.getvalue()


def test_is_supported() -> None:
    tc.assertTrue(is_supported_file("deck.pptx"))
    tc.assertTrue(is_supported_file("DECK.PPTX"))
    tc.assertFalse(is_supported_file("deck.ppt"))
    tc.assertFalse(is_supported_file("deck.pdf"))
    tc.assertFalse(is_supported_file("pptx"))
    tc.assertFalse(is_supported_file("deck.pptx.gz"))
    tc.assertFalse(is_supported_file("deck.pptx.bz2"))


def test_batch_with_one_broken_file() -> None:
    result = import_reference_decks(
        [
            UploadedFile("good.pptx", _pptx_bytes("Hello")),
            UploadedFile("bad.pptx", b"garbage"),
        ],
        id_factory=SequentialIds(),
    )

    tc.assertFalse(result.ok)
    tc.assertEqual(["good.pptx"], [deck.file_name for deck in result.decks])
    tc.assertEqual(1, len(result.failures))

    failure = result.failures[0]
    tc.assertEqual("bad.pptx", failure.file_name)
    tc.assertEqual(
        "Could not read bad.pptx. Please verify the file is not corrupted.",
        failure.message,
    )
    tc.assertIsInstance(failure.error, DeckArchiveError)

    deck = result.decks[0]
    tc.assertEqual(1, deck.slide_count)
    tc.assertIn("Hello", deck.slides[0].text_snippets)


def _encrypted_entry_pptx_bytes() -> bytes:
    data = bytearray(_pptx_bytes("Locked"))
    # Set the "encrypted" general purpose flag on the single slide entry
    local_header = data.find(b"PK\x03\x04")
    data[local_header + 6] |= 0x01
    central_header = data.find(b"PK\x01\x02")
    data[central_header + 8] |= 0x01
    return bytes(data)


def test_damaged_ole_file_fails_only_itself() -> None:
    damaged_ole = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\0" * 100
    result = import_reference_decks(
        [
            UploadedFile("good.pptx", _pptx_bytes("Hello")),
            UploadedFile("ole.pptx", damaged_ole),
        ]
    )
    tc.assertEqual(["good.pptx"], [deck.file_name for deck in result.decks])
    tc.assertEqual(["ole.pptx"], [f.file_name for f in result.failures])
    tc.assertIsInstance(result.failures[0].error, DeckArchiveError)


def test_password_protected_entry_fails_only_its_deck() -> None:
    result = import_reference_decks(
        [
            UploadedFile("locked.pptx", _encrypted_entry_pptx_bytes()),
            UploadedFile("good.pptx", _pptx_bytes("Hello")),
        ]
    )
    tc.assertEqual(["good.pptx"], [deck.file_name for deck in result.decks])
    tc.assertEqual(["locked.pptx"], [f.file_name for f in result.failures])
    error = result.failures[0].error
    tc.assertIsInstance(error, DeckArchiveError)
    tc.assertIsInstance(error.__cause__, RuntimeError)


def test_failure_does_not_stop_later_files() -> None:
    result = import_reference_decks(
        [
            UploadedFile("first.pptx", b"not a zip"),
            UploadedFile("second.pptx", _pptx_bytes("Still analyzed")),
            UploadedFile("third.pptx", _pptx_bytes("Also analyzed")),
        ]
    )
    tc.assertEqual(
        ["second.pptx", "third.pptx"], [deck.file_name for deck in result.decks]
    )
    tc.assertEqual(["first.pptx"], [f.file_name for f in result.failures])


def test_non_pptx_files_are_skipped() -> None:
    result = import_reference_decks(
        [
            UploadedFile("notes.txt", b"plain"),
            UploadedFile("deck.pptx", _pptx_bytes("Kept")),
        ]
    )
    tc.assertTrue(result.ok)
    tc.assertEqual(["notes.txt"], result.skipped)
    tc.assertEqual(1, len(result.decks))


def test_batch_without_candidates() -> None:
    result = import_reference_decks([UploadedFile("report.docx", b"")])
    tc.assertEqual(NO_CANDIDATES_MESSAGE, result.error)
    tc.assertEqual([], result.decks)
    tc.assertEqual([], result.failures)
    tc.assertFalse(result.ok)


def test_file_size_comes_from_upload() -> None:
    data = _pptx_bytes("Sized")
    result = import_reference_decks([UploadedFile("sized.pptx", data)])
    tc.assertEqual(len(data), result.decks[0].file_size)


def test_uploaded_file_from_path(tmp_path) -> None:
    path = tmp_path / "disk.pptx"
    path.write_bytes(b"abc")
    upload = UploadedFile.from_path(path)
    tc.assertEqual("disk.pptx", upload.name)
    tc.assertEqual(3, upload.size)


def test_format_bytes() -> None:
    tc.assertEqual("0 B", format_bytes(0))
    tc.assertEqual("512.0 B", format_bytes(512))
    tc.assertEqual("1.5 KB", format_bytes(1536))
    tc.assertEqual("1.0 MB", format_bytes(1024 * 1024))
    tc.assertEqual("2.5 GB", format_bytes(int(2.5 * 1024**3)))
