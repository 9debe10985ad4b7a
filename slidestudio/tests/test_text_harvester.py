import logging
import unittest

import pytest
from lxml import etree

from slidestudio.extractors.text_harvester import (
    NodeKind,
    classify,
    collect_text,
    xml_to_tree,
)

logger = logging.getLogger(__name__)

tc = unittest.TestCase()
tc.maxDiff = None


def test_classify_node_kinds() -> None:
    tc.assertEqual(NodeKind.STRING, classify("text"))
    tc.assertEqual(NodeKind.SEQUENCE, classify(["a"]))
    tc.assertEqual(NodeKind.SEQUENCE, classify(("a",)))
    tc.assertEqual(NodeKind.MAPPING, classify({"a": 1}))
    tc.assertEqual(NodeKind.OTHER, classify(42))
    tc.assertEqual(NodeKind.OTHER, classify(None))
    tc.assertEqual(NodeKind.OTHER, classify(True))
    tc.assertEqual(NodeKind.OTHER, classify(b"bytes"))


def test_collect_text_is_depth_first_pre_order() -> None:
    tree = {
        "a": ["x", {"b": "  y  ", "c": ["", "z"]}],
        "d": 5,
        "e": None,
        "f": "w",
    }
    tc.assertEqual(["x", "y", "z", "w"], collect_text(tree))


def test_collect_text_keeps_every_occurrence() -> None:
    tree = ["same", {"k": "same"}, ("same", "other")]
    tc.assertEqual(["same", "same", "same", "other"], collect_text(tree))


def test_collect_text_ignores_keys() -> None:
    tree = {"@_name": "attribute value", "#text": "element text", "key": "leaf"}
    tc.assertEqual(["attribute value", "element text", "leaf"], collect_text(tree))


def test_collect_text_on_primitives() -> None:
    tc.assertEqual(["hello"], collect_text("  hello\n"))
    tc.assertEqual([], collect_text("   "))
    tc.assertEqual([], collect_text(3.14))
    tc.assertEqual([], collect_text({}))


def test_collect_text_handles_deep_nesting() -> None:
    tree = "bottom"
    for _ in range(5_000):
        tree = {"level": [tree]}
    tc.assertEqual(["bottom"], collect_text(tree))


def test_xml_to_tree_shape() -> None:
    raw = (
        '<p:sp xmlns:p="urn:p" xmlns:a="urn:a" id="7">'
        "<a:t>One</a:t><a:t>Two</a:t>"
        '<p:x name="n">inside</p:x>'
        "</p:sp>"
    )
    expected = {
        "p:sp": {
            "a:t": ["One", "Two"],
            "p:x": {"#text": "inside", "@_name": "n"},
            "@_xmlns:p": "urn:p",
            "@_xmlns:a": "urn:a",
            "@_id": "7",
        }
    }
    tree = xml_to_tree(raw)
    tc.assertEqual(expected, tree)
    tc.assertEqual(
        ["a:t", "p:x", "@_xmlns:p", "@_xmlns:a", "@_id"], list(tree["p:sp"])
    )
    tc.assertEqual(["#text", "@_name"], list(tree["p:sp"]["p:x"]))


def test_xml_to_tree_ignoring_attributes() -> None:
    raw = '<p:sp xmlns:p="urn:p" id="7"><p:t>Only text</p:t><p:empty/></p:sp>'
    tc.assertEqual(
        {"p:sp": {"p:t": "Only text", "p:empty": ""}},
        xml_to_tree(raw, ignore_attributes=True),
    )


def test_xml_to_tree_accepts_encoding_declaration() -> None:
    raw = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n<root>Ünïcode</root>'
    tc.assertEqual({"root": "Ünïcode"}, xml_to_tree(raw))


def test_xml_to_tree_decodes_entities_and_drops_comments() -> None:
    raw = "<root><!-- hidden --><t>A &amp; B &#169;</t></root>"
    tc.assertEqual({"root": {"t": "A & B ©"}}, xml_to_tree(raw))


def test_xml_to_tree_raises_on_malformed_markup() -> None:
    with pytest.raises(etree.XMLSyntaxError):
        xml_to_tree("<root><unclosed></root>")


def test_attributes_are_harvested_after_children() -> None:
    tc.assertEqual(
        ["child", "attr"], collect_text(xml_to_tree("<r a='attr'><c>child</c></r>"))
    )


def test_root_namespace_declarations_are_harvested_last() -> None:
    raw = (
        '<p:sld xmlns:a="urn:a" xmlns:p="urn:p" xmlns:r="urn:r">'
        "<p:cSld><a:t>First</a:t><a:t>Second</a:t></p:cSld>"
        "</p:sld>"
    )
    tc.assertEqual(
        ["First", "Second", "urn:a", "urn:p", "urn:r"],
        collect_text(xml_to_tree(raw)),
    )


def test_numeric_text_is_kept_by_default() -> None:
    raw = "<root><t>2024</t><t>Budget</t></root>"
    tc.assertEqual({"root": {"t": ["2024", "Budget"]}}, xml_to_tree(raw))


def test_parse_numbers_converts_numeric_text() -> None:
    raw = '<root n="42"><t>2024</t><t>-3.5</t><t>0x1F</t><t>1e3</t><t>v2</t></root>'
    tree = xml_to_tree(raw, parse_numbers=True)
    tc.assertEqual(
        {"root": {"t": [2024, -3.5, 31, 1000.0, "v2"], "@_n": "42"}},
        tree,
    )
    tc.assertEqual(["v2", "42"], collect_text(tree))
