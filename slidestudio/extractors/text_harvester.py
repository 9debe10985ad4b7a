"""
Text Harvester
==============

Collects every leaf string of a parsed markup tree, without knowing anything
about the markup schema.

Tree Shape
----------
Slide parts are first converted by :func:`xml_to_tree` into plain Python
values, the same shape a JSON document would have:

    <p:sp><p:txBody><a:p><a:r><a:t>Hello</a:t></a:r></a:p></p:txBody></p:sp>

becomes

    {"p:sp": {"p:txBody": {"a:p": {"a:r": {"a:t": "Hello"}}}}}

Attributes are kept under ``@_``-prefixed keys and element text that sits
next to attributes or child elements goes under ``#text``. Within one element
the child elements come first, then ``#text``, then the attributes, so a
slide root's namespace declarations are harvested last. Repeated sibling
elements collapse into a list under one key.

Harvesting
----------
:func:`collect_text` never looks at keys, so attribute values and element
text are harvested alike, in depth-first pre-order. Nodes are classified once
into a :class:`NodeKind` and the traversal dispatches on that kind. An
explicit stack replaces recursion, so deeply nested trees do not hit the
interpreter recursion limit.
"""

import enum
import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, List

from lxml import etree

logger = logging.getLogger(__name__)

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"
XML_NS = "http://www.w3.org/XML/1998/namespace"

NUMERIC_TEXT_PATTERN = re.compile(r"^[-+]?(\d+(\.\d+)?|\.\d+)([eE][-+]?\d+)?$")
HEX_TEXT_PATTERN = re.compile(r"^0[xX][0-9a-fA-F]+$")


class NodeKind(enum.Enum):
    STRING = "string"
    OTHER = "other"  # numbers, booleans, None and anything else that is not text
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify(node: Any) -> NodeKind:
    if isinstance(node, str):
        return NodeKind.STRING
    if isinstance(node, Mapping):
        return NodeKind.MAPPING
    if isinstance(node, (list, tuple)):
        return NodeKind.SEQUENCE
    return NodeKind.OTHER


def collect_text(node: Any) -> List[str]:
    """
    Flatten a nested tree of strings, sequences and mappings into its
    trimmed, non-empty leaf strings in depth-first pre-order.

    Every occurrence is kept; no deduplication happens here.
    """
    sink: List[str] = []
    stack: List[Any] = [node]
    while stack:
        current = stack.pop()
        kind = classify(current)
        if kind is NodeKind.STRING:
            trimmed = current.strip()
            if trimmed:
                sink.append(trimmed)
        elif kind is NodeKind.SEQUENCE:
            stack.extend(reversed(current))
        elif kind is NodeKind.MAPPING:
            stack.extend(reversed(list(current.values())))
    return sink


##################
# XML -> tree
##################


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _prefixed(uri: str | None, local: str, nsmap: Dict[str | None, str]) -> str:
    if uri is None:
        return local
    if uri == XML_NS:
        return f"xml:{local}"
    for prefix, candidate in nsmap.items():
        if candidate == uri and prefix is not None:
            return f"{prefix}:{local}"
    return local


def _qualified_name(name: str, nsmap: Dict[str | None, str]) -> str:
    qname = etree.QName(name)
    return _prefixed(qname.namespace, qname.localname, nsmap)


def _declared_namespaces(elem: etree._Element) -> Dict[str | None, str]:
    parent = elem.getparent()
    inherited = parent.nsmap if parent is not None else {}
    return {
        prefix: uri
        for prefix, uri in elem.nsmap.items()
        if inherited.get(prefix) != uri
    }


def _element_text(elem: etree._Element) -> str:
    parts = [elem.text] + [child.tail for child in elem]
    return " ".join(part.strip() for part in parts if part and part.strip())


def _attribute_entries(elem: etree._Element) -> Dict[str, str]:
    entries: Dict[str, str] = {}
    for prefix, uri in _declared_namespaces(elem).items():
        key = f"xmlns:{prefix}" if prefix else "xmlns"
        entries[f"{ATTRIBUTE_PREFIX}{key}"] = uri
    for name, value in elem.attrib.items():
        entries[f"{ATTRIBUTE_PREFIX}{_qualified_name(name, elem.nsmap)}"] = value
    return entries


def _text_value(text: str, parse_numbers: bool) -> Any:
    if not parse_numbers:
        return text
    if HEX_TEXT_PATTERN.match(text):
        return int(text, 16)
    if NUMERIC_TEXT_PATTERN.match(text):
        if any(char in text for char in ".eE"):
            return float(text)
        return int(text)
    return text


def _element_to_node(
    elem: etree._Element, ignore_attributes: bool, parse_numbers: bool
) -> Any:
    attributes = {} if ignore_attributes else _attribute_entries(elem)
    text = _element_text(elem)
    children = [child for child in elem if isinstance(child.tag, str)]

    if not attributes and not children:
        return _text_value(text, parse_numbers)

    # Child elements first, then text, then attributes
    node: Dict[str, Any] = {}
    for child in children:
        key = _qualified_name(child.tag, child.nsmap)
        value = _element_to_node(child, ignore_attributes, parse_numbers)
        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]

    if text:
        node[TEXT_KEY] = _text_value(text, parse_numbers)

    node.update(attributes)
    return node


def xml_to_tree(
    raw: str, *, ignore_attributes: bool = False, parse_numbers: bool = False
) -> Dict[str, Any]:
    """
    Parse markup into nested dicts, lists and strings.

    With ``parse_numbers`` set, element text that reads as a decimal or hex
    number becomes an int or float and is therefore not harvested. Attribute
    values always stay strings.

    Raises:
        lxml.etree.XMLSyntaxError: If the markup is malformed.
    """
    # lxml refuses str input that carries an encoding declaration
    root = etree.fromstring(raw.encode("utf-8"), _make_parser())
    return {
        _qualified_name(root.tag, root.nsmap): _element_to_node(
            root, ignore_attributes, parse_numbers
        )
    }
