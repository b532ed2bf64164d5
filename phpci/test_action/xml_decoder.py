"""Decode JUnit and Clover XML documents into plain attribute/tag trees.

The decoded tree mirrors the document shape:

* attributes are stored under ``@_<name>`` with numeric-looking values
  coerced to ``int``/``float``;
* element text is trimmed and stored under ``#text``;
* a tag that occurs once decodes to a mapping, a tag repeated among
  siblings decodes to a list in document order;
* an element without attributes or children decodes to its text.

Consumers never index the tree directly: :func:`child`, :func:`children`,
:func:`attributes` and :func:`text` are the only accessors, so the
single-versus-repeated normalization happens in exactly one place.
"""

import logging
import re
from typing import Any, TypeAlias
from xml.etree.ElementTree import Element

from defusedxml import ElementTree
from defusedxml.common import DefusedXmlException

from phpci.test_action.errors import MalformedDocumentError

logger = logging.getLogger(__name__)

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"

Scalar: TypeAlias = str | int | float
ParsedNode: TypeAlias = dict[str, Any]

_INT_PATTERN = re.compile(r"[+-]?\d+")
_FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?\d+[eE][+-]?\d+")


def coerce(value: str) -> Scalar:
    """Trim *value* and convert it to a number when it looks like one."""
    stripped = value.strip()
    if _INT_PATTERN.fullmatch(stripped):
        return int(stripped)
    if _FLOAT_PATTERN.fullmatch(stripped):
        return float(stripped)
    return stripped


def decode(xml_text: str | bytes) -> ParsedNode:
    """Decode an XML document into a ``{root_tag: node}`` mapping.

    Args:
        xml_text: Complete XML document; bytes are decoded according to
            the document's encoding declaration

    Returns:
        Parsed tree keyed by the root element tag

    Raises:
        MalformedDocumentError: If the input is not well-formed XML

    """
    try:
        root = ElementTree.fromstring(xml_text)
    except (ElementTree.ParseError, DefusedXmlException, ValueError) as e:
        raise MalformedDocumentError(f"Malformed XML document: {e}") from e

    return {root.tag: _convert(root)}


def safe_decode(xml_text: str | bytes) -> ParsedNode | None:
    """Decode an XML document, returning None when it is malformed."""
    try:
        return decode(xml_text)
    except MalformedDocumentError as e:
        logger.debug(f"Ignoring malformed XML: {e}")
        return None


def _convert(element: Element) -> Scalar | ParsedNode:
    node: ParsedNode = {
        f"{ATTRIBUTE_PREFIX}{name}": coerce(value)
        for name, value in element.attrib.items()
    }

    for sub_element in element:
        value = _convert(sub_element)
        tag = sub_element.tag
        if tag not in node:
            node[tag] = value
        elif isinstance(node[tag], list):
            node[tag].append(value)
        else:
            node[tag] = [node[tag], value]

    content = (element.text or "").strip()
    if not node:
        return coerce(content) if content else ""
    if content:
        node[TEXT_KEY] = coerce(content)
    return node


def child(node: Any, tag: str) -> Any | None:
    """Return the first *tag* child of *node*, or None when absent."""
    items = children(node, tag)
    return items[0] if items else None


def children(node: Any, tag: str) -> list[Any]:
    """Return every *tag* child of *node* as a list, in document order."""
    if not isinstance(node, dict) or tag not in node:
        return []
    value = node[tag]
    if isinstance(value, list):
        return list(value)
    return [value]


def attributes(node: Any) -> dict[str, Scalar]:
    """Return the attributes of *node* without the attribute prefix."""
    if not isinstance(node, dict):
        return {}
    return {
        key[len(ATTRIBUTE_PREFIX) :]: value
        for key, value in node.items()
        if key.startswith(ATTRIBUTE_PREFIX)
    }


def text(node: Any) -> str | None:
    """Return the text content of *node*, or None when it has none."""
    value = node.get(TEXT_KEY) if isinstance(node, dict) else node
    if value is None or value == "":
        return None
    return str(value)
