"""Structured data -> XML document.

Mappings become child elements named after their keys, sequence items
become ``<item>`` elements, scalars become text (``None`` is empty,
booleans are ``true``/``false``). Characters outside the XML 1.0
``Char`` range, such as C0 control characters, are replaced with U+FFFD.
Keys that are not valid XML names are normalized: invalid characters turn
into ``_`` and a name that does not start with a letter or underscore is
prefixed with ``item``.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from typing import Any

ROOT_TAG = "debugbar"

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")
_ILLEGAL_XML_CHARS = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")
REPLACEMENT_CHAR = "\ufffd"


def xml_text(value: str) -> str:
    """Replace characters XML 1.0 cannot carry with U+FFFD."""
    return _ILLEGAL_XML_CHARS.sub(REPLACEMENT_CHAR, value)


def xml_name(key: Any) -> str:
    """Turn an arbitrary mapping key into a valid element name."""
    name = _INVALID_NAME_CHARS.sub("_", str(key))
    if not name or not (name[0].isalpha() or name[0] == "_"):
        name = f"item{name}"
    if name.lower().startswith("xml"):
        name = f"_{name}"
    return name


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return xml_text(str(value))


def _fill(element: ET.Element, value: Any) -> None:
    if isinstance(value, Mapping):
        for key, child in value.items():
            _fill(ET.SubElement(element, xml_name(key)), child)
    elif isinstance(value, Sequence) and not isinstance(value, str | bytes):
        for child in value:
            _fill(ET.SubElement(element, "item"), child)
    else:
        element.text = _text(value)


def to_xml(data: Any, root: str = ROOT_TAG) -> bytes:
    """Serialize ``data`` as a UTF-8 XML document with a declaration."""
    element = ET.Element(xml_name(root))
    _fill(element, data)
    return ET.tostring(element, encoding="utf-8", xml_declaration=True)


__all__ = ["to_xml", "xml_name", "xml_text"]
