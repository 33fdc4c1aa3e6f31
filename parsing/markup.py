"""
XML helpers shared by the metadata and scripture parsers.
"""
from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Iterator, Optional, Union

from core.errors import ErrorContext, MalformedDocumentError

OSIS_NAMESPACE = "http://www.bibletechnologies.net/2003/OSIS/namespace"
XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"

_WHITESPACE = re.compile(r"\s+")
_LEADING_INT = re.compile(r"\d+")


def parse_xml(
    content: Union[bytes, str],
    document_key: Optional[str] = None,
) -> ET.Element:
    """
    Parse a document and return its root element.

    Raises:
        MalformedDocumentError: If the content is empty or not well-formed
    """
    if not content or not content.strip():
        raise MalformedDocumentError(
            "Document is empty",
            document_key=document_key,
            context=ErrorContext.from_current_span("parse", "parsing", document_key=document_key),
        )

    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        line = e.position[0] if getattr(e, "position", None) else None
        raise MalformedDocumentError(
            f"Document is not well-formed XML: {e}",
            document_key=document_key,
            line=line,
            cause=e,
            context=ErrorContext.from_current_span("parse", "parsing", document_key=document_key),
        ) from e


def local_name(tag: object) -> str:
    """Strip the namespace from an element tag. Comments and PIs yield ""."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def iter_local(root: ET.Element, name: str) -> Iterator[ET.Element]:
    """Iterate descendants (and root) whose local name is ``name``."""
    for element in root.iter():
        if local_name(element.tag) == name:
            yield element


def find_local(root: ET.Element, name: str) -> Optional[ET.Element]:
    return next(iter_local(root, name), None)


def child_local(parent: ET.Element, name: str) -> Optional[ET.Element]:
    """First direct child with the given local name."""
    for child in parent:
        if local_name(child.tag) == name:
            return child
    return None


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def element_text(element: Optional[ET.Element]) -> Optional[str]:
    """All text inside an element, whitespace-collapsed; None when blank."""
    if element is None:
        return None
    text = collapse_whitespace("".join(element.itertext()))
    return text or None


def leading_int(value: Optional[str]) -> Optional[int]:
    """Read the leading number of an id such as "16", "16a" or "16-17"."""
    if not value:
        return None
    match = _LEADING_INT.match(value.strip())
    return int(match.group()) if match else None
