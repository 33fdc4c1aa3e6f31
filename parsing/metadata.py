"""
Translation Metadata Extraction

Reads translation-level metadata (title, rights, language) from a source
document. Recognized shapes:

- OSIS: ``<osis>`` root, first ``<work>`` block with ``title``, ``rights``
  and ``language`` children, ``xml:lang`` on ``osisText``
- Zefania: ``<XMLBIBLE biblename=...>`` with an ``INFORMATION`` block
- USFX: ``<usfx>`` root with a ``languageCode`` child
- Anything else: ``title`` or ``name`` attribute on the root element

Language resolution order: language declared by the document, then hints in
the identifier ("romanian", "ro-", ...), then english.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Dict, Optional, Tuple, Union

from core.errors import MalformedDocumentError
from data.schemas import Translation
from observability.logging import get_logger
from parsing.markup import (
    XML_LANG,
    child_local,
    element_text,
    find_local,
    local_name,
    parse_xml,
)

logger = get_logger(__name__)

DEFAULT_LICENSE = "Public Domain"
DEFAULT_LANGUAGE: Tuple[str, str] = ("english", "en")

LANGUAGE_NAMES: Dict[str, str] = {
    "en": "english",
    "ro": "romanian",
    "es": "spanish",
    "fr": "french",
    "de": "german",
    "pt": "portuguese",
    "it": "italian",
    "nl": "dutch",
    "ru": "russian",
    "uk": "ukrainian",
    "pl": "polish",
    "hu": "hungarian",
    "el": "greek",
    "he": "hebrew",
    "la": "latin",
    "zh": "chinese",
    "ko": "korean",
    "ja": "japanese",
}

# ISO 639-2/3 codes as found in USFX and OSIS headers
_THREE_LETTER_CODES: Dict[str, str] = {
    "eng": "en",
    "ron": "ro",
    "rum": "ro",
    "spa": "es",
    "fra": "fr",
    "fre": "fr",
    "deu": "de",
    "ger": "de",
    "por": "pt",
    "ita": "it",
    "nld": "nl",
    "dut": "nl",
    "rus": "ru",
    "ukr": "uk",
    "pol": "pl",
    "hun": "hu",
    "ell": "el",
    "gre": "el",
    "heb": "he",
    "lat": "la",
    "zho": "zh",
    "chi": "zh",
    "kor": "ko",
    "jpn": "ja",
}

_CODES_BY_NAME: Dict[str, str] = {name: code for code, name in LANGUAGE_NAMES.items()}

# (name hint, code hint as "xx-" or "xx_", language); both matched anywhere in the identifier
_IDENTIFIER_HINTS: Tuple[Tuple[str, str, Tuple[str, str]], ...] = (
    ("romanian", "ro", ("romanian", "ro")),
    ("spanish", "es", ("spanish", "es")),
    ("french", "fr", ("french", "fr")),
)


def language_from_declaration(declared: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Map a declared language ("en", "eng", "en-US", "English") to
    ``(language name, code)``. Unknown codes are passed through lowercased.
    """
    if not declared or not declared.strip():
        return None

    value = declared.strip().lower()
    if value in _CODES_BY_NAME:
        return value, _CODES_BY_NAME[value]

    primary = value.replace("_", "-").split("-", 1)[0]
    code = _THREE_LETTER_CODES.get(primary, primary)
    return LANGUAGE_NAMES.get(code, code), code


def language_from_identifier(identifier: str) -> Optional[Tuple[str, str]]:
    """Guess the language from hints in a translation identifier."""
    lowered = identifier.lower()
    for name_hint, code, language in _IDENTIFIER_HINTS:
        if name_hint in lowered or f"{code}-" in lowered or f"{code}_" in lowered:
            return language
    return None


def resolve_language(declared: Optional[str], identifier: str) -> Tuple[str, str]:
    return (
        language_from_declaration(declared)
        or language_from_identifier(identifier)
        or DEFAULT_LANGUAGE
    )


def _read_osis(root: ET.Element) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    work = find_local(root, "work")
    title = rights = language = None
    if work is not None:
        title = element_text(child_local(work, "title"))
        rights = element_text(child_local(work, "rights"))
        language = element_text(child_local(work, "language"))
    if language is None:
        osis_text = find_local(root, "osisText")
        if osis_text is not None:
            language = osis_text.get(XML_LANG)
    return title, rights, language


def _read_zefania(root: ET.Element) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    info = child_local(root, "INFORMATION")
    title = rights = language = None
    if info is not None:
        title = element_text(child_local(info, "title"))
        rights = element_text(child_local(info, "rights"))
        language = element_text(child_local(info, "language"))
    return title or root.get("biblename"), rights, language


def _read_usfx(root: ET.Element) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    return None, None, element_text(child_local(root, "languageCode"))


_READERS = {
    "osis": _read_osis,
    "XMLBIBLE": _read_zefania,
    "usfx": _read_usfx,
}


def read_metadata(root: ET.Element) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Return ``(title, rights, declared language)`` from a parsed document."""
    reader = _READERS.get(local_name(root.tag))
    title, rights, language = reader(root) if reader else (None, None, None)

    title = title or root.get("title") or root.get("name")
    language = language or root.get(XML_LANG) or root.get("lang") or root.get("language")
    return title, rights, language


def default_translation(
    identifier: str,
    document_key: Optional[str] = None,
) -> Translation:
    """Identifier-derived record used when a document cannot be read."""
    language, code = language_from_identifier(identifier) or DEFAULT_LANGUAGE
    return Translation(
        identifier=identifier,
        name=identifier.upper(),
        language=language,
        language_code=code,
        license=DEFAULT_LICENSE,
        document_key=document_key,
    )


def extract_translation(
    content: Union[bytes, str],
    identifier: str,
    document_key: Optional[str] = None,
) -> Translation:
    """
    Build a Translation from a source document.

    Raises:
        MalformedDocumentError: If the document is empty or not well-formed
    """
    root = parse_xml(content, document_key)
    title, rights, declared = read_metadata(root)
    language, code = resolve_language(declared, identifier)

    return Translation(
        identifier=identifier,
        name=title or identifier.upper(),
        language=language,
        language_code=code,
        license=rights or DEFAULT_LICENSE,
        document_key=document_key,
    )


def extract_translation_or_default(
    content: Union[bytes, str],
    identifier: str,
    document_key: Optional[str] = None,
) -> Translation:
    """Like ``extract_translation`` but degrades to ``default_translation``."""
    try:
        return extract_translation(content, identifier, document_key)
    except MalformedDocumentError as e:
        logger.warning(
            "Falling back to default translation metadata",
            identifier=identifier,
            document_key=document_key,
            error=e.message,
        )
        return default_translation(identifier, document_key)
