"""
Parsing of XML Bible documents (USFX, OSIS, Zefania): translation metadata
and verse text.
"""
from parsing.metadata import (
    default_translation,
    extract_translation,
    extract_translation_or_default,
    resolve_language,
)
from parsing.scripture import ScriptureIndex, parse_scripture

__all__ = [
    "ScriptureIndex",
    "default_translation",
    "extract_translation",
    "extract_translation_or_default",
    "parse_scripture",
    "resolve_language",
]
