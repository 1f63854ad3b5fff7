"""Extraction components: marker grammar, snippet extraction, references, languages."""

from .language_detector import LanguageDetector, LanguageTag, classify, tag
from .snippet_extractor import SourceFile, extract, extract_lines, normalize_indentation
from .reference_resolver import ReferenceResolver, resolve_references, resolve_source_path

__all__ = [
    "LanguageDetector",
    "LanguageTag",
    "classify",
    "tag",
    "SourceFile",
    "extract",
    "extract_lines",
    "normalize_indentation",
    "ReferenceResolver",
    "resolve_references",
    "resolve_source_path",
]
