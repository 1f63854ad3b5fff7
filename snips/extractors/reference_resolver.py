"""
Reference resolver for documentation files.

Scans a markdown document for ``<!-- snips: PATH[#NAME] -->`` markers and
records, for each one, the fenced code block that immediately follows it (if
any). Markers inside unrelated code fences are ignored, and so is the content
of the fences that snips itself manages.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union
import logging

from snips.errors import InvalidMarker, SnipsError, UnclosedFence
from snips.extractors.markers import (
    find_closing_fence,
    find_fence,
    is_reference_candidate,
    parse_doc_reference,
    parse_fence_open,
    split_lines_keepends,
    strip_line_ending,
)
from snips.schemas import FencedBlock, Reference, Span

logger = logging.getLogger(__name__)


@dataclass
class ReferenceSite:
    """One marker occurrence: a parsed reference, or the error that prevented parsing."""
    line_index: int
    reference: Optional[Reference] = None
    fence: Optional[FencedBlock] = None
    error: Optional[SnipsError] = None


@dataclass
class ScannedDocument:
    """A documentation file split into lines, with every reference site found."""
    text: str
    raw_lines: List[str]  # with line endings
    lines: List[str]  # without line endings
    offsets: List[int]  # character offset of each line start
    newline: str
    sites: List[ReferenceSite] = field(default_factory=list)

    @property
    def references(self) -> List[Reference]:
        return [site.reference for site in self.sites if site.reference is not None]

    def line_span(self, start_line: int, end_line: int) -> Span:
        """Span covering lines start_line..end_line inclusive, line endings included."""
        end = self.offsets[end_line] + len(self.raw_lines[end_line])
        return Span(start=self.offsets[start_line], end=end)


def detect_newline(text: str) -> str:
    """The document's line-break convention: \\r\\n if it uses it, else \\n."""
    return "\r\n" if "\r\n" in text else "\n"


class ReferenceResolver:
    """
    Find reference markers in documentation.

    Handles:
    - Well-formed markers, with or without a snippet name
    - Indented markers (e.g. inside list items)
    - Malformed markers, reported as InvalidMarker
    - Managed fences directly after a marker, re-indented to the marker's indentation
    """

    def scan(self, document_text: str) -> ScannedDocument:
        """
        Scan a document for reference markers.

        Args:
            document_text: Raw documentation contents

        Returns:
            ScannedDocument with one ReferenceSite per marker, in document order
        """
        raw_lines = split_lines_keepends(document_text)
        lines = [strip_line_ending(line) for line in raw_lines]

        offsets = []
        position = 0
        for raw in raw_lines:
            offsets.append(position)
            position += len(raw)

        document = ScannedDocument(
            text=document_text,
            raw_lines=raw_lines,
            lines=lines,
            offsets=offsets,
            newline=detect_newline(document_text),
        )

        index = 0
        while index < len(lines):
            line = lines[index]

            if is_reference_candidate(line):
                index = self._scan_marker(document, index)
                continue

            opened = parse_fence_open(line)
            if opened:
                # Unrelated fence: skip its body so example markers inside are inert
                close_index = find_closing_fence(lines, index, opened[1])
                index = len(lines) if close_index is None else close_index + 1
                continue

            index += 1

        logger.debug(
            f"Found {len(document.references)} references "
            f"({len(document.sites) - len(document.references)} invalid)"
        )
        return document

    def _scan_marker(self, document: ScannedDocument, index: int) -> int:
        """Record the site at ``index`` and return the next line to scan."""
        line = document.lines[index]
        parsed = parse_doc_reference(line)

        if parsed is None:
            logger.warning(f"Invalid snips marker at line {index + 1}: {line.strip()}")
            document.sites.append(ReferenceSite(line_index=index, error=InvalidMarker(index + 1, line)))
            return index + 1

        indent, source_path, snippet_name = parsed
        reference = Reference(
            source_path=source_path,
            snippet_name=snippet_name,
            location=document.line_span(index, index),
            line_index=index,
            indent=indent,
        )
        site = ReferenceSite(line_index=index, reference=reference)
        document.sites.append(site)

        try:
            found = find_fence(document.lines, index + 1, indent)
        except UnclosedFence as e:
            site.error = e
            return len(document.lines)

        if found is None:
            return index + 1

        open_index, close_index, language = found
        site.fence = FencedBlock(
            span=document.line_span(open_index, close_index),
            start_line=open_index,
            end_line=close_index,
            language=language,
            lines=document.lines[open_index:close_index + 1],
        )
        return close_index + 1


def resolve_references(document_text: str) -> List[Reference]:
    """
    Convenience function: every well-formed reference in document order.

    A reference is returned whether or not a fence currently follows it.

    Example:
        >>> refs = resolve_references("<!-- snips: src/lib.rs#setup -->\\n")
        >>> refs[0].marker
        'src/lib.rs#setup'
    """
    return ReferenceResolver().scan(document_text).references


def resolve_source_path(reference: Reference, base_dir: Union[str, Path]) -> Path:
    """
    Resolve a reference's source path.

    Relative paths are taken relative to the documentation file's directory;
    absolute paths are used as-is.

    Args:
        reference: Parsed reference
        base_dir: Directory containing the documentation file

    Returns:
        Path to the source file
    """
    source = Path(os.path.expanduser(reference.source_path))
    if source.is_absolute():
        return source
    return Path(base_dir) / source
