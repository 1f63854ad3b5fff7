"""
Snippet extraction from source files.

Pairs snips-start / snips-end markers into named line ranges and returns the
lines to embed, with the common leading indentation removed so a snippet
nested deep inside a function renders flush-left in documentation.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
import logging

from snips.errors import (
    DanglingEnd,
    DuplicateSnippetName,
    SnippetNotFound,
    SnipsError,
    UnterminatedSnippet,
)
from snips.extractors.markers import scan_source_markers, split_lines
from snips.schemas import MarkerKind, SnippetRange, SourceMarker

logger = logging.getLogger(__name__)


@dataclass
class SnippetIndex:
    """Named ranges of one source file plus the pairing errors found."""
    ranges: Dict[str, SnippetRange] = field(default_factory=dict)
    errors: Dict[str, SnipsError] = field(default_factory=dict)
    stray_errors: List[SnipsError] = field(default_factory=list)  # unnamed ends with nothing open
    names: List[str] = field(default_factory=list)  # start order, for "available" listings
    marker_lines: List[int] = field(default_factory=list)


def pair_markers(markers: List[SourceMarker], path: Optional[Path] = None) -> SnippetIndex:
    """
    Pair start and end markers into snippet ranges.

    Snippets with different names may nest or interleave freely. A named end
    closes the open snippet of that name; an unnamed end closes the most
    recently opened one. Problems are recorded per name instead of raised so
    that one broken snippet does not hide the healthy ones in the same file.

    Args:
        markers: Markers in line order (see scan_source_markers)
        path: Source path, only used in error messages

    Returns:
        SnippetIndex with ranges and per-name errors
    """
    index = SnippetIndex(marker_lines=[m.line_index for m in markers])
    open_starts: Dict[str, int] = {}
    open_order: List[str] = []

    for marker in markers:
        line_number = marker.line_index + 1

        if marker.kind == MarkerKind.SOURCE_START:
            name = marker.name
            if name not in index.names:
                index.names.append(name)

            if name in open_starts:
                # Overlapping start of the same name; keep the first one open
                index.errors.setdefault(name, DuplicateSnippetName(name, path, line_number))
                continue
            if name in index.ranges:
                index.errors.setdefault(name, DuplicateSnippetName(name, path, line_number))

            open_starts[name] = marker.line_index
            open_order.append(name)
            continue

        name = marker.name
        if name is None:
            if not open_order:
                index.stray_errors.append(DanglingEnd(None, path, line_number))
                continue
            name = open_order[-1]

        if name not in open_starts:
            index.errors.setdefault(name, DanglingEnd(name, path, line_number))
            continue

        start = open_starts.pop(name)
        open_order.remove(name)
        index.ranges.setdefault(name, SnippetRange(start_line=start + 1, end_line=marker.line_index))

    for name in open_starts:
        index.errors.setdefault(name, UnterminatedSnippet(name, path))

    return index


def normalize_indentation(lines: List[str]) -> List[str]:
    """
    Strip the minimum leading-whitespace width of non-blank lines.

    Relative indentation between lines is preserved. Whitespace-only lines
    are emitted empty so uniformly re-indented input yields identical output.

    Args:
        lines: Snippet lines

    Returns:
        Dedented lines
    """
    widths = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    margin = min(widths) if widths else 0
    return [line[margin:] if line.strip() else "" for line in lines]


@dataclass
class SourceFile:
    """A source file read once per run, with its snippet index."""
    path: Optional[Path]
    text: str
    lines: List[str]
    index: SnippetIndex

    @classmethod
    def from_text(cls, text: str, path: Optional[Path] = None) -> "SourceFile":
        lines = split_lines(text)
        index = pair_markers(scan_source_markers(text), path)
        logger.debug(
            f"Parsed {path or '<text>'}: {len(lines)} lines, "
            f"snippets={list(index.ranges)}, errors={len(index.errors)}"
        )
        return cls(path=path, text=text, lines=lines, index=index)

    @property
    def available_snippets(self) -> List[str]:
        return list(self.index.names)

    def locate(self, snippet_name: Optional[str] = None) -> SnippetRange:
        """
        Resolve a snippet name to its line range.

        Args:
            snippet_name: Named snippet, or None for the whole file

        Returns:
            SnippetRange (whole file when snippet_name is None)

        Raises:
            SnippetNotFound: No start marker with that name
            UnterminatedSnippet: Start without end, or a duplicated name
            DanglingEnd: End marker of that name without a start
        """
        if snippet_name is None:
            return SnippetRange(start_line=0, end_line=len(self.lines))

        if snippet_name in self.index.errors:
            raise self.index.errors[snippet_name]

        snippet_range = self.index.ranges.get(snippet_name)
        if snippet_range is None:
            raise SnippetNotFound(snippet_name, self.path, self.available_snippets)

        return snippet_range

    def extract(self, snippet_name: Optional[str] = None) -> List[str]:
        """
        Return the lines to embed for a snippet.

        Whole-file references return the file verbatim, marker comments
        included. Named snippets drop the marker lines of any nested snippets
        and are indentation-normalized.
        """
        snippet_range = self.locate(snippet_name)

        if snippet_name is None:
            return list(self.lines)

        marker_lines = set(self.index.marker_lines)
        body = [
            self.lines[i]
            for i in range(snippet_range.start_line, snippet_range.end_line)
            if i not in marker_lines
        ]
        return normalize_indentation(body)


def extract(source_text: str, snippet_name: Optional[str] = None) -> SnippetRange:
    """
    Convenience function: locate a snippet's line range in source text.

    Example:
        >>> extract("// snips-start: f\\n    let x = 1;\\n// snips-end: f\\n", "f")
        SnippetRange(start_line=1, end_line=2)
    """
    return SourceFile.from_text(source_text).locate(snippet_name)


def extract_lines(source_text: str, snippet_name: Optional[str] = None) -> List[str]:
    """Convenience function: the normalized lines of a snippet in source text."""
    return SourceFile.from_text(source_text).extract(snippet_name)
