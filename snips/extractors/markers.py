"""
Marker grammar for source files and documentation.

Recognizes the three marker shapes used by snips:
- Source start:  a comment ending in ``snips-start: NAME``
- Source end:    a comment ending in ``snips-end: NAME`` (name optional)
- Doc reference: ``<!-- snips: PATH -->`` or ``<!-- snips: PATH#NAME -->``

Source markers are not tied to a language: the marker may follow any comment
opener (``//``, ``#``, ``--``, ``/*``, ``<!--``, ``;``), on its own line or
trailing code, and classification happens on the marker keyword alone.
"""

import re
from typing import List, Optional, Tuple
import logging

from snips.errors import UnclosedFence
from snips.schemas import MarkerKind, SourceMarker

logger = logging.getLogger(__name__)

# Allowed characters for snippet identifiers
SNIPPET_ID_CHARS = r"[\w-]"

# Marker at the end of a line, after whatever opens the comment. The name is
# lazy so that a trailing closer ("*/", "-->", "*)") is trimmed off instead of
# swallowed. Quotes never close a comment, so markers inside string literals
# do not match.
SOURCE_MARKER_PATTERN = re.compile(
    rf"(?<!{SNIPPET_ID_CHARS})snips-(?P<kind>start|end)"
    rf"(?:(?::\s*|\s+)(?P<name>{SNIPPET_ID_CHARS}+?))?"
    r"(?:\s*[^\w\s\"'`]+)?\s*$"
)

DOC_REFERENCE_PREFIX_PATTERN = re.compile(r"^[ \t]*<!--\s*snips:")

DOC_REFERENCE_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)<!--\s*snips:\s*(?P<path>[^#\s]+)"
    rf"(?:#(?P<name>{SNIPPET_ID_CHARS}+))?\s*-->\s*$"
)

# ```lang or ~~~lang; only backtick fences are managed, tildes are skipped over
FENCE_OPEN_PATTERN = re.compile(r"^(?P<indent>[ \t]*)(?P<fence>`{3,}|~{3,})(?P<info>.*)$")


def split_lines(text: str) -> List[str]:
    """
    Split text into lines without their line endings.

    Unlike ``str.splitlines`` only ``\\n`` and ``\\r\\n`` end a line, so form
    feeds and other exotic separators inside source files stay intact.

    Args:
        text: Raw file contents

    Returns:
        Lines without endings; a trailing newline does not add an empty line
    """
    return [strip_line_ending(line) for line in split_lines_keepends(text)]


def split_lines_keepends(text: str) -> List[str]:
    """Split text into lines, each keeping its own line ending."""
    return re.findall(r"[^\n]*\n|[^\n]+\Z", text)


def strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def parse_source_marker(line: str) -> Optional[Tuple[MarkerKind, Optional[str]]]:
    """
    Classify a single source line.

    Args:
        line: One line of source text

    Returns:
        (kind, name) for a start/end marker, or None for ordinary lines.
        Start markers always carry a name; end markers may not.
    """
    if "snips-" not in line:
        return None

    match = SOURCE_MARKER_PATTERN.search(line)
    if not match:
        return None

    name = match.group("name")
    if match.group("kind") == "start":
        if not name:
            logger.debug(f"Ignoring snips-start without a name: {line.strip()}")
            return None
        return MarkerKind.SOURCE_START, name

    return MarkerKind.SOURCE_END, name


def scan_source_markers(text: str) -> List[SourceMarker]:
    """
    Find every snips-start / snips-end marker in a source file.

    Args:
        text: Source file contents

    Returns:
        Markers in line order
    """
    markers = []
    for index, line in enumerate(split_lines(text)):
        parsed = parse_source_marker(line)
        if parsed:
            kind, name = parsed
            markers.append(SourceMarker(name=name, line_index=index, kind=kind))
    return markers


def is_reference_candidate(line: str) -> bool:
    """True if the line starts like a doc reference, well-formed or not."""
    return bool(DOC_REFERENCE_PREFIX_PATTERN.match(line))


def parse_doc_reference(line: str) -> Optional[Tuple[str, str, Optional[str]]]:
    """
    Parse a documentation reference marker.

    Args:
        line: One documentation line, without its line ending

    Returns:
        (indent, path, snippet_name) or None when the line does not match
    """
    match = DOC_REFERENCE_PATTERN.match(line)
    if not match:
        return None
    return match.group("indent"), match.group("path"), match.group("name")


def parse_fence_open(line: str) -> Optional[Tuple[str, str, str]]:
    """
    Parse an opening fence line.

    Returns:
        (indent, fence, info) or None if the line does not open a fence
    """
    match = FENCE_OPEN_PATTERN.match(line)
    if not match:
        return None
    fence = match.group("fence")
    info = match.group("info")
    # Backtick fences cannot carry backticks in their info string
    if fence.startswith("`") and "`" in info:
        return None
    return match.group("indent"), fence, info


def is_fence_close(line: str, fence: str) -> bool:
    stripped = line.strip()
    return (
        len(stripped) >= len(fence)
        and stripped[0] == fence[0]
        and stripped == stripped[0] * len(stripped)
    )


def find_closing_fence(lines: List[str], open_index: int, fence: str) -> Optional[int]:
    """Index of the line closing the fence opened at ``open_index``, or None."""
    for index in range(open_index + 1, len(lines)):
        if is_fence_close(lines[index], fence):
            return index
    return None


def find_fence(lines: List[str], index: int, indent: str) -> Optional[Tuple[int, int, Optional[str]]]:
    """
    Locate the backtick fence that immediately follows a reference marker.

    The fence must start on line ``index``. A fence indented differently from
    the marker still belongs to it and is re-indented when rewritten.

    Args:
        lines: Document lines without endings
        index: Line right after the reference marker
        indent: Indentation of the reference marker

    Returns:
        (open_index, close_index, language) or None when no fence follows

    Raises:
        UnclosedFence: The fence is opened but never closed
    """
    if index >= len(lines):
        return None

    opened = parse_fence_open(lines[index])
    if not opened:
        return None

    fence_indent, fence, info = opened
    if not fence.startswith("`"):
        return None

    close_index = find_closing_fence(lines, index, fence)
    if close_index is None:
        raise UnclosedFence(index + 1)

    if fence_indent != indent:
        logger.info(f"Fence at line {index + 1} is not aligned with its marker; it will be re-indented")

    words = info.split()
    language = words[0] if words else None
    return index, close_index, language
