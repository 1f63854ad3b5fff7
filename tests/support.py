"""Shared helpers for building markdown and source fixtures."""

from pathlib import Path


def write_source_with_snippet(path: Path, name: str, content: str) -> Path:
    """Create a source file containing a single named snippet between filler lines."""
    path.write_text(
        "// Some code before\n"
        f"// snips-start: {name}\n"
        f"{content}"
        f"// snips-end: {name}\n"
        "// Some code after\n"
    )
    return path


def write_marker(path: Path, marker: str, fence: str = "```", body: str = "old") -> Path:
    """Create a markdown file with one marker followed by a fence holding ``body``."""
    lines = [marker, fence]
    if body:
        lines.append(body)
    lines.append(fence)
    path.write_text("\n".join(lines) + "\n")
    return path
