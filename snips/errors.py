"""Custom exceptions for the :mod:`snips` package."""

from pathlib import Path
from typing import List, Optional


class SnipsError(Exception):
    """Base exception for snippet synchronization errors."""


class SnippetNotFound(SnipsError):
    """A referenced snippet name has no start marker in the source file."""

    def __init__(self, name: str, path: Optional[Path] = None, available: Optional[List[str]] = None):
        self.name = name
        self.path = path
        self.available = list(available or [])
        available_display = ", ".join(self.available) if self.available else "none"
        location = f" in {path}" if path else ""
        super().__init__(
            f"snippet `{name}` not found{location}\nAvailable snippets: {available_display}"
        )


class UnterminatedSnippet(SnipsError):
    """A start marker is never closed by a matching end marker."""

    def __init__(self, name: str, path: Optional[Path] = None):
        self.name = name
        self.path = path
        location = f" in {path}" if path else ""
        super().__init__(f"unterminated snippet `{name}`{location}")


class DuplicateSnippetName(UnterminatedSnippet):
    """Two start markers share a name (overlapping or repeated snippet)."""

    def __init__(self, name: str, path: Optional[Path] = None, line: Optional[int] = None):
        super().__init__(name, path)
        self.line = line
        location = f" in {path}" if path else ""
        at_line = f" (line {line})" if line else ""
        self.args = (f"duplicate snippet name `{name}`{location}{at_line}",)


class DanglingEnd(SnipsError):
    """An end marker has no open start marker to close."""

    def __init__(self, name: Optional[str], path: Optional[Path] = None, line: Optional[int] = None):
        self.name = name
        self.path = path
        self.line = line
        label = f"`{name}`" if name else "(unnamed)"
        location = f" in {path}" if path else ""
        at_line = f" (line {line})" if line else ""
        super().__init__(f"snips-end {label} without matching snips-start{location}{at_line}")


class SourceFileUnreadable(SnipsError):
    """The source file named by a reference could not be read."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        self.reason = reason
        suffix = f": {reason}" if reason else ""
        super().__init__(f"cannot read source file {path}{suffix}")


class DocumentUnreadable(SnipsError):
    """A documentation file could not be read or written."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        self.reason = reason
        suffix = f": {reason}" if reason else ""
        super().__init__(f"cannot access documentation file {path}{suffix}")


class InvalidMarker(SnipsError):
    """A documentation line looks like a reference but does not parse."""

    def __init__(self, line: int, content: str):
        self.line = line
        self.content = content
        super().__init__(
            f"invalid marker format at line {line}\n  {content.strip()}\n"
            "  Expected format: <!-- snips: path/to/file.ext --> "
            "or <!-- snips: path/to/file.ext#snippet_name -->"
        )


class UnclosedFence(SnipsError):
    """A code fence following a reference is never closed."""

    def __init__(self, line: int):
        self.line = line
        super().__init__(f"code fence opened at line {line} is never closed")


class NoMarkdownFiles(SnipsError):
    """No documentation files were found to process."""

    def __init__(self, directory: Path):
        self.directory = directory
        super().__init__(f"no markdown files found in {directory}")


__all__ = [
    "SnipsError",
    "SnippetNotFound",
    "UnterminatedSnippet",
    "DuplicateSnippetName",
    "DanglingEnd",
    "SourceFileUnreadable",
    "DocumentUnreadable",
    "InvalidMarker",
    "UnclosedFence",
    "NoMarkdownFiles",
]
