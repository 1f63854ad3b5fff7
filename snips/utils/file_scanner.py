"""
File scanner for documentation directories.

Lists the markdown files directly inside a directory. Used by the CLI when no
files are given on the command line; the reconciliation core never walks the
file system itself.
"""

from pathlib import Path
from typing import List, Optional, Set
import logging

from snips.errors import NoMarkdownFiles

logger = logging.getLogger(__name__)


class FileScanner:
    """
    Scan a documentation directory for markdown files.

    Supports:
    - Markdown (.md)
    - Markdown (.markdown)

    The scan is not recursive and extensions are matched case-insensitively.
    """

    # Supported documentation file extensions
    SUPPORTED_EXTENSIONS = {'.md', '.markdown'}

    def __init__(self, base_path: Path, extensions: Optional[Set[str]] = None):
        """
        Initialize the file scanner.

        Args:
            base_path: Directory to scan
            extensions: File extensions to include (default: .md, .markdown)
        """
        self.base_path = Path(base_path)
        self.extensions = {ext.lower() for ext in (extensions or self.SUPPORTED_EXTENSIONS)}

        if not self.base_path.exists():
            raise ValueError(f"Base path does not exist: {self.base_path}")

        if not self.base_path.is_dir():
            raise ValueError(f"Base path is not a directory: {self.base_path}")

    def scan(self) -> List[Path]:
        """
        Scan the base directory for documentation files.

        Returns:
            List of Path objects, sorted for consistent ordering
        """
        logger.debug(f"Scanning documentation directory: {self.base_path}")

        doc_files = sorted(
            item for item in self.base_path.iterdir()
            if item.is_file() and item.suffix.lower() in self.extensions
        )

        logger.info(f"Found {len(doc_files)} markdown files in {self.base_path}")
        return doc_files


def discover_markdown_files(directory: Path) -> List[Path]:
    """
    Convenience function: markdown files in a directory, or an error if none.

    Args:
        directory: Directory to scan (typically the current working directory)

    Returns:
        Sorted list of markdown file paths

    Raises:
        NoMarkdownFiles: The directory holds no markdown files
    """
    files = FileScanner(directory).scan()
    if not files:
        raise NoMarkdownFiles(Path(directory))
    return files
