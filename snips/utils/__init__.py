"""
Utility functions for snips.
"""

from .file_scanner import FileScanner, discover_markdown_files

__all__ = [
    'FileScanner',
    'discover_markdown_files',
]
