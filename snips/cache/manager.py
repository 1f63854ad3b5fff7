"""Per-run cache of parsed source files.

Every reference to the same source path within one run sees the same
snapshot: the file is read and its markers paired once, on first use, and
the result (or the read failure) is handed to every later reader. Entries are
never invalidated during a run.
"""

import threading
from pathlib import Path
from typing import Dict, Union
import logging

from snips.errors import SourceFileUnreadable
from snips.extractors.snippet_extractor import SourceFile

logger = logging.getLogger(__name__)


class SourceCache:
    """Thread-safe mapping of resolved source path -> SourceFile."""

    def __init__(self, encoding: str = "utf-8"):
        """Initialize source cache.

        Args:
            encoding: Encoding used to read source files
        """
        self.encoding = encoding
        self._entries: Dict[Path, Union[SourceFile, SourceFileUnreadable]] = {}
        self._lock = threading.Lock()
        self._path_locks: Dict[Path, threading.Lock] = {}
        self.stats = {
            "hits": 0,
            "misses": 0,
        }

    @staticmethod
    def _cache_key(path: Path) -> Path:
        return Path(path).resolve()

    def _read(self, key: Path) -> Union[SourceFile, SourceFileUnreadable]:
        try:
            # newline="" keeps \r\n intact; line splitting handles both conventions
            with open(key, "r", encoding=self.encoding, newline="") as f:
                text = f.read()
        except FileNotFoundError:
            return SourceFileUnreadable(key, "file not found")
        except (OSError, UnicodeDecodeError) as e:
            return SourceFileUnreadable(key, str(e))

        return SourceFile.from_text(text, key)

    def get(self, path: Path) -> SourceFile:
        """Get the parsed source file, reading it on first access.

        Args:
            path: Source file path (resolved before lookup)

        Returns:
            SourceFile snapshot shared by all readers in this run

        Raises:
            SourceFileUnreadable: The file could not be read (cached as well)
        """
        key = self._cache_key(path)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self.stats["hits"] += 1
            else:
                path_lock = self._path_locks.setdefault(key, threading.Lock())

        if entry is None:
            # First reader for a path wins; readers of other paths are not held up
            with path_lock:
                with self._lock:
                    entry = self._entries.get(key)
                    if entry is not None:
                        self.stats["hits"] += 1

                if entry is None:
                    entry = self._read(key)
                    with self._lock:
                        self._entries[key] = entry
                        self.stats["misses"] += 1
                    logger.debug(f"Cached source {key}")

        if isinstance(entry, SourceFileUnreadable):
            raise entry
        return entry

    def put_text(self, path: Path, text: str) -> SourceFile:
        """Seed the cache with in-memory contents for a path."""
        key = self._cache_key(path)
        source = SourceFile.from_text(text, key)
        with self._lock:
            self._entries[key] = source
        return source

    def __contains__(self, path: Path) -> bool:
        return self._cache_key(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        return self.stats.copy()
