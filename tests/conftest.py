"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from snips.cache import SourceCache
from tests.support import write_marker


@pytest.fixture
def cache():
    """Fresh per-test source cache."""
    return SourceCache()


@pytest.fixture
def make_example(tmp_path):
    """Minimal markdown + source pair: README.md embeds all of code.rs."""
    def _make() -> Path:
        (tmp_path / "code.rs").write_text("fn main(){}\n")
        return write_marker(tmp_path / "README.md", "<!-- snips: code.rs -->")
    return _make
