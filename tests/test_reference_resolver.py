"""Tests for finding references in documentation."""

from pathlib import Path

from snips.errors import InvalidMarker, UnclosedFence
from snips.extractors.reference_resolver import (
    ReferenceResolver,
    detect_newline,
    resolve_references,
    resolve_source_path,
)


class TestReferenceResolver:
    """Tests for ReferenceResolver.scan."""

    def setup_method(self):
        self.resolver = ReferenceResolver()

    def test_references_in_document_order(self):
        """Test every marker is found, in order, with or without a fence."""
        text = (
            "# Title\n"
            "<!-- snips: a.rs -->\n"
            "```rust\n"
            "old\n"
            "```\n"
            "Some prose.\n"
            "<!-- snips: b.py#setup -->\n"
        )

        refs = resolve_references(text)

        assert [r.marker for r in refs] == ["a.rs", "b.py#setup"]
        assert [r.line_index for r in refs] == [1, 6]
        assert refs[1].snippet_name == "setup"

    def test_fence_is_attached(self):
        """Test the fence directly after a marker is recorded with its span."""
        text = "<!-- snips: a.rs -->\n```rust\nold\n```\nafter\n"

        document = self.resolver.scan(text)
        fence = document.sites[0].fence

        assert fence is not None
        assert fence.language == "rust"
        assert fence.lines == ["```rust", "old", "```"]
        assert fence.body == ["old"]
        assert text[fence.span.start:fence.span.end] == "```rust\nold\n```\n"

    def test_marker_location_covers_its_line(self):
        """Test the reference span covers the marker line and its ending."""
        text = "intro\n<!-- snips: a.rs -->\n"

        ref = resolve_references(text)[0]

        assert text[ref.location.start:ref.location.end] == "<!-- snips: a.rs -->\n"

    def test_indented_marker(self):
        """Test markers inside list items keep their indentation."""
        text = "- item\n\n   <!-- snips: a.rs -->\n   ```rust\n   old\n   ```\n"

        site = self.resolver.scan(text).sites[0]

        assert site.reference.indent == "   "
        assert site.fence is not None
        assert site.fence.start_line == 3

    def test_invalid_marker_is_reported(self):
        """Test a malformed marker becomes an error site without a reference."""
        text = "<!-- snips: -->\n<!-- snips: ok.rs -->\n"

        document = self.resolver.scan(text)

        assert len(document.sites) == 2
        assert document.sites[0].reference is None
        assert isinstance(document.sites[0].error, InvalidMarker)
        assert document.sites[0].error.line == 1
        assert [r.marker for r in document.references] == ["ok.rs"]

    def test_markers_inside_unrelated_fences_are_ignored(self):
        """Test example markers shown inside a code block are not references."""
        text = (
            "```markdown\n"
            "<!-- snips: example.rs -->\n"
            "```\n"
            "~~~\n"
            "<!-- snips: other.rs -->\n"
            "~~~\n"
            "<!-- snips: real.rs -->\n"
        )

        assert [r.marker for r in resolve_references(text)] == ["real.rs"]

    def test_markers_inside_managed_fence_are_ignored(self):
        """Test the content of a managed fence is not scanned."""
        text = (
            "<!-- snips: guide.md -->\n"
            "```markdown\n"
            "<!-- snips: nested.rs -->\n"
            "```\n"
        )

        assert [r.marker for r in resolve_references(text)] == ["guide.md"]

    def test_unclosed_fence_sets_error(self):
        """Test an unclosed managed fence is recorded on the site."""
        text = "<!-- snips: a.rs -->\n```rust\nold\n"

        site = self.resolver.scan(text).sites[0]

        assert isinstance(site.error, UnclosedFence)
        assert site.error.line == 2

    def test_crlf_document(self):
        """Test CRLF documents are detected and spans include the CR."""
        text = "<!-- snips: a.rs -->\r\n```\r\nold\r\n```\r\n"

        document = self.resolver.scan(text)
        fence = document.sites[0].fence

        assert document.newline == "\r\n"
        assert fence.lines == ["```", "old", "```"]
        assert text[fence.span.start:fence.span.end] == "```\r\nold\r\n```\r\n"


def test_detect_newline():
    """Test line-break detection."""
    assert detect_newline("a\r\nb") == "\r\n"
    assert detect_newline("a\nb") == "\n"
    assert detect_newline("") == "\n"


class TestResolveSourcePath:
    """Tests for resolving reference paths."""

    def test_relative_to_document_directory(self):
        """Test relative paths join the document's directory."""
        ref = resolve_references("<!-- snips: ../src/lib.rs -->\n")[0]

        assert resolve_source_path(ref, Path("docs")) == Path("docs") / ".." / "src" / "lib.rs"

    def test_absolute_path_unchanged(self, tmp_path):
        """Test absolute paths are used as-is."""
        source = tmp_path / "lib.rs"
        ref = resolve_references(f"<!-- snips: {source} -->\n")[0]

        assert resolve_source_path(ref, Path("docs")) == source
