"""Tests for the snips command line."""

import pytest
from typer.testing import CliRunner

from snips import __version__
from snips.cli import app
from tests.support import write_marker, write_source_with_snippet


@pytest.fixture
def runner():
    return CliRunner()


class TestWrite:
    """Tests for the default (write) mode."""

    def test_updates_file(self, runner, make_example):
        """Test the fence is rewritten and the snippet reported as updated."""
        readme = make_example()

        result = runner.invoke(app, [str(readme)])

        assert result.exit_code == 0, result.output
        assert "code.rs [updated]" in result.output
        assert readme.read_text() == "<!-- snips: code.rs -->\n```rust\nfn main(){}\n```\n"

    def test_quiet_suppresses_output(self, runner, make_example):
        readme = make_example()

        result = runner.invoke(app, ["--quiet", str(readme)])

        assert result.exit_code == 0
        assert result.output == ""
        assert "fn main(){}" in readme.read_text()

    def test_file_without_snippets(self, runner, tmp_path):
        doc = tmp_path / "plain.md"
        doc.write_text("# Nothing here\n")

        result = runner.invoke(app, [str(doc)])

        assert result.exit_code == 0
        assert "(no snippets found)" in result.output

    def test_discovers_markdown_in_cwd(self, runner, make_example, tmp_path, monkeypatch):
        """Test files default to the markdown files in the working directory."""
        readme = make_example()
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, [])

        assert result.exit_code == 0, result.output
        assert "README.md" in result.output
        assert "fn main(){}" in readme.read_text()

    def test_no_markdown_files(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "no markdown files" in result.output

    def test_missing_snippet_reports_error(self, runner, tmp_path):
        """Test snippet errors fail the run and leave the file untouched."""
        write_source_with_snippet(tmp_path / "code.rs", "real", "fn real() {}\n")
        readme = write_marker(tmp_path / "README.md", "<!-- snips: code.rs#fake -->")
        before = readme.read_text()

        result = runner.invoke(app, [str(readme)])

        assert result.exit_code == 1
        assert "not found" in result.output
        assert "Available snippets: real" in result.output
        assert readme.read_text() == before

    def test_errors_shown_in_quiet_mode(self, runner, tmp_path):
        readme = write_marker(tmp_path / "README.md", "<!-- snips: missing.rs -->")

        result = runner.invoke(app, ["-q", str(readme)])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestCheck:
    """Tests for --check."""

    def test_check_then_write_then_check(self, runner, make_example):
        """Test check fails on drift, write fixes it, check then passes."""
        readme = make_example()
        before = readme.read_text()

        failed = runner.invoke(app, ["--check", str(readme)])
        assert failed.exit_code == 1
        assert "[out of sync]" in failed.output
        assert readme.read_text() == before

        assert runner.invoke(app, [str(readme)]).exit_code == 0

        passed = runner.invoke(app, ["--check", str(readme)])
        assert passed.exit_code == 0
        assert "[out of sync]" not in passed.output


class TestDiff:
    """Tests for --diff."""

    def test_diff_output(self, runner, make_example):
        """Test the diff shows headers and changed lines without writing."""
        readme = make_example()
        before = readme.read_text()

        result = runner.invoke(app, ["--diff", str(readme)])

        assert result.exit_code == 0, result.output
        assert "--- code.rs" in result.output
        assert "+++ code.rs" in result.output
        assert "+fn main(){}" in result.output
        assert "-old" in result.output
        assert readme.read_text() == before

    def test_diff_when_in_sync_is_empty(self, runner, make_example):
        readme = make_example()
        runner.invoke(app, [str(readme)])

        result = runner.invoke(app, ["--diff", str(readme)])

        assert result.exit_code == 0
        assert "---" not in result.output


def test_check_and_diff_conflict(runner, make_example):
    """Test the two read-only modes cannot be combined."""
    readme = make_example()

    result = runner.invoke(app, ["--check", "--diff", str(readme)])

    assert result.exit_code == 2


def test_workers_option(runner, tmp_path):
    """Test several documents processed in parallel are all updated."""
    write_source_with_snippet(tmp_path / "code.rs", "example", "fn example() {}\n")
    docs = [write_marker(tmp_path / f"d{i}.md", "<!-- snips: code.rs#example -->") for i in range(4)]

    result = runner.invoke(app, ["--workers", "3", *map(str, docs)])

    assert result.exit_code == 0, result.output
    assert all("fn example() {}" in doc.read_text() for doc in docs)


def test_version(runner):
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
