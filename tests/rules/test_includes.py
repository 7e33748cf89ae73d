#!/usr/bin/env python3
"""Tests for InclusionChain and IncludeResolver."""

import os

import pytest

from stignore.core.constants import ErrorCode
from stignore.rules.errors import IncludeCycleError, SourceUnavailableError
from stignore.rules.includes import IncludeResolver, InclusionChain, canonical_path, source_error


class RecordingParser:
    """Stand-in line parser that records what it was given."""

    def __init__(self):
        self.calls = []

    def __call__(self, lines, current_file, chain):
        self.calls.append((list(lines), current_file, chain))
        return []


class TestCanonicalPath:
    """Tests for canonical_path()."""

    def test_absolute(self):
        """Test relative paths become absolute."""
        assert canonical_path("rules") == os.path.join(os.getcwd(), "rules")

    def test_normalized(self, temp_dir):
        """Test dot segments collapse."""
        assert canonical_path(temp_dir / "a" / ".." / "b") == str(temp_dir / "b")


class TestInclusionChain:
    """Tests for InclusionChain."""

    def test_enter_records_file(self, temp_dir):
        """Test entered files are remembered."""
        chain = InclusionChain()
        identifier = chain.enter(str(temp_dir / "a"))

        assert identifier == str(temp_dir / "a")
        assert str(temp_dir / "a") in chain
        assert len(chain) == 1

    def test_second_enter_fails(self, temp_dir):
        """Test re-entering a file raises."""
        chain = InclusionChain()
        chain.enter(str(temp_dir / "a"))

        with pytest.raises(IncludeCycleError) as exc_info:
            chain.enter(str(temp_dir / "sub" / ".." / "a"))

        assert exc_info.value.error_code == ErrorCode.CONFLICT

    def test_seeded(self, temp_dir):
        """Test a chain can start with known files."""
        chain = InclusionChain([str(temp_dir / "a")])

        with pytest.raises(IncludeCycleError):
            chain.enter(str(temp_dir / "a"))


class TestIncludeResolver:
    """Tests for IncludeResolver."""

    def test_load_passes_lines(self, rule_file):
        """Test file content reaches the parser line by line."""
        parser = RecordingParser()
        path = str(rule_file("rules", "/a", "// c", "/b"))
        chain = InclusionChain()

        IncludeResolver(parser).load(path, chain)

        lines, current_file, passed_chain = parser.calls[0]
        assert lines == ["/a", "// c", "/b", ""]
        assert current_file == path
        assert passed_chain is chain
        assert path in chain

    def test_resolve_joins_directory(self, rule_file, temp_dir):
        """Test targets resolve next to the including file."""
        parser = RecordingParser()
        rule_file("conf/sub.rules", "/x")

        IncludeResolver(parser).resolve("sub.rules", str(temp_dir / "conf" / "main.rules"), InclusionChain())

        assert parser.calls[0][1] == os.path.join(str(temp_dir / "conf"), "sub.rules")

    def test_chain_entered_before_reading(self, temp_dir):
        """Test a missing file still counts as seen."""
        chain = InclusionChain()
        path = str(temp_dir / "missing")

        with pytest.raises(SourceUnavailableError) as exc_info:
            IncludeResolver(RecordingParser()).load(path, chain)

        assert exc_info.value.error_code == ErrorCode.NOT_FOUND
        assert path in chain

    def test_permission_denied(self, rule_file, monkeypatch):
        """Test permission errors map to PERMISSION_DENIED."""
        path = str(rule_file("rules", "/a"))

        def deny(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("builtins.open", deny)

        with pytest.raises(SourceUnavailableError) as exc_info:
            IncludeResolver(RecordingParser()).load(path, InclusionChain())

        assert exc_info.value.error_code == ErrorCode.PERMISSION_DENIED
        assert "Permission denied" in str(exc_info.value)

    def test_custom_encoding(self, temp_dir):
        """Test rule files can be read with another encoding."""
        parser = RecordingParser()
        path = temp_dir / "rules"
        path.write_bytes("/caf\xe9\n".encode("latin-1"))

        IncludeResolver(parser, encoding="latin-1").load(str(path), InclusionChain())

        assert parser.calls[0][0] == ["/caf\xe9", ""]

    def test_only_newline_separates_lines(self, temp_dir):
        """Test Unicode line separators stay inside a line."""
        parser = RecordingParser()
        path = temp_dir / "rules"
        path.write_bytes("/a b\r\n/c\x1ed\n".encode("utf-8"))

        IncludeResolver(parser).load(str(path), InclusionChain())

        assert parser.calls[0][0] == ["/a b", "/c\x1ed", ""]


class TestSourceError:
    """Tests for source_error()."""

    @pytest.mark.parametrize(
        "error, code",
        [
            (FileNotFoundError(2, "No such file or directory"), ErrorCode.NOT_FOUND),
            (PermissionError(13, "Permission denied"), ErrorCode.PERMISSION_DENIED),
            (IsADirectoryError(21, "Is a directory"), ErrorCode.INTERNAL_ERROR),
            (UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"), ErrorCode.INVALID_INPUT),
        ],
    )
    def test_error_codes(self, error, code):
        """Test each failure maps to its error code."""
        result = source_error("rules", error)

        assert isinstance(result, SourceUnavailableError)
        assert result.path == "rules"
        assert result.error_code == code

    def test_reason_uses_strerror(self):
        """Test the OS message is used as the reason."""
        assert source_error("rules", PermissionError(13, "Permission denied")).reason == "Permission denied"
