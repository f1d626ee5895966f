"""Tests for the editor mode metadata parser."""

from __future__ import annotations

import pytest

from assetforge.core.errors import ModeInfoParseError
from assetforge.core.modeinfo import parse_mode_names


class TestParseModeNames:
    def test_extracts_modes_excluding_null(self):
        source = """
        CodeMirror.modeInfo = [
          {name: "APL", mime: "text/apl", mode: "apl", ext: ["dyalog", "apl"]},
          {name: "Plain Text", mime: "text/plain", mode: "null", ext: ["txt"]},
          {name: "C", mime: "text/x-csrc", mode: "clike", ext: ["c", "h"]}
        ];
        """
        assert parse_mode_names(source) == ["apl", "clike"]

    def test_duplicates_keep_first_position(self):
        source = 'CodeMirror.modeInfo = [{mode: "b"}, {mode: "a"}, {mode: "b"}];'
        assert parse_mode_names(source) == ["b", "a"]

    def test_single_quotes_and_quoted_keys(self):
        source = "CodeMirror.modeInfo = [{'mode': 'python'}, {\"mode\": \"ruby\"}];"
        assert parse_mode_names(source) == ["python", "ruby"]

    def test_mime_key_not_confused_with_mode(self):
        source = 'CodeMirror.modeInfo = [{mime: "text/x-mode", mode: "real"}];'
        assert parse_mode_names(source) == ["real"]

    def test_brackets_inside_strings(self):
        source = 'CodeMirror.modeInfo = [{name: "odd ] name {", mode: "odd", ext: ["]"]}];'
        assert parse_mode_names(source) == ["odd"]

    def test_entry_without_mode_is_skipped(self):
        source = 'CodeMirror.modeInfo = [{name: "x"}, {mode: "y"}];'
        assert parse_mode_names(source) == ["y"]

    def test_trailing_code_after_array_ignored(self):
        source = 'CodeMirror.modeInfo = [{mode: "a"}];\nvar other = [{mode: "b"}];'
        assert parse_mode_names(source) == ["a"]

    def test_missing_array(self):
        with pytest.raises(ModeInfoParseError):
            parse_mode_names("var nothing = 1;")

    def test_unterminated_array(self):
        with pytest.raises(ModeInfoParseError):
            parse_mode_names('CodeMirror.modeInfo = [{mode: "a"}')
