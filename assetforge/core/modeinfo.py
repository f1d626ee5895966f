"""Parser for the editor's mode metadata script.

The metadata file assigns an array of object literals to
``CodeMirror.modeInfo``::

    CodeMirror.modeInfo = [
      {name: "APL", mime: "text/apl", mode: "apl", ext: ["dyalog", "apl"]},
      {name: "Plain Text", mime: "text/plain", mode: "null", ext: ["txt"]},
      ...
    ];

Only the ``mode`` values are needed, so the array is scanned as data
instead of executing the script.
"""

from __future__ import annotations

import re

from assetforge.core.errors import ModeInfoParseError

NULL_MODE = "null"

_ARRAY_START = re.compile(r"modeInfo\s*=\s*\[")
_MODE_KEY = re.compile(r"""(?:^|[{,\s])["']?mode["']?\s*:\s*(["'])((?:\\.|(?!\1).)*)\1""")


def _split_objects(source: str, start: int) -> list[str]:
    """Return the top-level ``{...}`` literals of the array opening at *start*."""
    objects: list[str] = []
    depth = 0
    obj_start = -1
    quote: str | None = None
    i = start
    while i < len(source):
        ch = source[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch in "[{":
            if ch == "{" and depth == 0:
                obj_start = i
            depth += 1
        elif ch in "]}":
            if depth == 0:
                return objects
            depth -= 1
            if ch == "}" and depth == 0:
                objects.append(source[obj_start : i + 1])
        i += 1
    raise ModeInfoParseError("Unterminated modeInfo array")


def parse_mode_names(source: str) -> list[str]:
    """Extract the supported mode identifiers from the metadata script.

    The ``"null"`` sentinel is excluded and duplicates keep their first
    position.
    """
    match = _ARRAY_START.search(source)
    if match is None:
        raise ModeInfoParseError("No modeInfo array found in mode metadata")

    modes: list[str] = []
    seen: set[str] = set()
    for literal in _split_objects(source, match.end()):
        found = _MODE_KEY.search(literal)
        if found is None:
            continue
        mode = found.group(2)
        if mode == NULL_MODE or mode in seen:
            continue
        seen.add(mode)
        modes.append(mode)
    return modes
