"""
Whitespace normalization for generated C# source.

Templates produce correct tokens but arbitrary indentation. This pass
re-indents every code line by brace depth and tidies blank lines while
leaving string and comment contents alone. It understands just enough C#
lexing to tell code braces from braces inside strings, chars and comments.
"""
from enum import Enum
from typing import List, NamedTuple, Tuple

INDENT = "    "


class _Mode(Enum):
    CODE = 0
    BLOCK_COMMENT = 1
    VERBATIM = 2


class _Line(NamedTuple):
    text: str
    blank: bool
    opens_block: bool
    closes_block: bool


def _skip_quoted(text: str, i: int, quote: str) -> int:
    """Index just past the closing quote of a regular string or char literal."""
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == quote:
            return i + 1
        i += 1
    return n


def _scan(text: str, mode: _Mode) -> Tuple[_Mode, int, int, int]:
    """
    Scan one line starting in ``mode``.

    Returns:
        (mode at end of line, opening braces, closing braces, closing braces
        before the first other code token)
    """
    opens = closes = leading = 0
    seen_code = False
    i, n = 0, len(text)
    while i < n:
        if mode is _Mode.BLOCK_COMMENT:
            end = text.find("*/", i)
            if end < 0:
                break
            mode = _Mode.CODE
            i = end + 2
            continue

        if mode is _Mode.VERBATIM:
            if text[i] == '"':
                if text.startswith('""', i):
                    i += 2
                    continue
                mode = _Mode.CODE
            i += 1
            continue

        c = text[i]
        if text.startswith("//", i):
            break
        if text.startswith("/*", i):
            mode = _Mode.BLOCK_COMMENT
            i += 2
            continue
        if text.startswith(('@"', '$@"', '@$"'), i):
            mode = _Mode.VERBATIM
            i = text.index('"', i) + 1
            seen_code = True
            continue
        if c == '"' or text.startswith('$"', i):
            i = _skip_quoted(text, text.index('"', i) + 1, '"')
            seen_code = True
            continue
        if c == "'":
            i = _skip_quoted(text, i + 1, "'")
            seen_code = True
            continue

        if c == "{":
            opens += 1
            seen_code = True
        elif c == "}":
            closes += 1
            if not seen_code:
                leading += 1
        elif not c.isspace():
            seen_code = True
        i += 1

    return mode, opens, closes, leading


def _layout(source: str) -> List[_Line]:
    lines: List[_Line] = []
    mode = _Mode.CODE
    depth = 0

    for raw in source.split("\n"):
        if mode is _Mode.VERBATIM:
            # String content: emitted untouched.
            mode, opens, closes, _ = _scan(raw, mode)
            if mode is not _Mode.VERBATIM:
                raw = raw.rstrip()
            lines.append(_Line(raw, False, False, False))
            depth = max(depth + opens - closes, 0)
            continue

        stripped = raw.strip()
        if not stripped:
            lines.append(_Line("", True, False, False))
            continue

        if mode is _Mode.CODE and stripped.startswith("#"):
            lines.append(_Line(stripped, False, False, False))
            continue

        start_mode = mode
        mode, opens, closes, leading = _scan(stripped, mode)
        if mode is _Mode.VERBATIM:
            # Trailing whitespace belongs to the string.
            stripped = raw.lstrip()

        level = max(depth - leading, 0)
        lines.append(_Line(
            INDENT * level + stripped,
            False,
            start_mode is _Mode.CODE and mode is _Mode.CODE and stripped.endswith("{"),
            start_mode is _Mode.CODE and leading > 0,
        ))
        depth = max(depth + opens - closes, 0)

    return lines


def normalize_whitespace(source: str) -> str:
    """
    Re-indent C# source and tidy its blank lines.

    Code lines are indented four spaces per open brace, preprocessor
    directives sit in column 0, trailing whitespace is trimmed, runs of blank
    lines collapse to one, and blank lines right after ``{`` or right before
    ``}`` are dropped. Multi-line verbatim string contents are preserved
    byte for byte, carriage returns included. Elsewhere CRLF line endings
    become ``\\n``, and the result ends with a single newline.
    """
    if source.startswith("\ufeff"):
        source = source[1:]

    out: List[str] = []
    pending_blank = False
    previous = None
    for line in _layout(source):
        if line.blank:
            pending_blank = True
            continue
        if pending_blank and previous is not None and not previous.opens_block and not line.closes_block:
            out.append("")
        pending_blank = False
        out.append(line.text)
        previous = line

    if not out:
        return ""
    return "\n".join(out) + "\n"
