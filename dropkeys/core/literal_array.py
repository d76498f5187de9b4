from __future__ import annotations

"""
Parser for the key-list flag syntax: a flat array of single-quoted strings.

    ['props.secret', 'id', 'it\\'s']

Single quotes keep the value shell-friendly inside a double-quoted argument.
`\\'` is the only escape; any other backslash is kept as-is.
"""

from typing import List

from dropkeys.core.errors import KeyListSyntaxError

_WS = " \t\r\n"


def _fail(text: str, pos: int, reason: str) -> KeyListSyntaxError:
    return KeyListSyntaxError(f"Malformed key list at position {pos}: {reason}.", position=pos, length=len(text))


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _WS:
        pos += 1
    return pos


def _read_quoted(text: str, pos: int) -> tuple[str, int]:
    # text[pos] is the opening quote
    start = pos
    pos += 1
    buf: List[str] = []
    while pos < len(text):
        ch = text[pos]
        if ch == "\\" and pos + 1 < len(text) and text[pos + 1] == "'":
            buf.append("'")
            pos += 2
            continue
        if ch == "'":
            return "".join(buf), pos + 1
        buf.append(ch)
        pos += 1
    raise _fail(text, start, "unterminated string")


def parse_single_quoted_array(text: str) -> List[str]:
    s = str(text or "")
    pos = _skip_ws(s, 0)
    if pos >= len(s) or s[pos] != "[":
        raise _fail(s, pos, "expected '['")
    pos = _skip_ws(s, pos + 1)

    items: List[str] = []
    if pos < len(s) and s[pos] == "]":
        pos += 1
    else:
        while True:
            if pos >= len(s) or s[pos] != "'":
                raise _fail(s, pos, "expected a quoted string")
            item, pos = _read_quoted(s, pos)
            items.append(item)
            pos = _skip_ws(s, pos)
            if pos >= len(s):
                raise _fail(s, pos, "expected ',' or ']'")
            if s[pos] == ",":
                pos = _skip_ws(s, pos + 1)
                continue
            if s[pos] == "]":
                pos += 1
                break
            raise _fail(s, pos, "expected ',' or ']'")

    pos = _skip_ws(s, pos)
    if pos != len(s):
        raise _fail(s, pos, "unexpected text after ']'")
    return items
