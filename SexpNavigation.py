from __future__ import annotations

"""
Balanced-expression navigation over plain text.

Nothing here depends on Qt. A TextSnapshot classifies every character once
(code, string, comment or character literal), and the navigation functions
walk that map, so brackets inside strings, comments and literals like ``\\(``
are never counted. Every motion returns the new offset, or None when there is
nowhere to go.
"""

from bisect import bisect_left, bisect_right
from typing import Final, List, Optional, Tuple

CODE: Final[str] = "c"
STRING: Final[str] = "s"
COMMENT: Final[str] = ";"
LITERAL: Final[str] = "l"

OPENERS: Final[str] = "([{"
CLOSERS: Final[str] = ")]}"
PREFIX_CHARS: Final[str] = "'`~@^#"
# Запятая в Clojure считается пробелом
WHITESPACE: Final[str] = " \t\n\r\f\v,"
TAB_WIDTH: Final[int] = 8


class SyntaxScan:
    """Result of scan_syntax: one kind per character plus string spans."""

    __slots__ = ("kinds", "strings", "ends_in_string")

    def __init__(self, kinds: str, strings: Tuple[Tuple[int, int], ...], ends_in_string: bool) -> None:
        self.kinds = kinds
        # (start, end) pairs, end exclusive; an unterminated string ends at len(text)
        self.strings = strings
        self.ends_in_string = ends_in_string


def scan_syntax(text: str, in_string: bool = False) -> SyntaxScan:
    """Classify each character of ``text``.

    ``in_string`` says the text starts inside a string left open by earlier
    text (the highlighter passes this between blocks).
    """
    kinds: List[str] = []
    strings: List[Tuple[int, int]] = []
    string_start = 0 if in_string else -1
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if string_start >= 0:
            if ch == "\\" and i + 1 < n:
                kinds.append(STRING * 2)
                i += 2
                continue
            kinds.append(STRING)
            i += 1
            if ch == '"':
                strings.append((string_start, i))
                string_start = -1
        elif ch == ";":
            end = text.find("\n", i)
            if end < 0:
                end = n
            kinds.append(COMMENT * (end - i))
            i = end
        elif ch == '"':
            string_start = i
            kinds.append(STRING)
            i += 1
        elif ch == "\\":
            width = 2 if i + 1 < n else 1
            kinds.append(LITERAL * width)
            i += width
        else:
            kinds.append(CODE)
            i += 1

    ends_in_string = string_start >= 0
    if ends_in_string:
        strings.append((string_start, n))
    return SyntaxScan("".join(kinds), tuple(strings), ends_in_string)


class TextSnapshot:
    """Immutable buffer text together with its syntax map."""

    __slots__ = ("text", "syntax", "_string_starts")

    def __init__(self, text: str, syntax: Optional[SyntaxScan] = None) -> None:
        self.text = text
        self.syntax = scan_syntax(text) if syntax is None else syntax
        self._string_starts = [start for start, _ in self.syntax.strings]

    def __len__(self) -> int:
        return len(self.text)

    def kind(self, pos: int) -> str:
        return self.syntax.kinds[pos]

    def replace_blank(self, start: int, end: int, blank: str) -> TextSnapshot:
        """Snapshot with the code whitespace ``text[start:end]`` replaced by ``blank``.

        Whitespace in code doesn't change how the rest of the text is
        classified, so the syntax map is spliced instead of rescanned.
        """
        delta = len(blank) - (end - start)
        strings = self.syntax.strings
        index = bisect_left(self._string_starts, end)
        shifted = strings[:index] + tuple((s + delta, e + delta) for s, e in strings[index:])
        kinds = self.syntax.kinds[:start] + CODE * len(blank) + self.syntax.kinds[end:]
        text = self.text[:start] + blank + self.text[end:]
        return TextSnapshot(text, SyntaxScan(kinds, shifted, self.syntax.ends_in_string))

    def string_span(self, pos: int) -> Optional[Tuple[int, int]]:
        """Return the (start, end) of the string literal whose span covers ``pos``."""
        index = bisect_right(self._string_starts, pos) - 1
        if index < 0:
            return None
        start, end = self.syntax.strings[index]
        if pos < end:
            return start, end
        return None

    def is_open_string(self, span: Tuple[int, int]) -> bool:
        return self.syntax.ends_in_string and span == self.syntax.strings[-1]


def _is_code(snapshot: TextSnapshot, pos: int, chars: str) -> bool:
    return snapshot.kind(pos) == CODE and snapshot.text[pos] in chars


def _is_atom_char(snapshot: TextSnapshot, pos: int) -> bool:
    kind = snapshot.kind(pos)
    if kind == LITERAL:
        return True
    ch = snapshot.text[pos]
    return kind == CODE and ch not in WHITESPACE and ch not in OPENERS and ch not in CLOSERS


def _is_blank(snapshot: TextSnapshot, pos: int) -> bool:
    return snapshot.kind(pos) == COMMENT or _is_code(snapshot, pos, WHITESPACE)


def _text_width(chunk: str) -> int:
    width = 0
    for ch in chunk:
        if ch == "\t":
            width = (width // TAB_WIDTH + 1) * TAB_WIDTH
        else:
            width += 1
    return width


def _clamp(snapshot: TextSnapshot, pos: int) -> int:
    return max(0, min(pos, len(snapshot)))


def char_at(snapshot: TextSnapshot, pos: int) -> Optional[str]:
    if 0 <= pos < len(snapshot):
        return snapshot.text[pos]
    return None


def line_start(snapshot: TextSnapshot, pos: int) -> int:
    pos = _clamp(snapshot, pos)
    return snapshot.text.rfind("\n", 0, pos) + 1


def indentation_end(snapshot: TextSnapshot, pos: int) -> int:
    """Offset of the first non-blank character on the line containing ``pos``."""
    end = line_start(snapshot, pos)
    text = snapshot.text
    while end < len(text) and text[end] in " \t":
        end += 1
    return end


def column_at(snapshot: TextSnapshot, pos: int) -> int:
    pos = _clamp(snapshot, pos)
    return _text_width(snapshot.text[line_start(snapshot, pos) : pos])


def indentation_column(snapshot: TextSnapshot, pos: int) -> int:
    return column_at(snapshot, indentation_end(snapshot, pos))


def in_string(snapshot: TextSnapshot, pos: int) -> bool:
    """True when ``pos`` lies strictly after the opening quote of a string."""
    pos = _clamp(snapshot, pos)
    if pos == 0:
        return False
    span = snapshot.string_span(pos - 1)
    if span is None:
        return False
    start, end = span
    return start < pos and (pos < end or snapshot.is_open_string(span))


def in_comment(snapshot: TextSnapshot, pos: int) -> bool:
    return 0 <= pos < len(snapshot) and snapshot.kind(pos) == COMMENT


def _match_forward(snapshot: TextSnapshot, opener: int) -> Optional[int]:
    depth = 0
    kinds = snapshot.syntax.kinds
    text = snapshot.text
    for i in range(opener, len(text)):
        if kinds[i] != CODE:
            continue
        if text[i] in OPENERS:
            depth += 1
        elif text[i] in CLOSERS:
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def _match_backward(snapshot: TextSnapshot, closer: int) -> Optional[int]:
    depth = 0
    kinds = snapshot.syntax.kinds
    text = snapshot.text
    for i in range(closer, -1, -1):
        if kinds[i] != CODE:
            continue
        if text[i] in CLOSERS:
            depth += 1
        elif text[i] in OPENERS:
            depth -= 1
            if depth == 0:
                return i
    return None


def backward_up_group(snapshot: TextSnapshot, pos: int) -> Optional[int]:
    """Offset of the nearest opener before ``pos`` that is not closed before it."""
    depth = 0
    kinds = snapshot.syntax.kinds
    text = snapshot.text
    for i in range(_clamp(snapshot, pos) - 1, -1, -1):
        if kinds[i] != CODE:
            continue
        if text[i] in CLOSERS:
            depth += 1
        elif text[i] in OPENERS:
            if depth == 0:
                return i
            depth -= 1
    return None


def down_group(snapshot: TextSnapshot, pos: int) -> Optional[int]:
    """Offset just inside the next opener at or after ``pos``."""
    kinds = snapshot.syntax.kinds
    text = snapshot.text
    for i in range(_clamp(snapshot, pos), len(text)):
        if kinds[i] != CODE:
            continue
        if text[i] in OPENERS:
            return i + 1
        if text[i] in CLOSERS:
            return None
    return None


def forward_sexp(snapshot: TextSnapshot, pos: int) -> Optional[int]:
    """End of the balanced element following ``pos``."""
    n = len(snapshot)
    pos = _clamp(snapshot, pos)
    while pos < n and _is_blank(snapshot, pos):
        pos += 1
    start = pos
    while pos < n and _is_code(snapshot, pos, PREFIX_CHARS):
        pos += 1
    consumed_prefix = pos > start

    if pos >= n:
        return pos if consumed_prefix else None
    if snapshot.kind(pos) == STRING:
        span = snapshot.string_span(pos)
        if span is None or snapshot.is_open_string(span):
            return None
        return span[1]
    if _is_code(snapshot, pos, OPENERS):
        return _match_forward(snapshot, pos)

    end = pos
    while end < n and _is_atom_char(snapshot, end):
        end += 1
    if end == pos:
        # закрывающая скобка или префикс без выражения
        return pos if consumed_prefix else None
    return end


def backward_sexp(snapshot: TextSnapshot, pos: int) -> Optional[int]:
    """Start of the balanced element preceding ``pos``, prefix characters included."""
    pos = _clamp(snapshot, pos)
    while pos > 0 and _is_blank(snapshot, pos - 1):
        pos -= 1
    if pos == 0:
        return None

    last = pos - 1
    if snapshot.kind(last) == STRING:
        span = snapshot.string_span(last)
        if span is None:
            return None
        start = span[0]
    elif _is_code(snapshot, last, OPENERS):
        return None
    elif _is_code(snapshot, last, CLOSERS):
        start = _match_backward(snapshot, last)
        if start is None:
            return None
    else:
        start = last
        while start > 0 and _is_atom_char(snapshot, start - 1):
            start -= 1

    while start > 0 and _is_code(snapshot, start - 1, PREFIX_CHARS):
        start -= 1
    return start


# Qt считает позиции в единицах UTF-16, Python в кодовых точках
def utf16_position(text: str, offset: int) -> int:
    """Qt document position of the Python string offset ``offset``."""
    offset = max(0, min(offset, len(text)))
    return offset + sum(1 for ch in text[:offset] if ord(ch) > 0xFFFF)


def offset_from_utf16(text: str, position: int) -> int:
    """Python string offset of the Qt document position ``position``."""
    units = 0
    for offset, ch in enumerate(text):
        if units >= position:
            return offset
        units += 2 if ord(ch) > 0xFFFF else 1
    return len(text)
