from __future__ import annotations

"""
Indentation for Lisp code.

These functions don't depend on Qt and are tested on plain strings.
CodeEditor asks them what the current line should look like and applies
the resulting IndentEdit to the document.
"""

import logging
from dataclasses import dataclass
from typing import Final, List, Optional, Tuple

from SexpNavigation import (
    CLOSERS,
    CODE,
    OPENERS,
    TextSnapshot,
    backward_sexp,
    backward_up_group,
    char_at,
    column_at,
    down_group,
    forward_sexp,
    in_string,
    indentation_column,
    indentation_end,
    line_start,
)

log = logging.getLogger(__name__)

DEFAULT_INDENT_WIDTH: Final[int] = 2


@dataclass(frozen=True)
class IndentEdit:
    """Replacement of one line's leading whitespace.

    ``text[start:end]`` is the old indentation, ``indent`` the new one.
    ``cursor`` is where the cursor belongs once the edit is applied.
    """

    start: int
    end: int
    indent: str
    cursor: int
    changed: bool

    @property
    def delta(self) -> int:
        return len(self.indent) - (self.end - self.start)

    def apply(self, text: str) -> str:
        if not self.changed:
            return text
        return text[: self.start] + self.indent + text[self.end :]


def _simple_indent(snapshot: TextSnapshot, opener: int, indent_width: int) -> int:
    # Ширина имени функции после скобки не учитывается
    return indentation_column(snapshot, opener) + indent_width


def _first_child(snapshot: TextSnapshot, opener: int, limit: int) -> Optional[int]:
    inside = down_group(snapshot, opener)
    if inside is None:
        return None
    end = forward_sexp(snapshot, inside)
    if end is None:
        return None
    start = backward_sexp(snapshot, end)
    if start is None or start >= limit:
        return None
    return start


def calculate_indent(
    snapshot: TextSnapshot, line_start_pos: int, indent_width: int = DEFAULT_INDENT_WIDTH
) -> Optional[int]:
    """Return the column for the line starting at ``line_start_pos``.

    None means the line is at top level and the caller has no opinion
    (which amounts to column 0). Inside ``(`` the body is indented one
    ``indent_width`` past the opening line; inside ``[`` or ``{`` lines align
    with the first element, or fall back to the ``(`` rule when the group has
    no element before this line.
    """
    return _indent_inside(snapshot, backward_up_group(snapshot, line_start_pos), line_start_pos, indent_width)


def _indent_inside(
    snapshot: TextSnapshot, opener: Optional[int], line_start_pos: int, indent_width: int
) -> Optional[int]:
    if opener is None:
        return None

    bracket = char_at(snapshot, opener)
    if bracket == "(":
        return _simple_indent(snapshot, opener, indent_width)
    if bracket in ("[", "{"):
        child = _first_child(snapshot, opener, line_start_pos)
        if child is None:
            return _simple_indent(snapshot, opener, indent_width)
        return column_at(snapshot, child)

    log.debug("No indentation rule for %r at offset %d", bracket, opener)
    return 0


class _OpenGroups:
    """Unclosed openers seen so far by a top-down pass.

    Lines must be asked for in order, and edits may only touch text at or
    after the last line asked for, so the openers already on the stack keep
    their offsets.
    """

    def __init__(self) -> None:
        self._stack: List[int] = []
        self._pos = 0

    def enclosing(self, snapshot: TextSnapshot, pos: int) -> Optional[int]:
        kinds = snapshot.syntax.kinds
        text = snapshot.text
        for i in range(self._pos, pos):
            if kinds[i] != CODE:
                continue
            if text[i] in OPENERS:
                self._stack.append(i)
            elif text[i] in CLOSERS and self._stack:
                self._stack.pop()
        self._pos = max(self._pos, pos)
        return self._stack[-1] if self._stack else None


def _indent_edit(
    snapshot: TextSnapshot, pos: int, cursor: int, indent_width: int, groups: Optional[_OpenGroups] = None
) -> IndentEdit:
    text = snapshot.text
    start = line_start(snapshot, pos)
    end = indentation_end(snapshot, start)

    if in_string(snapshot, start):
        return IndentEdit(start, end, text[start:end], cursor, False)

    if groups is None:
        target = calculate_indent(snapshot, start, indent_width)
    else:
        target = _indent_inside(snapshot, groups.enclosing(snapshot, start), start, indent_width)
    if target is None:
        target = 0

    changed = column_at(snapshot, end) != target
    indent = " " * target if changed else text[start:end]
    delta = len(indent) - (end - start)

    if start <= cursor <= end:
        new_cursor = start + len(indent)
    elif cursor > end:
        new_cursor = cursor + delta
    else:
        new_cursor = cursor
    return IndentEdit(start, end, indent, new_cursor, changed)


def indent_line(
    text: str, pos: int, cursor: Optional[int] = None, indent_width: int = DEFAULT_INDENT_WIDTH
) -> IndentEdit:
    """Compute the edit that re-indents the line containing ``pos``.

    A cursor inside the old leading whitespace moves right after the new
    indentation. A cursor further along keeps its distance from the end of
    the text; one before the line stays put. Lines that begin inside a
    string literal are left as they are.
    """
    if cursor is None:
        cursor = pos
    return _indent_edit(TextSnapshot(text), pos, cursor, indent_width)


def indent_region(
    text: str,
    start: int,
    end: int,
    cursor: Optional[int] = None,
    indent_width: int = DEFAULT_INDENT_WIDTH,
) -> Tuple[str, int]:
    """Re-indent every line between ``start`` and ``end``, top to bottom.

    Each line is computed against the lines above it as already re-indented.
    A line that only begins at ``end`` is not touched. Returns the new text and
    cursor position.
    """
    if cursor is None:
        cursor = start
    if end < start:
        start, end = end, start

    # Текст сканируется один раз, дальше правки только сдвигают карту
    snapshot = TextSnapshot(text)
    groups = _OpenGroups()
    pos = start
    while True:
        edit = _indent_edit(snapshot, pos, cursor, indent_width, groups)
        if edit.changed:
            snapshot = snapshot.replace_blank(edit.start, edit.end, edit.indent)
        cursor = edit.cursor
        if end > edit.end:
            end += edit.delta
        newline = snapshot.text.find("\n", edit.start)
        if newline < 0 or newline + 1 >= end:
            break
        pos = newline + 1
    return snapshot.text, cursor


def newline_and_indent(
    text: str, cursor: int, indent_width: int = DEFAULT_INDENT_WIDTH
) -> Tuple[str, int]:
    """Break the line at ``cursor`` and indent the new line.

    Blanks right before the cursor are dropped when they are plain code
    whitespace; blanks inside strings or a ``\\ `` character literal stay.
    """
    cursor = max(0, min(cursor, len(text)))
    snapshot = TextSnapshot(text)
    cut = cursor
    while cut > 0 and text[cut - 1] in " \t" and snapshot.kind(cut - 1) == CODE:
        cut -= 1
    text = text[:cut] + "\n" + text[cursor:]
    cursor = cut + 1
    edit = indent_line(text, cursor, cursor, indent_width)
    return edit.apply(text), edit.cursor
