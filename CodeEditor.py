import logging
from typing import List, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QFont, QTextCursor
from PyQt5.QtWidgets import QPlainTextEdit

from LispHighlighter import LispHighlighter
from LispIndent import DEFAULT_INDENT_WIDTH, IndentEdit, indent_line, indent_region, newline_and_indent
from SexpNavigation import offset_from_utf16, utf16_position
from SymbolIndex import Symbol, build_symbol_index
from Theme import EditorPalette

log = logging.getLogger(__name__)


class CodeEditor(QPlainTextEdit):
	"""QPlainTextEdit with Lisp indentation and navigation helpers."""

	PAIRS = {"(": ")", "[": "]", "{": "}", '"': '"'}

	def __init__(self, palette: Optional[EditorPalette] = None, indent_width: int = DEFAULT_INDENT_WIDTH) -> None:
		super().__init__()
		font = QFont("Consolas", 11)
		font.setStyleHint(QFont.StyleHint.Monospace)
		self.setFont(font)
		self._default_font_size = font.pointSize()
		self._indent_width = indent_width
		self._palette = palette or EditorPalette()
		self._apply_palette()
		self.highlighter = LispHighlighter(self.document(), self._palette)
		self.cursorPositionChanged.connect(self._handle_cursor_change)
		self.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)

	@property
	def indent_width(self) -> int:
		return self._indent_width

	def set_indent_width(self, width: int) -> None:
		self._indent_width = width

	def _apply_palette(self) -> None:
		p = self._palette
		self.setStyleSheet(
			f"QPlainTextEdit {{ background-color: {p.background.name()}; color: {p.foreground.name()}; }}"
		)

	def set_palette(self, palette: EditorPalette) -> None:
		self._palette = palette
		self._apply_palette()
		self.highlighter.set_palette(palette)

	def set_font_size(self, size: int) -> None:
		"""Set absolute font size (clamped)."""
		size = max(6, min(72, int(size)))
		font = self.font()
		if font.pointSize() == size:
			return
		font.setPointSize(size)
		self.setFont(font)

	def adjust_font_size(self, delta: int) -> None:
		self.set_font_size(self.font().pointSize() + delta)

	def reset_font_size(self) -> None:
		self.set_font_size(self._default_font_size)

	def set_word_wrap_enabled(self, enabled: bool) -> None:
		mode = QPlainTextEdit.LineWrapMode.WidgetWidth if enabled else QPlainTextEdit.LineWrapMode.NoWrap
		self.setLineWrapMode(mode)

	# --- indentation -------------------------------------------------------
	# LispIndent работает со смещениями в str, документ Qt с единицами UTF-16

	def indent_current_line(self) -> None:
		"""Re-indent the line under the cursor."""
		text = self.toPlainText()
		cursor = self.textCursor()
		line = offset_from_utf16(text, cursor.block().position())
		position = offset_from_utf16(text, cursor.position())
		edit = indent_line(text, line, position, self._indent_width)
		self._apply_indent_edit(text, edit)

	def indent_selection(self) -> None:
		"""Re-indent every line touched by the selection."""
		cursor = self.textCursor()
		if not cursor.hasSelection():
			self.indent_current_line()
			return
		text = self.toPlainText()
		start = offset_from_utf16(text, cursor.selectionStart())
		end = offset_from_utf16(text, cursor.selectionEnd())
		position = offset_from_utf16(text, cursor.position())
		first, last = self._line_bounds(text, start, end)
		self._reindent_range(text, first, last, start, end, position)

	def indent_buffer(self) -> None:
		"""Re-indent the whole document."""
		text = self.toPlainText()
		position = offset_from_utf16(text, self.textCursor().position())
		self._reindent_range(text, 0, len(text), 0, len(text), position)

	@staticmethod
	def _line_bounds(text: str, start: int, end: int):
		first = text.rfind("\n", 0, start) + 1
		last = text.find("\n", end)
		return first, len(text) if last < 0 else last

	def _reindent_range(self, text: str, first: int, last: int, start: int, end: int, position: int) -> None:
		new_text, new_position = indent_region(text, start, end, position, self._indent_width)
		new_last = last + len(new_text) - len(text)
		self._replace_range(text, first, last, new_text, new_last, new_position)
		log.debug("Re-indented offsets %d..%d", first, new_last)

	def _apply_indent_edit(self, text: str, edit: IndentEdit) -> None:
		cursor = self.textCursor()
		if edit.changed:
			cursor.beginEditBlock()
			cursor.setPosition(utf16_position(text, edit.start))
			cursor.setPosition(utf16_position(text, edit.end), QTextCursor.MoveMode.KeepAnchor)
			cursor.insertText(edit.indent)
			cursor.endEditBlock()
		cursor.setPosition(utf16_position(edit.apply(text), edit.cursor))
		self.setTextCursor(cursor)

	def _replace_range(self, text: str, first: int, last: int, new_text: str, new_last: int, position: int) -> None:
		"""Replace ``text[first:last]`` with ``new_text[first:new_last]`` and move the cursor."""
		replacement = new_text[first:new_last]
		cursor = self.textCursor()
		cursor.beginEditBlock()
		cursor.setPosition(utf16_position(text, first))
		cursor.setPosition(utf16_position(text, last), QTextCursor.MoveMode.KeepAnchor)
		if cursor.selectedText().replace("\u2029", "\n") != replacement:
			cursor.insertText(replacement)
		cursor.endEditBlock()
		cursor.setPosition(utf16_position(new_text, position))
		self.setTextCursor(cursor)

	def _insert_newline_and_indent(self) -> None:
		cursor = self.textCursor()
		cursor.beginEditBlock()
		cursor.removeSelectedText()
		text = self.toPlainText()
		position = offset_from_utf16(text, cursor.position())
		new_text, new_position = newline_and_indent(text, position, self._indent_width)
		first, last = self._line_bounds(text, position, position)
		new_last = last + len(new_text) - len(text)
		cursor.setPosition(utf16_position(text, first))
		cursor.setPosition(utf16_position(text, last), QTextCursor.MoveMode.KeepAnchor)
		cursor.insertText(new_text[first:new_last])
		cursor.endEditBlock()
		cursor.setPosition(utf16_position(new_text, new_position))
		self.setTextCursor(cursor)

	# --- navigation --------------------------------------------------------

	def symbols(self) -> List[Symbol]:
		return build_symbol_index(self.toPlainText())

	def goto_position(self, position: int) -> None:
		"""Move the cursor to the string offset ``position`` (as in Symbol.position)."""
		cursor = self.textCursor()
		cursor.setPosition(utf16_position(self.toPlainText(), position))
		self.setTextCursor(cursor)
		self.centerCursor()

	def keyPressEvent(self, event):  # type: ignore[override]
		text = event.text()
		key = event.key()

		if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
			self._insert_newline_and_indent()
			return
		if key == Qt.Key.Key_Tab:
			self.indent_selection()
			return

		# Перепрыгиваем через уже стоящую закрывающую скобку или кавычку
		if text and (text in self.PAIRS.values()) and not self.textCursor().hasSelection():
			if self._char_after_cursor() == text:
				cursor = self.textCursor()
				cursor.movePosition(QTextCursor.MoveOperation.NextCharacter)
				self.setTextCursor(cursor)
				return

		# Автодобавление парной скобки; после "\" это литерал символа
		if text and text in self.PAIRS and self._char_before_cursor() != "\\":
			super().keyPressEvent(event)
			cursor = self.textCursor()
			cursor.insertText(self.PAIRS[text])
			cursor.movePosition(QTextCursor.MoveOperation.PreviousCharacter)
			self.setTextCursor(cursor)
			return

		super().keyPressEvent(event)

	def _char_after_cursor(self) -> str:
		return self.document().characterAt(self.textCursor().position())

	def _char_before_cursor(self) -> str:
		position = self.textCursor().position()
		return self.document().characterAt(position - 1) if position > 0 else ""

	def _handle_cursor_change(self) -> None:
		parent = self.parent()
		if parent is not None and hasattr(parent, "update_status"):
			cursor = self.textCursor()
			parent.update_status(cursor.blockNumber() + 1, cursor.positionInBlock() + 1)
