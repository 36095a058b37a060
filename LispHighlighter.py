import re
from itertools import groupby
from operator import itemgetter
from typing import Iterable, Optional

from PyQt5.QtCore import QRegularExpression
from PyQt5.QtGui import QColor, QFont, QTextCharFormat, QSyntaxHighlighter

from Keywords import BUILTINS, CONSTANTS, SPECIAL_FORMS
from SexpNavigation import COMMENT, LITERAL, STRING, scan_syntax
from Theme import EditorPalette

# Состояние блока: строковый литерал не закрыт в конце строки
IN_STRING = 1

_BEFORE = r"(?<![^\s()\[\]{},'`~@^#])"
_AFTER = r"(?![^\s()\[\]{},\";])"


def _words_pattern(words: Iterable[str]) -> QRegularExpression:
	alternatives = "|".join(re.escape(word) for word in sorted(words, key=len, reverse=True))
	return QRegularExpression(_BEFORE + "(" + alternatives + ")" + _AFTER)


class LispHighlighter(QSyntaxHighlighter):
	"""Syntax highlighter for Clojure-style Lisp code."""

	def __init__(self, document, palette: Optional[EditorPalette] = None) -> None:
		super().__init__(document)
		self.palette = palette or EditorPalette()
		self._rules = []
		self._init_rules()

	def set_palette(self, palette: EditorPalette) -> None:
		self.palette = palette
		self._init_rules()
		self.rehighlight()

	def _init_rules(self) -> None:
		def fmt(color: QColor, bold: bool = False, italic: bool = False) -> QTextCharFormat:
			char_format = QTextCharFormat()
			char_format.setForeground(color)
			if bold:
				char_format.setFontWeight(QFont.Weight.Bold)
			if italic:
				char_format.setFontItalic(True)
			return char_format

		# (pattern, format, capture group to paint)
		self._rules = [
			(_words_pattern(BUILTINS), fmt(self.palette.builtin), 1),
			(_words_pattern(SPECIAL_FORMS), fmt(self.palette.keyword, bold=True), 1),
			(_words_pattern(CONSTANTS), fmt(self.palette.constant), 1),
			(QRegularExpression(_BEFORE + r"([-+]?\d+(\.\d+)?([eE][-+]?\d+)?[MN]?|0x[0-9a-fA-F]+|\d+/\d+)" + _AFTER), fmt(self.palette.number), 1),
			(QRegularExpression(_BEFORE + r"(::?[^\s()\[\]{},\";]+)"), fmt(self.palette.constant), 1),
		]
		definition_format = fmt(self.palette.definition)
		definition_format.setFontUnderline(True)
		self._rules.append(
			(QRegularExpression(r"\((?:ns|def(?!ault)[\w\-!?*]*)\s+(?:\^\S+\s+)*([^\s()\[\]{}\",;]+)"), definition_format, 1)
		)

		self._literal_format = fmt(self.palette.constant)
		self._string_format = fmt(self.palette.string)
		self._comment_format = fmt(self.palette.comment, italic=True)

	def highlightBlock(self, text: str) -> None:  # noqa: N802 (Qt API)
		for pattern, text_format, group in self._rules:
			match_iterator = pattern.globalMatch(text)
			while match_iterator.hasNext():
				match = match_iterator.next()
				self.setFormat(match.capturedStart(group), match.capturedLength(group), text_format)

		# Строки и комментарии перекрывают всё, что нашли регулярки
		scan = scan_syntax(text, in_string=self.previousBlockState() == IN_STRING)
		# setFormat ждёт позиции в единицах UTF-16
		start = 0
		for kind, run in groupby(zip(scan.kinds, text), key=itemgetter(0)):
			length = sum(2 if ord(ch) > 0xFFFF else 1 for _, ch in run)
			if kind == STRING:
				self.setFormat(start, length, self._string_format)
			elif kind == COMMENT:
				self.setFormat(start, length, self._comment_format)
			elif kind == LITERAL:
				self.setFormat(start, length, self._literal_format)
			start += length
		self.setCurrentBlockState(IN_STRING if scan.ends_in_string else 0)
