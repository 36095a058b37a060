from dataclasses import dataclass, field
from enum import Enum
from PyQt5.QtGui import QColor


def _color(value: str):
	return field(default_factory=lambda: QColor(value))


@dataclass
class EditorPalette:
	# Тёмная схема по умолчанию
	background: QColor = _color("#282c34")
	foreground: QColor = _color("#abb2bf")
	keyword: QColor = _color("#c678dd")
	builtin: QColor = _color("#61afef")
	comment: QColor = _color("#5c6370")
	string: QColor = _color("#98c379")
	number: QColor = _color("#d19a66")
	constant: QColor = _color("#56b6c2")
	definition: QColor = _color("#e5c07b")


class Theme(str, Enum):
	DARK = "dark"
	LIGHT = "light"


LIGHT_PALETTE = EditorPalette(
	background=QColor("#fafafa"),
	foreground=QColor("#383a42"),
	keyword=QColor("#a626a4"),
	builtin=QColor("#0184bc"),
	comment=QColor("#a0a1a7"),
	string=QColor("#50a14f"),
	number=QColor("#986801"),
	constant=QColor("#0997b3"),
	definition=QColor("#c18401"),
)

DARK_PALETTE = EditorPalette()


def palette_for(theme_value: str) -> EditorPalette:
	"""Palette for a stored theme name; unknown names get the dark one."""
	return LIGHT_PALETTE if theme_value == Theme.LIGHT.value else DARK_PALETTE
