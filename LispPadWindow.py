from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
	QAction,
	QActionGroup,
	QFileDialog,
	QInputDialog,
	QMainWindow,
	QMenu,
	QMessageBox,
	QStatusBar,
)

from CodeEditor import CodeEditor
from LispMode import MODE_NAME, file_dialog_filter
from Settings import MAX_INDENT_WIDTH, MIN_INDENT_WIDTH, SETTINGS_PATH, load_settings, save_settings
from SymbolIndex import group_symbols
from Theme import EditorPalette, Theme, palette_for

log = logging.getLogger(__name__)


class LispPadWindow(QMainWindow):
	"""Main application window wrapping the code editor."""

	def __init__(self, settings_path: Path = SETTINGS_PATH) -> None:
		super().__init__()
		self.setWindowTitle("LispPad")
		self.resize(900, 650)
		self._settings_path = settings_path
		self._settings = load_settings(settings_path)
		palette = palette_for(self._settings["theme"])

		self.editor = CodeEditor(palette, self._settings["indent_width"])
		self.editor.set_font_size(self._settings.get("font_size", 13))
		self.setCentralWidget(self.editor)

		self.status_bar = QStatusBar()
		self.setStatusBar(self.status_bar)

		self._current_file: Optional[Path] = None
		self._create_actions()
		self._create_menu_bar()
		self._create_settings_menu()
		self._apply_global_theme(palette)

		wrap_enabled = bool(self._settings.get("word_wrap", True))
		self.editor.set_word_wrap_enabled(wrap_enabled)
		self.word_wrap_action.setChecked(wrap_enabled)

	def _create_actions(self) -> None:
		self.new_action = QAction("&New", self)
		self.new_action.setShortcut("Ctrl+N")
		self.new_action.triggered.connect(self.new_file)

		self.open_action = QAction("&Open…", self)
		self.open_action.setShortcut("Ctrl+O")
		self.open_action.triggered.connect(self.open_file)

		self.save_action = QAction("&Save", self)
		self.save_action.setShortcut("Ctrl+S")
		self.save_action.triggered.connect(self.save_file)

		self.save_as_action = QAction("Save &As…", self)
		self.save_as_action.setShortcut("Ctrl+Shift+S")
		self.save_as_action.triggered.connect(self.save_file_as)

		self.exit_action = QAction("E&xit", self)
		self.exit_action.setShortcut("Ctrl+Q")
		self.exit_action.triggered.connect(self.close)

		self.indent_line_action = QAction("Indent &Line", self)
		self.indent_line_action.triggered.connect(self.editor.indent_current_line)

		# Как indent-region в Emacs
		self.indent_buffer_action = QAction("Re-indent &Buffer", self)
		self.indent_buffer_action.setShortcut(QKeySequence("Ctrl+Alt+\\"))
		self.indent_buffer_action.triggered.connect(self.editor.indent_buffer)

		self.increase_font_action = QAction("Increase Font", self)
		self.increase_font_action.setShortcuts([QKeySequence("Ctrl++"), QKeySequence("Ctrl+=")])
		self.increase_font_action.triggered.connect(lambda: self._adjust_font_size(1))

		self.decrease_font_action = QAction("Decrease Font", self)
		self.decrease_font_action.setShortcut(QKeySequence("Ctrl+-"))
		self.decrease_font_action.triggered.connect(lambda: self._adjust_font_size(-1))

		self.reset_font_action = QAction("Reset Font Size", self)
		self.reset_font_action.setShortcut(QKeySequence("Ctrl+0"))
		self.reset_font_action.triggered.connect(self._reset_font_size)

		self.word_wrap_action = QAction("Word Wrap", self, checkable=True)
		self.word_wrap_action.triggered.connect(self._toggle_word_wrap)

	def _create_menu_bar(self) -> None:
		menu_bar = self.menuBar()
		file_menu = menu_bar.addMenu("&File")
		file_menu.addAction(self.new_action)
		file_menu.addAction(self.open_action)
		file_menu.addSeparator()
		file_menu.addAction(self.save_action)
		file_menu.addAction(self.save_as_action)
		file_menu.addSeparator()
		file_menu.addAction(self.exit_action)

		edit_menu = menu_bar.addMenu("&Edit")
		edit_menu.addAction(self.indent_line_action)
		edit_menu.addAction(self.indent_buffer_action)

		view_menu = menu_bar.addMenu("&View")
		view_menu.addAction(self.increase_font_action)
		view_menu.addAction(self.decrease_font_action)
		view_menu.addAction(self.reset_font_action)
		view_menu.addSeparator()
		view_menu.addAction(self.word_wrap_action)

		# Меню символов пересобирается при каждом открытии
		self.symbols_menu = menu_bar.addMenu("S&ymbols")
		self.symbols_menu.aboutToShow.connect(self._rebuild_symbols_menu)

	def _rebuild_symbols_menu(self) -> None:
		self.symbols_menu.clear()
		groups = group_symbols(self.editor.symbols())
		if not groups:
			empty = self.symbols_menu.addAction("No definitions")
			empty.setEnabled(False)
			return
		for kind, symbols in groups.items():
			submenu: QMenu = self.symbols_menu.addMenu(kind)
			for symbol in symbols:
				action = submenu.addAction(f"{symbol.name}\tline {symbol.line}")
				action.triggered.connect(lambda _=False, pos=symbol.position: self.editor.goto_position(pos))

	def _create_settings_menu(self) -> None:
		menu_bar = self.menuBar()
		settings_menu = menu_bar.addMenu("&Settings")

		theme_menu = settings_menu.addMenu("Theme")
		action_group = QActionGroup(self)
		action_group.setExclusive(True)

		self.dark_theme_action = QAction("Dark", self, checkable=True)
		self.light_theme_action = QAction("Light", self, checkable=True)
		action_group.addAction(self.dark_theme_action)
		action_group.addAction(self.light_theme_action)

		theme_menu.addAction(self.dark_theme_action)
		theme_menu.addAction(self.light_theme_action)

		current = self._settings.get("theme", Theme.DARK.value)
		self.dark_theme_action.setChecked(current != Theme.LIGHT.value)
		self.light_theme_action.setChecked(current == Theme.LIGHT.value)

		self.dark_theme_action.triggered.connect(lambda: self._set_theme(Theme.DARK.value))
		self.light_theme_action.triggered.connect(lambda: self._set_theme(Theme.LIGHT.value))

		settings_menu.addSeparator()
		self.indent_width_action = QAction("Indent Width…", self)
		self.indent_width_action.triggered.connect(self._ask_indent_width)
		settings_menu.addAction(self.indent_width_action)

	def _save_settings(self) -> None:
		if not save_settings(self._settings, self._settings_path):
			self.status_bar.showMessage("Could not save settings", 3000)

	def _set_theme(self, theme_value: str) -> None:
		palette = palette_for(theme_value)
		self._settings["theme"] = theme_value
		self._save_settings()
		self.editor.set_palette(palette)
		self._apply_global_theme(palette)

	def set_indent_width(self, width: int) -> None:
		self.editor.set_indent_width(width)
		self._settings["indent_width"] = width
		self._save_settings()

	def _ask_indent_width(self) -> None:
		width, ok = QInputDialog.getInt(
			self,
			"Indent Width",
			"Columns per nesting level:",
			self.editor.indent_width,
			MIN_INDENT_WIDTH,
			MAX_INDENT_WIDTH,
		)
		if ok:
			self.set_indent_width(width)

	def _apply_global_theme(self, palette: EditorPalette) -> None:
		bg = palette.background.name()
		fg = palette.foreground.name()
		accent = palette.keyword.name()
		stylesheet = f"""
QMainWindow {{ background-color: {bg}; }}
QMenuBar {{ background-color: {bg}; color: {fg}; }}
QMenuBar::item:selected {{ background: {accent}; }}
QMenu {{ background-color: {bg}; color: {fg}; }}
QMenu::item:selected {{ background: {accent}; }}
QStatusBar {{ background-color: {bg}; color: {fg}; }}
"""
		self.setStyleSheet(stylesheet)

	def _adjust_font_size(self, delta: int) -> None:
		self.editor.adjust_font_size(delta)
		self._settings["font_size"] = self.editor.font().pointSize()
		self._save_settings()

	def _reset_font_size(self) -> None:
		self.editor.reset_font_size()
		self._settings["font_size"] = self.editor.font().pointSize()
		self._save_settings()

	def _toggle_word_wrap(self, checked: bool) -> None:
		self.editor.set_word_wrap_enabled(bool(checked))
		self._settings["word_wrap"] = bool(checked)
		self._save_settings()

	def new_file(self) -> None:
		if not self._maybe_discard_changes():
			return
		self.editor.clear()
		self._current_file = None
		self._update_window_title()

	def open_file(self) -> None:
		if not self._maybe_discard_changes():
			return
		file_path, _ = QFileDialog.getOpenFileName(self, "Open File", str(Path.home()), file_dialog_filter())
		if file_path:
			self.load_path(Path(file_path))

	def load_path(self, path: Path) -> bool:
		try:
			with open(path, "r", encoding="utf-8") as fh:
				text = fh.read()
		except (OSError, ValueError) as exc:
			log.warning("Could not open %s: %s", path, exc)
			QMessageBox.critical(self, "Open File", f"Could not open {path}:\n{exc}")
			return False
		self.editor.setPlainText(text)
		self._current_file = path
		self._update_window_title()
		return True

	def save_file(self) -> None:
		if self._current_file is None:
			self.save_file_as()
			return
		self._write_to_path(self._current_file)

	def save_file_as(self) -> None:
		file_path, _ = QFileDialog.getSaveFileName(self, "Save File As", str(Path.home()), file_dialog_filter())
		if file_path:
			if self._write_to_path(Path(file_path)):
				self._current_file = Path(file_path)
				self._update_window_title()

	def closeEvent(self, event):  # type: ignore[override]
		if self._maybe_discard_changes():
			event.accept()
		else:
			event.ignore()

	def update_status(self, line: int, column: int) -> None:
		path = str(self._current_file) if self._current_file else "Untitled"
		self.status_bar.showMessage(f"{path} — {MODE_NAME} — Line {line}, Column {column}")

	def _maybe_discard_changes(self) -> bool:
		if not self.editor.document().isModified():
			return True
		response = QMessageBox.warning(
			self,
			"Unsaved Changes",
			"The document has unsaved changes. Do you want to continue without saving?",
			QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
			QMessageBox.StandardButton.No,
		)
		return response == QMessageBox.StandardButton.Yes

	def _write_to_path(self, path: Path) -> bool:
		try:
			with open(path, "w", encoding="utf-8") as fh:
				fh.write(self.editor.toPlainText())
		except OSError as exc:
			log.warning("Could not save %s: %s", path, exc)
			QMessageBox.critical(self, "Save File", f"Could not save {path}:\n{exc}")
			return False
		self.editor.document().setModified(False)
		return True

	def _update_window_title(self) -> None:
		suffix = f" — {self._current_file.name}" if self._current_file else ""
		self.setWindowTitle(f"LispPad{suffix}")
