import sys

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QTextCursor
from PyQt5.QtTest import QTest
from PyQt5.QtWidgets import QApplication

from CodeEditor import CodeEditor
from Theme import EditorPalette


def _get_app() -> QApplication:
    """Создаёт (или возвращает уже созданный) экземпляр QApplication для тестов."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    return app


# Ссылка держит приложение живым, пока живут виджеты тестов
APP = _get_app()


def _editor(text: str, position: int = 0) -> CodeEditor:
    editor = CodeEditor(EditorPalette())
    editor.setPlainText(text)
    cursor = editor.textCursor()
    cursor.setPosition(position)
    editor.setTextCursor(cursor)
    return editor


def test_indent_current_line_applies_simple_indent() -> None:
    editor = _editor("(defn foo\nbar)", 10)
    editor.indent_current_line()
    assert editor.toPlainText() == "(defn foo\n  bar)"
    assert editor.textCursor().position() == 12


def test_indent_current_line_is_noop_when_already_indented() -> None:
    editor = _editor("(defn foo\n  bar)", 10)
    editor.indent_current_line()
    assert editor.toPlainText() == "(defn foo\n  bar)"
    assert not editor.document().isModified()
    assert editor.textCursor().position() == 12


def test_indent_width_is_taken_from_editor() -> None:
    editor = _editor("(a\nb)", 3)
    editor.set_indent_width(4)
    editor.indent_current_line()
    assert editor.toPlainText() == "(a\n    b)"


def test_indent_buffer_reindents_every_line() -> None:
    editor = _editor("(let [a 1\nb 2]\na)")
    editor.indent_buffer()
    assert editor.toPlainText() == "(let [a 1\n      b 2]\n  a)"


def test_tab_reindents_selected_lines() -> None:
    editor = _editor("(a\nb\nc)")
    cursor = editor.textCursor()
    cursor.select(QTextCursor.SelectionType.Document)
    editor.setTextCursor(cursor)
    QTest.keyClick(editor, Qt.Key.Key_Tab)
    assert editor.toPlainText() == "(a\n  b\n  c)"


def test_return_inserts_newline_with_indentation() -> None:
    editor = _editor("(defn foo", 9)
    QTest.keyClick(editor, Qt.Key.Key_Return)
    assert editor.toPlainText() == "(defn foo\n  "
    assert editor.textCursor().position() == 12


def test_return_aligns_inside_vector() -> None:
    editor = _editor("[a b]", 3)
    QTest.keyClick(editor, Qt.Key.Key_Return)
    assert editor.toPlainText() == "[a\n b]"
    assert editor.textCursor().position() == 4


def test_brackets_are_paired_and_closer_is_stepped_over() -> None:
    editor = _editor("")
    QTest.keyClicks(editor, "(")
    assert editor.toPlainText() == "()"
    assert editor.textCursor().position() == 1
    QTest.keyClicks(editor, ")")
    assert editor.toPlainText() == "()"
    assert editor.textCursor().position() == 2


def test_character_literal_bracket_is_not_paired() -> None:
    editor = _editor("\\", 1)
    QTest.keyClicks(editor, "(")
    assert editor.toPlainText() == "\\("


def test_symbols_and_goto_position() -> None:
    editor = _editor("(defn a [])\n(def b 1)")
    assert [s.name for s in editor.symbols()] == ["a", "b"]
    editor.goto_position(12)
    assert editor.textCursor().position() == 12


def test_codeeditor_reset_font_restores_default_size() -> None:
    """Сброс размера шрифта возвращает его к значению по умолчанию."""
    editor = _editor("")
    default_size = editor.font().pointSize()
    editor.set_font_size(default_size + 5)
    assert editor.font().pointSize() == default_size + 5

    editor.reset_font_size()
    assert editor.font().pointSize() == default_size


def test_font_size_is_clamped() -> None:
    editor = _editor("")
    editor.set_font_size(500)
    assert editor.font().pointSize() == 72


# Эмодзи занимает две позиции документа Qt, но одну в str
ASTRAL_TEXT = "; \U0001F600\n(a\n    b)"


def _editor_on_block(text: str, block_number: int) -> CodeEditor:
    editor = _editor(text)
    cursor = editor.textCursor()
    cursor.setPosition(editor.document().findBlockByNumber(block_number).position())
    editor.setTextCursor(cursor)
    return editor


def test_indent_current_line_after_astral_character() -> None:
    editor = _editor_on_block(ASTRAL_TEXT, 2)
    editor.indent_current_line()
    assert editor.toPlainText() == "; \U0001F600\n(a\n  b)"
    assert editor.document().characterAt(editor.textCursor().position()) == "b"


def test_indent_buffer_after_astral_character() -> None:
    editor = _editor_on_block(ASTRAL_TEXT, 2)
    editor.indent_buffer()
    assert editor.toPlainText() == "; \U0001F600\n(a\n  b)"


def test_return_after_astral_character() -> None:
    editor = _editor("; \U0001F600\n(defn foo")
    editor.moveCursor(QTextCursor.MoveOperation.End)
    QTest.keyClick(editor, Qt.Key.Key_Return)
    assert editor.toPlainText() == "; \U0001F600\n(defn foo\n  "
    assert editor.textCursor().atEnd()


def test_goto_symbol_after_astral_character() -> None:
    editor = _editor("; \U0001F600\n(def b 1)")
    (symbol,) = editor.symbols()
    editor.goto_position(symbol.position)
    assert editor.document().characterAt(editor.textCursor().position()) == "b"
