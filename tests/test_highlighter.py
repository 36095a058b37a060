import sys

from PyQt5.QtGui import QTextDocument
from PyQt5.QtWidgets import QApplication

from LispHighlighter import IN_STRING, LispHighlighter
from Theme import DARK_PALETTE, LIGHT_PALETTE


def _get_app() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    return app


# Ссылка держит приложение живым, пока живут виджеты тестов
APP = _get_app()


def _highlighted(text: str, palette=DARK_PALETTE):
    document = QTextDocument()
    document.setPlainText(text)
    highlighter = LispHighlighter(document, palette)
    highlighter.rehighlight()
    return document, highlighter


def _color_at(document: QTextDocument, block_number: int, column: int):
    block = document.findBlockByNumber(block_number)
    for format_range in block.layout().formats():
        if format_range.start <= column < format_range.start + format_range.length:
            return format_range.format.foreground().color()
    return None


def test_multiline_string_state_is_carried_between_blocks() -> None:
    document, _highlighter = _highlighted('(str "a\nb")\n(foo)')
    assert document.findBlockByNumber(0).userState() == IN_STRING
    assert document.findBlockByNumber(1).userState() == 0
    assert document.findBlockByNumber(2).userState() == 0


def test_comment_and_string_colors() -> None:
    document, _highlighter = _highlighted('(println "hi") ; done')
    assert _color_at(document, 0, 10) == DARK_PALETTE.string
    assert _color_at(document, 0, 17) == DARK_PALETTE.comment


def test_keyword_inside_string_is_painted_as_string() -> None:
    document, _highlighter = _highlighted('"defn"')
    assert _color_at(document, 0, 2) == DARK_PALETTE.string


def test_special_form_and_definition_name() -> None:
    document, _highlighter = _highlighted("(defn area [r] r)")
    assert _color_at(document, 0, 1) == DARK_PALETTE.keyword
    assert _color_at(document, 0, 6) == DARK_PALETTE.definition


def test_set_palette_rebuilds_formats() -> None:
    document, highlighter = _highlighted("; note")
    highlighter.set_palette(LIGHT_PALETTE)
    assert _color_at(document, 0, 2) == LIGHT_PALETTE.comment


def test_comment_after_astral_character_in_string() -> None:
    # "😀" занимает позиции 0..3 в единицах UTF-16, ";" стоит на позиции 5
    document, _highlighter = _highlighted('"\U0001F600" ; x')
    assert _color_at(document, 0, 3) == DARK_PALETTE.string
    assert _color_at(document, 0, 4) is None
    assert _color_at(document, 0, 5) == DARK_PALETTE.comment
