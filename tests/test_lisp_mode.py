from pathlib import Path

import pytest

from LispMode import COMMENT_PREFIX, FILE_EXTENSIONS, file_dialog_filter, is_lisp_file


@pytest.mark.parametrize("name", ["core.clj", "app.cljs", "shared.cljc", "deps.edn", "LOUD.CLJ"])
def test_lisp_sources_are_recognised(name: str) -> None:
    assert is_lisp_file(name)
    assert is_lisp_file(Path("/tmp") / name)


@pytest.mark.parametrize("name", ["notes.txt", "script.py", "clj"])
def test_other_files_are_not_lisp(name: str) -> None:
    assert not is_lisp_file(name)


def test_dialog_filter_lists_every_extension() -> None:
    dialog_filter = file_dialog_filter()
    for ext in FILE_EXTENSIONS:
        assert f"*{ext}" in dialog_filter
    assert dialog_filter.endswith("All Files (*.*)")


def test_comment_prefix() -> None:
    assert COMMENT_PREFIX == ";"
