"""Mode registration: which files LispPad treats as Lisp source."""

from pathlib import Path
from typing import Final, Tuple, Union

MODE_NAME: Final[str] = "Clojure"
FILE_EXTENSIONS: Final[Tuple[str, ...]] = (".clj", ".cljs", ".cljc", ".edn")
COMMENT_PREFIX: Final[str] = ";"


def is_lisp_file(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in FILE_EXTENSIONS


def file_dialog_filter() -> str:
    """Filter string for QFileDialog, Lisp sources first."""
    patterns = " ".join(f"*{ext}" for ext in FILE_EXTENSIONS)
    return f"{MODE_NAME} Files ({patterns});;All Files (*.*)"
