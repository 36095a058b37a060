"""LispPad – launcher."""

import logging
import os
import sys
from pathlib import Path

from PyQt5.QtWidgets import QApplication
from LispPadWindow import LispPadWindow


def configure_logging() -> None:
    level_name = os.environ.get("LISPPAD_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def run() -> None:
    configure_logging()
    app = QApplication(sys.argv)
    window = LispPadWindow()
    if len(sys.argv) > 1:
        window.load_path(Path(sys.argv[1]))
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    run()
