"""Allow running PomoClock as a module: python -m pomoclock."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import PomodoroWindow


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    app = QApplication(sys.argv)
    app.setApplicationName("PomoClock")
    app.setOrganizationName("PomoClock")

    window = PomodoroWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
