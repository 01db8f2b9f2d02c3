"""Allow running PomoTimer as a module: python -m pomotimer."""

import argparse
import logging
import sys

from PyQt6.QtCore import QCoreApplication

from .database.db import open_database
from .database.storage import KeyValueStorage, reset_storage
from .audio.sounds import SoundManager
from .app import ConsoleApp, HELP_TEXT, status_line
from .timer.engine import TimerEngine


def main() -> None:
    parser = argparse.ArgumentParser(prog="pomotimer", description=__doc__)
    parser.add_argument("--db", help="SQLAlchemy URL for the state database")
    parser.add_argument(
        "--reset", action="store_true",
        help="wipe all saved settings and progress before starting",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    open_database(args.db)

    storage = KeyValueStorage()
    if args.reset:
        reset_storage(storage)

    app = QCoreApplication(sys.argv)
    app.setApplicationName("PomoTimer")
    app.setOrganizationName("PomoTimer")

    engine = TimerEngine(storage)
    console = ConsoleApp(engine, SoundManager())
    app.aboutToQuit.connect(engine.shutdown)

    print("PomoTimer ready!")
    print(HELP_TEXT)
    print(status_line(engine.get_state()))
    console.attach_stdin()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
