"""Allow running FlowTimer as a module: python -m flowtimer.

Runs one work interval headless, printing the countdown, and exits when
it finishes.  Backgrounding the application pauses and later corrects the
countdown like any other host.
"""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import FlowTimerApp, format_remaining
from .database.db import init_db
from .settings import load_settings
from .timer.engine import TimerState


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    init_db(settings)

    app = QApplication(sys.argv)
    app.setApplicationName("FlowTimer")
    app.setOrganizationName("FlowTimer")

    timer_app = FlowTimerApp(settings=settings)
    timer_app.attach_host(app)
    engine = timer_app.engine

    engine.remaining_changed.connect(
        lambda remaining: print(f"\r{format_remaining(remaining)}", end="", flush=True)
    )
    engine.state_changed.connect(
        lambda state: app.quit() if state == TimerState.FINISHED else None
    )
    timer_app.notification_shown.connect(
        lambda title, body: print(f"\n{title}: {body}")
    )

    print(f"FlowTimer ready! {format_remaining(engine.remaining)}")
    engine.start()
    code = app.exec()
    print()
    timer_app.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
