"""Host lifecycle source.

Translates ``QGuiApplication.applicationStateChanged`` into lifecycle
events broadcast down the event tree:

    ApplicationActive                         → EnteredForeground
    ApplicationHidden, ApplicationSuspended   → EnteredBackground
    ApplicationInactive                       → ignored

``ApplicationInactive`` only means the window lost focus on desktop
platforms; the process keeps running, so the countdown keeps going.
Repeated states are collapsed so a background event is never sent twice
in a row.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, Qt
from PyQt6.QtGui import QGuiApplication

from .events import DomainEvent, EnteredBackground, EnteredForeground, EventNode


_STATE_EVENTS: dict[Qt.ApplicationState, type[DomainEvent]] = {
    Qt.ApplicationState.ApplicationActive: EnteredForeground,
    Qt.ApplicationState.ApplicationHidden: EnteredBackground,
    Qt.ApplicationState.ApplicationSuspended: EnteredBackground,
}


class HostLifecycleSource(QObject):

    def __init__(self, root: EventNode, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._root = root
        self._last: type[DomainEvent] | None = None
        self._app: QGuiApplication | None = None

    def attach(self, app: QGuiApplication) -> None:
        self._app = app
        app.applicationStateChanged.connect(self.handle_state)

    def detach(self) -> None:
        if self._app is not None:
            self._app.applicationStateChanged.disconnect(self.handle_state)
            self._app = None

    def handle_state(self, state: Qt.ApplicationState) -> None:
        event_type = _STATE_EVENTS.get(state)
        if event_type is None or event_type is self._last:
            return
        self._last = event_type
        self._root.propagate(event_type())
