"""Desktop notifications through the system tray.

The notifier follows a browser-style permission model: it starts in
``DEFAULT``, asks once on first use, and remembers the answer.  A denied
or failed notification is dropped; the timer never waits on it.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject
from PyQt6.QtWidgets import QSystemTrayIcon

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Pomodoro Clock"


class Permission(Enum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


def _tray_supports_messages() -> bool:
    return (
        QSystemTrayIcon.isSystemTrayAvailable()
        and QSystemTrayIcon.supportsMessages()
    )


class Notifier(QObject):
    """Shows messages via a ``QSystemTrayIcon`` once permission is granted.

    ``permission_probe`` answers the permission prompt; it defaults to
    asking Qt whether the platform tray can show messages.
    """

    def __init__(
        self,
        tray: QSystemTrayIcon | None,
        parent: QObject | None = None,
        *,
        title: str = DEFAULT_TITLE,
        enabled: bool = True,
        permission_probe: Callable[[], bool] | None = None,
    ) -> None:
        super().__init__(parent)
        self._tray = tray
        self._title = title
        self._enabled = enabled
        self._probe = permission_probe or _tray_supports_messages
        self._permission = Permission.DEFAULT

    @property
    def permission(self) -> Permission:
        return self._permission

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def request_permission(self) -> Permission:
        """Ask once; later calls return the remembered answer."""
        if self._permission != Permission.DEFAULT:
            return self._permission
        try:
            granted = self._tray is not None and bool(self._probe())
        except Exception:
            logger.warning("Notification permission check failed",
                           exc_info=True)
            granted = False
        self._permission = Permission.GRANTED if granted else Permission.DENIED
        logger.info("Notification permission %s", self._permission.value)
        return self._permission

    def notify(self, message: str) -> bool:
        """Show *message*.  Returns whether it was handed to the tray."""
        if not self._enabled:
            return False
        if self._permission == Permission.DEFAULT:
            self.request_permission()
        if self._permission != Permission.GRANTED:
            logger.debug("Notification dropped (%s): %s",
                         self._permission.value, message)
            return False
        try:
            self._tray.showMessage(self._title, message)
        except Exception:
            logger.warning("Showing notification failed", exc_info=True)
            return False
        return True
