from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal

from wikirefs.settings import APP_NAME

log = logging.getLogger(f"{APP_NAME}.events")


class WikiEvents(QObject):
    """
    Page lifecycle notifications.

    page_renamed(old_name, new_name)
    page_saved(name)
    page_deleted(name)

    Fire-and-forget: emitting with nobody connected is fine.
    """
    page_renamed = Signal(str, str)
    page_saved = Signal(str)
    page_deleted = Signal(str)

    def notify_renamed(self, old_name: str, new_name: str) -> None:
        log.debug("page_renamed %s -> %s", old_name, new_name)
        self.page_renamed.emit(old_name, new_name)

    def notify_saved(self, name: str) -> None:
        self.page_saved.emit(name)

    def notify_deleted(self, name: str) -> None:
        self.page_deleted.emit(name)
