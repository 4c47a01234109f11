# wikirefs/workers/rename_worker.py

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from wikirefs.errors import WikiError
from wikirefs.services.renamer import PageRenamer
from wikirefs.settings import APP_NAME

log = logging.getLogger(f"{APP_NAME}.rename")


class RenameSignals(QObject):
    """
    Signals emitted by RenameWorker.

    finished(req_id, report_dict)
    failed(req_id, error_message)
    """
    finished = Signal(int, dict)
    failed = Signal(int, str)


class RenameWorker(QRunnable):
    """
    Runs one PageRenamer.rename_with_report() off the caller's thread.

    - No UI code
    - Only touches shared state through the renamer
    """

    def __init__(
        self,
        *,
        req_id: int,
        renamer: PageRenamer,
        old_name: str,
        new_name: str,
        change_referrers: bool,
        author: str | None = None,
    ):
        super().__init__()
        self.req_id = req_id
        self.renamer = renamer
        self.old_name = old_name
        self.new_name = new_name
        self.change_referrers = change_referrers
        self.author = author

        self.signals = RenameSignals()

    def run(self) -> None:
        try:
            report = self.renamer.rename_with_report(
                self.old_name,
                self.new_name,
                self.change_referrers,
                author=self.author,
            )
        except WikiError as exc:
            self.signals.failed.emit(self.req_id, str(exc))
            return
        except Exception as exc:
            log.exception("Background rename %s -> %s crashed", self.old_name, self.new_name)
            self.signals.failed.emit(self.req_id, str(exc) or type(exc).__name__)
            return
        self.signals.finished.emit(self.req_id, report.as_dict())
