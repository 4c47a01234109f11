# wikirefs/services/rename_service.py

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QThreadPool, Slot

from wikirefs.core.names import clean_link
from wikirefs.services.renamer import PageRenamer
from wikirefs.settings import APP_NAME
from wikirefs.workers.rename_worker import RenameWorker

log = logging.getLogger(f"{APP_NAME}.rename")


class RenameService(QObject):
    """
    Runs page renames in a thread pool.

    Responsibilities:
    - cheap validation before anything is queued
    - manage req_id
    - start RenameWorker
    - drop stale results
    """

    def __init__(
        self,
        *,
        renamer: PageRenamer,
        thread_pool: QThreadPool | None = None,
        on_finished,
        on_failed,
    ):
        super().__init__()

        self._renamer = renamer
        self._pool = thread_pool or QThreadPool.globalInstance()
        self._on_finished = on_finished
        self._on_failed = on_failed

        self._req_id = 0

    # ───────────────────────── public API ─────────────────────────

    def start(
        self,
        *,
        old_name: str,
        new_name: str,
        change_referrers: bool = True,
        author: str | None = None,
    ) -> tuple[bool, str | None]:
        """
        Queue a rename.

        Returns (ok, error_message).
        """
        if not old_name or not (new_name or "").strip():
            return False, "Page names may not be empty."

        if clean_link(new_name.strip()) == old_name:
            return False, "The name did not change."

        self._req_id += 1
        req_id = self._req_id

        worker = RenameWorker(
            req_id=req_id,
            renamer=self._renamer,
            old_name=old_name,
            new_name=new_name,
            change_referrers=change_referrers,
            author=author,
        )
        worker.signals.finished.connect(self._handle_finished)
        worker.signals.failed.connect(self._handle_failed)

        log.debug("Rename queued: req_id=%d %s -> %s", req_id, old_name, new_name)
        self._pool.start(worker)
        return True, None

    @property
    def current_request(self) -> int:
        return self._req_id

    def wait(self, msecs: int = -1) -> bool:
        return self._pool.waitForDone(msecs)

    # ───────────────────────── internal ─────────────────────────

    @Slot(int, dict)
    def _handle_finished(self, req_id: int, result: dict) -> None:
        if req_id != self._req_id:
            return
        self._on_finished(req_id, result)

    @Slot(int, str)
    def _handle_failed(self, req_id: int, error: str) -> None:
        if req_id != self._req_id:
            return
        log.warning("Rename failed (bg): %s", error)
        self._on_failed(req_id, error)
