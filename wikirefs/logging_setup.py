from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

from wikirefs.settings import APP_NAME, LOG_PATH

SESSION_ID = uuid.uuid4().hex[:8]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s | sid=%(session)s"
LOG_MAX_BYTES = 2 * 1024 * 1024
LOG_BACKUPS = 5

# QtMsgType -> logging level
_QT_LEVELS = {
    0: logging.DEBUG,
    1: logging.WARNING,
    2: logging.ERROR,
    3: logging.CRITICAL,
    4: logging.INFO,
}


class EnsureSessionFilter(logging.Filter):
    """Ensure record.session exists so Formatter never crashes."""
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session"):
            record.session = SESSION_ID
        return True


class SessionAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        extra.setdefault("session", SESSION_ID)
        return msg, kwargs


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(EnsureSessionFilter())
    logger.addHandler(handler)


def setup_logging(log_path: Path | None = None, *, verbose: bool = False) -> SessionAdapter:
    """
    Configure the `wikirefs` logger once per process.

    Everything goes to a rotating log file; the console gets INFO and up
    (DEBUG with `verbose`).
    """
    log_path = Path(log_path or LOG_PATH)

    logger = logging.getLogger(APP_NAME)
    if logger.handlers:
        return SessionAdapter(logger, {})

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    log_path.parent.mkdir(parents=True, exist_ok=True)
    _attach(
        logger,
        RotatingFileHandler(log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"),
        logging.DEBUG,
    )
    _attach(logger, logging.StreamHandler(sys.stderr), logging.DEBUG if verbose else logging.INFO)

    logger.debug("Logging initialized. log_file=%s", log_path)
    return SessionAdapter(logger, {})


def install_global_exception_hooks(log: logging.LoggerAdapter) -> None:
    """Route uncaught exceptions and Qt's own messages into `log`."""
    def _excepthook(exc_type, exc, tb):
        if not issubclass(exc_type, KeyboardInterrupt):
            log.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook

    try:
        from PySide6.QtCore import qInstallMessageHandler
    except ImportError:
        log.exception("Qt message handler not installed")
        return

    def _qt_message_handler(mode, context, message):
        try:
            level = _QT_LEVELS.get(int(getattr(mode, "value", mode)), logging.WARNING)
        except (TypeError, ValueError):
            level = logging.WARNING
        where = getattr(context, "file", None) or "unknown"
        log.log(level, "Qt: %s | where=%s", message, where)

    qInstallMessageHandler(_qt_message_handler)
