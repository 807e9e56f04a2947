"""Process-wide logger. Every record carries the run id of this process."""
import logging
import sys
import uuid

from tabchat.config import settings

_RUN_ID = uuid.uuid4().hex[:8]


def get_run_id() -> str:
    return _RUN_ID


class _RunIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID
        return True


def _configure() -> logging.Logger:
    root = logging.getLogger("tabchat")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.addFilter(_RunIdFilter())
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s [%(run_id)s] %(name)s: %(message)s"
        ))
        root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())
    return root


logger = _configure()
