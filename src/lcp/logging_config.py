"""Logging setup with per-request correlation ids."""

import logging
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


class RequestIDFilter(logging.Filter):
    """Attach the current request id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the ``lcp`` logger tree."""
    root = logging.getLogger("lcp")
    root.setLevel(level.upper())

    for handler in root.handlers:
        if getattr(handler, "_lcp_handler", False):
            return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIDFilter())
    handler._lcp_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.propagate = False
