"""Structured Logging — JSON log lines for the gateway and the reference node.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Ledger coordinates (subject_id, request_id, sn) plus error_code, path and
      request origin are emitted only when the call site passes them in extra
    - LOG_FORMAT=json for deployments, anything else gives plain text lines

Design Decisions:
    - Formatter over a logging library: the error handlers and NodeGateway
      already pass structured extras, so a field whitelist is all that is needed
    - setup_logging runs from the FastAPI lifespan and replaces its own earlier
      handler, so repeated startups (tests, reloads) do not duplicate lines
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "subject_id", "request_id", "sn", "error_code", "path", "origin",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the gateway handler on the root logger, replacing a previous one."""
    for existing in list(logging.root.handlers):
        if getattr(existing, "_ledger_gateway", False):
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler._ledger_gateway = True
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
