"""rotator.core.log

Logging setup for the CLI.

Stdlib logging, one handler on the ``rotator`` logger. Every record passes through
the redaction filter before it is formatted, whichever formatter is active.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO

from rotator.core.config import LoggingConfig
from rotator.security.redaction import redact_secrets

LOGGER_NAME = "rotator"


class RedactionFilter(logging.Filter):
    """Render the message once, scrub it, and drop the args."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact_secrets(record.getMessage())
        record.args = None
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
        return json.dumps(payload, sort_keys=True)


def configure_logging(config: LoggingConfig | None = None, *, stream: IO[str] | None = None) -> logging.Logger:
    """Install (or replace) the rotator handler. Safe to call more than once."""

    cfg = config or LoggingConfig()
    logger = logging.getLogger(LOGGER_NAME)

    for h in list(logger.handlers):
        if getattr(h, "_rotator_handler", False):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler._rotator_handler = True  # type: ignore[attr-defined]
    handler.addFilter(RedactionFilter())
    if cfg.json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(str(cfg.level).upper())
    return logger
