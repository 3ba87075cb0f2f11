"""rotator.reporting

The reporter is the engine's only voice: progress via ``info``, terminal failure via
``set_failed``. ``set_failed`` never raises; callers read the outcome back.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Protocol, runtime_checkable

from rotator.security.redaction import redact_secrets


@runtime_checkable
class Reporter(Protocol):
    def info(self, message: str) -> None: ...

    def set_failed(self, message: str) -> None: ...


def _escape_annotation(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def running_in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


class LogReporter:
    """Reporter backed by a ``logging.Logger``.

    Inside a GitHub Actions job, failures are also written as ``::error::`` workflow
    commands so they surface on the run summary.
    """

    def __init__(
        self,
        logger: logging.Logger,
        *,
        annotate: bool | None = None,
        stream: IO[str] | None = None,
    ) -> None:
        self.logger = logger
        self.annotate = running_in_actions() if annotate is None else annotate
        self._stream = stream
        self.failures: list[str] = []

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def info(self, message: str) -> None:
        self.logger.info(message)

    def set_failed(self, message: str) -> None:
        clean = redact_secrets(str(message))
        self.failures.append(clean)
        self.logger.error(clean)
        if self.annotate:
            print(f"::error::{_escape_annotation(clean)}", file=self._stream or sys.stdout)
