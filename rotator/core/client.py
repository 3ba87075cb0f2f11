"""rotator.core.client

GitHub REST client with:
- bearer auth + pinned API version
- per-request timeout
- retries (exponential backoff) on network errors, 429 and 5xx

Retries live here, at the transport, so the rotation engine never has to retry a
step itself.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from rotator import __version__
from rotator.core.exceptions import SecretSinkError

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})
API_VERSION = "2022-11-28"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    max_retries: int = 3
    timeout_s: float = 20.0
    backoff_cap_s: float = 8.0


class GitHubClient:
    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        config: ClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or ClientConfig()
        self._sleep = sleep
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=self.config.timeout_s,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": f"iam-key-rotator/{__version__}",
            },
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _backoff(self, attempt: int, resp: httpx.Response | None) -> float:
        if resp is not None:
            retry_after = resp.headers.get("Retry-After")
            if retry_after and retry_after.isdigit():
                return min(float(retry_after), self.config.backoff_cap_s)
        return min(2**attempt, self.config.backoff_cap_s)

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        label = f"{method.upper()} {path}"
        last_error = "no attempt made"

        for attempt in range(self.config.max_retries + 1):
            resp: httpx.Response | None = None
            try:
                resp = self._client.request(method, path, **kwargs)
            except httpx.TransportError as e:
                last_error = f"{type(e).__name__}"
            else:
                if resp.is_success:
                    return resp
                if resp.status_code not in RETRYABLE_STATUS:
                    raise SecretSinkError(f"github {label} failed: http {resp.status_code}")
                last_error = f"http {resp.status_code}"

            if attempt >= self.config.max_retries:
                break
            self._sleep(self._backoff(attempt, resp))

        raise SecretSinkError(f"github {label} failed after {self.config.max_retries + 1} attempts: {last_error}")

    def request_json(
        self,
        method: str,
        path: str,
        *,
        expected: type | tuple[type, ...] | None = dict,
        **kwargs: Any,
    ) -> Any:
        resp = self.request(method, path, **kwargs)
        try:
            data: Any = resp.json()
        except ValueError as e:
            raise SecretSinkError(f"github {method.upper()} {path}: response is not JSON") from e
        if expected is not None and not isinstance(data, expected):
            raise SecretSinkError(f"github {method.upper()} {path}: response_schema_mismatch")
        return data
