"""rotator.credentials.base

What the rotation engine needs from an identity provider, and nothing more.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class CredentialPair:
    access_key_id: str
    secret_access_key: str = field(repr=False)


@runtime_checkable
class CredentialSource(Protocol):
    """Access keys of exactly one identity.

    ``list`` is ordered oldest first; index 0 is the key that gets retired.
    """

    def list(self) -> Sequence[str]: ...

    def create(self) -> CredentialPair: ...

    def delete(self, access_key_id: str) -> None: ...
