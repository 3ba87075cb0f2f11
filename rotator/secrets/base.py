"""rotator.secrets.base

What the rotation engine needs from a secret store, and nothing more.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class PublicKey:
    key: str  # base64 Curve25519 public key
    key_id: str


@runtime_checkable
class SecretSink(Protocol):
    def public_key(self) -> PublicKey: ...

    def upsert(self, name: str, encrypted_value: str, key_id: str) -> None: ...
