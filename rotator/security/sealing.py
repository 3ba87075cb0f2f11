"""rotator.security.sealing

Seal a plaintext for the secret store.

GitHub publishes a Curve25519 public key per repository, environment, and
organization. Values are encrypted into a libsodium sealed box under that key;
only GitHub holds the private half. The output is base64 so it can travel in JSON.

Sealed boxes use an ephemeral sender key, so sealing the same plaintext twice
yields different ciphertexts.
"""

from __future__ import annotations

import base64

from nacl import encoding, public
from nacl.exceptions import CryptoError

from rotator.core.exceptions import SealingError


def load_public_key(public_key: str) -> public.PublicKey:
    try:
        return public.PublicKey(public_key.encode("utf-8"), encoding.Base64Encoder)
    except (TypeError, ValueError, CryptoError) as e:
        # Do not echo the key material back; its shape is enough to debug.
        raise SealingError(f"unusable public key ({type(e).__name__})") from e


def seal(plaintext: str, public_key: str) -> str:
    """Encrypt ``plaintext`` for the holder of ``public_key`` (base64).

    Returns base64 ciphertext. Never logs, and never includes the plaintext in errors.
    """

    if not plaintext:
        raise SealingError("refusing to seal an empty value")

    box = public.SealedBox(load_public_key(public_key))
    try:
        sealed = box.encrypt(plaintext.encode("utf-8"))
    except CryptoError as e:
        raise SealingError("sealing failed") from e
    return base64.b64encode(sealed).decode("ascii")
