"""rotator.security

Sealing and log hygiene.

Nothing in this package performs I/O.
"""

from rotator.security.redaction import mask_identifier, redact_secrets
from rotator.security.sealing import seal

__all__ = [
    "mask_identifier",
    "redact_secrets",
    "seal",
]
