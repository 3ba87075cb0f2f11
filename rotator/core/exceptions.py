"""rotator.core.exceptions

Errors are part of the interface.

Every collaborator failure is translated into one of these before it reaches the
rotation engine. The engine reports them; it does not interpret provider payloads.
"""

from __future__ import annotations


class RotatorError(Exception):
    """Base exception for rotator."""


class ConfigError(RotatorError):
    """Configuration is missing, invalid, or inconsistent."""


class CredentialSourceError(RotatorError):
    """Listing, creating, or deleting an access key failed."""


class SecretSinkError(RotatorError):
    """Fetching the public key or writing a secret failed."""


class SealingError(RotatorError):
    """The public key cannot be used to seal a value."""


class CapacityError(RotatorError):
    """The identity is stuck at the provider's key limit."""
