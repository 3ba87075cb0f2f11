"""rotator.core

Core primitives: configuration, errors, logging, HTTP transport.

If a module needs to exist, it should probably depend only on this package.
"""

from .config import LoggingConfig, RotationConfig
from .exceptions import (
    CapacityError,
    ConfigError,
    CredentialSourceError,
    RotatorError,
    SealingError,
    SecretSinkError,
)

__all__ = [
    "CapacityError",
    "ConfigError",
    "CredentialSourceError",
    "LoggingConfig",
    "RotationConfig",
    "RotatorError",
    "SealingError",
    "SecretSinkError",
]
