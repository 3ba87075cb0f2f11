from __future__ import annotations

from rotator.core.exceptions import (
    CapacityError,
    ConfigError,
    CredentialSourceError,
    RotatorError,
    SealingError,
    SecretSinkError,
)


def test_exception_hierarchy_is_structural() -> None:
    assert issubclass(ConfigError, RotatorError)
    assert issubclass(CredentialSourceError, RotatorError)
    assert issubclass(SecretSinkError, RotatorError)
    assert issubclass(SealingError, RotatorError)
    assert issubclass(CapacityError, RotatorError)


def test_capacity_is_not_a_plain_source_error() -> None:
    assert not issubclass(CapacityError, CredentialSourceError)
