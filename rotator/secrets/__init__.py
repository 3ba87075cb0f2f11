"""rotator.secrets

Secret sinks: where sealed values get published.
"""

from rotator.secrets.base import PublicKey, SecretSink
from rotator.secrets.github import (
    GitHubEnvironmentSecrets,
    GitHubOrganizationSecrets,
    GitHubRepositorySecrets,
    select_secret_sink,
)

__all__ = [
    "GitHubEnvironmentSecrets",
    "GitHubOrganizationSecrets",
    "GitHubRepositorySecrets",
    "PublicKey",
    "SecretSink",
    "select_secret_sink",
]
