"""rotator.secrets.github

GitHub Actions secrets, three flavors:
- repository: /repos/{owner}/{repo}/actions/secrets
- environment: /repos/{owner}/{repo}/environments/{environment}/secrets
- organization: /orgs/{org}/actions/secrets

All three share the same two calls. Only the path prefix differs (and organization
secrets also carry a visibility).
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from rotator.core.client import GitHubClient
from rotator.core.config import RotationConfig
from rotator.core.exceptions import ConfigError, SecretSinkError
from rotator.secrets.base import PublicKey, SecretSink


def _seg(value: str) -> str:
    return quote(str(value), safe="")


class _GitHubSecrets:
    kind: str

    def __init__(self, client: GitHubClient, prefix: str) -> None:
        self._client = client
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def public_key(self) -> PublicKey:
        data = self._client.request_json("GET", f"{self._prefix}/public-key")
        key = data.get("key")
        key_id = data.get("key_id")
        if not isinstance(key, str) or not key or key_id in (None, ""):
            raise SecretSinkError(f"github {self.kind} public key response is missing key or key_id")
        return PublicKey(key=key, key_id=str(key_id))

    def _body(self, encrypted_value: str, key_id: str) -> dict[str, Any]:
        return {"encrypted_value": encrypted_value, "key_id": key_id}

    def upsert(self, name: str, encrypted_value: str, key_id: str) -> None:
        # 201 created, 204 updated
        self._client.request("PUT", f"{self._prefix}/{_seg(name)}", json=self._body(encrypted_value, key_id))


class GitHubRepositorySecrets(_GitHubSecrets):
    kind = "repository"

    def __init__(self, client: GitHubClient, owner: str, repo: str) -> None:
        super().__init__(client, f"/repos/{_seg(owner)}/{_seg(repo)}/actions/secrets")


class GitHubEnvironmentSecrets(_GitHubSecrets):
    kind = "environment"

    def __init__(self, client: GitHubClient, owner: str, repo: str, environment: str) -> None:
        super().__init__(client, f"/repos/{_seg(owner)}/{_seg(repo)}/environments/{_seg(environment)}/secrets")


class GitHubOrganizationSecrets(_GitHubSecrets):
    kind = "organization"

    def __init__(self, client: GitHubClient, organization: str, *, visibility: str = "private") -> None:
        super().__init__(client, f"/orgs/{_seg(organization)}/actions/secrets")
        self.visibility = visibility

    def _body(self, encrypted_value: str, key_id: str) -> dict[str, Any]:
        body = super()._body(encrypted_value, key_id)
        body["visibility"] = self.visibility
        return body


def select_secret_sink(config: RotationConfig, client: GitHubClient) -> SecretSink:
    """Organization wins over environment; repository is the default."""

    if config.sink_kind == "organization":
        return GitHubOrganizationSecrets(client, str(config.organization), visibility=config.org_visibility)

    owner, repo = config.repo_owner, config.repo_name
    if not owner or not repo:
        raise ConfigError("repository secrets need owner and repo")
    if config.sink_kind == "environment":
        return GitHubEnvironmentSecrets(client, owner, repo, str(config.environment))
    return GitHubRepositorySecrets(client, owner, repo)
