"""rotator.credentials.aws

IAM access keys via boto3.

IAM does not promise any order from ListAccessKeys, so keys are sorted by creation
date here. Every botocore failure is re-raised as ``CredentialSourceError`` carrying
the operation, the user, and the AWS error code; never the response body.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from rotator.core.exceptions import ConfigError, CredentialSourceError
from rotator.credentials.base import CredentialPair

_BOTO_CONFIG = BotoConfig(
    connect_timeout=10,
    read_timeout=30,
    retries={"max_attempts": 3, "mode": "standard"},
)


def build_client(service: str, region: str) -> Any:
    return boto3.client(service, region_name=region, config=_BOTO_CONFIG)


def _describe_error(e: Exception) -> str:
    if isinstance(e, ClientError):
        err = e.response.get("Error", {})
        return str(err.get("Code") or "ClientError")
    return type(e).__name__


@dataclass(frozen=True, slots=True)
class AccessKeySummary:
    access_key_id: str
    status: str  # Active|Inactive
    created_at: datetime | None


class IamAccessKeys:
    """Credential source bound to one IAM user."""

    def __init__(self, iam: Any, user_name: str) -> None:
        if not user_name:
            raise ConfigError("IAM user name is required")
        self._iam = iam
        self.user_name = user_name

    def describe(self) -> list[AccessKeySummary]:
        try:
            paginator = self._iam.get_paginator("list_access_keys")
            rows: list[dict[str, Any]] = []
            for page in paginator.paginate(UserName=self.user_name):
                rows.extend(page.get("AccessKeyMetadata", []))
        except (ClientError, BotoCoreError) as e:
            raise CredentialSourceError(f"iam list_access_keys failed for user {self.user_name}: {_describe_error(e)}") from e

        keys = [
            AccessKeySummary(
                access_key_id=str(r["AccessKeyId"]),
                status=str(r.get("Status", "")),
                created_at=r.get("CreateDate"),
            )
            for r in rows
        ]
        # Stable sort: keys without a date keep the provider's relative order, first.
        keys.sort(key=lambda k: (k.created_at is not None, k.created_at.timestamp() if k.created_at else 0.0))
        return keys

    def list(self) -> list[str]:
        return [k.access_key_id for k in self.describe()]

    def create(self) -> CredentialPair:
        try:
            resp = self._iam.create_access_key(UserName=self.user_name)
        except (ClientError, BotoCoreError) as e:
            raise CredentialSourceError(f"iam create_access_key failed for user {self.user_name}: {_describe_error(e)}") from e

        key = resp.get("AccessKey") or {}
        if not key.get("AccessKeyId") or not key.get("SecretAccessKey"):
            raise CredentialSourceError(f"iam create_access_key returned an incomplete key for user {self.user_name}")
        return CredentialPair(access_key_id=str(key["AccessKeyId"]), secret_access_key=str(key["SecretAccessKey"]))

    def delete(self, access_key_id: str) -> None:
        try:
            self._iam.delete_access_key(UserName=self.user_name, AccessKeyId=access_key_id)
        except (ClientError, BotoCoreError) as e:
            raise CredentialSourceError(f"iam delete_access_key failed for user {self.user_name}: {_describe_error(e)}") from e


def user_name_from_arn(arn: str) -> str:
    """``arn:aws:iam::123456789012:user/ops/deployer`` -> ``deployer``."""

    parts = str(arn).split(":", 5)
    if len(parts) != 6 or parts[0] != "arn":
        raise ConfigError(f"not an ARN: {arn}")
    resource = parts[5]
    kind, _, path = resource.partition("/")
    if kind != "user" or not path:
        raise ConfigError(f"caller is not an IAM user ({kind}); set IAM_USER_NAME explicitly")
    return path.rsplit("/", 1)[-1]


def resolve_user_name(sts: Any) -> str:
    """Name of the IAM user the ambient AWS credentials belong to."""

    try:
        identity = sts.get_caller_identity()
    except (ClientError, BotoCoreError) as e:
        raise CredentialSourceError(f"sts get_caller_identity failed: {_describe_error(e)}") from e
    return user_name_from_arn(str(identity.get("Arn", "")))
