"""rotator.core.config

Two config surfaces only:
1) Environment variables (what a CI workflow hands us)
2) An optional YAML file, for running the same rotation from a workstation or cron

Keyword overrides win over the file, the file wins over the environment.
Everything else is derived.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

from rotator.core.exceptions import ConfigError

_SECRET_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SinkKind = Literal["organization", "environment", "repository"]


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False

    @field_validator("level")
    @classmethod
    def level_must_be_known(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"logging level must be one of {', '.join(_LOG_LEVELS)}, got {v!r}")
        return level


class RotationConfig(BaseSettings):
    """Immutable input bundle for one rotation run."""

    # Identity. None means "whoever the ambient AWS credentials belong to".
    iam_user_name: str | None = None

    # Secret records to populate
    github_access_key_id_name: str = "AWS_ACCESS_KEY_ID"
    github_secret_access_key_name: str = "AWS_SECRET_ACCESS_KEY"

    # Secret store selection
    github_token: str = Field(min_length=1)
    github_repository: str | None = None  # "owner/repo", set by Actions
    owner: str | None = None
    repo: str | None = None
    organization: str | None = None
    environment: str | None = None
    org_visibility: Literal["all", "private"] = "private"
    github_api_url: str = "https://api.github.com"

    aws_region: str = "us-east-1"

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_nested_delimiter": "__", "frozen": True}

    @field_validator("github_access_key_id_name", "github_secret_access_key_name")
    @classmethod
    def secret_name_must_be_valid(cls, v: str) -> str:
        v = v.strip()
        if not _SECRET_NAME.match(v):
            raise ValueError(f"invalid secret name: {v!r}")
        if v.upper().startswith("GITHUB_"):
            raise ValueError(f"secret names cannot start with GITHUB_: {v!r}")
        return v

    @field_validator("github_repository")
    @classmethod
    def repository_must_be_owner_slash_repo(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        owner, sep, name = v.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"github_repository must look like owner/repo, got {v!r}")
        return v

    @field_validator("iam_user_name", "organization", "environment", "owner", "repo", mode="before")
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def sink_selection_must_be_consistent(self) -> RotationConfig:
        if self.github_access_key_id_name == self.github_secret_access_key_name:
            raise ValueError("access key id and secret access key must use different secret names")
        if self.organization and self.environment:
            raise ValueError("organization and environment are mutually exclusive")
        if not self.organization and not (self.repo_owner and self.repo_name):
            raise ValueError("repository secrets need owner and repo (or GITHUB_REPOSITORY)")
        return self

    @property
    def repo_owner(self) -> str | None:
        if self.owner:
            return self.owner
        if self.github_repository:
            return self.github_repository.split("/", 1)[0]
        return None

    @property
    def repo_name(self) -> str | None:
        if self.repo:
            return self.repo
        if self.github_repository:
            return self.github_repository.split("/", 1)[1]
        return None

    @property
    def sink_kind(self) -> SinkKind:
        if self.organization:
            return "organization"
        if self.environment:
            return "environment"
        return "repository"

    def sink_target(self) -> str:
        """Human-readable description of where secrets will land."""

        if self.sink_kind == "organization":
            return f"org:{self.organization}"
        if self.sink_kind == "environment":
            return f"{self.repo_owner}/{self.repo_name}@{self.environment}"
        return f"{self.repo_owner}/{self.repo_name}"

    @classmethod
    def load(cls, **overrides: Any) -> RotationConfig:
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigError(_format_validation_error(e)) from e

    @classmethod
    def from_yaml(cls, path: Path, **overrides: Any) -> RotationConfig:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file is not valid YAML: {path}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")

        raw.update(overrides)
        return cls.load(**raw)


def _format_validation_error(err: ValidationError) -> str:
    parts = []
    for item in err.errors():
        loc = ".".join(str(p) for p in item.get("loc", ())) or "config"
        parts.append(f"{loc}: {item.get('msg')}")
    return "invalid configuration: " + "; ".join(parts)
