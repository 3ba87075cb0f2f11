from __future__ import annotations

import sys
from pathlib import Path

import pytest

# uv/pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from nacl.public import PrivateKey  # noqa: E402

from rotator.core.config import RotationConfig  # noqa: E402
from tests._fakes import FakeCredentials, FakeSecrets, RecordingReporter  # noqa: E402

# Anything the CI runner or a developer shell might export that config reads.
_CONFIG_ENV = (
    "IAM_USER_NAME",
    "GITHUB_ACCESS_KEY_ID_NAME",
    "GITHUB_SECRET_ACCESS_KEY_NAME",
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_API_URL",
    "GITHUB_ACTIONS",
    "OWNER",
    "REPO",
    "ORGANIZATION",
    "ENVIRONMENT",
    "ORG_VISIBILITY",
    "AWS_REGION",
    "LOGGING__LEVEL",
    "LOGGING__JSON_OUTPUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def keypair() -> PrivateKey:
    return PrivateKey.generate()


@pytest.fixture()
def config() -> RotationConfig:
    return RotationConfig.load(
        iam_user_name="deployer",
        github_token="test-token",
        github_repository="acme/infra",
    )


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture()
def secrets(keypair: PrivateKey) -> FakeSecrets:
    return FakeSecrets(keypair)


@pytest.fixture()
def make_credentials() -> type[FakeCredentials]:
    return FakeCredentials
