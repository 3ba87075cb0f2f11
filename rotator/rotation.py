"""rotator.rotation

The rotation state machine.

IAM allows two access keys per user. A run looks at how many exist and picks the
only safe sequence for that count:

- 0 or 1 keys: create -> seal -> publish both secrets -> delete the previous key
- 2 keys: a previous run died between create and delete (or someone minted a key by
  hand). Delete the oldest to make room, re-read the list, and go again.

The recovery path runs at most ``max_recoveries`` times per run. If the user is still
at the limit afterwards, the run fails loudly instead of thrashing.

Failure leaves one of two states, both of which the next run converges from:
old key untouched and nothing created, or new key created with the old one still
live (the next run sees 2 keys and takes the recovery path).
"""

from __future__ import annotations

from dataclasses import dataclass

from rotator import MAX_ACCESS_KEYS
from rotator.core.config import RotationConfig
from rotator.core.exceptions import CapacityError, CredentialSourceError, RotatorError
from rotator.credentials.base import CredentialSource
from rotator.reporting import Reporter
from rotator.secrets.base import SecretSink
from rotator.security.redaction import mask_identifier
from rotator.security.sealing import seal


@dataclass(frozen=True, slots=True)
class RotationResult:
    ok: bool
    user_name: str
    created: str | None = None
    deleted: tuple[str, ...] = ()
    error: str | None = None


def rotate(
    config: RotationConfig,
    secrets: SecretSink,
    credentials: CredentialSource,
    reporter: Reporter,
    *,
    max_recoveries: int = 1,
) -> RotationResult:
    """Rotate the access key of ``config.iam_user_name`` into ``secrets``.

    Never raises for collaborator failures: they are reported through
    ``reporter.set_failed`` and reflected in ``RotationResult.ok``.
    """

    user = config.iam_user_name or "(caller)"
    deleted: list[str] = []
    created: str | None = None
    recoveries = 0

    def failed(message: str) -> RotationResult:
        reporter.set_failed(message)
        return RotationResult(ok=False, user_name=user, created=created, deleted=tuple(deleted), error=message)

    try:
        while True:
            reporter.info("Checking current credentials")
            keys = list(credentials.list())

            if len(keys) >= MAX_ACCESS_KEYS:
                if recoveries >= max_recoveries:
                    raise CapacityError(
                        f"AWS user {user} still has {len(keys)} access keys after {recoveries} "
                        "recovery attempt(s); manual intervention required"
                    )
                oldest = keys[0]
                reporter.info(
                    f"AWS user {user} already has {len(keys)} access keys, "
                    f"deleting key at index 0 ({mask_identifier(oldest)}) before rotating"
                )
                try:
                    credentials.delete(oldest)
                except Exception as e:  # noqa: BLE001 - any failure here leaves the user at capacity
                    reason = str(e) if isinstance(e, CredentialSourceError) else f"{type(e).__name__}: {e}"
                    raise CapacityError(
                        f"AWS user {user} already had {len(keys)} access keys and deleting the oldest failed: {reason}"
                    ) from e
                deleted.append(oldest)
                recoveries += 1
                continue

            previous = keys[0] if keys else None

            reporter.info("Provisioning new access key")
            pair = credentials.create()
            created = pair.access_key_id

            reporter.info("Fetching public key")
            key = secrets.public_key()

            # Seal both before publishing either, so a bad key cannot half-publish.
            sealed_id = seal(pair.access_key_id, key.key)
            sealed_secret = seal(pair.secret_access_key, key.key)

            reporter.info(f"Upserting secret {config.github_access_key_id_name}")
            secrets.upsert(config.github_access_key_id_name, sealed_id, key.key_id)

            reporter.info(f"Upserting secret {config.github_secret_access_key_name}")
            secrets.upsert(config.github_secret_access_key_name, sealed_secret, key.key_id)

            if previous is None:
                reporter.info("No previous access key to delete")
            else:
                reporter.info(f"Deleting previous access key {mask_identifier(previous)}")
                credentials.delete(previous)
                deleted.append(previous)

            reporter.info(f"Rotated access key for AWS user {user}: {mask_identifier(created)} is live")
            return RotationResult(ok=True, user_name=user, created=created, deleted=tuple(deleted))

    except CapacityError as e:
        return failed(str(e))
    except RotatorError as e:
        return failed(f"Rotating access keys for AWS user {user} failed: {e}")
    except Exception as e:  # noqa: BLE001 - rotation isolation boundary
        return failed(f"Rotating access keys for AWS user {user} failed: {type(e).__name__}")
