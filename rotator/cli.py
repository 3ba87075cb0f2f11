"""rotator.cli

Command line interface entry point for iam-key-rotator.

Design constraints:
- argparse-based.
- Lazy imports: do not import boto3 or httpx at parse time.
- Every bootstrap failure goes through the same reporter the engine uses.

Exit codes: 0 rotated, 1 rotation failed, 2 usage or configuration error.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

EPILOG = "Two keys, briefly. Never zero."


def _default_aws_client(service: str, region: str) -> Any:
    from rotator.credentials.aws import build_client

    return build_client(service, region)


@dataclass(frozen=True)
class CliContext:
    make_aws_client: Callable[[str, str], Any] = _default_aws_client
    http_transport: Any = None  # httpx.BaseTransport; tests inject a MockTransport
    log_stream: Any = None
    env_overrides: dict[str, Any] = field(default_factory=dict)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iam-key-rotator",
        description="Rotate an IAM user's access key into GitHub Actions secrets.",
        epilog=EPILOG,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit.",
    )

    sub = parser.add_subparsers(dest="command")

    p_rotate = sub.add_parser("rotate", help="Create a new access key, publish it, retire the old one")
    p_rotate.add_argument("--config", type=Path, default=None, help="YAML config file (env vars otherwise).")

    p_status = sub.add_parser("status", help="Show the identity, target, and current access keys")
    p_status.add_argument("--config", type=Path, default=None, help="YAML config file (env vars otherwise).")
    p_status.add_argument("--json", action="store_true", help="Machine-readable output.")

    return parser


def _print_version() -> None:
    from rotator import __version__

    print(f"iam-key-rotator v{__version__}")


def _load_config(ctx: CliContext, args: argparse.Namespace) -> Any:
    from rotator.core.config import RotationConfig

    if args.config is not None:
        return RotationConfig.from_yaml(args.config, **ctx.env_overrides)
    return RotationConfig.load(**ctx.env_overrides)


def _resolve_identity(ctx: CliContext, config: Any) -> Any:
    from rotator.credentials.aws import resolve_user_name

    if config.iam_user_name:
        return config
    user = resolve_user_name(ctx.make_aws_client("sts", config.aws_region))
    return config.model_copy(update={"iam_user_name": user})


def _cmd_rotate(ctx: CliContext, args: argparse.Namespace) -> int:
    from rotator.core.client import GitHubClient
    from rotator.core.exceptions import ConfigError, RotatorError
    from rotator.core.log import configure_logging
    from rotator.credentials.aws import IamAccessKeys
    from rotator.reporting import LogReporter
    from rotator.rotation import rotate
    from rotator.secrets.github import select_secret_sink

    logger = configure_logging(stream=ctx.log_stream)
    reporter = LogReporter(logger)

    try:
        config = _load_config(ctx, args)
        configure_logging(config.logging, stream=ctx.log_stream)
        config = _resolve_identity(ctx, config)
        credentials = IamAccessKeys(ctx.make_aws_client("iam", config.aws_region), str(config.iam_user_name))

        with GitHubClient(
            token=config.github_token,
            base_url=config.github_api_url,
            transport=ctx.http_transport,
        ) as client:
            secrets = select_secret_sink(config, client)
            reporter.info(f"Rotating access key for AWS user {config.iam_user_name} into {config.sink_target()}")
            result = rotate(config, secrets, credentials, reporter)
    except ConfigError as e:
        reporter.set_failed(str(e))
        return 2
    except RotatorError as e:
        reporter.set_failed(str(e))
        return 1
    except Exception as e:  # noqa: BLE001 - bootstrap isolation boundary
        reporter.set_failed(f"unexpected failure: {type(e).__name__}: {e}")
        return 1

    return 0 if result.ok else 1


def _cmd_status(ctx: CliContext, args: argparse.Namespace) -> int:
    from rotator import MAX_ACCESS_KEYS
    from rotator.core.exceptions import ConfigError, RotatorError
    from rotator.credentials.aws import IamAccessKeys
    from rotator.security.redaction import mask_identifier

    try:
        config = _load_config(ctx, args)
        config = _resolve_identity(ctx, config)
        keys = IamAccessKeys(ctx.make_aws_client("iam", config.aws_region), str(config.iam_user_name)).describe()
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except RotatorError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    rows = [
        {
            "access_key_id": mask_identifier(k.access_key_id),
            "status": k.status,
            "created_at": k.created_at.isoformat() if k.created_at else None,
        }
        for k in keys
    ]

    if args.json:
        out = {
            "user": config.iam_user_name,
            "sink": config.sink_kind,
            "target": config.sink_target(),
            "secrets": [config.github_access_key_id_name, config.github_secret_access_key_name],
            "keys": rows,
            "at_capacity": len(keys) >= MAX_ACCESS_KEYS,
        }
        print(json.dumps(out, indent=2, sort_keys=True))
        return 0

    print("iam-key-rotator status")
    print(f"- user: {config.iam_user_name}")
    print(f"- target: {config.sink_target()} ({config.sink_kind})")
    print(f"- secrets: {config.github_access_key_id_name}, {config.github_secret_access_key_name}")
    print(f"- access keys: {len(keys)}/{MAX_ACCESS_KEYS}")
    for r in rows:
        print(f"  {r['access_key_id']}  {r['status']:<8}  {r['created_at'] or '-'}")
    if len(keys) >= MAX_ACCESS_KEYS:
        print("- note: at capacity; the next rotation will delete the oldest key first")
    return 0


def main(argv: list[str] | None = None, *, ctx: CliContext | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _print_version()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    ctx = ctx or CliContext()

    dispatch: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
        "rotate": _cmd_rotate,
        "status": _cmd_status,
    }

    fn = dispatch.get(str(args.command))
    if fn is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    return int(fn(ctx, args))


if __name__ == "__main__":
    raise SystemExit(main())
