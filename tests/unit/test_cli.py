from __future__ import annotations

import io
import json
from datetime import UTC, datetime
from pathlib import Path

import boto3
import pytest
from botocore.stub import Stubber

from rotator.cli import CliContext, build_parser, main


def _iam():
    return boto3.client("iam", region_name="us-east-1", aws_access_key_id="testing", aws_secret_access_key="testing")


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--version"]) == 0
    assert "iam-key-rotator v" in capsys.readouterr().out


def test_no_command_prints_help_and_returns_2(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 2
    assert "rotate" in capsys.readouterr().out


def test_parser_knows_commands() -> None:
    args = build_parser().parse_args(["status", "--json"])
    assert args.command == "status"
    assert args.json is True


def test_rotate_with_bad_config_exits_2_before_touching_aws() -> None:
    touched: list[str] = []

    def make_aws_client(service: str, region: str):
        touched.append(service)
        raise AssertionError("no AWS call expected")

    log = io.StringIO()
    ctx = CliContext(make_aws_client=make_aws_client, log_stream=log)

    assert main(["rotate"], ctx=ctx) == 2
    assert touched == []
    assert "github_token: Field required" in log.getvalue()
    assert "[REDACTED]" not in log.getvalue()


def test_rotate_with_unknown_log_level_exits_2() -> None:
    log = io.StringIO()
    ctx = CliContext(
        log_stream=log,
        env_overrides={"github_token": "tok", "github_repository": "acme/infra", "logging": {"level": "verbose"}},
    )

    assert main(["rotate"], ctx=ctx) == 2
    assert "logging.level" in log.getvalue()
    assert "unexpected failure" not in log.getvalue()


def test_rotate_with_missing_config_file_exits_2(tmp_path: Path) -> None:
    log = io.StringIO()
    ctx = CliContext(log_stream=log)

    assert main(["rotate", "--config", str(tmp_path / "nope.yaml")], ctx=ctx) == 2
    assert "Config file not found" in log.getvalue()


def test_rotate_failure_is_annotated_in_actions(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    ctx = CliContext(log_stream=io.StringIO())

    assert main(["rotate"], ctx=ctx) == 2
    assert capsys.readouterr().out.startswith("::error::invalid configuration")


def test_status_json_masks_key_ids(capsys: pytest.CaptureFixture[str]) -> None:
    iam = _iam()
    with Stubber(iam) as stub:
        stub.add_response(
            "list_access_keys",
            {
                "AccessKeyMetadata": [
                    {
                        "UserName": "deployer",
                        "AccessKeyId": "AKIAOLDOLDOLDOLD0001",
                        "Status": "Active",
                        "CreateDate": datetime(2026, 1, 1, tzinfo=UTC),
                    }
                ],
                "IsTruncated": False,
            },
            {"UserName": "deployer"},
        )
        ctx = CliContext(
            make_aws_client=lambda service, region: iam,
            env_overrides={"github_token": "t", "github_repository": "acme/infra", "iam_user_name": "deployer"},
        )
        assert main(["status", "--json"], ctx=ctx) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["user"] == "deployer"
    assert out["sink"] == "repository"
    assert out["target"] == "acme/infra"
    assert out["at_capacity"] is False
    assert out["keys"] == [{"access_key_id": "AKIA...0001", "status": "Active", "created_at": "2026-01-01T00:00:00+00:00"}]


def test_status_text_warns_at_capacity(capsys: pytest.CaptureFixture[str]) -> None:
    iam = _iam()
    rows = [
        {"UserName": "deployer", "AccessKeyId": f"AKIAKEYKEYKEYKEY000{i}", "Status": "Active", "CreateDate": datetime(2026, i, 1, tzinfo=UTC)}
        for i in (1, 2)
    ]
    with Stubber(iam) as stub:
        stub.add_response("list_access_keys", {"AccessKeyMetadata": rows, "IsTruncated": False}, {"UserName": "deployer"})
        ctx = CliContext(
            make_aws_client=lambda service, region: iam,
            env_overrides={"github_token": "t", "organization": "acme", "iam_user_name": "deployer"},
        )
        assert main(["status"], ctx=ctx) == 0

    out = capsys.readouterr().out
    assert "- target: org:acme (organization)" in out
    assert "- access keys: 2/2" in out
    assert "at capacity" in out


def test_status_reports_aws_errors(capsys: pytest.CaptureFixture[str]) -> None:
    iam = _iam()
    with Stubber(iam) as stub:
        stub.add_client_error("list_access_keys", service_error_code="AccessDenied", http_status_code=403)
        ctx = CliContext(
            make_aws_client=lambda service, region: iam,
            env_overrides={"github_token": "t", "github_repository": "acme/infra", "iam_user_name": "deployer"},
        )
        assert main(["status"], ctx=ctx) == 1

    assert "AccessDenied" in capsys.readouterr().err
