"""Tests for CLI parsing, rendering and exit codes."""

import logging

import pytest
from botocore.exceptions import ConnectionClosedError, TokenRetrievalError

from ec2flip.__main__ import Ec2flip
from ec2flip.cli.main import main
from ec2flip.cli.parsing import (
    expand_short_flags,
    parse_action,
    parse_instance_id,
    parse_timeout,
)
from ec2flip.constants import EXIT_FAILURE, EXIT_TIMEOUT, Action
from ec2flip.exceptions import AbnormalTransitionError, ConfigurationError
from ec2flip.providers.aws.compute import EC2Manager
from ec2flip.providers.aws.ssm import SSMManager
from tests.fakes import FakeEC2Client, FakeSSMClient

INSTANCE_ID = "i-0123456789abcdef0"


@pytest.mark.parametrize("raw", ["start", "START", "Start", " start "])
def test_parse_action_is_case_insensitive(raw) -> None:
    assert parse_action(raw) is Action.START


def test_parse_action_rejects_unknown_value() -> None:
    with pytest.raises(ConfigurationError, match="Invalid action: 'reboot'"):
        parse_action("reboot")


@pytest.mark.parametrize("raw,expected", [(5, 5), ("30", 30), (" 120 ", 120)])
def test_parse_timeout_accepts_positive_integers(raw, expected) -> None:
    assert parse_timeout(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "1.5", True, 0, -3])
def test_parse_timeout_rejects_invalid_values(raw) -> None:
    with pytest.raises(ConfigurationError, match="Invalid timeout"):
        parse_timeout(raw)


@pytest.mark.parametrize("raw", [None, "", "   ", True])
def test_parse_instance_id_rejects_empty(raw) -> None:
    with pytest.raises(ConfigurationError, match="must not be empty"):
        parse_instance_id(raw)


def test_expand_short_flags() -> None:
    argv = ["start", INSTANCE_ID, "-t", "5", "-s", "-r=eu-west-1"]

    assert expand_short_flags(argv) == [
        "start",
        INSTANCE_ID,
        "--timeout",
        "5",
        "--wait-for-ssm=True",
        "--region=eu-west-1",
    ]


def test_expand_short_flags_stops_at_separator() -> None:
    assert expand_short_flags(["-v", "--", "-t"]) == ["--verbose=True", "--", "-t"]


def test_expand_short_flags_gives_switches_a_value() -> None:
    argv = ["start", "--wait-for-ssm", INSTANCE_ID, "--verbose=False"]

    assert expand_short_flags(argv) == [
        "start",
        "--wait-for-ssm=True",
        INSTANCE_ID,
        "--verbose=False",
    ]


@pytest.fixture
def make_app(fake_clock):
    """Build an Ec2flip app over fake EC2 and SSM clients."""

    def _make(ec2_client: FakeEC2Client, ssm_client: FakeSSMClient | None = None) -> Ec2flip:
        ssm_client = ssm_client or FakeSSMClient()
        return Ec2flip(
            compute_provider_factory=lambda region: EC2Manager(
                region, boto3_client_factory=ec2_client.factory
            ),
            agent_provider_factory=lambda region: SSMManager(
                region, boto3_client_factory=ssm_client.factory
            ),
            clock=fake_clock,
            sleep=fake_clock.sleep,
        )

    return _make


def test_start_prints_addresses(make_app, capsys) -> None:
    ec2_client = FakeEC2Client(states=["pending", "pending", "running"], public_ip="1.2.3.4")

    main(["start", INSTANCE_ID], app=make_app(ec2_client))

    out = capsys.readouterr().out
    assert "started instance" in out
    assert "\t public IPv4: 1.2.3.4" in out
    assert "\tprivate IPv4: 10.0.0.12" in out
    assert "\t        IPv6: None" in out
    assert "SSM agent" not in out


def test_stop_prints_summary(make_app, capsys) -> None:
    ec2_client = FakeEC2Client(states=["stopping", "stopped"])

    main(["STOP", INSTANCE_ID], app=make_app(ec2_client))

    assert capsys.readouterr().out.strip() == "stopped instance"
    assert ec2_client.stop_calls == [[INSTANCE_ID]]


def test_timeout_exits_with_timeout_code(make_app, capsys, fake_clock) -> None:
    ec2_client = FakeEC2Client(states=["pending"])

    with pytest.raises(SystemExit) as exc_info:
        main(["start", INSTANCE_ID, "-t", "1"], app=make_app(ec2_client))

    assert exc_info.value.code == EXIT_TIMEOUT
    assert "Failed to start instance: timeout" in capsys.readouterr().err
    assert fake_clock.now == pytest.approx(1)


def test_wait_for_ssm_reports_connected_agent(make_app, capsys) -> None:
    ec2_client = FakeEC2Client(states=["running"])
    ssm_client = FakeSSMClient(statuses=["notconnected", "connected"])

    main(["start", INSTANCE_ID, "-s"], app=make_app(ec2_client, ssm_client))

    assert "\t   SSM agent: connected" in capsys.readouterr().out
    assert ssm_client.targets == [INSTANCE_ID, INSTANCE_ID]


def test_agent_failure_still_succeeds(make_app, capsys, caplog, client_error) -> None:
    ec2_client = FakeEC2Client(states=["running"], public_ip="1.2.3.4")
    ssm_client = FakeSSMClient(
        error=client_error("AccessDeniedException", "Not allowed", "GetConnectionStatus")
    )

    with caplog.at_level(logging.WARNING):
        main(["start", INSTANCE_ID, "--wait-for-ssm"], app=make_app(ec2_client, ssm_client))

    out = capsys.readouterr().out
    assert "started instance" in out
    assert "\t   SSM agent: not confirmed" in out
    assert "SSM agent check failed" in caplog.text


def test_invalid_action_exits_with_failure_code(make_app, capsys) -> None:
    ec2_client = FakeEC2Client()

    with pytest.raises(SystemExit) as exc_info:
        main(["reboot", INSTANCE_ID], app=make_app(ec2_client))

    assert exc_info.value.code == EXIT_FAILURE
    assert "Invalid action: 'reboot'" in capsys.readouterr().err
    assert ec2_client.describe_calls == 0


def test_abnormal_state_exits_with_failure_code(make_app, capsys) -> None:
    ec2_client = FakeEC2Client(states=["pending", "stopping"])

    with pytest.raises(SystemExit) as exc_info:
        main(["start", INSTANCE_ID], app=make_app(ec2_client))

    assert exc_info.value.code == EXIT_FAILURE
    err = capsys.readouterr().err
    assert "Failed to start instance" in err
    assert "Current: stopping, Desired: running" in err


def test_api_error_exits_with_failure_code(make_app, capsys, client_error) -> None:
    ec2_client = FakeEC2Client(
        describe_error=client_error("UnauthorizedOperation", "You are not authorized")
    )

    with pytest.raises(SystemExit) as exc_info:
        main(["stop", INSTANCE_ID], app=make_app(ec2_client))

    assert exc_info.value.code == EXIT_FAILURE
    err = capsys.readouterr().err
    assert "Failed to stop instance: You are not authorized" in err
    assert "ec2:StopInstances" in err


def test_debug_mode_reraises(make_app, monkeypatch) -> None:
    monkeypatch.setenv("EC2FLIP_DEBUG", "1")
    ec2_client = FakeEC2Client(states=["pending", "stopping"])

    with pytest.raises(AbnormalTransitionError):
        main(["start", INSTANCE_ID], app=make_app(ec2_client))


def test_timeout_from_config_file(make_app, write_config, capsys) -> None:
    write_config({"instances": {INSTANCE_ID: {"timeout": 15}}})
    ec2_client = FakeEC2Client(states=["pending"])

    with pytest.raises(SystemExit) as exc_info:
        main(["start", INSTANCE_ID], app=make_app(ec2_client))

    assert exc_info.value.code == EXIT_TIMEOUT


def test_wait_for_ssm_before_instance_id(make_app, capsys) -> None:
    ec2_client = FakeEC2Client(states=["running"])
    ssm_client = FakeSSMClient(statuses=["connected"])

    main(["start", "-s", INSTANCE_ID], app=make_app(ec2_client, ssm_client))

    assert "\t   SSM agent: connected" in capsys.readouterr().out
    assert ec2_client.start_calls == [[INSTANCE_ID]]
    assert ssm_client.targets == [INSTANCE_ID]


def test_expired_sso_token_exits_with_failure_code(make_app, capsys) -> None:
    ec2_client = FakeEC2Client(
        describe_error=TokenRetrievalError(provider="sso", error_msg="Token has expired")
    )

    with pytest.raises(SystemExit) as exc_info:
        main(["start", INSTANCE_ID], app=make_app(ec2_client))

    assert exc_info.value.code == EXIT_FAILURE
    assert "Token has expired" in capsys.readouterr().err


def test_unclassified_botocore_error_exits_with_failure_code(make_app, capsys) -> None:
    ec2_client = FakeEC2Client(
        describe_error=ConnectionClosedError(endpoint_url="https://ec2.us-east-1.amazonaws.com")
    )

    with pytest.raises(SystemExit) as exc_info:
        main(["stop", INSTANCE_ID], app=make_app(ec2_client))

    assert exc_info.value.code == EXIT_FAILURE
    assert "Failed to stop instance: Connection was closed" in capsys.readouterr().err
