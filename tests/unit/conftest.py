"""Shared fixtures for ec2flip unit tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml
from botocore.exceptions import ClientError

from tests.fakes import FakeClock, FakeEC2Client, FakeSSMClient


@pytest.fixture
def fake_clock() -> FakeClock:
    """Create a fake clock starting at zero.

    Returns
    -------
    FakeClock
        Clock that advances only on sleep
    """
    return FakeClock()


@pytest.fixture
def ec2_client() -> FakeEC2Client:
    """Create a fake EC2 client whose instance is already running.

    Returns
    -------
    FakeEC2Client
        Fake client; tests adjust ``states`` as needed
    """
    return FakeEC2Client()


@pytest.fixture
def ssm_client() -> FakeSSMClient:
    """Create a fake SSM client whose agent is connected.

    Returns
    -------
    FakeSSMClient
        Fake client; tests adjust ``statuses`` as needed
    """
    return FakeSSMClient()


@pytest.fixture
def client_error() -> Callable[..., ClientError]:
    """Helper fixture to build botocore ClientError instances.

    Returns
    -------
    callable
        Function taking (code, message, operation) and returning a ClientError
    """

    def _build(
        code: str = "ThrottlingException",
        message: str = "Rate exceeded",
        operation: str = "DescribeInstances",
    ) -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": message}}, operation)

    return _build


@pytest.fixture
def write_config(isolated_config: Path) -> Callable[[dict[str, Any]], None]:
    """Helper fixture to write config data to the EC2FLIP_CONFIG file.

    Parameters
    ----------
    isolated_config : Path
        Path the EC2FLIP_CONFIG environment variable points to

    Returns
    -------
    callable
        Function that takes config_data dict and writes to file
    """

    def _write(config_data: dict[str, Any]) -> None:
        with open(isolated_config, "w") as f:
            yaml.dump(config_data, f)

    return _write
