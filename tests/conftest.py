"""Pytest configuration and fixtures for ec2flip tests."""

import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

tests_root = Path(__file__).parent.parent
if str(tests_root) not in sys.path:
    sys.path.insert(0, str(tests_root))


@pytest.fixture
def aws_credentials() -> Generator[None, None, None]:
    """Fixture to set AWS credentials for testing with proper cleanup.

    Sets mock AWS credentials in environment variables for the duration of the test,
    then restores the original environment state.

    Yields
    ------
    None
        Control back to test after setting credentials
    """
    keys = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION")
    original = {key: os.environ.get(key) for key in keys}

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

    yield

    for key, value in original.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point EC2FLIP_CONFIG at a path that does not exist yet.

    Keeps a developer's own ec2flip.yaml out of the tests.

    Returns
    -------
    Path
        Config path tests may write to
    """
    config_path = tmp_path / "ec2flip.yaml"
    monkeypatch.setenv("EC2FLIP_CONFIG", str(config_path))
    monkeypatch.delenv("EC2FLIP_DEBUG", raising=False)
    return config_path
