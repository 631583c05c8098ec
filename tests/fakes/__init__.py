"""Test fake implementations for dependency injection testing."""

from tests.fakes.fake_clock import FakeClock
from tests.fakes.fake_ec2_client import FakeEC2Client
from tests.fakes.fake_ssm_client import FakeSSMClient

__all__ = ["FakeClock", "FakeEC2Client", "FakeSSMClient"]
