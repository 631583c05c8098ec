#!/usr/bin/env python3
"""ec2flip - start or stop an EC2 instance and wait for it to settle."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from ec2flip.cli.parsing import parse_action, parse_instance_id, parse_timeout
from ec2flip.core.config import ConfigLoader
from ec2flip.core.models import TransitionResult
from ec2flip.core.transition import TransitionExecutor
from ec2flip.providers.aws.compute import EC2Manager
from ec2flip.providers.aws.ssm import SSMManager
from ec2flip.providers.aws.utils import build_client_factory

for _boto_module in ["botocore", "boto3", "urllib3"]:
    logging.getLogger(_boto_module).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


class Ec2flip:
    """Main interface for ec2flip."""

    def __init__(
        self,
        compute_provider_factory: Callable[[str | None], Any] | None = None,
        agent_provider_factory: Callable[[str | None], Any] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize ec2flip with optional dependency injection."""
        self._config_loader = ConfigLoader()
        self._compute_provider_factory_override = compute_provider_factory
        self._agent_provider_factory_override = agent_provider_factory
        self._clock = clock
        self._sleep = sleep

    def _create_compute_provider(self, region: str | None, profile: str | None) -> Any:
        if self._compute_provider_factory_override is not None:
            return self._compute_provider_factory_override(region)
        return EC2Manager(region=region, boto3_client_factory=build_client_factory(profile))

    def _create_agent_provider(self, region: str | None, profile: str | None) -> Any:
        if self._agent_provider_factory_override is not None:
            return self._agent_provider_factory_override(region)
        return SSMManager(region=region, boto3_client_factory=build_client_factory(profile))

    def resolve_settings(
        self,
        instance_id: str,
        timeout: Any = None,
        wait_for_ssm: bool | None = None,
        region: str | None = None,
        profile: str | None = None,
        config: str | None = None,
    ) -> dict[str, Any]:
        """Merge file configuration with command line values for one instance."""
        overrides = {
            "timeout": parse_timeout(timeout) if timeout is not None else None,
            "wait_for_ssm": wait_for_ssm,
            "region": region,
            "profile": profile,
        }
        file_config = self._config_loader.load_config(config)
        return self._config_loader.get_instance_config(file_config, instance_id, overrides)

    def flip(
        self,
        action: str,
        instance_id: str,
        timeout: Any = None,
        wait_for_ssm: bool | None = None,
        region: str | None = None,
        profile: str | None = None,
        config: str | None = None,
    ) -> TransitionResult:
        """Start or stop an instance and wait until it reaches the target state.

        Parameters
        ----------
        action : str
            "start" or "stop" (case-insensitive)
        instance_id : str
            EC2 instance ID
        timeout : Any
            Overall deadline in seconds (default from config, 120)
        wait_for_ssm : bool | None
            After a start, also wait for the SSM agent to connect
        region : str | None
            AWS region override
        profile : str | None
            AWS profile override
        config : str | None
            Path to a YAML configuration file

        Returns
        -------
        TransitionResult
            Final instance snapshot and SSM agent outcome
        """
        parsed_action = parse_action(action)
        parsed_instance_id = parse_instance_id(instance_id)
        settings = self.resolve_settings(
            parsed_instance_id,
            timeout=timeout,
            wait_for_ssm=wait_for_ssm,
            region=region,
            profile=profile,
            config=config,
        )
        logger.debug("Resolved settings: %s", settings)

        executor = TransitionExecutor(
            compute_provider_factory=lambda r: self._create_compute_provider(
                r, settings["profile"]
            ),
            agent_provider_factory=lambda r: self._create_agent_provider(
                r, settings["profile"]
            ),
            poll_interval=settings["poll_interval"],
            clock=self._clock,
            sleep=self._sleep,
        )

        return executor.execute(
            parsed_action,
            parsed_instance_id,
            timeout=settings["timeout"],
            wait_for_ssm=settings["wait_for_ssm"],
            region=settings["region"],
        )


if __name__ == "__main__":
    from ec2flip.cli.main import main

    main()
