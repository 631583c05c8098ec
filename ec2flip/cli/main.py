"""CLI entry point for ec2flip."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import fire

from ec2flip.cli.parsing import expand_short_flags
from ec2flip.constants import (
    ADDRESS_PLACEHOLDER,
    EXIT_FAILURE,
    EXIT_TIMEOUT,
    Action,
)
from ec2flip.core.models import TransitionResult
from ec2flip.exceptions import ConfigurationError, Ec2flipError, OverallTimeoutError
from ec2flip.logging import StreamFormatter, StreamRoutingFilter
from ec2flip.providers import ProviderAPIError, ProviderCredentialsError, ProviderError
from ec2flip.providers.aws.errors import get_aws_credentials_error_message

logger = logging.getLogger(__name__)


def get_ec2flip_class() -> type:
    """Get Ec2flip class on-demand to avoid circular imports.

    Returns
    -------
    type
        Ec2flip class
    """
    from ec2flip.__main__ import Ec2flip

    return Ec2flip


def render_result(result: TransitionResult) -> None:
    """Print the summary of a completed run to stdout.

    Parameters
    ----------
    result : TransitionResult
        Result of the run
    """
    if result.action is Action.STOP:
        print("stopped instance")
        return

    instance = result.instance
    print("started instance")
    print(f"\t public IPv4: {instance.public_ipv4 or ADDRESS_PLACEHOLDER}")
    print(f"\tprivate IPv4: {instance.private_ipv4 or ADDRESS_PLACEHOLDER}")
    print(f"\t        IPv6: {instance.ipv6 or ADDRESS_PLACEHOLDER}")

    if result.agent_connected:
        print("\t   SSM agent: connected")
    elif result.agent_error:
        print("\t   SSM agent: not confirmed")


def describe_action(action: Any) -> str:
    """Return the verb used in failure messages for a raw action argument."""
    value = str(action).strip().lower()
    return value if value in {a.value for a in Action} else "transition"


def handle_timeout_error(action: Any, debug_mode: bool) -> None:
    """Handle overall deadline expiry.

    Parameters
    ----------
    action : Any
        Raw action argument
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    OverallTimeoutError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Failed to {describe_action(action)} instance: timeout", file=sys.stderr)
    sys.exit(EXIT_TIMEOUT)


def handle_credentials_error(error: ProviderCredentialsError, debug_mode: bool) -> None:
    """Handle provider credentials error.

    Parameters
    ----------
    error : ProviderCredentialsError
        The credentials error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderCredentialsError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"AWS credentials error: {error}\n", file=sys.stderr)
    print(get_aws_credentials_error_message(), file=sys.stderr)
    sys.exit(EXIT_FAILURE)


def handle_configuration_error(error: ConfigurationError, debug_mode: bool) -> None:
    """Handle invalid command line or configuration input.

    Parameters
    ----------
    error : ConfigurationError
        The configuration error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ConfigurationError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(EXIT_FAILURE)


def handle_run_error(error: Exception, action: Any, debug_mode: bool) -> None:
    """Handle any other failure of the run.

    Parameters
    ----------
    error : Exception
        The domain or provider error that was raised
    action : Any
        Raw action argument
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    Exception
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    message = str(error)
    if isinstance(error, ProviderAPIError) and error.error_code == "UnauthorizedOperation":
        message = (
            f"{message}\nYour AWS credentials need ec2:DescribeInstances, "
            "ec2:StartInstances, ec2:StopInstances and ssm:GetConnectionStatus"
        )

    print(f"Failed to {describe_action(action)} instance: {message}", file=sys.stderr)
    sys.exit(EXIT_FAILURE)


class Ec2flipCLI:
    """CLI wrapper that renders results and handles process exit codes.

    Parameters
    ----------
    app : Any | None
        Ec2flip instance to drive. If None, a default Ec2flip is created.
    """

    def __init__(self, app: Any | None = None) -> None:
        self.app = app if app is not None else get_ec2flip_class()()

    def flip(
        self,
        action: str,
        instance_id: str,
        timeout: Any = None,
        wait_for_ssm: bool | None = None,
        region: str | None = None,
        profile: str | None = None,
        config: str | None = None,
        verbose: bool = False,
    ) -> None:
        """Start or stop an EC2 instance and wait for it to settle.

        Parameters
        ----------
        action : str
            start or stop (case-insensitive)
        instance_id : str
            EC2 instance ID
        timeout : Any
            How long to wait for the action to complete, in seconds (default 120)
        wait_for_ssm : bool | None
            Wait for the instance to connect to SSM (start only)
        region : str | None
            AWS region (default: AWS configuration chain)
        profile : str | None
            AWS profile (default: AWS configuration chain)
        config : str | None
            YAML configuration file (default: $EC2FLIP_CONFIG or ec2flip.yaml)
        verbose : bool
            Log every poll
        """
        debug_mode = os.environ.get("EC2FLIP_DEBUG") == "1"

        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        try:
            result = self.app.flip(
                action,
                instance_id,
                timeout=timeout,
                wait_for_ssm=wait_for_ssm,
                region=region,
                profile=profile,
                config=config,
            )
        except OverallTimeoutError:
            handle_timeout_error(action, debug_mode)
        except ConfigurationError as e:
            handle_configuration_error(e, debug_mode)
        except ProviderCredentialsError as e:
            handle_credentials_error(e, debug_mode)
        except (Ec2flipError, ProviderError) as e:
            handle_run_error(e, action, debug_mode)
        else:
            render_result(result)


def configure_logging() -> None:
    """Route INFO and DEBUG records to stdout, warnings and errors to stderr."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(StreamFormatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(StreamFormatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=logging.INFO,
        handlers=[stdout_handler, stderr_handler],
    )


def main(argv: list[str] | None = None, app: Any | None = None) -> None:
    """Entry point for the Fire CLI with exit code handling.

    Parameters
    ----------
    argv : list[str] | None
        Command line arguments without the program name. If None, uses
        sys.argv[1:].
    app : Any | None
        Optional Ec2flip instance (for testing)

    Notes
    -----
    Fire maps the ``flip`` method's parameters to positional arguments and
    flags. Short aliases such as ``-t`` and ``-s`` are expanded first.
    Usage errors detected by Fire exit with status 2.
    """
    configure_logging()

    if argv is None:
        argv = sys.argv[1:]

    cli = Ec2flipCLI(app=app)
    fire.Fire(cli.flip, command=expand_short_flags(argv), name="ec2flip")
