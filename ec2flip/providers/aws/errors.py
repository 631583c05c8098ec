"""Translation of botocore exceptions into provider exceptions."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    CredentialRetrievalError,
    EndpointConnectionError,
    HTTPClientError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
    ReadTimeoutError,
    SSLError,
    TokenRetrievalError,
)

from ec2flip.exceptions import ConfigurationError
from ec2flip.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    ProviderError,
)


@contextmanager
def handle_aws_errors() -> Iterator[None]:
    """Translate botocore exceptions raised in the block.

    Yields
    ------
    None
        Control to the wrapped block

    Raises
    ------
    ProviderCredentialsError
        If credentials are missing, incomplete or cannot be refreshed
    ProviderConnectionError
        If the endpoint cannot be reached or the connection fails
    ProviderAPIError
        If the API returned an error response
    ConfigurationError
        If no region is configured
    ProviderError
        For any other botocore failure
    """
    try:
        yield
    except (
        NoCredentialsError,
        PartialCredentialsError,
        CredentialRetrievalError,
        TokenRetrievalError,
    ) as e:
        raise ProviderCredentialsError(str(e)) from e
    except NoRegionError as e:
        raise ConfigurationError(
            "No AWS region configured. Use --region or set AWS_DEFAULT_REGION"
        ) from e
    except (
        EndpointConnectionError,
        ConnectTimeoutError,
        ReadTimeoutError,
        HTTPClientError,
        SSLError,
    ) as e:
        raise ProviderConnectionError(str(e)) from e
    except ClientError as e:
        error = e.response.get("Error", {})
        raise ProviderAPIError(
            error.get("Message") or str(e),
            error_code=error.get("Code"),
            operation=e.operation_name,
        ) from e
    except BotoCoreError as e:
        raise ProviderError(str(e)) from e


def get_aws_credentials_error_message() -> str:
    """Get standard AWS credentials error message.

    Returns
    -------
    str
        Formatted AWS credentials error message
    """
    return (
        "AWS credentials not found\n\n"
        "Configure your credentials:\n"
        "  aws configure\n\n"
        "Or set environment variables:\n"
        "  export AWS_ACCESS_KEY_ID=...\n"
        "  export AWS_SECRET_ACCESS_KEY=..."
    )
