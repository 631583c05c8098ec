"""Provider-agnostic transport exceptions.

Every failure reaching the cloud API (network, credentials, throttling, API
errors) is translated into one of these by the provider's error handler, with
the original exception chained as ``__cause__``.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Base exception for cloud provider failures."""


class ProviderCredentialsError(ProviderError):
    """Cloud credentials are missing or incomplete."""


class ProviderConnectionError(ProviderError):
    """The cloud API endpoint could not be reached."""


class ProviderAPIError(ProviderError):
    """The cloud API rejected a request.

    Parameters
    ----------
    message : str
        Error message
    error_code : str | None
        Provider error code (e.g. "UnauthorizedOperation")
    operation : str | None
        Name of the API operation that failed
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.operation = operation
