"""Provider-agnostic exceptions raised by cloud clients.

Each exception's text carries the provider's error detail verbatim; the
dashboard classifies session expiry by matching on that text.
"""


class ProviderError(Exception):
    """Base class for cloud provider failures."""


class ProviderCredentialsError(ProviderError):
    """Credentials are missing, unreadable or refer to an unknown profile."""


class ProviderConnectionError(ProviderError):
    """The provider endpoint could not be reached."""


class ProviderAPIError(ProviderError):
    """The provider rejected a request.

    Parameters
    ----------
    message : str
        Error text including the provider's code and message
    error_code : str
        Provider error code (e.g. "ExpiredToken")
    """

    def __init__(self, message: str, error_code: str = "") -> None:
        super().__init__(message)
        self.error_code = error_code
