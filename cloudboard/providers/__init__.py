"""Cloud provider clients and their exceptions."""

from cloudboard.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    ProviderError,
)

__all__ = [
    "ProviderAPIError",
    "ProviderConnectionError",
    "ProviderCredentialsError",
    "ProviderError",
]
