"""Translation of botocore failures into provider exceptions."""

from collections.abc import Iterator
from contextlib import contextmanager

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ProfileNotFound,
)

from cloudboard.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)


def describe_client_error(error: ClientError) -> tuple[str, str]:
    """Extract (code, message) from a ClientError response.

    Parameters
    ----------
    error : ClientError
        Error raised by a boto3 client call

    Returns
    -------
    tuple[str, str]
        Error code (may be empty) and provider message
    """
    error_response = error.response.get("Error") if error.response else None
    error_code = error_response.get("Code", "") if error_response else ""
    error_msg = error_response.get("Message", str(error)) if error_response else str(error)
    return error_code, error_msg


@contextmanager
def handle_aws_errors() -> Iterator[None]:
    """Convert botocore exceptions raised in the block to provider exceptions.

    Raises
    ------
    ProviderCredentialsError
        For missing or partial credentials and unknown profiles
    ProviderConnectionError
        When the endpoint cannot be reached
    ProviderAPIError
        For any error response from the service
    """
    try:
        yield
    except ClientError as e:
        error_code, error_msg = describe_client_error(e)
        text = f"{error_code}: {error_msg}" if error_code else error_msg
        raise ProviderAPIError(text, error_code=error_code) from e
    except (NoCredentialsError, PartialCredentialsError, ProfileNotFound) as e:
        raise ProviderCredentialsError(str(e)) from e
    except EndpointConnectionError as e:
        raise ProviderConnectionError(str(e)) from e
    except BotoCoreError as e:
        raise ProviderConnectionError(str(e)) from e
