"""AWS provider implementation."""

from cloudboard.providers.aws.compute import AwsClient
from cloudboard.providers.aws.errors import handle_aws_errors
from cloudboard.providers.aws.profiles import credentials_configured, list_profiles
from cloudboard.providers.aws.sso import run_sso_login

__all__ = [
    "AwsClient",
    "credentials_configured",
    "handle_aws_errors",
    "list_profiles",
    "run_sso_login",
]
