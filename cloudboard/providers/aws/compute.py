"""EC2 and Lambda access for the dashboard."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import boto3

from cloudboard.constants import DEFAULT_REGION
from cloudboard.core.models import Function, Identity, Instance
from cloudboard.providers.aws.errors import handle_aws_errors

logger = logging.getLogger(__name__)


def _to_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def instance_from_description(instance: dict[str, Any]) -> Instance:
    """Build an Instance from one describe_instances entry.

    Parameters
    ----------
    instance : dict[str, Any]
        Instance dictionary from a describe_instances reservation

    Returns
    -------
    Instance
        Instance named after its Name tag, or its id when untagged
    """
    instance_id = instance.get("InstanceId", "N/A")
    tags = {tag["Key"]: tag["Value"] for tag in instance.get("Tags", [])}

    return Instance(
        id=instance_id,
        name=tags.get("Name") or instance_id,
        instance_type=instance.get("InstanceType", "unknown"),
        state=instance.get("State", {}).get("Name", "unknown"),
        public_ip=instance.get("PublicIpAddress"),
        private_ip=instance.get("PrivateIpAddress"),
        launch_time=_to_utc(instance.get("LaunchTime")),
    )


def function_from_configuration(function: dict[str, Any]) -> Function:
    """Build a Function from one list_functions entry."""
    return Function(
        name=function.get("FunctionName", "N/A"),
        runtime=function.get("Runtime", "N/A"),
        memory=function.get("MemorySize", 0),
        last_modified=function.get("LastModified", "N/A"),
        description=function.get("Description", ""),
    )


class AwsClient:
    """Thin EC2/Lambda client bound to one credential identity.

    Every call either returns domain objects or raises a ProviderError whose
    text carries the AWS error code and message verbatim.

    Parameters
    ----------
    identity : Identity
        Profile and region to use
    session_factory : Callable[..., Any] | None
        Optional factory for boto3 sessions. If None, uses boto3.Session

    Attributes
    ----------
    identity : Identity
        Profile and region this client was built for
    region : str
        Effective region of the EC2 and Lambda clients
    """

    def __init__(
        self,
        identity: Identity | None = None,
        session_factory: Callable[..., Any] | None = None,
    ) -> None:
        self.identity = identity or Identity()
        self.session_factory = session_factory or boto3.Session

        with handle_aws_errors():
            session = self.session_factory(
                profile_name=self.identity.profile,
                region_name=self.identity.region,
            )
            self.region = self.identity.region or session.region_name or DEFAULT_REGION
            self.ec2_client = session.client("ec2", region_name=self.region)
            self.lambda_client = session.client("lambda", region_name=self.region)

    def list_instances(self) -> list[Instance]:
        """List every instance visible to the identity in the region.

        Returns
        -------
        list[Instance]
            Instances in the order reported by EC2
        """
        instances = []

        with handle_aws_errors():
            paginator = self.ec2_client.get_paginator("describe_instances")

            for page in paginator.paginate():
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        instances.append(instance_from_description(instance))

        logger.debug("Described %d instances in %s", len(instances), self.region)
        return instances

    def start_instance(self, instance_id: str) -> None:
        """Request an instance start without waiting for the running state."""
        with handle_aws_errors():
            self.ec2_client.start_instances(InstanceIds=[instance_id])

    def stop_instance(self, instance_id: str) -> None:
        """Request an instance stop without waiting for the stopped state."""
        with handle_aws_errors():
            self.ec2_client.stop_instances(InstanceIds=[instance_id])

    def terminate_instance(self, instance_id: str) -> None:
        """Request instance termination without waiting for completion."""
        with handle_aws_errors():
            self.ec2_client.terminate_instances(InstanceIds=[instance_id])

    def list_functions(self) -> list[Function]:
        """List Lambda functions in the region."""
        functions = []

        with handle_aws_errors():
            paginator = self.lambda_client.get_paginator("list_functions")

            for page in paginator.paginate():
                for function in page.get("Functions", []):
                    functions.append(function_from_configuration(function))

        logger.debug("Listed %d functions in %s", len(functions), self.region)
        return functions

    def invoke_function(self, function_name: str) -> str:
        """Invoke a Lambda function.

        Raises
        ------
        NotImplementedError
            Always; invocation from the dashboard is not supported yet
        """
        raise NotImplementedError(f"Invoking {function_name} is not supported")
