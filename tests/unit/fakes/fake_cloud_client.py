"""Fake cloud client for testing with dependency injection."""

from __future__ import annotations

from cloudboard.core.models import Function, Identity, Instance
from cloudboard.providers.exceptions import ProviderAPIError, ProviderError


class FakeCloudClient:
    """In-memory stand-in for AwsClient.

    Instance actions update the stored state the way EC2 reports it right
    after the request: start moves to pending, stop to stopping and terminate
    to shutting-down.

    Parameters
    ----------
    instances : list[Instance] | None
        Instances returned by list_instances
    functions : list[Function] | None
        Functions returned by list_functions
    identity : Identity | None
        Identity the client was built for
    region : str
        Reported region
    """

    def __init__(
        self,
        instances: list[Instance] | None = None,
        functions: list[Function] | None = None,
        identity: Identity | None = None,
        region: str = "us-east-1",
    ) -> None:
        self.instances = list(instances or [])
        self.functions = list(functions or [])
        self.identity = identity or Identity()
        self.region = region
        self.calls: list[tuple[str, str | None]] = []
        self.failures: dict[str, ProviderError] = {}

    def fail(self, method: str, message: str, error_code: str = "") -> None:
        """Make every later call of method raise ProviderAPIError(message)."""
        self.failures[method] = ProviderAPIError(message, error_code=error_code)

    def _call(self, method: str, argument: str | None = None) -> None:
        self.calls.append((method, argument))
        if method in self.failures:
            raise self.failures[method]

    def _set_state(self, instance_id: str, state: str) -> None:
        self.instances = [
            Instance(
                id=i.id,
                name=i.name,
                instance_type=i.instance_type,
                state=state,
                public_ip=i.public_ip,
                private_ip=i.private_ip,
                launch_time=i.launch_time,
            )
            if i.id == instance_id
            else i
            for i in self.instances
        ]

    def list_instances(self) -> list[Instance]:
        self._call("list_instances")
        return list(self.instances)

    def start_instance(self, instance_id: str) -> None:
        self._call("start_instance", instance_id)
        self._set_state(instance_id, "pending")

    def stop_instance(self, instance_id: str) -> None:
        self._call("stop_instance", instance_id)
        self._set_state(instance_id, "stopping")

    def terminate_instance(self, instance_id: str) -> None:
        self._call("terminate_instance", instance_id)
        self._set_state(instance_id, "shutting-down")

    def list_functions(self) -> list[Function]:
        self._call("list_functions")
        return list(self.functions)

    def settle(self) -> None:
        """Finish every transition: pending to running, stopping to stopped."""
        final = {"pending": "running", "stopping": "stopped", "shutting-down": "terminated"}
        for instance in list(self.instances):
            if instance.state in final:
                self._set_state(instance.id, final[instance.state])
