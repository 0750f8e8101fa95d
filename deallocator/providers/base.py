"""Provider capability surface used by the action executors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from deallocator.models import NodePool, ProviderResource, ResourceRecord

# Acknowledgement returned by a stop request that was queued by the provider
ACCEPTED = "Accepted"

# Job state reported by a scale set stop that was rejected
FAILED = "Failed"


class ProviderError(Exception):
    """Raised when a provider call fails for a specific resource."""

    def __init__(self, resource_id: str, message: str, code: str | None = None):
        self.resource_id = resource_id
        self.code = code
        super().__init__(f"{resource_id}: {message}")


@dataclass(frozen=True)
class SubscriptionContext:
    """Handle for a selected subscription, passed into every provider call."""

    subscription_id: str
    subscription_name: str = ""


class ResourceProvider(ABC):
    """Abstract cloud provider operations needed to deactivate resources."""

    @abstractmethod
    def select_context(self, subscription_id: str) -> SubscriptionContext:
        """Select the subscription that owns the next resource."""
        raise NotImplementedError

    @abstractmethod
    def resolve_resource(
        self, context: SubscriptionContext, record: ResourceRecord
    ) -> ProviderResource | None:
        """Resolve a record against the live inventory, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def stop_vm(self, context: SubscriptionContext, resource: ProviderResource) -> str:
        """Request a non-blocking stop of a VM and return the acknowledgement."""
        raise NotImplementedError

    @abstractmethod
    def stop_scale_set(
        self, context: SubscriptionContext, resource: ProviderResource
    ) -> str:
        """Submit a tracked scale set stop and return the job state."""
        raise NotImplementedError

    @abstractmethod
    def get_cluster_pools(
        self, context: SubscriptionContext, resource: ProviderResource
    ) -> list[NodePool]:
        """List the node pools of a managed cluster."""
        raise NotImplementedError

    @abstractmethod
    def stop_cluster(
        self, context: SubscriptionContext, resource: ProviderResource
    ) -> str:
        """Request a non-blocking stop of a managed cluster."""
        raise NotImplementedError
