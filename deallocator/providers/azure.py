"""Live Azure provider backed by the Azure management SDKs.

Stop requests are submitted with ``begin_*`` calls and ``polling=False``:
the initial response is the acknowledgement, and no poller thread is left
running after the call returns. HTTP failures still raise.
"""

import logging
from typing import Any

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.mgmt.core.tools import parse_resource_id

from deallocator.models import NodePool, ProviderResource, ResourceKind, ResourceRecord
from deallocator.providers.base import (
    ACCEPTED,
    FAILED,
    ProviderError,
    ResourceProvider,
    SubscriptionContext,
)
from deallocator.utils.azure_client import AzureClientManager

logger = logging.getLogger(__name__)

# Poller states that mean the request was rejected
REJECTED_STATES = {"failed", "canceled", "cancelled"}


def _enum_value(value: Any) -> str:
    """Return the wire value of an SDK enum (or plain string)."""
    if value is None:
        return ""
    return str(getattr(value, "value", value))


def _error_code(error: HttpResponseError) -> str | None:
    return getattr(getattr(error, "error", None), "code", None)


class AzureProvider(ResourceProvider):
    """Resource provider for Azure VMs, scale sets and AKS clusters."""

    def __init__(self, client_manager: AzureClientManager | None = None):
        self.clients = client_manager or AzureClientManager()
        self._contexts: dict[str, SubscriptionContext] = {}

    def select_context(self, subscription_id: str) -> SubscriptionContext:
        """
        Select a subscription, verifying the credential can reach it.

        Raises:
            ProviderError: If the subscription cannot be read
        """
        key = subscription_id.strip().lower()
        if key in self._contexts:
            return self._contexts[key]

        try:
            name = self.clients.get_subscription_name(subscription_id.strip())
        except HttpResponseError as e:
            raise ProviderError(
                subscription_id, f"cannot select subscription: {e.message}", _error_code(e)
            ) from e

        context = SubscriptionContext(subscription_id=subscription_id.strip(), subscription_name=name)
        self._contexts[key] = context
        logger.debug(f"Selected subscription {name} ({context.subscription_id})")
        return context

    def resolve_resource(
        self, context: SubscriptionContext, record: ResourceRecord
    ) -> ProviderResource | None:
        """
        Resolve a record by its resource ID.

        Kinds without a typed lookup are resolved from the ID alone.

        Raises:
            ProviderError: If the lookup fails for a reason other than absence
        """
        parts = parse_resource_id(record.resource_id)
        resource_group = parts.get("resource_group")
        name = parts.get("name")
        if not resource_group or not name:
            logger.debug(f"Resource ID is not a full ARM ID: {record.resource_id}")
            return None

        try:
            if record.kind is ResourceKind.VM:
                sdk_object = self.clients.compute(context.subscription_id).virtual_machines.get(
                    resource_group, name
                )
            elif record.kind is ResourceKind.SCALE_SET:
                sdk_object = self.clients.compute(
                    context.subscription_id
                ).virtual_machine_scale_sets.get(resource_group, name)
            elif record.kind is ResourceKind.MANAGED_CLUSTER:
                sdk_object = self.clients.containerservice(
                    context.subscription_id
                ).managed_clusters.get(resource_group, name)
            else:
                sdk_object = None
        except ResourceNotFoundError:
            return None
        except HttpResponseError as e:
            raise ProviderError(record.resource_id, e.message, _error_code(e)) from e

        return ProviderResource(
            resource_id=getattr(sdk_object, "id", None) or record.resource_id,
            name=name,
            resource_group=resource_group,
            kind=record.kind,
            sdk_object=sdk_object,
        )

    def stop_vm(self, context: SubscriptionContext, resource: ProviderResource) -> str:
        """Submit a VM deallocation and return ``Accepted`` if it was queued."""
        poller = self.clients.compute(context.subscription_id).virtual_machines.begin_deallocate(
            resource.resource_group, resource.name, polling=False
        )
        state = poller.status()
        logger.debug(f"Deallocate request for VM {resource.name}: {state}")
        return state if state.lower() in REJECTED_STATES else ACCEPTED

    def stop_scale_set(
        self, context: SubscriptionContext, resource: ProviderResource
    ) -> str:
        """Submit a scale set deallocation and return the job state."""
        poller = self.clients.compute(
            context.subscription_id
        ).virtual_machine_scale_sets.begin_deallocate(
            resource.resource_group, resource.name, polling=False
        )
        state = poller.status()
        logger.debug(f"Deallocate job for scale set {resource.name}: {state}")
        return FAILED if state.lower() in REJECTED_STATES else state

    def get_cluster_pools(
        self, context: SubscriptionContext, resource: ProviderResource
    ) -> list[NodePool]:
        """Read the agent pool profiles of a managed cluster."""
        cluster = resource.sdk_object
        if cluster is None:
            cluster = self.clients.containerservice(
                context.subscription_id
            ).managed_clusters.get(resource.resource_group, resource.name)

        return [
            NodePool(
                name=profile.name,
                mode=_enum_value(profile.mode),
                backing_type=_enum_value(profile.type),
                count=profile.count or 0,
            )
            for profile in (cluster.agent_pool_profiles or [])
        ]

    def stop_cluster(
        self, context: SubscriptionContext, resource: ProviderResource
    ) -> str:
        """Submit a managed cluster stop and return ``Accepted`` if it was queued."""
        poller = self.clients.containerservice(
            context.subscription_id
        ).managed_clusters.begin_stop(
            resource.resource_group, resource.name, polling=False
        )
        state = poller.status()
        logger.debug(f"Stop request for cluster {resource.name}: {state}")
        return state if state.lower() in REJECTED_STATES else ACCEPTED
