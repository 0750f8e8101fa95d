"""Azure client management for the compute deallocator."""

import logging
from typing import Any

from azure.identity import DefaultAzureCredential
from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.containerservice import ContainerServiceClient
from azure.mgmt.resource import SubscriptionClient

logger = logging.getLogger(__name__)

# Every provider call is a single attempt
NO_RETRY = {"retry_total": 0}


class AzureClientManager:
    """Manages Azure management clients, one set per subscription."""

    def __init__(self, credential: Any | None = None):
        self._credential = credential
        self._subscription_client: SubscriptionClient | None = None
        self._clients: dict[tuple[str, str], Any] = {}

    @property
    def credential(self) -> Any:
        """Get or create the credential shared by every client."""
        if self._credential is None:
            logger.debug("Creating DefaultAzureCredential")
            self._credential = DefaultAzureCredential()
        return self._credential

    @property
    def subscriptions(self) -> SubscriptionClient:
        """Get the tenant-level subscription client."""
        if self._subscription_client is None:
            self._subscription_client = SubscriptionClient(self.credential, **NO_RETRY)
        return self._subscription_client

    def get_client(self, service_name: str, subscription_id: str) -> Any:
        """Get a management client for a service in a subscription."""
        key = (service_name, subscription_id.lower())
        if key not in self._clients:
            factory = {
                "compute": ComputeManagementClient,
                "containerservice": ContainerServiceClient,
            }.get(service_name)
            if factory is None:
                raise ValueError(f"Unsupported Azure service: {service_name}")
            self._clients[key] = factory(self.credential, subscription_id, **NO_RETRY)
        return self._clients[key]

    def compute(self, subscription_id: str) -> ComputeManagementClient:
        """Get compute client for a subscription."""
        return self.get_client("compute", subscription_id)

    def containerservice(self, subscription_id: str) -> ContainerServiceClient:
        """Get container service (AKS) client for a subscription."""
        return self.get_client("containerservice", subscription_id)

    def get_subscription_name(self, subscription_id: str) -> str:
        """Look up the display name of a subscription, verifying access."""
        subscription = self.subscriptions.subscriptions.get(subscription_id)
        display_name: str = subscription.display_name or subscription_id
        return display_name
