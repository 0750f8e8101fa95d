"""Cloud provider integrations."""

from deallocator.providers.azure import AzureProvider
from deallocator.providers.base import (
    ACCEPTED,
    FAILED,
    ProviderError,
    ResourceProvider,
    SubscriptionContext,
)

__all__ = [
    "ACCEPTED",
    "FAILED",
    "AzureProvider",
    "ProviderError",
    "ResourceProvider",
    "SubscriptionContext",
]
