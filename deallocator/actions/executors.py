"""Per-resource action executors.

The dispatcher hands every actionable record to an executor. The live
executor selects the owning subscription, resolves the resource and runs the
kind-specific stop procedure; the simulated executor only records what would
have happened. Both write at most one terminal status per record.
"""

import logging
from abc import ABC, abstractmethod

from deallocator.models import (
    ActionInfo,
    ActionStatus,
    ProviderResource,
    ResourceKind,
    ResourceRecord,
)
from deallocator.providers.base import (
    ACCEPTED,
    FAILED,
    ResourceProvider,
    SubscriptionContext,
)
from deallocator.utils.logging import ActionType, DeallocationLogger

logger = logging.getLogger(__name__)

CLUSTER_ADVISORY = (
    "Cluster cannot be stopped because its node pools are not backed by "
    "virtual machine scale sets. To reduce cost, scale user node pools to 0 "
    "and the system node pool to 1."
)


class ActionExecutor(ABC):
    """Executes the deactivation step for a single record."""

    def __init__(self, run_logger: DeallocationLogger | None = None):
        self.run_logger = run_logger or DeallocationLogger()

    @abstractmethod
    def execute(self, record: ResourceRecord) -> None:
        """Process one actionable record."""
        raise NotImplementedError


class SimulatedActionExecutor(ActionExecutor):
    """Executor for simulate mode.

    No provider is involved. The record keeps its initial status and its
    information field is marked as simulated.
    """

    def execute(self, record: ResourceRecord) -> None:
        self.run_logger.log_simulated(record)
        record.annotate(ActionInfo.SIMULATED)


class LiveActionExecutor(ActionExecutor):
    """Executor that stops resources through a live provider.

    Dispatch by kind (single pass, no retries):
    - VM: non-blocking stop; success when the request was accepted
    - ScaleSet: tracked stop; success unless the job state is ``Failed``
    - ManagedCluster: decided from the node pool composition
    - anything else: ``UnsupportedObject``
    """

    def __init__(
        self,
        provider: ResourceProvider,
        run_logger: DeallocationLogger | None = None,
        stop_managed_clusters: bool = False,
    ):
        super().__init__(run_logger)
        self.provider = provider
        self.stop_managed_clusters = stop_managed_clusters

    def execute(self, record: ResourceRecord) -> None:
        # Context is re-established for every record and passed explicitly
        try:
            context = self.provider.select_context(record.subscription_id)
        except Exception as e:
            self.run_logger.log_error(record, e, ActionType.LOOKUP)
            record.record_outcome(ActionStatus.ERROR_NOT_FOUND, str(e))
            return

        self.run_logger.log_lookup(record)
        try:
            resource = self.provider.resolve_resource(context, record)
        except Exception as e:
            self.run_logger.log_error(record, e, ActionType.LOOKUP)
            resource = None

        if resource is None:
            record.record_outcome(ActionStatus.NOT_FOUND)
            return

        if record.kind is ResourceKind.VM:
            self._stop_vm(context, record, resource)
        elif record.kind is ResourceKind.SCALE_SET:
            self._stop_scale_set(context, record, resource)
        elif record.kind is ResourceKind.MANAGED_CLUSTER:
            self._stop_managed_cluster(context, record, resource)
        else:
            record.record_outcome(ActionStatus.UNSUPPORTED_OBJECT)

    def _stop_vm(
        self,
        context: SubscriptionContext,
        record: ResourceRecord,
        resource: ProviderResource,
    ) -> None:
        try:
            acknowledgement = self.provider.stop_vm(context, resource)
        except Exception as e:
            self.run_logger.log_error(record, e, ActionType.STOP)
            record.record_outcome(ActionStatus.ERROR_DURING_STOP_ACTION, str(e))
            return

        if acknowledgement == ACCEPTED:
            record.record_outcome(ActionStatus.SUCCESS)
        else:
            record.record_outcome(ActionStatus.ERROR_STOPPING, str(acknowledgement))

    def _stop_scale_set(
        self,
        context: SubscriptionContext,
        record: ResourceRecord,
        resource: ProviderResource,
    ) -> None:
        try:
            state = self.provider.stop_scale_set(context, resource)
        except Exception as e:
            self.run_logger.log_error(record, e, ActionType.STOP)
            record.record_outcome(ActionStatus.ERROR_DURING_STOP_ACTION, str(e))
            return

        if state == FAILED:
            record.record_outcome(ActionStatus.ERROR_STOPPING, state)
        else:
            record.record_outcome(ActionStatus.SUCCESS)

    def _stop_managed_cluster(
        self,
        context: SubscriptionContext,
        record: ResourceRecord,
        resource: ProviderResource,
    ) -> None:
        try:
            pools = self.provider.get_cluster_pools(context, resource)
        except Exception as e:
            self.run_logger.log_error(record, e, ActionType.LOOKUP)
            record.record_outcome(ActionStatus.ERROR_DURING_STOP_ACTION, str(e))
            return

        system_pools = [pool for pool in pools if pool.is_system]
        if system_pools and all(pool.count == 0 for pool in system_pools):
            record.record_outcome(ActionStatus.SUCCESS, ActionInfo.ALREADY_STOPPED)
            return

        if pools and all(pool.is_scale_set_backed for pool in pools):
            if not self.stop_managed_clusters:
                record.record_outcome(ActionStatus.SUCCESS, ActionInfo.SKIPPED)
                return
            self._request_cluster_stop(context, record, resource)
            return

        self.run_logger.log_advisory(record, CLUSTER_ADVISORY)
        record.record_outcome(ActionStatus.CANNOT_BE_STOPPED)

    def _request_cluster_stop(
        self,
        context: SubscriptionContext,
        record: ResourceRecord,
        resource: ProviderResource,
    ) -> None:
        try:
            acknowledgement = self.provider.stop_cluster(context, resource)
        except Exception as e:
            self.run_logger.log_error(record, e, ActionType.STOP)
            record.record_outcome(ActionStatus.ERROR_DURING_STOP_ACTION, str(e))
            return

        if acknowledgement == ACCEPTED:
            record.record_outcome(ActionStatus.SUCCESS, ActionInfo.STOP_REQUESTED)
        else:
            record.record_outcome(ActionStatus.ERROR_STOPPING, str(acknowledgement))
