"""Action modules for stopping compute resources."""

from deallocator.actions.dispatcher import ActionDispatcher
from deallocator.actions.executors import (
    CLUSTER_ADVISORY,
    ActionExecutor,
    LiveActionExecutor,
    SimulatedActionExecutor,
)

__all__ = [
    "ActionDispatcher",
    "ActionExecutor",
    "CLUSTER_ADVISORY",
    "LiveActionExecutor",
    "SimulatedActionExecutor",
]
