"""
Orchestrators package.

Orchestrators coordinate multiple services and external clients to
implement one business process end to end.

Orchestrators should:
    - Coordinate multiple services
    - Run their steps in a fixed, explicit order
    - Collect step-scoped failures instead of aborting on the first one
    - Record an execution trace

Example:
    orchestrator = TourFinalizationOrchestrator(db, order_client)
    result = await orchestrator.finalize(tour_id, ["pack_to_light"])

Difference between Services and Orchestrators:
    - Services: Single-responsibility, focused on one domain/entity
    - Orchestrators: Multi-service coordination, complex workflows
"""

from app.orchestrators.base import (
    BaseOrchestrator,
    ExecutionStep,
    OrchestrationError,
)
from app.orchestrators.workflows import (
    WORKFLOW_HANDLERS,
    OrderSummary,
    WorkflowContext,
    WorkflowError,
    WorkflowHandler,
    WorkflowOutcome,
)
from app.orchestrators.tour_finalization_orchestrator import (
    FinalizationResult,
    FinalizationSummary,
    TourFinalizationError,
    TourFinalizationOrchestrator,
)

__all__ = [
    "BaseOrchestrator",
    "ExecutionStep",
    "OrchestrationError",
    "WORKFLOW_HANDLERS",
    "OrderSummary",
    "WorkflowContext",
    "WorkflowError",
    "WorkflowHandler",
    "WorkflowOutcome",
    "FinalizationResult",
    "FinalizationSummary",
    "TourFinalizationError",
    "TourFinalizationOrchestrator",
]
