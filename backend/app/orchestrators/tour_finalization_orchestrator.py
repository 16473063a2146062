"""Tour finalization orchestrator: turns a tour's selected workflows into orders and a host guide."""
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.models.tour import TourStatus
from app.orchestrators.base import BaseOrchestrator, OrchestrationError
from app.orchestrators.workflows import (
    WORKFLOW_HANDLERS,
    OrderClient,
    OrderSummary,
    WorkflowContext,
    WorkflowOutcome,
)
from app.services.identity_source import CelebrityNameSampler, NameSampler
from app.services.instruction_guide import InstructionGuideGenerator
from app.services.order_payload_builder import AddressResolver, OrderPayloadBuilder
from app.services.tour_data_loader import TourAggregate, TourDataLoader, TourDataLoaderError
from app.services.tour_status_service import TourStatusService
from app.services.workflow_catalog import WorkflowName, canonical_order

logger = logging.getLogger(__name__)

DEFAULT_TOUR_TIME = "10:00"


class TourFinalizationError(OrchestrationError):
    """Raised when finalization cannot start or cannot record its result."""
    pass


@dataclass
class FinalizationSummary:
    """Structured description of a finalized tour."""
    tour_id: str
    tour_date: str
    tour_time: str
    warehouse_name: str
    warehouse_address: str
    host_name: str
    selected_workflows: List[str]
    selected_product_ids: List[str]
    participant_count: int
    sales_orders: List[OrderSummary] = field(default_factory=list)
    purchase_orders: List[OrderSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tour_id": self.tour_id,
            "tour_date": self.tour_date,
            "tour_time": self.tour_time,
            "warehouse_name": self.warehouse_name,
            "warehouse_address": self.warehouse_address,
            "host_name": self.host_name,
            "selected_workflows": list(self.selected_workflows),
            "selected_product_ids": list(self.selected_product_ids),
            "participant_count": self.participant_count,
            "sales_orders": [order.to_dict() for order in self.sales_orders],
            "purchase_orders": [order.to_dict("po_number") for order in self.purchase_orders],
        }


@dataclass
class FinalizationResult:
    """Outcome of one finalize call."""
    success: bool
    message: str
    errors: List[str] = field(default_factory=list)
    instructions: Optional[str] = None
    summary: Optional[FinalizationSummary] = None
    trace: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "errors": list(self.errors),
        }
        if self.instructions is not None:
            result["instructions"] = self.instructions
        if self.summary is not None:
            result["tour_summary"] = self.summary.to_dict()
        result["trace"] = list(self.trace)
        return result


class TourFinalizationOrchestrator(BaseOrchestrator):
    """
    Finalizes a tour.

    Pipeline (fixed order):
    1. Acquire an order-API session
    2. Load the tour aggregate
    3. Run each selected workflow handler in canonical order
    4. Render the instruction guide
    5. Mark the tour finalized

    Steps 1-2 fail fast: nothing is submitted and the status is untouched.
    Workflow failures are collected and never stop later workflows; the guide
    and the status write still happen once handlers have run.
    """

    def __init__(
        self,
        db: Session,
        order_client: OrderClient,
        rng: Optional[random.Random] = None,
        name_sampler: Optional[NameSampler] = None,
        clock: Optional[Callable[[], datetime]] = None,
        settings: Optional[Settings] = None,
        address_resolver: Optional[AddressResolver] = None,
        guide_generator: Optional[InstructionGuideGenerator] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            db: Database session
            order_client: Order-management client (must expose acquire_session)
            rng: Random source for quantities and name sampling
            name_sampler: Source of generated customer names
            clock: Time source for order dates and the guide footer
            settings: Shop and vendor configuration
            address_resolver: Warehouse address resolver
            guide_generator: Instruction guide renderer
        """
        super().__init__()
        self.db = db
        self.order_client = order_client
        self.rng = rng or random.Random()
        self.name_sampler = name_sampler or CelebrityNameSampler(self.rng)
        self.clock = clock or datetime.now
        self.settings = settings or get_settings()
        self.address_resolver = address_resolver or AddressResolver()
        self.guide_generator = guide_generator or InstructionGuideGenerator()
        self.data_loader = TourDataLoader(db)
        self.status_service = TourStatusService(db)
        self.payload_builder = OrderPayloadBuilder(
            shop_name=self.settings.shop_name,
            vendor_id=self.settings.vendor_id,
            clock=self.clock,
        )

    @property
    def orchestrator_name(self) -> str:
        return "tour_finalization_orchestrator"

    async def finalize(self, tour_id: UUID, selected_workflows: Iterable[str]) -> FinalizationResult:
        """
        Finalize a tour.

        Args:
            tour_id: Tour ID
            selected_workflows: Workflow names; unrecognized names are ignored

        Returns:
            FinalizationResult. ``success`` is True iff no errors were collected.
        """
        self._start_trace()
        logger.info("Finalizing tour %s", tour_id)

        try:
            with self._trace_step("acquire_session"):
                await self.order_client.acquire_session()
            with self._trace_step("load_tour_data") as step:
                tour = self.data_loader.load(tour_id)
                step.details = {
                    "participant_count": len(tour.participants),
                    "product_count": len(tour.selected_product_ids),
                }
        except Exception as e:
            return self._failed(e)

        workflows = canonical_order(selected_workflows)
        self.log_step("select_workflows", details={"workflows": [w.value for w in workflows]})

        context = WorkflowContext(
            tour=tour,
            client=self.order_client,
            builder=self.payload_builder,
            warehouse_address=self.address_resolver.resolve(tour.warehouse),
            name_sampler=self.name_sampler,
            rng=self.rng,
        )

        errors: List[str] = []
        outcomes: List[WorkflowOutcome] = []
        for workflow in workflows:
            with self._trace_step(f"workflow:{workflow.value}") as step:
                outcome = await WORKFLOW_HANDLERS[workflow](context).run()
                details = {
                    "sales_orders": len(outcome.sales_orders),
                    "purchase_orders": len(outcome.purchase_orders),
                    "failed_orders": len(outcome.failed_orders),
                }
                if outcome.success:
                    step.complete(details=details)
                else:
                    step.fail(outcome.error, details=details)
                    errors.append(outcome.error)
            outcomes.append(outcome)

        generated_at = self.clock()
        instructions: Optional[str] = None
        try:
            with self._trace_step("generate_instruction_guide"):
                instructions = self.guide_generator.render(tour, workflows, generated_at=generated_at)
        except Exception as e:
            error = f"Instruction guide generation failed: {str(e) or type(e).__name__}"
            logger.error(error)
            errors.append(error)

        try:
            with self._trace_step("update_tour_status"):
                self.status_service.set_status(tour.id, TourStatus.FINALIZED.value)
        except Exception as e:
            return self._failed(e, errors)

        summary = self._build_summary(tour, workflows, outcomes, generated_at)
        guide_note = "Instruction guide generated." if instructions is not None else "No instruction guide."
        if errors:
            message = f"Tour finalization finished with {len(errors)} workflow error(s). {guide_note}"
            logger.warning("Tour %s finalized with %d workflow error(s)", tour_id, len(errors))
        else:
            message = "Tour finalized successfully with all selected workflows. Instruction guide generated."
            logger.info("Tour %s finalized in %d ms", tour_id, self.get_elapsed_time_ms())

        return FinalizationResult(
            success=not errors,
            message=message,
            errors=errors,
            instructions=instructions,
            summary=summary,
            trace=self.get_trace(),
        )

    def render_guide(self, tour_id: UUID, generated_at: Optional[datetime] = None) -> str:
        """
        Render the instruction guide for a tour without finalizing it.

        Raises:
            TourFinalizationError: If the tour or a referenced row is missing
        """
        try:
            tour = self.data_loader.load(tour_id)
        except TourDataLoaderError as e:
            raise TourFinalizationError(f"Failed to render guide: {str(e)}") from e
        return self.guide_generator.render(tour, generated_at=generated_at or self.clock())

    def _failed(self, error: Exception, errors: Optional[List[str]] = None) -> FinalizationResult:
        message = f"Tour finalization failed: {str(error) or type(error).__name__}"
        logger.error(message)
        return FinalizationResult(
            success=False,
            message=message,
            errors=[message] + list(errors or []),
            trace=self.get_trace(),
        )

    def _build_summary(
        self,
        tour: TourAggregate,
        workflows: List[WorkflowName],
        outcomes: List[WorkflowOutcome],
        generated_at: datetime,
    ) -> FinalizationSummary:
        host = tour.host
        host_name = f"{host.first_name} {host.last_name}".strip() or host.display_name
        summary = FinalizationSummary(
            tour_id=str(tour.id),
            tour_date=(tour.tour_date or generated_at.date()).isoformat(),
            tour_time=tour.tour_time or DEFAULT_TOUR_TIME,
            warehouse_name=tour.warehouse.name,
            warehouse_address=tour.warehouse.formatted_address(),
            host_name=host_name,
            selected_workflows=[workflow.value for workflow in workflows],
            selected_product_ids=list(tour.selected_product_ids),
            participant_count=len(tour.participants),
        )
        for outcome in outcomes:
            summary.sales_orders.extend(outcome.sales_orders)
            summary.purchase_orders.extend(outcome.purchase_orders)
        return summary
