"""
Workflow handlers for tour finalization.

Each handler materializes one demonstration workflow as a batch of orders:
it builds every order request up front, submits the batch concurrently and
partitions the responses into successes and failures.

Failure rules:
- Missing product selection fails the workflow
- Sales-order failures only reduce the success count
- A purchase-order batch in which every order failed fails the workflow
"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Sequence, Set, Tuple, Type

from app.clients.order_management_client import OrderSubmissionResult
from app.services.identity_source import IdentityKind, IdentitySource, NameSampler
from app.services.order_payload_builder import (
    Address,
    OrderLineItem,
    OrderPayloadBuilder,
    PurchaseOrderRequest,
    SalesOrderRequest,
)
from app.services.tour_data_loader import TourAggregate
from app.services.workflow_catalog import WORKFLOW_CATALOG, WorkflowName
from app.utils.invariants import check_product_selection

logger = logging.getLogger(__name__)

PURCHASE_ORDER_SKU_LIMIT = 6
PARTICIPANT_SKU_LIMIT = 3
PARTICIPANT_UNIT_PRICE = Decimal("10.00")
SINGLE_LINE_UNIT_PRICE = Decimal("15.00")
MULTI_LINE_UNIT_PRICE = Decimal("12.00")


class WorkflowError(Exception):
    """Raised when a workflow cannot produce its required orders."""
    pass


class OrderClient(Protocol):
    """Order submission interface consumed by finalization."""

    async def acquire_session(self) -> str:
        ...

    async def create_sales_order(self, request: SalesOrderRequest) -> OrderSubmissionResult:
        ...

    async def create_purchase_order(self, request: PurchaseOrderRequest) -> OrderSubmissionResult:
        ...


@dataclass(frozen=True)
class OrderSummary:
    """Created order as reported in the finalization result."""
    order_number: str
    workflow: str
    items: Tuple[Tuple[str, int], ...]
    customer_name: Optional[str] = None

    def to_dict(self, number_key: str = "order_number") -> Dict[str, Any]:
        data: Dict[str, Any] = {
            number_key: self.order_number,
            "workflow": self.workflow,
            "items": [{"sku": sku, "quantity": quantity} for sku, quantity in self.items],
        }
        if self.customer_name is not None:
            data["customer_name"] = self.customer_name
        return data


@dataclass(frozen=True)
class WorkflowOutcome:
    """Tagged result of one workflow: success, or a workflow-scoped error."""
    workflow: WorkflowName
    success: bool
    error: Optional[str] = None
    sales_orders: Tuple[OrderSummary, ...] = ()
    purchase_orders: Tuple[OrderSummary, ...] = ()
    failed_orders: Tuple[str, ...] = ()


@dataclass
class WorkflowContext:
    """Shared collaborators for all handlers within one finalize call."""
    tour: TourAggregate
    client: OrderClient
    builder: OrderPayloadBuilder
    warehouse_address: Address
    name_sampler: NameSampler
    rng: random.Random
    order_numbers: Set[str] = field(default_factory=set)

    def claim_order_number(self, order_number: str) -> str:
        """Reserve an order number for this run."""
        if order_number in self.order_numbers:
            raise WorkflowError(f"Duplicate order number within run: {order_number}")
        self.order_numbers.add(order_number)
        return order_number


class WorkflowHandler(ABC):
    """
    Base class for workflow handlers.

    Subclasses set ``workflow`` and implement ``_execute``. ``run`` never
    raises: any exception is folded into a failed WorkflowOutcome whose
    error reads "<Workflow label> failed: <cause>".
    """

    workflow: WorkflowName

    def __init__(self, context: WorkflowContext):
        self.context = context
        self.tour = context.tour
        self._sales_orders: List[OrderSummary] = []
        self._purchase_orders: List[OrderSummary] = []
        self._failed_orders: List[str] = []

    @property
    def label(self) -> str:
        return WORKFLOW_CATALOG[self.workflow].label

    @property
    def product_ids(self) -> Tuple[str, ...]:
        return self.tour.selected_product_ids

    async def run(self) -> WorkflowOutcome:
        logger.info("Executing: %s", self.label)
        try:
            check_product_selection(self.label, self.product_ids)
            await self._execute()
        except Exception as e:
            error = f"{self.label} failed: {str(e) or type(e).__name__}"
            logger.error(error)
            return WorkflowOutcome(
                workflow=self.workflow,
                success=False,
                error=error,
                sales_orders=tuple(self._sales_orders),
                purchase_orders=tuple(self._purchase_orders),
                failed_orders=tuple(self._failed_orders),
            )

        logger.info(
            "Executed: %s (%d sales orders, %d purchase orders, %d failed)",
            self.label,
            len(self._sales_orders),
            len(self._purchase_orders),
            len(self._failed_orders),
        )
        return WorkflowOutcome(
            workflow=self.workflow,
            success=True,
            sales_orders=tuple(self._sales_orders),
            purchase_orders=tuple(self._purchase_orders),
            failed_orders=tuple(self._failed_orders),
        )

    @abstractmethod
    async def _execute(self) -> None:
        """Build and submit this workflow's orders."""
        pass

    # Batch submission

    async def _submit(
        self,
        requests: Sequence[Any],
        submit: Callable[[Any], Awaitable[OrderSubmissionResult]],
    ) -> Tuple[List[Any], List[str]]:
        """
        Submit a batch concurrently and wait for every response.

        Returns:
            (successful requests, failure messages)
        """
        results = await asyncio.gather(
            *(submit(request) for request in requests),
            return_exceptions=True,
        )

        succeeded: List[Any] = []
        failures: List[str] = []
        for request, result in zip(requests, results):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
            if isinstance(result, Exception):
                failures.append(f"{request.order_number}: {str(result) or type(result).__name__}")
            elif not result.success or not result.order:
                failures.append(f"{request.order_number}: {result.error or 'no order returned'}")
            else:
                succeeded.append(request)

        for failure in failures:
            logger.warning("%s order failed %s", self.label, failure)
        self._failed_orders.extend(failures)
        return succeeded, failures

    async def _submit_sales_orders(self, requests: Sequence[SalesOrderRequest]) -> int:
        """Submit sales orders; failures are tolerated. Returns the success count."""
        if not requests:
            return 0
        succeeded, _ = await self._submit(requests, self.context.client.create_sales_order)
        self._sales_orders.extend(
            OrderSummary(
                order_number=request.order_number,
                workflow=self.workflow.value,
                items=tuple((item.product_id, item.quantity) for item in request.line_items),
                customer_name=request.customer_name,
            )
            for request in succeeded
        )
        return len(succeeded)

    async def _submit_purchase_orders(self, requests: Sequence[PurchaseOrderRequest]) -> int:
        """
        Submit purchase orders.

        Raises:
            WorkflowError: If every purchase order in the batch failed
        """
        succeeded, failures = await self._submit(requests, self.context.client.create_purchase_order)
        if requests and not succeeded:
            raise WorkflowError(
                f"Failed to create {self.label} PO: {'; '.join(failures)}"
            )
        self._purchase_orders.extend(
            OrderSummary(
                order_number=request.po_number,
                workflow=self.workflow.value,
                items=tuple((item.product_id, item.quantity) for item in request.line_items),
            )
            for request in succeeded
        )
        return len(succeeded)

    # Recipes

    def _sales_line(self, product_id: str, quantity: int, unit_price: Decimal, partner_id: str) -> OrderLineItem:
        return OrderLineItem(
            product_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
            product_name=f"Product {product_id}",
            warehouse_id=self.tour.warehouse.external_warehouse_id,
            partner_line_item_id=partner_id,
        )

    def _sales_order(
        self,
        order_number: str,
        identity_source: IdentitySource,
        kind: IdentityKind,
        index: int,
        line_items: Sequence[OrderLineItem],
        tags: Sequence[str],
    ) -> SalesOrderRequest:
        return self.context.builder.build_sales_order(
            order_number=self.context.claim_order_number(order_number),
            warehouse_address=self.context.warehouse_address,
            identity=identity_source.resolve(kind, index),
            line_items=line_items,
            tags=tags,
        )

    async def create_purchase_order(self, prefix: str) -> int:
        """One PO over the first six products, 5-14 units per line."""
        product_ids = self.product_ids[:PURCHASE_ORDER_SKU_LIMIT]
        line_items = [
            OrderLineItem(
                product_id=product_id,
                quantity=self.context.rng.randint(5, 14),
                unit_price=Decimal("0.00"),
                product_name=product_id,
                warehouse_id=self.tour.warehouse.external_warehouse_id,
            )
            for product_id in product_ids
        ]
        po_date = self.context.builder.clock().date().isoformat()
        po_number = self.context.claim_order_number(
            f"{prefix}-{self.tour.host.display_name}-{po_date}"
        )
        request = self.context.builder.build_purchase_order(
            order_number=po_number,
            warehouse_id=self.tour.warehouse.external_warehouse_id,
            line_items=line_items,
        )
        logger.info("Creating %s PO with %d SKUs", prefix, len(line_items))
        return await self._submit_purchase_orders([request])

    async def create_participant_orders(self, prefix: str) -> int:
        """One order per participant over the first three products, 1 unit each at 10.00."""
        if not self.tour.participants:
            logger.info("No participants found, skipping participant orders")
            return 0

        identities = IdentitySource(self.tour)
        requests = []
        for i in range(len(self.tour.participants)):
            line_items = [
                self._sales_line(product_id, 1, PARTICIPANT_UNIT_PRICE, f"participant-line-{i + 1}-{j + 1}")
                for j, product_id in enumerate(self.product_ids[:PARTICIPANT_SKU_LIMIT])
            ]
            requests.append(self._sales_order(
                f"{prefix}-PARTICIPANT-{i + 1}",
                identities,
                IdentityKind.PARTICIPANT,
                i,
                line_items,
                ("participant", "tour"),
            ))
        return await self._submit_sales_orders(requests)

    async def create_demo_orders(self, prefix: str, count: int) -> int:
        """Single-line orders under generated identities, rotating through the products."""
        identities = IdentitySource(self.tour, self.context.name_sampler.sample(count))
        requests = []
        for i in range(count):
            product_id = self.product_ids[i % len(self.product_ids)]
            line_items = [
                self._sales_line(product_id, self.context.rng.randint(1, 3), SINGLE_LINE_UNIT_PRICE, f"line-{i + 1}")
            ]
            requests.append(self._sales_order(
                f"{prefix}-{i + 1}",
                identities,
                IdentityKind.GENERATED,
                i,
                line_items,
                ("demo", "celebrity", "tour"),
            ))
        return await self._submit_sales_orders(requests)

    async def create_multi_item_demo_orders(self, prefix: str, count: int) -> int:
        """Orders of 2-4 lines (capped by the selection) under generated identities."""
        identities = IdentitySource(self.tour, self.context.name_sampler.sample(count))
        total = len(self.product_ids)
        requests = []
        for i in range(count):
            line_count = min(2 + self.context.rng.randint(0, 2), total)
            line_items = []
            for j in range(line_count):
                product_id = self.product_ids[(i + j) % total]
                line_items.append(self._sales_line(
                    product_id,
                    self.context.rng.randint(1, 3),
                    MULTI_LINE_UNIT_PRICE,
                    f"multi-line-{i + 1}-{j + 1}",
                ))
            requests.append(self._sales_order(
                f"{prefix}-{i + 1}",
                identities,
                IdentityKind.GENERATED,
                i,
                line_items,
                ("multi-item", "celebrity", "tour"),
            ))
        return await self._submit_sales_orders(requests)

    async def create_host_demo_orders(self, prefix: str, count: int) -> int:
        """Single-line orders placed under the host's own name."""
        identities = IdentitySource(self.tour)
        requests = []
        for i in range(count):
            product_id = self.product_ids[i % len(self.product_ids)]
            line_items = [
                self._sales_line(product_id, self.context.rng.randint(1, 3), SINGLE_LINE_UNIT_PRICE, f"host-line-{i + 1}")
            ]
            requests.append(self._sales_order(
                f"{prefix}-{i + 1}",
                identities,
                IdentityKind.HOST,
                i,
                line_items,
                ("demo", "host", "tour"),
            ))
        return await self._submit_sales_orders(requests)


class ReceiveToLightHandler(WorkflowHandler):
    """Receiving only: one purchase order, no sales orders."""

    workflow = WorkflowName.RECEIVE_TO_LIGHT

    async def _execute(self) -> None:
        await self.create_purchase_order("R2L")


class PackToLightHandler(WorkflowHandler):
    """Participant orders (host orders when nobody signed up) plus one purchase order."""

    workflow = WorkflowName.PACK_TO_LIGHT
    host_order_count = 3

    async def _execute(self) -> None:
        if self.tour.participants:
            await self.create_participant_orders("P2L")
        else:
            logger.info("No participants - creating demo orders under the host's name")
            await self.create_host_demo_orders("P2L-HOST", self.host_order_count)
        await self.create_purchase_order("P2L")


class StandardReceivingHandler(WorkflowHandler):
    workflow = WorkflowName.STANDARD_RECEIVING

    async def _execute(self) -> None:
        await self.create_purchase_order("STANDARD-RECEIVING")


class BulkShippingHandler(WorkflowHandler):
    workflow = WorkflowName.BULK_SHIPPING
    demo_order_count = 10

    async def _execute(self) -> None:
        await self.create_participant_orders("BULK")
        await self.create_demo_orders("BULK-DEMO", self.demo_order_count)


class SingleItemBatchHandler(WorkflowHandler):
    workflow = WorkflowName.SINGLE_ITEM_BATCH
    demo_order_count = 5

    async def _execute(self) -> None:
        await self.create_participant_orders("SINGLE")
        await self.create_demo_orders("SINGLE-DEMO", self.demo_order_count)


class MultiItemBatchHandler(WorkflowHandler):
    workflow = WorkflowName.MULTI_ITEM_BATCH
    demo_order_count = 5

    async def _execute(self) -> None:
        await self.create_participant_orders("MULTI")
        await self.create_multi_item_demo_orders("MULTI-DEMO", self.demo_order_count)


WORKFLOW_HANDLERS: Dict[WorkflowName, Type[WorkflowHandler]] = {
    handler.workflow: handler
    for handler in (
        ReceiveToLightHandler,
        PackToLightHandler,
        StandardReceivingHandler,
        BulkShippingHandler,
        SingleItemBatchHandler,
        MultiItemBatchHandler,
    )
}
