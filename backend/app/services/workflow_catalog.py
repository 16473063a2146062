"""Catalog of demonstration workflows and their canonical execution order."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class WorkflowName(str, Enum):
    """Demonstration workflows. Declaration order is the canonical order."""
    RECEIVE_TO_LIGHT = "receive_to_light"
    PACK_TO_LIGHT = "pack_to_light"
    STANDARD_RECEIVING = "standard_receiving"
    BULK_SHIPPING = "bulk_shipping"
    SINGLE_ITEM_BATCH = "single_item_batch"
    MULTI_ITEM_BATCH = "multi_item_batch"


@dataclass(frozen=True)
class WorkflowInfo:
    """Static description of a workflow."""
    name: WorkflowName
    label: str
    guide_title: str
    duration: str
    location: str
    what_to_show: Tuple[str, ...]
    talking_points: Tuple[str, ...]
    uses_sample_orders: bool = False


WORKFLOW_CATALOG: Dict[WorkflowName, WorkflowInfo] = {
    WorkflowName.RECEIVE_TO_LIGHT: WorkflowInfo(
        name=WorkflowName.RECEIVE_TO_LIGHT,
        label="Receive-to-Light Workflow",
        guide_title="RECEIVE-TO-LIGHT (R2L)",
        duration="10 minutes",
        location="Receiving area",
        what_to_show=(
            "**Light-guided receiving** - how lights direct workers to correct locations",
            "**Accuracy improvements** - reduced errors with visual guidance",
            "**Speed benefits** - faster putaway with directed workflows",
            "**Real-time updates** - inventory updates as items are received",
        ),
        talking_points=(
            "This system eliminates guesswork in receiving",
            "Lights guide workers to exact locations, reducing training time",
            "Real-time inventory updates prevent stock discrepancies",
        ),
    ),
    WorkflowName.PACK_TO_LIGHT: WorkflowInfo(
        name=WorkflowName.PACK_TO_LIGHT,
        label="Pack-to-Light Workflow",
        guide_title="PACK-TO-LIGHT (P2L)",
        duration="12 minutes",
        location="Packing stations",
        what_to_show=(
            "**Order picking process** - how orders are selected and routed",
            "**Light-guided packing** - lights indicate items and quantities",
            "**Quality control** - built-in verification steps",
            "**Shipping integration** - automatic label generation",
        ),
        talking_points=(
            "Pack-to-Light reduces picking errors by up to 99.9%",
            "Workers can focus on speed while lights ensure accuracy",
            "Orders are automatically verified before shipping",
        ),
    ),
    WorkflowName.STANDARD_RECEIVING: WorkflowInfo(
        name=WorkflowName.STANDARD_RECEIVING,
        label="Standard Receiving PO",
        guide_title="STANDARD RECEIVING",
        duration="8 minutes",
        location="Receiving dock",
        what_to_show=(
            "**Purchase order check-in** - matching deliveries to the open PO",
            "**Quantity verification** - counting and recording received units",
            "**Putaway** - moving received stock to its bin locations",
        ),
        talking_points=(
            "Every delivery is reconciled against its purchase order",
            "Discrepancies are flagged the moment items are scanned",
        ),
    ),
    WorkflowName.BULK_SHIPPING: WorkflowInfo(
        name=WorkflowName.BULK_SHIPPING,
        label="Bulk Shipping SOs",
        guide_title="BULK SHIPPING",
        duration="10 minutes",
        location="Shipping dock",
        what_to_show=(
            "**Large order processing** - how big shipments are handled",
            "**Carrier integration** - automatic shipping calculations",
            "**Loading optimization** - efficient truck loading",
            "**Tracking systems** - real-time shipment visibility",
        ),
        talking_points=(
            "Bulk shipping optimizes for large B2B orders",
            "System calculates best shipping methods automatically",
            "Real-time tracking keeps customers informed",
            "Sample orders show various shipping scenarios",
        ),
        uses_sample_orders=True,
    ),
    WorkflowName.SINGLE_ITEM_BATCH: WorkflowInfo(
        name=WorkflowName.SINGLE_ITEM_BATCH,
        label="Single-Item Batch SOs",
        guide_title="SINGLE-ITEM BATCH PICKING",
        duration="8 minutes",
        location="High-volume pick area",
        what_to_show=(
            "**High-volume items** - how popular products are handled",
            "**Dedicated workflows** - specialized processes for single SKUs",
            "**Bulk handling** - efficient processing of large quantities",
            "**Quality assurance** - verification for high-value items",
        ),
        talking_points=(
            "Single-item batching perfect for high-volume SKUs",
            "Reduces handling time for popular products",
            "Specialized workflow ensures consistency",
            "Sample orders demonstrate real batching scenarios",
        ),
        uses_sample_orders=True,
    ),
    WorkflowName.MULTI_ITEM_BATCH: WorkflowInfo(
        name=WorkflowName.MULTI_ITEM_BATCH,
        label="Multi-Item Batch SOs",
        guide_title="MULTI-ITEM BATCH PICKING",
        duration="10 minutes",
        location="Pick zones",
        what_to_show=(
            "**Batch optimization** - multiple orders picked simultaneously",
            "**Route efficiency** - optimal path through warehouse",
            "**Order consolidation** - how items are sorted by destination",
            "**Productivity metrics** - real-time performance tracking",
        ),
        talking_points=(
            "Batch picking increases productivity by 3-5x",
            "Smart routing reduces travel time by up to 50%",
            "System optimizes batches based on item locations",
            "Demonstration orders show real-world batch scenarios",
        ),
        uses_sample_orders=True,
    ),
}


def parse_workflow_name(value) -> Optional[WorkflowName]:
    """Return the WorkflowName for ``value``, or None if unrecognized."""
    if isinstance(value, WorkflowName):
        return value
    try:
        return WorkflowName(str(value).strip().lower().replace("-", "_"))
    except ValueError:
        return None


def canonical_order(selection: Iterable) -> List[WorkflowName]:
    """
    Order a workflow selection canonically.

    Unrecognized names are dropped and duplicates collapse; the result
    follows WorkflowName declaration order regardless of input order.
    """
    selected = {parse_workflow_name(value) for value in selection}
    return [workflow for workflow in WorkflowName if workflow in selected]
