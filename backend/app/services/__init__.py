"""
Services package.

Services contain business logic and data access layer.
They load records, build order requests and render documents.

Services should:
    - Accept database session as parameter
    - Perform database operations
    - Implement business logic
    - Return data or raise exceptions
"""

from app.services.tour_data_loader import (
    TourDataLoader,
    TourDataLoaderError,
    TourDataNotFoundError,
    TourAggregate,
    HostInfo,
    ParticipantInfo,
    WarehouseInfo,
)
from app.services.tour_status_service import (
    TourStatusService,
    TourStatusServiceError,
)
from app.services.identity_source import (
    IdentitySource,
    IdentityKind,
    CustomerIdentity,
    CelebrityNameSampler,
    NameSampler,
)
from app.services.order_payload_builder import (
    OrderPayloadBuilder,
    AddressResolver,
    Address,
    OrderLineItem,
    SalesOrderRequest,
    PurchaseOrderRequest,
)
from app.services.workflow_catalog import (
    WorkflowName,
    WorkflowInfo,
    WORKFLOW_CATALOG,
    canonical_order,
    parse_workflow_name,
)
from app.services.instruction_guide import InstructionGuideGenerator

__all__ = [
    "TourDataLoader",
    "TourDataLoaderError",
    "TourDataNotFoundError",
    "TourAggregate",
    "HostInfo",
    "ParticipantInfo",
    "WarehouseInfo",
    "TourStatusService",
    "TourStatusServiceError",
    "IdentitySource",
    "IdentityKind",
    "CustomerIdentity",
    "CelebrityNameSampler",
    "NameSampler",
    "OrderPayloadBuilder",
    "AddressResolver",
    "Address",
    "OrderLineItem",
    "SalesOrderRequest",
    "PurchaseOrderRequest",
    "WorkflowName",
    "WorkflowInfo",
    "WORKFLOW_CATALOG",
    "canonical_order",
    "parse_workflow_name",
    "InstructionGuideGenerator",
]
