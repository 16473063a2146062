"""Tour data loader: resolves a tour id into the full finalization aggregate."""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.team_member import TeamMember
from app.models.tour import Tour, TourParticipant
from app.models.warehouse import Warehouse

logger = logging.getLogger(__name__)


class TourDataLoaderError(Exception):
    """Base exception for tour data loading errors."""
    pass


class TourDataNotFoundError(TourDataLoaderError):
    """Raised when a tour, warehouse or host row does not exist."""
    pass


@dataclass(frozen=True)
class HostInfo:
    """Tour host as seen by finalization."""
    id: UUID
    first_name: str
    last_name: str
    display_name: str
    email: Optional[str] = None


@dataclass(frozen=True)
class ParticipantInfo:
    """Tour participant as seen by finalization."""
    id: UUID
    first_name: str
    last_name: str
    email: str
    company: str = ""
    title: str = ""
    display_name: Optional[str] = None


@dataclass(frozen=True)
class WarehouseInfo:
    """Warehouse as seen by finalization."""
    id: UUID
    name: str
    external_warehouse_id: str
    address: Dict[str, Any] = field(default_factory=dict)

    def formatted_address(self) -> str:
        """Single-line address, or a placeholder when nothing is known."""
        parts = [
            self.address.get(key) or ""
            for key in ("address1", "city", "state", "zip")
        ]
        joined = " ".join(part for part in parts if part).strip()
        return joined or "Address not available"


@dataclass(frozen=True)
class TourAggregate:
    """Everything finalization needs to know about one tour."""
    id: UUID
    warehouse: WarehouseInfo
    host: HostInfo
    participants: Tuple[ParticipantInfo, ...]
    selected_workflows: Tuple[str, ...]
    selected_product_ids: Tuple[str, ...]
    status: str = "draft"
    tour_date: Optional[date] = None
    tour_time: Optional[str] = None


class TourDataLoader:
    """
    Loads tour records from the relational store.

    Every lookup is a point lookup by primary key; a missing row is an
    error, never an empty result.
    """

    def __init__(self, db: Session):
        """
        Initialize tour data loader.

        Args:
            db: Database session
        """
        self.db = db

    def load_tour(self, tour_id: UUID) -> Tour:
        """
        Load the tour row.

        Raises:
            TourDataNotFoundError: If the tour does not exist
        """
        tour = self.db.query(Tour).filter(Tour.id == tour_id).first()
        if not tour:
            raise TourDataNotFoundError(f"Failed to fetch tour: tour {tour_id} not found")
        return tour

    def load_warehouse(self, warehouse_id: UUID) -> WarehouseInfo:
        """
        Load a warehouse.

        Raises:
            TourDataNotFoundError: If the warehouse does not exist
        """
        warehouse = self.db.query(Warehouse).filter(Warehouse.id == warehouse_id).first()
        if not warehouse:
            raise TourDataNotFoundError(
                f"Failed to fetch warehouse: warehouse {warehouse_id} not found"
            )
        return WarehouseInfo(
            id=warehouse.id,
            name=warehouse.name,
            external_warehouse_id=warehouse.external_warehouse_id,
            address=dict(warehouse.address or {}),
        )

    def load_host(self, host_id: UUID) -> HostInfo:
        """
        Load a host (team member).

        Raises:
            TourDataNotFoundError: If the host does not exist
        """
        host = self.db.query(TeamMember).filter(TeamMember.id == host_id).first()
        if not host:
            raise TourDataNotFoundError(f"Failed to fetch host: host {host_id} not found")
        return HostInfo(
            id=host.id,
            first_name=host.first_name or "",
            last_name=host.last_name or "",
            display_name=host.display_name,
            email=host.email,
        )

    def load_participants(self, tour_id: UUID) -> List[ParticipantInfo]:
        """Load a tour's participants in list order."""
        rows = (
            self.db.query(TourParticipant)
            .filter(TourParticipant.tour_id == tour_id)
            .order_by(TourParticipant.position.asc(), TourParticipant.created_at.asc())
            .all()
        )
        return [
            ParticipantInfo(
                id=row.id,
                first_name=row.first_name or "",
                last_name=row.last_name or "",
                email=row.email or "",
                company=row.company or "",
                title=row.title or "",
                display_name=row.name,
            )
            for row in rows
        ]

    def load(self, tour_id: UUID) -> TourAggregate:
        """
        Resolve a tour id into the full aggregate.

        Args:
            tour_id: Tour ID

        Returns:
            TourAggregate with warehouse, host, participants and selections

        Raises:
            TourDataNotFoundError: If any required row is missing
        """
        logger.info("Fetching tour details for %s", tour_id)
        tour = self.load_tour(tour_id)
        warehouse = self.load_warehouse(tour.warehouse_id)
        host = self.load_host(tour.host_id)
        participants = self.load_participants(tour.id)

        status = tour.status.value if hasattr(tour.status, "value") else str(tour.status or "draft")

        return TourAggregate(
            id=tour.id,
            warehouse=warehouse,
            host=host,
            participants=tuple(participants),
            selected_workflows=tuple(str(name) for name in tour.selected_workflows or ()),
            selected_product_ids=tuple(str(product_id) for product_id in tour.selected_product_ids or ()),
            status=status,
            tour_date=tour.date,
            tour_time=tour.time,
        )
