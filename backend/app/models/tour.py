"""Tour and TourParticipant models."""
import enum

from sqlalchemy import Column, String, Date, Integer, ForeignKey, JSON
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel


class TourStatus(str, enum.Enum):
    """Lifecycle status of a tour"""
    DRAFT = "draft"
    FINALIZED = "finalized"


class Tour(Base, BaseModel):
    """
    Scheduled demonstration tour.

    A tour is created as a draft by scheduling and only ever mutated by its
    status transition to ``finalized``.

    Attributes:
        warehouse_id: Warehouse hosting the tour
        host_id: Team member running the tour
        date: Scheduled date (optional)
        time: Scheduled start time, e.g. "10:00" (optional)
        status: draft or finalized
        selected_workflows: Workflow names chosen for the tour
        selected_product_ids: Product identifiers (SKUs) used by the workflows
    """

    __tablename__ = "tours"

    warehouse_id = Column(
        Uuid,
        ForeignKey("warehouses.id"),
        nullable=False,
        index=True
    )
    host_id = Column(
        Uuid,
        ForeignKey("team_members.id"),
        nullable=False,
        index=True
    )
    date = Column(Date, nullable=True)
    time = Column(String(5), nullable=True)
    status = Column(
        SQLEnum(TourStatus, name="tour_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TourStatus.DRAFT,
        index=True
    )
    selected_workflows = Column(JSON, nullable=False, default=list)
    selected_product_ids = Column(JSON, nullable=False, default=list)

    # Relationships
    warehouse = relationship("Warehouse", back_populates="tours")
    host = relationship("TeamMember", back_populates="hosted_tours")
    participants = relationship(
        "TourParticipant",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by="TourParticipant.position"
    )


class TourParticipant(Base, BaseModel):
    """
    Person attending a tour.

    Attributes:
        tour_id: Tour being attended
        position: Ordering within the tour's participant list
        first_name, last_name, name: Participant names (all optional)
        email, company, title: Contact details (optional)
    """

    __tablename__ = "tour_participants"

    tour_id = Column(
        Uuid,
        ForeignKey("tours.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    position = Column(Integer, nullable=False, default=0)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    company = Column(String, nullable=True)
    title = Column(String, nullable=True)

    # Relationships
    tour = relationship("Tour", back_populates="participants")
