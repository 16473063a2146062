"""Warehouse model."""
from sqlalchemy import Column, String, JSON
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel


class Warehouse(Base, BaseModel):
    """
    Warehouse where tours take place.

    Attributes:
        name: Display name
        code: Short internal code
        address: Postal address as JSON (address1, address2, city, state,
            zip, country, phone; extra keys are kept as-is)
        external_warehouse_id: Warehouse identifier in the order-management system
    """

    __tablename__ = "warehouses"

    name = Column(String, nullable=False)
    code = Column(String(20), nullable=True)
    address = Column(JSON, nullable=True)
    external_warehouse_id = Column(String, nullable=False)

    # Relationships
    tours = relationship("Tour", back_populates="warehouse")
