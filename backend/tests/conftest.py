"""
Shared fixtures: in-memory database, seeded tours and a fake order client.
"""
import os

# Set environment variables FIRST, before any app imports
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import random
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.clients.order_management_client import OrderSubmissionResult
from app.database import Base
from app.models import TeamMember, Tour, TourParticipant, TourStatus, Warehouse

# Setup test database
TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(TEST_DATABASE_URL)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FIXED_NOW = datetime(2024, 5, 1, 9, 30, 0)


def fixed_clock() -> datetime:
    return FIXED_NOW


class FakeOrderClient:
    """
    In-memory stand-in for OrderManagementClient.

    Records every submitted request in submission order. Individual orders
    can be made to fail (``fail_orders``) or raise (``raise_orders``).
    """

    def __init__(
        self,
        fail_orders: Iterable[str] = (),
        raise_orders: Iterable[str] = (),
        fail_all_purchase_orders: bool = False,
        session_error: Optional[Exception] = None,
    ):
        self.fail_orders = set(fail_orders)
        self.raise_orders = set(raise_orders)
        self.fail_all_purchase_orders = fail_all_purchase_orders
        self.session_error = session_error
        self.session_calls = 0
        self.sales_orders = []
        self.purchase_orders = []

    async def acquire_session(self) -> str:
        self.session_calls += 1
        if self.session_error is not None:
            raise self.session_error
        return "test-access-token"

    async def create_sales_order(self, request) -> OrderSubmissionResult:
        self.sales_orders.append(request)
        return self._respond(request.order_number, "order", False)

    async def create_purchase_order(self, request) -> OrderSubmissionResult:
        self.purchase_orders.append(request)
        return self._respond(request.po_number, "purchase_order", self.fail_all_purchase_orders)

    def _respond(self, number: str, kind: str, fail: bool) -> OrderSubmissionResult:
        if number in self.raise_orders:
            raise RuntimeError(f"connection reset while creating {number}")
        if fail or number in self.fail_orders:
            return OrderSubmissionResult.failed(number, "Simulated API rejection")
        return OrderSubmissionResult(
            order_number=number,
            success=True,
            order={"id": f"{kind}-{number}", "fulfillment_status": "pending"},
        )

    @property
    def sales_order_numbers(self):
        return [request.order_number for request in self.sales_orders]

    @property
    def purchase_order_numbers(self):
        return [request.po_number for request in self.purchase_orders]


@pytest.fixture
def db():
    """Create test database session."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def warehouse(db):
    """Create a warehouse with a partial address."""
    warehouse = Warehouse(
        name="Reno Fulfillment Center",
        code="RNO",
        address={"address1": "500 Logistics Way", "city": "Reno", "state": "NV", "zip": "89502"},
        external_warehouse_id="V2FyZWhvdXNlOjEyMzQ=",
    )
    db.add(warehouse)
    db.commit()
    db.refresh(warehouse)
    return warehouse


@pytest.fixture
def host(db):
    """Create a tour host."""
    host = TeamMember(first_name="Jordan", last_name="Lee", email="jordan.lee@example.com")
    db.add(host)
    db.commit()
    db.refresh(host)
    return host


@pytest.fixture
def make_tour(db, warehouse, host):
    """Factory fixture creating a draft tour with N participants."""

    def _make_tour(
        participants: int = 0,
        product_ids: Sequence[str] = ("A", "B", "C"),
        workflows: Sequence[str] = (),
        tour_date: Optional[date] = date(2024, 5, 15),
        status: TourStatus = TourStatus.DRAFT,
    ) -> Tour:
        tour = Tour(
            warehouse_id=warehouse.id,
            host_id=host.id,
            date=tour_date,
            time="10:00",
            status=status,
            selected_workflows=list(workflows),
            selected_product_ids=list(product_ids),
        )
        db.add(tour)
        db.commit()
        db.refresh(tour)

        for i in range(participants):
            db.add(TourParticipant(
                tour_id=tour.id,
                position=i,
                first_name=f"Guest{i + 1}",
                last_name="Visitor",
                email=f"guest{i + 1}@client.example",
                company="Client Co",
            ))
        db.commit()
        return tour

    return _make_tour


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def clock():
    """Clock pinned to FIXED_NOW."""
    return fixed_clock


@pytest.fixture
def order_client_factory():
    """Build FakeOrderClient instances with per-test failure settings."""
    return FakeOrderClient
