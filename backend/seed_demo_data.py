"""
Demo Seed Data Script

Creates a demo warehouse, a host and two draft tours:
- Participant tour (three guests, pack-to-light + bulk shipping)
- Walk-in tour (no participants, every workflow)
"""

import uuid
from datetime import date, timedelta

from sqlalchemy.orm import Session

from app.database import Base, SessionLocal, engine
from app.models import TeamMember, Tour, TourParticipant, Warehouse

DEMO_PRODUCT_IDS = ["DEMO-TSHIRT-M", "DEMO-MUG-11OZ", "DEMO-HOODIE-L", "DEMO-CAP", "DEMO-SOCKS", "DEMO-TOTE"]


def clear_all_data(db: Session):
    """Clear all existing data (for demo purposes only)"""
    print("Clearing existing data...")
    db.query(TourParticipant).delete()
    db.query(Tour).delete()
    db.query(TeamMember).delete()
    db.query(Warehouse).delete()
    db.commit()
    print("✓ Data cleared")


def create_demo_tours(db: Session):
    """Create the warehouse, host and tours."""
    print("\nCreating demo warehouse and host...")

    warehouse = Warehouse(
        id=uuid.UUID("22222222-1111-1111-1111-111111111111"),
        name="Reno Fulfillment Center",
        code="RNO",
        address={
            "address1": "500 Logistics Way",
            "city": "Reno",
            "state": "NV",
            "zip": "89502",
            "country": "US",
            "phone": "775-555-0100",
        },
        external_warehouse_id="V2FyZWhvdXNlOjEyMzQ=",
    )
    host = TeamMember(
        id=uuid.UUID("22222222-2222-1111-1111-111111111111"),
        first_name="Jordan",
        last_name="Lee",
        email="jordan.lee@example.com",
    )
    db.add_all([warehouse, host])
    db.flush()

    participant_tour = Tour(
        id=uuid.UUID("22222222-3333-1111-1111-111111111111"),
        warehouse_id=warehouse.id,
        host_id=host.id,
        date=date.today() + timedelta(days=7),
        time="10:00",
        selected_workflows=["pack_to_light", "bulk_shipping"],
        selected_product_ids=DEMO_PRODUCT_IDS[:3],
    )
    db.add(participant_tour)
    db.flush()

    guests = [
        ("Priya", "Natarajan", "Acme Outfitters", "VP Operations"),
        ("Tomás", "Herrera", "Acme Outfitters", "Warehouse Manager"),
        ("Mei", "Tanaka", "Northwind Goods", "COO"),
    ]
    for position, (first, last, company, title) in enumerate(guests):
        db.add(TourParticipant(
            tour_id=participant_tour.id,
            position=position,
            first_name=first,
            last_name=last,
            email=f"{first.lower()}.{last.lower()}@example.com",
            company=company,
            title=title,
        ))

    walk_in_tour = Tour(
        id=uuid.UUID("22222222-4444-1111-1111-111111111111"),
        warehouse_id=warehouse.id,
        host_id=host.id,
        date=date.today() + timedelta(days=14),
        time="14:00",
        selected_workflows=[
            "receive_to_light",
            "pack_to_light",
            "standard_receiving",
            "bulk_shipping",
            "single_item_batch",
            "multi_item_batch",
        ],
        selected_product_ids=DEMO_PRODUCT_IDS,
    )
    db.add(walk_in_tour)
    db.commit()

    print(f"✓ Participant tour created: {participant_tour.id}")
    print(f"✓ Walk-in tour created: {walk_in_tour.id}")


def main():
    """Run the complete demo data seeding"""
    print("=" * 60)
    print("Warehouse Tour Backend - Demo Data Seeder")
    print("=" * 60)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        clear_all_data(db)
        create_demo_tours(db)

        print("\nNext Steps:")
        print("  - Set ORDER_API_REFRESH_TOKEN")
        print("  - python finalize_tour.py <tour id>")
        print("=" * 60)

    except Exception as e:
        print(f"\n❌ Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == '__main__':
    main()
