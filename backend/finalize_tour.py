"""
Tour Finalization Script

Finalizes one tour against the configured order-management API and prints
the result.

Usage:
    python finalize_tour.py TOUR_ID [WORKFLOW ...]

    Without workflows, the tour's stored selection is used.
    Pass --preview to print the instruction guide without finalizing.
"""

import asyncio
import json
import logging
import sys
from datetime import datetime
from uuid import UUID

from app.clients import OrderManagementClient
from app.config import configure_logging
from app.database import SessionLocal
from app.orchestrators import TourFinalizationOrchestrator
from app.services import InstructionGuideGenerator, TourDataLoader, TourDataLoaderError

logger = logging.getLogger(__name__)


def preview(db, tour_id: UUID) -> int:
    """Print the instruction guide for the tour's stored selection. No API client is opened."""
    try:
        tour = TourDataLoader(db).load(tour_id)
    except TourDataLoaderError as e:
        print(f"Guide preview failed: {str(e)}")
        return 1
    print(InstructionGuideGenerator().render(tour, generated_at=datetime.now()))
    return 0


async def run_finalization(db, client, tour_id: UUID, workflows) -> int:
    if not workflows:
        try:
            workflows = TourDataLoader(db).load(tour_id).selected_workflows
        except TourDataLoaderError as e:
            print(f"Tour finalization failed: {str(e)}")
            return 1

    result = await TourFinalizationOrchestrator(db, client).finalize(tour_id, workflows)
    print(json.dumps(result.to_dict(), indent=2, default=str))
    return 0 if result.success else 1


async def finalize(tour_id: UUID, workflows, preview_only: bool) -> int:
    db = SessionLocal()
    try:
        if preview_only:
            return preview(db, tour_id)
        async with OrderManagementClient() as client:
            return await run_finalization(db, client, tour_id, workflows)
    finally:
        db.close()


def main() -> int:
    args = [arg for arg in sys.argv[1:] if arg != "--preview"]
    if not args:
        print(__doc__)
        return 2

    configure_logging()
    tour_id = UUID(args[0])
    logger.info("Running finalization for tour %s", tour_id)
    return asyncio.run(finalize(tour_id, args[1:], "--preview" in sys.argv))


if __name__ == '__main__':
    sys.exit(main())
