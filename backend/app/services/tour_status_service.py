"""Tour status service: persists tour status transitions."""
import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.tour import Tour, TourStatus
from app.utils.invariants import check_tour_status_transition

logger = logging.getLogger(__name__)


class TourStatusServiceError(Exception):
    """Base exception for tour status service errors."""
    pass


class TourStatusService:
    """
    Writes the tour's status, the only durable state finalization mutates.

    Rules:
    - draft -> finalized is allowed
    - finalized -> finalized is allowed (re-finalization)
    - finalized -> draft is rejected
    """

    def __init__(self, db: Session):
        """
        Initialize tour status service.

        Args:
            db: Database session
        """
        self.db = db

    def set_status(self, tour_id: UUID, status: str) -> None:
        """
        Persist a new status for a tour.

        Args:
            tour_id: Tour ID
            status: Target status ("draft" or "finalized")

        Raises:
            TourStatusServiceError: If the tour is missing, the status is
                unknown, or the write fails
            InvalidTourStatusTransitionError: If the transition is not allowed
        """
        try:
            target = TourStatus(status)
        except ValueError as e:
            raise TourStatusServiceError(f"Unknown tour status: {status!r}") from e

        tour = self.db.query(Tour).filter(Tour.id == tour_id).first()
        if not tour:
            raise TourStatusServiceError(f"Failed to update tour status: tour {tour_id} not found")

        current = tour.status.value if tour.status else TourStatus.DRAFT.value
        check_tour_status_transition(current, target.value)

        tour.status = target
        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            raise TourStatusServiceError(f"Failed to update tour status: {str(e)}") from e

        logger.info("Tour %s status %s -> %s", tour_id, current, target.value)
