"""Shared columns for all persisted models."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Uuid


class BaseModel:
    """
    Mixin providing a UUID primary key and audit timestamps.

    Attributes:
        id: Primary key
        created_at: Row creation time (UTC)
        updated_at: Last modification time (UTC)
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )
