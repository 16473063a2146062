"""TeamMember model (tour hosts)."""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel


class TeamMember(Base, BaseModel):
    """
    Team member who can host tours.

    Attributes:
        first_name: Given name
        last_name: Family name
        name: Optional display name
        email: Contact e-mail
    """

    __tablename__ = "team_members"

    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, nullable=True)

    # Relationships
    hosted_tours = relationship("Tour", back_populates="host")

    @property
    def display_name(self) -> str:
        """Display name, falling back to the full name."""
        if self.name:
            return self.name
        return " ".join(part for part in (self.first_name, self.last_name) if part)
