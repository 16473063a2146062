"""
Models Package

Imports all SQLAlchemy models for application use.
"""

from app.models.base import BaseModel
from app.models.warehouse import Warehouse
from app.models.team_member import TeamMember
from app.models.tour import Tour, TourParticipant, TourStatus

__all__ = [
    'BaseModel',
    'Warehouse',
    'TeamMember',
    'Tour',
    'TourParticipant',
    'TourStatus',
]
