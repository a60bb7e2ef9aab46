import uuid

from sqlalchemy import Column, Integer, Float, Text, Boolean, JSON, String, Index

from core.ai.models import WorkerProfile
from .base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Worker(Base):
    """
    Worker profile. Read-only to the AI features.
    """
    __tablename__ = 'worker'

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(Text)
    profession = Column(Text, nullable=False)
    skills = Column(JSON, nullable=False, default=list)
    experience = Column(Integer, nullable=False, default=0)  # years
    bio = Column(Text)

    # Location
    city = Column(Text)
    state = Column(Text)

    # Availability
    is_active = Column(Boolean, nullable=False, default=True)
    availability_status = Column(Text, nullable=False, default='available')  # available|busy|unavailable

    # Rating
    rating_average = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)

    hourly_rate = Column(Float)
    preferred_job_types = Column(JSON, nullable=False, default=list)  # full-time|part-time|contract|temporary

    __table_args__ = (
        Index('idx_worker_availability', 'is_active', 'availability_status'),
    )

    def to_profile(self) -> WorkerProfile:
        """Convert to the plain profile passed to the AI features."""
        return WorkerProfile(
            profession=self.profession,
            skills=list(self.skills or []),
            experience=self.experience or 0,
            location=self.city,
            preferences=list(self.preferred_job_types or []),
            hourly_rate=self.hourly_rate,
            rating=self.rating_average,
        )

    def to_summary(self) -> dict:
        """Public candidate record returned alongside AI matches."""
        return {
            'id': self.id,
            'name': self.name,
            'profession': self.profession,
            'skills': list(self.skills or []),
            'experience': self.experience or 0,
            'rating': {'average': self.rating_average or 0.0, 'count': self.rating_count or 0},
            'location': {'city': self.city, 'state': self.state},
            'hourlyRate': self.hourly_rate,
        }
