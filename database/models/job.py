import uuid

from sqlalchemy import Column, Integer, Text, JSON, String, Index

from core.ai.models import JobPosting, JobRequirements
from .base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Job(Base):
    """
    Job posting. Read-only to the AI features.
    """
    __tablename__ = 'job'

    id = Column(String(32), primary_key=True, default=_new_id)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Text, nullable=False)  # construction|plumbing|electrical|carpentry|painting|welding|masonry|landscaping|cleaning|other
    skills = Column(JSON, nullable=False, default=list)
    job_type = Column(Text)  # full-time|part-time|contract|temporary

    # Location
    city = Column(Text)
    state = Column(Text)

    # Requirements
    required_experience = Column(Integer, default=0)
    required_education = Column(Text)

    status = Column(Text, nullable=False, default='open')  # open|in-progress|completed|cancelled|closed

    __table_args__ = (
        Index('idx_job_category', 'category'),
    )

    def to_posting(self) -> JobPosting:
        """Convert to the plain posting passed to the AI features."""
        return JobPosting(
            title=self.title,
            description=self.description,
            category=self.category,
            skills=list(self.skills or []),
            requirements=JobRequirements(
                experience=self.required_experience or 0,
                education=self.required_education,
            ),
            location=self.city,
        )
