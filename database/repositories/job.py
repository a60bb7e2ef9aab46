from typing import Any, Optional

from sqlalchemy import select

from database.models import Job
from database.repositories.base import BaseRepository


class JobRepository(BaseRepository):
    def get_by_id(self, job_id: Any) -> Optional[Job]:
        stmt = select(Job).where(Job.id == job_id)
        return self.db.execute(stmt).scalar_one_or_none()
