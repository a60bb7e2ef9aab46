import logging
from typing import Any, List, Optional

from sqlalchemy import select, desc

from database.models import Worker
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

CANDIDATE_LIMIT = 50


class WorkerRepository(BaseRepository):
    def get_by_id(self, worker_id: Any) -> Optional[Worker]:
        stmt = select(Worker).where(Worker.id == worker_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_candidates(self, category: str, limit: int = CANDIDATE_LIMIT) -> List[Worker]:
        """Active, available workers whose profession mentions the job category.

        Best-rated first, so the candidates shown to the model are the strongest.
        """
        stmt = (
            select(Worker)
            .where(
                Worker.profession.icontains(category, autoescape=True),
                Worker.is_active.is_(True),
                Worker.availability_status == 'available',
            )
            .order_by(desc(Worker.rating_average), Worker.id)
            .limit(limit)
        )
        workers = list(self.db.execute(stmt).scalars().all())
        logger.debug(f"Found {len(workers)} candidate worker(s) for category '{category}'")
        return workers
