from database.repositories.base import BaseRepository
from database.repositories.worker import WorkerRepository
from database.repositories.job import JobRepository

__all__ = [
    'BaseRepository',
    'WorkerRepository',
    'JobRepository',
]
