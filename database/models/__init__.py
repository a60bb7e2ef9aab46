from .base import Base
from .worker import Worker
from .job import Job

__all__ = [
    'Base',
    'Worker',
    'Job',
]
