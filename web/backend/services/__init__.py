"""Business logic services."""

from .ai_service import AIFeatureService, join_worker_matches
