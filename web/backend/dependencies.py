#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from functools import lru_cache
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from core.ai.assistant import AIAssistant
from core.app_context import AppContext
from database.database import create_db_engine, create_session_factory, init_db, session_generator
from .config import get_config
from .services.ai_service import AIFeatureService


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self, url: str):
        self.engine = create_db_engine(url)
        init_db(self.engine)
        self.SessionLocal = create_session_factory(self.engine)

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session.
        """
        yield from session_generator(self.SessionLocal)


@lru_cache()
def get_db_manager() -> DatabaseManager:
    """Process-wide database manager, created on first request."""
    return DatabaseManager(get_config().database.url)


@lru_cache()
def get_app_context() -> AppContext:
    """Process-wide wired services (completion client, assistant, stores)."""
    return AppContext.build(get_config())


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from get_db_manager().get_session()


def get_assistant() -> AIAssistant:
    """FastAPI dependency returning the shared AI assistant."""
    return get_app_context().assistant


def get_ai_feature_service(
    db: Session = Depends(get_db),
    assistant: AIAssistant = Depends(get_assistant),
) -> AIFeatureService:
    """FastAPI dependency building the per-request AI feature service."""
    return AIFeatureService(
        assistant,
        db,
        retry_upstream_once=get_config().llm.retry_upstream_once,
    )
