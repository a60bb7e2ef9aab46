#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests run without network access or an API key:

    # Run all tests
    uv run python -m pytest tests/ -v

    # Using unittest for the TestCase-based modules
    uv run python -m unittest discover tests -v

The completion provider is replaced by tests.mocks.llm_mocks.ScriptedLLMProvider
and the worker/job store by an in-memory SQLite database.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

TEST_DB_URL = "sqlite://"


def create_test_engine() -> Engine:
    """In-memory SQLite engine shared by every connection (and thread) of a test."""
    from database.models import Base

    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine
