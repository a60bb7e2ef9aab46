#!/usr/bin/env python3
"""
SkillConnect AI - FastAPI Application

AI-assisted matching and enrichment API for the SkillConnect marketplace.

Usage:
    uv run python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from core.errors import AIServiceError
from .config import get_config
from .exceptions import (
    ServiceException,
    service_exception_handler,
    ai_service_exception_handler,
    request_validation_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import ai_router, chat_router
from .routers.ai import add_rate_limit_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create the FastAPI app with handlers and routers registered."""
    app = FastAPI(
        title="SkillConnect AI API",
        description="AI-assisted job matching, skill analysis and chat for skilled workers and employers",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    add_rate_limit_handlers(app)

    app.add_exception_handler(AIServiceError, ai_service_exception_handler)
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(ai_router)
    app.include_router(chat_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "skillconnect-ai"}

    return app


app = create_app()


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    logger.info(f"Starting SkillConnect AI server on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
