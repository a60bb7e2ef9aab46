"""API route handlers."""

from .ai import router as ai_router
from .chat import router as chat_router
