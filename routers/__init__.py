"""Routers module for the quiz backend."""

from quiz.router import router as quiz_router

from .notes_ai import router as notes_ai_router

__all__ = [
    "notes_ai_router",
    "quiz_router",
]
