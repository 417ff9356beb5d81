"""Quiz Prompts - Templates e fallbacks."""

from .templates import (
    FALLBACK_DIFFICULTY_CYCLE,
    FALLBACK_EXPLANATION,
    FALLBACK_OPTIONS,
    FALLBACK_TIPS,
    HINT_FALLBACK,
    HINT_PROMPT,
    HINT_SYSTEM_PROMPT,
    QUIZ_GENERATION_PROMPT,
    QUIZ_SYSTEM_PROMPT,
    TIPS_PROMPT,
    TIPS_SYSTEM_PROMPT,
    format_mistakes,
)

__all__ = [
    "QUIZ_SYSTEM_PROMPT",
    "QUIZ_GENERATION_PROMPT",
    "HINT_SYSTEM_PROMPT",
    "HINT_PROMPT",
    "HINT_FALLBACK",
    "TIPS_SYSTEM_PROMPT",
    "TIPS_PROMPT",
    "FALLBACK_TIPS",
    "FALLBACK_OPTIONS",
    "FALLBACK_EXPLANATION",
    "FALLBACK_DIFFICULTY_CYCLE",
    "format_mistakes",
]
