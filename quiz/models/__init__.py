"""Quiz Models - Enums, Schemas e maquina de estados."""

from .enums import QuizDifficulty, QuizStatus, Sentiment
from .schemas import (
    NO_ANSWER,
    DifficultyDistribution,
    GenerateQuizRequest,
    HintRequest,
    HintResponse,
    HistoryFilters,
    Mistake,
    PerformanceRecord,
    Quiz,
    QuizAnalytics,
    QuizQuestion,
    QuizResultResponse,
    Submission,
    SubmitQuizRequest,
)
from .state import advance, can_transition, is_terminal

__all__ = [
    # Enums
    "QuizDifficulty",
    "QuizStatus",
    "Sentiment",
    # Dominio
    "NO_ANSWER",
    "QuizQuestion",
    "DifficultyDistribution",
    "Quiz",
    "Mistake",
    "Submission",
    "PerformanceRecord",
    "HistoryFilters",
    # Request/Response
    "GenerateQuizRequest",
    "SubmitQuizRequest",
    "HintRequest",
    "HintResponse",
    "QuizResultResponse",
    "QuizAnalytics",
    # Estado
    "advance",
    "can_transition",
    "is_terminal",
]
