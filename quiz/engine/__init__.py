"""Quiz Engines - Logica de negocios."""

from .difficulty_engine import DifficultyModel
from .performance_engine import PerformanceAggregator
from .quiz_engine import QuizEngine
from .scoring_engine import QuizScoringEngine

__all__ = ["DifficultyModel", "PerformanceAggregator", "QuizEngine", "QuizScoringEngine"]
