"""Quiz Module - Quizzes adaptativos com geracao por IA.

Arquitetura:
- models/: Enums, Schemas Pydantic, maquina de estados
- llm/: GenerationClient (retry/backoff), endpoint Anthropic, extracao de JSON
- engine/: DifficultyModel, QuizEngine, QuizScoringEngine, PerformanceAggregator
- storage/: contrato Storage, backends (memoria, AgentFS) e QuizStore
- prompts/: Templates de prompts e fallbacks
- service.py: QuizService (operacoes expostas)
- router.py: FastAPI endpoints
"""

from .engine import DifficultyModel, PerformanceAggregator, QuizEngine, QuizScoringEngine
from .llm import GenerationClient, LLMClientFactory, RetryPolicy, extract_json
from .models import (
    DifficultyDistribution,
    HistoryFilters,
    Mistake,
    PerformanceRecord,
    Quiz,
    QuizDifficulty,
    QuizQuestion,
    QuizStatus,
    Submission,
)
from .service import QuizService
from .storage import AgentFSStorage, InMemoryStorage, QuizStore, Storage

__all__ = [
    # Models
    "QuizDifficulty",
    "QuizStatus",
    "QuizQuestion",
    "DifficultyDistribution",
    "Quiz",
    "Mistake",
    "Submission",
    "PerformanceRecord",
    "HistoryFilters",
    # Engines
    "DifficultyModel",
    "QuizEngine",
    "QuizScoringEngine",
    "PerformanceAggregator",
    # LLM
    "GenerationClient",
    "RetryPolicy",
    "LLMClientFactory",
    "extract_json",
    # Storage
    "Storage",
    "InMemoryStorage",
    "AgentFSStorage",
    "QuizStore",
    # Service
    "QuizService",
]
