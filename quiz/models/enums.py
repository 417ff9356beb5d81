"""Quiz Enums - Dificuldade, ciclo de vida e sentimento."""

from enum import Enum


class QuizDifficulty(str, Enum):
    """Niveis de dificuldade das questoes."""

    EASY = "easy"  # Conceitos basicos
    MEDIUM = "medium"  # Aplicacao direta
    HARD = "hard"  # Nuances e raciocinio em varias etapas


class QuizStatus(str, Enum):
    """Estados do ciclo de vida de um quiz."""

    REQUESTED = "requested"
    GENERATED = "generated"
    SUBMITTED = "submitted"
    GRADED = "graded"
    ABANDONED = "abandoned"


class Sentiment(str, Enum):
    """Sentimento de uma nota."""

    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"
