"""Quiz Engine - Montagem de quizzes adaptativos com fallback deterministico."""

import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from core.exceptions import GenerationFailed, QuestionValidationError, QuotaExceeded
from core.logger import get_logger

from ..llm.client import GenerationClient
from ..llm.json_utils import extract_json
from ..models.enums import QuizStatus
from ..models.schemas import DifficultyDistribution, Quiz, QuizQuestion, utcnow
from ..models.state import advance
from ..prompts import (
    FALLBACK_DIFFICULTY_CYCLE,
    FALLBACK_EXPLANATION,
    FALLBACK_OPTIONS,
    QUIZ_GENERATION_PROMPT,
    QUIZ_SYSTEM_PROMPT,
)
from ..storage.quiz_store import QuizStore
from .difficulty_engine import DifficultyModel

logger = get_logger("quiz_engine")


def _new_id() -> str:
    return uuid.uuid4().hex


class QuizEngine:
    """Monta quizzes: desempenho -> distribuicao -> geracao -> validacao.

    Falhas de geracao (QuotaExceeded, GenerationFailed) e respostas
    invalidas viram um quiz de fallback marcado com ``is_fallback``.
    Apenas falhas de storage propagam.

    Example:
        >>> engine = QuizEngine(store, generation)
        >>> quiz = await engine.create_quiz(42, "Math", "5", "Fractions", 5)
        >>> quiz.difficulty_distribution
        DifficultyDistribution(easy=2, medium=2, hard=1)
    """

    GENERATION_TEMPERATURE = 0.7
    GENERATION_MAX_TOKENS = 4096

    def __init__(
        self,
        store: QuizStore,
        generation: GenerationClient,
        difficulty: DifficultyModel | None = None,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Inicializa engine.

        Args:
            store: Repositorio de quizzes/desempenho
            generation: Cliente de geracao
            difficulty: Modelo de dificuldade (default: DifficultyModel())
            id_factory: Gerador de IDs de quiz
            clock: Relogio (testes)
        """
        self.store = store
        self.generation = generation
        self.difficulty = difficulty or DifficultyModel()
        self._new_id = id_factory
        self._clock = clock

    async def create_quiz(
        self,
        user_id: int,
        subject: str,
        grade_level: str,
        topic: str,
        num_questions: int,
    ) -> Quiz:
        """Gera, valida e persiste um quiz.

        Args:
            user_id: Dono do quiz
            subject: Materia
            grade_level: Serie/ano
            topic: Topico
            num_questions: Quantidade de questoes

        Returns:
            Quiz persistido (``is_fallback`` indica servico degradado)

        Raises:
            StorageFailure: Falha ao ler desempenho ou salvar o quiz
        """
        performance = await self.store.load_performance(user_id, subject, grade_level)
        if performance is None:
            average_score, total_quizzes = 0.0, 0
        else:
            average_score, total_quizzes = performance.average_score, performance.total_quizzes

        distribution = self.difficulty.for_quiz(average_score, total_quizzes, num_questions)
        status = QuizStatus.REQUESTED
        logger.info(
            f"Gerando quiz user={user_id} {subject}/{grade_level} '{topic}' "
            f"n={num_questions} dist={distribution.model_dump()}"
        )

        try:
            title, questions = await self._generate_questions(
                subject, grade_level, topic, num_questions, distribution
            )
            is_fallback = False
        except (QuotaExceeded, GenerationFailed, QuestionValidationError) as e:
            logger.warning(f"Usando quiz de fallback ({type(e).__name__}): {e.message}")
            title = None
            questions = self.build_fallback_questions(topic, num_questions)
            is_fallback = True

        quiz = Quiz(
            id=self._new_id(),
            owner_id=user_id,
            title=title or self.default_title(subject, topic),
            subject=subject,
            grade_level=grade_level,
            topic=topic,
            questions=questions,
            difficulty_distribution=distribution,
            is_fallback=is_fallback,
            status=advance(status, QuizStatus.GENERATED),
            created_at=self._clock(),
        )
        await self.store.save_quiz(quiz)
        logger.info(f"Quiz {quiz.id} criado ({len(questions)} questoes, fallback={is_fallback})")
        return quiz

    async def _generate_questions(
        self,
        subject: str,
        grade_level: str,
        topic: str,
        num_questions: int,
        distribution: DifficultyDistribution,
    ) -> tuple[str | None, list[QuizQuestion]]:
        prompt = QUIZ_GENERATION_PROMPT.format(
            num_questions=num_questions,
            topic=topic,
            grade_level=grade_level,
            subject=subject,
            easy_count=distribution.easy,
            medium_count=distribution.medium,
            hard_count=distribution.hard,
        )
        text = await self.generation.generate(
            QUIZ_SYSTEM_PROMPT,
            prompt,
            temperature=self.GENERATION_TEMPERATURE,
            max_tokens=self.GENERATION_MAX_TOKENS,
            json_mode=True,
        )
        return self.parse_questions(extract_json(text, None), num_questions)

    def parse_questions(
        self, data: Any, num_questions: int
    ) -> tuple[str | None, list[QuizQuestion]]:
        """Valida a estrutura retornada pelo modelo.

        Aceita ``{"title": ..., "questions": [...]}`` ou uma lista de
        questoes. Questoes invalidas sao descartadas; excedentes cortadas.

        Raises:
            QuestionValidationError: Estrutura irreconhecivel ou menos
                questoes validas que ``num_questions``
        """
        title: str | None = None
        if isinstance(data, dict):
            raw = data.get("questions")
            if isinstance(data.get("title"), str) and data["title"].strip():
                title = data["title"].strip()
        else:
            raw = data

        if not isinstance(raw, list):
            raise QuestionValidationError(message="Resposta sem lista de questoes")

        valid: list[QuizQuestion] = []
        for index, item in enumerate(raw):
            try:
                valid.append(QuizQuestion.model_validate(item))
            except ValidationError as e:
                logger.debug(f"Questao {index} descartada: {e.error_count()} erro(s)")

        if len(valid) < num_questions:
            raise QuestionValidationError(
                message=f"Apenas {len(valid)} questoes validas de {num_questions}",
                details={"received": len(raw), "valid": len(valid), "requested": num_questions},
            )

        return title, valid[:num_questions]

    @staticmethod
    def build_fallback_questions(topic: str, num_questions: int) -> list[QuizQuestion]:
        """Quiz deterministico: dificuldade em round-robin, resposta sempre 0."""
        cycle = FALLBACK_DIFFICULTY_CYCLE
        return [
            QuizQuestion(
                text=f"Sample question {i + 1} on {topic}",
                options=list(FALLBACK_OPTIONS),
                correct_answer_index=0,
                difficulty=cycle[i % len(cycle)],
                explanation=FALLBACK_EXPLANATION,
            )
            for i in range(num_questions)
        ]

    @staticmethod
    def default_title(subject: str, topic: str) -> str:
        return f"{subject} Quiz - {topic}"
