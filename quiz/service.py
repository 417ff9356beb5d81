"""Quiz Service - Operacoes expostas aos chamadores (independente de transporte)."""

from collections import Counter
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from core.config import QuizAppConfig, get_config
from core.exceptions import GenerationFailed, InvalidQuizRequest, QuizNotFound, QuotaExceeded
from core.logger import get_logger

from .engine.difficulty_engine import DifficultyModel
from .engine.performance_engine import PerformanceAggregator
from .engine.quiz_engine import QuizEngine
from .engine.scoring_engine import QuizScoringEngine
from .llm.client import GenerationClient
from .models.enums import QuizStatus
from .models.schemas import (
    HistoryFilters,
    PerformanceRecord,
    Quiz,
    QuizAnalytics,
    Submission,
    utcnow,
)
from .prompts import HINT_FALLBACK, HINT_PROMPT, HINT_SYSTEM_PROMPT
from .storage.base import Storage
from .storage.quiz_store import QuizStore

logger = get_logger("quiz_service")


class QuizService:
    """Fachada do core de quiz.

    Compoe DifficultyModel, QuizEngine, QuizScoringEngine e
    PerformanceAggregator sobre um unico handle de storage injetado.

    Example:
        >>> service = QuizService(InMemoryStorage(), generation)
        >>> quiz = await service.create_quiz(42, "Math", "5", "Fractions", 5)
        >>> result = await service.submit_quiz(quiz.id, 42, [0, 1, 2, 3, 0])
        >>> history = await service.get_quiz_history(42, HistoryFilters(subject="Math"))
    """

    HINT_TEMPERATURE = 0.7
    HINT_MAX_TOKENS = 200
    ANALYTICS_HISTORY_LIMIT = 50

    def __init__(
        self,
        storage: Storage,
        generation: GenerationClient,
        config: QuizAppConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.config = config or get_config()
        self.store = QuizStore(storage)
        self.generation = generation
        self.difficulty = DifficultyModel()
        self.aggregator = PerformanceAggregator(self.store, clock=clock)
        self.quiz_engine = QuizEngine(self.store, generation, self.difficulty, clock=clock)
        self.scoring = QuizScoringEngine(self.store, generation, self.aggregator, clock=clock)

    # -------------------------------------------------------------------------
    # Quiz
    # -------------------------------------------------------------------------

    async def create_quiz(
        self,
        user_id: int,
        subject: str,
        grade_level: str,
        topic: str,
        num_questions: int | None = None,
    ) -> Quiz:
        """Cria quiz adaptativo com exatamente ``num_questions`` questoes.

        Nunca falha por causa da geracao (retorna fallback).

        Raises:
            InvalidQuizRequest: Tamanho fora de 1..max_num_questions
        """
        requested = (
            self.config.default_num_questions if num_questions is None else num_questions
        )
        if not 1 <= requested <= self.config.max_num_questions:
            raise InvalidQuizRequest(
                message=(
                    f"num_questions deve estar entre 1 e {self.config.max_num_questions}"
                ),
                details={
                    "num_questions": requested,
                    "max_num_questions": self.config.max_num_questions,
                },
            )

        return await self.quiz_engine.create_quiz(user_id, subject, grade_level, topic, requested)

    async def submit_quiz(
        self, quiz_id: str, user_id: int, answers: Sequence[int | None]
    ) -> Submission:
        """Corrige respostas e atualiza desempenho."""
        return await self.scoring.submit(quiz_id, user_id, answers)

    async def get_quiz(self, quiz_id: str, user_id: int) -> Quiz:
        """Busca quiz do usuario.

        Raises:
            QuizNotFound: Inexistente ou de outro usuario
        """
        quiz = await self.store.load_quiz(quiz_id)
        if quiz is None or quiz.owner_id != user_id:
            raise QuizNotFound(
                message=f"Quiz {quiz_id} nao encontrado", details={"quiz_id": quiz_id}
            )
        return quiz

    async def abandon_quiz(self, quiz_id: str, user_id: int) -> Quiz:
        """Marca quiz gerado e nao respondido como abandonado."""
        await self.get_quiz(quiz_id, user_id)
        quiz = await self.store.transition_quiz(quiz_id, QuizStatus.ABANDONED)
        logger.info(f"Quiz {quiz_id} abandonado")
        return quiz

    async def get_quiz_history(
        self, user_id: int, filters: HistoryFilters | None = None
    ) -> list[Submission]:
        """Historico de submissoes, mais recentes primeiro.

        Empates em ``completed_at`` sao ordenados pelo id, entao chamadas
        repetidas sem novas submissoes retornam a mesma sequencia.
        """
        filters = filters or HistoryFilters()
        submissions = await self.store.list_submissions(user_id, filters.matches)
        return sorted(submissions, key=lambda s: (s.completed_at, s.id), reverse=True)

    async def get_performance(self, user_id: int) -> list[PerformanceRecord]:
        """Agregados de desempenho do usuario."""
        return await self.aggregator.list_for_user(user_id)

    async def get_analytics(self, user_id: int) -> QuizAnalytics:
        """Metricas do painel calculadas a partir das submissoes.

        - ``global_accuracy``: soma dos acertos / soma das questoes (0-100, 1 casa)
          sobre as ultimas ``ANALYTICS_HISTORY_LIMIT`` submissoes
        - ``active_subject``: materia mais frequente (maiusculas), ``N/A`` sem dados
        - ``study_days``: datas UTC distintas com submissao
        """
        submissions = await self.get_quiz_history(user_id)
        recent = submissions[: self.ANALYTICS_HISTORY_LIMIT]

        total_questions = sum(s.total_questions for s in recent)
        total_correct = sum(s.score for s in recent)
        accuracy = round(total_correct / total_questions * 100, 1) if total_questions else 0.0

        subject_counts = Counter((s.subject or "General").upper() for s in recent)
        # Empate: a primeira materia encontrada (mais recente) vence
        active_subject = subject_counts.most_common(1)[0][0] if subject_counts else "N/A"

        study_days = {s.completed_at.astimezone(timezone.utc).date() for s in recent}

        return QuizAnalytics(
            total_quizzes=len(submissions),
            global_accuracy=accuracy,
            active_subject=active_subject,
            study_days=len(study_days),
            history=recent,
        )

    # -------------------------------------------------------------------------
    # Dicas
    # -------------------------------------------------------------------------

    async def get_hint(self, question_text: str, subject: str) -> str:
        """Dica que orienta sem revelar a resposta."""
        prompt = HINT_PROMPT.format(question=question_text, subject=subject)
        try:
            text = await self.generation.generate(
                HINT_SYSTEM_PROMPT,
                prompt,
                temperature=self.HINT_TEMPERATURE,
                max_tokens=self.HINT_MAX_TOKENS,
                json_mode=False,
            )
        except (QuotaExceeded, GenerationFailed) as e:
            logger.warning(f"Dica de fallback ({type(e).__name__})")
            return HINT_FALLBACK

        return text.strip() or HINT_FALLBACK

    async def get_question_hint(self, quiz_id: str, user_id: int, index: int) -> str:
        """Dica para a questao ``index`` (0-based) de um quiz.

        Raises:
            QuizNotFound: Quiz inexistente ou indice fora do quiz
        """
        quiz = await self.get_quiz(quiz_id, user_id)
        if not 0 <= index < quiz.total_questions:
            raise QuizNotFound(
                message=f"Questao {index} nao existe no quiz {quiz_id}",
                details={"quiz_id": quiz_id, "index": index},
            )
        return await self.get_hint(quiz.questions[index].text, quiz.subject)
