"""Quiz Scoring Engine - Correcao, erros, dicas e atualizacao de desempenho."""

import re
import uuid
from collections.abc import Callable, Sequence
from datetime import datetime

from core.exceptions import GenerationFailed, QuizAppError, QuizNotFound, QuotaExceeded
from core.logger import get_logger

from ..llm.client import GenerationClient
from ..models.enums import QuizDifficulty, QuizStatus
from ..models.schemas import NO_ANSWER, Mistake, QuizQuestion, Submission, utcnow
from ..prompts import FALLBACK_TIPS, TIPS_PROMPT, TIPS_SYSTEM_PROMPT, format_mistakes
from ..storage.quiz_store import QuizStore
from .performance_engine import PerformanceAggregator

logger = get_logger("scoring_engine")

# "1. ", "2) ", "- ", "* ", "• "
_LIST_MARKER_RE = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s+")


def _new_id() -> str:
    return uuid.uuid4().hex


class QuizScoringEngine:
    """Motor de correcao de quizzes.

    Fluxo de ``submit``:
        1. Carrega o quiz (QuizNotFound se inexistente ou de outro usuario)
        2. Reserva o quiz (generated -> submitted, atomico)
        3. Corrige na ordem das questoes e extrai erros
        4. Pede 2 dicas de melhoria se houver erros (fallback fixo)
        5. Persiste a Submission e marca o quiz como graded
        6. Atualiza o PerformanceRecord

    Example:
        >>> engine = QuizScoringEngine(store, generation, aggregator)
        >>> submission = await engine.submit(quiz.id, 42, [0, 2, None, 1, 3])
        >>> submission.percentage_score
        40.0
    """

    TIPS_TEMPERATURE = 0.7
    TIPS_MAX_TOKENS = 500
    MAX_TIPS = 2

    def __init__(
        self,
        store: QuizStore,
        generation: GenerationClient,
        aggregator: PerformanceAggregator,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.generation = generation
        self.aggregator = aggregator
        self._new_id = id_factory
        self._clock = clock

    # -------------------------------------------------------------------------
    # Correcao (funcoes puras)
    # -------------------------------------------------------------------------

    @staticmethod
    def normalize_answers(
        answers: Sequence[int | None], total_questions: int
    ) -> list[int | None]:
        """Alinha respostas ao numero de questoes (faltantes = None)."""
        aligned = list(answers[:total_questions])
        aligned.extend([None] * (total_questions - len(aligned)))
        return aligned

    @staticmethod
    def grade(
        questions: Sequence[QuizQuestion], answers: Sequence[int | None]
    ) -> tuple[int, list[Mistake]]:
        """Corrige respostas alinhadas por indice.

        Args:
            questions: Questoes do quiz
            answers: Indice escolhido por questao (None = sem resposta)

        Returns:
            Tuple de (acertos, erros)
        """
        score = 0
        mistakes: list[Mistake] = []

        for index, question in enumerate(questions):
            answer = answers[index] if index < len(answers) else None
            if answer is not None and answer == question.correct_answer_index:
                score += 1
                continue

            if answer is not None and 0 <= answer < len(question.options):
                user_answer = question.options[answer]
            else:
                user_answer = NO_ANSWER

            mistakes.append(
                Mistake(
                    question=question.text,
                    user_answer=user_answer,
                    correct_answer=question.correct_option,
                    explanation=question.explanation,
                )
            )

        return score, mistakes

    @staticmethod
    def percentage(score: int, total_questions: int) -> float:
        """Percentual de acerto com 2 casas decimais."""
        if total_questions <= 0:
            return 0.0
        return round(score / total_questions * 100, 2)

    @staticmethod
    def calculate_breakdown(
        questions: Sequence[QuizQuestion], answers: Sequence[int | None]
    ) -> dict[str, dict[str, int]]:
        """Acertos/total por dificuldade."""
        breakdown = {d.value: {"correct": 0, "total": 0} for d in QuizDifficulty}

        for index, question in enumerate(questions):
            answer = answers[index] if index < len(answers) else None
            bucket = breakdown[question.difficulty.value]
            bucket["total"] += 1
            if answer is not None and answer == question.correct_answer_index:
                bucket["correct"] += 1

        return breakdown

    # -------------------------------------------------------------------------
    # Dicas
    # -------------------------------------------------------------------------

    @classmethod
    def parse_tips(cls, text: str) -> list[str]:
        """Uma dica por linha, sem marcadores de lista, no maximo 2."""
        tips = [_LIST_MARKER_RE.sub("", line).strip() for line in (text or "").splitlines()]
        return [tip for tip in tips if tip][: cls.MAX_TIPS]

    async def generate_tips(self, mistakes: Sequence[Mistake], subject: str) -> list[str]:
        """Pede dicas de melhoria; falha de geracao retorna dicas fixas."""
        if not mistakes:
            return []

        prompt = TIPS_PROMPT.format(subject=subject, mistakes=format_mistakes(mistakes))
        try:
            text = await self.generation.generate(
                TIPS_SYSTEM_PROMPT,
                prompt,
                temperature=self.TIPS_TEMPERATURE,
                max_tokens=self.TIPS_MAX_TOKENS,
                json_mode=False,
            )
        except (QuotaExceeded, GenerationFailed) as e:
            logger.warning(f"Dicas de fallback ({type(e).__name__})")
            return list(FALLBACK_TIPS)

        tips = self.parse_tips(text)
        if not tips:
            logger.warning("Resposta de dicas vazia, usando fallback")
            return list(FALLBACK_TIPS)
        return tips

    # -------------------------------------------------------------------------
    # Submissao
    # -------------------------------------------------------------------------

    async def submit(
        self, quiz_id: str, user_id: int, answers: Sequence[int | None]
    ) -> Submission:
        """Corrige e registra uma submissao.

        Raises:
            QuizNotFound: Quiz inexistente ou de outro usuario
            QuizStateError: Quiz ja corrigido ou abandonado
            StorageFailure: Falha de persistencia
        """
        quiz = await self.store.load_quiz(quiz_id)
        if quiz is None or quiz.owner_id != user_id:
            raise QuizNotFound(
                message=f"Quiz {quiz_id} nao encontrado", details={"quiz_id": quiz_id}
            )

        await self.store.transition_quiz(quiz_id, QuizStatus.SUBMITTED)

        try:
            aligned = self.normalize_answers(answers, quiz.total_questions)
            score, mistakes = self.grade(quiz.questions, aligned)
            tips = await self.generate_tips(mistakes, quiz.subject or "General")

            submission = Submission(
                id=self._new_id(),
                quiz_id=quiz.id,
                user_id=user_id,
                answers=aligned,
                score=score,
                total_questions=quiz.total_questions,
                percentage_score=self.percentage(score, quiz.total_questions),
                mistakes=mistakes,
                improvement_tips=tips,
                quiz_title=quiz.title,
                subject=quiz.subject,
                grade_level=quiz.grade_level,
                completed_at=self._clock(),
            )
            await self.store.save_submission(submission)
        except BaseException:
            await self._release(quiz_id)
            raise

        try:
            await self.aggregator.update(
                user_id, quiz.subject, quiz.grade_level, submission.percentage_score
            )
        finally:
            # Submissao ja persistida: o quiz fica graded mesmo se o agregado falhar
            await self.store.transition_quiz(quiz_id, QuizStatus.GRADED)

        logger.info(
            f"Quiz {quiz_id} corrigido: {score}/{quiz.total_questions} "
            f"({submission.percentage_score}%)"
        )
        return submission

    async def _release(self, quiz_id: str) -> None:
        # Devolve o quiz para generated quando a correcao nao chegou a persistir
        try:
            await self.store.transition_quiz(quiz_id, QuizStatus.GENERATED)
        except QuizAppError as e:
            logger.error(f"Nao foi possivel liberar quiz {quiz_id}: {e.message}")
