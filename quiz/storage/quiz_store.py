"""Quiz Store - Repositorio tipado sobre o Storage."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError

from core.exceptions import QuizAppError, QuizNotFound, StorageFailure
from core.logger import get_logger

from ..models.enums import QuizStatus
from ..models.schemas import PerformanceRecord, Quiz, Submission
from ..models.state import advance
from .base import Record, Storage

logger = get_logger("quiz_store")


@contextmanager
def _storage_errors(operation: str, **details: Any) -> Iterator[None]:
    """Converte erros do backend em StorageFailure.

    Erros de dominio (QuizAppError) passam intactos.
    """
    try:
        yield
    except QuizAppError:
        raise
    except (ValidationError, ValueError, TypeError, KeyError) as e:
        logger.error(f"Registro corrompido em {operation}: {e}")
        raise StorageFailure(
            message=f"Registro invalido em {operation}", details={**details, "error": str(e)}
        ) from e
    except Exception as e:
        logger.error(f"Falha de storage em {operation}: {e}")
        raise StorageFailure(
            message=f"Falha de storage em {operation}", details={**details, "error": str(e)}
        ) from e


class QuizStore:
    """Persistencia de quizzes, submissoes e agregados de desempenho.

    Colecoes:
        - quizzes: {quiz_id} -> Quiz
        - submissions: {submission_id} -> Submission
        - performance: {user_id}:{subject}:{grade_level} -> PerformanceRecord

    Example:
        >>> store = QuizStore(InMemoryStorage())
        >>> await store.save_quiz(quiz)
        >>> loaded = await store.load_quiz(quiz.id)
    """

    QUIZZES = "quizzes"
    SUBMISSIONS = "submissions"
    PERFORMANCE = "performance"

    def __init__(self, storage: Storage):
        """Inicializa store.

        Args:
            storage: Backend que implementa o contrato Storage
        """
        self.storage = storage

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    async def save_quiz(self, quiz: Quiz) -> None:
        """Persiste quiz completo."""
        with _storage_errors("save_quiz", quiz_id=quiz.id):
            await self.storage.put(self.QUIZZES, quiz.id, quiz.model_dump(mode="json"))
        logger.debug(f"Quiz salvo: {quiz.id}")

    async def load_quiz(self, quiz_id: str) -> Quiz | None:
        """Carrega quiz ou None."""
        with _storage_errors("load_quiz", quiz_id=quiz_id):
            data = await self.storage.get(self.QUIZZES, quiz_id)
            if not data:
                logger.debug(f"Quiz nao encontrado: {quiz_id}")
                return None
            return Quiz.model_validate(data)

    async def transition_quiz(self, quiz_id: str, target: QuizStatus) -> Quiz:
        """Move o quiz para ``target`` de forma atomica.

        Raises:
            QuizNotFound: Quiz inexistente
            QuizStateError: Transicao nao permitida
        """

        def merge(current: Record | None) -> Record:
            if current is None:
                raise QuizNotFound(message=f"Quiz {quiz_id} nao encontrado")
            status = QuizStatus(current.get("status", QuizStatus.GENERATED.value))
            current["status"] = advance(status, target, quiz_id).value
            return current

        with _storage_errors("transition_quiz", quiz_id=quiz_id, target=target.value):
            data = await self.storage.upsert_with_merge(self.QUIZZES, quiz_id, merge)
            return Quiz.model_validate(data)

    # -------------------------------------------------------------------------
    # Submissoes
    # -------------------------------------------------------------------------

    async def save_submission(self, submission: Submission) -> None:
        """Persiste submissao."""
        with _storage_errors("save_submission", submission_id=submission.id):
            await self.storage.put(
                self.SUBMISSIONS, submission.id, submission.model_dump(mode="json")
            )
        logger.debug(f"Submissao salva: {submission.id}")

    async def list_submissions(
        self,
        user_id: int,
        predicate: Callable[[Submission], bool] | None = None,
    ) -> list[Submission]:
        """Lista submissoes de um usuario (sem ordem garantida)."""
        with _storage_errors("list_submissions", user_id=user_id):
            rows = await self.storage.query(
                self.SUBMISSIONS, lambda r: r.get("user_id") == user_id
            )
            submissions = [Submission.model_validate(r) for r in rows]
        if predicate is None:
            return submissions
        return [s for s in submissions if predicate(s)]

    # -------------------------------------------------------------------------
    # Desempenho
    # -------------------------------------------------------------------------

    async def load_performance(
        self, user_id: int, subject: str, grade_level: str
    ) -> PerformanceRecord | None:
        """Carrega agregado de desempenho ou None."""
        key = PerformanceRecord.make_key(user_id, subject, grade_level)
        with _storage_errors("load_performance", key=key):
            data = await self.storage.get(self.PERFORMANCE, key)
            return PerformanceRecord.model_validate(data) if data else None

    async def merge_performance(
        self,
        user_id: int,
        subject: str,
        grade_level: str,
        merge: Callable[[PerformanceRecord | None], PerformanceRecord],
    ) -> PerformanceRecord:
        """Upsert atomico do agregado de desempenho."""
        key = PerformanceRecord.make_key(user_id, subject, grade_level)

        def merge_record(current: Record | None) -> Record:
            existing = PerformanceRecord.model_validate(current) if current else None
            return merge(existing).model_dump(mode="json")

        with _storage_errors("merge_performance", key=key):
            data = await self.storage.upsert_with_merge(self.PERFORMANCE, key, merge_record)
            return PerformanceRecord.model_validate(data)

    async def list_performance(self, user_id: int) -> list[PerformanceRecord]:
        """Lista agregados de um usuario."""
        with _storage_errors("list_performance", user_id=user_id):
            rows = await self.storage.query(
                self.PERFORMANCE, lambda r: r.get("user_id") == user_id
            )
            return [PerformanceRecord.model_validate(r) for r in rows]
