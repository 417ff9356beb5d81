"""Performance Aggregator - Media movel de desempenho por usuario/materia/serie."""

from collections.abc import Callable
from datetime import datetime

from core.logger import get_logger

from ..models.schemas import PerformanceRecord, utcnow
from ..storage.quiz_store import QuizStore

logger = get_logger("performance_engine")


class PerformanceAggregator:
    """Unico escritor dos PerformanceRecord.

    Cada atualizacao passa por ``upsert_with_merge`` do storage, que
    serializa por chave: duas submissoes concorrentes nunca leem a mesma
    media anterior.

    Formula:
        nova_media = (media * n + percentual) / (n + 1)
    """

    def __init__(self, store: QuizStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self._clock = clock

    @staticmethod
    def apply(
        current: PerformanceRecord | None,
        user_id: int,
        subject: str,
        grade_level: str,
        percentage_score: float,
        when: datetime,
    ) -> PerformanceRecord:
        """Aplica uma nota ao agregado (funcao pura)."""
        if current is None:
            return PerformanceRecord(
                user_id=user_id,
                subject=subject,
                grade_level=grade_level,
                total_quizzes=1,
                average_score=percentage_score,
                last_quiz_date=when,
            )

        count = current.total_quizzes
        average = (current.average_score * count + percentage_score) / (count + 1)
        return current.model_copy(
            update={
                "total_quizzes": count + 1,
                # Arredondamento de float pode passar de 100 por epsilon
                "average_score": min(100.0, max(0.0, average)),
                "last_quiz_date": when,
            }
        )

    async def update(
        self, user_id: int, subject: str, grade_level: str, percentage_score: float
    ) -> PerformanceRecord:
        """Registra uma nova nota.

        Raises:
            StorageFailure: Falha na persistencia
        """
        when = self._clock()
        record = await self.store.merge_performance(
            user_id,
            subject,
            grade_level,
            lambda current: self.apply(
                current, user_id, subject, grade_level, percentage_score, when
            ),
        )
        logger.info(
            f"Desempenho atualizado {record.key}: "
            f"n={record.total_quizzes} media={record.average_score:.2f}"
        )
        return record

    async def get(self, user_id: int, subject: str, grade_level: str) -> PerformanceRecord | None:
        """Le o agregado (somente leitura)."""
        return await self.store.load_performance(user_id, subject, grade_level)

    async def list_for_user(self, user_id: int) -> list[PerformanceRecord]:
        """Agregados do usuario ordenados por materia e serie."""
        records = await self.store.list_performance(user_id)
        return sorted(records, key=lambda r: (r.subject, r.grade_level))
