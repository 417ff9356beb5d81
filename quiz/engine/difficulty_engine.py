"""Difficulty Model - Distribuicao adaptativa de dificuldade."""

import math

from ..models.enums import QuizDifficulty
from ..models.schemas import DifficultyDistribution


class DifficultyModel:
    """Mapeia desempenho historico para a distribuicao do proximo quiz.

    Faixas (media 0-100):
        - Nenhum quiz anterior: 3 faceis / 4 medias / 3 dificeis
        - >= 80: 1 / 3 / 6 (dominio -> conteudo mais dificil)
        - 60 a 80: 2 / 5 / 3
        - < 60: 5 / 4 / 1

    Todas as faixas somam ``BUDGET`` (10). ``scale`` converte para outro
    tamanho de quiz.

    Example:
        >>> model = DifficultyModel()
        >>> model.distribution(85.0, 4)
        DifficultyDistribution(easy=1, medium=3, hard=6)
    """

    BUDGET = 10

    BASELINE = DifficultyDistribution(easy=3, medium=4, hard=3)

    # (limite inferior, distribuicao) - da faixa mais alta para a mais baixa
    BRACKETS = [
        (80.0, DifficultyDistribution(easy=1, medium=3, hard=6)),
        (60.0, DifficultyDistribution(easy=2, medium=5, hard=3)),
        (-math.inf, DifficultyDistribution(easy=5, medium=4, hard=1)),
    ]

    def distribution(self, average_score: float, total_quizzes: int) -> DifficultyDistribution:
        """Calcula distribuicao para um orcamento de 10 questoes.

        Args:
            average_score: Media historica (0-100)
            total_quizzes: Quizzes ja realizados

        Returns:
            Distribuicao easy/medium/hard somando 10
        """
        if total_quizzes == 0:
            return self.BASELINE.model_copy()

        for threshold, dist in self.BRACKETS:
            if average_score >= threshold:
                return dist.model_copy()

        return self.BRACKETS[-1][1].model_copy()

    def scale(
        self, distribution: DifficultyDistribution, num_questions: int
    ) -> DifficultyDistribution:
        """Escala a distribuicao linearmente para ``num_questions``.

        Usa maiores restos: o resultado sempre soma ``num_questions``.
        Empates vao para a faixa com maior contagem base e depois na
        ordem easy, medium, hard.
        """
        if num_questions <= 0:
            return DifficultyDistribution()

        base_total = distribution.total
        levels = list(QuizDifficulty)
        if base_total == 0:
            base = {level: 1 for level in levels}
            base_total = len(levels)
        else:
            base = {level: distribution.count_for(level) for level in levels}

        exact = {level: base[level] * num_questions / base_total for level in levels}
        counts = {level: math.floor(exact[level]) for level in levels}
        remaining = num_questions - sum(counts.values())

        order = sorted(
            levels,
            key=lambda lv: (-(exact[lv] - counts[lv]), -base[lv], levels.index(lv)),
        )
        for level in order[:remaining]:
            counts[level] += 1

        return DifficultyDistribution(**{level.value: counts[level] for level in levels})

    def for_quiz(
        self, average_score: float, total_quizzes: int, num_questions: int
    ) -> DifficultyDistribution:
        """Distribuicao ja escalada para o tamanho do quiz."""
        return self.scale(self.distribution(average_score, total_quizzes), num_questions)
