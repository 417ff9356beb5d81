# =============================================================================
# TESTES - Quiz Service
# =============================================================================
# Testes do fluxo completo: gerar -> responder -> historico -> desempenho
# =============================================================================

from datetime import timedelta

import pytest


class TestCreateQuiz:
    """Testes para criacao via servico."""

    @pytest.mark.asyncio
    async def test_end_to_end_first_quiz(
        self, quiz_service, fake_endpoint, make_questions_payload
    ):
        """Verifica usuario 42, Math/5/Fractions com 5 questoes."""
        fake_endpoint.responses = [make_questions_payload(5)]

        quiz = await quiz_service.create_quiz(42, "Math", "5", "Fractions", 5)

        assert quiz.difficulty_distribution.model_dump() == {"easy": 2, "medium": 2, "hard": 1}
        assert quiz.total_questions == 5
        assert (await quiz_service.get_quiz(quiz.id, 42)).id == quiz.id

    @pytest.mark.asyncio
    async def test_num_questions_above_max_rejected(self, quiz_service, fake_endpoint):
        """Verifica rejeicao (sem geracao) acima de max_num_questions."""
        from core.exceptions import InvalidQuizRequest

        with pytest.raises(InvalidQuizRequest) as exc_info:
            await quiz_service.create_quiz(42, "Math", "5", "Fractions", 30)

        assert exc_info.value.details == {"num_questions": 30, "max_num_questions": 20}
        assert fake_endpoint.call_count == 0

    @pytest.mark.asyncio
    async def test_num_questions_at_max_is_exact(
        self, quiz_service, fake_endpoint, make_questions_payload
    ):
        fake_endpoint.responses = [make_questions_payload(20)]

        quiz = await quiz_service.create_quiz(42, "Math", "5", "Fractions", 20)

        assert quiz.total_questions == 20

    @pytest.mark.asyncio
    async def test_explicit_zero_is_not_default(self, quiz_service, fake_endpoint):
        from core.exceptions import InvalidQuizRequest

        with pytest.raises(InvalidQuizRequest):
            await quiz_service.create_quiz(42, "Math", "5", "Fractions", 0)

        assert fake_endpoint.call_count == 0

    @pytest.mark.asyncio
    async def test_default_num_questions(
        self, quiz_service, fake_endpoint, make_questions_payload
    ):
        fake_endpoint.responses = [make_questions_payload(10)]

        quiz = await quiz_service.create_quiz(42, "Math", "5", "Fractions")

        assert quiz.total_questions == 10

    @pytest.mark.asyncio
    async def test_second_quiz_adapts(
        self, quiz_service, fake_endpoint, make_questions_payload
    ):
        """Verifica que um 100% leva ao bracket de dominio (1/3/6)."""
        fake_endpoint.responses = [make_questions_payload(10)]
        first = await quiz_service.create_quiz(42, "Math", "5", "Fractions", 10)
        correct = [q.correct_answer_index for q in first.questions]
        await quiz_service.submit_quiz(first.id, 42, correct)

        fake_endpoint.responses = [make_questions_payload(10)]
        second = await quiz_service.create_quiz(42, "Math", "5", "Decimals", 10)

        assert second.difficulty_distribution.model_dump() == {"easy": 1, "medium": 3, "hard": 6}


class TestQuizAccess:
    """Testes para leitura e abandono."""

    @pytest.mark.asyncio
    async def test_get_quiz_other_user(self, quiz_service, fake_endpoint, make_questions_payload):
        from core.exceptions import QuizNotFound

        fake_endpoint.responses = [make_questions_payload(3)]
        quiz = await quiz_service.create_quiz(42, "Math", "5", "Fractions", 3)

        with pytest.raises(QuizNotFound):
            await quiz_service.get_quiz(quiz.id, 7)

    @pytest.mark.asyncio
    async def test_abandon_then_submit(self, quiz_service, fake_endpoint, make_questions_payload):
        from core.exceptions import QuizStateError
        from quiz.models.enums import QuizStatus

        fake_endpoint.responses = [make_questions_payload(3)]
        quiz = await quiz_service.create_quiz(42, "Math", "5", "Fractions", 3)

        abandoned = await quiz_service.abandon_quiz(quiz.id, 42)

        assert abandoned.status == QuizStatus.ABANDONED
        with pytest.raises(QuizStateError):
            await quiz_service.submit_quiz(quiz.id, 42, [0, 1, 2])


class TestHistory:
    """Testes para historico filtrado."""

    @pytest.fixture
    async def history(self, quiz_service, make_submission, clock):
        store = quiz_service.store
        base = clock()
        await store.save_submission(make_submission("a", score=5, completed_at=base))
        await store.save_submission(
            make_submission("b", score=2, subject="Science", completed_at=base + timedelta(days=1))
        )
        await store.save_submission(
            make_submission("c", score=4, grade_level="6", completed_at=base + timedelta(days=2))
        )
        await store.save_submission(make_submission("d", user_id=7, completed_at=base))
        return base

    @pytest.mark.asyncio
    async def test_most_recent_first(self, quiz_service, history):
        result = await quiz_service.get_quiz_history(42)

        assert [s.id for s in result] == ["c", "b", "a"]

    @pytest.mark.asyncio
    async def test_filter_subject_and_grade(self, quiz_service, history):
        from quiz.models.schemas import HistoryFilters

        result = await quiz_service.get_quiz_history(
            42, HistoryFilters(subject="Math", grade_level="5")
        )

        assert [s.id for s in result] == ["a"]

    @pytest.mark.asyncio
    async def test_filter_score_range(self, quiz_service, history):
        from quiz.models.schemas import HistoryFilters

        result = await quiz_service.get_quiz_history(
            42, HistoryFilters(min_score=50.0, max_score=90.0)
        )

        assert [s.id for s in result] == ["c"]

    @pytest.mark.asyncio
    async def test_filter_dates_naive_is_utc(self, quiz_service, history):
        from quiz.models.schemas import HistoryFilters

        start = (history + timedelta(hours=12)).replace(tzinfo=None)
        end = (history + timedelta(days=1, hours=12)).replace(tzinfo=None)

        result = await quiz_service.get_quiz_history(
            42, HistoryFilters(from_date=start, to_date=end)
        )

        assert [s.id for s in result] == ["b"]

    @pytest.mark.asyncio
    async def test_repeated_reads_identical(self, quiz_service, history, make_submission, clock):
        """Verifica ordem estavel com completed_at empatado."""
        await quiz_service.store.save_submission(make_submission("e", completed_at=clock()))

        first = await quiz_service.get_quiz_history(42)
        second = await quiz_service.get_quiz_history(42)

        assert [s.id for s in first] == [s.id for s in second] == ["c", "b", "e", "a"]


class TestPerformance:
    """Testes para agregados via servico."""

    @pytest.mark.asyncio
    async def test_performance_after_submissions(
        self, quiz_service, fake_endpoint, make_questions_payload
    ):
        for answers in ([0, 1, 2, 3], [None, None, None, None]):
            fake_endpoint.responses = [make_questions_payload(4), "Tip one.\nTip two."]
            quiz = await quiz_service.create_quiz(42, "Math", "5", "Fractions", 4)
            await quiz_service.submit_quiz(quiz.id, 42, answers)

        records = await quiz_service.get_performance(42)

        assert len(records) == 1
        assert records[0].total_quizzes == 2
        assert records[0].average_score == pytest.approx(50.0)


class TestAnalytics:
    """Testes para metricas do painel."""

    @pytest.fixture
    async def history(self, quiz_service, make_submission, clock):
        store = quiz_service.store
        base = clock()
        await store.save_submission(make_submission("a", score=5, completed_at=base))
        await store.save_submission(
            make_submission("b", score=2, subject="Science", completed_at=base + timedelta(days=1))
        )
        await store.save_submission(
            make_submission(
                "c", score=4, grade_level="6", completed_at=base + timedelta(days=1, hours=3)
            )
        )
        await store.save_submission(make_submission("d", user_id=7, completed_at=base))
        return base

    @pytest.mark.asyncio
    async def test_metrics(self, quiz_service, history):
        analytics = await quiz_service.get_analytics(42)

        assert analytics.total_quizzes == 3
        assert analytics.global_accuracy == pytest.approx(73.3)
        assert analytics.active_subject == "MATH"
        assert analytics.study_days == 2
        assert [s.id for s in analytics.history] == ["c", "b", "a"]

    @pytest.mark.asyncio
    async def test_empty_user(self, quiz_service):
        analytics = await quiz_service.get_analytics(99)

        assert analytics.total_quizzes == 0
        assert analytics.global_accuracy == 0.0
        assert analytics.active_subject == "N/A"
        assert analytics.study_days == 0
        assert analytics.history == []

    @pytest.mark.asyncio
    async def test_history_limited_to_latest(self, quiz_service, make_submission, clock):
        """Verifica que so as ultimas submissoes entram no historico e no acerto."""
        from quiz.service import QuizService

        limit = QuizService.ANALYTICS_HISTORY_LIMIT
        base = clock()
        # A mais antiga tem 0 acertos e fica fora da janela
        await quiz_service.store.save_submission(
            make_submission("old", score=0, completed_at=base - timedelta(days=1))
        )
        for i in range(limit):
            await quiz_service.store.save_submission(
                make_submission(f"s{i:02d}", score=5, completed_at=base + timedelta(minutes=i))
            )

        analytics = await quiz_service.get_analytics(42)

        assert analytics.total_quizzes == limit + 1
        assert len(analytics.history) == limit
        assert analytics.global_accuracy == 100.0
        assert analytics.study_days == 1


class TestHints:
    """Testes para dicas."""

    @pytest.mark.asyncio
    async def test_hint_from_model(self, quiz_service, fake_endpoint):
        fake_endpoint.responses = ["  Think about common denominators.  "]

        hint = await quiz_service.get_hint("What is 1/2 + 1/4?", "Math")

        assert hint == "Think about common denominators."
        call = fake_endpoint.calls[0]
        assert call["response_format"] == "text"
        assert call["max_output_tokens"] == 200
        assert "1/2 + 1/4" in call["turns"][1]["content"]

    @pytest.mark.asyncio
    async def test_hint_fallback(self, quiz_service, fake_endpoint):
        from core.exceptions import OtherFailure
        from quiz.prompts import HINT_FALLBACK

        fake_endpoint.responses = [OtherFailure("401")]

        assert await quiz_service.get_hint("Q?", "Math") == HINT_FALLBACK

    @pytest.mark.asyncio
    async def test_question_hint(self, quiz_service, fake_endpoint, make_questions_payload):
        fake_endpoint.responses = [make_questions_payload(3), "Look at B."]
        quiz = await quiz_service.create_quiz(42, "Math", "5", "Fractions", 3)

        hint = await quiz_service.get_question_hint(quiz.id, 42, 1)

        assert hint == "Look at B."
        assert "Question 2?" in fake_endpoint.calls[1]["turns"][1]["content"]

    @pytest.mark.asyncio
    async def test_question_hint_bad_index(
        self, quiz_service, fake_endpoint, make_questions_payload
    ):
        from core.exceptions import QuizNotFound

        fake_endpoint.responses = [make_questions_payload(3)]
        quiz = await quiz_service.create_quiz(42, "Math", "5", "Fractions", 3)

        with pytest.raises(QuizNotFound):
            await quiz_service.get_question_hint(quiz.id, 42, 3)
