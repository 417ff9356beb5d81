# =============================================================================
# CONFTEST - Fixtures compartilhadas para todos os testes
# =============================================================================
# Centraliza fakes do endpoint de geracao, storage, relogio e app FastAPI
# =============================================================================

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# FAKES
# =============================================================================


class FakeEndpoint:
    """Endpoint de geracao com respostas roteirizadas.

    Cada item de ``responses`` e consumido por uma chamada: strings sao
    retornadas, excecoes sao levantadas. Com a fila vazia, ``default`` e
    retornado.
    """

    def __init__(self, responses=None, default="[]"):
        self.responses = list(responses or [])
        self.default = default
        self.calls = []

    async def call(self, turns, *, temperature, max_output_tokens, response_format):
        self.calls.append(
            {
                "turns": turns,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
                "response_format": response_format,
            }
        )
        if not self.responses:
            return self.default
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    @property
    def call_count(self):
        return len(self.calls)


class RecordingSleep:
    """Substitui asyncio.sleep registrando as esperas."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class FakeClock:
    """Relogio controlavel (UTC)."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


# =============================================================================
# FIXTURES DE GERACAO
# =============================================================================


@pytest.fixture
def fake_endpoint():
    """Endpoint roteirizado (sem rede)."""
    return FakeEndpoint()


@pytest.fixture
def fake_sleep():
    """Sleep que apenas registra as esperas."""
    return RecordingSleep()


@pytest.fixture
def generation_client(fake_endpoint, fake_sleep):
    """GenerationClient com politica padrao (3 tentativas, 2s, +1s)."""
    from quiz.llm.client import GenerationClient, RetryPolicy

    return GenerationClient(fake_endpoint, RetryPolicy(), sleep=fake_sleep)


@pytest.fixture
def make_questions_payload():
    """Factory de resposta JSON de quiz como o modelo produziria."""

    def _make(count, title="Fractions Quiz", difficulties=None, fenced=False):
        difficulties = difficulties or ["easy", "medium", "hard"]
        questions = [
            {
                "question": f"Question {i + 1}?",
                "options": [f"A{i}", f"B{i}", f"C{i}", f"D{i}"],
                "correctAnswer": i % 4,
                "difficulty": difficulties[i % len(difficulties)],
                "explanation": f"Explanation {i + 1}",
            }
            for i in range(count)
        ]
        text = json.dumps({"title": title, "questions": questions})
        if fenced:
            text = f"```json\n{text}\n```"
        return text

    return _make


# =============================================================================
# FIXTURES DE STORAGE
# =============================================================================


@pytest.fixture
def memory_storage():
    """Storage em memoria isolado por teste."""
    from quiz.storage.memory import InMemoryStorage

    return InMemoryStorage()


@pytest.fixture
def quiz_store(memory_storage):
    from quiz.storage.quiz_store import QuizStore

    return QuizStore(memory_storage)


@pytest.fixture
def mock_agentfs_with_data():
    """Mock do AgentFS com KV em dicionario."""
    mock = MagicMock()
    _storage = {}

    async def mock_get(key):
        return _storage.get(key)

    async def mock_set(key, value):
        _storage[key] = value

    async def mock_delete(key):
        _storage.pop(key, None)

    async def mock_list(prefix=""):
        return [{"key": k} for k in _storage if k.startswith(prefix)]

    mock.kv = AsyncMock()
    mock.kv.get = mock_get
    mock.kv.set = mock_set
    mock.kv.delete = mock_delete
    mock.kv.list = mock_list
    mock._storage = _storage

    mock.close = AsyncMock()

    return mock


@pytest.fixture
def broken_storage():
    """Storage cujo backend sempre falha."""
    storage = MagicMock()
    storage.get = AsyncMock(side_effect=OSError("disk I/O error"))
    storage.put = AsyncMock(side_effect=OSError("disk I/O error"))
    storage.query = AsyncMock(side_effect=OSError("disk I/O error"))
    storage.upsert_with_merge = AsyncMock(side_effect=OSError("disk I/O error"))
    return storage


# =============================================================================
# FIXTURES DE DOMINIO
# =============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def quiz_config():
    """Configuracao fixa para testes."""
    from core.config import QuizAppConfig

    return QuizAppConfig(anthropic_api_key="test-key-123", max_num_questions=20)


@pytest.fixture
def quiz_service(memory_storage, generation_client, quiz_config, clock):
    """QuizService completo sobre storage em memoria e endpoint fake."""
    from quiz.service import QuizService

    return QuizService(memory_storage, generation_client, quiz_config, clock=clock)


@pytest.fixture
def sample_questions():
    """5 questoes: resposta correta = indice da questao % 4."""
    from quiz.models.schemas import QuizQuestion

    difficulties = ["easy", "easy", "medium", "medium", "hard"]
    return [
        QuizQuestion(
            text=f"Question {i + 1}?",
            options=[f"A{i}", f"B{i}", f"C{i}", f"D{i}"],
            correct_answer_index=i % 4,
            difficulty=difficulties[i],
            explanation=f"Explanation {i + 1}",
        )
        for i in range(5)
    ]


@pytest.fixture
def sample_quiz(sample_questions, clock):
    """Quiz gerado do usuario 42."""
    from quiz.models.schemas import DifficultyDistribution, Quiz

    return Quiz(
        id="quiz-123",
        owner_id=42,
        title="Math Quiz - Fractions",
        subject="Math",
        grade_level="5",
        topic="Fractions",
        questions=sample_questions,
        difficulty_distribution=DifficultyDistribution(easy=2, medium=2, hard=1),
        created_at=clock(),
    )


@pytest.fixture
def make_submission(clock):
    """Factory de Submission para testes de historico."""
    from quiz.models.schemas import Submission

    def _make(submission_id, user_id=42, subject="Math", grade_level="5", score=3, total=5,
              completed_at=None):
        return Submission(
            id=submission_id,
            quiz_id=f"quiz-{submission_id}",
            user_id=user_id,
            answers=[0] * total,
            score=score,
            total_questions=total,
            percentage_score=round(score / total * 100, 2),
            subject=subject,
            grade_level=grade_level,
            completed_at=completed_at or clock(),
        )

    return _make


# =============================================================================
# FIXTURES DO FASTAPI
# =============================================================================


@pytest.fixture
def app_client(memory_storage, generation_client, quiz_config):
    """Cliente de teste FastAPI com storage e geracao injetados."""
    from fastapi.testclient import TestClient

    from server import create_app

    app = create_app(quiz_config, storage=memory_storage, generation=generation_client)
    with TestClient(app) as client:
        yield client


# =============================================================================
# FIXTURES UTILITARIAS
# =============================================================================


@pytest.fixture
def capture_logs(caplog):
    """Captura logs durante testes."""
    import logging

    caplog.set_level(logging.DEBUG, logger="quiz_app")
    return caplog
