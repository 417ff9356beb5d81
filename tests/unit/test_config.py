# =============================================================================
# TESTES - Config, Exceptions e Logger
# =============================================================================
# Testes unitarios para configuracao via ambiente e taxonomia de erros
# =============================================================================

import os
from unittest.mock import patch

import pytest


class TestQuizAppConfig:
    """Testes para QuizAppConfig."""

    def test_defaults(self, clean_env):
        from core.config import QuizAppConfig, StorageBackend

        config = QuizAppConfig.from_env()

        assert config.model == "claude-haiku-4-5"
        assert config.max_attempts == 3
        assert config.base_delay == 2.0
        assert config.retry_margin == 1.0
        assert config.default_num_questions == 10
        assert config.storage_backend == StorageBackend.MEMORY
        assert config.anthropic_api_key == ""

    def test_from_env(self):
        from core.config import QuizAppConfig, StorageBackend

        env = {
            "QUIZ_MODEL": "claude-sonnet-4-5",
            "GENERATION_MAX_ATTEMPTS": "5",
            "GENERATION_BASE_DELAY": "0.5",
            "STORAGE_BACKEND": "AGENTFS",
            "AGENTFS_ID": "school",
            "CORS_ORIGINS": "https://a.example, https://b.example",
            "LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env):
            config = QuizAppConfig.from_env()

        assert config.model == "claude-sonnet-4-5"
        assert config.max_attempts == 5
        assert config.base_delay == 0.5
        assert config.storage_backend == StorageBackend.AGENTFS
        assert config.agentfs_id == "school"
        assert config.cors_origins == ["https://a.example", "https://b.example"]
        assert config.log_level == "DEBUG"

    def test_invalid_values_fall_back(self):
        from core.config import QuizAppConfig, StorageBackend

        env = {"GENERATION_MAX_ATTEMPTS": "many", "STORAGE_BACKEND": "redis"}
        with patch.dict(os.environ, env):
            config = QuizAppConfig.from_env()

        assert config.max_attempts == 3
        assert config.storage_backend == StorageBackend.MEMORY

    def test_max_attempts_at_least_one(self):
        from core.config import QuizAppConfig

        with patch.dict(os.environ, {"GENERATION_MAX_ATTEMPTS": "0"}):
            assert QuizAppConfig.from_env().max_attempts == 1

    def test_reload_reads_dotenv(self, tmp_path, monkeypatch):
        """Verifica que reload_config carrega o .env do diretorio de trabalho."""
        from core.config import reload_config

        (tmp_path / ".env").write_text("QUIZ_MODEL=claude-from-dotenv\nMAX_NUM_QUESTIONS=15\n")
        monkeypatch.chdir(tmp_path)

        with patch.dict(os.environ, {"QUIZ_MODEL": "claude-from-env"}):
            config = reload_config()

        assert config.model == "claude-from-dotenv"
        assert config.max_num_questions == 15

    def test_get_config_keeps_environment_over_dotenv(self, tmp_path, monkeypatch):
        from core.config import get_config

        (tmp_path / ".env").write_text("QUIZ_MODEL=claude-from-dotenv\n")
        monkeypatch.chdir(tmp_path)

        with patch.dict(os.environ, {"QUIZ_MODEL": "claude-from-env"}):
            config = get_config()

        assert config.model == "claude-from-env"

    def test_get_config_is_cached(self):
        from core.config import get_config, reload_config

        first = get_config()

        assert get_config() is first
        assert reload_config() is not first


@pytest.fixture
def clean_env():
    with patch.dict(os.environ, {}, clear=True):
        yield


class TestExceptions:
    """Testes para a taxonomia de erros."""

    @pytest.mark.parametrize(
        "name,status",
        [
            ("QuizNotFound", 404),
            ("QuizStateError", 409),
            ("QuestionValidationError", 422),
            ("InvalidQuizRequest", 422),
            ("StorageFailure", 500),
            ("GenerationFailed", 502),
            ("QuotaExceeded", 503),
        ],
    )
    def test_status_codes(self, name, status):
        import core.exceptions

        assert getattr(core.exceptions, name).status_code == status

    def test_to_dict(self):
        from core.exceptions import QuizNotFound

        err = QuizNotFound("Quiz x nao encontrado", details={"quiz_id": "x"})

        assert err.to_dict() == {
            "error": "QuizNotFound",
            "message": "Quiz x nao encontrado",
            "details": {"quiz_id": "x"},
        }

    def test_default_message(self):
        from core.exceptions import StorageFailure

        assert StorageFailure().message == "StorageFailure"


class TestLogger:
    """Testes para o logger da aplicacao."""

    def test_namespaced(self):
        from core.logger import get_logger

        assert get_logger("quiz_engine").name == "quiz_app.quiz_engine"

    def test_set_level(self):
        import logging

        from core.logger import get_logger, set_level

        set_level("warning")

        assert logging.getLogger("quiz_app").level == logging.WARNING
        assert get_logger("x").getEffectiveLevel() == logging.WARNING
