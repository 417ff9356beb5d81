"""Config - Configuracao centralizada via variaveis de ambiente."""

import os
from dataclasses import dataclass, field
from enum import Enum

from dotenv import find_dotenv, load_dotenv

from .logger import get_logger

logger = get_logger("config")


class StorageBackend(str, Enum):
    """Backends de persistencia suportados."""

    MEMORY = "memory"
    AGENTFS = "agentfs"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Valor invalido para {name}={raw!r}, usando {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Valor invalido para {name}={raw!r}, usando {default}")
        return default


@dataclass
class QuizAppConfig:
    """Configuracao da aplicacao.

    Attributes:
        anthropic_api_key: Chave da API de geracao
        model: Modelo usado em todas as chamadas de geracao
        max_attempts: Tentativas por chamada (inclui a primeira)
        base_delay: Espera base em segundos (multiplicada pela tentativa)
        retry_margin: Margem somada ao tempo sugerido pelo servico
        timeout: Timeout de rede por chamada, em segundos
        default_num_questions: Tamanho padrao do quiz
        max_num_questions: Tamanho maximo aceito do quiz
        storage_backend: memory ou agentfs
        agentfs_id: ID do banco AgentFS (quando storage_backend=agentfs)
        cors_origins: Origens liberadas no CORS
        log_level: Nivel de log
    """

    anthropic_api_key: str = ""
    model: str = "claude-haiku-4-5"
    max_attempts: int = 3
    base_delay: float = 2.0
    retry_margin: float = 1.0
    timeout: float = 60.0
    default_num_questions: int = 10
    max_num_questions: int = 20
    storage_backend: StorageBackend = StorageBackend.MEMORY
    agentfs_id: str = "quiz-app"
    cors_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "QuizAppConfig":
        """Cria configuracao a partir do ambiente."""
        backend_raw = os.getenv("STORAGE_BACKEND", StorageBackend.MEMORY.value).lower()
        try:
            backend = StorageBackend(backend_raw)
        except ValueError:
            logger.warning(f"STORAGE_BACKEND desconhecido: {backend_raw!r}, usando memory")
            backend = StorageBackend.MEMORY

        origins_raw = os.getenv("CORS_ORIGINS", "")
        origins = [o.strip() for o in origins_raw.split(",") if o.strip()]

        defaults = cls()
        return cls(
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            model=os.getenv("QUIZ_MODEL", defaults.model),
            max_attempts=max(1, _env_int("GENERATION_MAX_ATTEMPTS", defaults.max_attempts)),
            base_delay=_env_float("GENERATION_BASE_DELAY", defaults.base_delay),
            retry_margin=_env_float("GENERATION_RETRY_MARGIN", defaults.retry_margin),
            timeout=_env_float("GENERATION_TIMEOUT", defaults.timeout),
            default_num_questions=_env_int("DEFAULT_NUM_QUESTIONS", defaults.default_num_questions),
            max_num_questions=_env_int("MAX_NUM_QUESTIONS", defaults.max_num_questions),
            storage_backend=backend,
            agentfs_id=os.getenv("AGENTFS_ID", defaults.agentfs_id),
            cors_origins=origins or defaults.cors_origins,
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )


_config: QuizAppConfig | None = None


def _load_env_file(override: bool) -> None:
    # .env procurado a partir do diretorio de trabalho
    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(path, override=override)
        logger.debug(f"Variaveis carregadas de {path}")


def get_config() -> QuizAppConfig:
    """Retorna configuracao (carregada uma vez).

    Variaveis ja definidas no ambiente tem precedencia sobre o .env.
    """
    global _config
    if _config is None:
        _load_env_file(override=False)
        _config = QuizAppConfig.from_env()
    return _config


def reload_config() -> QuizAppConfig:
    """Recarrega .env (sobrescrevendo o ambiente) e a configuracao."""
    global _config
    _load_env_file(override=True)
    _config = QuizAppConfig.from_env()
    return _config
