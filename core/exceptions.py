"""Exceptions - Taxonomia de erros da aplicacao.

Todos os erros carregam ``message`` e ``details`` para que o servidor
possa serializa-los sem conhecer cada tipo.
"""

from typing import Any


class QuizAppError(Exception):
    """Erro base da aplicacao."""

    status_code: int = 500

    def __init__(self, message: str = "", details: dict[str, Any] | None = None):
        self.message = message or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Formato usado nas respostas HTTP."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# GERACAO (LLM)
# =============================================================================


class GenerationError(QuizAppError):
    """Base para falhas da camada de geracao."""


class QuotaExceeded(GenerationError):
    """Tentativas esgotadas em erro retentavel. O chamador usa fallback."""

    status_code = 503


class GenerationFailed(GenerationError):
    """Erro nao retentavel do endpoint de geracao."""

    status_code = 502


class EndpointError(QuizAppError):
    """Erros crus levantados pelo endpoint de geracao."""


class RateLimited(EndpointError):
    """Endpoint pediu para diminuir o ritmo (HTTP 429)."""

    def __init__(
        self,
        message: str = "",
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.retry_after = retry_after


class ServiceUnavailable(EndpointError):
    """Indisponibilidade transitoria (5xx, sobrecarga, conexao)."""


class OtherFailure(EndpointError):
    """Qualquer outra falha do endpoint - nao retentavel."""


# =============================================================================
# DOMINIO
# =============================================================================


class QuizNotFound(QuizAppError):
    """Quiz inexistente ou pertencente a outro usuario."""

    status_code = 404


class QuestionValidationError(QuizAppError):
    """Conjunto de perguntas gerado com formato invalido."""

    status_code = 422


class InvalidQuizRequest(QuizAppError):
    """Parametros de criacao de quiz fora dos limites configurados."""

    status_code = 422


class QuizStateError(QuizAppError):
    """Transicao ilegal no ciclo de vida do quiz."""

    status_code = 409


class StorageFailure(QuizAppError):
    """Falha na camada de persistencia. Sempre propagada."""

    status_code = 500
