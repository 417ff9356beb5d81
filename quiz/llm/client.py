"""Generation Client - Chamadas ao endpoint com retry, backoff e fallback."""

import asyncio
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from core.exceptions import (
    EndpointError,
    GenerationFailed,
    QuotaExceeded,
    RateLimited,
    ServiceUnavailable,
)
from core.logger import get_logger

from .endpoint import GenerationEndpoint, ResponseFormat, Turn

logger = get_logger("generation_client")

SleepFn = Callable[[float], Awaitable[None]]

# "Please retry in 2s" / "retry in 12.5s"
_RETRY_IN_RE = re.compile(r"retry in (\d+(?:\.\d+)?)\s*s", re.IGNORECASE)


@dataclass(frozen=True)
class RetryPolicy:
    """Politica de retry para erros retentaveis.

    Attributes:
        max_attempts: Total de tentativas (inclui a primeira)
        base_delay: Espera padrao = tentativa * base_delay (segundos)
        retry_margin: Somado ao tempo que o servico pedir
    """

    max_attempts: int = 3
    base_delay: float = 2.0
    retry_margin: float = 1.0

    def delay_for(self, attempt: int, error: EndpointError) -> float:
        """Calcula espera apos a tentativa ``attempt`` (1-based)."""
        advertised = advertised_wait(error)
        if advertised is not None:
            return advertised + self.retry_margin
        return attempt * self.base_delay


def advertised_wait(error: EndpointError) -> float | None:
    """Tempo de espera anunciado pelo servico, se houver."""
    retry_after = getattr(error, "retry_after", None)
    if retry_after is not None:
        return float(retry_after)
    match = _RETRY_IN_RE.search(str(error))
    if match:
        return float(match.group(1))
    return None


class GenerationClient:
    """Cliente de geracao com retry limitado.

    Sem estado entre chamadas. Cada chamada faz no maximo
    ``policy.max_attempts`` tentativas; a espera do backoff suspende apenas
    a tarefa atual.

    Example:
        >>> client = GenerationClient(AnthropicEndpoint(api_key="..."))
        >>> text = await client.generate("Voce e...", "Gere...", json_mode=False)
    """

    RETRYABLE = (RateLimited, ServiceUnavailable)

    def __init__(
        self,
        endpoint: GenerationEndpoint,
        policy: RetryPolicy | None = None,
        sleep: SleepFn | None = None,
    ):
        """Inicializa cliente.

        Args:
            endpoint: Endpoint de geracao
            policy: Politica de retry (default: 3 tentativas, 2s, +1s)
            sleep: Funcao de espera assincrona (injetavel em testes)
        """
        self.endpoint = endpoint
        self.policy = policy or RetryPolicy()
        self._sleep = sleep or asyncio.sleep

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.2,
        max_tokens: int = 1000,
        json_mode: bool = True,
    ) -> str:
        """Gera texto a partir de prompt de sistema + prompt do usuario.

        Args:
            system_prompt: Instrucoes de sistema
            user_prompt: Conteudo do turno do usuario
            temperature: Temperatura de amostragem
            max_tokens: Limite de tokens de saida
            json_mode: Pede resposta em JSON

        Returns:
            Texto cru retornado pelo modelo

        Raises:
            QuotaExceeded: Erro retentavel persistiu ate a ultima tentativa
            GenerationFailed: Erro nao retentavel
        """
        turns: list[Turn] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        response_format: ResponseFormat = "json" if json_mode else "text"
        max_attempts = self.policy.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                return await self.endpoint.call(
                    turns,
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                    response_format=response_format,
                )
            except self.RETRYABLE as e:
                if attempt >= max_attempts:
                    logger.error(f"Quota excedida apos {attempt} tentativas: {e}")
                    raise QuotaExceeded(
                        message="Generation quota exceeded",
                        details={"attempts": attempt, "last_error": str(e)},
                    ) from e
                wait = self.policy.delay_for(attempt, e)
                logger.warning(
                    f"Endpoint indisponivel ({type(e).__name__}), "
                    f"tentativa {attempt}/{max_attempts}. Retrying in {wait:g}s..."
                )
                await self._sleep(wait)
            except EndpointError as e:
                logger.error(f"Falha na geracao: {e}")
                raise GenerationFailed(message=str(e), details={"attempt": attempt}) from e
            except Exception as e:
                logger.error(f"Erro inesperado no endpoint: {e}")
                raise GenerationFailed(message=str(e), details={"attempt": attempt}) from e

        # max_attempts >= 1 garante que o loop retorna ou levanta
        raise QuotaExceeded(message="Generation quota exceeded")
