"""Generation Endpoint - Adaptador para a API de geracao de texto.

O endpoint faz UMA chamada e traduz erros do SDK para a taxonomia
``RateLimited`` / ``ServiceUnavailable`` / ``OtherFailure``. Retry e backoff
ficam no ``GenerationClient``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Protocol, TypedDict

from core.exceptions import OtherFailure, RateLimited, ServiceUnavailable
from core.logger import get_logger

if TYPE_CHECKING:
    from anthropic import AsyncAnthropic

logger = get_logger("endpoint")

ResponseFormat = Literal["json", "text"]

JSON_MODE_INSTRUCTION = "Respond ONLY with valid JSON. No markdown, no commentary."

# Codigos tratados como indisponibilidade transitoria
TRANSIENT_STATUS_CODES = frozenset({500, 502, 503, 504, 529})


class Turn(TypedDict):
    role: Literal["system", "user", "assistant"]
    content: str


class GenerationEndpoint(Protocol):
    """Contrato minimo de um endpoint de geracao."""

    async def call(
        self,
        turns: list[Turn],
        *,
        temperature: float,
        max_output_tokens: int,
        response_format: ResponseFormat,
    ) -> str: ...


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


class AnthropicEndpoint:
    """Endpoint sobre o cliente assincrono da Anthropic.

    Example:
        >>> endpoint = AnthropicEndpoint(api_key="sk-...", model="claude-haiku-4-5")
        >>> text = await endpoint.call(
        ...     [{"role": "system", "content": "..."}, {"role": "user", "content": "..."}],
        ...     temperature=0.2, max_output_tokens=400, response_format="text",
        ... )
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-haiku-4-5",
        timeout: float = 60.0,
        client: AsyncAnthropic | None = None,
    ):
        """Inicializa endpoint.

        Args:
            api_key: Chave da API (None = variavel ANTHROPIC_API_KEY)
            model: Modelo usado nas chamadas
            timeout: Timeout de rede por chamada (segundos)
            client: Cliente ja construido (testes)
        """
        if client is None:
            from anthropic import AsyncAnthropic

            # Retries do SDK desligados: a politica e do GenerationClient
            client = AsyncAnthropic(api_key=api_key or None, timeout=timeout, max_retries=0)
        self._client = client
        self.model = model

    async def call(
        self,
        turns: list[Turn],
        *,
        temperature: float,
        max_output_tokens: int,
        response_format: ResponseFormat,
    ) -> str:
        import anthropic

        system_parts = [t["content"] for t in turns if t["role"] == "system" and t["content"]]
        if response_format == "json":
            system_parts.append(JSON_MODE_INSTRUCTION)
        messages = [
            {"role": t["role"], "content": t["content"]}
            for t in turns
            if t["role"] != "system" and t["content"]
        ]
        if not messages:
            # A API exige ao menos um turno de usuario
            messages = [{"role": "user", "content": "Proceed."}]

        try:
            response = await self._client.messages.create(
                model=self.model,
                system="\n\n".join(system_parts),
                messages=messages,
                temperature=temperature,
                max_tokens=max_output_tokens,
            )
        except anthropic.RateLimitError as e:
            retry_after = _parse_retry_after(e.response.headers.get("retry-after"))
            raise RateLimited(message=str(e), retry_after=retry_after) from e
        except anthropic.APIStatusError as e:
            if e.status_code in TRANSIENT_STATUS_CODES:
                raise ServiceUnavailable(
                    message=str(e), details={"status_code": e.status_code}
                ) from e
            raise OtherFailure(message=str(e), details={"status_code": e.status_code}) from e
        except anthropic.APIConnectionError as e:
            raise ServiceUnavailable(message=str(e)) from e
        except anthropic.AnthropicError as e:
            raise OtherFailure(message=str(e)) from e

        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
