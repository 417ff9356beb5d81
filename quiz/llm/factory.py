"""LLM Client Factory - Criacao de GenerationClient a partir da configuracao."""

from core.config import QuizAppConfig, get_config

from .client import GenerationClient, RetryPolicy, SleepFn
from .endpoint import AnthropicEndpoint, GenerationEndpoint


class LLMClientFactory:
    """Factory para criar clientes de geracao com configuracao consistente.

    Centraliza:
    - Modelo e timeout do endpoint
    - Politica de retry (tentativas, espera base, margem)

    Example:
        >>> factory = LLMClientFactory()
        >>> client = factory.create_client()
        >>> text = await client.generate("...", "...")
    """

    def __init__(self, config: QuizAppConfig | None = None):
        self.config = config or get_config()

    def create_policy(self) -> RetryPolicy:
        """Politica de retry da configuracao."""
        return RetryPolicy(
            max_attempts=self.config.max_attempts,
            base_delay=self.config.base_delay,
            retry_margin=self.config.retry_margin,
        )

    def create_endpoint(self) -> AnthropicEndpoint:
        """Endpoint Anthropic com modelo e timeout configurados."""
        return AnthropicEndpoint(
            api_key=self.config.anthropic_api_key,
            model=self.config.model,
            timeout=self.config.timeout,
        )

    def create_client(
        self,
        endpoint: GenerationEndpoint | None = None,
        sleep: SleepFn | None = None,
    ) -> GenerationClient:
        """Cria GenerationClient.

        Args:
            endpoint: Endpoint customizado (default: Anthropic)
            sleep: Funcao de espera (testes)

        Returns:
            GenerationClient configurado
        """
        return GenerationClient(
            endpoint=endpoint or self.create_endpoint(),
            policy=self.create_policy(),
            sleep=sleep,
        )
