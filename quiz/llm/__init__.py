"""Quiz LLM - Cliente de geracao, endpoint e extracao de JSON."""

from .client import GenerationClient, RetryPolicy, advertised_wait
from .endpoint import AnthropicEndpoint, GenerationEndpoint, Turn
from .factory import LLMClientFactory
from .json_utils import extract_json, strip_fences

__all__ = [
    "GenerationClient",
    "RetryPolicy",
    "advertised_wait",
    "AnthropicEndpoint",
    "GenerationEndpoint",
    "Turn",
    "LLMClientFactory",
    "extract_json",
    "strip_fences",
]
