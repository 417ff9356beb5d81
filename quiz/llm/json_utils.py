"""JSON Utils - Extracao de JSON de texto livre do modelo."""

import json
import re
from typing import Any, TypeVar

from core.logger import get_logger

logger = get_logger("json_utils")

T = TypeVar("T")

_FENCE_RE = re.compile(r"```[a-zA-Z]*")
_CLOSERS = {"{": "}", "[": "]"}


def strip_fences(text: str | None) -> str:
    """Remove marcacao de bloco de codigo (```json ... ```)."""
    return _FENCE_RE.sub("", text or "").strip()


def extract_json(text: str | None, fallback: T) -> Any | T:
    """Extrai a estrutura JSON contida em ``text``.

    Localiza o primeiro ``{`` ou ``[`` e o ultimo fechamento correspondente.
    Se o recorte nao for JSON valido, tenta decodificar o primeiro valor
    completo a partir da abertura (texto extra depois do JSON).

    Args:
        text: Resposta crua do modelo
        fallback: Valor retornado quando nada pode ser decodificado

    Returns:
        Estrutura decodificada ou ``fallback`` (nunca levanta)
    """
    cleaned = strip_fences(text)
    if not cleaned:
        return fallback

    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if not starts:
        try:
            return json.loads(cleaned)
        except ValueError as e:
            logger.warning(f"JSON parse error: {e}")
            return fallback

    start = min(starts)
    end = cleaned.rfind(_CLOSERS[cleaned[start]])
    if end > start:
        try:
            return json.loads(cleaned[start : end + 1])
        except ValueError:
            pass

    try:
        value, _ = json.JSONDecoder().raw_decode(cleaned[start:])
        return value
    except ValueError as e:
        logger.warning(f"JSON parse error: {e}")
        return fallback
