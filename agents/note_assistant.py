"""Note Assistant - Recursos de IA para notas (glossario, resumo, tags...).

Cada operacao faz no maximo uma chamada ao GenerationClient e, se a
geracao falhar, devolve um valor de fallback em vez de propagar o erro.
"""

from pydantic import BaseModel, Field

from core.exceptions import GenerationFailed, QuotaExceeded
from core.logger import get_logger
from quiz.llm.client import GenerationClient
from quiz.llm.json_utils import extract_json
from quiz.models.enums import Sentiment

logger = get_logger("note_assistant")


class GlossaryEntry(BaseModel):
    term: str = Field(..., min_length=1)
    definition: str = Field(..., min_length=1)


class GrammarIssue(BaseModel):
    text: str = Field(..., min_length=1)
    suggestion: str


# =============================================================================
# PROMPTS
# =============================================================================

GLOSSARY_PROMPT = """You are a helper that extracts specific glossary terms from text.
Task: Identify key technical terms, concepts, or entities in the text.
Output: A JSON array of objects, each having "term" (<string>) and "definition" (<string>).
Constraint: Definitions must be brief (under 15 words) and contextual to the text.
Limit: Max 8 terms."""

SUMMARY_PROMPT = "Summarize this text in 2 sentences. Return plain text."

TAGS_PROMPT = "Generate 5 relevant tags for the text. JSON Array of strings only."

GRAMMAR_PROMPT = (
    "Identify significant grammar/spelling errors. Return JSON array of objects "
    '{ "text": "wrong text", "suggestion": "correction" }. Return empty array if valid.'
)

ACTIONS_PROMPT = "Extract actionable tasks from the text. Return JSON array of strings."

SENTIMENT_PROMPT = (
    "Analyze sentiment of this text. Return ONLY one word: Positive, Negative, or Neutral."
)

CHAT_PROMPT = "Answer the user's question using the note as context. Be concise."

# =============================================================================
# FALLBACKS
# =============================================================================

BUSY_GLOSSARY = [
    GlossaryEntry(
        term="Rate Limit Hit",
        definition="The AI service is currently busy. Please try again in 1-2 minutes.",
    )
]

BUSY_SUMMARY = (
    "AI Service is currently experiencing high traffic (Rate Limit Reached). "
    "Please wait a moment and try again."
)

CHAT_UNAVAILABLE = "AI unavailable."


class NoteAssistant:
    """Funcoes de IA sobre o conteudo de uma nota.

    Example:
        >>> assistant = NoteAssistant(generation)
        >>> await assistant.glossary("Photosynthesis converts light into chemical energy...")
        [GlossaryEntry(term='Photosynthesis', definition='...')]
    """

    MAX_GLOSSARY_TERMS = 8
    MAX_TAGS = 5

    def __init__(self, generation: GenerationClient):
        self.generation = generation

    async def _generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.2,
        max_tokens: int = 1000,
        json_mode: bool = True,
    ) -> str | None:
        """Chama o modelo; None quando a geracao falha."""
        try:
            return await self.generation.generate(
                system_prompt,
                user_prompt,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=json_mode,
            )
        except (QuotaExceeded, GenerationFailed) as e:
            logger.warning(f"Geracao indisponivel ({type(e).__name__}): {e.message}")
            return None

    async def glossary(self, content: str) -> list[GlossaryEntry]:
        """Ate 8 termos com definicoes curtas."""
        if not content or not content.strip():
            return []

        text = await self._generate(
            GLOSSARY_PROMPT,
            f"Extract glossary terms from this text:\n\n{content}",
            temperature=0.1,
            max_tokens=800,
        )
        if text is None:
            return list(BUSY_GLOSSARY)

        parsed = extract_json(text, [])
        if not isinstance(parsed, list):
            return []

        entries = []
        for item in parsed:
            if not isinstance(item, dict):
                continue
            term, definition = item.get("term"), item.get("definition")
            if isinstance(term, str) and isinstance(definition, str) and term and definition:
                entries.append(GlossaryEntry(term=term, definition=definition))
        return entries[: self.MAX_GLOSSARY_TERMS]

    async def summary(self, content: str) -> str:
        """Resumo de 2 frases em texto puro."""
        if not content or not content.strip():
            return ""

        text = await self._generate(
            SUMMARY_PROMPT, content, temperature=0.2, max_tokens=400, json_mode=False
        )
        if text is None:
            return BUSY_SUMMARY
        return text.strip()

    async def tags(self, content: str) -> list[str]:
        """Tags relevantes (strings)."""
        if not content or not content.strip():
            return []

        text = await self._generate(
            TAGS_PROMPT, f"Context:\n{content}", temperature=0.2, max_tokens=200
        )
        return self._string_list(text)[: self.MAX_TAGS]

    async def grammar(self, content: str) -> list[GrammarIssue]:
        """Erros de gramatica/ortografia com sugestao."""
        if not content or not content.strip():
            return []

        text = await self._generate(GRAMMAR_PROMPT, f"Text to check:\n{content}", temperature=0.1)
        if text is None:
            return []

        parsed = extract_json(text, [])
        if not isinstance(parsed, list):
            return []
        return [
            GrammarIssue(text=item["text"], suggestion=str(item.get("suggestion", "")))
            for item in parsed
            if isinstance(item, dict) and isinstance(item.get("text"), str) and item["text"]
        ]

    async def actions(self, content: str) -> list[str]:
        """Tarefas acionaveis encontradas no texto."""
        if not content or not content.strip():
            return []

        text = await self._generate(ACTIONS_PROMPT, f"Text:\n{content}", temperature=0.1)
        return self._string_list(text)

    async def sentiment(self, content: str) -> Sentiment:
        """Positive, Negative ou Neutral (Neutral em qualquer falha)."""
        if not content or not content.strip():
            return Sentiment.NEUTRAL

        text = await self._generate(
            SENTIMENT_PROMPT, content, temperature=0.0, max_tokens=10, json_mode=False
        )
        if not text:
            return Sentiment.NEUTRAL

        word = text.strip().split()[0].strip(".,!\"'").capitalize() if text.strip() else ""
        try:
            return Sentiment(word)
        except ValueError:
            logger.debug(f"Sentimento nao reconhecido: {text!r}")
            return Sentiment.NEUTRAL

    async def chat(self, content: str, query: str) -> str:
        """Responde uma pergunta usando a nota como contexto."""
        if not query or not query.strip():
            return ""

        text = await self._generate(
            CHAT_PROMPT,
            f"Context: {content}\n\nUser Question: {query}\n\nAnswer:",
            temperature=0.3,
            max_tokens=600,
            json_mode=False,
        )
        if text is None or not text.strip():
            return CHAT_UNAVAILABLE
        return text.strip()

    @staticmethod
    def _string_list(text: str | None) -> list[str]:
        if text is None:
            return []
        parsed = extract_json(text, [])
        if not isinstance(parsed, list):
            return []
        return [item.strip() for item in parsed if isinstance(item, str) and item.strip()]
