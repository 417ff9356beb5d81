"""Notes AI endpoints - Glossario, resumo, tags, gramatica, tarefas, sentimento e chat."""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from agents.note_assistant import GlossaryEntry, GrammarIssue, NoteAssistant
from quiz.models.enums import Sentiment

router = APIRouter(prefix="/ai", tags=["Notes AI"])


# =============================================================================
# Models
# =============================================================================


class NoteContentRequest(BaseModel):
    """Conteudo da nota a ser analisado."""

    content: str = Field(default="", max_length=50_000)


class NoteChatRequest(BaseModel):
    content: str = Field(default="", max_length=50_000)
    query: str = Field(..., min_length=1, max_length=2_000)


class GlossaryResponse(BaseModel):
    terms: list[GlossaryEntry]


class SummaryResponse(BaseModel):
    summary: str


class TagsResponse(BaseModel):
    tags: list[str]


class GrammarResponse(BaseModel):
    issues: list[GrammarIssue]


class ActionsResponse(BaseModel):
    actions: list[str]


class SentimentResponse(BaseModel):
    sentiment: Sentiment


class ChatResponse(BaseModel):
    answer: str


# =============================================================================
# Dependencies
# =============================================================================


def get_note_assistant(request: Request) -> NoteAssistant:
    return request.app.state.note_assistant


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/glossary", response_model=GlossaryResponse)
async def glossary(
    body: NoteContentRequest, assistant: NoteAssistant = Depends(get_note_assistant)
):
    """Extrai ate 8 termos-chave com definicoes curtas."""
    return GlossaryResponse(terms=await assistant.glossary(body.content))


@router.post("/summary", response_model=SummaryResponse)
async def summary(
    body: NoteContentRequest, assistant: NoteAssistant = Depends(get_note_assistant)
):
    return SummaryResponse(summary=await assistant.summary(body.content))


@router.post("/tags", response_model=TagsResponse)
async def tags(
    body: NoteContentRequest, assistant: NoteAssistant = Depends(get_note_assistant)
):
    return TagsResponse(tags=await assistant.tags(body.content))


@router.post("/grammar", response_model=GrammarResponse)
async def grammar(
    body: NoteContentRequest, assistant: NoteAssistant = Depends(get_note_assistant)
):
    """Erros de gramatica/ortografia (lista vazia se o texto estiver correto)."""
    return GrammarResponse(issues=await assistant.grammar(body.content))


@router.post("/actions", response_model=ActionsResponse)
async def actions(
    body: NoteContentRequest, assistant: NoteAssistant = Depends(get_note_assistant)
):
    return ActionsResponse(actions=await assistant.actions(body.content))


@router.post("/sentiment", response_model=SentimentResponse)
async def sentiment(
    body: NoteContentRequest, assistant: NoteAssistant = Depends(get_note_assistant)
):
    return SentimentResponse(sentiment=await assistant.sentiment(body.content))


@router.post("/chat", response_model=ChatResponse)
async def chat(
    body: NoteChatRequest, assistant: NoteAssistant = Depends(get_note_assistant)
):
    """Pergunta livre usando a nota como contexto."""
    return ChatResponse(answer=await assistant.chat(body.content, body.query))
