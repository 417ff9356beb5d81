"""Quiz Router - Endpoints FastAPI sobre o QuizService."""

from datetime import datetime

from fastapi import APIRouter, Depends, Header, Query, Request

from .models.schemas import (
    GenerateQuizRequest,
    HintRequest,
    HintResponse,
    HistoryFilters,
    PerformanceRecord,
    Quiz,
    QuizAnalytics,
    QuizResultResponse,
    Submission,
    SubmitQuizRequest,
)
from .service import QuizService

router = APIRouter(prefix="/quiz", tags=["Quiz"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


def get_quiz_service(request: Request) -> QuizService:
    """QuizService criado no lifespan da aplicacao."""
    return request.app.state.quiz_service


def get_current_user_id(x_user_id: int = Header(..., alias="X-User-Id")) -> int:
    """Identidade do chamador (a autenticacao fica na borda)."""
    return x_user_id


def get_history_filters(
    subject: str | None = Query(default=None),
    grade_level: str | None = Query(default=None),
    min_score: float | None = Query(default=None, ge=0, le=100),
    max_score: float | None = Query(default=None, ge=0, le=100),
    from_date: datetime | None = Query(default=None),
    to_date: datetime | None = Query(default=None),
) -> HistoryFilters:
    return HistoryFilters(
        subject=subject,
        grade_level=grade_level,
        min_score=min_score,
        max_score=max_score,
        from_date=from_date,
        to_date=to_date,
    )


# =============================================================================
# QUIZ ENDPOINTS
# =============================================================================


@router.post("/generate", response_model=Quiz)
async def generate_quiz(
    body: GenerateQuizRequest,
    service: QuizService = Depends(get_quiz_service),
    user_id: int = Depends(get_current_user_id),
):
    """Gera quiz com dificuldade adaptada ao historico do usuario.

    - Nunca falha por indisponibilidade da IA: retorna quiz de fallback
      com ``is_fallback=true`` para o frontend exibir o aviso
    """
    return await service.create_quiz(
        user_id, body.subject, body.grade_level, body.topic, body.num_questions
    )


@router.post("/submit", response_model=QuizResultResponse)
async def submit_quiz(
    body: SubmitQuizRequest,
    service: QuizService = Depends(get_quiz_service),
    user_id: int = Depends(get_current_user_id),
):
    """Corrige respostas, gera dicas e atualiza desempenho."""
    submission = await service.submit_quiz(body.quiz_id, user_id, body.answers)
    quiz = await service.get_quiz(body.quiz_id, user_id)

    return QuizResultResponse(
        submission=submission,
        breakdown=service.scoring.calculate_breakdown(quiz.questions, submission.answers),
    )


@router.get("/history", response_model=list[Submission])
async def get_quiz_history(
    filters: HistoryFilters = Depends(get_history_filters),
    service: QuizService = Depends(get_quiz_service),
    user_id: int = Depends(get_current_user_id),
):
    """Historico de submissoes com filtros, mais recentes primeiro."""
    return await service.get_quiz_history(user_id, filters)


@router.get("/performance", response_model=list[PerformanceRecord])
async def get_performance(
    service: QuizService = Depends(get_quiz_service),
    user_id: int = Depends(get_current_user_id),
):
    """Agregados de desempenho por materia/serie."""
    return await service.get_performance(user_id)


@router.get("/analytics", response_model=QuizAnalytics)
async def get_analytics(
    service: QuizService = Depends(get_quiz_service),
    user_id: int = Depends(get_current_user_id),
):
    """Metricas do painel: total, acerto global, materia ativa, dias de estudo."""
    return await service.get_analytics(user_id)


@router.post("/hint", response_model=HintResponse)
async def get_hint(
    body: HintRequest,
    service: QuizService = Depends(get_quiz_service),
    _user_id: int = Depends(get_current_user_id),
):
    """Dica para uma questao livre."""
    return HintResponse(hint=await service.get_hint(body.question, body.subject))


@router.get("/{quiz_id}", response_model=Quiz)
async def get_quiz(
    quiz_id: str,
    service: QuizService = Depends(get_quiz_service),
    user_id: int = Depends(get_current_user_id),
):
    """Retorna um quiz do usuario."""
    return await service.get_quiz(quiz_id, user_id)


@router.post("/{quiz_id}/abandon", response_model=Quiz)
async def abandon_quiz(
    quiz_id: str,
    service: QuizService = Depends(get_quiz_service),
    user_id: int = Depends(get_current_user_id),
):
    """Encerra quiz sem submissao."""
    return await service.abandon_quiz(quiz_id, user_id)


@router.post("/{quiz_id}/hint/{index}", response_model=HintResponse)
async def get_question_hint(
    quiz_id: str,
    index: int,
    service: QuizService = Depends(get_quiz_service),
    user_id: int = Depends(get_current_user_id),
):
    """Dica para a questao ``index`` (0-based) de um quiz existente."""
    return HintResponse(hint=await service.get_question_hint(quiz_id, user_id, index))
