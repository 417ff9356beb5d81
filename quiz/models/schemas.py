"""Quiz Schemas - Modelos Pydantic de dominio e de request/response."""

from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from .enums import QuizDifficulty, QuizStatus

NO_ANSWER = "No answer"


def utcnow() -> datetime:
    """Relogio padrao (UTC, timezone-aware)."""
    return datetime.now(timezone.utc)


# =============================================================================
# DOMINIO
# =============================================================================


class QuizQuestion(BaseModel):
    """Questao de multipla escolha.

    Aceita os nomes de campo que o modelo costuma produzir
    (``question``, ``correctAnswer``, ``correct_index``) alem dos nomes
    canonicos usados na persistencia.
    """

    text: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("text", "question"),
        description="Enunciado da questao",
    )
    options: list[str] = Field(..., min_length=4, max_length=4, description="4 alternativas")
    correct_answer_index: int = Field(
        ...,
        ge=0,
        le=3,
        validation_alias=AliasChoices(
            "correct_answer_index", "correctAnswer", "correctAnswerIndex", "correct_index"
        ),
        description="Indice da resposta correta (0-3)",
    )
    difficulty: QuizDifficulty = Field(
        default=QuizDifficulty.MEDIUM, description="Nivel de dificuldade"
    )
    explanation: str | None = Field(default=None, description="Explicacao da resposta correta")

    @field_validator("options", mode="before")
    @classmethod
    def _coerce_options(cls, value: Any) -> Any:
        # {"label": "A", "text": "..."} -> "..."
        if isinstance(value, list):
            return [
                item.get("text", "") if isinstance(item, dict) else item for item in value
            ]
        return value

    @field_validator("difficulty", mode="before")
    @classmethod
    def _coerce_difficulty(cls, value: Any) -> Any:
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {d.value for d in QuizDifficulty}:
                return normalized
            return QuizDifficulty.MEDIUM
        return value

    @model_validator(mode="after")
    def _check_answer_index(self) -> "QuizQuestion":
        if not 0 <= self.correct_answer_index < len(self.options):
            raise ValueError("correct_answer_index fora do intervalo das alternativas")
        return self

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer_index]


class DifficultyDistribution(BaseModel):
    """Contagem alvo de questoes por dificuldade."""

    easy: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    hard: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.easy + self.medium + self.hard

    def count_for(self, difficulty: QuizDifficulty) -> int:
        return getattr(self, difficulty.value)


class Quiz(BaseModel):
    """Quiz gerado para um usuario."""

    id: str
    owner_id: int
    title: str
    subject: str
    grade_level: str
    topic: str = ""
    questions: list[QuizQuestion] = Field(..., min_length=1)
    difficulty_distribution: DifficultyDistribution
    is_fallback: bool = Field(
        default=False, description="True quando o quiz foi sintetizado sem o servico de IA"
    )
    status: QuizStatus = QuizStatus.GENERATED
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def total_questions(self) -> int:
        return len(self.questions)


class Mistake(BaseModel):
    """Questao respondida incorretamente."""

    question: str
    user_answer: str
    correct_answer: str
    explanation: str | None = None


class Submission(BaseModel):
    """Resultado de uma correcao. Imutavel apos criado."""

    id: str
    quiz_id: str
    user_id: int
    answers: list[int | None]
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=0)
    percentage_score: float = Field(..., ge=0, le=100)
    mistakes: list[Mistake] = Field(default_factory=list)
    improvement_tips: list[str] = Field(default_factory=list)
    quiz_title: str = ""
    subject: str = ""
    grade_level: str = ""
    completed_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def _check_score(self) -> "Submission":
        if self.score > self.total_questions:
            raise ValueError("score maior que total_questions")
        return self


class PerformanceRecord(BaseModel):
    """Agregado de desempenho por (usuario, materia, serie)."""

    user_id: int
    subject: str
    grade_level: str
    total_quizzes: int = Field(default=0, ge=0)
    average_score: float = Field(default=0.0, ge=0, le=100)
    last_quiz_date: datetime | None = None

    @staticmethod
    def make_key(user_id: int, subject: str, grade_level: str) -> str:
        """Chave unica por tupla; cada parte e percent-encoded antes do join."""
        parts = (str(user_id), subject, grade_level)
        return ":".join(quote(part, safe="") for part in parts)

    @property
    def key(self) -> str:
        return self.make_key(self.user_id, self.subject, self.grade_level)


class HistoryFilters(BaseModel):
    """Filtros opcionais do historico de quizzes."""

    subject: str | None = None
    grade_level: str | None = None
    min_score: float | None = None
    max_score: float | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None

    def matches(self, submission: Submission) -> bool:
        """Retorna True se a submissao passa em todos os filtros."""
        if self.subject is not None and submission.subject != self.subject:
            return False
        if self.grade_level is not None and submission.grade_level != self.grade_level:
            return False
        if self.min_score is not None and submission.percentage_score < self.min_score:
            return False
        if self.max_score is not None and submission.percentage_score > self.max_score:
            return False
        if self.from_date is not None and submission.completed_at < _aware(self.from_date):
            return False
        if self.to_date is not None and submission.completed_at > _aware(self.to_date):
            return False
        return True


def _aware(value: datetime) -> datetime:
    # Datas sem timezone vindas da query string sao tratadas como UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


# =============================================================================
# REQUEST / RESPONSE
# =============================================================================


class GenerateQuizRequest(BaseModel):
    """Request para geracao de quiz."""

    subject: str = Field(..., min_length=1, description="Materia")
    grade_level: str = Field(..., min_length=1, description="Serie/ano")
    topic: str = Field(..., min_length=1, description="Topico do quiz")
    num_questions: int | None = Field(
        default=None, ge=1, description="Numero de questoes (padrao e limite vem da config)"
    )


class SubmitQuizRequest(BaseModel):
    """Request com as respostas do usuario (None = sem resposta)."""

    quiz_id: str = Field(..., description="ID do quiz")
    answers: list[int | None] = Field(..., description="Indice escolhido por questao")


class HintRequest(BaseModel):
    """Request de dica para uma questao."""

    question: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)


class HintResponse(BaseModel):
    hint: str


class QuizResultResponse(BaseModel):
    """Submissao + analise por dificuldade."""

    submission: Submission
    breakdown: dict[str, dict[str, int]] = Field(
        ..., description="Analise por dificuldade (corretas/total)"
    )


class QuizAnalytics(BaseModel):
    """Metricas do painel de estudo do usuario."""

    total_quizzes: int = Field(default=0, ge=0)
    global_accuracy: float = Field(default=0.0, ge=0, le=100, description="Acertos/questoes em %")
    active_subject: str = "N/A"
    study_days: int = Field(default=0, ge=0, description="Datas distintas com atividade")
    history: list[Submission] = Field(default_factory=list, description="Ultimas submissoes")
