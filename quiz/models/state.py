"""Quiz State - Maquina de estados do ciclo de vida do quiz.

requested -> generated -> (submitted -> graded) | abandoned

``graded`` e ``abandoned`` sao terminais. ``submitted -> generated`` existe
apenas para liberar o quiz quando a correcao falha antes de persistir.
"""

from core.exceptions import QuizStateError

from .enums import QuizStatus

TRANSITIONS: dict[QuizStatus, frozenset[QuizStatus]] = {
    QuizStatus.REQUESTED: frozenset({QuizStatus.GENERATED}),
    QuizStatus.GENERATED: frozenset({QuizStatus.SUBMITTED, QuizStatus.ABANDONED}),
    QuizStatus.SUBMITTED: frozenset({QuizStatus.GRADED, QuizStatus.GENERATED}),
    QuizStatus.GRADED: frozenset(),
    QuizStatus.ABANDONED: frozenset(),
}

TERMINAL_STATES = frozenset(s for s, targets in TRANSITIONS.items() if not targets)


def can_transition(current: QuizStatus, target: QuizStatus) -> bool:
    """Verifica se a transicao e permitida."""
    return target in TRANSITIONS[current]


def advance(current: QuizStatus, target: QuizStatus, quiz_id: str = "") -> QuizStatus:
    """Valida e retorna o novo estado.

    Raises:
        QuizStateError: Se a transicao nao for permitida
    """
    if not can_transition(current, target):
        raise QuizStateError(
            message=f"Transicao invalida: {current.value} -> {target.value}",
            details={"quiz_id": quiz_id, "current": current.value, "target": target.value},
        )
    return target


def is_terminal(status: QuizStatus) -> bool:
    """Retorna True para estados sem saida."""
    return status in TERMINAL_STATES
