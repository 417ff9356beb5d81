"""Quiz Templates - Prompts e constantes de fallback."""

from ..models.enums import QuizDifficulty

# =============================================================================
# SYSTEM PROMPTS
# =============================================================================

QUIZ_SYSTEM_PROMPT = """You are a quiz generator. Always return valid JSON only, no markdown formatting."""

HINT_SYSTEM_PROMPT = """You are a helpful tutor. Provide hints that guide students to think about the problem without revealing the answer."""

TIPS_SYSTEM_PROMPT = """You are an educational advisor. Provide specific, actionable improvement tips based on student mistakes."""

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

QUIZ_GENERATION_PROMPT = """Generate a {num_questions}-question quiz on {topic} for {grade_level} grade level in the subject of {subject}.

Requirements:
1. Each question should have exactly 4 multiple-choice options
2. Indicate the correct answer (0-indexed)
3. Mark difficulty as easy, medium, or hard
4. Provide a brief explanation for each question
5. Questions should be appropriate for {grade_level} grade level

Difficulty distribution: {easy_count} easy, {medium_count} medium, {hard_count} hard questions.

Return the response as a JSON object with this structure:
{{
  "title": "Quiz title",
  "questions": [
    {{
      "question": "Question text",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": 0,
      "difficulty": "easy",
      "explanation": "Brief explanation"
    }}
  ]
}}"""

HINT_PROMPT = """Given this question: "{question}" in the subject of {subject}, provide a helpful hint that guides the student without giving away the answer. Keep it concise (1-2 sentences)."""

TIPS_PROMPT = """Based on these mistakes in {subject}, provide 2 specific and actionable improvement tips. Focus on learning strategies and concepts that need reinforcement.

Mistakes:
{mistakes}

Provide exactly 2 tips, each on a new line, without numbering."""

MISTAKE_LINE = """{index}. Question: {question}
   Your answer: {user_answer}
   Correct answer: {correct_answer}"""

# =============================================================================
# FALLBACKS
# =============================================================================

HINT_FALLBACK = "Think carefully about the concepts involved."

FALLBACK_TIPS = [
    "Review the concepts you got wrong and practice similar problems.",
    "Take time to understand why the correct answer is correct, not just memorize it.",
]

FALLBACK_OPTIONS = ["Option A", "Option B", "Option C", "Option D"]

FALLBACK_EXPLANATION = "The AI service is unavailable, this is a placeholder question."

# Ordem do round-robin do quiz de fallback
FALLBACK_DIFFICULTY_CYCLE = (QuizDifficulty.EASY, QuizDifficulty.MEDIUM, QuizDifficulty.HARD)


def format_mistakes(mistakes) -> str:
    """Formata lista de Mistake para o prompt de dicas."""
    lines = []
    for i, m in enumerate(mistakes, start=1):
        line = MISTAKE_LINE.format(
            index=i,
            question=m.question,
            user_answer=m.user_answer,
            correct_answer=m.correct_answer,
        )
        if m.explanation:
            line += f"\n   Explanation: {m.explanation}"
        lines.append(line)
    return "\n\n".join(lines)
