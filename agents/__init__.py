"""Agents module - Abstracoes de IA de alto nivel sobre o GenerationClient."""

from agents.note_assistant import GlossaryEntry, GrammarIssue, NoteAssistant

__all__ = [
    "NoteAssistant",
    "GlossaryEntry",
    "GrammarIssue",
]
