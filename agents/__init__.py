"""IMC Bot Agent Module.

Agents:
    ConversationFlow: Five-step interview state machine (name, sex, height,
        weight, evaluation).
"""
from agents.conversation_flow import ConversationFlow, STEP_PROMPTS, format_summary

__all__ = [
    "ConversationFlow",
    "STEP_PROMPTS",
    "format_summary",
]
