"""AI Agents package."""

from smartspend.agents.ai_agents import (
    CHAT_EMPTY_REPLY,
    CHAT_FAILURE_REPLY,
    CHAT_GREETING,
    UNAVAILABLE_INSIGHT,
    CollaboratorUnavailableError,
    FinanceAssistant,
    extract_json,
    normalize_receipt_image,
)
from smartspend.agents.context import build_chat_context

__all__ = [
    "CHAT_EMPTY_REPLY",
    "CHAT_FAILURE_REPLY",
    "CHAT_GREETING",
    "UNAVAILABLE_INSIGHT",
    "CollaboratorUnavailableError",
    "FinanceAssistant",
    "build_chat_context",
    "extract_json",
    "normalize_receipt_image",
]
