"""
Data models for SUPER Bot

This module contains all Pydantic models for data validation and serialization.
"""

from .chat import ChatMessage, ChatRequest, ChatResponse, InferenceResult, TokenUsage
from .lex import LexIntent, LexResponse
from .session import ConversationSession, generate_session_id

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "InferenceResult",
    "TokenUsage",
    "LexIntent",
    "LexResponse",
    "ConversationSession",
    "generate_session_id",
]
