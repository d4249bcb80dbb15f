"""
Services layer for SUPER Bot

This module contains the backend wrappers (Bedrock, Lex, mock responder)
and the chat orchestration service.
"""

from .bedrock_service import BedrockService
from .chat_service import ChatService
from .lex_service import LexService
from .mock_responder import MockResponder

__all__ = [
    "BedrockService",
    "ChatService",
    "LexService",
    "MockResponder",
]
