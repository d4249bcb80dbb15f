"""
FastAPI dependencies

Services are built once in create_app() and stored on app.state; routes
receive them through these providers instead of module-level singletons.
"""

import uuid

from fastapi import Request

from ..config import Settings
from ..models.session import ConversationSession
from ..services.chat_service import ChatService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_conversation(request: Request) -> ConversationSession:
    """The caller's session, attached by SessionMiddleware"""
    conversation = getattr(request.state, "conversation", None)
    if conversation is None:
        conversation = ConversationSession()
        request.state.conversation = conversation
    return conversation


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())[:8]
