"""
Client-side conversation orchestration for SUPER Bot
"""

from .conversation import ChatConversation, ConversationState, HttpChatTransport

__all__ = ["ChatConversation", "ConversationState", "HttpChatTransport"]
