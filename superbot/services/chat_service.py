"""
Chat Service

This service orchestrates the chat flow: an optional Lex intent pass that
may answer directly from the knowledge base, then Bedrock inference, for
both whole responses and server-sent-event streams.
"""

import json
import logging
from typing import Any, AsyncIterator, List, Optional

from ..config import Settings
from ..errors import ChatValidationError, IntentRecognitionError, SuperBotError
from ..models.chat import ChatMessage, ChatRequest, ChatResponse, TokenUsage
from ..models.lex import LexResponse
from ..models.session import ConversationSession
from ..utils.debug_logger import debug_logger
from .bedrock_service import BedrockService
from .lex_service import LexService

logger = logging.getLogger(__name__)

SSE_DONE = "data: [DONE]\n\n"


def sse_frame(payload: dict, event: Optional[str] = None) -> str:
    prefix = f"event: {event}\n" if event else ""
    return f"{prefix}data: {json.dumps(payload)}\n\n"


def validate_messages(messages: List[ChatMessage]) -> None:
    """Enforce a non-empty history that ends with a user turn"""
    if not messages:
        raise ChatValidationError("Messages are required")
    if messages[-1].role != "user":
        raise ChatValidationError("Messages are required", details="The last message must be from the user")


class ChatService:
    """Service for orchestrating chat interactions"""

    def __init__(self, settings: Settings, bedrock_service: BedrockService, lex_service: LexService):
        """Initialize the chat service with its backend wrappers"""
        self.settings = settings
        self.bedrock_service = bedrock_service
        self.lex_service = lex_service

    async def _recognize_intent(self, request_id: str, text: str, session: ConversationSession,
                                request: Optional[Any] = None) -> Optional[LexResponse]:
        """Best-effort Lex pass; failures are logged and ignored"""
        if not self.lex_service.is_configured():
            debug_logger.log_chat(request_id, "Lex not configured, skipping intent recognition", request)
            return None
        try:
            lex_response = await self.lex_service.recognize_text(text, session=session, request_id=request_id)
            debug_logger.log_chat(
                request_id,
                f"Lex intent: {lex_response.intent.name if lex_response.intent else None}",
                request
            )
            return lex_response
        except IntentRecognitionError as e:
            logger.warning(f"Lex processing failed, falling back to Bedrock only: {e.details or e}")
            return None

    async def process_chat(self, request_id: str, chat_request: ChatRequest, session: ConversationSession,
                           request: Optional[Any] = None) -> ChatResponse:
        """
        Process a chat submission end-to-end

        Args:
            request_id: Unique request identifier for tracing
            chat_request: Validated chat request
            session: The caller's conversation session
            request: Optional FastAPI request object for timing

        Returns:
            ChatResponse with source "intent-kb" when Lex answered directly,
            otherwise "inference"
        """
        validate_messages(chat_request.messages)
        last_message = chat_request.messages[-1]
        debug_logger.log_chat(
            request_id,
            f"Processing chat for session {session.session_id}: "
            f"'{last_message.content[:50]}{'...' if len(last_message.content) > 50 else ''}'",
            request
        )

        lex_response = None
        if chat_request.use_lex:
            lex_response = await self._recognize_intent(request_id, last_message.content, session, request)
            if lex_response and lex_response.has_direct_response():
                debug_logger.log_chat(request_id, "Using Lex knowledge base response", request)
                return ChatResponse(
                    content=lex_response.message,
                    usage=TokenUsage(input_tokens=0, output_tokens=0),
                    lex_intent=lex_response.intent,
                    session_id=session.session_id,
                    source="intent-kb",
                )

        result = await self.bedrock_service.chat(
            chat_request.messages,
            chat_request.prompt_type,
            temperature=chat_request.temperature,
            max_tokens=chat_request.max_tokens,
            request_id=request_id,
            request=request,
        )
        debug_logger.log_chat(request_id, f"Chat processing completed for session {session.session_id}", request)
        return ChatResponse(
            content=result.content,
            usage=result.usage,
            lex_intent=lex_response.intent if lex_response else None,
            session_id=session.session_id,
            source="inference",
        )

    async def stream_chat(self, request_id: str, messages: List[ChatMessage], prompt_type: str = "default",
                          request: Optional[Any] = None) -> AsyncIterator[str]:
        """
        Yield server-sent-event frames for a chat response

        Each frame carries the cumulative text so far; the stream ends with
        [DONE], or with a single error event if the backend call fails.
        """
        try:
            async for chunk in self.bedrock_service.iter_chunks(
                messages, prompt_type, request_id=request_id, request=request
            ):
                yield sse_frame({"content": chunk})
        except Exception as e:
            logger.error(f"Streaming error: {e}")
            if isinstance(e, SuperBotError):
                payload = e.to_dict()
            else:
                payload = {"error": "Failed to stream response", "details": str(e)}
            yield sse_frame(payload, event="error")
            return
        yield SSE_DONE

    def reset_session(self, session: ConversationSession) -> str:
        return self.lex_service.reset_session(session)

    def get_available_prompts(self) -> List[dict]:
        return self.bedrock_service.get_available_prompts()

    async def transcribe_audio(self, request_id: str, audio: bytes, content_type: str,
                               session: ConversationSession) -> str:
        """Best-effort transcription through Lex; always returns display text"""
        if not self.lex_service.is_configured():
            return "Audio transcription not configured"
        try:
            lex_response = await self.lex_service.recognize_audio(
                audio, content_type, session=session, request_id=request_id
            )
        except IntentRecognitionError as e:
            logger.error(f"Audio transcription error: {e.details or e}")
            return "Failed to transcribe audio"
        return lex_response.message or "Could not transcribe audio"
