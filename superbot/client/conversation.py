"""
Conversation client

Python counterpart of the chat page's state machine: Idle -> Submitting ->
Idle (or Aborted). Messages are appended optimistically, one request is in
flight at a time, and an aborted request never changes state afterwards.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Set

import httpx

from ..models.chat import ChatMessage

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Sorry, I encountered an error while processing your request. Please try again."


class ConversationState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    ABORTED = "aborted"


class HttpChatTransport:
    """Talks to the SUPER Bot API; the shared client keeps the session cookie"""

    def __init__(self, base_url: str = "http://localhost:8000", client: Optional[httpx.AsyncClient] = None) -> None:
        self.client = client or httpx.AsyncClient(base_url=base_url)

    async def send_chat(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.post("/api/chat", json=payload)
        response.raise_for_status()
        return response.json()

    async def reset_session(self) -> str:
        response = await self.client.post("/api/session/reset")
        response.raise_for_status()
        return response.json()["sessionId"]

    async def aclose(self) -> None:
        await self.client.aclose()


class ChatConversation:
    """
    One conversation with the chat API

    Args:
        transport: Object with async send_chat(payload) and reset_session()
        persona: Persona key sent as promptType
        use_intent_recognition: Sent as useLex
        temperature: Sampling temperature sent with every request
        max_tokens: Token limit sent with every request
    """

    def __init__(self,
                 transport: Any,
                 persona: str = "default",
                 use_intent_recognition: bool = True,
                 temperature: float = 0.7,
                 max_tokens: int = 4096) -> None:
        self.transport = transport
        self.persona = persona
        self.use_intent_recognition = use_intent_recognition
        self.temperature = temperature
        self.max_tokens = max_tokens

        self.messages: List[ChatMessage] = []
        self.input = ""
        self.state = ConversationState.IDLE
        self.last_response: Optional[Dict[str, Any]] = None
        self._inflight: Optional[asyncio.Future] = None
        self._aborted: Set[asyncio.Future] = set()

    @property
    def is_submitting(self) -> bool:
        return self.state is ConversationState.SUBMITTING

    def _payload(self) -> Dict[str, Any]:
        return {
            "messages": [m.model_dump() for m in self.messages],
            "promptType": self.persona,
            "useLex": self.use_intent_recognition,
            "temperature": self.temperature,
            "maxTokens": self.max_tokens,
        }

    async def submit(self, text: Optional[str] = None) -> Optional[ChatMessage]:
        """
        Send the user's text (or the pending input) and append the reply

        Returns the assistant message that was appended, or None when the
        submission was ignored or aborted.
        """
        content = (self.input if text is None else text).strip()
        if not content or self.is_submitting:
            return None

        self.messages.append(ChatMessage(role="user", content=content))
        self.input = ""
        self.state = ConversationState.SUBMITTING

        task = asyncio.ensure_future(self.transport.send_chat(self._payload()))
        self._inflight = task

        try:
            data = await task
            reply = ChatMessage(role="assistant", content=data["content"])
            self.last_response = data
            if data.get("lexIntent"):
                logger.info(f"Detected intent: {data['lexIntent']}")
        except asyncio.CancelledError:
            if task in self._aborted:
                self._aborted.discard(task)
                logger.info("Request was aborted")
                return None
            if self._inflight is task:
                self._inflight = None
                self.state = ConversationState.IDLE
            raise
        except Exception as e:
            logger.error(f"Chat error: {e}")
            reply = ChatMessage(role="assistant", content=ERROR_MESSAGE)

        if self._inflight is not task:
            # Aborted after the call had already resolved
            self._aborted.discard(task)
            return None

        self.messages.append(reply)
        self._inflight = None
        self.state = ConversationState.IDLE
        return reply

    def abort(self) -> None:
        """Cancel the in-flight request; its late result is discarded"""
        task = self._inflight
        if task is not None:
            self._aborted.add(task)
            task.cancel()
        self._inflight = None
        self.state = ConversationState.ABORTED

    async def clear(self) -> Optional[str]:
        """Empty the conversation and ask the server for a new session ID"""
        self.messages = []
        self.last_response = None
        try:
            return await self.transport.reset_session()
        except Exception as e:
            logger.warning(f"Session reset failed: {e}")
            return None
