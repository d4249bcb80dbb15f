"""
Lex V2 Service

This service handles all interactions with AWS Lex V2: text and audio
recognition against the configured bot, and session identifier management.
"""

from __future__ import annotations

import asyncio
import base64
import gzip
import json
import logging
from typing import Any, Dict, Optional

import boto3

from ..config import Settings
from ..errors import IntentRecognitionError
from ..models.lex import LexIntent, LexResponse
from ..models.session import ConversationSession
from ..utils.debug_logger import debug_logger

logger = logging.getLogger(__name__)

CONFIRMATION_STATES = ("Confirmed", "Denied", "None")


def decode_lex_header(value: Any) -> Any:
    """
    Decode a RecognizeUtterance header field

    Lex returns messages and sessionState for utterances gzip-compressed
    and base64-encoded. Values that are already decoded pass through.
    """
    if not value or not isinstance(value, str):
        return value or None
    try:
        return json.loads(gzip.decompress(base64.b64decode(value)))
    except (ValueError, OSError) as e:
        logger.warning(f"Could not decode Lex header value: {e}")
        return None


def _drain(stream: Any) -> bytes:
    chunks = []
    for chunk in iter(lambda: stream.read(8192), b""):
        chunks.append(chunk)
    return b"".join(chunks)


class LexService:
    """Service for interacting with AWS Lex V2"""

    def __init__(self, settings: Settings, client: Optional[Any] = None,
                 session: Optional[ConversationSession] = None) -> None:
        """
        Initialize the Lex service

        Args:
            settings: Application settings with bot and credential config
            client: Optional pre-built lexv2-runtime client
            session: Default session used when callers don't pass their own
        """
        self.bot_id = settings.lex_bot_id
        self.bot_alias_id = settings.lex_bot_alias_id
        self.locale_id = settings.lex_bot_locale_id
        self.access_key_id = settings.aws_access_key_id
        self.session = session or ConversationSession()
        self.client = client

        if self.client is None and self.is_configured():
            session_factory = boto3.Session(
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
                aws_session_token=settings.aws_session_token or None,
                region_name=settings.aws_region,
            )
            self.client = session_factory.client("lexv2-runtime", region_name=settings.aws_region)

    def is_configured(self) -> bool:
        return bool(self.bot_id and self.bot_alias_id and self.access_key_id)

    def _session(self, session: Optional[ConversationSession]) -> ConversationSession:
        return session if session is not None else self.session

    def get_current_session_id(self, session: Optional[ConversationSession] = None) -> str:
        return self._session(session).session_id

    def reset_session(self, session: Optional[ConversationSession] = None) -> str:
        """Start a new conversation by regenerating the session ID"""
        return self._session(session).reset()

    @staticmethod
    def _map_intent(session_state: Optional[Dict[str, Any]]) -> Optional[LexIntent]:
        intent = (session_state or {}).get("intent")
        if not intent:
            return None
        confirmation = intent.get("confirmationState")
        return LexIntent(
            name=intent.get("name") or "",
            confirmation_state=confirmation if confirmation in CONFIRMATION_STATES else None,
            slots=intent.get("slots"),
        )

    async def recognize_text(self,
                             text: str,
                             session_attributes: Optional[Dict[str, str]] = None,
                             session: Optional[ConversationSession] = None,
                             request_id: Optional[str] = None) -> LexResponse:
        """
        Send text to Lex V2 for intent recognition

        Args:
            text: User input text
            session_attributes: Optional Lex session attributes
            session: Conversation session (defaults to the service's own)
            request_id: Optional request ID for debug logging

        Returns:
            LexResponse with the first direct message, intent and raw state

        Raises:
            IntentRecognitionError: On any transport or backend failure
        """
        session_id = self.get_current_session_id(session)
        debug_logger.log_lex(request_id, f"Recognizing text for session {session_id}")
        try:
            if self.client is None:
                raise RuntimeError("Lex client is not configured")
            response = await asyncio.to_thread(
                self.client.recognize_text,
                botId=self.bot_id,
                botAliasId=self.bot_alias_id,
                localeId=self.locale_id,
                sessionId=session_id,
                text=text,
                sessionState={"sessionAttributes": session_attributes or {}},
            )
        except Exception as e:
            logger.error(f"Lex text recognition error: {e}")
            raise IntentRecognitionError("Failed to process text with Lex", details=str(e)) from e

        messages = response.get("messages") or []
        session_state = response.get("sessionState")
        return LexResponse(
            message=messages[0].get("content") if messages else None,
            intent=self._map_intent(session_state),
            session_state=session_state,
            interpretations=response.get("interpretations"),
        )

    async def recognize_audio(self,
                              audio: Any,
                              content_type: str = "audio/wav",
                              session: Optional[ConversationSession] = None,
                              request_id: Optional[str] = None) -> LexResponse:
        """
        Send a complete audio utterance to Lex V2

        Any audio Lex returns is drained but not converted to text; only the
        text messages Lex sends alongside it are used.

        Raises:
            IntentRecognitionError: On any transport or backend failure
        """
        session_id = self.get_current_session_id(session)
        try:
            if self.client is None:
                raise RuntimeError("Lex client is not configured")
            payload = audio.read() if hasattr(audio, "read") else bytes(audio)
            debug_logger.log_lex(request_id, f"Recognizing {len(payload)} bytes of {content_type} audio")
            response = await asyncio.to_thread(
                self.client.recognize_utterance,
                botId=self.bot_id,
                botAliasId=self.bot_alias_id,
                localeId=self.locale_id,
                sessionId=session_id,
                requestContentType=content_type,
                inputStream=payload,
            )
            if response.get("audioStream") is not None:
                audio_out = await asyncio.to_thread(_drain, response["audioStream"])
                debug_logger.log_lex(request_id, f"Drained {len(audio_out)} bytes of response audio")
        except Exception as e:
            logger.error(f"Lex audio recognition error: {e}")
            raise IntentRecognitionError("Failed to process audio with Lex", details=str(e)) from e

        messages = decode_lex_header(response.get("messages")) or []
        session_state = decode_lex_header(response.get("sessionState"))
        return LexResponse(
            message=messages[0].get("content") if messages else None,
            session_state=session_state,
        )
