"""
Bedrock Service

This service handles all interactions with AWS Bedrock: building the
Claude messages payload for a persona, invoking the model, and falling
back to the mock responder when credentials are missing or the call fails.

Note on streaming: Bedrock is invoked for the whole completion and the
finished text is then re-emitted as growing word prefixes. This is
progressive revelation of a complete answer, not token streaming.
"""

import asyncio
import inspect
import json
import logging
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Sequence

import boto3

from ..config import Settings
from ..errors import InferenceError, StreamingError
from ..models.chat import ChatMessage, InferenceResult, TokenUsage
from ..utils.debug_logger import debug_logger
from .mock_responder import MockResponder
from .personas import get_available_prompts, get_system_prompts, resolve_persona

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "bedrock-2023-05-31"


def progressive_chunks(content: str) -> List[str]:
    """Growing space-delimited word prefixes; the last one is the full text"""
    words = content.split(" ")
    return [" ".join(words[: i + 1]) for i in range(len(words))]


class BedrockService:
    """Service for model inference with AWS Bedrock"""

    def __init__(self,
                 settings: Settings,
                 client: Optional[Any] = None,
                 mock_responder: Optional[MockResponder] = None,
                 live_chunk_delay: float = 0.05,
                 mock_chunk_delay: float = 0.1) -> None:
        """
        Initialize the Bedrock service

        The client is only built (or accepted, when injected) if the
        credentials are usable; otherwise the service stays in demo mode
        for its whole lifetime.
        """
        self.settings = settings
        self.model_id = settings.bedrock_model_id
        self.max_tokens = settings.bedrock_max_tokens
        self.temperature = settings.bedrock_temperature
        self.system_prompts = get_system_prompts(settings)
        self.mock_responder = mock_responder or MockResponder()
        self.live_chunk_delay = live_chunk_delay
        self.mock_chunk_delay = mock_chunk_delay
        self.client: Optional[Any] = None

        if settings.credentials_usable:
            try:
                self.client = client or self._build_client()
                logger.info("Bedrock client initialized with AWS credentials")
            except Exception as e:
                logger.error(f"Failed to initialize Bedrock client: {e}")
        else:
            logger.info("Running in demo mode - no usable AWS credentials provided")
            logger.info("Access key: %s", "SET" if settings.aws_access_key_id else "NOT SET")
            logger.info("Secret key: %s", "SET" if settings.aws_secret_access_key else "NOT SET")
            if settings.uses_temporary_credentials:
                logger.info(
                    "Temporary credentials detected (ASIA...). AWS_SESSION_TOKEN is %s",
                    "SET" if settings.aws_session_token else "NOT SET",
                )

    def _build_client(self) -> Any:
        return boto3.client(
            "bedrock-runtime",
            region_name=self.settings.bedrock_region,
            aws_access_key_id=self.settings.aws_access_key_id,
            aws_secret_access_key=self.settings.aws_secret_access_key,
            aws_session_token=self.settings.aws_session_token or None,
        )

    def is_configured(self) -> bool:
        return self.client is not None and self.settings.credentials_usable

    def get_available_prompts(self) -> List[Dict[str, str]]:
        return get_available_prompts()

    def build_request_body(self,
                           messages: Sequence[ChatMessage],
                           persona_key: Optional[str] = "default",
                           temperature: Optional[float] = None,
                           max_tokens: Optional[int] = None) -> Dict[str, Any]:
        """
        Build the Anthropic messages payload for Bedrock

        Args:
            messages: Conversation history, oldest first
            persona_key: Persona whose system prompt is used
            temperature: Optional override of the configured temperature
            max_tokens: Optional override of the configured token limit (ignored unless positive)

        Returns:
            Request body dictionary ready for JSON encoding
        """
        return {
            "anthropic_version": ANTHROPIC_VERSION,
            "max_tokens": max_tokens if max_tokens is not None and max_tokens > 0 else self.max_tokens,
            "temperature": temperature if temperature is not None else self.temperature,
            "system": self.system_prompts[resolve_persona(persona_key)],
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }

    async def _invoke(self, body: Dict[str, Any], request_id: Optional[str] = None,
                      request: Optional[Any] = None) -> InferenceResult:
        debug_logger.log_bedrock(request_id, f"Calling Bedrock with model: {self.model_id}", request)
        response = await asyncio.to_thread(
            self.client.invoke_model,
            modelId=self.model_id,
            contentType="application/json",
            accept="application/json",
            body=json.dumps(body),
        )
        response_body = json.loads(response["body"].read())
        content = response_body["content"][0]["text"]

        usage = None
        if "usage" in response_body:
            usage = TokenUsage(
                input_tokens=response_body["usage"].get("input_tokens", 0),
                output_tokens=response_body["usage"].get("output_tokens", 0),
            )
            debug_logger.log_bedrock(
                request_id,
                f"Token usage - Input: {usage.input_tokens}, Output: {usage.output_tokens}",
                request,
            )
        else:
            debug_logger.log_bedrock(request_id, "Token usage not available in response", request)

        return InferenceResult(content=content, usage=usage)

    async def _mock(self, messages: Sequence[ChatMessage], persona_key: Optional[str],
                    request_id: Optional[str] = None) -> InferenceResult:
        last_text = (messages[-1].content if messages else "") or "Hello"
        return await self.mock_responder.respond(last_text, persona_key, request_id=request_id)

    async def chat(self,
                   messages: Sequence[ChatMessage],
                   persona_key: Optional[str] = "default",
                   temperature: Optional[float] = None,
                   max_tokens: Optional[int] = None,
                   request_id: Optional[str] = None,
                   request: Optional[Any] = None) -> InferenceResult:
        """
        Get a single complete response

        Demo mode answers from the mock responder. Live failures fall back to
        the mock responder; only a failing fallback raises InferenceError.
        """
        if self.client is None:
            debug_logger.log_bedrock(request_id, "Using demo mode for chat", request)
            try:
                return await self._mock(messages, persona_key, request_id)
            except Exception as e:
                logger.error(f"Error in demo mode: {e}")
                return InferenceResult(
                    content=f"Sorry, there was an error in demo mode. Error: {e}",
                    usage=TokenUsage(),
                )

        body = self.build_request_body(messages, persona_key, temperature, max_tokens)
        try:
            result = await self._invoke(body, request_id, request)
            debug_logger.log_bedrock(request_id, "Bedrock query completed successfully", request)
            return result
        except Exception as e:
            logger.error(f"Bedrock API error: {e}")
            try:
                return await self._mock(messages, persona_key, request_id)
            except Exception as fallback_error:
                logger.error(f"Fallback to mock response failed: {fallback_error}")
                raise InferenceError("Failed to get response from Bedrock", details=str(e)) from fallback_error

    async def iter_chunks(self,
                          messages: Sequence[ChatMessage],
                          persona_key: Optional[str] = "default",
                          temperature: Optional[float] = None,
                          max_tokens: Optional[int] = None,
                          request_id: Optional[str] = None,
                          request: Optional[Any] = None) -> AsyncIterator[str]:
        """Yield cumulative text chunks of the complete answer"""
        if self.client is None:
            result = await self._mock(messages, persona_key, request_id)
            delay = self.mock_chunk_delay
        else:
            body = self.build_request_body(messages, persona_key, temperature, max_tokens)
            try:
                result = await self._invoke(body, request_id, request)
            except Exception as e:
                logger.error(f"Bedrock streaming error: {e}")
                raise StreamingError("Failed to stream response from Bedrock", details=str(e)) from e
            delay = self.live_chunk_delay

        for chunk in progressive_chunks(result.content):
            yield chunk
            if delay:
                await asyncio.sleep(delay)

    async def stream_chat(self,
                          messages: Sequence[ChatMessage],
                          persona_key: Optional[str],
                          on_chunk: Callable[[str], Any],
                          temperature: Optional[float] = None,
                          max_tokens: Optional[int] = None,
                          request_id: Optional[str] = None) -> None:
        """Feed each cumulative chunk to on_chunk (sync or async callable)"""
        async for chunk in self.iter_chunks(messages, persona_key, temperature, max_tokens, request_id):
            outcome = on_chunk(chunk)
            if inspect.isawaitable(outcome):
                await outcome
