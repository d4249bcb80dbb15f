"""
Web routes for SUPER Bot

This module contains the chat page and the JSON / event-stream API used by it.
"""

import functools
import inspect
import json
import logging
import secrets
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from fastapi.templating import Jinja2Templates
from pydantic import TypeAdapter, ValidationError

from ..analytics import capture_event, flush_events
from ..config import Settings
from ..errors import ChatValidationError, UnauthorizedDebugAccess
from ..models.chat import ChatMessage, ChatRequest
from ..models.session import ConversationSession
from ..services.chat_service import ChatService, validate_messages
from ..utils.debug_logger import debug_logger
from .dependencies import get_app_settings, get_chat_service, get_conversation, get_request_id

logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter()

# Templates setup
BASE_DIR = Path(__file__).parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

SUGGESTIONS = [
    "What are the company holidays?",
    "Can I use paid time off when I am sick?",
    "When do I get paid?",
    "How do we sign up for benefits?",
]

_messages_adapter = TypeAdapter(List[ChatMessage])


def track_event(event_name: str):
    """
    Decorator to capture a PostHog event when a route is hit.
    Works for sync and async routes. Routes can add properties by setting
    request.state.analytics. Capture never affects the response.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if inspect.iscoroutinefunction(func):
                response = await func(*args, **kwargs)
            else:
                response = func(*args, **kwargs)

            request: Optional[Request] = kwargs.get("request")
            if request is None:
                return response

            try:
                props = {
                    "path": str(request.url.path),
                    "method": request.method,
                }
                props.update(getattr(request.state, "analytics", {}) or {})
                session_id = getattr(request.state, "session_id", None)
                if session_id:
                    props["session_id"] = session_id
                if capture_event(event_name=event_name, properties=props, distinct_id=session_id):
                    flush_events()
            except Exception as e:
                logger.warning(f"PostHog capture failed for {event_name}: {e}")

            return response
        return wrapper
    return decorator


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _mask(value: Optional[str]) -> str:
    return f"{value[:4]}..." if value else "Not set"


@router.get("/", response_class=HTMLResponse)
@track_event("page_home")
async def index(request: Request,
                settings: Settings = Depends(get_app_settings),
                chat_service: ChatService = Depends(get_chat_service)) -> HTMLResponse:
    """Serve the chat interface"""
    return templates.TemplateResponse(request, "chat.html", {
        "personas": chat_service.get_available_prompts(),
        "default_persona": settings.default_persona,
        "show_persona_selector": settings.show_persona_selector,
        "use_intent_recognition": settings.use_intent_recognition,
        "is_configured": chat_service.bedrock_service.is_configured(),
        "suggestions": SUGGESTIONS,
    })


@router.post("/api/chat")
@track_event("chat_message")
async def chat(request: Request,
               chat_service: ChatService = Depends(get_chat_service),
               conversation: ConversationSession = Depends(get_conversation)):
    """
    Handle a whole-response chat submission

    Body: {messages, promptType?, useLex?, temperature?, maxTokens?}
    Returns {content, usage?, lexIntent?, sessionId, source} or {error, details?}
    """
    request_id = get_request_id(request)

    try:
        body = await request.json()
    except Exception:
        return _error(400, "Invalid JSON")

    if not isinstance(body, dict) or not body.get("messages"):
        debug_logger.log_route(request_id, "Missing messages in chat request", request)
        return _error(400, "Messages are required")

    try:
        chat_request = ChatRequest.model_validate(body)
    except ValidationError as e:
        return _error(400, "Invalid chat request", str(e))

    debug_logger.log_route(
        request_id,
        f"Received chat request - Session: {conversation.session_id}, "
        f"Messages: {len(chat_request.messages)}, Persona: {chat_request.prompt_type}, Lex: {chat_request.use_lex}",
        request
    )

    try:
        chat_response = await chat_service.process_chat(request_id, chat_request, conversation, request)
    except ChatValidationError as e:
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    except Exception as e:
        logger.error(f"Chat API error: {e}", exc_info=True)
        return _error(500, "Failed to process chat request", str(e) or type(e).__name__)

    request.state.analytics = {
        "persona": chat_request.prompt_type,
        "source": chat_response.source,
        "message_count": len(chat_request.messages),
    }
    debug_logger.log_route(request_id, f"Responding from {chat_response.source}", request)
    return chat_response.to_wire()


@router.get("/api/chat")
@track_event("chat_stream")
async def chat_stream(request: Request,
                      messages: Optional[str] = Query(None),
                      prompt_type: str = Query("default", alias="promptType"),
                      chat_service: ChatService = Depends(get_chat_service)):
    """
    Stream a chat response as server-sent events

    Query: messages (URL-encoded JSON array), promptType (optional)
    """
    request_id = get_request_id(request)

    if not messages:
        return _error(400, "Messages parameter is required")

    try:
        parsed = _messages_adapter.validate_python(json.loads(messages))
        validate_messages(parsed)
    except ChatValidationError as e:
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    except (ValueError, ValidationError) as e:
        return _error(400, "Failed to process stream request", str(e))

    request.state.analytics = {"persona": prompt_type, "message_count": len(parsed)}
    debug_logger.log_route(request_id, f"Streaming {len(parsed)} messages with persona {prompt_type}", request)

    return StreamingResponse(
        chat_service.stream_chat(request_id, parsed, prompt_type, request),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.get("/api/prompts")
def prompts(chat_service: ChatService = Depends(get_chat_service)):
    """Return the persona catalog"""
    try:
        return {"prompts": chat_service.get_available_prompts(), "success": True}
    except Exception as e:
        logger.error(f"Prompts API error: {e}")
        return _error(500, "Failed to get available prompts")


@router.post("/api/session/reset")
@track_event("session_reset")
async def reset_session(request: Request,
                        chat_service: ChatService = Depends(get_chat_service),
                        conversation: ConversationSession = Depends(get_conversation)):
    """Start a new conversation; the session cookie is refreshed by SessionMiddleware"""
    session_id = chat_service.reset_session(conversation)
    request.state.session_id = session_id
    return {"sessionId": session_id, "success": True}


@router.post("/api/transcribe")
async def transcribe(request: Request,
                     chat_service: ChatService = Depends(get_chat_service),
                     conversation: ConversationSession = Depends(get_conversation)):
    """Transcribe a recorded utterance through Lex; always answers with display text"""
    audio = await request.body()
    if not audio:
        return _error(400, "Audio is required")
    content_type = request.headers.get("content-type") or "audio/wav"
    text = await chat_service.transcribe_audio(get_request_id(request), audio, content_type, conversation)
    return {"text": text}


def authorize_debug(settings: Settings, key: Optional[str]) -> None:
    """Allow in development, or with the shared DEBUG_SECRET_KEY"""
    if settings.is_development:
        return
    if settings.debug_secret_key and key and secrets.compare_digest(key, settings.debug_secret_key):
        return
    raise UnauthorizedDebugAccess()


@router.get("/api/debug")
def debug_info(key: Optional[str] = None,
               settings: Settings = Depends(get_app_settings),
               chat_service: ChatService = Depends(get_chat_service)):
    """Masked configuration snapshot for deployment troubleshooting"""
    try:
        authorize_debug(settings, key)
    except UnauthorizedDebugAccess as e:
        return JSONResponse(status_code=e.status_code, content=e.to_dict())

    return {
        "message": "Environment Debug Information",
        "environment": {
            "hasAccessKey": bool(settings.aws_access_key_id),
            "hasSecretKey": bool(settings.aws_secret_access_key),
            "hasSessionToken": bool(settings.aws_session_token),
            "awsRegion": settings.aws_region,
            "bedrockRegion": settings.bedrock_region,
            "hasBotId": bool(settings.lex_bot_id),
            "hasBotAlias": bool(settings.lex_bot_alias_id),
            "localeId": settings.lex_bot_locale_id,
            "bedrockModelId": settings.bedrock_model_id,
            "appEnv": settings.environment,
            "deploymentEnv": settings.deployment_env,
            "botId": _mask(settings.lex_bot_id),
            "botAlias": _mask(settings.lex_bot_alias_id),
            "accessKey": _mask(settings.aws_access_key_id),
        },
        "config": {
            "awsConfig": {
                "region": settings.aws_region,
                "hasCredentials": settings.has_aws_credentials,
            },
            "lexConfig": {
                "botId": _mask(settings.lex_bot_id),
                "botAliasId": _mask(settings.lex_bot_alias_id),
                "localeId": settings.lex_bot_locale_id,
                "configured": chat_service.lex_service.is_configured(),
            },
            "bedrockConfig": {
                "modelId": settings.bedrock_model_id,
                "region": settings.bedrock_region,
                "configured": chat_service.bedrock_service.is_configured(),
            },
        },
    }
