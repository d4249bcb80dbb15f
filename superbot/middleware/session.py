"""
Session Middleware for SUPER Bot

Provides cookie-based conversation sessions. Each request gets a
ConversationSession on request.state.conversation; the cookie is refreshed
from it after the route ran, so a reset inside a route reaches the browser.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response
import logging
import traceback

from ..config import get_settings
from ..models.session import ConversationSession

logger = logging.getLogger(__name__)
settings = get_settings()

SESSION_COOKIE = "session_id"


class SessionMiddleware(BaseHTTPMiddleware):
    """
    Middleware that manages conversation sessions using HTTP cookies.

    Features:
    - Generates session IDs for new visitors
    - Browser-session cookie: lives until reset or the browser closes
    - Makes the session available via request.state.conversation
      (and its ID via request.state.session_id)
    """

    async def dispatch(self, request, call_next):
        try:
            conversation = ConversationSession(request.cookies.get(SESSION_COOKIE))
            if settings.debug:
                logger.debug(f"Using session_id {conversation.session_id} for {request.url.path}")

            request.state.conversation = conversation
            request.state.session_id = conversation.session_id

            response: Response = await call_next(request)

            # Write back after the route so a reset reaches the browser
            try:
                response.set_cookie(
                    SESSION_COOKIE,
                    conversation.session_id,
                    httponly=True,
                    samesite="lax",
                )
            except Exception as cookie_error:
                logger.error(f"Failed to set session cookie for {request.url.path}: {cookie_error}")

            return response

        except Exception as e:
            logger.error(f"Exception in session middleware for {request.url.path}: {e}")
            logger.error(f"Traceback: {traceback.format_exc()}")
            return JSONResponse(
                status_code=500,
                content={"error": "Session middleware error", "path": str(request.url.path)}
            )
