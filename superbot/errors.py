"""
Error types for SUPER Bot

Route handlers translate these into JSON error bodies. Configuration
absence is an operating mode (demo mode), not an error, and has no type here.
"""

from typing import Optional


class SuperBotError(Exception):
    """Base class for all application errors"""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ChatValidationError(SuperBotError):
    """Missing, empty or malformed chat messages"""

    status_code = 400


class UpstreamError(SuperBotError):
    """A managed backend (Bedrock or Lex) call failed"""


class InferenceError(UpstreamError):
    pass


class StreamingError(UpstreamError):
    pass


class IntentRecognitionError(UpstreamError):
    pass


class UnauthorizedDebugAccess(SuperBotError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Unauthorized")
