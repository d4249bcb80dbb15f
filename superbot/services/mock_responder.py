"""
Mock Responder

Synthesizes deterministic canned replies when Bedrock credentials are
absent or the live call fails (demo mode).
"""

import asyncio
from typing import Optional

from ..models.chat import InferenceResult, TokenUsage
from ..utils.debug_logger import debug_logger
from .personas import resolve_persona

MOCK_TEMPLATES = {
    "default": (
        'Hello! I\'m a helpful AI assistant. You asked: "{text}". I\'d be happy to help you with that! '
        "This is currently running in demo mode - configure your AWS credentials to enable full "
        "Bedrock functionality."
    ),
    "funny": (
        'Hey there! 😄 You said: "{text}". That\'s hilarious! Well, not really, but I\'m programmed '
        "to be funny! 🤪 Did you hear about the AI that went to therapy? It had too many deep learning "
        "issues! 😂 (This is demo mode - add AWS creds for real Claude responses!)"
    ),
    "professional": (
        'Good day. Regarding your inquiry: "{text}". I shall provide you with a comprehensive and '
        "professional response. Currently operating in demonstration mode. Please configure AWS "
        "Bedrock credentials for full service functionality."
    ),
    "creative": (
        '✨ Wow, "{text}" - that sparks so many creative possibilities! 🎨 Imagine if we could paint '
        "with words, dance with ideas, and sculpt dreams from thin air! 🌟 Your question opens doorways "
        "to infinite creativity! (Demo mode active - AWS setup needed for real magic!)"
    ),
    "medical": (
        'Thank you for your medical inquiry: "{text}". Please note that I\'m an AI assistant and this '
        "information is for educational purposes only. Always consult with qualified healthcare "
        "professionals for medical advice. Currently in demo mode - AWS configuration required for full "
        "medical knowledge base access."
    ),
}

MOCK_USAGE = TokenUsage(input_tokens=50, output_tokens=100)


class MockResponder:
    """Deterministic canned-reply generator"""

    def __init__(self, delay: float = 0.5) -> None:
        self.delay = delay

    def render(self, last_user_text: str, persona_key: Optional[str]) -> str:
        template = MOCK_TEMPLATES[resolve_persona(persona_key)]
        # Plain replace so braces in user text are kept verbatim
        return template.replace("{text}", last_user_text)

    async def respond(self, last_user_text: str, persona_key: Optional[str] = "default",
                      request_id: Optional[str] = None) -> InferenceResult:
        debug_logger.log_mock(
            request_id,
            f"Generating mock response for persona '{resolve_persona(persona_key)}'"
        )
        content = self.render(last_user_text, persona_key)
        if self.delay:
            await asyncio.sleep(self.delay)
        return InferenceResult(content=content, usage=MOCK_USAGE.model_copy())
