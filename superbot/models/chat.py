"""
Chat-related data models

These models define the structure for chat requests and responses
in the SUPER Bot application. Field aliases match the JSON wire format
used by the browser (camelCase).
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Literal

from .lex import LexIntent


class ChatMessage(BaseModel):
    """A single conversation turn; immutable once created"""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Request model for chat submissions"""
    model_config = ConfigDict(populate_by_name=True)

    messages: List[ChatMessage]
    prompt_type: str = Field("default", alias="promptType")
    use_lex: bool = Field(False, alias="useLex")
    temperature: Optional[float] = None
    max_tokens: Optional[int] = Field(None, alias="maxTokens")


class TokenUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class InferenceResult(BaseModel):
    """Text completion returned by the inference wrapper or the mock responder"""
    content: str
    usage: Optional[TokenUsage] = None


class ChatResponse(BaseModel):
    """Response model for chat submissions"""
    model_config = ConfigDict(populate_by_name=True)

    content: str
    usage: Optional[TokenUsage] = None
    lex_intent: Optional[LexIntent] = Field(None, alias="lexIntent")
    session_id: str = Field(alias="sessionId")
    source: Literal["intent-kb", "inference"]

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
