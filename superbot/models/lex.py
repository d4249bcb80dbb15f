"""
Lex V2 data models

These models define the local shape of Lex V2 recognition results
used in the SUPER Bot application.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any, Literal


class LexIntent(BaseModel):
    """Represents a Lex intent"""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    confirmation_state: Optional[Literal["Confirmed", "Denied", "None"]] = Field(
        None, alias="confirmationState"
    )
    slots: Optional[Dict[str, Any]] = None


class LexResponse(BaseModel):
    """Represents a Lex V2 recognition result"""
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    intent: Optional[LexIntent] = None
    session_state: Optional[Dict[str, Any]] = Field(None, alias="sessionState")
    interpretations: Optional[List[Dict[str, Any]]] = None

    def has_direct_response(self) -> bool:
        """True if Lex answered directly (no inference needed)"""
        return bool(self.message and self.message.strip())
