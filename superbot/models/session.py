"""
Conversation session

Holds the identifier that correlates conversation turns with Lex. The
session object is owned by the caller (one per browser cookie); nothing
is persisted.
"""

import random
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """Generate a session ID: session-<epoch millis>-<9 base-36 chars>"""
    suffix = "".join(random.choice(_ALPHABET) for _ in range(9))
    return f"session-{int(time.time() * 1000)}-{suffix}"


class ConversationSession:
    """Mutable holder for one conversation's session ID"""

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id or generate_session_id()

    def reset(self) -> str:
        previous = self.session_id
        new_id = generate_session_id()
        while new_id == previous:
            new_id = generate_session_id()
        self.session_id = new_id
        return new_id

    def __repr__(self) -> str:
        return f"ConversationSession({self.session_id!r})"
