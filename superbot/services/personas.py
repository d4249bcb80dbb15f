"""
Persona catalog

Personas are named system-prompt presets that shape the assistant's tone.
The set is closed; unknown keys resolve to the default persona.
"""

from typing import Dict, List

from ..config import Settings

DEFAULT_PERSONA = "default"

PERSONA_CATALOG: List[Dict[str, str]] = [
    {"key": "default", "label": "Default", "description": "Helpful and conversational"},
    {"key": "funny", "label": "Funny", "description": "Witty and entertaining"},
    {"key": "professional", "label": "Professional", "description": "Formal and business-oriented"},
    {"key": "creative", "label": "Creative", "description": "Imaginative and innovative"},
    {"key": "medical", "label": "Medical", "description": "Medical information assistant"},
]

PERSONA_KEYS = tuple(entry["key"] for entry in PERSONA_CATALOG)


def resolve_persona(persona_key: str | None) -> str:
    """Map any key onto the closed persona set"""
    return persona_key if persona_key in PERSONA_KEYS else DEFAULT_PERSONA


def get_system_prompts(settings: Settings) -> Dict[str, str]:
    return {
        "default": settings.default_system_prompt,
        "funny": settings.funny_system_prompt,
        "professional": settings.professional_system_prompt,
        "creative": settings.creative_system_prompt,
        "medical": settings.medical_system_prompt,
    }


def get_system_prompt(settings: Settings, persona_key: str | None) -> str:
    return get_system_prompts(settings)[resolve_persona(persona_key)]


def get_available_prompts() -> List[Dict[str, str]]:
    """Ordered persona catalog entries ({key, label, description})"""
    return [dict(entry) for entry in PERSONA_CATALOG]
