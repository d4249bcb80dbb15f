import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def _env(name: str, default: Optional[str] = None):
    # Set-but-empty variables count as unset
    return Field(default_factory=lambda: os.getenv(name) or default)


def _env_bool(name: str, default: str = "false"):
    return Field(default_factory=lambda: (os.getenv(name) or default).lower() == "true")


def _parse_number(name: str, default, cast):
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


def _env_number(name: str, default, cast):
    return Field(default_factory=lambda: _parse_number(name, default, cast))


DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant. Be conversational and friendly."
FUNNY_SYSTEM_PROMPT = (
    "You are a witty and humorous AI assistant. Make jokes and be entertaining while still "
    "being helpful. Use emojis occasionally and don't be afraid to be a bit silly!"
)
PROFESSIONAL_SYSTEM_PROMPT = (
    "You are a professional AI assistant. Be formal, precise, and business-oriented in your responses."
)
CREATIVE_SYSTEM_PROMPT = (
    "You are a creative AI assistant. Think outside the box, be imaginative, and help users "
    "explore creative solutions and ideas."
)
MEDICAL_SYSTEM_PROMPT = (
    "You are a medical AI assistant. Provide helpful medical information while always reminding "
    "users to consult healthcare professionals for medical advice."
)


class Settings(BaseModel):
    model_config = {"frozen": True}

    # AWS credentials (temporary keys starting with 'ASIA' also need a session token)
    aws_region: str = _env("AWS_REGION", "us-east-1")
    aws_access_key_id: str = _env("AWS_ACCESS_KEY_ID", "")
    aws_secret_access_key: str = _env("AWS_SECRET_ACCESS_KEY", "")
    aws_session_token: Optional[str] = _env("AWS_SESSION_TOKEN")

    # Bedrock
    bedrock_model_id: str = _env("BEDROCK_MODEL_ID", "anthropic.claude-3-sonnet-20240229-v1:0")
    bedrock_region: str = _env("BEDROCK_REGION", "us-east-1")
    bedrock_max_tokens: int = _env_number("BEDROCK_MAX_TOKENS", 4096, int)
    bedrock_temperature: float = _env_number("BEDROCK_TEMPERATURE", 0.7, float)

    # Lex V2
    lex_bot_id: str = _env("LEX_BOT_ID", "")
    lex_bot_alias_id: str = _env("LEX_BOT_ALIAS_ID", "")
    lex_bot_locale_id: str = _env("LEX_LOCALE_ID", "en_US")

    # Persona system prompts
    default_system_prompt: str = _env("DEFAULT_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT)
    funny_system_prompt: str = _env("FUNNY_SYSTEM_PROMPT", FUNNY_SYSTEM_PROMPT)
    professional_system_prompt: str = _env("PROFESSIONAL_SYSTEM_PROMPT", PROFESSIONAL_SYSTEM_PROMPT)
    creative_system_prompt: str = _env("CREATIVE_SYSTEM_PROMPT", CREATIVE_SYSTEM_PROMPT)
    medical_system_prompt: str = _env("MEDICAL_SYSTEM_PROMPT", MEDICAL_SYSTEM_PROMPT)

    # Runtime / deployment
    debug_secret_key: Optional[str] = _env("DEBUG_SECRET_KEY")
    environment: str = _env("APP_ENV", "production")
    deployment_env: Optional[str] = _env("AWS_EXECUTION_ENV")
    debug: bool = _env_bool("DEBUG_LOGGING")
    log_level: str = _env("LOG_LEVEL", "INFO")

    # Chat page options
    default_persona: str = _env("DEFAULT_PERSONA", "default")
    use_intent_recognition: bool = _env_bool("USE_LEX", "true")
    show_persona_selector: bool = _env_bool("SHOW_PERSONA_SELECTOR", "true")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def has_aws_credentials(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)

    @property
    def uses_temporary_credentials(self) -> bool:
        return self.aws_access_key_id.startswith("ASIA")

    @property
    def credentials_usable(self) -> bool:
        """Keys are present, and temporary keys come with a session token."""
        return self.has_aws_credentials and (
            not self.uses_temporary_credentials or bool(self.aws_session_token)
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
