"""
Unit tests for Settings resolution and credential checks.
"""

import os

import pytest
from unittest.mock import patch

from superbot.config import DEFAULT_SYSTEM_PROMPT, Settings

pytestmark = pytest.mark.unit


class TestSettings:
    """Test class for the configuration surface."""

    def test_defaults_without_environment(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

        assert settings.aws_region == "us-east-1"
        assert settings.bedrock_region == "us-east-1"
        assert settings.bedrock_model_id == "anthropic.claude-3-sonnet-20240229-v1:0"
        assert settings.bedrock_max_tokens == 4096
        assert settings.bedrock_temperature == 0.7
        assert settings.lex_bot_locale_id == "en_US"
        assert settings.default_system_prompt == DEFAULT_SYSTEM_PROMPT
        assert settings.use_intent_recognition is True
        assert settings.is_development is False
        assert settings.credentials_usable is False

    def test_reads_environment_at_instantiation(self):
        env = {
            "AWS_REGION": "eu-west-1",
            "BEDROCK_MAX_TOKENS": "512",
            "FUNNY_SYSTEM_PROMPT": "Tell jokes only.",
            "APP_ENV": "development",
            "USE_LEX": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()

        assert settings.aws_region == "eu-west-1"
        assert settings.bedrock_max_tokens == 512
        assert settings.funny_system_prompt == "Tell jokes only."
        assert settings.is_development is True
        assert settings.use_intent_recognition is False

    @pytest.mark.parametrize("access_key,secret,token,expected", [
        ("", "secret", None, False),
        ("AKIAEXAMPLE", "", None, False),
        ("AKIAEXAMPLE", "secret", None, True),
        ("ASIAEXAMPLE", "secret", None, False),
        ("ASIAEXAMPLE", "secret", "session-token", True),
    ])
    def test_credentials_usable(self, access_key, secret, token, expected):
        settings = Settings(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret,
            aws_session_token=token,
        )
        assert settings.credentials_usable is expected

    def test_settings_are_read_only(self, test_settings):
        with pytest.raises(Exception):
            test_settings.aws_region = "us-west-2"

    def test_empty_values_fall_back_to_defaults(self):
        env = {
            "DEFAULT_SYSTEM_PROMPT": "",
            "AWS_REGION": "",
            "LEX_LOCALE_ID": "",
            "BEDROCK_MAX_TOKENS": "",
            "BEDROCK_TEMPERATURE": "",
            "USE_LEX": "",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()

        assert settings.default_system_prompt == DEFAULT_SYSTEM_PROMPT
        assert settings.aws_region == "us-east-1"
        assert settings.lex_bot_locale_id == "en_US"
        assert settings.bedrock_max_tokens == 4096
        assert settings.bedrock_temperature == 0.7
        assert settings.use_intent_recognition is True

    @pytest.mark.parametrize("max_tokens,temperature", [("lots", "warm"), ("4k", "0,7")])
    def test_invalid_numbers_fall_back_to_defaults(self, max_tokens, temperature):
        env = {"BEDROCK_MAX_TOKENS": max_tokens, "BEDROCK_TEMPERATURE": temperature}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()

        assert settings.bedrock_max_tokens == 4096
        assert settings.bedrock_temperature == 0.7
