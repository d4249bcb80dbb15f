"""
Unit tests for the debug logger and persona catalog helpers.
"""

import os
from types import SimpleNamespace

import pytest
from unittest.mock import patch

from superbot.services.personas import get_system_prompt, resolve_persona
from superbot.utils.debug_logger import DebugLogger

pytestmark = pytest.mark.unit


class TestDebugLogger:

    def test_format_with_request_id_and_context(self):
        line = DebugLogger().format("abc12345", "CHAT", "Processing", persona="funny")

        assert line == "[DEBUG] [CHAT] [abc12345] Processing persona=funny"

    def test_format_includes_elapsed_time(self):
        request = SimpleNamespace(state=SimpleNamespace(start_time=0.0))

        line = DebugLogger().format(None, "ROUTE", "done", request)

        assert line.startswith("[DEBUG] [ROUTE] [")
        assert line.endswith("s] done")

    def test_disabled_by_default(self, capsys):
        with patch.dict(os.environ, {}, clear=True):
            logger = DebugLogger()

        logger.log_bedrock("abc", "hidden")

        assert capsys.readouterr().out == ""

    def test_enabled_in_lambda_with_prod_flag(self, capsys):
        env = {"AWS_LAMBDA_FUNCTION_NAME": "superbot", "DEBUG_LOGGING_PROD": "true"}
        with patch.dict(os.environ, env, clear=True):
            logger = DebugLogger()

        logger.log_timing("abc", "invoke_model", 12.5)

        assert capsys.readouterr().out.strip() == "[DEBUG] [TIMING] [abc] invoke_model completed in 12.500ms"


class TestPersonas:

    @pytest.mark.parametrize("key,expected", [
        ("funny", "funny"),
        ("medical", "medical"),
        ("sarcastic", "default"),
        ("", "default"),
        (None, "default"),
    ])
    def test_resolve_persona(self, key, expected):
        assert resolve_persona(key) == expected

    def test_system_prompt_follows_settings(self, test_settings):
        assert get_system_prompt(test_settings, "funny") == test_settings.funny_system_prompt
        assert get_system_prompt(test_settings, "unknown") == test_settings.default_system_prompt
