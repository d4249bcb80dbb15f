"""
Pytest configuration and shared fixtures for SUPER Bot API tests.
"""

import io
import json

import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient

from superbot.config import Settings
from superbot.main import create_app
from superbot.models.chat import ChatMessage
from superbot.services import BedrockService, LexService, MockResponder


def bedrock_body(text: str, input_tokens: int = 100, output_tokens: int = 50) -> dict:
    """Build an invoke_model response the way boto3 returns it"""
    payload = {
        "content": [{"text": text}],
        "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
    }
    return {"body": io.BytesIO(json.dumps(payload).encode("utf-8"))}


@pytest.fixture
def demo_settings():
    """Settings with no credentials at all (demo mode)."""
    return Settings(
        aws_access_key_id="",
        aws_secret_access_key="",
        aws_session_token=None,
        lex_bot_id="",
        lex_bot_alias_id="",
        environment="production",
        debug_secret_key=None,
    )


@pytest.fixture
def test_settings():
    """Settings with permanent credentials and a configured Lex bot."""
    return Settings(
        aws_region="us-east-1",
        aws_access_key_id="AKIATESTKEY123456",
        aws_secret_access_key="test-secret",
        aws_session_token=None,
        bedrock_model_id="anthropic.claude-3-haiku-20240307-v1:0",
        bedrock_max_tokens=1000,
        bedrock_temperature=0.7,
        lex_bot_id="BOTID12345",
        lex_bot_alias_id="ALIAS12345",
        lex_bot_locale_id="en_US",
        environment="production",
        debug_secret_key="let-me-in",
    )


@pytest.fixture
def mock_bedrock_client():
    """Create a mock Bedrock runtime client for testing."""
    mock_client = Mock()
    mock_client.invoke_model.side_effect = lambda **kwargs: bedrock_body("Test response")
    return mock_client


@pytest.fixture
def mock_lex_client():
    """Create a mock Lex V2 runtime client with no direct answer."""
    mock_client = Mock()
    mock_client.recognize_text.return_value = {
        "messages": [],
        "sessionState": {
            "intent": {"name": "FallbackIntent", "confirmationState": "None", "slots": {}},
        },
        "interpretations": [{"intent": {"name": "FallbackIntent"}}],
    }
    return mock_client


@pytest.fixture
def instant_mock_responder():
    return MockResponder(delay=0)


@pytest.fixture
def demo_bedrock_service(demo_settings, instant_mock_responder):
    return BedrockService(demo_settings, mock_responder=instant_mock_responder,
                          live_chunk_delay=0, mock_chunk_delay=0)


@pytest.fixture
def bedrock_service(test_settings, mock_bedrock_client, instant_mock_responder):
    return BedrockService(test_settings, client=mock_bedrock_client, mock_responder=instant_mock_responder,
                          live_chunk_delay=0, mock_chunk_delay=0)


@pytest.fixture
def lex_service(test_settings, mock_lex_client):
    return LexService(test_settings, client=mock_lex_client)


@pytest.fixture
def sample_messages():
    return [
        ChatMessage(role="user", content="What are the company holidays?"),
        ChatMessage(role="assistant", content="We observe ten paid holidays."),
        ChatMessage(role="user", content="Hello"),
    ]


@pytest.fixture
def demo_client(demo_settings, demo_bedrock_service):
    """TestClient for an app with no credentials configured."""
    app = create_app(demo_settings, bedrock_service=demo_bedrock_service,
                     lex_service=LexService(demo_settings))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def live_client(test_settings, bedrock_service, lex_service):
    """TestClient for an app with mocked live Bedrock and Lex clients."""
    app = create_app(test_settings, bedrock_service=bedrock_service, lex_service=lex_service)
    with TestClient(app) as client:
        yield client
