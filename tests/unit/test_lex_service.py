"""
Unit tests for LexService session handling and recognition.
"""

import base64
import gzip
import io
import json
import re

import pytest
from unittest.mock import patch

from superbot.errors import IntentRecognitionError
from superbot.models.session import ConversationSession, generate_session_id
from superbot.services.lex_service import LexService, decode_lex_header

pytestmark = pytest.mark.unit

SESSION_ID_PATTERN = re.compile(r"^session-\d+-[0-9a-z]{9}$")


def encode_header(value) -> str:
    return base64.b64encode(gzip.compress(json.dumps(value).encode("utf-8"))).decode("ascii")


class TestLexSession:
    """Session identifier generation and reset."""

    def test_session_id_format(self):
        assert SESSION_ID_PATTERN.match(generate_session_id())

    def test_reset_changes_session_id(self, lex_service):
        before = lex_service.get_current_session_id()
        after = lex_service.reset_session()

        assert after != before
        assert lex_service.get_current_session_id() == after
        assert SESSION_ID_PATTERN.match(after)

    def test_explicit_session_is_independent(self, lex_service):
        own = ConversationSession("session-1-abcdefghi")
        service_default = lex_service.get_current_session_id()

        lex_service.reset_session(own)

        assert own.session_id != "session-1-abcdefghi"
        assert lex_service.get_current_session_id() == service_default


class TestLexConfiguration:

    def test_configured(self, lex_service):
        assert lex_service.is_configured() is True

    def test_unconfigured_without_bot(self, demo_settings):
        with patch("boto3.Session") as mock_session:
            service = LexService(demo_settings)

        assert service.is_configured() is False
        assert service.client is None
        mock_session.assert_not_called()

    def test_builds_client_from_settings(self, test_settings):
        with patch("boto3.Session") as mock_session:
            service = LexService(test_settings)

        mock_session.assert_called_once_with(
            aws_access_key_id="AKIATESTKEY123456",
            aws_secret_access_key="test-secret",
            aws_session_token=None,
            region_name="us-east-1",
        )
        mock_session.return_value.client.assert_called_once_with("lexv2-runtime", region_name="us-east-1")
        assert service.client is mock_session.return_value.client.return_value


class TestRecognizeText:

    @pytest.mark.asyncio
    async def test_sends_session_and_bot_parameters(self, lex_service, mock_lex_client):
        session = ConversationSession()

        await lex_service.recognize_text("Hello", {"persona": "funny"}, session=session)

        mock_lex_client.recognize_text.assert_called_once_with(
            botId="BOTID12345",
            botAliasId="ALIAS12345",
            localeId="en_US",
            sessionId=session.session_id,
            text="Hello",
            sessionState={"sessionAttributes": {"persona": "funny"}},
        )

    @pytest.mark.asyncio
    async def test_maps_direct_answer_and_intent(self, lex_service, mock_lex_client):
        mock_lex_client.recognize_text.return_value = {
            "messages": [
                {"content": "You have 15 days of PTO.", "contentType": "PlainText"},
                {"content": "Anything else?", "contentType": "PlainText"},
            ],
            "sessionState": {
                "intent": {"name": "PtoBalance", "confirmationState": "Confirmed", "slots": {"year": None}},
            },
        }

        response = await lex_service.recognize_text("How much PTO do I have?")

        assert response.message == "You have 15 days of PTO."
        assert response.has_direct_response() is True
        assert response.intent.name == "PtoBalance"
        assert response.intent.confirmation_state == "Confirmed"
        assert response.intent.slots == {"year": None}

    @pytest.mark.asyncio
    async def test_no_messages_means_no_direct_answer(self, lex_service):
        response = await lex_service.recognize_text("Tell me a story")

        assert response.message is None
        assert response.has_direct_response() is False
        assert response.intent.name == "FallbackIntent"
        assert response.interpretations == [{"intent": {"name": "FallbackIntent"}}]

    @pytest.mark.asyncio
    async def test_backend_error_raises(self, lex_service, mock_lex_client):
        mock_lex_client.recognize_text.side_effect = Exception("ResourceNotFoundException")

        with pytest.raises(IntentRecognitionError) as exc_info:
            await lex_service.recognize_text("Hello")

        assert str(exc_info.value) == "Failed to process text with Lex"
        assert exc_info.value.details == "ResourceNotFoundException"


class TestRecognizeAudio:

    @pytest.mark.asyncio
    async def test_decodes_compressed_headers_and_drains_audio(self, lex_service, mock_lex_client):
        audio_stream = io.BytesIO(b"\x00" * 20000)
        mock_lex_client.recognize_utterance.return_value = {
            "messages": encode_header([{"content": "Your next payday is Friday.", "contentType": "PlainText"}]),
            "sessionState": encode_header({"intent": {"name": "Payday"}}),
            "audioStream": audio_stream,
        }

        response = await lex_service.recognize_audio(io.BytesIO(b"RIFF...."), "audio/wav")

        assert response.message == "Your next payday is Friday."
        assert response.session_state == {"intent": {"name": "Payday"}}
        assert audio_stream.read() == b""
        kwargs = mock_lex_client.recognize_utterance.call_args.kwargs
        assert kwargs["inputStream"] == b"RIFF...."
        assert kwargs["requestContentType"] == "audio/wav"
        assert kwargs["sessionId"] == lex_service.get_current_session_id()

    @pytest.mark.asyncio
    async def test_no_messages(self, lex_service, mock_lex_client):
        mock_lex_client.recognize_utterance.return_value = {}

        response = await lex_service.recognize_audio(b"RIFF....")

        assert response.message is None

    @pytest.mark.asyncio
    async def test_backend_error_raises(self, lex_service, mock_lex_client):
        mock_lex_client.recognize_utterance.side_effect = Exception("BadRequestException")

        with pytest.raises(IntentRecognitionError) as exc_info:
            await lex_service.recognize_audio(b"RIFF....")

        assert str(exc_info.value) == "Failed to process audio with Lex"

    @pytest.mark.asyncio
    async def test_unconfigured_service_raises(self, demo_settings):
        service = LexService(demo_settings)

        with pytest.raises(IntentRecognitionError):
            await service.recognize_audio(b"RIFF....")


class TestDecodeLexHeader:

    def test_passes_through_decoded_values(self):
        assert decode_lex_header([{"content": "hi"}]) == [{"content": "hi"}]
        assert decode_lex_header(None) is None
        assert decode_lex_header("") is None

    def test_invalid_value_returns_none(self):
        assert decode_lex_header("not-base64-gzip") is None

    def test_round_trip(self):
        assert decode_lex_header(encode_header({"a": 1})) == {"a": 1}
