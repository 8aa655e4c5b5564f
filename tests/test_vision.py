from unittest.mock import MagicMock, patch

import requests

from voice_assistant.config import OpenRouterConfig, VisionConfig
from voice_assistant.openrouter import OpenRouterClient
from voice_assistant.vision import MOCK_API_LABEL, VisionClient, mock_image_description


def _client(api_key: str | None) -> VisionClient:
    return VisionClient(VisionConfig(), OpenRouterClient(OpenRouterConfig(), api_key, "http://localhost:8080"))


def _response(status: int = 200, payload: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.text = "error body"
    response.json.return_value = payload or {}
    return response


def test_missing_key_returns_configuration_guidance() -> None:
    with patch("voice_assistant.openrouter.requests.post") as post:
        vision = _client(None).describe(b"data", "image/png", "photo.png")

    post.assert_not_called()
    assert vision.success is False
    assert vision.api_used == MOCK_API_LABEL
    assert "OPENROUTER_OPENAI_API_KEY" in vision.description
    assert '"photo.png" in PNG format' in vision.description


def test_success_returns_provider_text() -> None:
    payload = {"choices": [{"message": {"content": " A dog on a couch. "}}]}
    with patch("voice_assistant.openrouter.requests.post", return_value=_response(200, payload)) as post:
        vision = _client("sk-test").describe(b"\x89PNG", "image/png")

    assert vision.success is True
    assert vision.description == "A dog on a couch."
    assert vision.api_used == "openai/gpt-4o"

    body = post.call_args.kwargs["json"]
    assert body["model"] == "openai/gpt-4o"
    assert body["max_tokens"] == 500
    image_part = body["messages"][1]["content"][1]
    assert image_part["image_url"]["url"].startswith("data:image/png;base64,")
    assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer sk-test"


def test_empty_choice_uses_default_text() -> None:
    with patch("voice_assistant.openrouter.requests.post", return_value=_response(200, {"choices": []})):
        vision = _client("sk-test").describe(b"data")

    assert vision.success is True
    assert vision.description == VisionClient.EMPTY_REPLY


def test_http_error_falls_back_after_single_attempt() -> None:
    with patch("voice_assistant.openrouter.requests.post", return_value=_response(500)) as post:
        vision = _client("sk-test").describe(b"data", "image/jpeg", "capture.jpg")

    assert post.call_count == 1
    assert vision.success is False
    assert "OPENROUTER_OPENAI_API_KEY" in vision.description


def test_network_error_falls_back() -> None:
    with patch("voice_assistant.openrouter.requests.post", side_effect=requests.ConnectionError("down")) as post:
        vision = _client("sk-test").describe(b"data")

    assert post.call_count == 1
    assert vision.success is False


def test_mock_description_handles_missing_subtype() -> None:
    assert "in UNKNOWN format" in mock_image_description("image", "")
