from datetime import datetime
from unittest.mock import MagicMock, patch

import requests

from voice_assistant.chat import ChatService, mock_reply, navigation_reply
from voice_assistant.config import ChatConfig, OpenRouterConfig
from voice_assistant.openrouter import OpenRouterClient


def _service(api_key: str | None) -> ChatService:
    return ChatService(ChatConfig(), OpenRouterClient(OpenRouterConfig(), api_key, "http://localhost:8080"))


def test_mock_replies() -> None:
    assert mock_reply("Hello there").startswith("Hello! I'm your AI assistant.")
    assert mock_reply("What time is it?", now=datetime(2024, 5, 1, 15, 5)) == "The current time is 3:05 PM."
    assert "weather app" in mock_reply("What's the weather like?")
    assert "upload an image" in mock_reply("Can you help me?")
    assert mock_reply("Thank you").startswith("You're very welcome!")
    assert mock_reply("Open the door").startswith('I understand you said: "Open the door".')


def test_reply_without_key_uses_mock() -> None:
    with patch("voice_assistant.openrouter.requests.post") as post:
        assert _service(None).reply("Thank you") == mock_reply("Thank you")

    post.assert_not_called()


def test_reply_returns_model_text() -> None:
    response = MagicMock(ok=True, status_code=200)
    response.json.return_value = {"choices": [{"message": {"content": "Sure, I can help. "}}]}

    with patch("voice_assistant.openrouter.requests.post", return_value=response) as post:
        assert _service("sk-chat").reply("Can you help me?") == "Sure, I can help."

    body = post.call_args.kwargs["json"]
    assert body["model"] == "deepseek/deepseek-r1"
    assert body["messages"][1] == {"role": "user", "content": "Can you help me?"}
    assert body["temperature"] == 0.7


def test_reply_falls_back_on_provider_error() -> None:
    with patch("voice_assistant.openrouter.requests.post", side_effect=requests.Timeout("slow")):
        assert _service("sk-chat").reply("Thanks a lot") == mock_reply("Thanks a lot")


def test_navigation_reply_uses_context() -> None:
    context = {
        "isNavigating": True,
        "destination": "Central Station",
        "currentLocation": {"address": "12 Main Street"},
        "transportMode": "cycling",
    }

    assert "Central Station" in navigation_reply("How far is it?", context)
    assert navigation_reply("Where am I?", context) == "You're currently at 12 Main Street."
    assert "cycling mode" in navigation_reply("Switch to walking", context)
    assert navigation_reply("Am I going the right way?", context).startswith("Yes")


def test_navigation_reply_without_navigation() -> None:
    assert "not currently navigating" in navigation_reply("How much further?")
    assert "allow location access" in navigation_reply("Where am I?", {})
    assert navigation_reply("Please stop").startswith("Stopping navigation")
    assert navigation_reply("Tell me a joke").startswith("I'm here to help with your navigation.")
