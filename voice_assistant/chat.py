"""Conversational replies: remote LLM with canned offline fallbacks."""

import logging
from datetime import datetime
from typing import Any

from voice_assistant.config import ChatConfig
from voice_assistant.errors import ProviderError
from voice_assistant.openrouter import OpenRouterClient

logger = logging.getLogger(__name__)


class ChatService:
    """Short, speakable answers for visually impaired users."""

    SYSTEM_PROMPT = (
        "You are a helpful AI assistant designed for visually impaired users. Provide clear, "
        "concise, and helpful responses. Be friendly and supportive. Keep responses "
        "conversational and easy to understand when spoken aloud. Limit responses to 2-3 "
        "sentences for better voice experience."
    )
    EMPTY_REPLY = "I apologize, but I could not generate a response."

    def __init__(self, config: ChatConfig, client: OpenRouterClient) -> None:
        self.config = config
        self.client = client

    def reply(self, message: str) -> str:
        """Answer a user message.

        Falls back to a canned reply when no key is configured or the
        provider fails.
        """
        if not self.client.configured:
            return mock_reply(message)

        messages = [
            {"role": "system", "content": self.SYSTEM_PROMPT},
            {"role": "user", "content": message},
        ]
        try:
            content = self.client.complete(
                self.config.model,
                messages,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )
        except ProviderError as e:
            logger.warning("Chat API error, using canned reply: %s", e)
            return mock_reply(message)

        return content.strip() or self.EMPTY_REPLY


def mock_reply(message: str, now: datetime | None = None) -> str:
    lower = message.lower()

    if "hello" in lower or "hi" in lower:
        return "Hello! I'm your AI assistant. How can I help you today?"
    if "time" in lower:
        now = now or datetime.now()
        return f"The current time is {now.strftime('%I:%M %p').lstrip('0')}."
    if "weather" in lower:
        return (
            "I don't have access to real-time weather data, but I recommend checking your "
            "local weather app or website for current conditions."
        )
    if "help" in lower:
        return (
            "I can help you with questions, analyze images you upload, and have conversations. "
            "Just speak naturally or upload an image for me to describe!"
        )
    if "thank" in lower:
        return "You're very welcome! I'm here to help whenever you need assistance."

    return (
        f'I understand you said: "{message}". I\'m here to help! You can ask me questions, '
        "request information, or upload images for me to analyze. What would you like to know?"
    )


def navigation_reply(message: str, context: dict[str, Any] | None = None) -> str:
    """Rule-based answers to questions asked while navigating.

    Args:
        message: The user's question.
        context: Client navigation state (isNavigating, destination,
            currentLocation, transportMode).
    """
    context = context or {}
    lower = message.lower()
    navigating = bool(context.get("isNavigating"))

    if "how much further" in lower or "how far" in lower:
        if navigating and context.get("destination"):
            return f"You're heading to {context['destination']}. I'll check the remaining distance for you."
        return "You're not currently navigating. Would you like directions somewhere?"

    if "am i going" in lower or "right way" in lower:
        if navigating:
            return "Yes, you're on the right track. Continue following the current direction."
        return "You're not currently navigating. Start navigation to get directions."

    if "where am i" in lower or "current location" in lower:
        location = context.get("currentLocation")
        if location:
            address = location.get("address") if isinstance(location, dict) else None
            return f"You're currently at {address or 'your detected location'}."
        return "I'm trying to detect your location. Please allow location access."

    if "repeat" in lower or "say again" in lower:
        return "I'll repeat the current direction for you."

    if "next" in lower or "continue" in lower:
        return "Moving to the next direction."

    if "stop" in lower or "cancel" in lower:
        return "Stopping navigation. Let me know if you need directions elsewhere."

    if "help" in lower or "what can" in lower:
        return (
            "I can help with navigation, give directions, repeat instructions, and answer "
            "questions about your route. Just ask!"
        )

    if "lost" in lower or "confused" in lower:
        return "Don't worry! Let me help you get back on track. Would you like me to recalculate your route?"

    if "walking" in lower or "driving" in lower or "cycling" in lower:
        mode = context.get("transportMode") or "walking"
        return f"You're currently set to {mode} mode. I can change this if you'd like different directions."

    if "how long" in lower or "time" in lower:
        if navigating:
            return "Let me check the estimated time remaining for your current route."
        return "Start navigation to get time estimates for your journey."

    if "safe" in lower or "accessible" in lower:
        return "I prioritize safe, accessible routes with proper sidewalks and crosswalks for walking directions."

    return (
        "I'm here to help with your navigation. You can ask me about directions, your current "
        "location, remaining distance, or any other navigation questions."
    )
