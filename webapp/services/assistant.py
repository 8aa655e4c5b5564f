"""Assistant service wiring the core components for the web app."""

import asyncio
import logging
from typing import Any

from voice_assistant.camera import FrameSource
from voice_assistant.chat import ChatService, navigation_reply
from voice_assistant.config import Config, Credentials
from voice_assistant.detector import HeuristicColorDetector, RemoteVisionDetector
from voice_assistant.extractor import DetectionResult, extract_detections
from voice_assistant.feedback import Speaker
from voice_assistant.navigation import NavigationService, Route
from voice_assistant.openrouter import OpenRouterClient
from voice_assistant.scan_loop import ScanLoop
from voice_assistant.status import check_llm_services, check_map_services
from voice_assistant.vision import VisionClient

logger = logging.getLogger(__name__)


class AssistantService:
    """Async facade over the assistant core.

    Provider calls use blocking HTTP, so they run in a thread pool to keep
    the event loop free.
    """

    def __init__(self) -> None:
        self.config: Config | None = None
        self.credentials: Credentials | None = None
        self.vision: VisionClient | None = None
        self.chat: ChatService | None = None
        self.navigation: NavigationService | None = None
        self.speaker: Speaker | None = None
        self.scan_loop: ScanLoop | None = None

    def initialize(self, config: Config, credentials: Credentials, frame_source: FrameSource) -> None:
        self.config = config
        self.credentials = credentials

        vision_client = OpenRouterClient(config.openrouter, credentials.OPENROUTER_OPENAI_API_KEY, credentials.APP_URL)
        chat_client = OpenRouterClient(config.openrouter, credentials.OPENROUTER_DEEPSEEK_API_KEY, credentials.APP_URL)

        self.vision = VisionClient(config.vision, vision_client)
        self.chat = ChatService(config.chat, chat_client)
        self.navigation = NavigationService(config.maps, credentials.MAPBOX_API_KEY, credentials.HERE_MAP_API_KEY)
        self.speaker = Speaker(config.feedback)
        self.scan_loop = ScanLoop(
            source=frame_source,
            detectors={
                RemoteVisionDetector.name: RemoteVisionDetector(self.vision),
                HeuristicColorDetector.name: HeuristicColorDetector(),
            },
            speak=self.speaker.speak,
            config=config.scan,
        )

        logger.info(
            "Assistant ready (vision=%s, chat=%s, mapbox=%s, here=%s)",
            vision_client.configured,
            chat_client.configured,
            bool(credentials.MAPBOX_API_KEY),
            bool(credentials.HERE_MAP_API_KEY),
        )

    async def shutdown(self) -> None:
        if self.scan_loop is not None:
            await self.scan_loop.stop()
        if self.speaker is not None:
            self.speaker.cancel()

    async def analyze_image(self, image: bytes, mime_type: str, filename: str) -> dict[str, Any]:
        """Describe an uploaded image and extract its objects.

        The mock description used when the vision model is unavailable is
        not mined for objects.
        """
        vision = await asyncio.to_thread(self.vision.describe, image, mime_type, filename)
        objects = extract_detections(vision.description) if vision.success else []
        result = DetectionResult(
            description=vision.description,
            objects=tuple(objects),
            method="AI API (Upload)",
            api_used=vision.api_used,
        )
        return {
            "description": result.description,
            "objects": [obj.to_dict() for obj in result.objects],
            "apiUsed": result.api_used,
            "success": vision.success,
        }

    async def reply(self, message: str) -> str:
        return await asyncio.to_thread(self.chat.reply, message)

    def navigation_reply(self, message: str, context: dict[str, Any] | None) -> str:
        return navigation_reply(message, context)

    async def directions(self, origin: str, destination: str, mode: str | None) -> Route:
        return await asyncio.to_thread(self.navigation.directions, origin, destination, mode)

    async def reverse_geocode(self, lat: str, lng: str) -> str:
        return await asyncio.to_thread(self.navigation.reverse_geocode, lat, lng)

    async def llm_status(self) -> dict:
        return await asyncio.to_thread(check_llm_services, self.config, self.credentials)

    async def map_status(self) -> dict:
        return await asyncio.to_thread(check_map_services, self.config, self.credentials)


# Global singleton instance
assistant_service = AssistantService()
