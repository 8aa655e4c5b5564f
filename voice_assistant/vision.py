"""Remote image description through an OpenRouter vision model."""

import base64
import logging
from dataclasses import dataclass

from voice_assistant.config import VisionConfig
from voice_assistant.errors import ProviderError
from voice_assistant.openrouter import OpenRouterClient

logger = logging.getLogger(__name__)

MOCK_API_LABEL = "Mock (no vision API)"


@dataclass(frozen=True)
class VisionDescription:
    description: str
    api_used: str
    success: bool


class VisionClient:
    """Describe images for someone who cannot see them.

    Makes one attempt per call. On any failure the caller gets a mock
    description that says plainly the image was not analyzed.
    """

    SYSTEM_PROMPT = (
        "You are an AI assistant helping visually impaired users. Describe images in detail, "
        "focusing on important visual elements, text, people, objects, colors, and context. "
        "Be descriptive but concise. Mention any text you can read in the image. Keep "
        "descriptions clear and easy to understand when spoken aloud."
    )
    USER_PROMPT = "Please describe this image in detail for someone who cannot see it."
    EMPTY_REPLY = "I could not analyze this image."

    def __init__(self, config: VisionConfig, client: OpenRouterClient) -> None:
        self.config = config
        self.client = client

    def describe(self, image: bytes, mime_type: str = "image/jpeg", filename: str = "image") -> VisionDescription:
        """Describe an image.

        Args:
            image: Raw image bytes.
            mime_type: MIME type used for the data URL.
            filename: Name shown in the fallback description.

        Returns:
            VisionDescription; success is False when the mock text was used.
        """
        if not self.client.configured:
            logger.info("Vision API key not configured, using mock description")
            return self._mock(filename, mime_type)

        image_b64 = base64.b64encode(image).decode("utf-8")
        messages = [
            {"role": "system", "content": self.SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": self.USER_PROMPT},
                    {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{image_b64}"}},
                ],
            },
        ]

        try:
            content = self.client.complete(
                self.config.model,
                messages,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )
        except ProviderError as e:
            logger.warning("Image analysis failed, using mock description: %s", e)
            return self._mock(filename, mime_type)

        return VisionDescription(
            description=content.strip() or self.EMPTY_REPLY,
            api_used=self.config.model,
            success=True,
        )

    def _mock(self, filename: str, mime_type: str) -> VisionDescription:
        return VisionDescription(
            description=mock_image_description(filename, mime_type),
            api_used=MOCK_API_LABEL,
            success=False,
        )


def mock_image_description(filename: str, mime_type: str) -> str:
    """Fallback text used whenever the vision model is unavailable."""
    parts = (mime_type or "").split("/")
    image_type = parts[1] if len(parts) > 1 and parts[1] else "unknown"
    return (
        f'I can see you\'ve uploaded an image file named "{filename}" in {image_type.upper()} format. '
        "Since I don't have access to the image analysis API right now, I cannot provide a detailed "
        "description. To enable full image analysis, please configure the OPENROUTER_OPENAI_API_KEY "
        "environment variable with your OpenRouter API key. The image appears to have been uploaded "
        "successfully and is ready for analysis once the API is configured."
    )
