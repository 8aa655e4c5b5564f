from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenRouterConfig(BaseModel):
    url: str = "https://openrouter.ai/api/v1/chat/completions"
    app_title: str = "AI Smart Assistant"
    timeout: float = 30.0


class VisionConfig(BaseModel):
    """Configuration for the remote image description model."""

    model: str = "openai/gpt-4o"
    max_tokens: int = 500
    temperature: float = 0.3


class ChatConfig(BaseModel):
    """Configuration for the conversational model."""

    model: str = "deepseek/deepseek-r1"
    max_tokens: int = 500
    temperature: float = 0.7


class MapsConfig(BaseModel):
    timeout: float = 10.0
    default_mode: Literal["walking", "driving", "cycling"] = "walking"


class ScanConfig(BaseModel):
    """Configuration for continuous camera scanning."""

    interval: Literal[3, 5, 8, 10] = 5
    initial_delay: float = 1.0
    method: Literal["api", "simple"] = "api"
    announce: bool = True
    min_confidence: float = 0.6
    max_announced: int = 5
    max_manual_announced: int = 8
    max_spoken_description: int = 200


class CameraConfig(BaseModel):
    width: int = 640
    height: int = 480
    device: int | str = 0
    jpeg_quality: int = 80
    flip_horizontal: bool = False


class FeedbackConfig(BaseModel):
    enabled: bool = True
    voice_rate: int = 150
    voice_volume: float = 1.0
    history_size: int = 20


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


class Config(BaseModel):
    openrouter: OpenRouterConfig = Field(default_factory=OpenRouterConfig)
    vision: VisionConfig = Field(default_factory=VisionConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    maps: MapsConfig = Field(default_factory=MapsConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)
    feedback: FeedbackConfig = Field(default_factory=FeedbackConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        path = Path(path)
        if not path.exists():
            return cls()
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)


class Credentials(BaseSettings):
    """Provider API keys read from the environment (or a local .env file).

    Every key is optional. A missing key switches the matching provider to
    its offline fallback instead of failing.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    OPENROUTER_OPENAI_API_KEY: str | None = None
    OPENROUTER_DEEPSEEK_API_KEY: str | None = None
    MAPBOX_API_KEY: str | None = None
    HERE_MAP_API_KEY: str | None = None
    APP_URL: str = "http://localhost:8080"


if __name__ == "__main__":
    config = Config()
    credentials = Credentials()
    print("Default config loaded:")
    print(f"  Vision model: {config.vision.model}")
    print(f"  Chat model: {config.chat.model}")
    print(f"  Scan interval: {config.scan.interval}s ({config.scan.method})")
    print(f"  Camera: {config.camera.width}x{config.camera.height}")
    print(f"  Vision key configured: {bool(credentials.OPENROUTER_OPENAI_API_KEY)}")
    print(f"  Mapbox key configured: {bool(credentials.MAPBOX_API_KEY)}")
