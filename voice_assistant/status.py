"""Health probes for the configured LLM and mapping providers."""

import logging

import requests

from voice_assistant.config import Config, Credentials
from voice_assistant.errors import ProviderError
from voice_assistant.navigation import (
    HERE_GEOCODE_URL,
    HERE_ROUTES_URL,
    MAPBOX_DIRECTIONS_URL,
    MAPBOX_GEOCODE_URL,
)
from voice_assistant.openrouter import OpenRouterClient

logger = logging.getLogger(__name__)

PROBE_PLACE = "Lagos"
PROBE_ORIGIN = (6.5244, 3.3792)
PROBE_DESTINATION = (6.4698, 3.3947)


def key_preview(key: str | None) -> str:
    return f"{key[:8]}..." if key else "Not configured"


def _probe_llm(client: OpenRouterClient, model: str) -> tuple[bool, str]:
    if not client.configured:
        return False, ""
    try:
        client.complete(model, [{"role": "user", "content": "test"}], max_tokens=10)
        return True, ""
    except ProviderError as e:
        return False, str(e)


def check_llm_services(config: Config, credentials: Credentials) -> dict:
    """Report whether the chat and vision keys are configured and answer."""
    chat_client = OpenRouterClient(config.openrouter, credentials.OPENROUTER_DEEPSEEK_API_KEY, credentials.APP_URL)
    vision_client = OpenRouterClient(config.openrouter, credentials.OPENROUTER_OPENAI_API_KEY, credentials.APP_URL)

    chat_working, chat_error = _probe_llm(chat_client, config.chat.model)
    vision_working, vision_error = _probe_llm(vision_client, config.vision.model)

    return {
        "chat": {
            "configured": chat_client.configured,
            "working": chat_working,
            "model": config.chat.model,
            "keyPreview": key_preview(credentials.OPENROUTER_DEEPSEEK_API_KEY),
            "error": chat_error,
        },
        "vision": {
            "configured": vision_client.configured,
            "working": vision_working,
            "model": config.vision.model,
            "keyPreview": key_preview(credentials.OPENROUTER_OPENAI_API_KEY),
            "error": vision_error,
        },
        "chatAI": chat_working,
        "imageAnalysis": vision_working,
    }


def _probe_url(url: str, params: dict, timeout: float) -> bool:
    try:
        return requests.get(url, params=params, timeout=timeout).ok
    except requests.RequestException as e:
        logger.debug("Probe to %s failed: %s", url, e)
        return False


def _service_entry(name: str, env_name: str, configured: bool, geocoding: bool, directions: bool) -> dict:
    if not configured:
        return {
            "service": name,
            "configured": False,
            "working": False,
            "status": "error",
            "message": "API key not configured",
            "error": f"Missing {env_name}",
        }

    working = geocoding and directions
    issues = " ".join(label for label, ok in (("geocoding", geocoding), ("directions", directions)) if not ok)
    return {
        "service": name,
        "configured": True,
        "working": working,
        "status": "success" if working else "error",
        "message": "Geocoding and directions working" if working else f"Issues: {issues}",
        "error": None if working else "API calls failed",
    }


def check_map_services(config: Config, credentials: Credentials) -> dict:
    """Probe Mapbox and HERE geocoding and routing."""
    timeout = config.maps.timeout
    services = []

    mapbox_key = credentials.MAPBOX_API_KEY
    mapbox_geocoding = mapbox_directions = False
    if mapbox_key:
        mapbox_geocoding = _probe_url(
            MAPBOX_GEOCODE_URL.format(query=PROBE_PLACE), {"access_token": mapbox_key, "limit": 1}, timeout
        )
        mapbox_directions = _probe_url(
            MAPBOX_DIRECTIONS_URL.format(
                profile="walking",
                origin=f"{PROBE_ORIGIN[1]},{PROBE_ORIGIN[0]}",
                destination=f"{PROBE_DESTINATION[1]},{PROBE_DESTINATION[0]}",
            ),
            {"access_token": mapbox_key},
            timeout,
        )
    services.append(_service_entry("Mapbox", "MAPBOX_API_KEY", bool(mapbox_key), mapbox_geocoding, mapbox_directions))

    here_key = credentials.HERE_MAP_API_KEY
    here_geocoding = here_directions = False
    if here_key:
        here_geocoding = _probe_url(HERE_GEOCODE_URL, {"q": PROBE_PLACE, "apikey": here_key, "limit": 1}, timeout)
        here_directions = _probe_url(
            HERE_ROUTES_URL,
            {
                "transportMode": "pedestrian",
                "origin": f"{PROBE_ORIGIN[0]},{PROBE_ORIGIN[1]}",
                "destination": f"{PROBE_DESTINATION[0]},{PROBE_DESTINATION[1]}",
                "apikey": here_key,
            },
            timeout,
        )
    services.append(_service_entry("HERE Maps", "HERE_MAP_API_KEY", bool(here_key), here_geocoding, here_directions))

    any_working = any(s["working"] for s in services)
    any_configured = any(s["configured"] for s in services)

    instructions = None
    if not any_configured:
        instructions = (
            "Configure at least one mapping service: Get API keys from Mapbox (mapbox.com) "
            "or HERE Maps (developer.here.com)"
        )
    elif not any_working:
        instructions = "Check your API keys - they may be invalid or have insufficient permissions"

    return {
        "services": services,
        "anyWorking": any_working,
        "anyConfigured": any_configured,
        "instructions": instructions,
    }
