"""Turn-by-turn directions and geocoding through Mapbox, then HERE Maps.

Routes are pass-throughs from the providers; nothing here computes a route.
"""

import logging
from urllib.parse import quote

import requests
from pydantic import BaseModel

from voice_assistant.config import MapsConfig
from voice_assistant.errors import ProviderError

logger = logging.getLogger(__name__)

MAPBOX_GEOCODE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"
MAPBOX_DIRECTIONS_URL = "https://api.mapbox.com/directions/v5/mapbox/{profile}/{origin};{destination}"
HERE_GEOCODE_URL = "https://geocode.search.hereapi.com/v1/geocode"
HERE_REVGEOCODE_URL = "https://revgeocode.search.hereapi.com/v1/revgeocode"
HERE_ROUTES_URL = "https://router.hereapi.com/v8/routes"

MAPBOX_PROFILES = {"driving": "driving", "cycling": "cycling"}
HERE_TRANSPORT_MODES = {"driving": "car", "cycling": "bicycle"}


class Route(BaseModel):
    distance: str
    duration: str
    instructions: list[str]
    provider: str
    error: str | None = None


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round(meters)} meters"
    return f"{meters / 1000:.1f} km"


def format_duration(seconds: float) -> str:
    minutes = round(seconds / 60)
    if minutes < 60:
        return f"{minutes} minutes"
    hours, remaining = divmod(minutes, 60)
    return f"{hours}h {remaining}m"


def fallback_route(origin: str, destination: str) -> Route:
    return Route(
        distance="Unknown distance",
        duration="Unknown duration",
        instructions=[f"Navigate from {origin} to {destination}"],
        provider="fallback",
        error="No mapping service available",
    )


class NavigationService:
    """Directions and (reverse) geocoding with provider fallback ordering."""

    def __init__(self, config: MapsConfig, mapbox_key: str | None = None, here_key: str | None = None) -> None:
        self.config = config
        self.mapbox_key = mapbox_key
        self.here_key = here_key

    def directions(self, origin: str, destination: str, mode: str | None = None) -> Route:
        """Get a route, trying Mapbox first, then HERE, then a fallback.

        Args:
            origin: Free-text or "lat, lng" origin.
            destination: Free-text destination.
            mode: walking, driving or cycling.

        Returns:
            Route; provider is "fallback" when no service answered.
        """
        mode = mode or self.config.default_mode

        if self.mapbox_key:
            try:
                return self._mapbox_directions(origin, destination, mode)
            except (ProviderError, requests.RequestException, ValueError, KeyError, TypeError) as e:
                logger.error("Mapbox error: %s", e)

        if self.here_key:
            try:
                return self._here_directions(origin, destination, mode)
            except (ProviderError, requests.RequestException, ValueError, KeyError, TypeError) as e:
                logger.error("HERE Maps error: %s", e)

        return fallback_route(origin, destination)

    def reverse_geocode(self, lat: str, lng: str) -> str:
        """Address for a coordinate, or the coordinate itself."""
        fallback = f"{lat}, {lng}"

        if self.mapbox_key:
            try:
                response = requests.get(
                    MAPBOX_GEOCODE_URL.format(query=f"{lng},{lat}"),
                    params={"access_token": self.mapbox_key, "types": "address,poi"},
                    timeout=self.config.timeout,
                )
                if response.ok:
                    features = response.json().get("features") or []
                    return (features[0].get("place_name") if features else None) or fallback
            except (requests.RequestException, ValueError) as e:
                logger.error("Mapbox reverse geocoding error: %s", e)

        if self.here_key:
            try:
                response = requests.get(
                    HERE_REVGEOCODE_URL,
                    params={"at": f"{lat},{lng}", "apikey": self.here_key},
                    timeout=self.config.timeout,
                )
                if response.ok:
                    items = response.json().get("items") or []
                    address = (items[0].get("address") or {}) if items else {}
                    return address.get("label") or fallback
            except (requests.RequestException, ValueError) as e:
                logger.error("HERE reverse geocoding error: %s", e)

        return fallback

    # -- Mapbox ------------------------------------------------------------

    def _mapbox_directions(self, origin: str, destination: str, mode: str) -> Route:
        profile = MAPBOX_PROFILES.get(mode, "walking")
        origin_coords = self.geocode_mapbox(origin)
        destination_coords = self.geocode_mapbox(destination)
        if not origin_coords or not destination_coords:
            raise ProviderError("Failed to geocode locations")

        response = requests.get(
            MAPBOX_DIRECTIONS_URL.format(profile=profile, origin=origin_coords, destination=destination_coords),
            params={"steps": "true", "geometries": "geojson", "access_token": self.mapbox_key},
            timeout=self.config.timeout,
        )
        if not response.ok:
            raise ProviderError(f"Mapbox directions failed: {response.status_code}")

        routes = response.json().get("routes") or []
        if not routes:
            raise ProviderError("No route found")
        route = routes[0]

        legs = route.get("legs") or []
        steps = (legs[0].get("steps") or []) if legs else []
        instructions = [
            step["maneuver"]["instruction"]
            for step in steps
            if (step.get("maneuver") or {}).get("instruction")
        ]

        return Route(
            distance=format_distance(route.get("distance") or 0),
            duration=format_duration(route.get("duration") or 0),
            instructions=instructions,
            provider="Mapbox",
        )

    def geocode_mapbox(self, query: str) -> str | None:
        """Return "lng,lat" for a place name, or None."""
        try:
            response = requests.get(
                MAPBOX_GEOCODE_URL.format(query=quote(query, safe="")),
                params={"access_token": self.mapbox_key, "limit": 1},
                timeout=self.config.timeout,
            )
            if not response.ok:
                return None
            features = response.json().get("features") or []
            center = features[0].get("center") if features else None
            return f"{center[0]},{center[1]}" if center else None
        except (requests.RequestException, ValueError, IndexError, TypeError):
            return None

    # -- HERE --------------------------------------------------------------

    def _here_directions(self, origin: str, destination: str, mode: str) -> Route:
        transport_mode = HERE_TRANSPORT_MODES.get(mode, "pedestrian")
        origin_coords = self.geocode_here(origin)
        destination_coords = self.geocode_here(destination)
        if not origin_coords or not destination_coords:
            raise ProviderError("Failed to geocode locations")

        response = requests.get(
            HERE_ROUTES_URL,
            params={
                "transportMode": transport_mode,
                "origin": origin_coords,
                "destination": destination_coords,
                "return": "summary,actions,instructions",
                "apikey": self.here_key,
            },
            timeout=self.config.timeout,
        )
        if not response.ok:
            raise ProviderError(f"HERE Maps directions failed: {response.status_code}")

        routes = response.json().get("routes") or []
        if not routes:
            raise ProviderError("No route found")

        sections = routes[0].get("sections") or []
        section = sections[0] if sections else {}
        summary = section.get("summary") or {}
        instructions = [action["instruction"] for action in section.get("actions") or [] if action.get("instruction")]
        if not instructions:
            instructions = [inst["text"] for inst in section.get("instructions") or [] if inst.get("text")]

        return Route(
            distance=format_distance(summary.get("length") or 0),
            duration=format_duration(summary.get("duration") or 0),
            instructions=instructions,
            provider="HERE Maps",
        )

    def geocode_here(self, query: str) -> str | None:
        """Return "lat,lng" for a place name, or None."""
        try:
            response = requests.get(
                HERE_GEOCODE_URL,
                params={"q": query, "apikey": self.here_key, "limit": 1},
                timeout=self.config.timeout,
            )
            if not response.ok:
                return None
            items = response.json().get("items") or []
            position = items[0].get("position") if items else None
            return f"{position['lat']},{position['lng']}" if position else None
        except (requests.RequestException, ValueError, KeyError, TypeError):
            return None
