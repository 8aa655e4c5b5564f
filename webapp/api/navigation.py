"""Navigation endpoints: directions and reverse geocoding."""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from voice_assistant.navigation import Route
from webapp.api.routes import error_response
from webapp.services.assistant import assistant_service

router = APIRouter()


class DirectionsRequest(BaseModel):
    origin: str | None = None
    destination: str | None = None
    mode: Literal["walking", "driving", "cycling"] = "walking"


class AddressResponse(BaseModel):
    address: str


@router.get("/navigation", response_model=AddressResponse)
async def reverse_geocode(action: str | None = None, lat: str | None = None, lng: str | None = None):
    """Look up the address of a coordinate."""
    if action != "reverse-geocode" or not lat or not lng:
        return error_response("Invalid request")

    address = await assistant_service.reverse_geocode(lat, lng)
    return AddressResponse(address=address)


@router.post("/navigation", response_model=Route, response_model_exclude_none=True)
async def directions(request: DirectionsRequest):
    """Get walking, driving or cycling directions."""
    if not request.origin or not request.destination:
        return error_response("Origin and destination required")

    return await assistant_service.directions(request.origin, request.destination, request.mode)
