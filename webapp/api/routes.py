"""API routes for chat, image analysis and provider status."""

from typing import Any

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from webapp.services.assistant import assistant_service

router = APIRouter()


class ChatRequest(BaseModel):
    """Request body for a chat message."""

    message: str | None = None


class ChatResponse(BaseModel):
    response: str


class NavigationChatRequest(BaseModel):
    message: str | None = None
    context: dict[str, Any] | None = None


class NavigationChatResponse(BaseModel):
    reply: str


class AnalyzeImageResponse(BaseModel):
    description: str
    objects: list[dict]
    apiUsed: str | None
    success: bool


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/analyze-image", response_model=AnalyzeImageResponse)
async def analyze_image(image: UploadFile | None = File(None)):
    """Describe an uploaded image and list the objects it mentions."""
    if image is None:
        return error_response("Image is required")

    data = await image.read()
    result = await assistant_service.analyze_image(
        data,
        image.content_type or "image/jpeg",
        image.filename or "image",
    )
    return AnalyzeImageResponse(**result)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """Answer a user message."""
    if not request.message or not request.message.strip():
        return error_response("Message is required")

    response = await assistant_service.reply(request.message)
    return ChatResponse(response=response)


@router.post("/navigation-chat", response_model=NavigationChatResponse)
async def navigation_chat(request: NavigationChatRequest):
    """Answer a question about the current navigation session."""
    if not request.message or not request.message.strip():
        return error_response("Message is required")

    reply = assistant_service.navigation_reply(request.message, request.context)
    return NavigationChatResponse(reply=reply)


@router.get("/status/keys")
async def llm_status():
    """Check which LLM keys are configured and answering."""
    return await assistant_service.llm_status()


@router.get("/status/maps")
async def map_status():
    """Check which mapping services are configured and answering."""
    return await assistant_service.map_status()
