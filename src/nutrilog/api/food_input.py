"""Free-text and photo food recognition endpoints."""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from nutrilog.api.schemas import ImageInputRequest, TextInputRequest

if TYPE_CHECKING:
    from nutrilog.containers import AppContainer

router = APIRouter(prefix="/food-input", tags=["food-input"])


@router.post("/text")
async def recognize_text(body: TextInputRequest, request: Request) -> dict[str, object]:
    """Recognize a food from a description such as "two eggs and toast"."""
    container: AppContainer = request.app.state.container
    result = await container.food_input_service.recognize_text(
        body.text, save=body.save
    )
    return {"result": result}


@router.post("/image")
async def recognize_image(
    body: ImageInputRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    result = await container.food_input_service.recognize_image(
        decode_image(body.image_base64), save=body.save
    )
    return {"result": result}


def decode_image(payload: str) -> bytes:
    """Decode base64 image data, accepting a ``data:`` URL prefix."""
    _, separator, encoded = payload.partition("base64,")
    data = encoded if separator else payload
    try:
        return base64.b64decode(data.strip(), validate=True)
    except binascii.Error as exc:
        raise ValueError("Image is not valid base64") from exc
