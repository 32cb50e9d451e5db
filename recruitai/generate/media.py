# Image / video understanding: inline bytes + a question on the multimodal pro model.

from __future__ import annotations
import logging

from recruitai.errors import PreconditionError
from recruitai.gateway import GatewayRequest, MediaPart
from recruitai.routing.dispatcher import PRO_MODEL

logger = logging.getLogger(__name__)

MAX_VIDEO_BYTES = 20 * 1024 * 1024

DEFAULT_IMAGE_QUESTION = "Analyze this image for recruitment purposes."
DEFAULT_VIDEO_QUESTION = "Describe the key events in this video."
NO_ANALYSIS = "No analysis generated."


def _check_media(data: bytes, mime_type: str, family: str) -> None:
    if not data:
        raise PreconditionError(f"No {family} content supplied.")
    if not mime_type or not mime_type.lower().startswith(f"{family}/"):
        raise PreconditionError(f"Expected an {family}/* MIME type, got {mime_type!r}.")


def _analyze(model_client, part: MediaPart, question: str) -> str:
    request = GatewayRequest(model=PRO_MODEL, prompt=question, media=part)
    response = model_client.generate(request)
    return response.text or NO_ANALYSIS


def analyze_image(model_client, data: bytes, mime_type: str, question: str | None = None) -> str:
    _check_media(data, mime_type, "image")
    return _analyze(model_client, MediaPart(data=data, mime_type=mime_type), question or DEFAULT_IMAGE_QUESTION)


def analyze_video(
    model_client,
    data: bytes,
    mime_type: str,
    question: str | None = None,
    max_bytes: int = MAX_VIDEO_BYTES,
) -> str:
    """Same as analyze_image, but clips over `max_bytes` are refused before any call."""
    _check_media(data, mime_type, "video")
    if len(data) > max_bytes:
        logger.info("Rejected %d-byte video (limit %d)", len(data), max_bytes)
        raise PreconditionError(
            f"Video is {len(data) / (1024 * 1024):.1f} MB; clips must be under {max_bytes // (1024 * 1024)} MB."
        )
    return _analyze(model_client, MediaPart(data=data, mime_type=mime_type), question or DEFAULT_VIDEO_QUESTION)
