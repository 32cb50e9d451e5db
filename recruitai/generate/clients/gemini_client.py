# Gemini gateway client built on the google-genai SDK.
# Exposes generate / chat / submit_video / refresh_video / fetch_media and keeps
# SDK types from leaking past this module.

from __future__ import annotations
import logging
from typing import Any, List, Optional, Sequence

import httpx
import requests
from google import genai
from google.genai import errors, types

from recruitai.errors import ConfigurationError, GatewayError
from recruitai.gateway import (
    GatewayRequest,
    GatewayResponse,
    GroundingMetadata,
    MapSource,
    MediaPart,
    Tool,
    VideoOperation,
    WebSource,
)
from recruitai.generate.types import ConversationTurn

logger = logging.getLogger(__name__)

_SDK_ERRORS = (errors.APIError, httpx.HTTPError)


def _to_gemini_role(role: str) -> str:
    return "model" if role in ("assistant", "model") else "user"


def build_config(request: GatewayRequest) -> types.GenerateContentConfig:
    """Translate our per-call options into a GenerateContentConfig."""
    tools: List[types.Tool] = []
    if Tool.WEB_SEARCH in request.tools:
        tools.append(types.Tool(google_search=types.GoogleSearch()))
    if Tool.MAP_SEARCH in request.tools:
        tools.append(types.Tool(google_maps=types.GoogleMaps()))

    tool_config = None
    if request.lat_lng is not None:
        tool_config = types.ToolConfig(
            retrieval_config=types.RetrievalConfig(
                lat_lng=types.LatLng(
                    latitude=request.lat_lng.latitude,
                    longitude=request.lat_lng.longitude,
                )
            )
        )

    thinking_config = None
    if request.thinking_budget:
        thinking_config = types.ThinkingConfig(thinking_budget=request.thinking_budget)

    return types.GenerateContentConfig(
        tools=tools or None,
        tool_config=tool_config,
        thinking_config=thinking_config,
        system_instruction=request.system_instruction,
        response_mime_type="application/json" if request.response_schema else None,
        response_schema=request.response_schema,
    )


def build_contents(request: GatewayRequest) -> Any:
    if request.media is None:
        return request.prompt
    return [
        types.Part.from_bytes(data=request.media.data, mime_type=request.media.mime_type),
        types.Part(text=request.prompt),
    ]


def grounding_from_response(response: Any) -> Optional[GroundingMetadata]:
    """Pull citations off the first candidate, one variant per source kind."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    meta = getattr(candidates[0], "grounding_metadata", None)
    if meta is None:
        return None

    chunks = []
    for chunk in getattr(meta, "grounding_chunks", None) or []:
        web = getattr(chunk, "web", None)
        maps = getattr(chunk, "maps", None)
        if web is not None:
            chunks.append(WebSource(uri=getattr(web, "uri", None), title=getattr(web, "title", None)))
        elif maps is not None:
            chunks.append(MapSource(uri=getattr(maps, "uri", None), title=getattr(maps, "title", None)))
    queries = tuple(getattr(meta, "web_search_queries", None) or ())
    return GroundingMetadata(chunks=tuple(chunks), search_queries=queries)


def _video_operation(op: Any) -> VideoOperation:
    uri = None
    result = getattr(op, "response", None) or getattr(op, "result", None)
    videos = getattr(result, "generated_videos", None) or []
    if videos and getattr(videos[0], "video", None) is not None:
        uri = getattr(videos[0].video, "uri", None)
    error = getattr(op, "error", None)
    return VideoOperation(
        name=getattr(op, "name", None),
        done=bool(getattr(op, "done", False)),
        video_uri=uri,
        error=str(error) if error else None,
        handle=op,
    )


class GeminiClient:
    def __init__(self, api_key: str, timeout_seconds: float = 120.0):
        if not api_key:
            raise ConfigurationError("GeminiClient needs an API key.")
        self._api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )

    def generate(self, request: GatewayRequest) -> GatewayResponse:
        try:
            resp = self.client.models.generate_content(
                model=request.model,
                contents=build_contents(request),
                config=build_config(request),
            )
        except _SDK_ERRORS as e:
            logger.error("generate_content on %s failed: %s", request.model, e)
            raise GatewayError(f"Gemini request failed: {e}") from e
        return GatewayResponse(text=resp.text, grounding=grounding_from_response(resp))

    def chat(self, request: GatewayRequest, history: Sequence[ConversationTurn]) -> GatewayResponse:
        """Open a chat seeded with `history` and send `request.prompt` as the final turn."""
        seeded = [
            types.Content(role=_to_gemini_role(turn.role), parts=[types.Part(text=turn.text)])
            for turn in history
        ]
        try:
            chat = self.client.chats.create(
                model=request.model,
                config=build_config(request),
                history=seeded,
            )
            resp = chat.send_message(request.prompt)
        except _SDK_ERRORS as e:
            logger.error("chat on %s failed: %s", request.model, e)
            raise GatewayError(f"Gemini chat failed: {e}") from e
        return GatewayResponse(text=resp.text, grounding=grounding_from_response(resp))

    def submit_video(
        self,
        model: str,
        prompt: str,
        aspect_ratio: str,
        resolution: str,
        image: Optional[MediaPart] = None,
    ) -> VideoOperation:
        config = types.GenerateVideosConfig(
            number_of_videos=1,
            resolution=resolution,
            aspect_ratio=aspect_ratio,
        )
        kwargs = {"model": model, "prompt": prompt, "config": config}
        if image is not None:
            kwargs["image"] = types.Image(image_bytes=image.data, mime_type=image.mime_type)
        try:
            op = self.client.models.generate_videos(**kwargs)
        except _SDK_ERRORS as e:
            raise GatewayError(f"Video submission failed: {e}") from e
        return _video_operation(op)

    def refresh_video(self, operation: VideoOperation) -> VideoOperation:
        try:
            op = self.client.operations.get(operation.handle)
        except _SDK_ERRORS as e:
            raise GatewayError(f"Video status check failed: {e}") from e
        return _video_operation(op)

    def fetch_media(self, uri: str) -> bytes:
        """Download generated media; the key travels as the `key` query parameter."""
        try:
            resp = requests.get(uri, params={"key": self._api_key}, timeout=self.timeout_seconds)
            resp.raise_for_status()
        except requests.RequestException as e:
            # the exception text may contain the full URL, key included
            status = getattr(getattr(e, "response", None), "status_code", None)
            raise GatewayError(f"Failed to download generated video (status={status})") from None
        return resp.content
