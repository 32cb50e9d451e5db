# Offline stand-in for the Gemini client, for local dev and tests without API calls.
# Same interface as GeminiClient; every call is recorded in `calls`.

import json
from typing import List, Optional, Sequence, Tuple

from recruitai.gateway import GatewayRequest, GatewayResponse, MediaPart, VideoOperation
from recruitai.generate.types import ConversationTurn

ECHO_VIDEO_URI = "echo://video/0"


class EchoDevClient:
    def __init__(self):
        self.model = "echo-dev"
        self.calls: List[Tuple[str, object]] = []

    def generate(self, request: GatewayRequest) -> GatewayResponse:
        self.calls.append(("generate", request))
        if request.response_schema:
            # fill every required field with a placeholder of the right type
            props = request.response_schema.get("properties", {})
            payload = {
                name: ([f"[ECHO] {name}"] if spec.get("type") == "ARRAY" else f"[ECHO] {name}")
                for name, spec in props.items()
            }
            return GatewayResponse(text=json.dumps(payload))
        return GatewayResponse(text=f"[ECHO RESPONSE]\n{request.prompt}")

    def chat(self, request: GatewayRequest, history: Sequence[ConversationTurn]) -> GatewayResponse:
        self.calls.append(("chat", request))
        return GatewayResponse(text=f"[ECHO RESPONSE]\n{request.prompt}")

    def submit_video(
        self,
        model: str,
        prompt: str,
        aspect_ratio: str,
        resolution: str,
        image: Optional[MediaPart] = None,
    ) -> VideoOperation:
        self.calls.append(("submit_video", prompt))
        return VideoOperation(name="echo-op", done=True, video_uri=ECHO_VIDEO_URI)

    def refresh_video(self, operation: VideoOperation) -> VideoOperation:
        self.calls.append(("refresh_video", operation.name))
        return operation

    def fetch_media(self, uri: str) -> bytes:
        self.calls.append(("fetch_media", uri))
        return b"ECHO-VIDEO"
