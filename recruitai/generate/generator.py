# RecruitmentAssistant: one object exposing every tool the UI calls.
# Accepts any model client with the gateway interface (Gemini, Echo).

from __future__ import annotations
import logging
import threading
from typing import Optional

from recruitai.gateway import LatLng, MediaPart
from recruitai.routing import IntentClassifier
from .job_search import search_jobs
from .materials import JobMaterials, generate_recruitment_materials
from .media import MAX_VIDEO_BYTES, analyze_image, analyze_video
from .session import DEFAULT_HISTORY_WINDOW, ChatSession
from .types import ChatResponse, JobSearchResult, VideoAsset
from .video import DEFAULT_POLL_SECONDS, VideoGenerator

logger = logging.getLogger(__name__)


class RecruitmentAssistant:
    def __init__(
        self,
        model_client,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        max_video_bytes: int = MAX_VIDEO_BYTES,
        video_poll_seconds: float = DEFAULT_POLL_SECONDS,
        video_timeout: Optional[float] = None,
    ):
        self.model_client = model_client
        self.history_window = history_window
        self.max_video_bytes = max_video_bytes
        self.classifier = IntentClassifier(model_client)
        self.video = VideoGenerator(model_client, poll_interval=video_poll_seconds, timeout=video_timeout)

    def new_session(self, greet: bool = True) -> ChatSession:
        kwargs = {"classifier": self.classifier, "history_window": self.history_window}
        if greet:
            return ChatSession.with_greeting(self.model_client, **kwargs)
        return ChatSession(self.model_client, **kwargs)

    # -- tools ---------------------------------------------------------
    def generate_recruitment_materials(self, notes: str) -> JobMaterials:
        return generate_recruitment_materials(self.model_client, notes)

    def smart_chat(self, message: str, session: ChatSession, location: Optional[LatLng] = None) -> ChatResponse:
        return session.smart_chat(message, location)

    def search_jobs(self, role: str, location: str) -> JobSearchResult:
        return search_jobs(self.model_client, role, location)

    def generate_video(
        self,
        prompt: Optional[str],
        aspect_ratio: str = "16:9",
        image: Optional[MediaPart] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> VideoAsset:
        return self.video.generate(prompt, aspect_ratio, image=image, cancel_event=cancel_event)

    def analyze_image(self, data: bytes, mime_type: str, question: Optional[str] = None) -> str:
        return analyze_image(self.model_client, data, mime_type, question)

    def analyze_video(self, data: bytes, mime_type: str, question: Optional[str] = None) -> str:
        return analyze_video(self.model_client, data, mime_type, question, max_bytes=self.max_video_bytes)


def build_assistant(cfg) -> RecruitmentAssistant:
    """Pick the model client from settings. Without USE_ECHO a missing key raises ConfigurationError."""
    if cfg.USE_ECHO:
        from .clients.echo_dev_client import EchoDevClient
        model_client = EchoDevClient()
    else:
        from .clients.gemini_client import GeminiClient
        model_client = GeminiClient(api_key=cfg.require_api_key(), timeout_seconds=cfg.HTTP_TIMEOUT_SECONDS)

    logger.info("Model client: %s", model_client.__class__.__name__)
    return RecruitmentAssistant(
        model_client,
        history_window=cfg.HISTORY_WINDOW,
        max_video_bytes=cfg.max_video_bytes,
        video_poll_seconds=cfg.VIDEO_POLL_SECONDS,
        video_timeout=cfg.VIDEO_TIMEOUT_SECONDS,
    )
