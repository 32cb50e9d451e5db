# Recruitment video generation: submit a Veo job, poll it to completion, download the clip.

from __future__ import annotations
import logging
import threading
import time
from typing import Callable, Optional

from recruitai.errors import (
    GatewayError,
    MalformedResponseError,
    OperationCancelledError,
    PreconditionError,
    VideoTimeoutError,
)
from recruitai.gateway import MediaPart, VideoOperation
from .types import VideoAsset

logger = logging.getLogger(__name__)

VIDEO_MODEL = "veo-3.1-fast-generate-preview"
VIDEO_RESOLUTION = "720p"
ASPECT_RATIOS = ("16:9", "9:16")
DEFAULT_POLL_SECONDS = 5.0
IMAGE_ONLY_PROMPT = "animate this"


class VideoGenerator:
    def __init__(
        self,
        model_client,
        poll_interval: float = DEFAULT_POLL_SECONDS,
        timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.model_client = model_client
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock

    def generate(
        self,
        prompt: str | None,
        aspect_ratio: str = "16:9",
        image: Optional[MediaPart] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> VideoAsset:
        prompt = (prompt or "").strip()
        if not prompt and image is None:
            raise PreconditionError("A prompt or a reference image is required.")
        if aspect_ratio not in ASPECT_RATIOS:
            raise PreconditionError(f"Aspect ratio must be one of {', '.join(ASPECT_RATIOS)}.")
        if image is not None and not image.data:
            raise PreconditionError("Reference image is empty.")

        operation = self.model_client.submit_video(
            model=VIDEO_MODEL,
            prompt=prompt or IMAGE_ONLY_PROMPT,
            aspect_ratio=aspect_ratio,
            resolution=VIDEO_RESOLUTION,
            image=image,
        )
        operation = self.wait(operation, cancel_event)

        if operation.error:
            raise GatewayError(f"Video generation failed: {operation.error}")
        if not operation.video_uri:
            raise MalformedResponseError("Video generation failed to return a URI")

        data = self.model_client.fetch_media(operation.video_uri)
        return VideoAsset(data=data, uri=operation.video_uri)

    def wait(self, operation: VideoOperation, cancel_event: Optional[threading.Event] = None) -> VideoOperation:
        """Poll until done. Any error while polling propagates and ends the loop."""
        started = self._clock()
        polls = 0
        while not operation.done:
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError("Video generation cancelled")
            if self.timeout is not None and self._clock() - started >= self.timeout:
                raise VideoTimeoutError(f"Video generation did not finish within {self.timeout:g}s")

            if cancel_event is not None:
                if cancel_event.wait(self.poll_interval):
                    raise OperationCancelledError("Video generation cancelled")
            else:
                self._sleep(self.poll_interval)

            polls += 1
            logger.debug("Polling video operation %s (attempt %d)", operation.name, polls)
            operation = self.model_client.refresh_video(operation)

        logger.info("Video operation %s finished after %d polls", operation.name, polls)
        return operation
