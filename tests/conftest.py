# Shared fixtures: a scripted gateway client that replays canned responses
# and records every call, so tests can assert on what was sent (and how often).

from collections import deque

import pytest

from recruitai.gateway import GatewayResponse, VideoOperation


class ScriptedClient:
    def __init__(self):
        self.generate_responses = deque()
        self.chat_responses = deque()
        self.video_states = deque()
        self.media = b"MP4DATA"
        self.media_error = None
        self.calls = []

    # -- scripting helpers --
    def queue_generate(self, *items):
        self.generate_responses.extend(items)
        return self

    def queue_chat(self, *items):
        self.chat_responses.extend(items)
        return self

    def calls_to(self, method):
        return [args for name, args in self.calls if name == method]

    @staticmethod
    def _next(queue):
        item = queue.popleft()
        if isinstance(item, Exception):
            raise item
        if isinstance(item, str) or item is None:
            return GatewayResponse(text=item)
        return item

    # -- gateway interface --
    def generate(self, request):
        self.calls.append(("generate", request))
        return self._next(self.generate_responses)

    def chat(self, request, history):
        self.calls.append(("chat", (request, tuple(history))))
        return self._next(self.chat_responses)

    def submit_video(self, model, prompt, aspect_ratio, resolution, image=None):
        self.calls.append(("submit_video", dict(model=model, prompt=prompt, aspect_ratio=aspect_ratio,
                                                resolution=resolution, image=image)))
        return self._next_video()

    def refresh_video(self, operation):
        self.calls.append(("refresh_video", operation.name))
        return self._next_video()

    def fetch_media(self, uri):
        self.calls.append(("fetch_media", uri))
        if self.media_error:
            raise self.media_error
        return self.media

    def _next_video(self):
        item = self.video_states.popleft()
        if isinstance(item, Exception):
            raise item
        return item


def _op(done, uri=None, error=None, name="operations/vid-1"):
    return VideoOperation(name=name, done=done, video_uri=uri, error=error)


@pytest.fixture
def client():
    return ScriptedClient()


@pytest.fixture
def make_op():
    return _op
