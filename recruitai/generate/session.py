# Conversation session: owns the chat log and replays a bounded window of it
# to the gateway with whatever route the dispatcher picked.

from __future__ import annotations
import logging
import threading
import time
from typing import Callable, Optional

from recruitai.errors import PreconditionError
from recruitai.gateway import GatewayRequest, LatLng
from recruitai.routing import IntentClassifier, RouteConfig, resolve
from .reasoning import extract_reasoning
from .types import ChatResponse, ConversationLog, ConversationTurn, ReasoningSplit

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_WINDOW = 10

GREETING = (
    "Hi! I am your intelligent recruitment assistant. Ask me anything, and I will "
    "automatically select the best AI model for your task."
)
GREETING_LABEL = "Auto-Detect"
EMPTY_REPLY = "I couldn't generate a response."


class ChatSession:
    def __init__(
        self,
        model_client,
        classifier: Optional[IntentClassifier] = None,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        log: Optional[ConversationLog] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.model_client = model_client
        self.classifier = classifier or IntentClassifier(model_client)
        self.history_window = history_window
        self.clock = clock
        self.log = log if log is not None else ConversationLog()
        # one turn at a time; re-entrant so callers can hold it across a turn and its failure notice
        self.lock = threading.RLock()

    @classmethod
    def with_greeting(cls, model_client, **kwargs) -> "ChatSession":
        session = cls(model_client, **kwargs)
        session.log = session.log.append(
            ConversationTurn(role="assistant", text=GREETING, timestamp=session.clock(), route_label=GREETING_LABEL)
        )
        return session

    def send(self, message: str, route: RouteConfig) -> ChatResponse:
        """Replay the recent window, send `message` on `route`, record both turns."""
        with self.lock:
            history = self._open_turn(message)
            return self._dispatch(message, route, history)

    def smart_chat(self, message: str, location: Optional[LatLng] = None) -> ChatResponse:
        """Classify first, then send on the resolved route. Never parallel."""
        with self.lock:
            history = self._open_turn(message)
            category = self.classifier.classify(message)
            return self._dispatch(message, resolve(category, location), history)

    def _open_turn(self, message: str):
        # the window is taken before the new user turn is logged
        if not message or not message.strip():
            raise PreconditionError("Message must not be empty.")
        history = self.log.window(self.history_window)
        self.log = self.log.append(ConversationTurn(role="user", text=message, timestamp=self.clock()))
        return history

    def _dispatch(self, message: str, route: RouteConfig, history) -> ChatResponse:
        request = GatewayRequest(
            model=route.model,
            prompt=message,
            tools=route.tools,
            lat_lng=route.lat_lng,
            thinking_budget=route.thinking_budget,
            system_instruction=route.system_instruction,
        )
        logger.info("Chat turn via %s (%s), replaying %d turns", route.label, route.model, len(history))
        response = self.model_client.chat(request, history)

        reply = ChatResponse(
            text=response.text or EMPTY_REPLY,
            route_label=route.label,
            category=route.category.value,
            grounding=response.grounding,
        )
        self.log = self.log.append(
            ConversationTurn(
                role="assistant",
                text=reply.text,
                timestamp=self.clock(),
                grounding=reply.grounding,
                route_label=reply.route_label,
            )
        )
        return reply

    def record_failure(self, text: str) -> None:
        """Append an assistant notice after a failed turn (the user turn is already logged)."""
        with self.lock:
            self.log = self.log.append(ConversationTurn(role="assistant", text=text, timestamp=self.clock()))

    @staticmethod
    def split_reasoning(reply: ChatResponse) -> ReasoningSplit:
        return extract_reasoning(reply.text)
