# Typed records shared across generator modules.

from __future__ import annotations
import time
import uuid
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from recruitai.gateway import GroundingMetadata


@dataclass(frozen=True)
class ConversationTurn:
    """Single chat turn: user or assistant."""
    role: str
    text: str
    timestamp: float = field(default_factory=time.time)
    grounding: Optional[GroundingMetadata] = None
    route_label: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class ConversationLog:
    """Append-only chat history. `append` returns a new log; `window` is a read-only view."""
    turns: Tuple[ConversationTurn, ...] = ()

    def append(self, *turns: ConversationTurn) -> "ConversationLog":
        return ConversationLog(self.turns + tuple(turns))

    def window(self, size: int) -> Tuple[ConversationTurn, ...]:
        if size <= 0:
            return ()
        return self.turns[-size:]

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(self.turns)


@dataclass(frozen=True)
class ReasoningSplit:
    reasoning: str
    answer: str


@dataclass
class ChatResponse:
    """Assistant reply plus the route that produced it."""
    text: str
    route_label: str
    category: Optional[str] = None
    grounding: Optional[GroundingMetadata] = None

    @property
    def citations(self) -> List[dict]:
        return self.grounding.sources() if self.grounding else []


@dataclass
class JobSearchResult:
    text: str
    grounding: Optional[GroundingMetadata] = None

    @property
    def citations(self) -> List[dict]:
        return self.grounding.sources() if self.grounding else []


@dataclass
class VideoAsset:
    """Downloaded video bytes, ready to stream back to a player."""
    data: bytes
    uri: str
    mime_type: str = "video/mp4"
