# Call/return shapes for the remote model gateway.
# Clients (Gemini, echo) accept GatewayRequest and hand back GatewayResponse /
# VideoOperation so nothing above them touches SDK objects.

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class Tool(str, Enum):
    """Retrieval tools a call may enable on the gateway."""
    WEB_SEARCH = "web_search"
    MAP_SEARCH = "map_search"


@dataclass(frozen=True)
class LatLng:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class MediaPart:
    """Inline binary content (image, video) sent alongside a prompt."""
    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)


# ------------------------------------------------------------
# Grounding metadata: one variant per source kind
# ------------------------------------------------------------
@dataclass(frozen=True)
class WebSource:
    uri: Optional[str] = None
    title: Optional[str] = None
    kind: str = field(default="web", init=False)


@dataclass(frozen=True)
class MapSource:
    uri: Optional[str] = None
    title: Optional[str] = None
    kind: str = field(default="maps", init=False)


GroundingChunk = Union[WebSource, MapSource]


@dataclass(frozen=True)
class GroundingMetadata:
    """Citations attached to a response that used search or maps."""
    chunks: Tuple[GroundingChunk, ...] = ()
    search_queries: Tuple[str, ...] = ()

    def sources(self) -> List[Dict[str, str]]:
        """Citation links for display: de-duplicated by uri, untitled ones labelled 'Source'."""
        seen = set()
        out: List[Dict[str, str]] = []
        for chunk in self.chunks:
            if not chunk.uri or chunk.uri in seen:
                continue
            seen.add(chunk.uri)
            out.append({"uri": chunk.uri, "title": chunk.title or "Source", "kind": chunk.kind})
        return out

    def __bool__(self) -> bool:
        return bool(self.chunks or self.search_queries)


# ------------------------------------------------------------
# Requests / responses
# ------------------------------------------------------------
@dataclass(frozen=True)
class GatewayRequest:
    """Model id + content + per-call configuration."""
    model: str
    prompt: str
    media: Optional[MediaPart] = None
    tools: Tuple[Tool, ...] = ()
    lat_lng: Optional[LatLng] = None
    thinking_budget: Optional[int] = None
    system_instruction: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = None


@dataclass
class GatewayResponse:
    text: Optional[str]
    grounding: Optional[GroundingMetadata] = None


@dataclass
class VideoOperation:
    """Async video job as seen by the poll loop. `handle` is the client's own object."""
    name: Optional[str]
    done: bool
    video_uri: Optional[str] = None
    error: Optional[str] = None
    handle: Any = None
