# Value types for intent routing.
# Everything here is immutable so a resolved route can be shared freely.

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from recruitai.gateway import LatLng, Tool


class Category(str, Enum):
    """Intent classes the router can pick for a chat turn."""
    SIMPLE = "SIMPLE"
    COMPLEX = "COMPLEX"
    SEARCH = "SEARCH"
    MAPS = "MAPS"


@dataclass(frozen=True)
class RouteConfig:
    """Resolved model/tool configuration for one Category."""
    category: Category
    model: str
    label: str
    tools: Tuple[Tool, ...] = ()
    lat_lng: Optional[LatLng] = None
    thinking_budget: Optional[int] = None
    system_instruction: Optional[str] = None
