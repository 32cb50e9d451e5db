# Category -> RouteConfig lookup.
# The table is plain data; resolve() never performs I/O and only layers the
# caller's location onto routes that use map search.

from __future__ import annotations
import dataclasses
from types import MappingProxyType
from typing import Mapping, Optional

from .prompts import COMPLEX_SYSTEM_INSTRUCTION
from .types import Category, LatLng, RouteConfig, Tool

LITE_MODEL = "gemini-flash-lite-latest"
FLASH_MODEL = "gemini-2.5-flash"
PRO_MODEL = "gemini-3-pro-preview"

COMPLEX_THINKING_BUDGET = 2048

ROUTES: Mapping[Category, RouteConfig] = MappingProxyType({
    Category.SIMPLE: RouteConfig(
        category=Category.SIMPLE,
        model=LITE_MODEL,
        label="Gemini Lite",
    ),
    Category.SEARCH: RouteConfig(
        category=Category.SEARCH,
        model=FLASH_MODEL,
        label="Flash + Search",
        tools=(Tool.WEB_SEARCH,),
    ),
    Category.MAPS: RouteConfig(
        category=Category.MAPS,
        model=FLASH_MODEL,
        label="Flash + Maps",
        tools=(Tool.MAP_SEARCH,),
    ),
    Category.COMPLEX: RouteConfig(
        category=Category.COMPLEX,
        model=PRO_MODEL,
        label="Gemini 3 Pro (Thinking)",
        thinking_budget=COMPLEX_THINKING_BUDGET,
        system_instruction=COMPLEX_SYSTEM_INSTRUCTION,
    ),
})

DEFAULT_CATEGORY = Category.COMPLEX


def resolve(category: Optional[Category], location: Optional[LatLng] = None) -> RouteConfig:
    """Return the route for `category`, falling back to COMPLEX for anything unknown."""
    route = ROUTES.get(category, ROUTES[DEFAULT_CATEGORY])  # type: ignore[arg-type]
    if location is not None and Tool.MAP_SEARCH in route.tools:
        return dataclasses.replace(route, lat_lng=location)
    return route
