# Intent routing: classify a chat message, then pick the model/tool setup for it.

from .classifier import IntentClassifier, parse_category
from .dispatcher import ROUTES, resolve
from .types import Category, LatLng, RouteConfig, Tool

__all__ = [
    "IntentClassifier",
    "parse_category",
    "ROUTES",
    "resolve",
    "Category",
    "LatLng",
    "RouteConfig",
    "Tool",
]
