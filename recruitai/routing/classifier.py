# Intent classifier: one cheap gateway call that labels a chat message.

from __future__ import annotations
import logging
from typing import Optional

from recruitai.gateway import GatewayRequest
from .dispatcher import DEFAULT_CATEGORY, FLASH_MODEL
from .prompts import build_classifier_prompt
from .types import Category

logger = logging.getLogger(__name__)


def parse_category(label: Optional[str]) -> Category:
    """Normalise raw model output into a Category; unknown labels fail open to COMPLEX."""
    normalised = (label or "").strip().upper()
    try:
        return Category(normalised)
    except ValueError:
        logger.info("Unrecognised intent label %r, using %s", label, DEFAULT_CATEGORY.value)
        return DEFAULT_CATEGORY


class IntentClassifier:
    def __init__(self, model_client, model: str = FLASH_MODEL):
        self.model_client = model_client
        self.model = model

    def classify(self, message: str) -> Category:
        """Ask the gateway for a bare label. Gateway errors propagate untouched."""
        request = GatewayRequest(model=self.model, prompt=build_classifier_prompt(message))
        response = self.model_client.generate(request)
        category = parse_category(response.text)
        logger.debug("Classified message as %s", category.value)
        return category
