# Split a COMPLEX-route answer into its visible reasoning block and the answer proper.

from __future__ import annotations
import re

from recruitai.routing.prompts import THINKING_MARKER
from .types import ReasoningSplit

# marker at the start of a line; reasoning runs to the first blank line (or end of text)
_THOUGHT_RE = re.compile(
    r"(?:^|\n)" + re.escape(THINKING_MARKER) + r"(?P<reasoning>[\s\S]*?)(?:\n\s*\n|$)(?P<answer>[\s\S]*)"
)
_QUOTE_PREFIX = re.compile(r"^>\s?", re.MULTILINE)


def extract_reasoning(text: str) -> ReasoningSplit:
    """Return (reasoning, answer). Without the marker the whole text is the answer."""
    if not text:
        return ReasoningSplit(reasoning="", answer="")

    match = _THOUGHT_RE.search(text)
    if not match:
        return ReasoningSplit(reasoning="", answer=text.strip())

    reasoning = _QUOTE_PREFIX.sub("", match.group("reasoning")).strip()
    preamble = text[:match.start()].strip()
    answer = match.group("answer").strip()
    if preamble:
        answer = f"{preamble}\n\n{answer}".strip()
    return ReasoningSplit(reasoning=reasoning, answer=answer)
