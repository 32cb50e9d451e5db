# Fixed prompt text used by the router and the COMPLEX route.

THINKING_MARKER = "> **Thinking Process:**"

CLASSIFIER_PROMPT = """\
Analyze this user message and classify it into one of these categories:
- SIMPLE: Greetings, simple factual questions, short conversation.
- COMPLEX: Reasoning tasks, coding, creative writing, complex explanations, interview prep.
- SEARCH: Questions about current events, news, or specific realtime info.
- MAPS: Questions about places, "near me", navigation, or geography requiring coordinates.

User Message: "{message}"

Return ONLY the category name.
"""

COMPLEX_SYSTEM_INSTRUCTION = (
    "You are a helpful assistant. For this complex task, you must first output your "
    "step-by-step reasoning. Format this reasoning as a blockquote starting EXACTLY with "
    f"'{THINKING_MARKER}' followed by your thoughts. After the blockquote, provide the "
    "final answer clearly."
)


def build_classifier_prompt(message: str) -> str:
    return CLASSIFIER_PROMPT.format(message=message)
