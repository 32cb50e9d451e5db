# Job materials: raw hiring notes -> LinkedIn-ready JD + behavioural interview guide.

from __future__ import annotations
import logging
from typing import List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from recruitai.errors import MalformedResponseError, PreconditionError
from recruitai.gateway import GatewayRequest
from recruitai.routing.dispatcher import PRO_MODEL

logger = logging.getLogger(__name__)

MATERIALS_THINKING_BUDGET = 32768
TARGET_QUESTION_COUNT = 10

MATERIALS_PROMPT = """\
You are an expert HR consultant. Based on the following raw notes, generate:
1. A polished, professional Job Description formatted for LinkedIn (Markdown).
2. An Interview Guide with {count} behavioral questions targeting skills in the JD.

Raw Notes:
{notes}
"""

MATERIALS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "jobDescription": {
            "type": "STRING",
            "description": "The full markdown formatted job description",
        },
        "interviewQuestions": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": f"List of {TARGET_QUESTION_COUNT} behavioral interview questions",
        },
    },
    "required": ["jobDescription", "interviewQuestions"],
}


class JobMaterials(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_description: str = Field(alias="jobDescription", min_length=1)
    interview_questions: List[str] = Field(alias="interviewQuestions")


def parse_materials(text: str | None) -> JobMaterials:
    """Validate the gateway's JSON. Anything short of both fields is an error, never a partial object."""
    if not text or not text.strip():
        raise MalformedResponseError("No response generated")
    try:
        return JobMaterials.model_validate_json(text)
    except ValidationError as e:
        raise MalformedResponseError(f"Job materials response did not match the schema: {e}") from e


def generate_recruitment_materials(model_client, notes: str) -> JobMaterials:
    if not notes or not notes.strip():
        raise PreconditionError("Role notes must not be empty.")

    request = GatewayRequest(
        model=PRO_MODEL,
        prompt=MATERIALS_PROMPT.format(count=TARGET_QUESTION_COUNT, notes=notes.strip()),
        thinking_budget=MATERIALS_THINKING_BUDGET,
        response_schema=MATERIALS_SCHEMA,
    )
    response = model_client.generate(request)
    materials = parse_materials(response.text)

    if len(materials.interview_questions) != TARGET_QUESTION_COUNT:
        logger.warning(
            "Expected %d interview questions, got %d",
            TARGET_QUESTION_COUNT,
            len(materials.interview_questions),
        )
    return materials
