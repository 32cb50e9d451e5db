# Live job listings via the web-search tool. The markdown feed is returned as-is;
# citation links come from grounding metadata, not from parsing the text.

from __future__ import annotations

from recruitai.errors import MalformedResponseError, PreconditionError
from recruitai.gateway import GatewayRequest, Tool
from recruitai.routing.dispatcher import FLASH_MODEL
from .types import JobSearchResult

JOB_SEARCH_PROMPT = """\
Find active job listings for "{role}" in or near "{location}".
List 5-7 specific job openings.
For each job, provide:
1. Company Name
2. Job Title
3. A very brief summary (1 sentence)
4. A 'Source' link if available from the search grounding.

Format the output as a Markdown list. Make it look like a feed of opportunities."""


def search_jobs(model_client, role: str, location: str) -> JobSearchResult:
    if not role or not role.strip():
        raise PreconditionError("Job role must not be empty.")
    if not location or not location.strip():
        raise PreconditionError("Location must not be empty.")

    request = GatewayRequest(
        model=FLASH_MODEL,
        prompt=JOB_SEARCH_PROMPT.format(role=role.strip(), location=location.strip()),
        tools=(Tool.WEB_SEARCH,),
    )
    response = model_client.generate(request)
    if response.text is None:
        raise MalformedResponseError("Job search returned no text")
    return JobSearchResult(text=response.text, grounding=response.grounding)
