# ============================================================
# RecruitAI FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Smart chat (intent router -> per-route Gemini config)
#   - Job materials, job search, media analysis, video generation
#   - Gemini client, or the Echo client when USE_ECHO=1
# ============================================================

import base64
import binascii
import logging
import re
import threading
import time
import uuid
from collections import OrderedDict
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException, Response
from pydantic import BaseModel, Field

# --- Local imports ---
from recruitai.errors import (
    ConfigurationError,
    GatewayError,
    MalformedResponseError,
    OperationCancelledError,
    PreconditionError,
    RecruitAIError,
    VideoTimeoutError,
)
from recruitai.gateway import LatLng, MediaPart
from recruitai.generate import ChatSession, RecruitmentAssistant, build_assistant, extract_reasoning
from recruitai.generate.types import ConversationTurn
from recruitai.log import configure_logging
from recruitai.settings import settings

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

CHAT_FAILURE_TEXT = "Sorry, I encountered a connection error."

# ------------------------------------------------------------
# 🔧 Model client selection
# ------------------------------------------------------------
@lru_cache(maxsize=1)
def get_assistant() -> RecruitmentAssistant:
    return build_assistant(settings)


# ------------------------------------------------------------
# 🧠 Chat sessions (in-process, gone on restart)
# ------------------------------------------------------------
class ChatSessionStore:
    """Chat sessions by id, capped in count and expired after sitting idle."""

    def __init__(self, max_sessions: int, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        # least recently used first
        self._sessions: "OrderedDict[str, Tuple[ChatSession, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            self._expire()
            return len(self._sessions)

    def get(self, session_id: str) -> Optional[ChatSession]:
        with self._lock:
            self._expire()
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            self._sessions[session_id] = (entry[0], self.clock())
            self._sessions.move_to_end(session_id)
            return entry[0]

    def add(self, session: ChatSession) -> str:
        with self._lock:
            self._expire()
            session_id = uuid.uuid4().hex
            self._sessions[session_id] = (session, self.clock())
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted chat session %s (limit %d)", evicted, self.max_sessions)
            return session_id

    def pop(self, session_id: str) -> Optional[ChatSession]:
        with self._lock:
            entry = self._sessions.pop(session_id, None)
            return entry[0] if entry else None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def _expire(self) -> None:
        cutoff = self.clock() - self.ttl_seconds
        while self._sessions:
            session_id, (_, last_seen) = next(iter(self._sessions.items()))
            if last_seen > cutoff:
                break
            del self._sessions[session_id]
            logger.info("Expired idle chat session %s", session_id)


SESSIONS = ChatSessionStore(settings.MAX_CHAT_SESSIONS, settings.CHAT_SESSION_TTL_SECONDS)


def _get_or_create_session(session_id: Optional[str], assistant: RecruitmentAssistant) -> Tuple[str, ChatSession]:
    if session_id:
        session = SESSIONS.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Unknown chat session: {session_id}")
        return session_id, session
    session = assistant.new_session()
    return SESSIONS.add(session), session


# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # fail at startup, not on the first request, when the key is missing
    get_assistant()
    yield


app = FastAPI(title="RecruitAI API", version="0.3", lifespan=lifespan)


def _http_error(e: RecruitAIError) -> HTTPException:
    if isinstance(e, PreconditionError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, (MalformedResponseError, GatewayError)):
        return HTTPException(status_code=502, detail=str(e))
    if isinstance(e, VideoTimeoutError):
        return HTTPException(status_code=504, detail=str(e))
    if isinstance(e, OperationCancelledError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=500, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


_DATA_URL = re.compile(r"^data:[^;,]*;base64,", re.IGNORECASE)


def _decode_b64(payload: str, field: str) -> bytes:
    """Accept raw base64 or a data URL (the prefix is dropped)."""
    try:
        return base64.b64decode(_DATA_URL.sub("", payload.strip()), validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail=f"{field} is not valid base64")


# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class MaterialsRequest(BaseModel):
    notes: str


class MaterialsPayload(BaseModel):
    job_description: str
    interview_questions: List[str]


class Location(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ChatRequest(BaseModel):
    session_id: Optional[str] = None
    message: str
    location: Optional[Location] = None


class TurnPayload(BaseModel):
    id: str
    role: str
    text: str
    timestamp: float
    route_label: Optional[str] = None
    citations: List[Dict[str, str]] = []


class ChatPayload(BaseModel):
    session_id: str
    text: str
    reasoning: str
    answer: str
    route_label: Optional[str]
    category: Optional[str]
    citations: List[Dict[str, str]]
    ok: bool = True


class HistoryPayload(BaseModel):
    session_id: str
    turns: List[TurnPayload]


class JobSearchRequest(BaseModel):
    role: str
    location: str


class JobSearchPayload(BaseModel):
    text: str
    citations: List[Dict[str, str]]
    search_queries: List[str]


class AnalyzeRequest(BaseModel):
    data: str = Field(..., description="Base64 media, raw or as a data URL")
    mime_type: str
    question: Optional[str] = None


class AnalyzePayload(BaseModel):
    text: str


class VideoRequest(BaseModel):
    prompt: Optional[str] = None
    aspect_ratio: str = "16:9"
    image: Optional[str] = Field(default=None, description="Base64 PNG reference image")


def _turn_payload(turn: ConversationTurn) -> TurnPayload:
    return TurnPayload(
        id=turn.id,
        role=turn.role,
        text=turn.text,
        timestamp=turn.timestamp,
        route_label=turn.route_label,
        citations=turn.grounding.sources() if turn.grounding else [],
    )


# ------------------------------------------------------------
# 📝 Job materials
# ------------------------------------------------------------
@app.post("/materials", response_model=MaterialsPayload)
def materials(req: MaterialsRequest, assistant: RecruitmentAssistant = Depends(get_assistant)):
    try:
        out = assistant.generate_recruitment_materials(req.notes)
    except RecruitAIError as e:
        logger.warning("Job materials failed: %s", e)
        raise _http_error(e)
    return MaterialsPayload(job_description=out.job_description, interview_questions=out.interview_questions)


# ------------------------------------------------------------
# 💬 Smart chat
# ------------------------------------------------------------
@app.post("/chat", response_model=ChatPayload)
def chat(req: ChatRequest, assistant: RecruitmentAssistant = Depends(get_assistant)):
    if not req.message.strip():
        # rejected before a session is stored
        raise HTTPException(status_code=400, detail="Message must not be empty.")
    session_id, session = _get_or_create_session(req.session_id, assistant)
    location = LatLng(req.location.latitude, req.location.longitude) if req.location else None
    # held across the turn and its failure notice so overlapping requests queue up
    with session.lock:
        try:
            reply = assistant.smart_chat(req.message, session, location)
        except PreconditionError as e:
            raise _http_error(e)
        except RecruitAIError as e:
            # conversational context: degrade to a retry prompt instead of an error status
            logger.warning("Chat turn failed for session %s: %s", session_id, e)
            session.record_failure(CHAT_FAILURE_TEXT)
            reply = None

    if reply is None:
        return ChatPayload(
            session_id=session_id,
            text=CHAT_FAILURE_TEXT,
            reasoning="",
            answer=CHAT_FAILURE_TEXT,
            route_label=None,
            category=None,
            citations=[],
            ok=False,
        )

    split = extract_reasoning(reply.text)
    return ChatPayload(
        session_id=session_id,
        text=reply.text,
        reasoning=split.reasoning,
        answer=split.answer,
        route_label=reply.route_label,
        category=reply.category,
        citations=reply.citations,
    )


@app.get("/chat/{session_id}", response_model=HistoryPayload)
def chat_history(session_id: str):
    session = SESSIONS.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown chat session: {session_id}")
    return HistoryPayload(session_id=session_id, turns=[_turn_payload(t) for t in session.log])


@app.delete("/chat/{session_id}")
def reset_chat(session_id: str):
    if SESSIONS.pop(session_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown chat session: {session_id}")
    return {"ok": True}


# ------------------------------------------------------------
# 🔎 Job search
# ------------------------------------------------------------
@app.post("/jobs/search", response_model=JobSearchPayload)
def jobs_search(req: JobSearchRequest, assistant: RecruitmentAssistant = Depends(get_assistant)):
    try:
        out = assistant.search_jobs(req.role, req.location)
    except RecruitAIError as e:
        logger.warning("Job search failed: %s", e)
        raise _http_error(e)
    return JobSearchPayload(
        text=out.text,
        citations=out.citations,
        search_queries=list(out.grounding.search_queries) if out.grounding else [],
    )


# ------------------------------------------------------------
# 🎬 Media lab
# ------------------------------------------------------------
@app.post("/media/image/analyze", response_model=AnalyzePayload)
def image_analyze(req: AnalyzeRequest, assistant: RecruitmentAssistant = Depends(get_assistant)):
    data = _decode_b64(req.data, "data")
    try:
        return AnalyzePayload(text=assistant.analyze_image(data, req.mime_type, req.question))
    except RecruitAIError as e:
        logger.warning("Image analysis failed: %s", e)
        raise _http_error(e)


@app.post("/media/video/analyze", response_model=AnalyzePayload)
def video_analyze(req: AnalyzeRequest, assistant: RecruitmentAssistant = Depends(get_assistant)):
    data = _decode_b64(req.data, "data")
    try:
        return AnalyzePayload(text=assistant.analyze_video(data, req.mime_type, req.question))
    except RecruitAIError as e:
        logger.warning("Video analysis failed: %s", e)
        raise _http_error(e)


@app.post("/media/video")
def video_generate(req: VideoRequest, assistant: RecruitmentAssistant = Depends(get_assistant)):
    image = MediaPart(data=_decode_b64(req.image, "image"), mime_type="image/png") if req.image else None
    try:
        asset = assistant.generate_video(req.prompt, req.aspect_ratio, image=image)
    except RecruitAIError as e:
        logger.warning("Video generation failed: %s", e)
        raise _http_error(e)
    return Response(content=asset.data, media_type=asset.mime_type)


# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.app_name,
    }


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}


@app.get("/")
def hello():
    return {"message": f"{settings.app_name} service running."}
