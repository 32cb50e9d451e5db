# Generator package

# Makes generate/ importable and exposes key interfaces.

from .generator import RecruitmentAssistant, build_assistant
from .materials import JobMaterials
from .reasoning import extract_reasoning
from .session import ChatSession
from .types import ChatResponse, ConversationLog, ConversationTurn, JobSearchResult, VideoAsset
from .clients.echo_dev_client import EchoDevClient

__all__ = [
    "RecruitmentAssistant",
    "build_assistant",
    "JobMaterials",
    "extract_reasoning",
    "ChatSession",
    "ChatResponse",
    "ConversationLog",
    "ConversationTurn",
    "JobSearchResult",
    "VideoAsset",
    "EchoDevClient",
]
