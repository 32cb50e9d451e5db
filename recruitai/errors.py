# Exception types shared by the routing and generate layers.
# Clients translate SDK / transport failures into these; the app maps them to HTTP codes.


class RecruitAIError(Exception):
    """Base class for every failure surfaced by the assistant."""


class ConfigurationError(RecruitAIError):
    """Missing or invalid process configuration (e.g. no API key)."""


class GatewayError(RecruitAIError):
    """The model gateway was unreachable, timed out or rejected the call."""


class MalformedResponseError(RecruitAIError):
    """The gateway answered, but not in the expected shape."""


class PreconditionError(RecruitAIError):
    """Local input check failed; no gateway call was made."""


class VideoTimeoutError(RecruitAIError):
    """Video generation did not finish within the caller's timeout."""


class OperationCancelledError(RecruitAIError):
    """The caller cancelled a long-running operation."""
