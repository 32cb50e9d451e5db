# RecruitAI: recruitment assistant backed by the Gemini API.

__version__ = "0.3.0"
