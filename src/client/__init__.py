"""Client side of the answering service.

Responsibilities:
    - Environment-driven configuration for endpoints, user and storage
    - HTTP calls to the chat, document chat, upload and delete endpoints
    - Decoding answer bodies into a tagged result with a fallback branch
"""

from src.client.answer_client import AnswerServiceClient
from src.client.answers import FALLBACK_ANSWER, AnswerShape, DecodedAnswer, decode_answer
from src.client.config import ClientConfig, get_client_config

__all__ = [
    "FALLBACK_ANSWER",
    "AnswerServiceClient",
    "AnswerShape",
    "ClientConfig",
    "DecodedAnswer",
    "decode_answer",
    "get_client_config",
]
