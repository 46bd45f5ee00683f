"""Decoding of answering-service bodies.

The service replies either with a list whose first element carries ``output``
or with a single object carrying ``output``. Anything else decodes to the
``MISSING`` shape, which callers turn into the fallback reply (or a failure in
strict mode).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

FALLBACK_ANSWER = "I received your message, but couldn't generate a proper response."


class AnswerShape(str, Enum):
    LIST = "list"
    OBJECT = "object"
    MISSING = "missing"


class AnswerBody(BaseModel):
    """One answer object; extra fields from the service are ignored."""

    output: str = Field(..., min_length=1)


@dataclass(frozen=True)
class DecodedAnswer:
    shape: AnswerShape
    output: str | None = None

    @property
    def has_output(self) -> bool:
        return self.shape is not AnswerShape.MISSING

    def text(self, fallback: str = FALLBACK_ANSWER) -> str:
        return self.output if self.output is not None else fallback


def _validate(candidate: Any) -> str | None:
    if not isinstance(candidate, dict):
        return None
    try:
        return AnswerBody.model_validate(candidate).output
    except ValidationError:
        return None


def decode_answer(body: Any) -> DecodedAnswer:
    """Classify an answer body by shape and extract its output."""
    if isinstance(body, list):
        output = _validate(body[0]) if body else None
        if output is not None:
            return DecodedAnswer(AnswerShape.LIST, output)
    elif isinstance(body, dict):
        output = _validate(body)
        if output is not None:
            return DecodedAnswer(AnswerShape.OBJECT, output)
    return DecodedAnswer(AnswerShape.MISSING)
