"""Message-level export formats offered next to each chat bubble."""

import json

from src.models.schemas import Message


def to_text(message: Message) -> str:
    return message.content


def to_json(message: Message) -> str:
    return json.dumps({"role": message.role.value, "content": message.content}, ensure_ascii=False)


def to_markdown(message: Message) -> str:
    return f"**{message.role.value}:** {message.content}"


EXPORTERS = {
    "text": to_text,
    "json": to_json,
    "markdown": to_markdown,
}
