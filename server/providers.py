import json
from dataclasses import dataclass, field as _field

from server.config import Provider, ProviderConfig
from server.models import TaskRecord

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_MODEL = "gpt-3.5-turbo"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
GEMINI_TEMPERATURE = 0.7
GEMINI_MAX_OUTPUT_TOKENS = 800

SYSTEM_PROMPT = "You are a helpful assistant."


@dataclass
class UpstreamRequest:
    url: str
    payload: dict
    headers: dict[str, str] = _field(default_factory=dict)
    params: dict[str, str] = _field(default_factory=dict)


def render_task_context(tasks: list[TaskRecord]) -> str:
    if not tasks:
        return ""
    serialized = json.dumps([t.model_dump(exclude_unset=True) for t in tasks], indent=2)
    return (
        f"The user has the following tasks:\n{serialized}\n\n"
        "Please consider these tasks when responding."
    )


def _dig(data, *path):
    """Follow keys and indexes into parsed JSON, returning None on any miss."""
    node = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or not -len(node) <= step < len(node):
                return None
        elif not isinstance(node, dict) or step not in node:
            return None
        node = node[step]
    return node


def error_message(data) -> str | None:
    message = _dig(data, "error", "message")
    return message if isinstance(message, str) and message else None


class ProviderClient:
    """Builds one provider's request and pulls the reply text out of its response."""

    provider: Provider

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    @property
    def name(self) -> str:
        return self.provider.value

    def build_request(self, message: str, task_context: str) -> UpstreamRequest:
        raise NotImplementedError

    def reply_path(self) -> tuple:
        raise NotImplementedError

    def extract_reply(self, data) -> str | None:
        reply = _dig(data, *self.reply_path())
        return reply if isinstance(reply, str) and reply else None


class OpenAIClient(ProviderClient):
    provider = Provider.OPENAI

    def build_request(self, message: str, task_context: str) -> UpstreamRequest:
        system = f"{SYSTEM_PROMPT} {task_context}" if task_context else SYSTEM_PROMPT
        return UpstreamRequest(
            url=OPENAI_URL,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            payload={
                "model": OPENAI_MODEL,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": message},
                ],
            },
        )

    def reply_path(self) -> tuple:
        return ("choices", 0, "message", "content")


class GeminiClient(ProviderClient):
    provider = Provider.GEMINI

    def build_request(self, message: str, task_context: str) -> UpstreamRequest:
        text = f"User message: {message}"
        if task_context:
            text = f"{task_context}\n\n{text}"
        return UpstreamRequest(
            url=GEMINI_URL,
            headers={"Content-Type": "application/json"},
            params={"key": self.api_key},
            payload={
                "contents": [{"parts": [{"text": text}]}],
                "generationConfig": {
                    "temperature": GEMINI_TEMPERATURE,
                    "maxOutputTokens": GEMINI_MAX_OUTPUT_TOKENS,
                },
            },
        )

    def reply_path(self) -> tuple:
        return ("candidates", 0, "content", "parts", 0, "text")


_CLIENTS = {
    Provider.OPENAI: OpenAIClient,
    Provider.GEMINI: GeminiClient,
}


def client_for(config: ProviderConfig) -> ProviderClient:
    return _CLIENTS[config.provider](config.api_key)
