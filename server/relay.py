import logging

import requests

from server.config import ProviderConfig
from server.models import ChatRequest, ChatResponse
from server.providers import ProviderClient, client_for, error_message, render_task_context

logger = logging.getLogger(__name__)

EMPTY_MESSAGE_REPLY = "Message is empty"
MISCONFIGURED_REPLY = "Server misconfigured: set OPENAI_API_KEY or GEMINI_API_KEY env var"
NO_REPLY_PLACEHOLDER = "Could not extract response"


class RelayError(Exception):
    """A failure that still has to reach the caller as {"reply": ...}."""

    def __init__(self, status_code: int, reply: str) -> None:
        super().__init__(reply)
        self.status_code = status_code
        self.reply = reply


class EmptyMessage(RelayError):
    def __init__(self) -> None:
        super().__init__(400, EMPTY_MESSAGE_REPLY)


class Misconfigured(RelayError):
    def __init__(self) -> None:
        super().__init__(500, MISCONFIGURED_REPLY)


class UpstreamRejected(RelayError):
    def __init__(self, status_code: int, message: str | None) -> None:
        super().__init__(status_code, f"API Error: {message or 'Unknown error'}")


class UpstreamUnreachable(RelayError):
    def __init__(self, provider_name: str) -> None:
        super().__init__(500, f"Error connecting to {provider_name} API")


class Relay:
    def __init__(self, config: ProviderConfig | None) -> None:
        self.client: ProviderClient | None = client_for(config) if config else None

    @property
    def provider_name(self) -> str | None:
        return self.client.name if self.client else None

    def chat(self, request: ChatRequest) -> ChatResponse:
        message = request.message or ""
        if not message.strip():
            raise EmptyMessage()
        if self.client is None:
            raise Misconfigured()

        logger.info(
            "Chat request for %s: message=%r tasks=%d",
            self.client.name, message, len(request.tasks),
        )
        upstream = self.client.build_request(message, render_task_context(request.tasks))

        try:
            response = requests.post(
                upstream.url,
                headers=upstream.headers,
                params=upstream.params or None,
                json=upstream.payload,
            )
            data = _parse_body(response)
        except requests.RequestException as e:
            logger.warning("Could not reach %s: %s", self.client.name, type(e).__name__)
            raise UpstreamUnreachable(self.client.name) from e
        except Exception as e:
            logger.exception("Unexpected error talking to %s", self.client.name)
            raise UpstreamUnreachable(self.client.name) from e

        logger.debug("%s response: %s", self.client.name, data)

        if not 200 <= response.status_code < 300:
            logger.warning("%s returned %s: %s", self.client.name, response.status_code, data)
            raise UpstreamRejected(response.status_code, error_message(data))

        reply = self.client.extract_reply(data)
        if reply is None:
            logger.warning("No reply text in %s response", self.client.name)
            reply = NO_REPLY_PLACEHOLDER
        return ChatResponse(reply=reply)


def _parse_body(response: requests.Response):
    try:
        return response.json()
    except ValueError:
        return {}
