"""Async HTTP clients for the OpenAI chat API and a local Ollama server."""

import logging
from typing import Any

import httpx

from petcli.errors import AIError, AuthError, NetworkError, RateLimitError
from petcli.history import Message
from petcli.session import system_prompt, to_chat_messages, to_transcript

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class PetClient:
    """Wraps httpx.AsyncClient: one POST per chat turn, failures mapped to AIError subclasses."""

    endpoint = ""
    local = False

    def __init__(
        self,
        base_url: str,
        model: str,
        pet_name: str = "Whiskers",
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.system_prompt = system_prompt(pet_name, local=self.local)

        headers = {}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, headers=headers, transport=transport
        )

    async def close(self) -> None:
        await self._client.aclose()

    def build_payload(self, prompt: str, context: list[Message]) -> dict[str, Any]:
        raise NotImplementedError

    def parse_reply(self, data: dict[str, Any]) -> str:
        raise NotImplementedError

    async def send(self, prompt: str, context: list[Message]) -> str:
        """POST the prompt with recent context and return the reply text."""
        payload = self.build_payload(prompt, context)
        logger.info("POST %s%s (model=%s, %d context messages)", self.base_url, self.endpoint, self.model, len(context))
        try:
            resp = await self._client.post(self.endpoint, json=payload)
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException as e:
            raise NetworkError(
                "Request timed out. The service may be slow or unreachable. Try again in a moment."
            ) from e
        except (httpx.NetworkError, httpx.RemoteProtocolError) as e:
            raise NetworkError(f"Could not reach {self.base_url}. Check your connection.") from e
        except httpx.HTTPStatusError as e:
            raise _status_error(e.response) from e
        except ValueError as e:
            raise AIError("The server sent back a response I couldn't read.") from e

        reply = self.parse_reply(data)
        if not reply:
            raise AIError("The server sent back an empty reply.")
        return reply.strip()


class OpenAIClient(PetClient):
    """OpenAI-compatible /v1/chat/completions."""

    endpoint = "/v1/chat/completions"

    def build_payload(self, prompt: str, context: list[Message]) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": to_chat_messages(self.system_prompt, context, prompt),
        }

    def parse_reply(self, data: dict[str, Any]) -> str:
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise AIError("The server reply had no message in it.") from e


class OllamaClient(PetClient):
    """Ollama /api/generate with streaming disabled."""

    endpoint = "/api/generate"
    local = True

    def build_payload(self, prompt: str, context: list[Message]) -> dict[str, Any]:
        return {
            "model": self.model,
            "prompt": to_transcript(self.system_prompt, context, prompt),
            "stream": False,
        }

    def parse_reply(self, data: dict[str, Any]) -> str:
        reply = data.get("response") if isinstance(data, dict) else None
        if not isinstance(reply, str):
            raise AIError("The server reply had no response text in it.")
        return reply


def _status_error(response: httpx.Response) -> AIError:
    code = response.status_code
    if code in (401, 403):
        return AuthError(
            f"Authentication failed (HTTP {code}). Check your OPENAI_API_KEY.", status_code=code
        )
    if code == 429:
        return RateLimitError(
            "Rate limited (HTTP 429). Give me a moment before the next message.", status_code=code
        )
    if code >= 500:
        return AIError(f"Server error (HTTP {code}). The AI service may be having trouble.", status_code=code)
    return AIError(f"Server returned HTTP {code}: {response.text[:200]}", status_code=code)
