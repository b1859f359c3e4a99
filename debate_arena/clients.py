"""
clients.py

Thin wrappers around the chat backends:
- OpenAI-compatible APIs (OpenAI, Grok via xAI, OpenRouter, local Ollama)
- Gemini

Every backend offers the same two calls:
- invoke(messages, json_mode=False) -> full text
- stream(messages) -> iterator of text chunks

Messages are plain {"role": system/user/assistant, "content": ...} dicts.
SDK errors come out as BackendInvocationError so the scheduler sees one
failure type no matter which provider is behind it.
"""

import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Protocol, Sequence

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from openai import OpenAI, OpenAIError

from .config import PROVIDER_BASE_URLS, SUPPORTED_PROVIDERS, require_api_key
from .errors import BackendInvocationError, ConfigurationError
from .history import INITIATOR, RESPONDER

logger = logging.getLogger(__name__)

ChatMessage = Dict[str, str]

# How presentation roles land on a chat API
CHAT_ROLES = {
    INITIATOR: "user",
    RESPONDER: "assistant",
}


class ModelBackend(Protocol):
    def invoke(self, messages: Sequence[ChatMessage], json_mode: bool = False) -> str: ...

    def stream(self, messages: Sequence[ChatMessage]) -> Iterator[str]: ...


def to_chat_messages(instruction: str, view: Iterable[Dict[str, str]]) -> List[ChatMessage]:
    """
    System instruction followed by the presented turns in chat roles.
    """
    messages: List[ChatMessage] = [{"role": "system", "content": instruction}]
    for turn in view:
        messages.append({"role": CHAT_ROLES[turn["role"]], "content": turn["text"]})
    return messages


# -------------------------------
# OpenAI-compatible backend
# -------------------------------

class OpenAIChatBackend:
    """
    Chat completions through the openai SDK.

    Grok, OpenRouter and Ollama are reached by swapping base_url.
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        temperature: float = 0.6,
        max_tokens: int = 600,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = client or OpenAI(api_key=api_key, base_url=base_url)

    def invoke(self, messages: Sequence[ChatMessage], json_mode: bool = False) -> str:
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=list(messages),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                **kwargs,
            )
        except OpenAIError as exc:
            raise BackendInvocationError(f"{self.model} invoke failed: {exc}") from exc

        content = resp.choices[0].message.content if resp.choices else None
        return (content or "").strip()

    def stream(self, messages: Sequence[ChatMessage]) -> Iterator[str]:
        try:
            chunks = self.client.chat.completions.create(
                model=self.model,
                messages=list(messages),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                stream=True,
            )
            for chunk in chunks:
                # Some providers send keep-alive chunks with no choices
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    yield text
        except OpenAIError as exc:
            raise BackendInvocationError(f"{self.model} stream failed: {exc}") from exc


# -------------------------------
# Gemini backend
# -------------------------------

def to_gemini_contents(messages: Sequence[ChatMessage]):
    """
    Split out the system text and merge consecutive same-role turns,
    since Gemini only knows "user" and "model".
    """
    system_parts: List[str] = []
    contents: List[Dict] = []
    for message in messages:
        if message["role"] == "system":
            system_parts.append(message["content"])
            continue
        role = "model" if message["role"] == "assistant" else "user"
        if contents and contents[-1]["role"] == role:
            contents[-1]["parts"].append(message["content"])
        else:
            contents.append({"role": role, "parts": [message["content"]]})
    return "\n\n".join(system_parts) or None, contents


class GeminiBackend:
    """
    Gemini through google-generativeai.

    The model object is built per call because the system instruction
    changes with every speech.
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        temperature: float = 0.3,
        max_tokens: int = 400,
    ):
        genai.configure(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _generation_config(self, json_mode: bool) -> Dict:
        config = {
            "temperature": self.temperature,
            "max_output_tokens": self.max_tokens,
        }
        if json_mode:
            config["response_mime_type"] = "application/json"
        return config

    def invoke(self, messages: Sequence[ChatMessage], json_mode: bool = False) -> str:
        system, contents = to_gemini_contents(messages)
        try:
            model = genai.GenerativeModel(self.model, system_instruction=system)
            response = model.generate_content(
                contents,
                generation_config=self._generation_config(json_mode),
            )
            return (response.text or "").strip()
        except (google_exceptions.GoogleAPIError, ValueError) as exc:
            # response.text raises ValueError when the reply was blocked
            raise BackendInvocationError(f"{self.model} invoke failed: {exc}") from exc

    def stream(self, messages: Sequence[ChatMessage]) -> Iterator[str]:
        system, contents = to_gemini_contents(messages)
        try:
            model = genai.GenerativeModel(self.model, system_instruction=system)
            response = model.generate_content(
                contents,
                generation_config=self._generation_config(False),
                stream=True,
            )
            for chunk in response:
                if chunk.parts:
                    yield chunk.text
        except (google_exceptions.GoogleAPIError, ValueError) as exc:
            # .parts raises ValueError when a chunk was blocked
            raise BackendInvocationError(f"{self.model} stream failed: {exc}") from exc


# -------------------------------
# Callable backend (tests, scripting)
# -------------------------------

class CallableBackend:
    """Wraps plain callables as a backend."""

    def __init__(
        self,
        invoke_fn: Optional[Callable[[Sequence[ChatMessage], bool], str]] = None,
        stream_fn: Optional[Callable[[Sequence[ChatMessage]], Iterable[str]]] = None,
    ):
        self._invoke_fn = invoke_fn
        self._stream_fn = stream_fn

    def invoke(self, messages: Sequence[ChatMessage], json_mode: bool = False) -> str:
        if self._invoke_fn is None:
            raise BackendInvocationError("This backend has no invoke function.")
        return self._invoke_fn(messages, json_mode)

    def stream(self, messages: Sequence[ChatMessage]) -> Iterator[str]:
        if self._stream_fn is None:
            raise BackendInvocationError("This backend has no stream function.")
        yield from self._stream_fn(messages)


# -------------------------------
# Factory
# -------------------------------

def make_backend(
    provider: str,
    model: str,
    temperature: float,
    max_tokens: int,
) -> ModelBackend:
    """
    Build a backend for a provider name from config.

    Raises ConfigurationError for unknown providers or missing keys.
    """
    provider = (provider or "").strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            f"Unknown provider {provider!r}. Use one of: {', '.join(SUPPORTED_PROVIDERS)}."
        )

    api_key = require_api_key(provider)
    logger.debug("Building %s backend for model %s", provider, model)

    if provider == "gemini":
        return GeminiBackend(model, api_key, temperature=temperature, max_tokens=max_tokens)

    return OpenAIChatBackend(
        model,
        api_key,
        base_url=PROVIDER_BASE_URLS[provider],
        temperature=temperature,
        max_tokens=max_tokens,
    )
