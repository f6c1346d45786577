"""Commentary about the outcome of a turn, with fixed fallback phrases."""

from __future__ import annotations

import logging
import os
from typing import Any, ClassVar, Protocol

import aiohttp

from .config import DEFAULT_SYSTEM_INSTRUCTION, CommentaryConfig
from .gestures import Gesture
from .models.game import Winner

logger = logging.getLogger("gesturock.commentary")

FALLBACK_COMMENTARY: dict[Winner, str] = {
    Winner.USER: "¡Ganaste!",
    Winner.CPU: "La máquina gana.",
    Winner.DRAW: "Empate.",
}

WINNER_LABELS: dict[Winner, str] = {
    Winner.USER: "Humano",
    Winner.CPU: "CPU",
    Winner.DRAW: "Empate",
}

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


class CommentaryError(RuntimeError):
    """The commentary backend could not produce a text."""


class CommentaryBackend(Protocol):
    async def describe_outcome(self, user_move: Gesture, cpu_move: Gesture, winner: Winner) -> str: ...


def fallback_commentary(winner: Winner) -> str:
    return FALLBACK_COMMENTARY[winner]


def build_prompt(user_move: Gesture, cpu_move: Gesture, winner: Winner) -> str:
    return "\n".join(
        [
            "Juego: Piedra, Papel, Tijera.",
            f"Humano: {user_move.label}",
            f"CPU: {cpu_move.label}",
            f"Ganador: {WINNER_LABELS[winner]}",
        ]
    )


def get_api_key(config: CommentaryConfig) -> str | None:
    """Find the API key, environment variables first, then the config."""
    for name in API_KEY_ENV_VARS:
        if value := os.getenv(name, "").strip():
            return value
    return config.api_key or None


class GeminiCommentator:
    """Commentary backend using the Gemini `generateContent` REST endpoint."""

    default_base_url: ClassVar[str] = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION,
        temperature: float = 1.0,
        timeout: float = 10.0,
        base_url: str | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.system_instruction = system_instruction
        self.temperature = temperature
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config: CommentaryConfig) -> GeminiCommentator | None:
        """Build a commentator, or return None if commentary is disabled or no API key is available."""
        if not config.enabled:
            logger.info("Commentary disabled by configuration")
            return None
        if not (api_key := get_api_key(config)):
            logger.info(f"No API key found (tried {', '.join(API_KEY_ENV_VARS)} and config), commentary disabled")
            return None
        return cls(
            api_key=api_key,
            model=config.model,
            system_instruction=config.system_instruction,
            temperature=config.temperature,
            timeout=config.timeout,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self.temperature},
        }

    @staticmethod
    def extract_text(data: dict[str, Any]) -> str:
        """Get the generated text from a `generateContent` response body."""
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            raise CommentaryError(f"Unexpected response format: {exc!r}") from exc
        if not isinstance(parts, list):
            raise CommentaryError(f"Unexpected response format: parts is {type(parts).__name__}")
        texts = [part.get("text") for part in parts if isinstance(part, dict)]
        text = "".join(value for value in texts if isinstance(value, str)).strip()
        if not text:
            raise CommentaryError("Empty commentary")
        return text

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def describe_outcome(self, user_move: Gesture, cpu_move: Gesture, winner: Winner) -> str:
        """Ask Gemini for a one line comment about the turn.

        Raises:
            CommentaryError: If the request fails or the response holds no text
        """
        session = await self.get_session()
        payload = self.build_payload(build_prompt(user_move, cpu_move, winner))
        try:
            async with session.post(
                self.url, json=payload, headers={"x-goog-api-key": self.api_key}, timeout=self.timeout
            ) as resp:
                if resp.status != 200:
                    raise CommentaryError(f"Commentary request failed with status {resp.status}: {await resp.text()}")
                data = await resp.json()
        except aiohttp.ClientError as exc:
            raise CommentaryError(f"Commentary request failed: {exc}") from exc
        except ValueError as exc:
            # Body announced as JSON but not decodable
            raise CommentaryError(f"Invalid commentary response: {exc}") from exc
        return self.extract_text(data)

    async def close(self) -> None:
        """Close the HTTP session if it was created by this commentator."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> GeminiCommentator:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        await self.close()
