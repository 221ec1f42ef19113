"""
gemini.py — Generative-AI Client Handle
========================================
One GeminiClient is built at startup from AppConfig and handed explicitly
to the narrator and the recognizer.  The SDK client is created lazily on
the first request, so an app without an API key starts fine and only the
AI features report themselves unavailable.

Deadlines:
  Every request carries its own deadline.  The SDK client gets an HTTP
  timeout, and each call also runs on a thread of its own that the
  caller stops waiting for after `timeout` seconds.  A stalled request
  never occupies a worker that a later request would queue behind.

Tests pass `client=` with any object exposing
`models.generate_content(model=, contents=, config=)`.
"""

import logging
import threading
from typing import Any, Callable, List, Optional

from google import genai
from google.genai import types

from config import AppConfig
from services.errors import ServiceError, ServiceUnavailable, ServiceTimeout

logger = logging.getLogger(__name__)


class GeminiClient:

    def __init__(self, config: AppConfig, client: Optional[Any] = None):
        self.config  = config
        self._client = client
        self._init_lock = threading.Lock()

    @property
    def available(self) -> bool:
        return self._client is not None or self.config.ai_enabled

    @property
    def default_timeout(self) -> float:
        return max(self.config.narration_timeout, self.config.recognition_timeout)

    def _sdk(self):
        with self._init_lock:
            if self._client is None:
                if not self.config.ai_enabled:
                    raise ServiceUnavailable("AI features are disabled: no Gemini API key configured")
                try:
                    self._client = genai.Client(
                        api_key=self.config.api_key,
                        # HttpOptions.timeout is in milliseconds
                        http_options=types.HttpOptions(timeout=int(self.default_timeout * 1000)),
                    )
                except Exception as exc:
                    logger.error("Error initializing Gemini client: %s", exc)
                    raise ServiceError(f"AI initialisation failed: {exc}") from exc
                logger.info("Gemini client initialised (text=%s, vision=%s)",
                            self.config.text_model, self.config.vision_model)
            return self._client

    def generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            max_output_tokens=self.config.max_output_tokens,
            temperature=self.config.temperature,
            top_p=self.config.top_p,
            top_k=self.config.top_k,
        )

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def generate_text(self, prompt: str, timeout: Optional[float] = None) -> str:
        return self._generate(self.config.text_model, prompt, timeout)

    def generate_from_image(self, prompt: str, image: bytes, mime_type: str = "image/jpeg",
                            timeout: Optional[float] = None) -> str:
        contents = [prompt, types.Part.from_bytes(data=image, mime_type=mime_type)]
        return self._generate(self.config.vision_model, contents, timeout)

    def _generate(self, model: str, contents, timeout: Optional[float] = None) -> str:
        sdk = self._sdk()
        timeout = self.default_timeout if timeout is None else timeout

        def request():
            return sdk.models.generate_content(
                model=model,
                contents=contents,
                config=self.generation_config(),
            )

        try:
            response = call_with_deadline(request, timeout, name=f"gemini-{model}")
        except ServiceTimeout:
            logger.warning("Gemini request to %s timed out after %gs", model, timeout)
            raise
        except Exception as exc:
            logger.error("Gemini request to %s failed: %s", model, exc)
            raise ServiceError(f"AI request failed: {exc}") from exc

        text = getattr(response, "text", None)
        if not text or not isinstance(text, str):
            raise ServiceError("Empty response from AI")
        logger.debug("Gemini %s replied with %d characters", model, len(text))
        return text


def call_with_deadline(fn: Callable[[], Any], timeout: float, name: str = "gemini") -> Any:
    """
    Run `fn` on a daemon thread of its own and wait at most `timeout`
    seconds.  Raises ServiceTimeout when the deadline passes; the thread
    is abandoned and finishes (or hits the HTTP timeout) on its own.
    """
    outcome = {}
    done = threading.Event()

    def run() -> None:
        try:
            outcome["value"] = fn()
        except BaseException as exc:
            outcome["error"] = exc
        finally:
            done.set()

    threading.Thread(target=run, name=name, daemon=True).start()
    if not done.wait(timeout):
        raise ServiceTimeout(f"AI request timed out after {timeout:g} seconds")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


def strip_code_fences(text: str) -> str:
    """Drop a leading ```lang and trailing ``` if the model wrapped its reply."""
    lines: List[str] = text.strip().splitlines()
    if lines and lines[0].startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()
