# listing_critic/core/ai/llm.py
"""
Text-generation model seam.

Purpose
-------
`TextModel` is the one contract the extractors, the critic and the area
average lookup depend on: prompt in, text out. `OpenAITextModel` is the
production implementation on the `openai` SDK. It uses the Responses API when
the client exposes it and chat completions otherwise. No retries:
callers fall back deterministically when a call fails.

Environment
-----------
OPENAI_API_KEY           : required for OpenAITextModel
LISTCRIT_LLM_MODEL       : default "gpt-4o-mini"
LISTCRIT_LLM_TIMEOUT_S   : default "30"
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Literal, Protocol, runtime_checkable

from openai import OpenAI

from listing_critic.config import Settings
from listing_critic.logging_config import preview, redact

logger = logging.getLogger(__name__)

Mode = Literal["responses", "chat_completions"]


@runtime_checkable
class TextModel(Protocol):
    """Anything that turns a prompt into a completion string."""

    def generate(self, prompt: str) -> str: ...


def detect_mode(client: Any) -> Mode:
    """Responses API when the SDK client has it; older SDKs and proxies get chat completions."""
    return "responses" if hasattr(client, "responses") else "chat_completions"


class OpenAITextModel:
    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        timeout_s: float = 30.0,
        mode: Mode | None = None,
        client: Any | None = None,
    ) -> None:
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY not set for OpenAITextModel.")
        self._client = client if client is not None else OpenAI(api_key=api_key, timeout=timeout_s, max_retries=0)
        self._model = model
        self._timeout_s = timeout_s
        self._mode: Mode = mode or detect_mode(self._client)

    @property
    def model(self) -> str:
        return self._model

    @property
    def mode(self) -> Mode:
        return self._mode

    def generate(self, prompt: str) -> str:
        if self._mode == "responses":
            out = self._call_responses_api(prompt)
        else:
            out = self._call_chat_completions(prompt)
        logger.debug("LLM %s output: %s", self._model, redact(preview(out)))
        return out

    # ---------- OpenAI calls ----------
    def _call_responses_api(self, prompt: str) -> str:
        out = self._client.responses.create(
            model=self._model,
            input=[{"role": "user", "content": [{"type": "input_text", "text": prompt}]}],
            timeout=self._timeout_s,
        )
        # Prefer the SDK's convenience property if available
        txt = getattr(out, "output_text", None)
        if isinstance(txt, str) and txt.strip():
            return txt

        for item in getattr(out, "output", None) or []:
            if getattr(item, "type", "") == "message":
                return "".join(c.text for c in item.content if getattr(c, "type", "") == "output_text")
        return ""

    def _call_chat_completions(self, prompt: str) -> str:
        resp = self._client.chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            timeout=self._timeout_s,
        )
        return resp.choices[0].message.content or ""


def build_text_model(settings: Settings) -> TextModel | None:
    """OpenAITextModel when a key is configured, else None (regex-only mode)."""
    if not settings.llm_enabled:
        logger.info("No OPENAI_API_KEY configured; LLM features disabled")
        return None
    return OpenAITextModel(
        api_key=settings.openai_api_key,
        model=settings.llm_model,
        timeout_s=settings.llm_timeout_s,
    )


# ---------- response parsing ----------

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


def parse_json_object(text: Any) -> dict[str, Any]:
    """
    Tolerant JSON-object extractor for model output:
      - Strips Markdown code fences (``` or ```json).
      - If prose surrounds the JSON, decodes the first top-level `{...}` that parses.
      - Anything that is not a JSON object raises ValueError.
    """
    if not isinstance(text, str):
        raise ValueError("Model returned a non-string response.")

    s = text.strip()
    if s.startswith("```"):
        s = _FENCE_OPEN_RE.sub("", s, count=1)
        s = _FENCE_CLOSE_RE.sub("", s, count=1)

    try:
        loaded = json.loads(s)
    except json.JSONDecodeError:
        loaded = None
        decoder = json.JSONDecoder()
        for m in re.finditer(r"\{", s):
            try:
                loaded, _end = decoder.raw_decode(s, m.start())
                break
            except json.JSONDecodeError:
                continue

    if not isinstance(loaded, dict):
        raise ValueError("Expected a JSON object in model output.")
    return loaded


__all__ = ["TextModel", "OpenAITextModel", "build_text_model", "detect_mode", "parse_json_object"]
