# listing_critic/config.py
"""
Settings loader for listing-critic.

Goals
-----
- One validated `Settings` object built from the environment.
- Defaults that work offline (no API key -> regex-only extraction).
- Minimal environment-variable surface for CLI / server convenience.

Environment variables
---------------------
- OPENAI_API_KEY            -> Settings.openai_api_key
- LISTCRIT_LLM_MODEL        -> Settings.llm_model          (default "gpt-4o-mini")
- LISTCRIT_LLM_TIMEOUT_S    -> Settings.llm_timeout_s      (float)
- LISTCRIT_FETCH_DELAY_S    -> Settings.fetch_delay_s      (float)
- LISTCRIT_FETCH_TIMEOUT_S  -> Settings.fetch_timeout_s    (float)
- LISTCRIT_USER_AGENT       -> Settings.user_agent
- LISTCRIT_AREA_AVERAGE_URL -> Settings.area_average_url
- LISTCRIT_API_HOST         -> Settings.api_host           (default "127.0.0.1")
- LISTCRIT_API_PORT         -> Settings.api_port           (int, default 5000)
- LISTCRIT_LOG_LEVEL        -> Settings.log_level
- LISTCRIT_LOG_FILE         -> Settings.log_file
- LISTCRIT_DEBUG            -> Settings.debug              ("1", "true", "yes", "on")
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from listing_critic.errors import ConfigurationError
from listing_critic.schemas.models import FetchPolicy

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime configuration for the pipeline, server and CLI."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    openai_api_key: str | None = Field(None, repr=False, description="API key for the LLM; None disables LLM calls.")
    llm_model: str = Field("gpt-4o-mini", description="Generative model used for field extraction and verdicts.")
    llm_timeout_s: float = Field(30.0, gt=0)

    fetch_delay_s: float = Field(1.0, ge=0, description="Politeness delay before each listing fetch.")
    fetch_timeout_s: float = Field(20.0, gt=0)
    user_agent: str | None = Field(None, description="Override for the browser-like User-Agent.")

    area_average_url: str = Field(
        "https://housemetric.co.uk/results",
        description="Postcode results page used for the area-average lookup.",
    )

    api_host: str = Field("127.0.0.1", description="Bind address for the JSON API.")
    api_port: int = Field(5000, gt=0, lt=65536)

    log_level: str = Field("INFO")
    log_file: str | None = None
    debug: bool = False

    @property
    def llm_enabled(self) -> bool:
        return bool(self.openai_api_key)

    def fetch_policy(self) -> FetchPolicy:
        data: dict[str, Any] = {"delay_s": self.fetch_delay_s, "timeout_s": self.fetch_timeout_s}
        if self.user_agent:
            data["user_agent"] = self.user_agent
        return FetchPolicy(**data)


@dataclass(frozen=True)
class SettingsLoader:
    """
    Environment-backed settings loader.

    Only variables that are present override the defaults; empty strings are
    treated as unset.
    """

    env_prefix: str = "LISTCRIT_"

    def load(self, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}

        key = env.get("OPENAI_API_KEY", "").strip()
        if key:
            data["openai_api_key"] = key

        for field in ("llm_model", "llm_timeout_s", "fetch_delay_s", "fetch_timeout_s", "user_agent", "area_average_url", "api_host", "api_port", "log_level", "log_file"):
            raw = env.get(f"{self.env_prefix}{field.upper()}", "").strip()
            if raw:
                data[field] = raw

        debug = env.get(f"{self.env_prefix}DEBUG", "").strip().lower()
        if debug:
            data["debug"] = debug in _TRUTHY

        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {self.env_prefix}* settings: {e}") from e


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Convenience wrapper around `SettingsLoader().load()`."""
    return SettingsLoader().load(environ)


__all__ = ["Settings", "SettingsLoader", "load_settings"]
