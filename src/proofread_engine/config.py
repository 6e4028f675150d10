"""LLM endpoint configuration loaded from ``PROOFREAD_ENGINE_*`` variables."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from typing import Callable, Dict, Mapping, Optional, TypeVar

ENV_PREFIX = "PROOFREAD_ENGINE_"

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.3
DEFAULT_TIMEOUT_SECONDS = 60.0

T = TypeVar("T")


class ConfigurationError(ValueError):
    """Raised when a configuration value is missing or malformed."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


@dataclass(frozen=True, slots=True)
class LLMApiConfiguration:
    endpoint: str = DEFAULT_ENDPOINT
    api_key: str = ""
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "LLMApiConfiguration":
        """Read overrides from the environment, falling back to defaults."""

        env = os.environ if environ is None else environ

        def read(name: str, parse: Callable[[str], T], default: T) -> T:
            raw = env.get(f"{ENV_PREFIX}{name}")
            if raw is None or raw.strip() == "":
                return default
            try:
                return parse(raw.strip())
            except ValueError as exc:
                raise ConfigurationError(
                    f"{ENV_PREFIX}{name} has invalid value {raw!r}",
                    field=name.lower(),
                ) from exc

        return cls(
            endpoint=read("API_ENDPOINT", str, DEFAULT_ENDPOINT),
            api_key=read("API_KEY", str, ""),
            model=read("MODEL", str, DEFAULT_MODEL),
            max_tokens=read("MAX_TOKENS", int, DEFAULT_MAX_TOKENS),
            temperature=read("TEMPERATURE", float, DEFAULT_TEMPERATURE),
            timeout_seconds=read("TIMEOUT", float, DEFAULT_TIMEOUT_SECONDS),
        )

    def with_overrides(self, **changes: object) -> "LLMApiConfiguration":
        return replace(self, **changes)

    def validate(self) -> "LLMApiConfiguration":
        if not self.endpoint.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Endpoint must be an http(s) URL, got {self.endpoint!r}",
                field="endpoint",
            )
        if not self.model:
            raise ConfigurationError("Model cannot be empty", field="model")
        if self.max_tokens <= 0:
            raise ConfigurationError("max_tokens must be positive", field="max_tokens")
        if not 0 <= self.temperature <= 2:
            raise ConfigurationError(
                "temperature must be between 0 and 2", field="temperature"
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                "timeout_seconds must be positive", field="timeout_seconds"
            )
        return self

    def redacted(self) -> Dict[str, object]:
        data = asdict(self)
        key = self.api_key
        data["api_key"] = f"{key[:3]}***" if len(key) > 6 else ("***" if key else "")
        return data


__all__ = ["ConfigurationError", "LLMApiConfiguration", "ENV_PREFIX"]
