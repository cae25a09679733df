"""
langid.config.service – HTTP service, cache and detector settings.

Env vars: PORT, HOST, BODY_LIMIT, CACHE_MAX, CACHE_KEY_MODE, MIN_LEN,
          MAX_INPUT_CHARS, DETECTOR_BACKEND, CLD_MIN_BYTES, CLD_MAX_BYTES,
          RATE_LIMIT_MAX, RATE_LIMIT_TIME, LOG_REQUESTS, TRUST_PROXY.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass

from langid.core.exceptions import ConfigurationError

_VALID_KEY_MODES = frozenset({"exact", "digest", "digest32"})
_VALID_BACKENDS = frozenset({"cld3", "langdetect"})
_WINDOW_RE = re.compile(r"^\s*(\d+\s+)?(second|minute|hour|day)s?\s*$", re.IGNORECASE)
_TRUTHY = ("1", "true", "yes", "on")


def _env_int(name: str, default: int, overrides: dict) -> int:
    raw = overrides.get(name.lower())
    if raw is None:
        raw = os.environ.get(name, "")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_str(name: str, default: str, overrides: dict) -> str:
    raw = overrides.get(name.lower())
    if raw is None:
        raw = os.environ.get(name, "")
    return str(raw).strip() or default


def _env_bool(name: str, default: bool, overrides: dict) -> bool:
    raw = overrides.get(name.lower())
    if isinstance(raw, bool):
        return raw
    if raw is None:
        raw = os.environ.get(name)
    if raw is None or not str(raw).strip():
        return default
    return str(raw).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class ServiceConfig:
    port: int = 7860
    host: str = "0.0.0.0"
    body_limit: int = 64 * 1024
    cache_max: int = 5000
    cache_key_mode: str = "exact"
    min_len: int = 10
    max_input_chars: int = 2000
    detector_backend: str = "cld3"
    cld_min_bytes: int = 0
    cld_max_bytes: int = 1000
    rate_limit_max: int = 0
    rate_limit_time: str = "1 minute"
    log_requests: bool = True
    trust_proxy: bool = True

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be in 1..65535, got {self.port!r}")
        if not self.host:
            raise ValueError("host must be a non-empty string")
        if self.body_limit < 1:
            raise ValueError(f"body_limit must be a positive integer, got {self.body_limit!r}")
        if self.cache_key_mode not in _VALID_KEY_MODES:
            raise ValueError(f"cache_key_mode must be one of {sorted(_VALID_KEY_MODES)}, got {self.cache_key_mode!r}")
        if self.detector_backend not in _VALID_BACKENDS:
            raise ValueError(f"detector_backend must be one of {sorted(_VALID_BACKENDS)}, got {self.detector_backend!r}")
        if self.cld_min_bytes < 0 or self.cld_max_bytes < 1 or self.cld_min_bytes > self.cld_max_bytes:
            raise ValueError(
                f"need 0 <= cld_min_bytes <= cld_max_bytes, got {self.cld_min_bytes!r}, {self.cld_max_bytes!r}"
            )
        if self.rate_limit_max < 0:
            raise ValueError(f"rate_limit_max must be >= 0, got {self.rate_limit_max!r}")
        if not _WINDOW_RE.match(self.rate_limit_time):
            raise ValueError(f"rate_limit_time must look like '1 minute' or 'hour', got {self.rate_limit_time!r}")

    @property
    def cache_enabled(self) -> bool:
        return self.cache_max > 0

    @property
    def rate_limit_enabled(self) -> bool:
        return self.rate_limit_max > 0

    @property
    def rate_limit(self) -> str:
        """slowapi/limits expression, e.g. ``"100/1 minute"``."""
        return f"{self.rate_limit_max}/{self.rate_limit_time.strip()}"

    @classmethod
    def from_env(cls, **overrides: object) -> ServiceConfig:
        """Read settings from the environment; keyword overrides win (lower-case field names)."""
        return cls(
            port=_env_int("PORT", 7860, overrides),
            host=_env_str("HOST", "0.0.0.0", overrides),
            body_limit=_env_int("BODY_LIMIT", 64 * 1024, overrides),
            cache_max=_env_int("CACHE_MAX", 5000, overrides),
            cache_key_mode=_env_str("CACHE_KEY_MODE", "exact", overrides).lower(),
            min_len=_env_int("MIN_LEN", 10, overrides),
            max_input_chars=_env_int("MAX_INPUT_CHARS", 2000, overrides),
            detector_backend=_env_str("DETECTOR_BACKEND", "cld3", overrides).lower(),
            cld_min_bytes=_env_int("CLD_MIN_BYTES", 0, overrides),
            cld_max_bytes=_env_int("CLD_MAX_BYTES", 1000, overrides),
            rate_limit_max=_env_int("RATE_LIMIT_MAX", 0, overrides),
            rate_limit_time=_env_str("RATE_LIMIT_TIME", "1 minute", overrides),
            log_requests=_env_bool("LOG_REQUESTS", True, overrides),
            trust_proxy=_env_bool("TRUST_PROXY", True, overrides),
        )


def load_service_config(**overrides: object) -> ServiceConfig:
    """Build the config from the environment. Raises ConfigurationError on bad values."""
    try:
        return ServiceConfig.from_env(**overrides)
    except ValueError as exc:
        raise ConfigurationError(str(exc), cause=exc) from exc
