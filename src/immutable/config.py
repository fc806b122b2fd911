"""Lightweight application configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass

from immutable.facade import DEFAULT_ACCESSOR


@dataclass(frozen=True)
class AppSettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    accessor_name: str = DEFAULT_ACCESSOR
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> AppSettings:
        return cls(
            environment=os.getenv("IMMUTABLE_ENV", cls.environment),
            accessor_name=os.getenv("IMMUTABLE_ACCESSOR", cls.accessor_name).strip()
            or cls.accessor_name,
            log_level=os.getenv("IMMUTABLE_LOG_LEVEL", cls.log_level).strip().upper(),
        )


__all__ = ["AppSettings"]
