"""Service container wiring the mutation engine for host applications."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from immutable.config import AppSettings
from immutable.facade import AccessorRegistry, Mutator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    """Aggregates the engine service with its configuration."""

    settings: AppSettings
    mutator: Mutator
    accessors: AccessorRegistry


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        logger.warning("Unknown log level %s; keeping current level", level_name)
        return
    logging.getLogger("immutable").setLevel(level)


def build_container(settings: AppSettings | None = None) -> ServiceContainer:
    """Construct the primary service container."""

    resolved_settings = settings or AppSettings.from_env()
    _configure_logging(resolved_settings.log_level)

    mutator = Mutator()
    accessors = AccessorRegistry()
    accessors.register(resolved_settings.accessor_name, mutator, override=True)
    logger.debug(
        "Registered mutator accessor %s (%s)",
        resolved_settings.accessor_name,
        resolved_settings.environment,
    )

    return ServiceContainer(
        settings=resolved_settings,
        mutator=mutator,
        accessors=accessors,
    )


__all__ = ["ServiceContainer", "build_container"]
