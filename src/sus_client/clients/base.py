"""Shared infrastructure for API clients."""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger


class BaseClient:
    """Base functionality for SUS API client implementations."""

    def __init__(self, name: str, extra_context: Mapping[str, Any] | None = None) -> None:
        self.name = name
        self._context = dict(extra_context or {})

    def _log(self, message: str, *, level: str = "DEBUG", **kwargs: Any) -> None:
        """Log with the client name and endpoint bound as extra fields."""

        logger.bind(client=self.name, **self._context, **kwargs).log(level, message)
