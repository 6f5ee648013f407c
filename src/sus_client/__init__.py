"""sus_client package root exports with lazy imports to keep import time low."""

from __future__ import annotations

from typing import Any

__all__ = ["SusClient", "Configuration", "get_settings"]


def __getattr__(name: str) -> Any:
    if name == "SusClient":
        from sus_client.clients.sus_client import SusClient

        return SusClient
    if name == "Configuration":
        from sus_client.settings import Configuration

        return Configuration
    if name == "get_settings":
        from sus_client.settings import get_settings

        return get_settings
    raise AttributeError(f"module 'sus_client' has no attribute '{name}'")
