"""Service layer utilities for the mining economy."""

from importlib import import_module
from typing import Any

__all__ = ["EconomyService"]


def __getattr__(name: str) -> Any:
    if name == "EconomyService":
        module = import_module("minerapp.services.economy_service")
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
