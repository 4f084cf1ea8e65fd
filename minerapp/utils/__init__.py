"""Utility helpers for the mining economy."""

from .locks import KeyedAsyncLock
from .randomness import RandomSource, ScriptedRandomSource, SeededRandomSource
from .time_utils import Clock, ManualClock, system_clock

__all__ = [
    "Clock",
    "KeyedAsyncLock",
    "ManualClock",
    "RandomSource",
    "ScriptedRandomSource",
    "SeededRandomSource",
    "system_clock",
]
