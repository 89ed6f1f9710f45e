"""Service orchestration helpers."""

from .proctor_service import DecisionCallback, ReviewProctor
from .scheduler import AsyncioExecutor, ImmediateExecutor, MainContextExecutor

__all__ = [
    "AsyncioExecutor",
    "DecisionCallback",
    "ImmediateExecutor",
    "MainContextExecutor",
    "ReviewProctor",
]
