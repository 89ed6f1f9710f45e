"""Review presentation backends."""

from .dispatcher import PresentationDispatcher, ResponseCallback, UserResponse
from .headless import HeadlessDispatcher, PresentationEvent
from .store_link import build_review_url, normalize_app_id

__all__ = [
    "HeadlessDispatcher",
    "PresentationDispatcher",
    "PresentationEvent",
    "ResponseCallback",
    "UserResponse",
    "build_review_url",
    "normalize_app_id",
]
