"""Contract between the proctor and the host's review presentation."""
from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol

ResponseCallback = Callable[[], None]


class UserResponse(str, Enum):
    """Terminal answers a user can give to a fallback review dialog."""

    ACCEPT = "accept"
    DECLINE = "decline"
    DEFER = "defer"


class PresentationDispatcher(Protocol):
    """Host-provided presentation of review requests.

    Implementations own every piece of UI.  The proctor never waits on them:
    user answers come back through the callbacks handed to
    :meth:`show_fallback_dialog`, possibly never.
    """

    def supports_native_review(self) -> bool:
        """Whether the platform offers its own review surface."""
        ...

    def show_native_review_surface_if_available(self) -> bool:
        """Show the native surface; return ``False`` when it is unavailable."""
        ...

    def show_fallback_dialog(
        self,
        text: str,
        on_accept: ResponseCallback,
        on_decline: ResponseCallback,
        on_defer: ResponseCallback,
    ) -> None:
        ...

    def open_store_review_page(
        self, app_id: str, affiliate_code: str, affiliate_campaign_code: str
    ) -> None:
        ...
