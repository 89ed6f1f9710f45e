"""Dispatcher that presents nothing and records what it was asked to do."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from reviewproctor.presentation.dispatcher import ResponseCallback, UserResponse
from reviewproctor.presentation.store_link import build_review_url

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PresentationEvent:
    """A single presentation request received by :class:`HeadlessDispatcher`."""

    kind: str  # "native", "fallback" or "store_page"
    text: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {"kind": self.kind, "text": self.text, "url": self.url}


@dataclass(slots=True)
class _PendingDialog:
    text: str
    callbacks: Dict[UserResponse, ResponseCallback] = field(default_factory=dict)


class HeadlessDispatcher:
    """Presentation dispatcher for hosts without UI, the CLI and tests.

    With ``native_review=True`` every prompt is "shown" through the native
    surface.  Otherwise a fallback dialog is left pending until the host calls
    :meth:`respond`.
    """

    def __init__(self, native_review: bool = True) -> None:
        self._native_review = native_review
        self._pending: Optional[_PendingDialog] = None
        self.events: List[PresentationEvent] = []

    # ------------------------------------------------------------------
    def supports_native_review(self) -> bool:
        return self._native_review

    def show_native_review_surface_if_available(self) -> bool:
        if not self._native_review:
            return False
        self.events.append(PresentationEvent(kind="native"))
        logger.info("native review surface requested")
        return True

    def show_fallback_dialog(
        self,
        text: str,
        on_accept: ResponseCallback,
        on_decline: ResponseCallback,
        on_defer: ResponseCallback,
    ) -> None:
        self._pending = _PendingDialog(
            text=text,
            callbacks={
                UserResponse.ACCEPT: on_accept,
                UserResponse.DECLINE: on_decline,
                UserResponse.DEFER: on_defer,
            },
        )
        self.events.append(PresentationEvent(kind="fallback", text=text))
        logger.info("fallback review dialog pending")

    def open_store_review_page(
        self, app_id: str, affiliate_code: str, affiliate_campaign_code: str
    ) -> None:
        url = build_review_url(app_id, affiliate_code, affiliate_campaign_code)
        if url is None:
            logger.debug(f"not opening store page for malformed app id {app_id!r}")
            return
        self.events.append(PresentationEvent(kind="store_page", url=url))
        logger.info(f"store review page requested: {url}")

    # ------------------------------------------------------------------
    @property
    def has_pending_dialog(self) -> bool:
        return self._pending is not None

    def respond(self, response: UserResponse) -> bool:
        """Answer the pending fallback dialog.  Returns ``False`` if none is pending."""

        if self._pending is None:
            return False
        pending, self._pending = self._pending, None
        pending.callbacks[UserResponse(response)]()
        return True
