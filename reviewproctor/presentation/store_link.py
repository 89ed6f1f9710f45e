"""App store review deep links."""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote

STORE_REVIEW_URL = "itms-apps://itunes.apple.com/app/id{app_id}&at={affiliate}&ct={campaign}?action=write-review"

_APP_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


def normalize_app_id(app_id: Optional[str]) -> Optional[str]:
    """Return ``app_id`` without surrounding whitespace, or ``None`` if unusable."""

    if not app_id:
        return None
    app_id = app_id.strip()
    if not _APP_ID_PATTERN.match(app_id):
        return None
    return app_id


def build_review_url(
    app_id: Optional[str], affiliate_code: str = "", affiliate_campaign_code: str = ""
) -> Optional[str]:
    """Return the write-review deep link for ``app_id``.

    The layout matches the links already handed out by existing installs,
    including the affiliate parameters placed before the query string.
    ``None`` is returned for a missing or malformed app id.
    """

    normalized = normalize_app_id(app_id)
    if normalized is None:
        return None
    return STORE_REVIEW_URL.format(
        app_id=normalized,
        affiliate=quote(affiliate_code or "", safe=""),
        campaign=quote(affiliate_campaign_code or "", safe=""),
    )
