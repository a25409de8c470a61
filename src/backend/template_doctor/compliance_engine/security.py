from __future__ import annotations

from typing import Optional

_AUTH_ID_MARKERS = ("bicep-alternative-auth", "bicep-missing-auth")
_MESSAGE_MARKERS = ("Managed Identity", "Security")
_RECOMMENDATION_MARKERS = ("Managed Identity", "security")


def is_security_issue(
    issue_id: str,
    message: str,
    *,
    explicit: bool = False,
    recommendation: Optional[str] = None,
) -> bool:
    """Display hint: does this issue belong under the security banner?

    Evaluated once when the issue is built; it never feeds into percentages.
    """
    if explicit:
        return True
    if any(marker in issue_id for marker in _AUTH_ID_MARKERS):
        return True
    if message and any(marker in message for marker in _MESSAGE_MARKERS):
        return True
    if recommendation and any(marker in recommendation for marker in _RECOMMENDATION_MARKERS):
        return True
    return False
