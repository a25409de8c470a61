from __future__ import annotations

import re
from typing import Any, Dict, Optional

from .models import CompliantItem, Issue, Severity
from .security import is_security_issue

_SLUG_RE = re.compile(r"\s+")


def slugify(text: str) -> str:
    return _SLUG_RE.sub("-", text.strip().lower())


def make_issue(
    issue_id: str,
    category: str,
    message: str,
    *,
    error: str = "",
    severity: Severity = Severity.ERROR,
    details: Optional[Dict[str, Any]] = None,
    recommendation: Optional[str] = None,
    security: bool = False,
) -> Issue:
    return Issue(
        id=issue_id,
        severity=severity,
        category=category,
        message=message,
        error=error or message,
        details=details,
        recommendation=recommendation,
        security_issue=is_security_issue(issue_id, message, explicit=security, recommendation=recommendation),
    )


def make_compliant(
    item_id: str,
    category: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> CompliantItem:
    return CompliantItem(id=item_id, category=category, message=message, details=details)
