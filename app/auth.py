"""Shared-secret token check."""
from __future__ import annotations

import hmac
from typing import Optional

TOKEN_HEADER = "x-api-token"


def token_matches(expected: Optional[str], provided: Optional[str]) -> bool:
    """Return ``True`` when ``provided`` satisfies the configured secret.

    An unset secret disables authentication entirely.
    """

    if not expected:
        return True
    if provided is None:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
