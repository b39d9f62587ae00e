"""Per-request correlation identifiers."""
from __future__ import annotations

import uuid

REQUEST_ID_HEADER = "X-Request-ID"


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]
