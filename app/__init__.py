"""Building blocks of the alert webhook receiver."""

from .auth import token_matches
from .config import Settings, get_settings
from .logging_config import configure_logging
from .notifier import SoundNotifier
from .rate_limit import FixedWindowRateLimiter, RateLimitDecision

__all__ = [
    "FixedWindowRateLimiter",
    "RateLimitDecision",
    "Settings",
    "SoundNotifier",
    "configure_logging",
    "get_settings",
    "token_matches",
]
