"""
Runtime settings.

Values come from keyword arguments or from the environment:

    PAGEWRIGHT_BROWSER         chromium | firefox | webkit (default: chromium)
    PAGEWRIGHT_HEADLESS        1/true/yes to run headless (default: true)
    PAGEWRIGHT_BASE_URL        base URL page mappings are joined to
    PAGEWRIGHT_FIND_TIMEOUT    seconds a lookup waits for a node (default: 5)
    PAGEWRIGHT_WAIT_TIMEOUT    default wait_until timeout (default: 5)
    PAGEWRIGHT_WAIT_INTERVAL   default wait_until poll interval (default: 1)
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .waiters import RetryConfig

BROWSERS = ("chromium", "firefox", "webkit")

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Settings for sessions made by create_session()."""

    browser: str = "chromium"
    headless: bool = True
    base_url: Optional[str] = None
    find_timeout: float = 5.0
    retry: RetryConfig = field(default_factory=RetryConfig)

    def __post_init__(self):
        if self.browser not in BROWSERS:
            raise ValueError(f"Unknown browser: {self.browser}. Valid browsers: {list(BROWSERS)}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Settings":
        """Build settings from environment variables; overrides win."""
        environ = os.environ if environ is None else environ
        retry = RetryConfig()
        if environ.get("PAGEWRIGHT_WAIT_TIMEOUT"):
            retry.timeout = float(environ["PAGEWRIGHT_WAIT_TIMEOUT"])
        if environ.get("PAGEWRIGHT_WAIT_INTERVAL"):
            retry.poll_interval = float(environ["PAGEWRIGHT_WAIT_INTERVAL"])

        values = {
            "browser": environ.get("PAGEWRIGHT_BROWSER", "chromium").lower(),
            "headless": environ.get("PAGEWRIGHT_HEADLESS", "true").lower() in _TRUE,
            "base_url": environ.get("PAGEWRIGHT_BASE_URL") or None,
            "find_timeout": float(environ.get("PAGEWRIGHT_FIND_TIMEOUT", 5.0)),
            "retry": retry,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
