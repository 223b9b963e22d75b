"""
Browser drivers for pagewright.

Pages never talk to a browser directly; they go through a BrowserDriver.

Available Drivers:
    - PlaywrightDriver: synchronous Playwright (chromium, firefox, webkit)

You can also implement custom drivers by extending BrowserDriver and Node.

Example:
    ```python
    from pagewright.drivers.playwright import PlaywrightDriver
    from pagewright import Session

    driver = PlaywrightDriver.launch(browser="chromium")
    session = Session(driver, base_url="http://localhost:8000")
    ```
"""

from .base import (
    AmbiguousMatchError,
    BrowserDriver,
    DriverError,
    ElementNotFoundError,
    Node,
)

__all__ = [
    "BrowserDriver",
    "Node",
    "DriverError",
    "ElementNotFoundError",
    "AmbiguousMatchError",
]
