"""
Playwright driver.

Wraps a synchronous Playwright page so pagewright pages can drive it:

    from playwright.sync_api import sync_playwright

    with sync_playwright() as p:
        browser = p.chromium.launch()
        driver = PlaywrightDriver(browser.new_page())
        session = LoginPage.visit(driver, base_url="http://localhost:8000")

or let the driver own the browser:

    driver = PlaywrightDriver.launch(browser="firefox", headless=False)
    ...
    driver.quit()

Lookups wait up to ``find_timeout`` seconds for a node to be attached before
reporting it missing. Nodes wrap Playwright locators; anything a node does not
define itself is forwarded to its Locator.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from playwright.sync_api import Locator, Page, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .base import AmbiguousMatchError, BrowserDriver, ElementNotFoundError, Node

logger = logging.getLogger(__name__)

# scope is a Page or a Locator; both offer the same lookup methods
LOCATORS: Dict[str, Callable[[Any, Any, Optional[bool]], Locator]] = {
    "css": lambda scope, value, exact: scope.locator(value),
    "xpath": lambda scope, value, exact: scope.locator(f"xpath={value}"),
    "id": lambda scope, value, exact: scope.locator(f'[id="{value}"]'),
    "name": lambda scope, value, exact: scope.locator(f'[name="{value}"]'),
    "label": lambda scope, value, exact: scope.get_by_label(value, exact=exact),
    "placeholder": lambda scope, value, exact: scope.get_by_placeholder(value, exact=exact),
    "text": lambda scope, value, exact: scope.get_by_text(value, exact=exact),
    "link": lambda scope, value, exact: scope.get_by_role("link", name=value, exact=exact),
    "button": lambda scope, value, exact: scope.get_by_role("button", name=value, exact=exact),
}

SET_OPTION_SCRIPT = """
(option, selected) => {
    option.selected = selected;
    const select = option.closest('select');
    if (select) {
        select.dispatchEvent(new Event('input', { bubbles: true }));
        select.dispatchEvent(new Event('change', { bubbles: true }));
    }
}
"""


class _LocatorScope:
    """Node lookups shared by the document and element nodes."""

    page: Page
    find_timeout: float

    def _scope(self):
        raise NotImplementedError

    def _locate(self, kind: str, value: Any, options: Dict[str, Any]) -> Locator:
        build = LOCATORS.get(kind)
        if build is None:
            raise ValueError(f"Unknown locator kind: '{kind}'. Valid kinds: {sorted(LOCATORS)}")

        locator = build(self._scope(), value, options.get("exact"))
        if "has_text" in options:
            locator = locator.filter(has_text=options["has_text"])
        if "visible" in options:
            locator = locator.filter(visible=options["visible"])
        return locator

    def _wait_for(self, locator: Locator, options: Dict[str, Any], description: str) -> None:
        timeout = options.get("timeout", self.find_timeout)
        try:
            locator.first.wait_for(state="attached", timeout=timeout * 1000)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(f"Unable to find {description}") from e

    def find_child(self, kind: str, value: Any, options: Dict[str, Any]) -> "PlaywrightNode":
        description = f"{kind}={value!r}"
        locator = self._locate(kind, value, options)
        expected = options.get("count")
        if expected:
            self._wait_for(locator.nth(expected - 1), options, f"{expected} elements matching {description}")
        else:
            self._wait_for(locator, options, description)

        count = locator.count()
        if expected is not None and count != expected:
            if count < expected:
                raise ElementNotFoundError(f"Expected {expected} elements matching {description}, found {count}")
            raise AmbiguousMatchError(f"Expected {expected} elements matching {description}, found {count}")
        if count > 1:
            if options.get("match") != "first":
                raise AmbiguousMatchError(f"Ambiguous match, found {count} elements matching {description}")
            locator = locator.first
        logger.debug("Found %s", description)
        return PlaywrightNode(locator, self.page, self.find_timeout)

    def find_all(self, kind: str, value: Any, options: Dict[str, Any]) -> List["PlaywrightNode"]:
        description = f"{kind}={value!r}"
        locator = self._locate(kind, value, options)
        expected = options.get("count")
        if expected:
            self._wait_for(locator.nth(expected - 1), options, f"{expected} elements matching {description}")

        nodes = [PlaywrightNode(locator.nth(index), self.page, self.find_timeout) for index in range(locator.count())]
        if expected is not None and len(nodes) != expected:
            raise ElementNotFoundError(
                f"Expected {expected} elements matching {description}, found {len(nodes)}"
            )
        return nodes


class PlaywrightNode(_LocatorScope, Node):
    """An element node backed by a Playwright Locator."""

    def __init__(self, locator: Locator, page: Page, find_timeout: float = 5.0):
        self.locator = locator
        self.page = page
        self.find_timeout = find_timeout

    def _scope(self):
        return self.locator

    def click(self, **kwargs) -> None:
        self.locator.click(**kwargs)

    def set(self, value: Any) -> None:
        """Fill a field, or check/uncheck a checkbox or radio when value is a bool."""
        if isinstance(value, bool):
            self.locator.set_checked(value)
        else:
            self.locator.fill(str(value))

    def select(self, *values: str) -> List[str]:
        """Choose options of a select box by value or label."""
        return self.locator.select_option(list(values))

    def select_option(self) -> None:
        """Select this option node."""
        self.locator.evaluate(SET_OPTION_SCRIPT, True)

    def unselect_option(self) -> None:
        """Deselect this option node."""
        self.locator.evaluate(SET_OPTION_SCRIPT, False)

    @property
    def text(self) -> str:
        return self.locator.inner_text()

    @property
    def value(self) -> str:
        return self.locator.input_value()

    @property
    def visible(self) -> bool:
        return self.locator.is_visible()

    @property
    def checked(self) -> bool:
        return self.locator.is_checked()

    def __getitem__(self, attribute: str) -> Optional[str]:
        return self.locator.get_attribute(attribute)

    def __getattr__(self, attr):
        if attr == "locator" or attr.startswith("_"):
            raise AttributeError(attr)
        return getattr(self.locator, attr)

    def __repr__(self):
        return f"<PlaywrightNode {self.locator}>"


class PlaywrightDriver(_LocatorScope, BrowserDriver):
    """BrowserDriver over a synchronous Playwright Page."""

    def __init__(self, page: Page, find_timeout: float = 5.0, owner: Optional[tuple] = None):
        """
        Args:
            page: Playwright page to drive
            find_timeout: Seconds a lookup waits for a node to appear
            owner: (playwright, browser) to shut down on quit(), set by launch()
        """
        self.page = page
        self.find_timeout = find_timeout
        self._owner = owner

    @classmethod
    def launch(cls, browser: str = "chromium", headless: bool = True, find_timeout: float = 5.0) -> "PlaywrightDriver":
        """Start Playwright, launch a browser and drive a new page in it."""
        playwright = sync_playwright().start()
        try:
            browser_instance = getattr(playwright, browser).launch(headless=headless)
        except Exception:
            playwright.stop()
            raise
        logger.info("Launched %s (headless=%s)", browser, headless)
        return cls(browser_instance.new_page(), find_timeout=find_timeout, owner=(playwright, browser_instance))

    def _scope(self):
        return self.page

    @property
    def current_url(self) -> str:
        return self.page.url

    def visit(self, url: str) -> None:
        self.page.goto(url)

    def execute_script(self, script: str) -> Any:
        return self.page.evaluate(script)

    def quit(self) -> None:
        """Close the browser if this driver launched it."""
        if self._owner is None:
            return
        playwright, browser = self._owner
        browser.close()
        playwright.stop()
        self._owner = None
