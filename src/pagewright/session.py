"""
Session - navigation and current-page tracking.

A session owns a browser driver and a table of page mappings. It works out
which page class the browser is on by matching the current location against
those mappings, most specific match first:

    session = Session(driver, base_url="http://localhost:8000")
    session.define_page_mappings({
        "/login": LoginPage,
        re.compile(r"/orders/\\d+"): OrderPage,
    })

    session.visit(LoginPage)
    session.username.set("alice")     # delegated to the current page
    session.submit.click()
    assert isinstance(session.current_page(), DashboardPage)
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlparse

from .config import Settings
from .exceptions import InvalidURLError, NotSupportedError
from .matchers import Matcher, matcher_for, specificity
from .waiters import DEFAULT_RETRY, RetryConfig, Waiters

logger = logging.getLogger(__name__)


class Session(Waiters):
    """A browser session plus the page mappings used to navigate it."""

    URL_MISSING_MSG = "a path must be mapped or a url supplied"
    REGEXP_MAPPING_MSG = "URL could not be derived because mapping contains Regexps"
    UNSUPPORTED_OPERATION_MSG = "execute_script not supported by driver"

    def __init__(self, raw_session, base_url: Optional[str] = None, retry: Optional[RetryConfig] = None):
        """
        Args:
            raw_session: BrowserDriver the session drives
            base_url: URL mapping paths are joined to (defaults to the origin
                of the browser's current location)
            retry: Defaults for wait_until
        """
        self.raw_session = raw_session
        self.base_url = base_url
        self.transitions: Dict[Matcher, type] = {}
        self._retry = retry or DEFAULT_RETRY
        self._current_page = None

    @property
    def retry_config(self) -> RetryConfig:
        return self._retry

    @property
    def current_url(self) -> str:
        return self.raw_session.current_url

    @property
    def current_path(self) -> str:
        return self.raw_session.current_path

    def define_page_mappings(self, transitions: Mapping[Any, type]) -> Dict[Matcher, type]:
        """
        Map paths, patterns or Matchers to page classes.

        Strings match the path (or the full URL) exactly; compiled patterns
        are searched for in the path. Re-mapping a matcher replaces its page.
        """
        for key, page in transitions.items():
            self.transitions[matcher_for(key)] = page
        return self.transitions

    def matches(self, path: str, url: Optional[str] = None) -> List[type]:
        """All page classes mapped to path, most specific first."""
        found = [
            (specificity(matcher, index), page)
            for index, (matcher, page) in enumerate(self.transitions.items())
            if matcher.matches(path, url)
        ]
        return [page for _, page in sorted(found, key=lambda item: item[0])]

    def find_mapped_page(self, path: str, url: Optional[str] = None) -> Optional[type]:
        """The most specific page class mapped to path, or None."""
        found = self.matches(path, url)
        return found[0] if found else None

    def current_page(self):
        """
        The page object for the browser's current location.

        The cached page is kept while the location still belongs to it. When
        the location maps to another page class a new page object replaces
        it; when nothing maps, the previous page stays current.
        """
        page = self._current_page
        if page is not None and self._on_declared_url(type(page)):
            return page

        mapped = self.find_mapped_page(self.current_path, self.current_url)
        if mapped is None or (page is not None and type(page) is mapped):
            return page

        logger.debug("Location %s maps to %s", self.current_url, mapped.__name__)
        self._current_page = self._initialize_page(mapped)
        return self._current_page

    def visit(self, page=None, url: Optional[str] = None) -> "Session":
        """
        Navigate to a page class or a URL.

        Args:
            page: Page class to open, or a URL string
            url: Explicit URL, overriding the page's own URL and mappings

        Raises:
            InvalidURLError: no URL can be derived for page
        """
        if isinstance(page, str):
            page, url = None, page
        if page is None and url is None:
            raise InvalidURLError(self.URL_MISSING_MSG)

        target_url = url or self._url_for(page)
        logger.info("Visiting %s", target_url)
        self.raw_session.visit(target_url)
        if page is not None:
            self._current_page = self._initialize_page(page)
        return self

    def execute_script(self, script: str) -> Any:
        """
        Run JavaScript in the browser.

        Raises:
            NotSupportedError: the driver cannot execute scripts
        """
        execute = getattr(self.raw_session, "execute_script", None)
        if execute is None:
            raise NotSupportedError(self.UNSUPPORTED_OPERATION_MSG)
        try:
            return execute(script)
        except NotImplementedError as e:
            raise NotSupportedError(self.UNSUPPORTED_OPERATION_MSG) from e

    @staticmethod
    def url(base_url: str, path: str) -> str:
        """Join base_url and path with exactly one slash."""
        return f"{base_url.rstrip('/')}/{path.lstrip('/')}"

    def close(self) -> None:
        """Shut down the driver if it owns a browser."""
        quit_driver = getattr(self.raw_session, "quit", None)
        if quit_driver is not None:
            quit_driver()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _initialize_page(self, page_class):
        return page_class(self).execute_on_load()

    def _on_declared_url(self, page_class) -> bool:
        declared = page_class.url
        if not declared:
            return False
        url = self.current_url
        if declared in (url, self.current_path):
            return True
        base = self.base_url or self._origin()
        return bool(base) and self.url(base, declared) == url

    def _url_for(self, page) -> str:
        if page.url:
            return self._absolute(page.url)

        mapped = [matcher for matcher, mapped_page in self.transitions.items() if mapped_page is page]
        if not mapped:
            raise InvalidURLError(self.URL_MISSING_MSG)
        literal = next((matcher for matcher in mapped if matcher.can_compute_uri()), None)
        if literal is None:
            raise InvalidURLError(self.REGEXP_MAPPING_MSG)
        return self._absolute(literal.compute_uri())

    def _absolute(self, path: str) -> str:
        if urlparse(path).scheme:
            return path
        base = self.base_url or self._origin()
        if not base:
            raise InvalidURLError(self.URL_MISSING_MSG)
        return self.url(base, path)

    def _origin(self) -> Optional[str]:
        parsed = urlparse(self.current_url or "")
        if parsed.scheme and parsed.netloc:
            return f"{parsed.scheme}://{parsed.netloc}"
        return None

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        page = self.current_page()
        if page is None:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}' (no page loaded)")
        return getattr(page, name)


def create_session(
    url: Optional[str] = None,
    page=None,
    mappings: Optional[Mapping[Any, type]] = None,
    settings: Optional[Settings] = None,
    **overrides,
) -> Session:
    """
    Launch a Playwright browser and return a Session driving it.

    Args:
        url: URL to open straight away
        page: Page class to open straight away
        mappings: Page mappings for the session
        settings: Settings to use (default: Settings.from_env(**overrides))
        **overrides: browser, headless, base_url, find_timeout

    Example:
        with create_session(page=LoginPage, base_url="http://localhost:8000") as session:
            session.username.set("alice")
    """
    from .drivers.playwright import PlaywrightDriver

    settings = settings or Settings.from_env(**overrides)
    driver = PlaywrightDriver.launch(
        browser=settings.browser,
        headless=settings.headless,
        find_timeout=settings.find_timeout,
    )
    session = Session(driver, base_url=settings.base_url, retry=settings.retry)
    if mappings:
        session.define_page_mappings(mappings)
    if page is not None or url is not None:
        session.visit(page, url=url)
    return session
