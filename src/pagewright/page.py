"""
Page - the root of an element tree.

    class LoginPage(Page):
        url = "/login"

        username = text_field(id="username")
        password = text_field(id="password")
        submit = button(text="Log in")

        @on_load
        def wait_for_form(self):
            self.wait_until(lambda: self.username.visible)

A page's elements look themselves up in the document of the session the page
belongs to.
"""

import logging
from typing import Callable, Optional

from .elements import Elements
from .exceptions import ResolutionError
from .waiters import DEFAULT_RETRY, RetryConfig, Waiters
from .watchers import Watchers

logger = logging.getLogger(__name__)


def on_load(func: Callable) -> Callable:
    """Mark a method in a Page class body as the page's on-load hook."""
    func._pagewright_on_load = True
    return func


class Page(Elements, Watchers, Waiters):
    """Base class for page objects."""

    url: Optional[str] = None
    session = None

    _on_load: Optional[Callable] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        for value in vars(cls).values():
            if getattr(value, "_pagewright_on_load", False):
                cls._on_load = value

    def __init__(self, session=None):
        self._init_elements()
        self.session = session

    @classmethod
    def on_load(cls, hook: Optional[Callable] = None):
        """Return the on-load hook, or set it; the hook is called with the page."""
        if hook is None:
            return cls._on_load
        cls._on_load = hook
        return hook

    @classmethod
    def visit(cls, driver, url: Optional[str] = None, base_url: Optional[str] = None):
        """Open this page in a new Session on driver and return the session."""
        from .session import Session

        return Session(driver, base_url=base_url).visit(cls, url=url)

    def execute_on_load(self) -> "Page":
        hook = type(self)._on_load
        if hook is not None:
            logger.debug("Running on-load hook for %s", type(self).__name__)
            hook(self)
        return self

    @property
    def browser_element(self):
        """The driver's document node."""
        if self.session is None:
            raise ResolutionError(f"{type(self).__name__} is not attached to a session")
        return self.session.raw_session

    @property
    def retry_config(self) -> RetryConfig:
        return self.session.retry_config if self.session is not None else DEFAULT_RETRY

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        lookup = self._lookup_element(name)
        if lookup.found:
            return lookup.value
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __repr__(self):
        return f"<{type(self).__name__} url={self.url!r}>"
