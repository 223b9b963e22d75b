"""
pagewright - Declarative page objects for browser acceptance tests

Describe a page as a tree of named elements and let pagewright:
1. Resolve each element lazily against the live browser, once
2. Run before/after hooks around clicks, selections and typing
3. Watch values for changes and wait for conditions
4. Work out which page the browser is on from URL mappings

Quick Start:
    ```python
    import re
    from pagewright import Page, Element, Session, button, link, section, text_field
    from pagewright.drivers.playwright import PlaywrightDriver

    class LoginPage(Page):
        url = "/login"

        username = text_field(id="username")
        password = text_field(id="password")
        submit = button(text="Log in")

    class OrderPage(Page):
        @section(css="#summary")
        def summary(summary):
            summary.element("total", css=".total")

    driver = PlaywrightDriver.launch()
    session = Session(driver, base_url="http://localhost:8000")
    session.define_page_mappings({
        "/login": LoginPage,
        re.compile(r"/orders/\\d+"): OrderPage,
    })

    session.visit(LoginPage)
    session.username.set("alice")
    session.password.set("secret")
    session.submit.click()

    page = session.current_page()        # an OrderPage, found by URL
    page.watch("summary", "text")
    ...
    assert page.changed("summary")
    ```

Hooks:
    ```python
    from pagewright import Element, after_events

    class AjaxButton(Element):
        @after_events
        def wait_for_requests(self):
            self.wait_until(lambda: self.session.execute_script("return !window.pending") is True)
    ```
"""

from .config import Settings
from .element import EVENT_TYPES, Element, after_events, before_events
from .elements import (
    ElementDefinition,
    ElementRegistry,
    button,
    checkbox,
    element,
    link,
    radio,
    section,
    select_list,
    text_field,
    textarea,
)
from .exceptions import (
    DeclarationError,
    ElementMissingError,
    InvalidElementNameError,
    InvalidMethodNameError,
    InvalidURLError,
    NotSupportedError,
    PageWrightError,
    ResolutionError,
    UndefinedSelectorError,
    UnsupportedCriteriaError,
    WaitTimeoutError,
)
from .matchers import Matcher
from .page import Page, on_load
from .query import ElementType, Query
from .session import Session, create_session
from .waiters import RetryConfig, wait_until
from .watchers import Watcher

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    # Main classes
    "Page",
    "Element",
    "Session",
    "create_session",
    "Matcher",
    "Settings",
    # Declarations
    "element",
    "section",
    "link",
    "button",
    "text_field",
    "textarea",
    "checkbox",
    "radio",
    "select_list",
    "before_events",
    "after_events",
    "on_load",
    "EVENT_TYPES",
    "ElementDefinition",
    "ElementRegistry",
    "ElementType",
    "Query",
    # Watching and waiting
    "Watcher",
    "wait_until",
    "RetryConfig",
    # Errors
    "PageWrightError",
    "ResolutionError",
    "UndefinedSelectorError",
    "UnsupportedCriteriaError",
    "ElementMissingError",
    "DeclarationError",
    "InvalidMethodNameError",
    "InvalidElementNameError",
    "InvalidURLError",
    "NotSupportedError",
    "WaitTimeoutError",
]
