"""
Abstract interface for browser drivers.

This module defines the contract a browser automation backend must meet to
drive pagewright pages. Drivers can be swapped to use different automation
tools (Playwright, Selenium, an in-memory fake for tests, etc.)

Two roles:

- Node: something elements can be looked up inside. Nodes may also expose any
  of the interaction verbs ``set``, ``select``, ``select_option``,
  ``unselect_option`` and ``click``; verbs are optional per node.
- BrowserDriver: the document-level node, which also knows where the browser
  is and how to navigate.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
from urllib.parse import urlparse

from ..exceptions import PageWrightError


class DriverError(PageWrightError):
    """Base exception for errors reported by a browser driver."""

    pass


class ElementNotFoundError(DriverError):
    """Raised when a lookup matches nothing."""

    pass


class AmbiguousMatchError(DriverError):
    """Raised when a lookup for a single node matches several."""

    pass


class Node(ABC):
    """
    A node in the browser that child nodes can be looked up in.

    Example:
        class MyNode(Node):
            def find_child(self, kind, value, options):
                # Your implementation
                pass

            def click(self):
                ...
    """

    @abstractmethod
    def find_child(self, kind: str, value: Any, options: Dict[str, Any]) -> "Node":
        """
        Find exactly one node inside this one.

        Args:
            kind: Locator kind (see pagewright.query.LocatorKind), e.g. "css"
            value: Locator value, e.g. "form#login"
            options: Extra locator options, passed through from the selector

        Returns:
            The matching node

        Raises:
            ElementNotFoundError: nothing matched
            AmbiguousMatchError: more than one node matched
        """
        pass

    def find_all(self, kind: str, value: Any, options: Dict[str, Any]) -> List["Node"]:
        """Find every matching node inside this one."""
        raise NotImplementedError(f"{type(self).__name__} does not support find_all")


class BrowserDriver(Node):
    """
    A browser session, acting as the root node of the current document.
    """

    @property
    @abstractmethod
    def current_url(self) -> str:
        """The URL the browser is currently on."""
        pass

    @property
    def current_path(self) -> str:
        """Path component of current_url."""
        return urlparse(self.current_url).path

    @abstractmethod
    def visit(self, url: str) -> None:
        """Navigate the browser to url."""
        pass

    def execute_script(self, script: str) -> Any:
        """
        Run JavaScript in the current document and return its result.

        Drivers without script support leave this unimplemented.
        """
        raise NotImplementedError(f"{type(self).__name__} cannot execute scripts")
