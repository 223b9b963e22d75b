"""
Element - a named, typed node in a page tree.

An element knows how to find itself (its selector) but does not touch the
browser until something needs the underlying node. On first access it asks
its parent's node for a matching child, wraps the child's interaction verbs
with the element's before/after hooks and keeps the result for the rest of
its life.

    class LoginForm(Element):
        selector = {"css": "form#login"}

        username = text_field(id="username")
        password = text_field(id="password")
        submit = button(text="Log in")

        @after_events
        def wait_for_spinner(self):
            self.wait_until(lambda: not self.session.spinner.visible)

Anything an element does not define itself is looked up as a sub-element and
then on the browser node, so ``form.username.value`` reads the node's value.
"""

import functools
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .elements import NOT_FOUND, Elements, Lookup, declaration
from .exceptions import NotSupportedError, ResolutionError, UndefinedSelectorError
from .query import ElementType, Query
from .waiters import DEFAULT_RETRY, RetryConfig, Waiters
from .watchers import Watchers

logger = logging.getLogger(__name__)

EVENT_TYPES = ("set", "select", "select_option", "unselect_option", "click")

_MISSING = object()

# verbs as the node defined them, before any element wrapped them
ORIGINALS_ATTR = "_pagewright_originals"


def before_events(func: Callable) -> Callable:
    """Mark a method in an Element class body as a before hook."""
    func._pagewright_event = "before"
    return func


def after_events(func: Callable) -> Callable:
    """Mark a method in an Element class body as an after hook."""
    func._pagewright_event = "after"
    return func


def _unwrapped(node: Any, event: str):
    originals = getattr(node, "__dict__", {}).get(ORIGINALS_ATTR, {})
    return originals.get(event) or getattr(node, event, None)


class _WatchHook:
    """Before hook that re-takes a watcher's snapshot."""

    def __init__(self, name: str, attribute: Optional[str] = None, block: Optional[Callable] = None):
        self.name = name
        self.attribute = attribute
        self.block = block

    def __call__(self, element: "Element") -> None:
        element.watch(self.name, self.attribute, self.block)

    def __eq__(self, other):
        if not isinstance(other, _WatchHook):
            return NotImplemented
        return (self.name, self.attribute, self.block) == (other.name, other.attribute, other.block)

    __hash__ = None

    def __repr__(self):
        return f"<watch {self.name!r}>"


class Element(Elements, Watchers, Waiters):
    """A page element, resolved lazily against the browser."""

    EVENT_TYPES = EVENT_TYPES
    EVENT_NOT_SUPPORTED_MSG = "%s not supported by this element"

    name = None
    parent_element = None
    type = ElementType.ELEMENT
    selector: Optional[Mapping[str, Any]] = None
    options: Optional[Mapping[str, Any]] = None

    _hooks: Dict[str, List[Callable]] = {"before": [], "after": []}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        hooks = {event: list(registered) for event, registered in cls._hooks.items()}
        for value in vars(cls).values():
            event = getattr(value, "_pagewright_event", None)
            if event:
                hooks[event].append(value)
        cls._hooks = hooks

    def __init__(
        self,
        name: str,
        parent_element=None,
        element_type=ElementType.ELEMENT,
        selector: Optional[Mapping[str, Any]] = None,
        prefetched_browser_element: Any = None,
        options: Optional[Mapping[str, Any]] = None,
    ):
        """
        Args:
            name: Element name
            parent_element: Owning page or element, used to find the node
            element_type: One of ElementType; decides which criteria are valid
            selector: Ordered criterion -> value mapping (defaults to the
                class's ``selector``)
            prefetched_browser_element: Node to use instead of looking one up
            options: Definition options; ``multiple_results`` binds a list of nodes
        """
        self._init_elements()
        self.name = name
        self.parent_element = parent_element
        self.type = ElementType(element_type)
        if selector is None:
            selector = type(self).selector or {}
        self.selector = dict(selector)
        self.options = dict(options or {})
        self._hooks = {event: list(registered) for event, registered in type(self)._hooks.items()}
        self._browser_element = prefetched_browser_element
        self._bound = False

    # -- hooks -------------------------------------------------------------

    @declaration
    def before_events(target, hook: Optional[Callable] = None):
        """Return the before hooks, or register hook (called with the element)."""
        if hook is None:
            return list(target._hooks["before"])
        target._hooks["before"].append(hook)
        return hook

    @declaration
    def after_events(target, hook: Optional[Callable] = None):
        """Return the after hooks, or register hook (called with the element)."""
        if hook is None:
            return list(target._hooks["after"])
        target._hooks["after"].append(hook)
        return hook

    @declaration
    def watch(target, name: str, attribute: Optional[str] = None, block: Optional[Callable] = None):
        """
        Watch a value on this element.

        On a class, registers a before hook so the snapshot is re-taken before
        every interaction.
        """
        if isinstance(target, type):
            hook = _WatchHook(name, attribute, block)
            target._hooks["before"].append(hook)
            return hook
        return Watchers.watch(target, name, attribute, block)

    def _run_hooks(self, event: str) -> None:
        for hook in list(self._hooks[event]):
            hook(self)

    def _hooked(self, action: Callable) -> Callable:
        @functools.wraps(action)
        def hooked(*args, **kwargs):
            self._run_hooks("before")
            result = action(*args, **kwargs)
            self._run_hooks("after")
            return result

        return hooked

    def _wrap_events(self, node: Any) -> None:
        for raw in node if isinstance(node, list) else [node]:
            originals = raw.__dict__.setdefault(ORIGINALS_ATTR, {})
            for event in EVENT_TYPES:
                action = originals.get(event) or getattr(raw, event, None)
                if callable(action):
                    originals[event] = action
                    setattr(raw, event, self._hooked(action))

    # -- resolution ----------------------------------------------------------

    @property
    def browser_element(self):
        """The browser node this element is bound to, found on first access."""
        if not self._bound:
            if self._browser_element is None:
                self._browser_element = self._find()
            self._wrap_events(self._browser_element)
            self._bound = True
        return self._browser_element

    def _find(self):
        if not self.selector:
            raise UndefinedSelectorError(f"Element '{self.name}': pass a locator/define one on the class")

        kind, value, options = Query.find(self.type).build(self.selector)
        parent = self._parent_browser_element()
        logger.debug("Resolving '%s' by %s=%r %s", self.name, kind, value, options or "")
        if self.options.get("multiple_results"):
            return parent.find_all(kind, value, options)
        return parent.find_child(kind, value, options)

    def _parent_browser_element(self):
        if self.parent_element is None:
            raise ResolutionError(f"Element '{self.name}' is not attached to a page")
        return self.parent_element.browser_element

    def expand(self, block: Callable, *args) -> "Element":
        """Run a configuration block against this element: block(self, *args)."""
        block(self, *args)
        return self

    def is_section(self) -> bool:
        """True if this element declares sub-elements or carries helper methods."""
        return bool(self._registry) or bool(self.__dict__.get("_helpers"))

    # -- events --------------------------------------------------------------

    def _perform(self, event: str, *args, **kwargs):
        action = _unwrapped(self.browser_element, event)
        if not callable(action):
            raise NotSupportedError(self.EVENT_NOT_SUPPORTED_MSG % event)
        return self._hooked(action)(*args, **kwargs)

    def click(self, *args, **kwargs):
        return self._perform("click", *args, **kwargs)

    def set(self, *args, **kwargs):
        return self._perform("set", *args, **kwargs)

    def select(self, *args, **kwargs):
        return self._perform("select", *args, **kwargs)

    def select_option(self, *args, **kwargs):
        return self._perform("select_option", *args, **kwargs)

    def unselect_option(self, *args, **kwargs):
        return self._perform("unselect_option", *args, **kwargs)

    # -- dynamic members -----------------------------------------------------

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        lookup = self._lookup(name)
        if lookup.found:
            return lookup.value
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def _lookup(self, name: str) -> Lookup:
        lookup = self._lookup_element(name)
        if lookup.found:
            return lookup
        value = getattr(self.browser_element, name, _MISSING)
        if value is _MISSING:
            return NOT_FOUND
        return Lookup(True, value)

    # -- session delegators --------------------------------------------------

    @property
    def session(self):
        """The session of the page this element belongs to, if any."""
        if self.parent_element is None:
            return None
        return getattr(self.parent_element, "session", None)

    def _require_session(self):
        session = self.session
        if session is None:
            raise ResolutionError(f"Element '{self.name}' has no session")
        return session

    @property
    def page(self):
        return self._require_session().current_page()

    @property
    def url(self) -> str:
        return self._require_session().current_url

    @property
    def path(self) -> str:
        return self._require_session().current_path

    @property
    def retry_config(self) -> RetryConfig:
        session = self.session
        return session.retry_config if session is not None else DEFAULT_RETRY

    # -- comparison ----------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return (self.type, self.name, self.selector, self._hooks["before"], self._hooks["after"]) == (
            other.type,
            other.name,
            other.selector,
            other._hooks["before"],
            other._hooks["after"],
        )

    __hash__ = None

    def __repr__(self):
        return f"<{type(self).__name__} {self.type.value} '{self.name}' {self.selector}>"


