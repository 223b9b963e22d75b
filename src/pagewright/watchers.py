"""
Change detection for pages and elements.

    page.watch("price", "text")
    page.add_to_basket.click()
    assert page.changed("price")

A watcher snapshots a value when it is registered. ``changed`` recomputes the
value and compares it with the snapshot without replacing it; call ``watch``
again to take a new baseline.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .exceptions import ElementMissingError

ELEMENT_MISSING_MSG = "No element or method with that name defined"


def call_with_subject(block: Callable, subject: Any) -> Any:
    """Call a zero- or one-argument block, passing subject when it takes one."""
    try:
        parameters = inspect.signature(block).parameters
    except (TypeError, ValueError):
        return block(subject)
    if not parameters:
        return block()
    return block(subject)


@dataclass
class Watcher:
    """A named value being observed on a page or element."""

    name: str
    attribute: Optional[str] = None
    block: Optional[Callable] = None
    last: Any = None

    def compute(self, subject: Any) -> Any:
        if self.block is not None:
            return call_with_subject(self.block, subject)

        value = _read(subject, self.name)
        if self.attribute:
            value = _read(value, self.attribute)
        return value

    def check(self, subject: Any) -> "Watcher":
        """Store the current value as the snapshot."""
        self.last = self.compute(subject)
        return self


def _read(target: Any, member: str) -> Any:
    value = getattr(target, member)
    return value() if inspect.ismethod(value) or inspect.isbuiltin(value) else value


class Watchers:
    """Mixin adding watch/changed to pages and elements."""

    @property
    def watchers(self) -> Dict[str, Watcher]:
        registered = self.__dict__.get("_watchers")
        if registered is None:
            registered = self.__dict__["_watchers"] = {}
        return registered

    def watch(self, name: str, attribute: Optional[str] = None, block: Optional[Callable] = None) -> Watcher:
        """
        Register a watcher.

        Args:
            name: Watcher name; without a block it must name a member or element
            attribute: Attribute read from that member (e.g. "text")
            block: Computes the watched value instead, called with no argument
                or with this object

        Raises:
            ElementMissingError: no block given and nothing is called ``name``
        """
        if block is None and not hasattr(self, name):
            raise ElementMissingError(f"{ELEMENT_MISSING_MSG}: {name}")

        watcher = Watcher(name, attribute=attribute, block=block).check(self)
        self.watchers[name] = watcher
        return watcher

    def watcher(self, name: str) -> Optional[Watcher]:
        return self.watchers.get(name)

    def changed(self, name: str) -> bool:
        """Return True if the watched value differs from its snapshot."""
        watcher = self.watcher(name)
        if watcher is None:
            raise ElementMissingError(f"No watcher registered for '{name}'")
        return watcher.last != watcher.compute(self)
