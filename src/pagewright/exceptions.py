"""
Exception hierarchy for pagewright.

Declaration errors are raised while page and element classes are being
built and indicate a mistake in the page model. Resolution errors are raised
when an element is bound to the browser and propagate unmodified.
"""


class PageWrightError(Exception):
    """Base exception for all pagewright errors."""

    pass


class ResolutionError(PageWrightError):
    """Raised when an element cannot be bound to a browser node."""

    pass


class UndefinedSelectorError(ResolutionError):
    """Raised when an element has neither a selector nor a pre-bound node."""

    pass


class UnsupportedCriteriaError(ResolutionError):
    """Raised when a selector's locator kind is not valid for the element type."""

    pass


class ElementMissingError(PageWrightError):
    """Raised when no element, watcher or member exists with a given name."""

    pass


class DeclarationError(PageWrightError):
    """Base exception for naming problems in a page model."""

    pass


class InvalidMethodNameError(DeclarationError):
    """Raised when a method is defined with the name of a declared element."""

    pass


class InvalidElementNameError(DeclarationError):
    """Raised when an element is declared with a name that is already taken."""

    pass


class InvalidURLError(PageWrightError):
    """Raised when no navigable URL can be derived for a page."""

    pass


class NotSupportedError(PageWrightError):
    """Raised when the driver or node does not support an operation."""

    pass


class WaitTimeoutError(PageWrightError, TimeoutError):
    """Raised when wait_until gives up."""

    pass
