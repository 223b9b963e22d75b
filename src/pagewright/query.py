"""
Selector translation.

A selector is an ordered mapping of criterion -> value. The first entry names
the locator, e.g. ``{"css": ".login"}`` or ``{"text": "Sign in"}``; every other
entry is a locator option passed to the driver untouched
(``{"xpath": "//tr", "count": 3}``).

Which criteria are valid depends on the element type: a ``text`` criterion
makes sense for a link or a button but not for an arbitrary element. Each
type's Query knows its criteria and the driver locator kind each one maps to.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from .exceptions import UndefinedSelectorError, UnsupportedCriteriaError


class ElementType(Enum):
    ELEMENT = "element"
    SECTION = "section"
    LINK = "link"
    BUTTON = "button"
    TEXT_FIELD = "text_field"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT_LIST = "select_list"


class LocatorKind(Enum):
    """Locator kinds a driver must understand in ``find_child``."""

    CSS = "css"
    XPATH = "xpath"
    ID = "id"
    NAME = "name"
    LABEL = "label"
    PLACEHOLDER = "placeholder"
    TEXT = "text"
    LINK = "link"
    BUTTON = "button"


_COMMON = {
    "css": LocatorKind.CSS,
    "xpath": LocatorKind.XPATH,
    "id": LocatorKind.ID,
}

_FIELD = {
    **_COMMON,
    "name": LocatorKind.NAME,
    "label": LocatorKind.LABEL,
    "placeholder": LocatorKind.PLACEHOLDER,
}


@dataclass(frozen=True)
class Query:
    """Translates selectors for one element type."""

    element_type: ElementType
    criteria: Mapping[str, LocatorKind]

    def build(self, selector: Mapping[str, Any]) -> Tuple[str, Any, Dict[str, Any]]:
        """
        Translate a selector into a driver query.

        Returns:
            (locator_kind, locator_value, options)

        Raises:
            UndefinedSelectorError: selector is empty
            UnsupportedCriteriaError: first criterion is not valid for this type
        """
        if not selector:
            raise UndefinedSelectorError("Pass a locator/define one on the class")

        criterion, value = next(iter(selector.items()))
        kind = self.criteria.get(criterion)
        if kind is None:
            raise UnsupportedCriteriaError(
                f"'{criterion}' is not a valid criterion for {self.element_type.value}. "
                f"Valid criteria: {sorted(self.criteria)}"
            )

        options = {key: val for key, val in selector.items() if key != criterion}
        return kind.value, value, options

    @classmethod
    def find(cls, element_type) -> "Query":
        """Return the query for an element type (an ElementType or its value)."""
        return QUERIES[ElementType(element_type)]


QUERIES = {
    ElementType.ELEMENT: Query(ElementType.ELEMENT, {**_COMMON, "name": LocatorKind.NAME}),
    ElementType.SECTION: Query(ElementType.SECTION, {**_COMMON, "name": LocatorKind.NAME}),
    ElementType.LINK: Query(ElementType.LINK, {**_COMMON, "text": LocatorKind.LINK}),
    ElementType.BUTTON: Query(
        ElementType.BUTTON, {**_COMMON, "name": LocatorKind.NAME, "text": LocatorKind.BUTTON}
    ),
    ElementType.TEXT_FIELD: Query(ElementType.TEXT_FIELD, _FIELD),
    ElementType.TEXTAREA: Query(ElementType.TEXTAREA, _FIELD),
    ElementType.CHECKBOX: Query(ElementType.CHECKBOX, _FIELD),
    ElementType.RADIO: Query(ElementType.RADIO, _FIELD),
    ElementType.SELECT_LIST: Query(ElementType.SELECT_LIST, _FIELD),
}
