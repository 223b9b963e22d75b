"""
Element declarations and the per-class element registry.

Elements can be declared in a class body, as attributes or as decorators
over a configuration block:

    class SearchPage(Page):
        url = "/search"

        query = text_field(name="q")
        go = button(text="Search")

        @section(css="#results")
        def results(results):
            results.link("first_result", css="li:first-child a")

or imperatively, on a class or on an instance (typically inside a block):

    SearchPage.link("help", text="Help")

Declaring an element never evaluates its block; blocks run when the element
is first instantiated.

Each class gets its own copy of its parents' registry, and each instance a
copy of its class's, so declarations never leak upwards.
"""

import functools
import logging
import re
import types
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterator, Mapping, NamedTuple, Optional

from .exceptions import ElementMissingError, InvalidElementNameError, InvalidMethodNameError
from .query import ElementType

logger = logging.getLogger(__name__)

ELEMENT_NAME_TAKEN_MSG = "Element name '%s' is already in use"
METHOD_NAME_TAKEN_MSG = "'%s' is already declared as an element"


@dataclass(frozen=True, eq=False)
class ElementDefinition:
    """Immutable declaration of an element, instantiated on demand."""

    name: Optional[str]
    type: ElementType
    selector: Mapping[str, Any] = field(default_factory=dict)
    definition_class: Optional[type] = None
    block: Optional[Callable] = None
    prefetched: Any = None
    options: Mapping[str, Any] = field(default_factory=dict)

    def __call__(self, block: Callable) -> "ElementDefinition":
        """Attach a configuration block; lets a definition decorate a function."""
        if self.block is not None:
            raise TypeError(f"Element '{self.name}' already has a block")
        return replace(self, block=block, name=self.name or block.__name__)

    def __eq__(self, other):
        if not isinstance(other, ElementDefinition):
            return NotImplemented
        return self._identity() == other._identity()

    __hash__ = None

    def _identity(self):
        hooks = getattr(self.definition_class, "_hooks", {})
        return (
            self.type,
            self.name,
            dict(self.selector),
            list(hooks.get("before", [])),
            list(hooks.get("after", [])),
        )

    def named(self, name: str) -> "ElementDefinition":
        return replace(self, name=name)

    def build(self, parent, *args):
        """Instantiate the element under parent, expanding its block with args."""
        element = self.definition_class(
            self.name,
            parent,
            element_type=self.type,
            selector=self.selector,
            prefetched_browser_element=self.prefetched,
            options=self.options,
        )
        if self.block is not None:
            element.expand(self.block, *args)
        return element


def snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def define(
    element_type: ElementType,
    args: tuple,
    selector: Mapping[str, Any],
    block: Optional[Callable] = None,
    options: Optional[Mapping[str, Any]] = None,
) -> ElementDefinition:
    """
    Build an ElementDefinition from declaration arguments.

    Positional arguments, all optional and in this order: an Element subclass,
    a name, then either a selector mapping or a pre-bound browser node.
    Keyword criteria are appended to the selector.
    """
    from .element import Element

    args = list(args)
    definition_class = Element
    name = None
    prefetched = None

    if args and isinstance(args[0], type) and issubclass(args[0], Element):
        definition_class = args.pop(0)
    if args and isinstance(args[0], str):
        name = args.pop(0)
    if args and isinstance(args[0], Mapping):
        selector = {**args.pop(0), **selector}
    elif args:
        prefetched = args.pop(0)
    if args:
        raise TypeError(f"Unexpected declaration arguments: {args!r}")

    if definition_class is not Element:
        name = name or snake_case(definition_class.__name__)
        selector = selector or dict(definition_class.selector or {})

    return ElementDefinition(
        name=name,
        type=ElementType(element_type),
        selector=dict(selector),
        definition_class=definition_class,
        block=block,
        prefetched=prefetched,
        options=dict(options or {}),
    )


class ElementRegistry:
    """Table of element definitions keyed by name."""

    def __init__(self, definitions: Optional[Mapping[str, ElementDefinition]] = None):
        self._definitions: Dict[str, ElementDefinition] = dict(definitions or {})

    def copy(self) -> "ElementRegistry":
        return ElementRegistry(self._definitions)

    def update(self, other: "ElementRegistry") -> None:
        self._definitions.update(other._definitions)

    def declare(self, definition: ElementDefinition) -> None:
        if definition.name in self._definitions:
            raise InvalidElementNameError(ELEMENT_NAME_TAKEN_MSG % definition.name)
        self._definitions[definition.name] = definition

    def get(self, name: str) -> Optional[ElementDefinition]:
        return self._definitions.get(name)

    def as_dict(self) -> Dict[str, ElementDefinition]:
        return dict(self._definitions)

    def __contains__(self, name) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)


def _inherited_registry(bases) -> ElementRegistry:
    registry = ElementRegistry()
    for base in reversed(bases):
        inherited = getattr(base, "_registry", None)
        if inherited is not None:
            registry.update(inherited)
    return registry


def _member_defined(target, name: str) -> bool:
    """True if target (a class or an instance) already has a member called name."""
    if not isinstance(target, type) and name in vars(target):
        return True
    owner = target if isinstance(target, type) else type(target)
    return any(name in vars(klass) for klass in owner.__mro__)


class _DeclarationNamespace(dict):
    """Class body namespace that rejects clashes between elements and members."""

    def __init__(self, bases):
        super().__init__()
        self._bases = bases
        self._inherited = _inherited_registry(bases)

    def _is_element(self, key) -> bool:
        return key in self._inherited or isinstance(self.get(key), ElementDefinition)

    def __setitem__(self, key, value):
        if isinstance(value, ElementDefinition):
            if self._is_element(key):
                raise InvalidElementNameError(ELEMENT_NAME_TAKEN_MSG % key)
            if key in self or any(hasattr(base, key) for base in self._bases):
                raise InvalidElementNameError(ELEMENT_NAME_TAKEN_MSG % key)
        elif self._is_element(key):
            raise InvalidMethodNameError(METHOD_NAME_TAKEN_MSG % key)
        super().__setitem__(key, value)


class ElementsMeta(type):
    """Collects element definitions from class bodies into a registry."""

    @classmethod
    def __prepare__(mcs, name, bases, **kwargs):
        return _DeclarationNamespace(bases)

    def __new__(mcs, name, bases, namespace, **kwargs):
        definitions = {
            key: value for key, value in namespace.items() if isinstance(value, ElementDefinition)
        }
        attributes = {key: value for key, value in namespace.items() if key not in definitions}
        cls = super().__new__(mcs, name, bases, attributes, **kwargs)

        registry = _inherited_registry(bases)
        for key, definition in definitions.items():
            registry.declare(definition.named(key))
        type.__setattr__(cls, "_registry", registry)
        return cls

    def __setattr__(cls, name, value):
        registry = getattr(cls, "_registry", None)
        if registry is not None and name in registry:
            raise InvalidMethodNameError(METHOD_NAME_TAKEN_MSG % name)
        super().__setattr__(name, value)


class declaration:
    """Method bound to the class or to the instance it is looked up on."""

    def __init__(self, func):
        self.__func__ = func
        functools.update_wrapper(self, func)

    def __get__(self, instance, owner=None):
        return types.MethodType(self.__func__, owner if instance is None else instance)


def _declare(target, element_type, args, selector, block, options) -> ElementDefinition:
    definition = define(element_type, args, selector, block=block, options=options)
    if not definition.name:
        raise InvalidElementNameError("Elements must be given a name")
    if _member_defined(target, definition.name):
        raise InvalidElementNameError(ELEMENT_NAME_TAKEN_MSG % definition.name)
    target._registry.declare(definition)
    logger.debug("Declared %s '%s' on %r", definition.type.value, definition.name, target)
    return definition


def _declarer(element_type: ElementType):
    def declare(target, *args, block=None, options=None, **selector):
        return _declare(target, element_type, args, selector, block, options)

    declare.__name__ = declare.__qualname__ = element_type.value
    declare.__doc__ = f"Declare a {element_type.value} element on this class or instance."
    return declaration(declare)


def _builder(element_type: ElementType):
    def build(*args, block=None, options=None, **selector) -> ElementDefinition:
        return define(element_type, args, selector, block=block, options=options)

    build.__name__ = build.__qualname__ = element_type.value
    build.__doc__ = f"Define a {element_type.value} element for use in a class body."
    return build


element = _builder(ElementType.ELEMENT)
section = _builder(ElementType.SECTION)
link = _builder(ElementType.LINK)
button = _builder(ElementType.BUTTON)
text_field = _builder(ElementType.TEXT_FIELD)
textarea = _builder(ElementType.TEXTAREA)
checkbox = _builder(ElementType.CHECKBOX)
radio = _builder(ElementType.RADIO)
select_list = _builder(ElementType.SELECT_LIST)


class Lookup(NamedTuple):
    """Result of a dynamic member lookup."""

    found: bool
    value: Any = None


NOT_FOUND = Lookup(False)


class Elements(metaclass=ElementsMeta):
    """Shared declaration behaviour of pages and elements."""

    element = _declarer(ElementType.ELEMENT)
    section = _declarer(ElementType.SECTION)
    link = _declarer(ElementType.LINK)
    button = _declarer(ElementType.BUTTON)
    text_field = _declarer(ElementType.TEXT_FIELD)
    textarea = _declarer(ElementType.TEXTAREA)
    checkbox = _declarer(ElementType.CHECKBOX)
    radio = _declarer(ElementType.RADIO)
    select_list = _declarer(ElementType.SELECT_LIST)

    def _init_elements(self) -> None:
        self._registry = type(self)._registry.copy()
        self._element_cache = {}
        self._helpers = {}

    @declaration
    def element_definitions(target) -> Dict[str, ElementDefinition]:
        """Copy of the name -> ElementDefinition table."""
        return target._registry.as_dict()

    def element_by_name(self, name: str, *args):
        """
        Return the element declared as name.

        Args are handed to the element's block; lookups without args return
        the same instance every time.

        Raises:
            ElementMissingError: nothing is declared under that name
        """
        lookup = self._lookup_element(name, args)
        if not lookup.found:
            raise ElementMissingError(f"No element declared as '{name}'")
        return lookup.value

    def _lookup_element(self, name: str, args: tuple = ()) -> Lookup:
        definition = self._registry.get(name)
        if definition is None:
            return NOT_FOUND
        if args:
            return Lookup(True, definition.build(self, *args))

        cache = self.__dict__.setdefault("_element_cache", {})
        if name not in cache:
            cache[name] = definition.build(self)
        return Lookup(True, cache[name])

    def define_method(self, func: Callable, name: Optional[str] = None):
        """
        Attach a helper method to this instance.

        Raises:
            InvalidMethodNameError: an element is declared with the same name
        """
        name = name or func.__name__
        if name in self._registry:
            raise InvalidMethodNameError(METHOD_NAME_TAKEN_MSG % name)
        method = types.MethodType(func, self)
        self.__dict__[name] = method
        self.__dict__.setdefault("_helpers", {})[name] = func
        return method

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(self._registry))
