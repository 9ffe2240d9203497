"""
Runtime inspection helpers.

Small probes over SQLAlchemy's instance state and collection instrumentation,
used by the scenarios to report what the ORM actually did with an entity:

- is_initialized: has a (lazy) attribute been loaded yet?
- is_instrumented_collection: is a value one of the ORM's collection wrappers?
- runtime_type_name: class name of whatever sits behind an attribute
- declared_collection_type / is_declared_read_only: what the class annotation
  promised for a relationship
"""

import collections.abc
from inspect import get_annotations
from typing import Any, Type, get_args, get_origin

from sqlalchemy import inspect
from sqlalchemy.orm.collections import InstrumentedDict, InstrumentedList, InstrumentedSet

_MUTABLE_COLLECTIONS = (collections.abc.MutableSet, collections.abc.MutableSequence, collections.abc.MutableMapping)


def is_initialized(entity: Any, attribute: str) -> bool:
    """Tell whether ``attribute`` of a mapped instance is loaded.

    Args:
        entity: Mapped instance (transient, pending, persistent or detached)
        attribute: Mapped attribute name

    Returns:
        False while the attribute is still unloaded, True once it holds a value.
        Instances without an identity key have nothing to lazy-load and always
        report True.

    Raises:
        AttributeError: If ``attribute`` is not mapped on the entity's class
    """
    state = inspect(entity)
    if attribute not in state.mapper.attrs:
        raise AttributeError(f"{type(entity).__name__} has no mapped attribute {attribute!r}")
    if state.key is None:
        return True
    return attribute not in state.unloaded


def is_instrumented_collection(value: Any) -> bool:
    """Return True when ``value`` is a collection managed by the ORM."""
    return isinstance(value, (InstrumentedSet, InstrumentedList, InstrumentedDict))


def runtime_type_name(value: Any, qualified: bool = False) -> str:
    if value is None:
        return "None"
    value_type = type(value)
    if qualified:
        return f"{value_type.__module__}.{value_type.__qualname__}"
    return value_type.__name__


def _declared_origin(entity_class: Type[Any], attribute: str) -> type:
    for klass in entity_class.__mro__:
        annotation = get_annotations(klass).get(attribute)
        if annotation is not None:
            break
    else:
        raise AttributeError(f"{entity_class.__name__} declares no annotation for {attribute!r}")

    # Mapped[X] -> X
    if get_origin(annotation) is not None and get_args(annotation):
        annotation = get_args(annotation)[0]
    origin = get_origin(annotation) or annotation
    if not isinstance(origin, type):
        raise TypeError(f"{entity_class.__name__}.{attribute} is not annotated with a collection type")
    return origin


def declared_collection_type(entity_class: Type[Any], attribute: str, qualified: bool = False) -> str:
    """Name the collection type a relationship is annotated with.

    ``Mapped[AbstractSet[X]]`` gives ``"Set"`` (``collections.abc.Set`` when
    qualified), ``Mapped[FrozenSet[X]]`` gives ``"frozenset"`` and so on.

    Args:
        entity_class: Mapped class declaring the relationship
        attribute: Relationship attribute name
        qualified: Prefix the module name

    Returns:
        Name of the declared collection class
    """
    origin = _declared_origin(entity_class, attribute)
    if qualified:
        return f"{origin.__module__}.{origin.__qualname__}"
    return origin.__name__


def is_declared_read_only(entity_class: Type[Any], attribute: str) -> bool:
    """Return True when the annotation of ``attribute`` offers no mutating API."""
    origin = _declared_origin(entity_class, attribute)
    return not issubclass(origin, _MUTABLE_COLLECTIONS)
