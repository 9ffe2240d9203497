"""
Base database models and utilities.

This module provides the declarative bases shared by every entity in the
reproducer. Two mapping styles are offered on purpose, both writing into the
same ``MetaData``:

- ``Base``: classic declarative classes. Equality is object identity unless an
  entity overrides ``__eq__``/``__hash__`` itself.
- ``DataclassBase``: declarative dataclasses. The generated ``__eq__``,
  ``__hash__`` (with ``unsafe_hash=True``), ``__repr__`` and
  ``dataclasses.replace()`` are derived from every mapped field, relationships
  included unless a field opts out with ``compare=False``/``repr=False``.

Both bases mix in ``AsyncAttrs`` so lazy attributes can be awaited through
``entity.awaitable_attrs.<name>`` inside an ``AsyncSession``.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from typing import Any, ClassVar, Tuple

from sqlalchemy import MetaData, inspect
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

shared_metadata = MetaData()


class Base(AsyncAttrs, DeclarativeBase):
    """Declarative base for regular (identity-equality) entities."""

    metadata = shared_metadata


class DataclassBase(AsyncAttrs, MappedAsDataclass, DeclarativeBase):
    """Declarative base whose subclasses are generated dataclasses."""

    metadata = shared_metadata


class ReadOnlyFieldsMixin:
    """Make selected attributes write-once, the way a frozen dataclass field is.

    The first assignment (normally the constructor) is accepted; any later
    ``obj.field = value`` raises ``FrozenInstanceError``. The ORM never goes
    through ``__setattr__`` when it loads or refreshes a row: it writes the
    instance ``__dict__`` directly, so these attributes are still populated and
    overwritten from the database.

    Once the instance has an identity key the attributes stay locked even when
    expired or never loaded.
    """

    __read_only_fields__: ClassVar[Tuple[str, ...]] = ()

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__read_only_fields__ and (name in self.__dict__ or inspect(self).key is not None):
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        super().__setattr__(name, value)
