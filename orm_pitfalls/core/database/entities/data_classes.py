"""
Dataclass entities and their identity-equality counterparts (problem 3).

Classes built on ``DataclassBase`` get ``__eq__``, ``__hash__`` and ``__repr__``
generated from their mapped fields. That is exactly what hurts when they are
entities:

- the hash moves when a non-key field changes, or when a flush assigns the id;
- two distinct rows with equal fields collapse inside a set collection;
- ``dataclasses.replace()`` yields a transient copy that is inserted again when
  the id is cleared, or merged over the stored row when it is kept;
- the generated ``__repr__`` walks lazy relationships, which fails once the
  instance is detached;
- mutually referencing fields make the generated ``__eq__`` recurse forever.

The classes on ``Base`` compare by type and primary key and keep a constant
per-class hash, so they stay findable in hash-based containers.
"""

from typing import List, Optional, Set

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base, DataclassBase

# ---------------------------------------------------------------------------
# Dataclass entities
# ---------------------------------------------------------------------------


class PersonDataClassProblem(DataclassBase, unsafe_hash=True):
    """Person as a dataclass; hash covers ``id``, ``name`` and ``email``.

    Table: person_data_class_problem
    """

    __tablename__ = "person_data_class_problem"

    # init argument, so ``replace()`` carries the id over to the copy
    id: Mapped[Optional[int]] = mapped_column(primary_key=True, default=None, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    email: Mapped[Optional[str]] = mapped_column(String(255), default=None)


class EmployeeDataClass(DataclassBase, unsafe_hash=True):
    """Table: employees_dc"""

    __tablename__ = "employees_dc"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    department: Mapped[str] = mapped_column(String(255), default="")


class UserDataEntity(DataclassBase, unsafe_hash=True):
    """Table: users_data"""

    __tablename__ = "users_data"

    id: Mapped[Optional[int]] = mapped_column(primary_key=True, default=None, nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str] = mapped_column(String(255), default="")


class DUser(DataclassBase):
    """User whose generated ``__repr__`` includes the lazy ``gadgets`` list.

    Table: d_user
    """

    __tablename__ = "d_user"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), default="")
    gadgets: Mapped[List["DGadget"]] = relationship(back_populates="user", lazy="select", default_factory=list)


class DGadget(DataclassBase):
    """Table: d_gadget"""

    __tablename__ = "d_gadget"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("d_user.id"), init=False, repr=False)
    user: Mapped[Optional[DUser]] = relationship(back_populates="gadgets", lazy="select", default=None)


class DOrder(DataclassBase, unsafe_hash=True):
    """Order whose ``items`` set stays out of the generated equality.

    Table: orders_dc
    """

    __tablename__ = "orders_dc"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    number: Mapped[str] = mapped_column(String(64), default="")
    items: Mapped[Set["DOrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        default_factory=set,
        compare=False,
        repr=False,
    )


class DOrderItem(DataclassBase, unsafe_hash=True):
    """Order line compared on ``id`` and ``product_name`` only.

    Two unsaved items for the same product are equal, so a set keeps one.

    Table: order_items_dc
    """

    __tablename__ = "order_items_dc"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    product_name: Mapped[str] = mapped_column(String(255), default="")
    order_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("orders_dc.id"), init=False, compare=False, repr=False
    )
    order: Mapped[Optional[DOrder]] = relationship(back_populates="items", default=None, compare=False, repr=False)


class DOrderRecursive(DataclassBase):
    """Order whose generated equality includes its items.

    Table: orders_recursive
    """

    __tablename__ = "orders_recursive"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    number: Mapped[str] = mapped_column(String(64), default="")
    items: Mapped[List["DOrderItemRecursive"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        default_factory=list,
    )


class DOrderItemRecursive(DataclassBase):
    """Order line whose generated equality includes the owning order.

    Table: order_items_recursive
    """

    __tablename__ = "order_items_recursive"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    product_name: Mapped[str] = mapped_column(String(255), default="")
    order_id: Mapped[Optional[int]] = mapped_column(ForeignKey("orders_recursive.id"), init=False, repr=False)
    order: Mapped[Optional[DOrderRecursive]] = relationship(back_populates="items", default=None)


# ---------------------------------------------------------------------------
# Identity-equality entities
# ---------------------------------------------------------------------------


class IdentifierEqualityMixin:
    """Equality on type and a non-null primary key, hash constant per class."""

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if other is None or type(self) is not type(other):
            return False
        return self.id is not None and self.id == other.id  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash(type(self))


class PersonSolution(IdentifierEqualityMixin, Base):
    """Table: person_solution"""

    __tablename__ = "person_solution"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"PersonSolution(id={self.id})"


class UserEntity(IdentifierEqualityMixin, Base):
    """Table: users_ok"""

    __tablename__ = "users_ok"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str] = mapped_column(String(255), default="")

    def __repr__(self) -> str:
        return f"UserEntity(id={self.id})"


class SUser(Base):
    """User whose ``__repr__`` only touches eagerly loaded columns.

    Table: s_user
    """

    __tablename__ = "s_user"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), default="")

    gadgets: Mapped[List["SGadget"]] = relationship(back_populates="user", lazy="select")

    def __repr__(self) -> str:
        return f"SUser(id={self.id},email={self.email})"


class SGadget(Base):
    """Table: s_gadget"""

    __tablename__ = "s_gadget"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("s_user.id"), nullable=True)

    user: Mapped[Optional[SUser]] = relationship(back_populates="gadgets", lazy="select")

    def __repr__(self) -> str:
        return f"SGadget(id={self.id},name={self.name})"
