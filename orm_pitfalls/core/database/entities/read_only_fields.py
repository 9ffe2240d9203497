"""
Read-only field entities (problem 1).

``PersonReadOnlyProblem.name`` is write-once for application code, yet the ORM
populates it on load and overwrites it on refresh, because instrumentation
writes the instance state directly instead of calling ``__setattr__``.
``PersonWritableSolution`` keeps every mapped attribute plainly writable.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base, ReadOnlyFieldsMixin


class PersonReadOnlyProblem(ReadOnlyFieldsMixin, Base):
    """Entity whose ``name`` rejects reassignment, like a ``val`` property.

    Table: person_val_problem
    """

    __tablename__ = "person_val_problem"
    __read_only_fields__ = ("name",)

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"PersonReadOnlyProblem(id={self.id}, name={self.name!r})"


class PersonWritableSolution(Base):
    """Entity with plain writable attributes, which is what the ORM expects.

    Table: person_val_solution
    """

    __tablename__ = "person_val_solution"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"PersonWritableSolution(id={self.id}, name={self.name!r})"
