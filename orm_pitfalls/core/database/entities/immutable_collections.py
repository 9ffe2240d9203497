"""
Collection-typed relationship entities (problem 2).

Three company/employee pairs differ only in how ``employees`` is declared:

- ``CompanyReadOnlyProblem``: ``AbstractSet`` (read-only interface). The ORM
  still installs a mutable ``InstrumentedSet`` at runtime, so the declared type
  lies about what callers can do with it.
- ``CompanyMutableSolution``: ``Set``. Declared and runtime types agree.
- ``CompanyFrozenCollection``: ``FrozenSet``. Loaded instances get an
  instrumented mutable set anyway, and assigning an actual ``frozenset`` is
  rejected by the collection adapter.

Every ``employees`` collection is lazy (``lazy="select"``), so a freshly loaded
company has the attribute unloaded until it is first awaited.
"""

from typing import AbstractSet, FrozenSet, Optional, Set

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base


class CompanyReadOnlyProblem(Base):
    """Company whose employees are declared with a read-only set type.

    Table: company_immutable_problem
    """

    __tablename__ = "company_immutable_problem"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # collection_class is required: the annotation names an abstract type
    employees: Mapped[AbstractSet["EmployeeProblem"]] = relationship(
        back_populates="company",
        lazy="select",
        collection_class=set,
    )

    def __repr__(self) -> str:
        return f"CompanyReadOnlyProblem(id={self.id}, name={self.name!r})"


class EmployeeProblem(Base):
    """Table: employee_problem"""

    __tablename__ = "employee_problem"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company_id: Mapped[Optional[int]] = mapped_column(ForeignKey("company_immutable_problem.id"), nullable=True)

    company: Mapped[Optional[CompanyReadOnlyProblem]] = relationship(back_populates="employees")

    def __repr__(self) -> str:
        return f"EmployeeProblem(id={self.id}, name={self.name!r})"


class CompanyMutableSolution(Base):
    """Company whose employees are declared with the mutable ``Set`` type.

    Table: company_immutable_solution
    """

    __tablename__ = "company_immutable_solution"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    employees: Mapped[Set["EmployeeSolution"]] = relationship(back_populates="company", lazy="select")

    def __repr__(self) -> str:
        return f"CompanyMutableSolution(id={self.id}, name={self.name!r})"


class EmployeeSolution(Base):
    """Table: employee_solution"""

    __tablename__ = "employee_solution"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company_id: Mapped[Optional[int]] = mapped_column(ForeignKey("company_immutable_solution.id"), nullable=True)

    company: Mapped[Optional[CompanyMutableSolution]] = relationship(back_populates="employees")

    def __repr__(self) -> str:
        return f"EmployeeSolution(id={self.id}, name={self.name!r})"


class CompanyFrozenCollection(Base):
    """Company whose employees are declared as a truly immutable ``FrozenSet``.

    Table: company_with_truly_immutable
    """

    __tablename__ = "company_with_truly_immutable"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    employees: Mapped[FrozenSet["EmployeeFrozen"]] = relationship(
        back_populates="company",
        lazy="select",
        collection_class=set,
    )

    def __repr__(self) -> str:
        return f"CompanyFrozenCollection(id={self.id}, name={self.name!r})"


class EmployeeFrozen(Base):
    """Table: employee_immutable"""

    __tablename__ = "employee_immutable"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company_id: Mapped[Optional[int]] = mapped_column(ForeignKey("company_with_truly_immutable.id"), nullable=True)

    company: Mapped[Optional[CompanyFrozenCollection]] = relationship(back_populates="employees")

    def __repr__(self) -> str:
        return f"EmployeeFrozen(id={self.id}, name={self.name!r})"
