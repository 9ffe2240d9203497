"""
SQLModel table models.

A SQLModel class is a pydantic model and a mapped class at once. Pydantic
supplies a field-based ``__eq__``, so the class loses its default hash and
two rows can only be told apart by what pydantic decides to compare. Table
models also skip validation on construction, so required fields may be left
unset until the database rejects the row.
"""

from typing import Optional

from sqlmodel import Field, SQLModel


class PersonModelProblem(SQLModel, table=True):
    """Person declared as a SQLModel table model.

    Table: person_model_problem
    """

    __tablename__ = "person_model_problem"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, description="Display name")
    email: Optional[str] = Field(default=None, max_length=255, description="Contact address")
