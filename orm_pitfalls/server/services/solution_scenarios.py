"""
Solution scenarios.

The same scripts as the problem scenarios, run against the entities that play
along with the ORM: plain writable attributes, mutable collection annotations
and equality on type plus primary key.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from orm_pitfalls.core.database.entities.data_classes import PersonSolution
from orm_pitfalls.core.database.entities.immutable_collections import CompanyMutableSolution, EmployeeSolution
from orm_pitfalls.core.database.entities.read_only_fields import PersonWritableSolution
from orm_pitfalls.core.database.utils import build_repositories
from orm_pitfalls.core.inspection import (
    declared_collection_type,
    is_declared_read_only,
    is_instrumented_collection,
    runtime_type_name,
)
from orm_pitfalls.core.logging_config import get_logger
from orm_pitfalls.core.monitoring import log_scenario_outcome

from .problem_scenarios import probe_lazy_employees, seed_company

logger = get_logger(__name__)

Report = Dict[str, Any]


async def val_solution(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    person = await repos.person_writable.save(PersonWritableSolution(name="Alice"))
    person_id = person.id

    session.expunge_all()
    loaded = await repos.person_writable.get_by_id(person_id)
    loaded_name = loaded.name
    loaded.name = "Alice Renamed"
    await session.commit()
    logger.debug(f"Renamed PersonWritableSolution id={person_id}")

    log_scenario_outcome("solutions/val", reproduced=False, person_id=person_id)
    return {
        "solution": "Keep entity attributes writable",
        "approach": "Mapped attributes are plain instance attributes the ORM may set at any time",
        "name": loaded_name,
        "renamedTo": loaded.name,
        "result": "✓ The ORM and application code both update the field through the same attribute!",
    }


async def immutable_collections_solution(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    company_id = await seed_company(
        repos.company_mutable,
        repos.employee_solution,
        CompanyMutableSolution(name="Tech Corp Pro"),
        EmployeeSolution,
        "Employee",
    )
    probe = await probe_lazy_employees(session, repos.company_mutable, company_id)
    await session.commit()

    employees = probe["collection"]
    log_scenario_outcome("solutions/immutable-collections", reproduced=False, company_id=company_id)
    return {
        "solution": "Use Set for collections",
        "approach": "Set[EmployeeSolution] matches the instrumented set the ORM installs",
        "declaredType": declared_collection_type(CompanyMutableSolution, "employees", qualified=True),
        "declaredReadOnly": is_declared_read_only(CompanyMutableSolution, "employees"),
        "employeeCount": probe["count"],
        "actualType": runtime_type_name(employees, qualified=True),
        "isInstrumentedCollection": is_instrumented_collection(employees),
        "result": "✓ The instrumented set works correctly with a mutable collection annotation!",
    }


async def data_class_solution(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    person = await repos.person_solution.save(PersonSolution(name="Bob", email="bob@example.com"))

    entity_set = {person}
    contains_before = person in entity_set
    person.name = "Bob Updated"
    contains_after = person in entity_set
    await session.commit()

    log_scenario_outcome("solutions/data-class", reproduced=not contains_after, person_id=person.id)
    return {
        "solution": "Regular mapped class",
        "approach": "Custom __eq__/__hash__: compare type and id, constant hash",
        "setContainsBefore": contains_before,
        "setContainsAfter": contains_after,
        "result": "✓ Set membership survives the modification!" if contains_after else "✗ Set lookup failed",
    }


async def all_solutions(session: AsyncSession) -> Report:
    return {
        "solution1": await val_solution(session),
        "solution2": await immutable_collections_solution(session),
        "solution3": await data_class_solution(session),
    }
