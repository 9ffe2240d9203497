"""
Problem scenarios.

Each coroutine runs one short script against the ORM inside the given session
(persist, clear, reload, inspect) and returns a report of what it observed.
Report keys are camelCase. Errors that a scenario exists to demonstrate are
caught and reported; anything else propagates to the exception handlers.
"""

from dataclasses import FrozenInstanceError, replace
from typing import Any, Dict

from pydantic import ValidationError
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import DetachedInstanceError

from orm_pitfalls.core.database.entities.data_classes import (
    DGadget,
    DOrder,
    DOrderItem,
    DOrderItemRecursive,
    DOrderRecursive,
    DUser,
    EmployeeDataClass,
    PersonDataClassProblem,
    SGadget,
    SUser,
    UserEntity,
)
from orm_pitfalls.core.database.entities.immutable_collections import (
    CompanyFrozenCollection,
    CompanyMutableSolution,
    CompanyReadOnlyProblem,
    EmployeeFrozen,
    EmployeeProblem,
    EmployeeSolution,
)
from orm_pitfalls.core.database.entities.model_classes import PersonModelProblem
from orm_pitfalls.core.database.entities.read_only_fields import PersonReadOnlyProblem
from orm_pitfalls.core.database.repositories import AsyncCrudRepository
from orm_pitfalls.core.database.utils import build_repositories
from orm_pitfalls.core.inspection import (
    declared_collection_type,
    is_declared_read_only,
    is_initialized,
    is_instrumented_collection,
    runtime_type_name,
)
from orm_pitfalls.core.logging_config import get_logger
from orm_pitfalls.core.monitoring import log_scenario_outcome

logger = get_logger(__name__)

Report = Dict[str, Any]

EMPLOYEES_PER_COMPANY = 3


# ---------------------------------------------------------------------------
# Shared steps
# ---------------------------------------------------------------------------


async def seed_company(
    company_repo: AsyncCrudRepository[Any],
    employee_repo: AsyncCrudRepository[Any],
    company: Any,
    employee_cls: type,
    prefix: str,
    count: int = EMPLOYEES_PER_COMPANY,
) -> int:
    """Persist a company with ``count`` employees and return the company id."""
    company = await company_repo.save(company)
    for i in range(count):
        await employee_repo.save(employee_cls(name=f"{prefix} {i}", company=company))
    logger.debug(f"Seeded {type(company).__name__} id={company.id} with {count} employees")
    return company.id


async def probe_lazy_employees(
    session: AsyncSession, company_repo: AsyncCrudRepository[Any], company_id: int
) -> Dict[str, Any]:
    """Reload a company in a cleared session and observe its lazy ``employees``.

    Returns:
        The loaded collection plus its initialized state before and after the
        first access and its size.
    """
    session.expunge_all()
    loaded = await company_repo.get_by_id(company_id)
    before = is_initialized(loaded, "employees")
    employees = await loaded.awaitable_attrs.employees
    return {
        "collection": employees,
        "before": before,
        "after": is_initialized(loaded, "employees"),
        "count": len(employees),
    }


# ---------------------------------------------------------------------------
# Problem 1: read-only field
# ---------------------------------------------------------------------------


async def val_problem(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    person = await repos.person_read_only.save(PersonReadOnlyProblem(name="John"))
    person_id = person.id

    session.expunge_all()
    loaded = await repos.person_read_only.get_by_id(person_id)
    loaded_name = loaded.name

    # change the row with a Core statement so the ORM only learns about it on refresh
    await session.execute(
        update(PersonReadOnlyProblem.__table__)
        .where(PersonReadOnlyProblem.__table__.c.id == person_id)
        .values(name="John (changed in database)")
    )
    await session.refresh(loaded)
    refreshed_name = loaded.name

    assignment_error = None
    try:
        loaded.name = "Jane"
    except FrozenInstanceError as exc:
        assignment_error = type(exc).__name__
    await session.commit()

    overwritten = refreshed_name != loaded_name
    log_scenario_outcome("val", reproduced=overwritten, person_id=person_id)
    return {
        "problem": "Read-only field",
        "issue": "write-once 'name' was populated and then overwritten by the ORM",
        "name": loaded_name,
        "nameAfterRefresh": refreshed_name,
        "assignmentError": assignment_error,
        "result": "✗ Immutability violated by the ORM!" if overwritten else "✓ Field kept its value",
    }


# ---------------------------------------------------------------------------
# Problem 2: read-only collection types and lazy loading
# ---------------------------------------------------------------------------


async def immutable_collections_problem(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    company_id = await seed_company(
        repos.company_read_only,
        repos.employee_problem,
        CompanyReadOnlyProblem(name="Tech Corp"),
        EmployeeProblem,
        "Employee",
    )

    try:
        probe = await probe_lazy_employees(session, repos.company_read_only, company_id)
    except (SQLAlchemyError, TypeError) as exc:
        logger.warning(f"Loading read-only collection failed: {exc}")
        await session.rollback()
        return {
            "problem": "Immutable Collections",
            "error": str(exc),
            "errorType": type(exc).__name__,
            "result": f"✗ Exception occurred! {type(exc).__name__}",
        }
    await session.commit()

    employees = probe["collection"]
    instrumented = is_instrumented_collection(employees)
    log_scenario_outcome("immutable-collections", reproduced=instrumented, company_id=company_id)
    report: Report = {
        "problem": "Immutable Collections",
        "declaredType": declared_collection_type(CompanyReadOnlyProblem, "employees", qualified=True),
        "declaredReadOnly": is_declared_read_only(CompanyReadOnlyProblem, "employees"),
        "employeeCount": probe["count"],
        "actualType": runtime_type_name(employees, qualified=True),
        "isInstrumentedCollection": instrumented,
    }
    if instrumented:
        report["issue"] = "AbstractSet[Employee] declared but the ORM installed a mutable set"
        report["result"] = "✗ Type safety violated! The read-only set is mutable at runtime!"
    else:
        report["issue"] = "AbstractSet[Employee] prevented the ORM from instrumenting the collection"
        report["result"] = "✗ The ORM could not instrument the collection!"
    return report


async def _observe_two_lazy_scenarios(session: AsyncSession) -> Dict[str, Dict[str, Any]]:
    repos = build_repositories(session)

    mutable_id = await seed_company(
        repos.company_mutable,
        repos.employee_solution,
        CompanyMutableSolution(name="Tech Corp (mutable set)"),
        EmployeeSolution,
        "Employee",
    )
    mutable = await probe_lazy_employees(session, repos.company_mutable, mutable_id)

    frozen_id = await seed_company(
        repos.company_frozen,
        repos.employee_frozen,
        CompanyFrozenCollection(name="ACME Corp (frozenset declared)"),
        EmployeeFrozen,
        "Worker",
    )
    frozen = await probe_lazy_employees(session, repos.company_frozen, frozen_id)
    await session.commit()
    return {"mutable": mutable, "frozen": frozen}


async def lazy_loading(session: AsyncSession) -> Report:
    observed = await _observe_two_lazy_scenarios(session)
    mutable, frozen = observed["mutable"], observed["frozen"]

    lazy_ok = not mutable["before"] and mutable["after"] and mutable["count"] == EMPLOYEES_PER_COMPANY
    log_scenario_outcome("lazy-loading", reproduced=is_instrumented_collection(frozen["collection"]))
    return {
        "demonstration": "Lazy Loading with one-to-many - Two Scenarios",
        "scenario1_mutableSet": {
            "description": "Set[EmployeeSolution] - lazy loading works",
            "collectionType": runtime_type_name(mutable["collection"]),
            "isInstrumentedCollection": is_instrumented_collection(mutable["collection"]),
            "initializedBeforeAccess": mutable["before"],
            "initializedAfterAccess": mutable["after"],
            "employeeCount": mutable["count"],
            "result": (
                "✓ Lazy loading works! Collection was unloaded, then loaded on first access"
                if lazy_ok
                else "✗ Unexpected lazy behavior"
            ),
        },
        "scenario2_frozenSetDeclared": {
            "description": "FrozenSet[EmployeeFrozen] declared - the ORM still installs a mutable set",
            "declaredType": declared_collection_type(CompanyFrozenCollection, "employees"),
            "collectionType": runtime_type_name(frozen["collection"]),
            "isInstrumentedCollection": is_instrumented_collection(frozen["collection"]),
            "initializedBeforeAccess": frozen["before"],
            "initializedAfterAccess": frozen["after"],
            "employeeCount": frozen["count"],
            "result": f"⚠ Declared frozenset, got {runtime_type_name(frozen['collection'])} "
            f"with {frozen['count']} employees",
        },
        "conclusion": "Declare relationship collections with their mutable type so annotations match runtime.",
    }


async def lazy_loading_verdicts(session: AsyncSession) -> Report:
    observed = await _observe_two_lazy_scenarios(session)
    mutable, frozen = observed["mutable"], observed["frozen"]

    if not mutable["before"] and mutable["after"] and mutable["count"] == EMPLOYEES_PER_COMPANY:
        mutable_result = "✓ Lazy loading works (unloaded → loaded on first access)"
    else:
        mutable_result = (
            f"✗ Unexpected lazy behavior (before={mutable['before']}, "
            f"after={mutable['after']}, count={mutable['count']})"
        )

    is_proxy = is_instrumented_collection(frozen["collection"])
    frozen_before = frozen["before"] if is_proxy else None
    frozen_after = frozen["after"] if is_proxy else None
    if is_proxy and frozen_before is False and frozen_after is True and frozen["count"] == EMPLOYEES_PER_COMPANY:
        frozen_result = (
            "⚠ Declared type is immutable, but the ORM installed an instrumented set; "
            "lazy loading works (semantic mismatch)."
        )
    elif not is_proxy and frozen["count"] == 0:
        frozen_result = "✗ Lazy loading failed (the ORM did not replace the immutable collection)."
    else:
        frozen_result = (
            f"ℹ Observed state: isInstrumented={is_proxy}, before={frozen_before}, "
            f"after={frozen_after}, count={frozen['count']}"
        )

    log_scenario_outcome("lazy-loading2", reproduced=is_proxy)
    return {
        "scenario1_mutable": {
            "type": "Set[EmployeeSolution]",
            "initializedBeforeAccess": mutable["before"],
            "initializedAfterAccess": mutable["after"],
            "count": mutable["count"],
            "result": mutable_result,
        },
        "scenario2_readOnlyType": {
            "type": "FrozenSet[EmployeeFrozen]",
            "isInstrumentedCollection": is_proxy,
            "initializedBeforeAccess": frozen_before,
            "initializedAfterAccess": frozen_after,
            "count": frozen["count"],
            "result": frozen_result,
        },
        "conclusion": (
            "The ORM replaces even an immutable-typed collection with an instrumented one; "
            "the real issue is the semantic mismatch, not a lazy loading failure."
        ),
    }


async def frozen_collection_assignment(session: AsyncSession) -> Report:
    """Assign a real ``frozenset`` to a relationship declared as ``FrozenSet``."""
    company = CompanyFrozenCollection(name="Frozen Corp")
    worker = EmployeeFrozen(name="Worker")

    error = None
    try:
        company.employees = frozenset({worker})
    except TypeError as exc:
        error = exc

    company.employees = {worker}
    runtime_type = runtime_type_name(company.employees)

    log_scenario_outcome("immutable-collections/frozen-assignment", reproduced=error is not None)
    return {
        "problem": "Frozen collection assignment",
        "declaredType": declared_collection_type(CompanyFrozenCollection, "employees"),
        "assignedType": "frozenset",
        "error": str(error) if error else None,
        "errorType": type(error).__name__ if error else None,
        "mutableSetAccepted": is_instrumented_collection(company.employees),
        "runtimeType": runtime_type,
        "result": (
            "✗ The declared frozenset type cannot be honoured: only a mutable set is accepted"
            if error
            else "✓ frozenset accepted"
        ),
    }


# ---------------------------------------------------------------------------
# Problem 3: data classes as entities
# ---------------------------------------------------------------------------


async def data_class_problem(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    person = await repos.person_data_class.save(PersonDataClassProblem(name="Alice", email="alice@example.com"))

    entity_set = {person}
    contains_before = person in entity_set
    person.name = "Alice Updated"
    contains_after = person in entity_set
    await session.commit()

    log_scenario_outcome("data-class", reproduced=not contains_after, person_id=person.id)
    return {
        "problem": "Data Class as Entity",
        "issue": "Generated __eq__/__hash__ use ALL fields",
        "setContainsBefore": contains_before,
        "setContainsAfter": contains_after,
        "hashEqualityBroken": not contains_after,
    }


async def field_change_breaks_set(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    employee = await repos.employee_data_class.save(EmployeeDataClass(name="John", department="Sales"))
    cache = {employee}

    contains_before = employee in cache
    # same row, different non-key field
    employee.department = "Support"
    contains_after = employee in cache
    await session.commit()

    log_scenario_outcome("data-class/field-change-breaks-set", reproduced=not contains_after)
    return {
        "problem": "Data-class: changing a non-ID field changes hash/equality",
        "issue": "Non-ID mutation changed data-class hash/equality; Set no longer recognizes the same row",
        "containsBefore": contains_before,
        "containsAfter": contains_after,
        "setLookupBroken": not contains_after,
    }


async def set_collapses_duplicates(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    order = DOrder(number="ORD-001")
    order.items.add(DOrderItem(product_name="Apple"))
    # equal by fields, so the set keeps the first one
    order.items.add(DOrderItem(product_name="Apple"))
    set_size = len(order.items)

    order = await repos.d_orders.save(order)
    persisted = await session.scalar(
        select(func.count()).select_from(DOrderItem).where(DOrderItem.order_id == order.id)
    )
    await session.commit()

    expected = 2
    log_scenario_outcome("data-class/set-collapses-duplicates", reproduced=persisted < expected)
    return {
        "problem": "Data-class Set collapses duplicates",
        "issue": "Data-class equality collapses identical children in a set collection",
        "orderId": order.id,
        "expectedSetSize": expected,
        "actualSetSize": set_size,
        "persistedItemCount": persisted,
        "duplicatesCollapsed": set_size < expected,
    }


async def regular_entity_stable_hash(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    user = UserEntity(name="Bob", email="bob@example.com")
    cache = {user}
    await repos.users.save(user)
    contains_after = user in cache
    await session.commit()

    log_scenario_outcome("data-class/regular-entity-stable-hash", reproduced=not contains_after)
    return {
        "solution": "Regular entity: hash stays stable",
        "approach": "Equality on type and id, constant hash per class",
        "userId": user.id,
        "containsAfterPersist": contains_after,
        "hashStable": contains_after,
    }


async def persist_changes_data_class_hash(session: AsyncSession) -> Report:
    repos = build_repositories(session)
    employee = EmployeeDataClass(name="Dana", department="Operations")
    cache = {employee}
    contains_before = employee in cache
    await repos.employee_data_class.save(employee)
    contains_after = employee in cache
    await session.commit()

    log_scenario_outcome("data-class/persist-changes-hash", reproduced=not contains_after)
    return {
        "problem": "Data-class: persisting assigns the id and moves the hash",
        "issue": "The id is part of the generated hash, so the flush that assigns it hides the object in the set",
        "idAssigned": employee.id,
        "containsBeforePersist": contains_before,
        "containsAfterPersist": contains_after,
        "hashChangedOnPersist": not contains_after,
    }


async def copy_causes_issues(session: AsyncSession) -> Report:
    repo = build_repositories(session).person_data_class
    rows_before = await repo.count()

    original = await repo.save(PersonDataClassProblem(name="Alice", email="a@test.org"))
    original_id = original.id

    # cleared id: treated as new, INSERTs another row
    await repo.save(replace(original, id=None, name="Alice v2"))
    count_after_clone = await repo.count()

    # kept id: detached copy is merged, UPDATEs the existing row
    session.expunge_all()
    await repo.save(replace(original, name="Alice merged"))
    final_count = await repo.count()
    updated = await repo.get_by_id(original_id)
    await session.commit()

    duplicate_inserted = count_after_clone - rows_before > 1
    detached_merged = updated.name == "Alice merged" and final_count == count_after_clone
    log_scenario_outcome(
        "data-class/copy-causes-issues", reproduced=duplicate_inserted and detached_merged, original_id=original_id
    )
    return {
        "problem": "Data-class replace(): duplicate insert when id cleared; merge detached when id kept",
        "rowsBefore": rows_before,
        "countAfterClone": count_after_clone,
        "finalCount": final_count,
        "updatedName": updated.name,
        "duplicateInserted": duplicate_inserted,
        "detachedMerged": detached_merged,
    }


async def to_string_on_detached(session: AsyncSession) -> Report:
    repos = build_repositories(session)

    d_user = await repos.d_users.save(DUser(email="u@test.org"))
    await repos.d_gadgets.save(DGadget(name="g1", user=d_user))
    await repos.d_gadgets.save(DGadget(name="g2", user=d_user))
    s_user = await repos.s_users.save(SUser(email="u@test.org"))
    await repos.s_gadgets.save(SGadget(name="g1", user=s_user))
    await repos.s_gadgets.save(SGadget(name="g2", user=s_user))
    d_user_id, s_user_id = d_user.id, s_user.id
    await session.commit()

    session.expunge_all()
    loaded_d_user = await repos.d_users.get_by_id(d_user_id)
    loaded_s_user = await repos.s_users.get_by_id(s_user_id)
    # detach both with their lazy gadgets still unloaded
    session.expunge_all()

    data_class_error = None
    try:
        repr(loaded_d_user)
    except DetachedInstanceError as exc:
        data_class_error = exc
    regular_repr = repr(loaded_s_user)

    log_scenario_outcome("data-class/to-string-detached", reproduced=data_class_error is not None)
    return {
        "problem": "Data-class repr walks lazy relationships",
        "issue": "The generated __repr__ includes the lazy 'gadgets' list, which cannot load once detached",
        "dataClassError": str(data_class_error) if data_class_error else None,
        "dataClassErrorType": type(data_class_error).__name__ if data_class_error else None,
        "regularRepr": regular_repr,
        "result": (
            "✗ repr() of a detached data-class entity raised!" if data_class_error else "✓ repr() succeeded"
        ),
    }


async def recursive_equality(session: AsyncSession) -> Report:
    """Compare two structurally equal orders whose items point back at them."""
    first = DOrderRecursive(number="ORD-RECURSIVE")
    DOrderItemRecursive(product_name="Apple", order=first)
    second = DOrderRecursive(number="ORD-RECURSIVE")
    DOrderItemRecursive(product_name="Apple", order=second)

    error = None
    equal = None
    try:
        equal = first == second
    except RecursionError as exc:
        error = exc

    log_scenario_outcome("data-class/recursive-equality", reproduced=error is not None)
    return {
        "problem": "Recursive structural equality",
        "issue": "Order equality compares items, item equality compares the order, forever",
        "itemsPerOrder": len(first.items),
        "hashable": DOrderRecursive.__hash__ is not None,
        "error": str(error) if error else None,
        "errorType": type(error).__name__ if error else None,
        "equal": equal,
        "stackExhausted": error is not None,
    }


async def model_equality(session: AsyncSession) -> Report:
    """Equality and hashing of SQLModel table rows."""
    repos = build_repositories(session)
    first = PersonModelProblem(name="Eve", email="eve@example.com")
    second = PersonModelProblem(name="Eve", email="eve@example.com")
    equal_before_save = first == second

    try:
        hash(first)
        hashable = True
    except TypeError:
        hashable = False

    try:
        PersonModelProblem(email="no-name@example.com")
        validation_skipped = True
    except ValidationError:
        validation_skipped = False

    first = await repos.person_model.save(first)
    second = await repos.person_model.save(second)
    equal_after_save = first == second
    await session.commit()

    log_scenario_outcome("data-class/model-equality", reproduced=not hashable or equal_before_save)
    return {
        "problem": "SQLModel table models use pydantic equality",
        "issue": "Field-based __eq__ removes the default hash and decides row identity by content",
        "equalBeforeSave": equal_before_save,
        "equalAfterSave": equal_after_save,
        "hashable": hashable,
        "validationSkipped": validation_skipped,
        "ids": [first.id, second.id],
    }


async def all_problems(session: AsyncSession) -> Report:
    return {
        "problem1": await val_problem(session),
        "problem2": await immutable_collections_problem(session),
        "problem3": await data_class_problem(session),
    }
