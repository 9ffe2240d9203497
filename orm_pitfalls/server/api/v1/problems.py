"""
Problem Endpoints.

Each endpoint runs one problem scenario in the request's session and returns
the scenario report. These are playground surfaces; the test-suite asserts
the same behaviours directly.

Endpoints:
- GET /problems/val - Problem 1: read-only field
- GET /problems/immutable-collections - Problem 2: read-only collection types
- GET /problems/lazy-loading - lazy loading of two collection declarations
- GET /problems/data-class - Problem 3: data classes as entities
- GET /problems/all - run the three headline problems
"""

from fastapi import APIRouter

from orm_pitfalls.core.database.utils import build_repositories
from orm_pitfalls.core.logging_config import get_logger
from orm_pitfalls.core.models.io import ErrorResponse, NotFoundResponse
from orm_pitfalls.server.services import problem_scenarios
from orm_pitfalls.server.services.deps import SessionDep

logger = get_logger(__name__)

router = APIRouter(responses={500: {"model": ErrorResponse, "description": "Unexpected ORM or server error"}})


# ---------------------------------------------------------------------------
# Problem 1 & 2
# ---------------------------------------------------------------------------


@router.get(
    "/val",
    summary="Read-only Field",
    description="Persist an entity with a write-once attribute, reload and refresh it, and show the ORM rewriting it.",
)
async def val_problem(session: SessionDep) -> dict:
    return await problem_scenarios.val_problem(session)


@router.get(
    "/val/{person_id}",
    summary="Read Back a Read-only Person",
    description="Load a person persisted by the read-only field scenario.",
    responses={404: {"model": NotFoundResponse, "description": "No person with this id"}},
)
async def get_read_only_person(person_id: int, session: SessionDep) -> dict:
    """
    Get a person persisted by ``/problems/val``.

    Unknown ids are answered with 404 by the entity-not-found handler.
    """
    person = await build_repositories(session).person_read_only.get_by_id(person_id)
    return {"id": person.id, "name": person.name}


@router.get(
    "/immutable-collections",
    summary="Read-only Collection Types",
    description="Show that a relationship annotated as AbstractSet holds a mutable instrumented set at runtime.",
)
async def immutable_collections_problem(session: SessionDep) -> dict:
    return await problem_scenarios.immutable_collections_problem(session)


@router.get(
    "/immutable-collections/frozen-assignment",
    summary="Frozenset Assignment",
    description="Assign a frozenset to a relationship annotated as FrozenSet and report the ORM's rejection.",
)
async def frozen_collection_assignment(session: SessionDep) -> dict:
    return await problem_scenarios.frozen_collection_assignment(session)


@router.get(
    "/lazy-loading",
    summary="Lazy Loading with One-to-many",
    description="Compare lazy loading of a Set-annotated and a FrozenSet-annotated collection.",
)
async def lazy_loading(session: SessionDep) -> dict:
    return await problem_scenarios.lazy_loading(session)


@router.get(
    "/lazy-loading2",
    summary="Lazy Loading Verdicts",
    description="Same two lazy loading scenarios, each with a verdict string.",
)
async def lazy_loading_verdicts(session: SessionDep) -> dict:
    return await problem_scenarios.lazy_loading_verdicts(session)


# ---------------------------------------------------------------------------
# Problem 3
# ---------------------------------------------------------------------------


@router.get(
    "/data-class",
    summary="Data Class as Entity",
    description="Rename a persisted dataclass entity held in a set and check membership before and after.",
)
async def data_class_problem(session: SessionDep) -> dict:
    return await problem_scenarios.data_class_problem(session)


@router.get("/data-class/field-change-breaks-set", summary="Field Change Breaks Set Lookup")
async def field_change_breaks_set(session: SessionDep) -> dict:
    return await problem_scenarios.field_change_breaks_set(session)


@router.get("/data-class/set-collapses-duplicates", summary="Set Collapses Duplicate Children")
async def set_collapses_duplicates(session: SessionDep) -> dict:
    return await problem_scenarios.set_collapses_duplicates(session)


@router.get("/data-class/regular-entity-stable-hash", summary="Regular Entity Keeps a Stable Hash")
async def regular_entity_stable_hash(session: SessionDep) -> dict:
    return await problem_scenarios.regular_entity_stable_hash(session)


@router.get("/data-class/persist-changes-hash", summary="Persisting Changes a Data-class Hash")
async def persist_changes_data_class_hash(session: SessionDep) -> dict:
    return await problem_scenarios.persist_changes_data_class_hash(session)


@router.get(
    "/data-class/copy-causes-issues",
    summary="replace() Duplicates or Merges Rows",
    description="A replace() copy without id is inserted again; one keeping the id is merged over the stored row.",
)
async def copy_causes_issues(session: SessionDep) -> dict:
    return await problem_scenarios.copy_causes_issues(session)


@router.get("/data-class/to-string-detached", summary="repr() of a Detached Data-class Entity")
async def to_string_on_detached(session: SessionDep) -> dict:
    return await problem_scenarios.to_string_on_detached(session)


@router.get("/data-class/recursive-equality", summary="Recursive Structural Equality")
async def recursive_equality(session: SessionDep) -> dict:
    return await problem_scenarios.recursive_equality(session)


@router.get("/data-class/model-equality", summary="SQLModel Row Equality")
async def model_equality(session: SessionDep) -> dict:
    return await problem_scenarios.model_equality(session)


@router.get(
    "/all",
    summary="Run All Problems",
    description="Run the read-only field, read-only collection and data class problems in one request.",
)
async def all_problems(session: SessionDep) -> dict:
    logger.info("Running all problem scenarios")
    return await problem_scenarios.all_problems(session)
