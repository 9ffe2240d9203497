"""
Solution Endpoints.

The problem scenarios rerun against ORM-friendly entities.

Endpoints:
- GET /problems/solutions/val - writable attributes
- GET /problems/solutions/immutable-collections - mutable collection annotation
- GET /problems/solutions/data-class - equality on type and id
- GET /problems/solutions/all - all three
"""

from fastapi import APIRouter

from orm_pitfalls.core.logging_config import get_logger
from orm_pitfalls.core.models.io import ErrorResponse
from orm_pitfalls.server.services import solution_scenarios
from orm_pitfalls.server.services.deps import SessionDep

logger = get_logger(__name__)

router = APIRouter(responses={500: {"model": ErrorResponse, "description": "Unexpected ORM or server error"}})


@router.get("/val", summary="Writable Attributes")
async def val_solution(session: SessionDep) -> dict:
    return await solution_scenarios.val_solution(session)


@router.get("/immutable-collections", summary="Mutable Collection Annotation")
async def immutable_collections_solution(session: SessionDep) -> dict:
    return await solution_scenarios.immutable_collections_solution(session)


@router.get("/data-class", summary="Identity-based Equality")
async def data_class_solution(session: SessionDep) -> dict:
    return await solution_scenarios.data_class_solution(session)


@router.get("/all", summary="Run All Solutions")
async def all_solutions(session: SessionDep) -> dict:
    logger.info("Running all solution scenarios")
    return await solution_scenarios.all_solutions(session)
