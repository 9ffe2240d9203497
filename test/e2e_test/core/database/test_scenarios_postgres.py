"""End-to-end tests for the scenarios on PostgreSQL.

The same pitfalls must reproduce on a server database as on SQLite: the ORM
behaviour does not depend on the dialect.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from orm_pitfalls.server.services import problem_scenarios, solution_scenarios

pytestmark = [pytest.mark.asyncio, pytest.mark.postgres]


class TestProblemScenariosOnPostgres:
    async def test_read_only_field_is_overwritten(self, postgres_session: AsyncSession):
        report = await problem_scenarios.val_problem(postgres_session)

        assert report["nameAfterRefresh"] == "John (changed in database)"
        assert report["assignmentError"] == "FrozenInstanceError"

    async def test_read_only_collection_is_instrumented(self, postgres_session: AsyncSession):
        report = await problem_scenarios.immutable_collections_problem(postgres_session)

        assert report["isInstrumentedCollection"] is True
        assert report["employeeCount"] == problem_scenarios.EMPLOYEES_PER_COMPANY

    async def test_lazy_loading(self, postgres_session: AsyncSession):
        report = await problem_scenarios.lazy_loading_verdicts(postgres_session)

        assert report["scenario1_mutable"]["initializedBeforeAccess"] is False
        assert report["scenario1_mutable"]["initializedAfterAccess"] is True
        assert report["scenario2_readOnlyType"]["isInstrumentedCollection"] is True

    async def test_copy_inserts_then_merges(self, postgres_session: AsyncSession):
        report = await problem_scenarios.copy_causes_issues(postgres_session)

        assert report["duplicateInserted"] is True
        assert report["detachedMerged"] is True
        assert report["finalCount"] == report["countAfterClone"]

    async def test_set_collapses_duplicates(self, postgres_session: AsyncSession):
        report = await problem_scenarios.set_collapses_duplicates(postgres_session)

        assert report["persistedItemCount"] == 1

    async def test_detached_repr(self, postgres_session: AsyncSession):
        report = await problem_scenarios.to_string_on_detached(postgres_session)

        assert report["dataClassErrorType"] == "DetachedInstanceError"


class TestSolutionScenariosOnPostgres:
    async def test_all_solutions(self, postgres_session: AsyncSession):
        report = await solution_scenarios.all_solutions(postgres_session)

        assert report["solution1"]["renamedTo"] == "Alice Renamed"
        assert report["solution2"]["declaredReadOnly"] is False
        assert report["solution3"]["setContainsAfter"] is True


class TestEndpointsOnPostgres:
    async def test_all_problems(self, postgres_client: AsyncClient):
        response = await postgres_client.get("/problems/all")

        assert response.status_code == 200
        body = response.json()
        assert body["problem1"]["assignmentError"] == "FrozenInstanceError"
        assert body["problem3"]["hashEqualityBroken"] is True

    async def test_unknown_person_returns_404(self, postgres_client: AsyncClient):
        missing = await postgres_client.get("/problems/val/123456")

        assert missing.status_code == 404
