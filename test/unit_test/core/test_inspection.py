"""Unit tests for the runtime inspection helpers."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from orm_pitfalls.core.database.entities.data_classes import DOrder, DUser
from orm_pitfalls.core.database.entities.immutable_collections import (
    CompanyFrozenCollection,
    CompanyMutableSolution,
    CompanyReadOnlyProblem,
    EmployeeSolution,
)
from orm_pitfalls.core.database.entities.read_only_fields import PersonWritableSolution
from orm_pitfalls.core.inspection import (
    declared_collection_type,
    is_declared_read_only,
    is_initialized,
    is_instrumented_collection,
    runtime_type_name,
)


class TestIsInitialized:
    def test_unknown_attribute_raises(self):
        with pytest.raises(AttributeError, match="no mapped attribute 'missing'"):
            is_initialized(PersonWritableSolution(name="x"), "missing")

    def test_default_factory_collection_is_loaded(self):
        assert is_initialized(DOrder(number="ORD-1"), "items")

    def test_transient_collection_has_nothing_to_load(self):
        company = CompanyMutableSolution(name="Tech Corp")
        assert is_initialized(company, "employees")

        assert len(company.employees) == 0
        assert is_initialized(company, "employees")

    @pytest.mark.asyncio
    async def test_pending_collection_has_nothing_to_load(self, session: AsyncSession):
        company = CompanyMutableSolution(name="Tech Corp")
        session.add(company)

        assert is_initialized(company, "employees")

    @pytest.mark.asyncio
    async def test_persistent_collection_stays_unloaded_until_awaited(self, session: AsyncSession):
        company = CompanyMutableSolution(name="Tech Corp")
        session.add(company)
        session.add(EmployeeSolution(name="Alice", company=company))
        await session.flush()
        company_id = company.id
        session.expunge_all()

        loaded = await session.get(CompanyMutableSolution, company_id)
        assert is_initialized(loaded, "name")
        assert not is_initialized(loaded, "employees")

        await loaded.awaitable_attrs.employees
        assert is_initialized(loaded, "employees")


class TestIsInstrumentedCollection:
    @pytest.mark.parametrize("value", [set(), frozenset(), [], {}, None, "text"])
    def test_plain_values_are_not_instrumented(self, value):
        assert not is_instrumented_collection(value)

    def test_set_collection_is_instrumented(self):
        assert is_instrumented_collection(DOrder().items)

    def test_list_collection_is_instrumented(self):
        assert is_instrumented_collection(DUser().gadgets)


class TestRuntimeTypeName:
    @pytest.mark.parametrize(
        "value,qualified,expected",
        [
            (None, False, "None"),
            (None, True, "None"),
            (set(), False, "set"),
            (set(), True, "builtins.set"),
            (frozenset(), False, "frozenset"),
        ],
    )
    def test_plain_values(self, value, qualified, expected):
        assert runtime_type_name(value, qualified=qualified) == expected

    def test_instrumented_set(self):
        items = DOrder().items

        assert runtime_type_name(items) == "InstrumentedSet"
        assert runtime_type_name(items, qualified=True) == "sqlalchemy.orm.collections.InstrumentedSet"


class TestDeclaredCollectionType:
    @pytest.mark.parametrize(
        "entity_class,expected,qualified_expected,read_only",
        [
            (CompanyReadOnlyProblem, "Set", "collections.abc.Set", True),
            (CompanyMutableSolution, "set", "builtins.set", False),
            (CompanyFrozenCollection, "frozenset", "builtins.frozenset", True),
            (DUser, "list", "builtins.list", False),
        ],
    )
    def test_declared_types(self, entity_class, expected, qualified_expected, read_only):
        attribute = "gadgets" if entity_class is DUser else "employees"

        assert declared_collection_type(entity_class, attribute) == expected
        assert declared_collection_type(entity_class, attribute, qualified=True) == qualified_expected
        assert is_declared_read_only(entity_class, attribute) is read_only

    def test_missing_annotation_raises(self):
        with pytest.raises(AttributeError, match="declares no annotation"):
            declared_collection_type(CompanyMutableSolution, "missing")
