"""Tests for BaseRepositoryImpl."""

from unittest.mock import MagicMock

import pytest

from pydantic import BaseModel as PydanticBaseModel
from sqlalchemy.exc import SQLAlchemyError

from src.domain.entities.base import BaseEntity
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.base_repository_impl import (
    BaseRepositoryImpl,
    row_to_dict,
)
from tests.fixtures.row_factories import make_result


class MockEntity(BaseEntity):
    """Mock entity for testing BaseRepositoryImpl."""

    def __init__(self, id: int | None = None, name: str = ""):
        super().__init__(id=id)
        self.name = name


class MockModel(PydanticBaseModel):
    id: int | None = None
    name: str


class MockRepository(BaseRepositoryImpl[MockEntity]):
    table_name = "mock_table"

    def __init__(self, session: MagicMock):
        super().__init__(session, MockModel)

    async def create(self, entity: MockEntity) -> MockEntity:
        return entity

    def _to_entity(self, model: MockModel) -> MockEntity:
        return MockEntity(id=model.id, name=model.name)


class TestRowToDict:
    def test_named_tuple_like_row(self) -> None:
        row = MagicMock()
        row._asdict.return_value = {"id": 1}

        assert row_to_dict(row) == {"id": 1}

    def test_mapping_row(self) -> None:
        class Row:
            _mapping = {"id": 2}

        assert row_to_dict(Row()) == {"id": 2}

    def test_plain_dict(self) -> None:
        assert row_to_dict({"id": 3}) == {"id": 3}


class TestBaseRepositoryImpl:
    @pytest.fixture
    def repository(self, mock_session: MagicMock) -> MockRepository:
        return MockRepository(mock_session)

    @pytest.mark.asyncio
    async def test_get_by_id(
        self, repository: MockRepository, mock_session: MagicMock
    ) -> None:
        mock_session.execute.return_value = make_result(first={"id": 1, "name": "a"})

        entity = await repository.get_by_id(1)

        assert entity is not None
        assert entity.id == 1
        assert entity.name == "a"
        query, params = mock_session.execute.await_args.args
        assert "FROM mock_table WHERE id = :id" in str(query)
        assert params == {"id": 1}

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(
        self, repository: MockRepository, mock_session: MagicMock
    ) -> None:
        mock_session.execute.return_value = make_result()

        assert await repository.get_by_id(2) is None

    @pytest.mark.asyncio
    async def test_get_by_id_database_error(
        self, repository: MockRepository, mock_session: MagicMock
    ) -> None:
        mock_session.execute.side_effect = SQLAlchemyError("boom")

        with pytest.raises(DatabaseError, match="mock_table"):
            await repository.get_by_id(1)
