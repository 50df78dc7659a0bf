"""Base repository implementation for infrastructure layer."""

from typing import Any, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.logging import get_logger
from src.domain.entities.base import BaseEntity
from src.domain.repositories.base import BaseRepository
from src.infrastructure.exceptions import DatabaseError


logger = get_logger(__name__)

T = TypeVar("T", bound=BaseEntity)


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert a text() result row to a plain dict."""
    if hasattr(row, "_asdict"):
        return row._asdict()  # type: ignore[attr-defined]
    if hasattr(row, "_mapping"):
        return dict(row._mapping)  # type: ignore[attr-defined]
    return dict(row)


class BaseRepositoryImpl(BaseRepository[T]):
    """Base repository implementation over raw ``text()`` SQL.

    Rows are validated through a pydantic model before being turned into
    domain entities.

    Type Parameters:
        T: Domain entity type that extends BaseEntity

    Attributes:
        session: Database session
        model_class: Pydantic row model

    Note:
        Subclasses set ``table_name`` and implement ``_to_entity``.
    """

    table_name: str = ""

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[Any],
    ):
        self.session = session
        self.model_class = model_class

    def _dict_to_entity(self, data: dict[str, Any]) -> T:
        """Validate a row dict with the model class and convert it."""
        return self._to_entity(self.model_class.model_validate(data))

    async def get_by_id(self, entity_id: int) -> T | None:
        """Get entity by ID."""
        try:
            result = await self.session.execute(
                text(f"SELECT * FROM {self.table_name} WHERE id = :id"),
                {"id": entity_id},
            )
            row = result.first()
        except SQLAlchemyError as e:
            logger.error(
                "Database error getting entity by ID",
                table=self.table_name,
                id=entity_id,
                error=str(e),
            )
            raise DatabaseError(
                f"Failed to get {self.table_name} by ID",
                {"id": entity_id, "error": str(e)},
            ) from e

        if row is None:
            return None
        return self._dict_to_entity(row_to_dict(row))

    def _to_entity(self, model: Any) -> T:
        """Convert database model to domain entity."""
        raise NotImplementedError("Subclass must implement _to_entity")
