"""Mock rows and results for repositories built on text() SQL."""

from typing import Any
from unittest.mock import MagicMock


def make_row(data: dict[str, Any]) -> MagicMock:
    """Mock a result row whose ``_asdict()`` returns ``data``."""
    row = MagicMock()
    row._asdict.return_value = data
    return row


def make_result(
    first: dict[str, Any] | None = None, rows: list[dict[str, Any]] | None = None
) -> MagicMock:
    """Mock a CursorResult returning ``first`` and/or ``rows``."""
    result = MagicMock()
    result.first.return_value = make_row(first) if first is not None else None
    result.fetchall.return_value = [make_row(r) for r in rows or []]
    return result
