import itertools
from types import SimpleNamespace

import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeQuery:
    """Minimal stand-in for the postgrest query builder used by the repository."""

    def __init__(self, table: "FakeTable") -> None:
        self.table = table
        self.filters: list[tuple[str, object]] = []
        self.ordering: tuple[str, bool] | None = None
        self.max_rows: int | None = None
        self.action = "select"
        self.payload: dict | None = None

    def select(self, *_columns):
        self.action = "select"
        return self

    def insert(self, payload: dict):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column: str, value):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.ordering = (column, desc)
        return self

    def limit(self, count: int):
        self.max_rows = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(str(row.get(column)) == str(value) for column, value in self.filters)

    async def execute(self):
        self.table.executed.append(self.action)
        rows = self.table.rows
        if self.action == "insert":
            row = {"id": f"band-{next(self.table.ids)}", **self.payload}
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])
        matched = [row for row in rows if self._matches(row)]
        if self.action == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched])
        if self.action == "delete":
            self.table.rows = [row for row in rows if row not in matched]
            return SimpleNamespace(data=[dict(row) for row in matched])
        if self.ordering:
            column, desc = self.ordering
            matched = sorted(matched, key=lambda row: float(row[column]), reverse=desc)
        if self.max_rows is not None:
            matched = matched[: self.max_rows]
        return SimpleNamespace(data=[dict(row) for row in matched])


class FakeTable:
    def __init__(self, rows: list[dict] | None = None) -> None:
        self.rows = rows or []
        self.ids = itertools.count(100)
        self.executed: list[str] = []


class FakeSupabase:
    def __init__(self, **tables: list[dict]) -> None:
        self.tables = {name: FakeTable(rows) for name, rows in tables.items()}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, FakeTable()))


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase(
        stores=[
            {"id": "store-1", "address": "Av. Paulista, 1000, São Paulo, SP"},
            {"id": "store-2", "address": "   "},
        ],
        delivery_radius=[
            {"id": "band-2", "store_id": "store-1", "name": "Faixa até 10 km", "radius_km": 10, "delivery_price": 8},
            {"id": "band-1", "store_id": "store-1", "name": "Faixa até 5 km", "radius_km": 5, "delivery_price": 5},
            {"id": "band-9", "store_id": "store-9", "name": None, "radius_km": 3, "delivery_price": 2},
        ],
    )
