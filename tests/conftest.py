import pytest

from golf_admin.errors import MediaApiError, StoreError
from golf_admin.store import Query, StoreResponse, TableStore


def _matches(row: dict, filters: list) -> bool:
    for column, operator, value in filters:
        if operator == "eq" and row.get(column) != value:
            return False
        if operator == "gt" and not row.get(column) > value:
            return False
    return True


class FakeStore(TableStore):
    """In-memory table store honouring the select/insert/delete contract."""

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables = {name: [dict(row) for row in rows] for name, rows in (tables or {}).items()}
        self.next_id = 1 + max(
            (row["id"] for rows in self.tables.values() for row in rows), default=0
        )
        self.calls: list[Query] = []
        self.failures: dict[str, str] = {}

    def fail(self, action: str, message: str = "store unavailable") -> None:
        self.failures[action] = message

    def writes(self) -> list[Query]:
        return [query for query in self.calls if query.action != "select"]

    def run(self, query: Query) -> StoreResponse:
        self.calls.append(query)
        if query.action in self.failures:
            return StoreResponse(error=StoreError(self.failures[query.action], code="XX000"))
        rows = self.tables.setdefault(query.table, [])
        if query.action == "select":
            selected = [dict(row) for row in rows if _matches(row, query.filters)]
            for column, ascending in reversed(query.ordering):
                selected.sort(key=lambda row: row[column], reverse=not ascending)
            return StoreResponse(data=selected)
        if query.action == "insert":
            inserted = []
            for row in query.rows:
                stored = {"id": self.next_id, **row}
                self.next_id += 1
                inserted.append(stored)
            rows.extend(inserted)
            return StoreResponse(data=[dict(row) for row in inserted])
        removed = [row for row in rows if _matches(row, query.filters)]
        self.tables[query.table] = [row for row in rows if not _matches(row, query.filters)]
        return StoreResponse(data=removed)


class FakeMediaApi:
    """Stand-in for MediaApiClient backed by dictionaries."""

    def __init__(self, settings: dict | None = None, backgrounds: list | None = None):
        self.settings = dict(settings or {})
        self.backgrounds = [dict(item) for item in backgrounds or []]
        self.calls: list[tuple] = []
        self.failures: dict[str, str] = {}
        self.uploads = 0

    def _check(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.failures:
            raise MediaApiError(self.failures[name])

    def fetch_settings(self) -> dict:
        self._check("fetch_settings")
        return dict(self.settings)

    def save_setting(self, key: str, value: str) -> None:
        self._check("save_setting", key, value)
        self.settings[key] = value

    def list_backgrounds(self) -> list:
        self._check("list_backgrounds")
        return [dict(item) for item in self.backgrounds]

    def upload_background(self, filename, content, content_type=None) -> dict:
        self._check("upload_background", filename)
        self.uploads += 1
        entry = {"key": f"bg-{self.uploads}-{filename}", "publicUrl": f"https://cdn.test/{filename}"}
        self.backgrounds.append(entry)
        return dict(entry)

    def delete_background(self, key: str) -> None:
        self._check("delete_background", key)
        self.backgrounds = [item for item in self.backgrounds if item["key"] != key]


@pytest.fixture
def store():
    return FakeStore(
        {
            "golfers": [
                {"id": 2, "name": "Bob", "salary": 200},
                {"id": 1, "name": "Alice", "salary": 100},
            ]
        }
    )


@pytest.fixture
def media_api():
    return FakeMediaApi(
        settings={"form_title": "Pick Six", "rules": "<p>Rules</p>", "background_image": "u1"},
        backgrounds=[{"key": "a", "publicUrl": "u1"}, {"key": "b", "publicUrl": "u2"}],
    )
