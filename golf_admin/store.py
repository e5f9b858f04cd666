"""Thin table-store binding with two backends.

Every query ends in ``execute()`` which returns a :class:`StoreResponse`.
Backends never raise for remote failures; they put a :class:`StoreError`
on the response instead, so callers check ``response.error``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

import psycopg
import requests
from psycopg import sql
from psycopg.rows import dict_row

from golf_admin.errors import StoreError
from golf_admin.settings import Settings

logger = logging.getLogger(__name__)

Row = dict[str, Any]
FILTER_OPERATORS = {"eq": "=", "gt": ">"}


@dataclass
class StoreResponse:
    data: list[Row] | None = None
    error: StoreError | None = None


@dataclass
class Query:
    table: str
    action: str = "select"
    columns: str = "*"
    rows: list[Row] = field(default_factory=list)
    filters: list[tuple[str, str, Any]] = field(default_factory=list)
    ordering: list[tuple[str, bool]] = field(default_factory=list)


class QueryBuilder:
    def __init__(self, table: str, runner: Callable[[Query], StoreResponse]):
        self._query = Query(table=table)
        self._runner = runner

    @property
    def query(self) -> Query:
        return self._query

    def select(self, columns: str = "*") -> "QueryBuilder":
        self._query.action = "select"
        self._query.columns = columns
        return self

    def insert(self, rows: Row | Iterable[Row]) -> "QueryBuilder":
        self._query.action = "insert"
        self._query.rows = [dict(rows)] if isinstance(rows, dict) else [dict(row) for row in rows]
        return self

    def delete(self) -> "QueryBuilder":
        self._query.action = "delete"
        return self

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        self._query.filters.append((column, "eq", value))
        return self

    def gt(self, column: str, value: Any) -> "QueryBuilder":
        self._query.filters.append((column, "gt", value))
        return self

    def order(self, column: str, ascending: bool = True) -> "QueryBuilder":
        self._query.ordering.append((column, ascending))
        return self

    def execute(self) -> StoreResponse:
        return self._runner(self._query)


class TableStore:
    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(name, self.run)

    def run(self, query: Query) -> StoreResponse:
        raise NotImplementedError


def _json_safe(value: Any) -> Any:
    # Non-finite numbers have no JSON form; they travel as null.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class RestTableStore(TableStore):
    """PostgREST-compatible hosted table store (Supabase)."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "Prefer": "return=representation",
        }

    def _params(self, query: Query) -> dict[str, str]:
        params: dict[str, str] = {}
        if query.action == "select":
            params["select"] = query.columns
        for column, operator, value in query.filters:
            params[column] = f"{operator}.{value}"
        if query.ordering:
            params["order"] = ",".join(
                f"{column}.{'asc' if ascending else 'desc'}" for column, ascending in query.ordering
            )
        return params

    def run(self, query: Query) -> StoreResponse:
        endpoint = f"{self.base_url}/rest/v1/{query.table}"
        method = {"select": "GET", "insert": "POST", "delete": "DELETE"}[query.action]
        body = None
        if query.action == "insert":
            body = [{key: _json_safe(value) for key, value in row.items()} for row in query.rows]
        try:
            response = requests.request(
                method,
                endpoint,
                params=self._params(query),
                json=body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Store %s on %s failed (%s)", method, query.table, exc)
            return StoreResponse(error=StoreError(str(exc)))
        if response.status_code >= 400:
            return StoreResponse(error=_rest_error(response))
        if not response.content:
            return StoreResponse(data=[])
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Store %s on %s returned a non-JSON body", method, query.table)
            return StoreResponse(error=StoreError(f"Unexpected non-JSON response: {response.text[:200]}"))
        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            return StoreResponse(error=StoreError(f"Unexpected response payload: {payload!r}"))
        return StoreResponse(data=payload)


def _rest_error(response: requests.Response) -> StoreError:
    try:
        payload = response.json()
    except ValueError:
        return StoreError(f"{response.status_code} {response.text}")
    if not isinstance(payload, dict):
        return StoreError(f"{response.status_code} {response.text}")
    message = payload.get("message") or payload.get("error") or f"HTTP {response.status_code}"
    return StoreError(message, code=payload.get("code"), details=payload.get("details"))


class PostgresTableStore(TableStore):
    """Same contract against a Postgres database reached with psycopg."""

    def __init__(self, database_url: str):
        self.database_url = database_url

    def _where(self, query: Query) -> tuple[sql.Composable, list[Any]]:
        if not query.filters:
            return sql.SQL(""), []
        clauses = [
            sql.SQL("{} {} %s").format(sql.Identifier(column), sql.SQL(FILTER_OPERATORS[operator]))
            for column, operator, _ in query.filters
        ]
        params = [value for _, _, value in query.filters]
        return sql.SQL(" where ") + sql.SQL(" and ").join(clauses), params

    def _select(self, cur: psycopg.Cursor, query: Query) -> list[Row]:
        if query.columns.strip() == "*":
            columns: sql.Composable = sql.SQL("*")
        else:
            columns = sql.SQL(", ").join(
                sql.Identifier(name.strip()) for name in query.columns.split(",")
            )
        where, params = self._where(query)
        statement = sql.SQL("select {} from {}").format(columns, sql.Identifier(query.table)) + where
        if query.ordering:
            statement += sql.SQL(" order by ") + sql.SQL(", ").join(
                sql.SQL("{} {}").format(sql.Identifier(column), sql.SQL("asc" if ascending else "desc"))
                for column, ascending in query.ordering
            )
        cur.execute(statement, params)
        return cur.fetchall()

    def _insert(self, cur: psycopg.Cursor, query: Query) -> list[Row]:
        inserted: list[Row] = []
        for row in query.rows:
            names = list(row)
            statement = sql.SQL("insert into {} ({}) values ({}) returning *").format(
                sql.Identifier(query.table),
                sql.SQL(", ").join(sql.Identifier(name) for name in names),
                sql.SQL(", ").join(sql.Placeholder() for _ in names),
            )
            cur.execute(statement, [row[name] for name in names])
            inserted.append(cur.fetchone())
        return inserted

    def _delete(self, cur: psycopg.Cursor, query: Query) -> list[Row]:
        where, params = self._where(query)
        statement = sql.SQL("delete from {}").format(sql.Identifier(query.table)) + where
        cur.execute(statement + sql.SQL(" returning *"), params)
        return cur.fetchall()

    def run(self, query: Query) -> StoreResponse:
        handlers = {"select": self._select, "insert": self._insert, "delete": self._delete}
        try:
            # One connection per call; the batch commits or rolls back as a unit.
            with psycopg.connect(self.database_url) as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    rows = handlers[query.action](cur, query)
        except psycopg.Error as exc:
            logger.warning("Store %s on %s failed (%s)", query.action, query.table, exc)
            return StoreResponse(error=StoreError(str(exc).strip(), code=exc.sqlstate))
        return StoreResponse(data=rows)


def create_store(settings: Settings) -> TableStore:
    if settings.store_backend == "rest":
        return RestTableStore(settings.supabase_url, settings.supabase_key, settings.http_timeout)
    return PostgresTableStore(settings.database_url)
