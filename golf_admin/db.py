import psycopg
from psycopg import sql

from golf_admin.settings import DEFAULT_GOLFERS_TABLE


def ensure_schema(database_url: str, golfers_table: str = DEFAULT_GOLFERS_TABLE) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                sql.SQL(
                    """
                    create table if not exists {} (
                        id serial primary key,
                        name text not null,
                        salary numeric
                    );
                    """
                ).format(sql.Identifier(golfers_table))
            )
