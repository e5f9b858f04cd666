#!/usr/bin/env python3
"""Ensure the golfers table exists in the configured Postgres database."""

from golf_admin.db import ensure_schema
from golf_admin.settings import load_settings


def main() -> None:
    settings = load_settings()
    if settings.store_backend != "postgres":
        print("SUPABASE_URL is set; the hosted store manages its own schema.")
        return
    ensure_schema(settings.database_url, settings.golfers_table)
    print(f"Table '{settings.golfers_table}' ensured at {settings.database_url}.")


if __name__ == "__main__":
    main()
