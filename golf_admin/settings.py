import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_ADMIN_API_URL = "http://localhost:3000/api/admin"
DEFAULT_GOLFERS_TABLE = "golfers"


@dataclass(frozen=True)
class Settings:
    database_url: str
    supabase_url: str
    supabase_key: str
    golfers_table: str
    admin_api_url: str
    http_timeout: float

    @property
    def store_backend(self) -> str:
        if self.supabase_url and self.supabase_key:
            return "rest"
        return "postgres"


def _normalize_base_url(value: Optional[str], default: str = "") -> str:
    if not value:
        return default
    return value.strip().rstrip("/")


def _timeout_from_env(value: Optional[str]) -> float:
    if not value:
        return 15.0
    try:
        return float(value)
    except ValueError:
        return 15.0


def load_settings() -> Settings:
    database_url = os.getenv("DATABASE_URL", "postgresql://localhost:5432/golf_admin")
    supabase_url = _normalize_base_url(os.getenv("SUPABASE_URL"))
    supabase_key = (
        os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        or os.getenv("SUPABASE_KEY")
        or os.getenv("SUPABASE_ANON_KEY")
        or ""
    )
    golfers_table = os.getenv("GOLFERS_TABLE", DEFAULT_GOLFERS_TABLE)
    admin_api_url = _normalize_base_url(os.getenv("ADMIN_API_URL"), DEFAULT_ADMIN_API_URL)
    return Settings(
        database_url=database_url,
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        golfers_table=golfers_table,
        admin_api_url=admin_api_url,
        http_timeout=_timeout_from_env(os.getenv("HTTP_TIMEOUT")),
    )
