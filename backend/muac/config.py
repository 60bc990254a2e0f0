from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
DEFAULT_SQL_FILE = BACKEND_DIR / "sql" / "ddbb.sql"


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _normalize_database_url(value: str | None, fallback: str) -> str:
    raw = (value or fallback).strip() or fallback
    # Some dashboards accidentally store quoted values.
    if (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'")):
        raw = raw[1:-1].strip()

    if "://" not in raw:
        return raw

    scheme, suffix = raw.split("://", 1)
    scheme = scheme.lower()

    # Force a driver we install in production image.
    if scheme in {
        "postgres",
        "postgresql",
        "postgresql+psycopg",
        "postgresql+asyncpg",
        "postgresql+pg8000",
        "postgresql+psycopg2",
    }:
        url = f"postgresql+psycopg2://{suffix}"
        if "sslmode" not in url:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}sslmode=require"
        return url

    if scheme in {"mysql", "mariadb", "mysql+mysqldb"}:
        return f"mysql+pymysql://{suffix}"

    return raw


@dataclass(frozen=True)
class Settings:
    env: str
    secret_key: str
    jwt_algorithm: str
    jwt_exp_minutes: int
    port: int
    database_url: str
    db_type: str
    db_pool_size: int
    db_max_overflow: int
    db_pool_timeout: int
    db_pool_recycle: int
    sql_file_path: str
    auto_bootstrap: bool
    cors_origins: list[str]
    admin_username: str
    admin_email: str
    admin_password: str
    muac_threshold_severe: float
    muac_threshold_moderate: float
    muac_threshold_normal: float
    enable_prometheus_metrics: bool
    log_level: str

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        return self.env.lower() not in {"development", "dev", "test", "testing"}

    def validate(self) -> None:
        """Raise early on dangerous mis-configurations in non-dev environments."""
        if self.is_production and self.secret_key == _DEFAULT_SECRET_KEY:
            raise RuntimeError(
                "SECRET_KEY must be explicitly set in production. "
                "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )
        if not (self.muac_threshold_severe < self.muac_threshold_moderate <= self.muac_threshold_normal):
            raise RuntimeError(
                "MUAC thresholds must satisfy SEVERE < MODERATE <= NORMAL "
                f"(got {self.muac_threshold_severe}, {self.muac_threshold_moderate}, {self.muac_threshold_normal})"
            )


_DEFAULT_SECRET_KEY = "change-me-in-production-min-32-bytes-key"


settings = Settings(
    env=os.getenv("ENV", "development"),
    secret_key=os.getenv("SECRET_KEY", _DEFAULT_SECRET_KEY),
    jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
    jwt_exp_minutes=_as_int(os.getenv("JWT_EXP_MINUTES"), 60 * 12),
    port=_as_int(os.getenv("PORT"), 8003),
    database_url=_normalize_database_url(
        os.getenv("DATABASE_URL"),
        "sqlite:///./muac.db",
    ),
    db_type=os.getenv("DB_TYPE", "").strip().lower(),
    db_pool_size=max(1, _as_int(os.getenv("DB_POOL_SIZE"), 5)),
    db_max_overflow=max(0, _as_int(os.getenv("DB_MAX_OVERFLOW"), 10)),
    db_pool_timeout=max(1, _as_int(os.getenv("DB_POOL_TIMEOUT"), 30)),
    db_pool_recycle=max(60, _as_int(os.getenv("DB_POOL_RECYCLE"), 1800)),
    sql_file_path=os.getenv("SQL_FILE_PATH", str(DEFAULT_SQL_FILE)).strip(),
    auto_bootstrap=_as_bool(os.getenv("AUTO_BOOTSTRAP"), True),
    cors_origins=[
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ],
    admin_username=os.getenv("ADMIN_USERNAME", "admin").strip(),
    admin_email=os.getenv("ADMIN_EMAIL", "admin@muac.org").strip(),
    admin_password=os.getenv("ADMIN_PASSWORD", ""),
    muac_threshold_severe=_as_float(os.getenv("MUAC_THRESHOLD_SEVERE"), 11.5),
    muac_threshold_moderate=_as_float(os.getenv("MUAC_THRESHOLD_MODERATE"), 12.4),
    muac_threshold_normal=_as_float(os.getenv("MUAC_THRESHOLD_NORMAL"), 12.5),
    enable_prometheus_metrics=_as_bool(os.getenv("ENABLE_PROMETHEUS_METRICS"), True),
    log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
)

settings.validate()
