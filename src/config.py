import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv
from sqlalchemy.engine import URL


load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _build_database_url() -> str:
    """
    DATABASE_URL wins. Otherwise the MYSQL_* variables are assembled into a
    mysql+pymysql URL, and with neither present a local SQLite file is used.
    """
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    if os.getenv("MYSQL_HOST"):
        return URL.create(
            "mysql+pymysql",
            username=os.getenv("MYSQL_USER"),
            password=os.getenv("MYSQL_PASSWORD"),
            host=os.getenv("MYSQL_HOST"),
            port=int(os.getenv("MYSQL_PORT", "3306")),
            database=os.getenv("MYSQL_DATABASE"),
        ).render_as_string(hide_password=False)

    return "sqlite:///dashboard.db"


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///dashboard.db"
    port: int = 3000
    environment: str = "development"
    session_secret: str = "dev-session-secret-change-me"
    session_cookie: str = "session"
    session_max_age: int = 60 * 60
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    static_dir: str = "public"
    db_pool_size: int = 10
    db_pool_timeout: int = 30
    sql_echo: bool = False
    auto_create_tables: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
        return cls(
            database_url=_build_database_url(),
            port=int(os.getenv("PORT", "3000")),
            environment=os.getenv("ENVIRONMENT", "development"),
            session_secret=os.getenv("SESSION_SECRET", "dev-session-secret-change-me"),
            session_cookie=os.getenv("SESSION_COOKIE", "session"),
            session_max_age=int(os.getenv("SESSION_MAX_AGE", str(60 * 60))),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            static_dir=os.getenv("STATIC_DIR", "public"),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            db_pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
            sql_echo=_env_bool("SQL_ECHO"),
            auto_create_tables=_env_bool("AUTO_CREATE_TABLES", "true"),
        )
