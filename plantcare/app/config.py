import os
from dataclasses import dataclass
from functools import lru_cache

__all__ = [
    "Settings",
    "get_settings",
]


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    db_host: str = "db"
    db_port: int = 3306
    db_user: str = "appuser"
    db_password: str = "apppass"
    db_name: str = "plantcare"
    db_connect_timeout: int = 5
    db_read_timeout: int = 10
    db_write_timeout: int = 10
    db_auto_create: bool = False
    test_mode: bool = False
    demo_mode: bool = False
    upload_dir: str = "uploads"
    max_upload_bytes: int = 5 * 1024 * 1024
    cors_origins: tuple[str, ...] = ("http://localhost:5173",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        # Auto-isolate tests: when TEST_MODE=1 and DB_NAME is not explicitly set,
        # default to plantcare_test.
        test_mode = _flag("TEST_MODE")
        origins = os.getenv("CORS_ORIGINS", "http://localhost:5173")
        return cls(
            db_host=os.getenv("DB_HOST", "db"),
            db_port=int(os.getenv("DB_PORT", "3306")),
            db_user=os.getenv("DB_USER", "appuser"),
            db_password=os.getenv("DB_PASSWORD", "apppass"),
            db_name=os.getenv("DB_NAME") or ("plantcare_test" if test_mode else "plantcare"),
            db_connect_timeout=int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
            db_read_timeout=int(os.getenv("DB_READ_TIMEOUT", "10")),
            db_write_timeout=int(os.getenv("DB_WRITE_TIMEOUT", "10")),
            db_auto_create=_flag("DB_AUTO_CREATE"),
            test_mode=test_mode,
            demo_mode=_flag("DEMO_MODE"),
            upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024))),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings from the environment once per process.

    Also used as a FastAPI dependency, so tests can swap it through
    ``app.dependency_overrides[get_settings]``.
    """
    return Settings.from_env()
