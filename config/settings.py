"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./todos.db"
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # ── Sessions / auth ──────────────────────────────────────────────────
    session_cookie_name: str = "session"
    session_expiry_seconds: int = 86400   # 1 day
    cookie_secure: bool = False
    bcrypt_rounds: int = 12

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 7890
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["http://localhost:7890"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


config = Settings()
