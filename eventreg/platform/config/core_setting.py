from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from eventreg.platform.constant.path import BASE_DIR, SESSION_DIR


_ENV_PATH = BASE_DIR / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (BASE_DIR / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Event Registration Client'
    VERSION: str = '0.1.0'
    DEBUG: bool = False

    # REST API
    API_BASE_URL: str = 'http://localhost:8080/api'
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    @field_validator('API_BASE_URL', mode='after')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    @property
    def USER_AGENT(self) -> str:
        return f'{self.PROJECT_NAME.replace(" ", "-").lower()}/{self.VERSION}'

    # Session persistence
    SESSION_STORE_PATH: Path = SESSION_DIR / 'session.json'
    SESSION_STORAGE_KEY: str = 'eventreg.session'
    VERIFY_SESSION_ON_RESTORE: bool = True

    # 403 is handled like 401 (forced logout) unless disabled
    LOGOUT_ON_FORBIDDEN: bool = True

    # Admin dashboard
    RECENT_TICKETS_LIMIT: int = 10


settings = Settings()
