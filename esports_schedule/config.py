from typing import Optional
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

from .util import DEFAULT_USER_AGENT

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="APP_", extra="ignore")

    GOOGLE_SHEETS_API_KEY: Optional[str] = None
    SHEET_ID: str = "1i3ji5iDuACafqPPR0CPGI4ARk6Z2d853KeKcHef2Wto"
    SHEET_RANGE: str = "A3:H100"  # row 3 onwards skips the header rows
    INCLUDE_HYPERLINKS: bool = False

    TZ: str = "Europe/Madrid"
    YEAR: Optional[int] = None  # sheet dates carry no year; None means "current year"

    CACHE_TTL_SECONDS: int = 300
    FETCH_TIMEOUT_SECONDS: int = 10
    USER_AGENT: str = DEFAULT_USER_AGENT

    DEFAULT_LOCALE: str = "es"

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.TZ)

settings = Settings()
