"""
Runtime settings for the SQL-over-HTTP client.

Values come from the environment (prefix ``PGTAG_``) or a ``.env`` file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PGTAG_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    HTTP_TIMEOUT: float = Field(default=30.0, gt=0)
    HTTP_SCHEME: str = "https"
    SQL_ENDPOINT_PATH: str = "/sql"
    # The endpoint infers parameter types itself; hints are opt-in.
    SEND_TYPE_HINTS: bool = False
    ARRAY_MODE: bool = True
    LOG_STATEMENTS: bool = False


settings = Settings()
