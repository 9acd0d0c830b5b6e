"""Application settings powered by Pydantic BaseSettings."""

import getpass
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from talkvote.config.constants import DEFAULT_DB_PATH
from talkvote.errors import SettingsError, UserDetectionError


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    db_path: Path = Field(
        default=Path(DEFAULT_DB_PATH), validation_alias="TALKVOTE_DB_PATH"
    )
    user: str | None = Field(default=None, validation_alias="TALKVOTE_USER")
    json_logs: bool = Field(default=False, validation_alias="TALKVOTE_JSON_LOGS")

    def resolve_user(self, override: str | None = None) -> str:
        """Return the voting identity.

        An explicit override wins, then TALKVOTE_USER, then the OS username.

        Raises:
            UserDetectionError: If no identity can be determined.
        """
        for candidate in (override, self.user):
            if candidate and candidate.strip():
                return candidate.strip()
        try:
            username = getpass.getuser()
        except (KeyError, OSError) as e:
            raise UserDetectionError(str(e)) from e
        if not username:
            raise UserDetectionError("empty username")
        return username


def get_settings() -> AppSettings:
    """Get a settings instance.

    Raises:
        SettingsError: If an environment value is invalid.
    """
    try:
        return AppSettings()
    except ValidationError as e:
        raise SettingsError(f"Invalid configuration: {e}") from e
