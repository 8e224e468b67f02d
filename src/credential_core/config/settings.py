"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from credential_core.domain.auth.encryption_algorithm import EncryptionAlgorithm

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]


class Settings(BaseSettings):
    """Environment-driven defaults for entity-type authentication configs."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    encryption_algorithm: EncryptionAlgorithm = Field(
        default=EncryptionAlgorithm.SHA256,
        validation_alias="CREDENTIAL_ENCRYPTION_ALGORITHM",
    )
    encryption_key: NonEmptyStr | None = Field(
        default=None,
        validation_alias="CREDENTIAL_ENCRYPTION_KEY",
    )
    stretches: PositiveInt | None = Field(
        default=None,
        validation_alias="CREDENTIAL_STRETCHES",
    )
    salt_join_token: str = Field(default="", validation_alias="CREDENTIAL_SALT_JOIN_TOKEN")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("encryption_algorithm")
    @classmethod
    def _reject_custom_algorithm(cls, value: EncryptionAlgorithm) -> EncryptionAlgorithm:
        """A custom strategy object can only be supplied in code, not the environment."""

        if value is EncryptionAlgorithm.CUSTOM:
            raise ValueError(
                "custom encryption algorithm must be selected in the configure block"
            )
        return value


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()
