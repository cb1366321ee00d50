"""Gateway client configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Any, List, Literal, Mapping, Optional

from pydantic import Field, ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from mpesa_gateway.domain.entities import Environment
from mpesa_gateway.domain.exceptions import ValidationError

ENV_PREFIX = "MPESA_"


class MpesaSettings(BaseSettings):
    """
    Credentials and runtime options for the Daraja client.

    All settings can be overridden via environment variables with the
    MPESA_ prefix or a .env file. Instances are immutable; a missing or
    blank required field raises ValidationError naming the field.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )

    # === Credentials ===
    consumer_key: str = Field(..., min_length=1)
    consumer_secret: str = Field(..., min_length=1)
    business_short_code: str = Field(..., min_length=1)
    pass_key: str = Field(..., min_length=1)

    # === Gateway ===
    environment: Environment = Environment.SANDBOX
    callback_url: str = Field(..., min_length=1)
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Retries after a 5xx response")
    debug: bool = False

    # === Initiator (B2C, B2B, balance, status, reversal, tax) ===
    initiator_name: Optional[str] = None
    initiator_password: Optional[str] = None
    certificate_path: Optional[str] = None

    # === Webhook receiver ===
    # The allow-list checks the direct peer address. Behind a reverse proxy
    # every callback arrives from the proxy, so list its address in
    # trusted_proxies (JSON array in MPESA_TRUSTED_PROXIES) to have the
    # caller read from X-Forwarded-For instead.
    verify_callback_ip: bool = True
    trusted_proxies: List[str] = Field(default_factory=list)

    # === Logging ===
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    def __init__(self, **values: Any):
        try:
            super().__init__(**values)
        except PydanticValidationError as exc:
            raise _to_validation_error(exc) from exc

    @property
    def timeout_ms(self) -> int:
        return int(self.timeout * 1000)


class _MappingSettings(MpesaSettings):
    """Settings built only from explicit values, never the environment."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)


def _to_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Report the first invalid field the way the rest of the client does."""
    error = exc.errors()[0]
    field = str(error["loc"][0]) if error["loc"] else None
    if error["type"] in ("missing", "string_too_short"):
        message = f"{field} is required"
    else:
        message = f"{field}: {error['msg']}"
    return ValidationError(message, field=field)


def load_settings(mapping: Mapping[str, Any] | None = None) -> MpesaSettings:
    """
    Build settings from an explicit key/value mapping.

    Keys may be given with or without the MPESA_ prefix, in any case.
    A mapping is the only source consulted: environment variables and
    the .env file are ignored. Without a mapping, settings are read from
    the process environment and the .env file.
    """
    if mapping is None:
        return MpesaSettings()

    values = {}
    for key, value in mapping.items():
        name = key.lower()
        if name.startswith(ENV_PREFIX.lower()):
            name = name[len(ENV_PREFIX):]
        values[name] = value

    return _MappingSettings(**values)


@lru_cache
def get_settings() -> MpesaSettings:
    """Get cached settings instance for the webhook service."""
    return load_settings()
