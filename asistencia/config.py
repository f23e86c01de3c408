"""Application settings loaded from environment variables via pydantic-settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(StrEnum):
    json = "json"
    console = "console"


class ConfigurationError(RuntimeError):
    """Raised when a required deployment value is missing."""


class ColumnMap(BaseModel):
    """Logical registration field → opaque upstream column identifier."""

    model_config = ConfigDict(frozen=True)

    nombre: str = Field(min_length=1)
    apellidos: str = Field(min_length=1)
    telefono: str = Field(min_length=1)
    numero_documento: str = Field(min_length=1)
    direccion: str = Field(min_length=1)
    correo: str = Field(min_length=1)
    nombre_asociacion: str = Field(min_length=1)
    cultivo: str = Field(min_length=1)
    hectareas: str = Field(min_length=1)
    firma: str = Field(min_length=1)


# settings attribute → ColumnMap field
_COLUMN_SETTINGS = {
    "prod_nombre_field_id": "nombre",
    "prod_apellidos_field_id": "apellidos",
    "prod_telefono_field_id": "telefono",
    "prod_documento_field_id": "numero_documento",
    "prod_direccion_field_id": "direccion",
    "prod_email_field_id": "correo",
    "prod_asoc_nombre_field_id": "nombre_asociacion",
    "prod_cultivo_field_id": "cultivo",
    "prod_hectareas_field_id": "hectareas",
    "prod_firma_field_id": "firma",
}


class Settings(BaseSettings):
    """Central configuration — all values sourced from env vars or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ASISTENCIA_EVENTO_",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Airtable ────────────────────────────────────────────────────────────
    airtable_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("API_KEY_SIRIUS_ASISTENCIA_EVENTO", "airtable_api_key"),
    )
    airtable_api_url: str = "https://api.airtable.com/v0"
    airtable_timeout_seconds: float = 30.0
    base_id: str = ""
    productores_table_id: str = ""

    # ── Column identifiers ──────────────────────────────────────────────────
    prod_nombre_field_id: str = ""
    prod_apellidos_field_id: str = ""
    prod_telefono_field_id: str = ""
    prod_documento_field_id: str = ""
    prod_direccion_field_id: str = ""
    prod_email_field_id: str = ""
    prod_asoc_nombre_field_id: str = ""
    prod_cultivo_field_id: str = ""
    prod_hectareas_field_id: str = ""
    prod_firma_field_id: str = ""

    # ── Signature encryption ────────────────────────────────────────────────
    firma_secret: str = ""

    # ── LLM ─────────────────────────────────────────────────────────────────
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
    )
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_timeout_seconds: float = 30.0

    # ── Observability ───────────────────────────────────────────────────────
    log_level: str = "info"
    log_format: LogFormat = LogFormat.json

    @property
    def productores_url(self) -> str:
        return f"{self.airtable_api_url.rstrip('/')}/{self.base_id}/{self.productores_table_id}"

    def missing_values(self) -> list[str]:
        """Environment names of every required value that is empty."""
        prefix = self.model_config.get("env_prefix", "")
        missing: list[str] = []
        if not self.airtable_api_key:
            missing.append("API_KEY_SIRIUS_ASISTENCIA_EVENTO")
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        for name in ("base_id", "productores_table_id", "firma_secret", *_COLUMN_SETTINGS):
            if not getattr(self, name):
                missing.append(f"{prefix}{name}".upper())
        return missing

    def column_map(self) -> ColumnMap:
        """Build the validated column map, failing if any identifier is empty."""
        values = {target: getattr(self, name) for (name, target) in _COLUMN_SETTINGS.items()}
        try:
            return ColumnMap(**values)
        except ValidationError as exc:
            missing = sorted(
                f"{self.model_config.get('env_prefix', '')}{name}".upper()
                for (name, target) in _COLUMN_SETTINGS.items()
                if not values[target]
            )
            raise ConfigurationError(f"missing column identifiers: {', '.join(missing)}") from exc

    def require_complete(self) -> None:
        """Raise ConfigurationError naming every missing deployment value."""
        missing = self.missing_values()
        if missing:
            raise ConfigurationError(f"missing configuration: {', '.join(missing)}")


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance (cached after first call)."""
    return Settings()
