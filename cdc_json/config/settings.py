"""
Pydantic Settings Models for changelog JSON format configuration
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cdc_json.models.config import (
    DecimalEncoding,
    EnvelopeConfig,
    NullKeyMode,
    NullKeyPolicy,
    TimestampFormat,
)


def _unsupported(value: object, option: str, supported: list) -> ValueError:
    return ValueError(
        f"Unsupported value '{value}' for option {option}. "
        f"Supported values are [{', '.join(supported)}]."
    )


class JsonFormatSettings(BaseSettings):
    """Envelope format options (debezium-json / canal-json)"""

    target_table: str = Field(..., description="Table name written into envelope metadata")
    target_database: Optional[str] = Field(
        default=None, description="Database name (canal-json only)"
    )
    timestamp_format: TimestampFormat = Field(default=TimestampFormat.SQL)
    map_null_key_mode: NullKeyMode = Field(default=NullKeyMode.FAIL)
    map_null_key_literal: str = Field(default="null")
    encode_decimal_as_plain_number: bool = Field(default=False)

    model_config = SettingsConfigDict(env_prefix="CDC_JSON_")

    @field_validator("timestamp_format", mode="before")
    @classmethod
    def validate_timestamp_format(cls, v: object) -> object:
        """Accept SQL / ISO-8601 case-insensitively"""
        if isinstance(v, TimestampFormat):
            return v
        text = str(v).strip().upper()
        for candidate in TimestampFormat:
            if text == candidate.value:
                return candidate
        raise _unsupported(v, "timestamp-format.standard", [f.value for f in TimestampFormat])

    @field_validator("map_null_key_mode", mode="before")
    @classmethod
    def validate_map_null_key_mode(cls, v: object) -> object:
        """Accept FAIL / DROP / LITERAL case-insensitively"""
        if isinstance(v, NullKeyMode):
            return v
        text = str(v).strip().upper()
        for candidate in NullKeyMode:
            if text == candidate.value:
                return candidate
        raise _unsupported(v, "map-null-key.mode", ["LITERAL", "FAIL", "DROP"])

    def to_envelope_config(self) -> EnvelopeConfig:
        """
        Resolve settings into an EnvelopeConfig

        Raises:
            ConfigurationError: If target_table is blank
        """
        return EnvelopeConfig(
            target_table=self.target_table,
            timestamp_format=self.timestamp_format,
            null_key_policy=NullKeyPolicy(self.map_null_key_mode, self.map_null_key_literal),
            decimal_encoding=(
                DecimalEncoding.PLAIN
                if self.encode_decimal_as_plain_number
                else DecimalEncoding.EXACT
            ),
            target_database=self.target_database,
        )


class ObservabilitySettings(BaseSettings):
    """Logging and metrics configuration"""

    metrics_port: int = Field(default=9090, ge=1024, le=65535)
    enable_metrics_server: bool = Field(default=False)
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = Field(default="json", pattern="^(json|console)$")

    model_config = SettingsConfigDict(env_prefix="CDC_JSON_")


class CdcJsonSettings(BaseSettings):
    """Complete changelog JSON encoder configuration"""

    format: JsonFormatSettings
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_prefix="CDC_JSON_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
