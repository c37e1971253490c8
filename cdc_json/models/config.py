"""
EnvelopeConfig Data Model - resolved envelope encoding options
Validated once at construction; immutable afterwards
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from cdc_json.errors import ConfigurationError


class TimestampFormat(str, Enum):
    """Textual layout for TIMESTAMP values"""

    SQL = "SQL"
    ISO_8601 = "ISO-8601"


class NullKeyMode(str, Enum):
    """How map entries with a null key are handled"""

    FAIL = "FAIL"
    DROP = "DROP"
    LITERAL = "LITERAL"


class DecimalEncoding(str, Enum):
    """How DECIMAL values are written"""

    PLAIN = "PLAIN"
    EXACT = "EXACT"


@dataclass(frozen=True)
class NullKeyPolicy:
    """
    Null map key policy

    Attributes:
        mode: FAIL, DROP or LITERAL
        literal: Replacement key text, only used in LITERAL mode
    """

    mode: NullKeyMode = NullKeyMode.FAIL
    literal: str = "null"

    @classmethod
    def fail(cls) -> "NullKeyPolicy":
        return cls(NullKeyMode.FAIL)

    @classmethod
    def drop(cls) -> "NullKeyPolicy":
        return cls(NullKeyMode.DROP)

    @classmethod
    def with_literal(cls, literal: str) -> "NullKeyPolicy":
        return cls(NullKeyMode.LITERAL, literal)


@dataclass(frozen=True)
class CodecOptions:
    """Options forwarded to the structured-to-JSON codec"""

    timestamp_format: TimestampFormat = TimestampFormat.SQL
    null_key_policy: NullKeyPolicy = field(default_factory=NullKeyPolicy)
    decimal_encoding: DecimalEncoding = DecimalEncoding.EXACT


@dataclass(frozen=True)
class EnvelopeConfig:
    """
    Resolved configuration of one envelope serializer

    Attributes:
        target_table: Logical table/stream name written into envelope metadata
        timestamp_format: SQL or ISO-8601
        null_key_policy: Null map key handling
        decimal_encoding: PLAIN or EXACT
        target_database: Database name, only written by dialects that carry one
    """

    target_table: str
    timestamp_format: TimestampFormat = TimestampFormat.SQL
    null_key_policy: NullKeyPolicy = field(default_factory=NullKeyPolicy)
    decimal_encoding: DecimalEncoding = DecimalEncoding.EXACT
    target_database: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate EnvelopeConfig after initialization"""
        if self.target_table is None or not str(self.target_table).strip():
            raise ConfigurationError("target_table must not be null or blank")

    @property
    def codec_options(self) -> CodecOptions:
        return CodecOptions(
            timestamp_format=self.timestamp_format,
            null_key_policy=self.null_key_policy,
            decimal_encoding=self.decimal_encoding,
        )
