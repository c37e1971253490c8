"""
Changelog-to-CDC JSON envelope encoding

Encodes changelog rows (insert, update-before, update-after, delete) into
Debezium-style and Canal-style JSON change events.
"""

from cdc_json.clock import Clock, FixedClock, SystemClock
from cdc_json.errors import (
    CdcJsonError,
    ConfigurationError,
    EncodingError,
    SerializationError,
    SerializerStateError,
    UnsupportedChangeKind,
)
from cdc_json.formats import (
    CanalDialect,
    CanalJsonSerializer,
    ChangelogJsonSerializer,
    DebeziumDialect,
    DebeziumJsonSerializer,
    create_serializer,
)
from cdc_json.models import (
    ChangeRow,
    DecimalEncoding,
    EnvelopeConfig,
    NullKeyMode,
    NullKeyPolicy,
    RowKind,
    TimestampFormat,
)

__version__ = "0.1.0"

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "CdcJsonError",
    "ConfigurationError",
    "EncodingError",
    "SerializationError",
    "SerializerStateError",
    "UnsupportedChangeKind",
    "CanalDialect",
    "CanalJsonSerializer",
    "ChangelogJsonSerializer",
    "DebeziumDialect",
    "DebeziumJsonSerializer",
    "create_serializer",
    "ChangeRow",
    "DecimalEncoding",
    "EnvelopeConfig",
    "NullKeyMode",
    "NullKeyPolicy",
    "RowKind",
    "TimestampFormat",
]
