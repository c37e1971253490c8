"""
Data models for changelog rows, logical row types and envelope configuration
"""

from cdc_json.models.config import (
    CodecOptions,
    DecimalEncoding,
    EnvelopeConfig,
    NullKeyMode,
    NullKeyPolicy,
    TimestampFormat,
)
from cdc_json.models.row import ChangeRow, RowKind
from cdc_json.models.types import LogicalType, RowField, RowType, TypeRoot

__all__ = [
    "ChangeRow",
    "RowKind",
    "LogicalType",
    "RowField",
    "RowType",
    "TypeRoot",
    "CodecOptions",
    "DecimalEncoding",
    "EnvelopeConfig",
    "NullKeyMode",
    "NullKeyPolicy",
    "TimestampFormat",
]
