"""
CDC JSON envelope dialects and the serializer façade
"""

from cdc_json.formats.base import Dialect, ScratchEnvelope
from cdc_json.formats.canal import CanalDialect
from cdc_json.formats.debezium import DebeziumDialect
from cdc_json.formats.serializer import (
    CanalJsonSerializer,
    ChangelogJsonSerializer,
    DebeziumJsonSerializer,
    create_serializer,
)

__all__ = [
    "Dialect",
    "ScratchEnvelope",
    "DebeziumDialect",
    "CanalDialect",
    "ChangelogJsonSerializer",
    "DebeziumJsonSerializer",
    "CanalJsonSerializer",
    "create_serializer",
]
