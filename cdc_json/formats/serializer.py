"""
Changelog JSON Serializer
Turns changelog rows into CDC JSON envelopes (Debezium, Canal)

Lifecycle:
    serializer = DebeziumJsonSerializer("product", row_type)   # validate + build schema
    serializer.open()                                          # codec + scratch envelope
    payload = serializer.serialize(row)                        # repeatedly
"""

from typing import Any, Dict, Optional, Tuple

import structlog

from cdc_json.clock import Clock, SystemClock
from cdc_json.codec.json_codec import JsonRowCodec
from cdc_json.config.settings import JsonFormatSettings
from cdc_json.errors import ConfigurationError, SerializationError, SerializerStateError
from cdc_json.formats.base import Dialect, ScratchEnvelope
from cdc_json.formats.canal import CanalDialect
from cdc_json.formats.debezium import DebeziumDialect
from cdc_json.models.config import (
    DecimalEncoding,
    EnvelopeConfig,
    NullKeyPolicy,
    TimestampFormat,
)
from cdc_json.models.row import ChangeRow
from cdc_json.models.types import RowType
from cdc_json.observability.logging import log_serialization_failure
from cdc_json.observability.metrics import (
    increment_serialization_errors,
    records_serialized_counter,
)

logger = structlog.get_logger(__name__)


class ChangelogJsonSerializer:
    """
    Serializer façade for one dialect, target table and row type

    Owns an opened codec and a scratch envelope that is overwritten on every
    call. Instances are not thread-safe: drive each from a single thread, or
    use one instance per thread.
    """

    def __init__(
        self,
        dialect: Dialect,
        config: EnvelopeConfig,
        row_type: RowType,
        clock: Optional[Clock] = None,
        codec: Optional[Any] = None,
    ):
        """
        Initialize serializer

        Args:
            dialect: Envelope dialect policy
            config: Validated envelope configuration
            row_type: Logical type of the changelog row columns
            clock: Timestamp source (defaults to the system clock)
            codec: Codec for the envelope schema (defaults to JsonRowCodec)

        Raises:
            ConfigurationError: If config is not an EnvelopeConfig
            EncodingError: If the envelope schema cannot be encoded as JSON
        """
        if not isinstance(config, EnvelopeConfig):
            raise ConfigurationError(f"Expected EnvelopeConfig, got {type(config).__name__}")

        self.dialect = dialect
        self.config = config
        self.row_type = row_type
        self.schema = dialect.build_schema(row_type)
        self.codec = codec if codec is not None else JsonRowCodec(
            self.schema, config.codec_options
        )
        self.clock: Clock = clock if clock is not None else SystemClock()
        self._scratch: Optional[ScratchEnvelope] = None
        self._record_counters: Dict[str, Any] = {}

        logger.info(
            "Serializer initialized",
            dialect=dialect.name,
            table_name=config.target_table,
            schema=self.schema.summary(),
        )

    def open(self) -> None:
        """
        Open the codec and allocate the scratch envelope

        Raises:
            SerializerStateError: If the serializer is already open
        """
        if self._scratch is not None:
            raise SerializerStateError(f"{type(self).__name__} is already open")

        self.codec.open()
        self._record_counters = {
            op: records_serialized_counter(self.dialect.name, op) for op in self.dialect.ops
        }
        self._scratch = self.dialect.new_scratch(self.config)
        logger.info(
            "Serializer opened", dialect=self.dialect.name, table_name=self.config.target_table
        )

    @property
    def is_open(self) -> bool:
        return self._scratch is not None

    def serialize(self, row: ChangeRow) -> bytes:
        """
        Serialize one changelog row into an envelope

        Args:
            row: Changelog row (borrowed for the duration of the call)

        Returns:
            JSON bytes of one envelope

        Raises:
            SerializerStateError: If open() was not called
            SerializationError: If mapping or encoding fails; the mapper or
                codec error is chained as __cause__
        """
        scratch = self._scratch
        if scratch is None:
            raise SerializerStateError(f"{type(self).__name__}.serialize() called before open()")

        try:
            self.dialect.map_to_envelope(row, scratch, self.clock)
            payload = self.codec.encode(scratch.fields)
        except Exception as e:
            description = str(row)
            error_type = type(e).__name__
            increment_serialization_errors(self.dialect.name, error_type)
            log_serialization_failure(
                logger,
                dialect=self.dialect.name,
                table_name=self.config.target_table,
                row_description=description,
                error_type=error_type,
                error=str(e),
            )
            raise SerializationError(description) from e

        self._record_counters[scratch.op].inc()
        return payload

    def _identity(self) -> Tuple[Any, ...]:
        return (self.dialect, self.config, self.schema, self.codec)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(dialect={self.dialect.name!r}, "
            f"table={self.config.target_table!r}, schema={self.schema.summary()})"
        )


class DebeziumJsonSerializer(ChangelogJsonSerializer):
    """Serializer producing Debezium JSON envelopes"""

    def __init__(
        self,
        target_table: str,
        row_type: RowType,
        timestamp_format: TimestampFormat = TimestampFormat.SQL,
        null_key_policy: NullKeyPolicy = NullKeyPolicy(),
        decimal_encoding: DecimalEncoding = DecimalEncoding.EXACT,
        clock: Optional[Clock] = None,
        codec: Optional[Any] = None,
    ):
        config = EnvelopeConfig(
            target_table=target_table,
            timestamp_format=timestamp_format,
            null_key_policy=null_key_policy,
            decimal_encoding=decimal_encoding,
        )
        super().__init__(DebeziumDialect(), config, row_type, clock=clock, codec=codec)


class CanalJsonSerializer(ChangelogJsonSerializer):
    """Serializer producing Canal JSON envelopes"""

    def __init__(
        self,
        target_table: str,
        row_type: RowType,
        timestamp_format: TimestampFormat = TimestampFormat.SQL,
        null_key_policy: NullKeyPolicy = NullKeyPolicy(),
        decimal_encoding: DecimalEncoding = DecimalEncoding.EXACT,
        target_database: Optional[str] = None,
        clock: Optional[Clock] = None,
        codec: Optional[Any] = None,
    ):
        config = EnvelopeConfig(
            target_table=target_table,
            timestamp_format=timestamp_format,
            null_key_policy=null_key_policy,
            decimal_encoding=decimal_encoding,
            target_database=target_database,
        )
        super().__init__(CanalDialect(), config, row_type, clock=clock, codec=codec)


def create_serializer(
    dialect: Dialect,
    settings: JsonFormatSettings,
    row_type: RowType,
    clock: Optional[Clock] = None,
) -> ChangelogJsonSerializer:
    """
    Build a serializer from validated format settings

    Args:
        dialect: Envelope dialect policy
        settings: Format options loaded by cdc_json.config
        row_type: Logical type of the changelog row columns
        clock: Timestamp source (defaults to the system clock)

    Raises:
        ConfigurationError: If target_table is blank
    """
    return ChangelogJsonSerializer(dialect, settings.to_envelope_config(), row_type, clock=clock)
