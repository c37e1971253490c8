"""
Base Dialect Interface
Abstract base class for CDC envelope dialects (Debezium, Canal)

Every dialect implements:
- build_schema(): derive the envelope row type from the user's row type (once)
- new_scratch(): allocate the reusable envelope container (once per serializer)
- map_to_envelope(): write one changelog row into the scratch envelope
"""

from abc import ABC, abstractmethod
from typing import Any, List, Tuple

from cdc_json.clock import Clock
from cdc_json.errors import EncodingError
from cdc_json.models.config import EnvelopeConfig
from cdc_json.models.row import ChangeRow
from cdc_json.models.types import RowType


class ScratchEnvelope:
    """
    Mutable envelope container reused across serialize calls

    Owned by exactly one serializer; its field slots follow the dialect
    schema's field order and are overwritten on every record.

    Attributes:
        fields: Positional field values handed to the codec
        op: Operation code written by the last successful mapping
    """

    __slots__ = ("fields", "op")

    def __init__(self, arity: int):
        self.fields: List[Any] = [None] * arity
        self.op: str = ""

    def __len__(self) -> int:
        return len(self.fields)


def row_image(row: ChangeRow) -> Tuple[Any, ...]:
    """
    Column values of a changelog row, as written into the envelope

    Raises:
        EncodingError: If the row carries no column sequence
    """
    columns = row.columns
    if not isinstance(columns, (tuple, list)):
        raise EncodingError(
            f"Row columns must be a sequence of values, got {type(columns).__name__}"
        )
    return columns


class Dialect(ABC):
    """
    CDC JSON dialect policy

    Dialects are stateless; per-serializer state lives in the ScratchEnvelope.

    Attributes:
        name: Dialect name used in logs and metric labels
        ops: Every operation code map_to_envelope can write
    """

    name: str = ""
    ops: Tuple[str, ...] = ()

    @abstractmethod
    def build_schema(self, row_type: RowType) -> RowType:
        """
        Build the envelope row type

        Args:
            row_type: Logical type of the changelog row columns

        Returns:
            Envelope row type, in wire field order
        """
        pass

    @abstractmethod
    def new_scratch(self, config: EnvelopeConfig) -> ScratchEnvelope:
        """
        Allocate a scratch envelope with constant metadata pre-filled

        Args:
            config: Resolved envelope configuration
        """
        pass

    @abstractmethod
    def map_to_envelope(self, row: ChangeRow, scratch: ScratchEnvelope, clock: Clock) -> None:
        """
        Write a changelog row into the scratch envelope

        Every field slot is overwritten.

        Args:
            row: Changelog row to map
            scratch: Envelope owned by the calling serializer
            clock: Source of the envelope timestamp

        Raises:
            UnsupportedChangeKind: If row.kind is not a supported RowKind
            EncodingError: If row.columns is not a sequence of values
        """
        pass

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
