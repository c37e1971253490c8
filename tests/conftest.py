"""
Pytest Fixtures and Test Configuration
Shared row types, clocks, stub codecs and a CDC consumer view of the output
"""

import json
from typing import Any, Callable, List, Tuple

import pytest

from cdc_json.clock import FixedClock
from cdc_json.formats.serializer import CanalJsonSerializer, DebeziumJsonSerializer
from cdc_json.models.types import RowType, field, integer, row, string

FIXED_MILLIS = 1_700_000_000_000


# ============================================================================
# Row types and clocks
# ============================================================================


@pytest.fixture
def product_type() -> RowType:
    """(sku STRING, qty INTEGER)"""
    return row(field("sku", string()), field("qty", integer()))


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(FIXED_MILLIS)


# ============================================================================
# Serializers
# ============================================================================


@pytest.fixture
def debezium_serializer(product_type: RowType, fixed_clock: FixedClock) -> DebeziumJsonSerializer:
    """Opened Debezium serializer for table "product" with a fixed clock"""
    serializer = DebeziumJsonSerializer("product", product_type, clock=fixed_clock)
    serializer.open()
    return serializer


@pytest.fixture
def canal_serializer(product_type: RowType, fixed_clock: FixedClock) -> CanalJsonSerializer:
    """Opened Canal serializer for inventory.product with a fixed clock"""
    serializer = CanalJsonSerializer(
        "product", product_type, target_database="inventory", clock=fixed_clock
    )
    serializer.open()
    return serializer


# ============================================================================
# Stub codecs
# ============================================================================


class CountingCodec:
    """Codec stub recording every encode() call"""

    def __init__(self, payload: bytes = b"{}"):
        self.payload = payload
        self.opened = False
        self.calls: List[Any] = []

    def open(self) -> None:
        self.opened = True

    def encode(self, value: Any) -> bytes:
        self.calls.append(list(value))
        return self.payload


class FailingCodec(CountingCodec):
    """Codec stub raising the given error on encode()"""

    def __init__(self, error: Exception):
        super().__init__()
        self.error = error

    def encode(self, value: Any) -> bytes:
        super().encode(value)
        raise self.error


@pytest.fixture
def counting_codec() -> CountingCodec:
    return CountingCodec()


@pytest.fixture
def failing_codec_factory() -> Callable[[Exception], FailingCodec]:
    return FailingCodec


# ============================================================================
# Consumer view
# ============================================================================


def _debezium_view(payload: bytes, field_names: Tuple[str, ...]) -> Tuple[str, List[Any]]:
    event = json.loads(payload)
    if event["op"] == "c":
        return "inserted", [event["after"][name] for name in field_names]
    if event["op"] == "d":
        return "deleted", [event["before"][name] for name in field_names]
    raise AssertionError(f"Unexpected op {event['op']!r}")


def _canal_view(payload: bytes, field_names: Tuple[str, ...]) -> Tuple[str, List[Any]]:
    event = json.loads(payload)
    (image,) = event["data"]
    state = {"INSERT": "inserted", "DELETE": "deleted"}[event["type"]]
    return state, [image[name] for name in field_names]


@pytest.fixture
def debezium_consumer() -> Callable[[bytes, Tuple[str, ...]], Tuple[str, List[Any]]]:
    """Decode a Debezium event the way a CDC consumer classifies it"""
    return _debezium_view


@pytest.fixture
def canal_consumer() -> Callable[[bytes, Tuple[str, ...]], Tuple[str, List[Any]]]:
    """Decode a Canal event the way a CDC consumer classifies it"""
    return _canal_view
