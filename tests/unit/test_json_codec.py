"""
Unit tests for the structured-to-JSON codec
Tests value rendering, option handling and rejection of unencodable values
"""

import json
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest

from cdc_json.codec.json_codec import MAX_NESTING_DEPTH, JsonRowCodec
from cdc_json.errors import EncodingError, SerializerStateError
from cdc_json.models.config import (
    CodecOptions,
    DecimalEncoding,
    NullKeyPolicy,
    TimestampFormat,
)
from cdc_json.models.types import (
    array,
    bigint,
    boolean,
    bytes_,
    date as date_type,
    decimal,
    double,
    field,
    integer,
    map_,
    row,
    smallint,
    string,
    time as time_type,
    timestamp,
    timestamp_ltz,
)


def encode(row_type, value, **options):
    codec = JsonRowCodec(row_type, CodecOptions(**options))
    codec.open()
    return codec.encode(value)


class TestScalarRendering:
    """Test rendering of atomic values"""

    def test_field_declaration_order_preserved(self):
        row_type = row(field("z", string()), field("a", integer()), field("m", boolean()))

        assert encode(row_type, ("last", 1, True)) == b'{"z":"last","a":1,"m":true}'

    def test_null_values(self):
        row_type = row(field("sku", string()), field("qty", integer()))

        assert encode(row_type, (None, None)) == b'{"sku":null,"qty":null}'

    def test_unicode_strings_are_utf8(self):
        row_type = row(field("name", string()))

        assert encode(row_type, ("héllo \"q\"",)) == '{"name":"héllo \\"q\\""}'.encode()

    def test_doubles(self):
        row_type = row(field("ratio", double()))

        assert json.loads(encode(row_type, (0.25,))) == {"ratio": 0.25}
        assert json.loads(encode(row_type, (3,))) == {"ratio": 3.0}

    def test_bytes_are_base64(self):
        row_type = row(field("blob", bytes_()))

        assert encode(row_type, (b"\x00\x01",)) == b'{"blob":"AAE="}'

    def test_date_and_time(self):
        row_type = row(field("day", date_type()), field("at", time_type()))

        payload = encode(row_type, (date(2024, 1, 2), time(1, 2, 3, 400000)))

        assert payload == b'{"day":"2024-01-02","at":"01:02:03.4"}'


class TestTimestampFormats:
    """Test SQL and ISO-8601 timestamp layouts"""

    def test_sql_format(self):
        row_type = row(field("ts", timestamp()))

        payload = encode(row_type, (datetime(2024, 1, 2, 3, 4, 5, 120000),))

        assert payload == b'{"ts":"2024-01-02 03:04:05.12"}'

    def test_iso_format(self):
        row_type = row(field("ts", timestamp()))

        payload = encode(
            row_type,
            (datetime(2024, 1, 2, 3, 4, 5, 120000),),
            timestamp_format=TimestampFormat.ISO_8601,
        )

        assert payload == b'{"ts":"2024-01-02T03:04:05.12"}'

    def test_whole_seconds_have_no_fraction(self):
        row_type = row(field("ts", timestamp()))

        assert encode(row_type, (datetime(2024, 1, 2, 3, 4, 5),)) == b'{"ts":"2024-01-02 03:04:05"}'

    def test_local_zone_timestamp_rendered_in_utc(self):
        row_type = row(field("ts", timestamp_ltz()))
        plus_two = timezone(timedelta(hours=2))

        payload = encode(
            row_type,
            (datetime(2024, 1, 2, 3, 4, 5, tzinfo=plus_two),),
            timestamp_format=TimestampFormat.ISO_8601,
        )

        assert payload == b'{"ts":"2024-01-02T01:04:05Z"}'


class TestDecimalEncoding:
    """Test PLAIN and EXACT decimal rendering"""

    def test_scaled_to_declared_scale(self):
        row_type = row(field("price", decimal(10, 2)))

        assert encode(row_type, (Decimal("12.3"),)) == b'{"price":12.30}'

    def test_exact_may_use_exponent(self):
        row_type = row(field("rate", decimal(10, 8)))

        assert encode(row_type, (Decimal("1E-7"),)) == b'{"rate":1.0E-7}'

    def test_plain_never_uses_exponent(self):
        row_type = row(field("rate", decimal(10, 8)))

        payload = encode(row_type, (Decimal("1E-7"),), decimal_encoding=DecimalEncoding.PLAIN)

        assert payload == b'{"rate":0.00000010}'

    def test_integers_accepted(self):
        row_type = row(field("total", decimal(5, 0)))

        assert encode(row_type, (42,)) == b'{"total":42}'

    def test_precision_overflow_rejected(self):
        row_type = row(field("price", decimal(4, 2)))

        with pytest.raises(EncodingError):
            encode(row_type, (Decimal("123.4"),))

    @pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("Infinity")])
    def test_non_finite_decimal_rejected(self, value):
        with pytest.raises(EncodingError):
            encode(row(field("price", decimal(10, 2))), (value,))


class TestNullMapKeys:
    """Test null map key policies"""

    ROW_TYPE = row(field("attrs", map_(string(), integer())))

    def test_fail(self):
        with pytest.raises(EncodingError, match="null keys"):
            encode(self.ROW_TYPE, ({"a": 1, None: 2},))

    def test_drop(self):
        payload = encode(self.ROW_TYPE, ({"a": 1, None: 2},), null_key_policy=NullKeyPolicy.drop())

        assert payload == b'{"attrs":{"a":1}}'

    def test_drop_leading_null_key(self):
        payload = encode(self.ROW_TYPE, ({None: 2, "a": 1},), null_key_policy=NullKeyPolicy.drop())

        assert payload == b'{"attrs":{"a":1}}'

    def test_literal(self):
        payload = encode(
            self.ROW_TYPE,
            ({"a": 1, None: 2},),
            null_key_policy=NullKeyPolicy.with_literal("nullKey"),
        )

        assert payload == b'{"attrs":{"a":1,"nullKey":2}}'

    def test_non_string_key_type_rejected(self):
        with pytest.raises(EncodingError):
            JsonRowCodec(row(field("attrs", map_(integer(), integer()))))


class TestNestedValues:
    """Test recursive encoding of rows, arrays and maps"""

    def test_nested_row_array_map(self):
        row_type = row(
            field("id", bigint()),
            field("owner", row(field("name", string()), field("age", smallint()))),
            field("tags", array(string())),
            field("scores", map_(string(), array(integer()))),
        )

        payload = encode(row_type, (7, ("ann", 30), ["a", "b"], {"x": [1, 2]}))

        assert payload == (
            b'{"id":7,"owner":{"name":"ann","age":30},"tags":["a","b"],"scores":{"x":[1,2]}}'
        )

    def test_nesting_limit(self):
        element = integer()
        for _ in range(MAX_NESTING_DEPTH):
            element = array(element)

        with pytest.raises(EncodingError, match="nesting depth"):
            JsonRowCodec(row(field("deep", element)))


class TestRejectedValues:
    """Test values the codec refuses to encode"""

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_double(self, value):
        with pytest.raises(EncodingError):
            encode(row(field("ratio", double())), (value,))

    def test_integer_out_of_range(self):
        with pytest.raises(EncodingError, match="out of range"):
            encode(row(field("qty", integer())), (2**31,))

    def test_bool_is_not_an_integer(self):
        with pytest.raises(EncodingError):
            encode(row(field("qty", integer())), (True,))

    def test_wrong_type(self):
        with pytest.raises(EncodingError, match=r"\$\.qty"):
            encode(row(field("sku", string()), field("qty", integer())), ("sku-1", "42"))

    def test_null_in_not_null_field(self):
        with pytest.raises(EncodingError, match="NOT NULL"):
            encode(row(field("sku", string().as_not_null())), (None,))

    def test_arity_mismatch(self):
        with pytest.raises(EncodingError):
            encode(row(field("sku", string()), field("qty", integer())), ("sku-1",))

    def test_lone_surrogate_rejected(self):
        with pytest.raises(EncodingError, match="UTF-8"):
            encode(row(field("sku", string())), ("\ud800",))

    def test_lone_surrogate_in_map_key_rejected(self):
        with pytest.raises(EncodingError, match="UTF-8"):
            encode(row(field("tags", map_(string(), integer()))), ({"\udfff": 1},))


class TestCodecLifecycle:
    """Test open/encode lifecycle and equality"""

    def test_encode_before_open(self):
        codec = JsonRowCodec(row(field("sku", string())))

        with pytest.raises(SerializerStateError):
            codec.encode(("sku-1",))

    def test_buffer_reused_between_calls(self):
        codec = JsonRowCodec(row(field("sku", string())))
        codec.open()

        assert codec.encode(("a",)) == b'{"sku":"a"}'
        assert codec.encode(("b",)) == b'{"sku":"b"}'

    def test_equality_by_type_and_options(self):
        row_type = row(field("sku", string()))

        assert JsonRowCodec(row_type) == JsonRowCodec(row_type)
        assert hash(JsonRowCodec(row_type)) == hash(JsonRowCodec(row_type))
        assert JsonRowCodec(row_type) != JsonRowCodec(
            row_type, CodecOptions(timestamp_format=TimestampFormat.ISO_8601)
        )
