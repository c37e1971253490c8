"""
Structured-to-JSON Codec
Encodes values of a fixed logical row type into JSON bytes

Converters are compiled once per row type; encoding walks the value with
the precompiled converters and preserves field declaration order.
"""

import base64
import json
import math
from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Any, Callable, List, Mapping, Sequence, cast

import structlog

from cdc_json.errors import EncodingError, SerializerStateError
from cdc_json.models.config import (
    CodecOptions,
    DecimalEncoding,
    NullKeyMode,
    TimestampFormat,
)
from cdc_json.models.types import (
    INTEGER_BITS,
    ArrayType,
    DecimalType,
    LogicalType,
    MapType,
    RowType,
    TypeRoot,
)

logger = structlog.get_logger(__name__)

MAX_NESTING_DEPTH = 64

# Appends the JSON text of a value to the output buffer
Converter = Callable[[Any, List[str]], None]

_DECIMAL_CONTEXT = Context(prec=80, rounding=ROUND_HALF_UP)


class JsonRowCodec:
    """
    JSON codec for one logical row type

    Lifecycle: construct (compiles converters) -> open() -> encode() repeatedly.
    Not thread-safe: the output buffer is reused between calls.
    """

    def __init__(self, row_type: RowType, options: CodecOptions = CodecOptions()):
        """
        Initialize codec

        Args:
            row_type: Logical type of the values passed to encode()
            options: Timestamp, null map key and decimal rendering options

        Raises:
            EncodingError: If the row type cannot be represented as JSON
        """
        if not isinstance(row_type, RowType):
            raise EncodingError(f"Top-level type must be a ROW, got {row_type}")
        if row_type.depth() > MAX_NESTING_DEPTH:
            raise EncodingError(
                f"Row type nesting depth {row_type.depth()} exceeds maximum of {MAX_NESTING_DEPTH}"
            )

        self.row_type = row_type
        self.options = options
        self._converter = _create_converter(row_type.as_not_null(), options, "$")
        self._buffer: List[str] = []
        self._opened = False

    def open(self) -> None:
        """Prepare runtime state; must be called before encode()"""
        self._buffer = []
        self._opened = True
        logger.debug("JSON codec opened", row_type=self.row_type.summary())

    @property
    def is_open(self) -> bool:
        return self._opened

    def encode(self, value: Sequence[Any]) -> bytes:
        """
        Encode a row value

        Args:
            value: Field values in row type declaration order

        Returns:
            UTF-8 JSON bytes

        Raises:
            EncodingError: If a value does not fit its logical type
        """
        if not self._opened:
            raise SerializerStateError("JsonRowCodec.encode() called before open()")

        buffer = self._buffer
        buffer.clear()
        self._converter(value, buffer)
        text = "".join(buffer)
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingError(
                f"Text at offset {e.start} is not encodable as UTF-8: {e.reason}"
            ) from e

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonRowCodec):
            return NotImplemented
        return self.row_type == other.row_type and self.options == other.options

    def __hash__(self) -> int:
        return hash((self.row_type, self.options))

    def __repr__(self) -> str:
        return f"JsonRowCodec(row_type={self.row_type.summary()}, options={self.options})"


# ----------------------------------------------------------------------------
# Converter compilation
# ----------------------------------------------------------------------------


def _create_converter(type_: LogicalType, options: CodecOptions, path: str) -> Converter:
    converter = _create_not_null_converter(type_, options, path)

    if type_.nullable:

        def nullable_converter(value: Any, out: List[str]) -> None:
            if value is None:
                out.append("null")
            else:
                converter(value, out)

        return nullable_converter

    def not_null_converter(value: Any, out: List[str]) -> None:
        if value is None:
            raise EncodingError(f"Null value at {path} for NOT NULL type {type_}")
        converter(value, out)

    return not_null_converter


def _create_not_null_converter(
    type_: LogicalType, options: CodecOptions, path: str
) -> Converter:
    root = type_.root

    if root == TypeRoot.BOOLEAN:
        return _boolean_converter(path)
    if root in INTEGER_BITS:
        return _integer_converter(root, path)
    if root in (TypeRoot.FLOAT, TypeRoot.DOUBLE):
        return _floating_converter(path)
    if root == TypeRoot.DECIMAL:
        return _decimal_converter(cast(DecimalType, type_), options.decimal_encoding, path)
    if root == TypeRoot.STRING:
        return _string_converter(path)
    if root == TypeRoot.BYTES:
        return _bytes_converter(path)
    if root == TypeRoot.DATE:
        return _date_converter(path)
    if root == TypeRoot.TIME:
        return _time_converter(path)
    if root == TypeRoot.TIMESTAMP:
        return _timestamp_converter(options.timestamp_format, False, path)
    if root == TypeRoot.TIMESTAMP_LTZ:
        return _timestamp_converter(options.timestamp_format, True, path)
    if root == TypeRoot.ROW:
        return _row_converter(cast(RowType, type_), options, path)
    if root == TypeRoot.ARRAY:
        return _array_converter(cast(ArrayType, type_), options, path)
    if root == TypeRoot.MAP:
        return _map_converter(cast(MapType, type_), options, path)

    raise EncodingError(f"Unsupported logical type {type_} at {path}")


def _type_error(path: str, expected: str, value: Any) -> EncodingError:
    return EncodingError(
        f"Expected {expected} at {path}, got {type(value).__name__}: {value!r}"
    )


def _boolean_converter(path: str) -> Converter:
    def convert(value: Any, out: List[str]) -> None:
        if not isinstance(value, bool):
            raise _type_error(path, "bool", value)
        out.append("true" if value else "false")

    return convert


def _integer_converter(root: TypeRoot, path: str) -> Converter:
    bits = INTEGER_BITS[root]
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    def convert(value: Any, out: List[str]) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _type_error(path, "int", value)
        if not low <= value <= high:
            raise EncodingError(f"Value {value} at {path} out of range for {root.value}")
        out.append(str(value))

    return convert


def _floating_converter(path: str) -> Converter:
    def convert(value: Any, out: List[str]) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _type_error(path, "float", value)
        number = float(value)
        if not math.isfinite(number):
            raise EncodingError(f"Non-finite number {value} at {path} is not valid JSON")
        out.append(repr(number))

    return convert


def _decimal_converter(type_: DecimalType, encoding: DecimalEncoding, path: str) -> Converter:
    quantum = Decimal(1).scaleb(-type_.scale)
    max_integer_digits = type_.precision - type_.scale
    plain = encoding == DecimalEncoding.PLAIN

    def convert(value: Any, out: List[str]) -> None:
        if isinstance(value, bool) or not isinstance(value, (Decimal, int)):
            raise _type_error(path, "Decimal", value)
        number = Decimal(value)
        if not number.is_finite():
            raise EncodingError(f"Non-finite decimal {value} at {path} is not valid JSON")
        try:
            scaled = number.quantize(quantum, context=_DECIMAL_CONTEXT)
        except InvalidOperation as e:
            raise EncodingError(f"Decimal {value} at {path} exceeds {type_.summary()}") from e
        if scaled and scaled.adjusted() >= max_integer_digits:
            raise EncodingError(f"Decimal {value} at {path} exceeds {type_.summary()}")
        out.append(format(scaled, "f") if plain else str(scaled))

    return convert


def _string_converter(path: str) -> Converter:
    def convert(value: Any, out: List[str]) -> None:
        if not isinstance(value, str):
            raise _type_error(path, "str", value)
        out.append(json.dumps(value, ensure_ascii=False))

    return convert


def _bytes_converter(path: str) -> Converter:
    def convert(value: Any, out: List[str]) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise _type_error(path, "bytes", value)
        out.append('"' + base64.b64encode(bytes(value)).decode("ascii") + '"')

    return convert


def _fraction(microsecond: int) -> str:
    """Fraction of second with trailing zeros dropped, empty when zero"""
    if not microsecond:
        return ""
    return "." + f"{microsecond:06d}".rstrip("0")


def _format_time(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}{_fraction(value.microsecond)}"


def _date_converter(path: str) -> Converter:
    def convert(value: Any, out: List[str]) -> None:
        if isinstance(value, datetime):
            value = value.date()
        elif not isinstance(value, date):
            raise _type_error(path, "date", value)
        out.append(f'"{value.isoformat()}"')

    return convert


def _time_converter(path: str) -> Converter:
    def convert(value: Any, out: List[str]) -> None:
        if not isinstance(value, time):
            raise _type_error(path, "time", value)
        out.append(f'"{_format_time(value)}"')

    return convert


def _timestamp_converter(fmt: TimestampFormat, local_zone: bool, path: str) -> Converter:
    separator = "T" if fmt == TimestampFormat.ISO_8601 else " "
    suffix = "Z" if local_zone else ""

    def convert(value: Any, out: List[str]) -> None:
        if not isinstance(value, datetime):
            raise _type_error(path, "datetime", value)
        if local_zone and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        out.append(
            f'"{value.date().isoformat()}{separator}{_format_time(value.time())}{suffix}"'
        )

    return convert


def _row_converter(type_: RowType, options: CodecOptions, path: str) -> Converter:
    prefixes = []
    converters = []
    for index, row_field in enumerate(type_.fields):
        opener = "{" if index == 0 else ","
        prefixes.append(f"{opener}{json.dumps(row_field.name, ensure_ascii=False)}:")
        converters.append(_create_converter(row_field.type, options, f"{path}.{row_field.name}"))
    pairs = tuple(zip(prefixes, converters))
    arity = len(pairs)

    def convert(value: Any, out: List[str]) -> None:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
            raise _type_error(path, f"sequence of {arity} fields", value)
        if len(value) != arity:
            raise EncodingError(f"Row at {path} has {len(value)} fields, expected {arity}")
        if not arity:
            out.append("{}")
            return
        for (prefix, field_converter), item in zip(pairs, value):
            out.append(prefix)
            field_converter(item, out)
        out.append("}")

    return convert


def _array_converter(type_: ArrayType, options: CodecOptions, path: str) -> Converter:
    element_converter = _create_converter(type_.element, options, f"{path}[]")

    def convert(value: Any, out: List[str]) -> None:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
            raise _type_error(path, "sequence", value)
        out.append("[")
        for index, item in enumerate(value):
            if index:
                out.append(",")
            element_converter(item, out)
        out.append("]")

    return convert


def _map_converter(type_: MapType, options: CodecOptions, path: str) -> Converter:
    if type_.key.root != TypeRoot.STRING:
        raise EncodingError(
            f"JSON format doesn't support non-string as key type of map at {path}: {type_}"
        )
    value_converter = _create_converter(type_.value, options, f"{path}{{}}")
    policy = options.null_key_policy
    literal_key = json.dumps(policy.literal, ensure_ascii=False)

    def convert(value: Any, out: List[str]) -> None:
        if not isinstance(value, Mapping):
            raise _type_error(path, "mapping", value)
        out.append("{")
        first = True
        for key, item in value.items():
            if key is None:
                if policy.mode == NullKeyMode.FAIL:
                    raise EncodingError(
                        f"JSON format doesn't support to serialize map data with null keys at "
                        f"{path}. You can drop null key entries or encode null in literals by "
                        f"specifying the null key policy."
                    )
                if policy.mode == NullKeyMode.DROP:
                    continue
                encoded_key = literal_key
            elif isinstance(key, str):
                encoded_key = json.dumps(key, ensure_ascii=False)
            else:
                raise _type_error(f"{path} key", "str", key)
            if not first:
                out.append(",")
            first = False
            out.append(encoded_key)
            out.append(":")
            value_converter(item, out)
        out.append("}")

    return convert
