"""
Logical Type Model - row schemas consumed by the JSON codec
Immutable and hashable so derived envelope schemas can be compared and reused
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple


class TypeRoot(str, Enum):
    """Root of a logical type"""

    BOOLEAN = "BOOLEAN"
    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    STRING = "STRING"
    BYTES = "BYTES"
    DATE = "DATE"
    TIME = "TIME"
    TIMESTAMP = "TIMESTAMP"
    TIMESTAMP_LTZ = "TIMESTAMP_LTZ"
    ROW = "ROW"
    ARRAY = "ARRAY"
    MAP = "MAP"


# Signed bit width of the integer roots
INTEGER_BITS = {
    TypeRoot.TINYINT: 8,
    TypeRoot.SMALLINT: 16,
    TypeRoot.INTEGER: 32,
    TypeRoot.BIGINT: 64,
}


@dataclass(frozen=True)
class LogicalType:
    """
    Base logical type

    Attributes:
        root: Type root
        nullable: Whether null is an accepted value
    """

    root: TypeRoot
    nullable: bool = True

    def as_nullable(self) -> "LogicalType":
        """Copy of this type that accepts null"""
        return replace(self, nullable=True)

    def as_not_null(self) -> "LogicalType":
        """Copy of this type that rejects null"""
        return replace(self, nullable=False)

    def depth(self) -> int:
        """Nesting depth (atomic types are depth 1)"""
        return 1

    def summary(self) -> str:
        suffix = "" if self.nullable else " NOT NULL"
        return f"{self.root.value}{suffix}"

    def __str__(self) -> str:
        return self.summary()


@dataclass(frozen=True)
class DecimalType(LogicalType):
    """Fixed precision decimal"""

    root: TypeRoot = TypeRoot.DECIMAL
    nullable: bool = True
    precision: int = 10
    scale: int = 0

    def __post_init__(self) -> None:
        if not 1 <= self.precision <= 38:
            raise ValueError("precision must be between 1 and 38")
        if not 0 <= self.scale <= self.precision:
            raise ValueError("scale must be between 0 and precision")

    def summary(self) -> str:
        suffix = "" if self.nullable else " NOT NULL"
        return f"DECIMAL({self.precision}, {self.scale}){suffix}"


@dataclass(frozen=True)
class RowField:
    """Named field of a ROW type"""

    name: str
    type: LogicalType


@dataclass(frozen=True)
class RowType(LogicalType):
    """Ordered sequence of named fields"""

    root: TypeRoot = TypeRoot.ROW
    nullable: bool = True
    fields: Tuple[RowField, ...] = ()

    def __post_init__(self) -> None:
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Field names must be unique: {names}")

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def depth(self) -> int:
        return 1 + max((f.type.depth() for f in self.fields), default=0)

    def summary(self) -> str:
        inner = ", ".join(f"`{f.name}` {f.type.summary()}" for f in self.fields)
        suffix = "" if self.nullable else " NOT NULL"
        return f"ROW<{inner}>{suffix}"


@dataclass(frozen=True)
class ArrayType(LogicalType):
    """Homogeneous list"""

    root: TypeRoot = TypeRoot.ARRAY
    nullable: bool = True
    element: LogicalType = LogicalType(TypeRoot.STRING)

    def depth(self) -> int:
        return 1 + self.element.depth()

    def summary(self) -> str:
        suffix = "" if self.nullable else " NOT NULL"
        return f"ARRAY<{self.element.summary()}>{suffix}"


@dataclass(frozen=True)
class MapType(LogicalType):
    """Key/value mapping; JSON objects only carry string keys"""

    root: TypeRoot = TypeRoot.MAP
    nullable: bool = True
    key: LogicalType = LogicalType(TypeRoot.STRING)
    value: LogicalType = LogicalType(TypeRoot.STRING)

    def depth(self) -> int:
        return 1 + max(self.key.depth(), self.value.depth())

    def summary(self) -> str:
        suffix = "" if self.nullable else " NOT NULL"
        return f"MAP<{self.key.summary()}, {self.value.summary()}>{suffix}"


# Convenience constructors


def boolean() -> LogicalType:
    return LogicalType(TypeRoot.BOOLEAN)


def tinyint() -> LogicalType:
    return LogicalType(TypeRoot.TINYINT)


def smallint() -> LogicalType:
    return LogicalType(TypeRoot.SMALLINT)


def integer() -> LogicalType:
    return LogicalType(TypeRoot.INTEGER)


def bigint() -> LogicalType:
    return LogicalType(TypeRoot.BIGINT)


def float_() -> LogicalType:
    return LogicalType(TypeRoot.FLOAT)


def double() -> LogicalType:
    return LogicalType(TypeRoot.DOUBLE)


def decimal(precision: int, scale: int = 0) -> DecimalType:
    return DecimalType(precision=precision, scale=scale)


def string() -> LogicalType:
    return LogicalType(TypeRoot.STRING)


def bytes_() -> LogicalType:
    return LogicalType(TypeRoot.BYTES)


def date() -> LogicalType:
    return LogicalType(TypeRoot.DATE)


def time() -> LogicalType:
    return LogicalType(TypeRoot.TIME)


def timestamp() -> LogicalType:
    return LogicalType(TypeRoot.TIMESTAMP)


def timestamp_ltz() -> LogicalType:
    return LogicalType(TypeRoot.TIMESTAMP_LTZ)


def field(name: str, type_: LogicalType) -> RowField:
    return RowField(name=name, type=type_)


def row(*fields: RowField) -> RowType:
    """
    Build a ROW type from fields

    Example:
        >>> row(field("sku", string()), field("qty", integer()))
    """
    return RowType(fields=tuple(fields))


def array(element: LogicalType) -> ArrayType:
    return ArrayType(element=element)


def map_(key: LogicalType, value: LogicalType) -> MapType:
    return MapType(key=key, value=value)
