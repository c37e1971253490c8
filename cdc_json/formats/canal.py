"""
Canal JSON Dialect

Wire layout, one object per change event:
    {"data": [row], "old": null, "type": "INSERT"|"DELETE",
     "database": "<db>"|null, "table": "<target table>", "isDdl": false,
     "ts": <epoch ms>}

Canal consumers read "data" as the list of affected row images and "type"
as the operation. Like the Debezium dialect, update pairs are written as a
DELETE of the old image followed by an INSERT of the new one, so "old" is
always null.
"""

from cdc_json.clock import Clock
from cdc_json.errors import UnsupportedChangeKind
from cdc_json.formats.base import Dialect, ScratchEnvelope, row_image
from cdc_json.models.config import EnvelopeConfig
from cdc_json.models.row import ChangeRow, RowKind
from cdc_json.models.types import RowType, array, bigint, boolean, field, row, string

OP_INSERT = "INSERT"
OP_DELETE = "DELETE"

# Field slots, in schema order
DATA, OLD, TYPE, DATABASE, TABLE, IS_DDL, TS = range(7)

_OPS = {
    RowKind.INSERT: OP_INSERT,
    RowKind.UPDATE_AFTER: OP_INSERT,
    RowKind.UPDATE_BEFORE: OP_DELETE,
    RowKind.DELETE: OP_DELETE,
}


class CanalScratchEnvelope(ScratchEnvelope):
    """Scratch envelope with a reusable single-slot "data" list"""

    __slots__ = ("data",)

    def __init__(self, arity: int):
        super().__init__(arity)
        self.data = [None]


class CanalDialect(Dialect):
    """Canal-style data/type envelope"""

    name = "canal-json"
    ops = (OP_INSERT, OP_DELETE)

    def build_schema(self, row_type: RowType) -> RowType:
        images = array(row_type.as_not_null())
        return row(
            field("data", images.as_not_null()),
            field("old", images),
            field("type", string()),
            field("database", string()),
            field("table", string()),
            field("isDdl", boolean()),
            field("ts", bigint()),
        )

    def new_scratch(self, config: EnvelopeConfig) -> ScratchEnvelope:
        scratch = CanalScratchEnvelope(7)
        scratch.fields[DATA] = scratch.data
        scratch.fields[DATABASE] = config.target_database
        scratch.fields[TABLE] = config.target_table
        scratch.fields[IS_DDL] = False
        return scratch

    def map_to_envelope(self, row: ChangeRow, scratch: ScratchEnvelope, clock: Clock) -> None:
        kind = row.kind
        if not isinstance(kind, RowKind):
            raise UnsupportedChangeKind(kind)

        op = _OPS[kind]
        fields = scratch.fields
        scratch.data[0] = row_image(row)
        fields[DATA] = scratch.data
        fields[OLD] = None
        fields[TYPE] = op
        fields[TS] = clock.now_millis()
        scratch.op = op
