"""
Debezium JSON Dialect

Wire layout, one object per change event:
    {"before": row|null, "after": row|null, "op": "c"|"d",
     "source": {"table": "<target table>"}, "ts_ms": <epoch ms>}

Update pairs are written as two independent records: the pre-update image as
a delete and the post-update image as a create. No "u" operation is emitted.
"""

from cdc_json.clock import Clock
from cdc_json.errors import UnsupportedChangeKind
from cdc_json.formats.base import Dialect, ScratchEnvelope, row_image
from cdc_json.models.config import EnvelopeConfig
from cdc_json.models.row import ChangeRow, RowKind
from cdc_json.models.types import RowType, bigint, field, row, string

OP_INSERT = "c"
OP_DELETE = "d"

# Field slots, in schema order
BEFORE, AFTER, OP, SOURCE, TS_MS = range(5)

_OPS = {
    RowKind.INSERT: OP_INSERT,
    RowKind.UPDATE_AFTER: OP_INSERT,
    RowKind.UPDATE_BEFORE: OP_DELETE,
    RowKind.DELETE: OP_DELETE,
}


class DebeziumDialect(Dialect):
    """Debezium-style before/after envelope"""

    name = "debezium-json"
    ops = (OP_INSERT, OP_DELETE)

    def build_schema(self, row_type: RowType) -> RowType:
        image = row_type.as_nullable()
        return row(
            field("before", image),
            field("after", image),
            field("op", string()),
            field("source", row(field("table", string()))),
            field("ts_ms", bigint()),
        )

    def new_scratch(self, config: EnvelopeConfig) -> ScratchEnvelope:
        scratch = ScratchEnvelope(5)
        scratch.fields[SOURCE] = (config.target_table,)
        return scratch

    def map_to_envelope(self, row: ChangeRow, scratch: ScratchEnvelope, clock: Clock) -> None:
        kind = row.kind
        if not isinstance(kind, RowKind):
            raise UnsupportedChangeKind(kind)

        op = _OPS[kind]
        image = row_image(row)
        fields = scratch.fields
        if op == OP_INSERT:
            fields[BEFORE] = None
            fields[AFTER] = image
        else:
            fields[BEFORE] = image
            fields[AFTER] = None
        fields[OP] = op
        fields[TS_MS] = clock.now_millis()
        scratch.op = op
