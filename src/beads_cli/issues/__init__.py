"""Issue records and the JSONL store.

Public API surface for the record model, line-level store access and
identifier allocation.
"""

from .ids import (
    AllocationError,
    IdentifierSource,
    NamespaceScanSource,
    format_id,
    high_water_mark,
    infer_prefix,
    split_id,
)
from .models import (
    TEXT_FIELDS,
    Dependency,
    Record,
    RecordParseError,
    parse_record,
    serialize_record,
)
from .store import (
    StoreError,
    iter_records,
    read_lines,
    write_lines,
    write_text,
)

__all__ = [
    "AllocationError",
    "Dependency",
    "IdentifierSource",
    "NamespaceScanSource",
    "Record",
    "RecordParseError",
    "StoreError",
    "TEXT_FIELDS",
    "format_id",
    "high_water_mark",
    "infer_prefix",
    "iter_records",
    "parse_record",
    "read_lines",
    "serialize_record",
    "split_id",
    "write_lines",
    "write_text",
]
