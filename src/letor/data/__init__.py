from letor.data.groups import group_records
from letor.data.io import LetorFile, read_records, save_records, write_records
from letor.data.record import Record, format_record, parse_record

__all__ = [
    "LetorFile",
    "Record",
    "format_record",
    "group_records",
    "parse_record",
    "read_records",
    "save_records",
    "write_records",
]
