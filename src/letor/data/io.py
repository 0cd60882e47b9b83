from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO, Union

from letor.data.record import Record, format_record, parse_record
from letor.errors import EmptyInputError, FormatError

logger = logging.getLogger(__name__)

RecordSource = Union[str, Path, Iterable[str]]


def _is_skipped(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def iter_record_lines(lines: Iterable[str], *, source: Optional[str] = None) -> Iterator[Record]:
    """
    Parse LETOR lines one by one. Blank and comment-only lines are skipped,
    the first malformed line raises FormatError and ends the iteration.
    """
    for line_number, line in enumerate(lines, start=1):
        if _is_skipped(line):
            continue
        try:
            yield parse_record(line)
        except FormatError as e:
            raise e.with_location(line_number=line_number, source=source) from None


def read_records(source: RecordSource) -> Iterator[Record]:
    """
    Lazily read records from a file path or from any iterable of text lines.

    A path is opened when iteration starts and closed when it ends, a stream is
    consumed as-is (single pass).
    """
    if isinstance(source, (str, Path)):
        return _read_path(Path(source))
    return iter_record_lines(source, source=getattr(source, "name", None))


def _decode_lines(raw_lines: Iterable[bytes], *, source: str) -> Iterator[str]:
    for line_number, raw in enumerate(raw_lines, start=1):
        try:
            yield raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(
                f"invalid UTF-8 byte {raw[e.start:e.start + 1]!r} at column {e.start + 1}",
                line_number=line_number,
                source=source,
            ) from None


def _read_path(path: Path) -> Iterator[Record]:
    with path.open("rb") as f:
        yield from iter_record_lines(_decode_lines(f, source=str(path)), source=str(path))


class LetorFile:
    """
    A LETOR dataset on disk. Every iteration reopens the file, so the record
    sequence can be walked any number of times.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def __iter__(self) -> Iterator[Record]:
        return _read_path(self.path)

    def __repr__(self) -> str:
        return f"LetorFile({str(self.path)!r})"

    def first_record(self) -> Record:
        for record in self:
            return record
        raise EmptyInputError(f"No records in {self.path}")

    def num_features(self) -> int:
        """Feature count of the dataset, taken from its first record."""
        return self.first_record().num_features


def write_records(sink: TextIO, records: Iterable[Record]) -> int:
    count = 0
    for record in records:
        sink.write(format_record(record))
        count += 1
    return count


def stage_records(path: str | Path, records: Iterable[Record]) -> tuple[Path, int]:
    """
    Write records to a temporary file next to `path` and return it with the
    record count. The caller renames it into place with os.replace.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=p.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            count = write_records(f, records)
            f.flush()
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return tmp, count


def save_records(path: str | Path, records: Iterable[Record]) -> int:
    tmp, count = stage_records(path, records)
    try:
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    logger.info(f"Wrote {count} records to {path}")
    return count
