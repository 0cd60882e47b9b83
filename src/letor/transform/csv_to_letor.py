from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from letor.data.record import Record, parse_float, parse_uint
from letor.errors import ConfigurationError, EmptyInputError, FormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformResult:
    records: list[Record]
    feature_names: list[str]


def read_header_names(path: str | Path, separator: str) -> list[str]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        first = f.readline()
    names = [name.strip() for name in first.rstrip("\r\n").split(separator) if name.strip()]
    if not names:
        raise ConfigurationError(f"Could not get column names from {p}")
    return names


def _load_table(input_path: Path, separator: str, headers: Optional[str | Path]) -> pd.DataFrame:
    read_kwargs = dict(sep=separator, dtype=str, keep_default_na=False, skipinitialspace=True)
    if headers is not None:
        read_kwargs.update(header=None, names=read_header_names(headers, separator))
    else:
        read_kwargs.update(header=0)
    try:
        return pd.read_csv(input_path, **read_kwargs)
    except pd.errors.EmptyDataError:
        raise EmptyInputError(f"Input data is empty: {input_path}") from None
    except pd.errors.ParserError as e:
        raise FormatError(f"could not parse the table: {e}", source=str(input_path)) from None
    except UnicodeDecodeError as e:
        raise FormatError(f"invalid UTF-8 at byte offset {e.start}", source=str(input_path)) from None


def select_feature_columns(
    columns: Sequence[str],
    *,
    label_column: str,
    query_id_column: str,
    description_column: Optional[str] = None,
    feature_columns: Optional[Sequence[str]] = None,
) -> list[str]:
    """Explicit feature columns, or every column that is not label, query id or description."""
    if feature_columns:
        missing = [c for c in feature_columns if c not in columns]
        if missing:
            raise ConfigurationError(f"Feature columns not found in input: {', '.join(missing)}")
        return list(feature_columns)
    reserved = {label_column, query_id_column}
    if description_column:
        reserved.add(description_column)
    return [c for c in columns if c not in reserved]


def transform_csv(
    input_path: str | Path,
    *,
    separator: str = "\t",
    headers: Optional[str | Path] = None,
    label_column: str = "Label",
    query_id_column: str = "QueryId",
    description_column: Optional[str] = None,
    feature_columns: Optional[Sequence[str]] = None,
) -> TransformResult:
    """
    Turn a delimited table (one row per document) into LETOR records.

    Column names come from the first row of the input, or from the first line
    of `headers` when the input has no header row.
    """
    input_path = Path(input_path)
    df = _load_table(input_path, separator, headers)
    columns = [str(c).strip() for c in df.columns]
    df.columns = columns

    for role, name in (("label", label_column), ("query id", query_id_column), ("description", description_column)):
        if name and name not in columns:
            raise ConfigurationError(f"The {role} column '{name}' was not found in {input_path}")

    features = select_feature_columns(
        columns,
        label_column=label_column,
        query_id_column=query_id_column,
        description_column=description_column,
        feature_columns=feature_columns,
    )
    if not features:
        raise ConfigurationError(f"No feature columns left in {input_path}")
    if df.empty:
        raise EmptyInputError(f"Input data is empty: {input_path}")

    # first data row is line 2 when the input carries its own header
    first_line = 1 if headers is not None else 2
    records: list[Record] = []
    for offset, row in enumerate(df.to_dict(orient="records")):
        line_number = first_line + offset

        def cell(column: str) -> str:
            return str(row[column]).strip()

        def fail(reason: str) -> FormatError:
            return FormatError(reason, line_number=line_number, source=str(input_path))

        try:
            label = parse_uint(cell(label_column))
        except ValueError:
            raise fail(f"Column {label_column} cannot be parsed as an unsigned integer: {cell(label_column)!r}") from None
        try:
            group_id = parse_uint(cell(query_id_column))
        except ValueError:
            raise fail(
                f"Column {query_id_column} cannot be parsed as an unsigned integer: {cell(query_id_column)!r}"
            ) from None

        values = []
        for column in features:
            try:
                values.append(parse_float(cell(column)))
            except ValueError:
                raise fail(f"Column {column} cannot be parsed as a float: {cell(column)!r}") from None

        description = " ".join(cell(description_column).split()) if description_column else ""
        records.append(Record(label=label, group_id=group_id, features=tuple(values), description=description))

    logger.info(f"Transformed {len(records)} rows from {input_path} with {len(features)} features")
    return TransformResult(records=records, feature_names=features)


def default_output_paths(input_path: str | Path) -> tuple[Path, Path]:
    """<stem>-letor.txt and <stem>-features.txt in the current directory."""
    stem = Path(input_path).stem
    return Path(f"{stem}-letor.txt"), Path(f"{stem}-features.txt")


def save_feature_map(feature_names: Sequence[str], input_path: str | Path, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8", newline="\n") as f:
        f.write(f"#\tFeatures from {input_path}\n")
        for index, name in enumerate(feature_names, start=1):
            f.write(f"{index}\t{name}\n")
    logger.info(f"Wrote feature map for {len(feature_names)} features to {p}")
    return p
