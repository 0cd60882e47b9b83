from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from letor.data.io import stage_records
from letor.data.record import Record
from letor.split.partition import DatasetSplit, Fold

logger = logging.getLogger(__name__)


def split_output_path(input_path: str | Path, subset: str) -> Path:
    """data/train.txt -> data/train.<subset>.txt"""
    p = Path(input_path)
    return p.with_name(f"{p.stem}.{subset}{p.suffix}")


def fold_output_dir(out_dir: Optional[str | Path], fold: Fold) -> Path:
    base = Path(out_dir) if out_dir is not None else Path(".")
    return base / f"fold{fold.number}"


def write_outputs(outputs: Iterable[tuple[Path, list[Record]]]) -> list[Path]:
    """
    Write every output to a temporary file first and only rename them into
    place once all of them are complete.
    """
    staged: list[tuple[Path, Path, int]] = []
    try:
        for path, records in outputs:
            tmp, count = stage_records(path, records)
            staged.append((tmp, path, count))
    except BaseException:
        for tmp, _, _ in staged:
            tmp.unlink(missing_ok=True)
        raise

    written = []
    for tmp, path, count in staged:
        os.replace(tmp, path)
        logger.info(f"Wrote {count} records to {path}")
        written.append(path)
    return written


def persist_split(split: DatasetSplit, input_path: str | Path) -> dict[str, Path]:
    targets = [(name, split_output_path(input_path, name), records) for name, records in split.subsets()]
    write_outputs((path, records) for _, path, records in targets)
    return {name: path for name, path, _ in targets}


def persist_folds(folds: list[Fold], out_dir: Optional[str | Path] = None) -> list[Path]:
    outputs: list[tuple[Path, list[Record]]] = []
    for fold in folds:
        fold_dir = fold_output_dir(out_dir, fold)
        outputs.append((fold_dir / "train.txt", fold.train))
        outputs.append((fold_dir / "test.txt", fold.test))
    write_outputs(outputs)
    return [fold_output_dir(out_dir, fold) for fold in folds]
