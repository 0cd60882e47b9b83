"""
Query-group aware dataset partitioning.

Records are never split individually: a query group lands in one subset (or
one fold's test set) as a whole.
"""

from letor.split.partition import (
    DatasetSplit,
    Fold,
    assign_fold_groups,
    assign_split_groups,
    fold_records,
    split_records,
    validate_folds,
    validate_fractions,
)
from letor.split.persist import persist_folds, persist_split

__all__ = [
    "DatasetSplit",
    "Fold",
    "assign_fold_groups",
    "assign_split_groups",
    "fold_records",
    "persist_folds",
    "persist_split",
    "split_records",
    "validate_folds",
    "validate_fractions",
]
