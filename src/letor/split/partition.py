from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from letor.data.groups import CancelSignal, check_cancelled, group_records
from letor.data.record import Record
from letor.errors import ConfigurationError, EmptyInputError

logger = logging.getLogger(__name__)

TRAIN = "train"
TEST = "test"
VALIDATION = "validation"


def validate_fractions(test_fraction: float, validation_fraction: float) -> None:
    for name, value in (("test", test_fraction), ("validation", validation_fraction)):
        if not isinstance(value, (int, float)) or math.isnan(value):
            raise ConfigurationError(f"The {name} fraction must be a number, got {value!r}")
        if value < 0 or value >= 1:
            raise ConfigurationError(
                f"The {name} fraction must be between 0 inclusive and 1 exclusive, got {value}"
            )
    if test_fraction + validation_fraction >= 1:
        raise ConfigurationError(
            "The test fraction and validation fraction values must sum to less than 1, "
            f"got {test_fraction} + {validation_fraction}"
        )
    if test_fraction == 0 and validation_fraction == 0:
        raise ConfigurationError("The test fraction, validation fraction or both must be greater than 0")


def validate_folds(folds: int) -> None:
    if isinstance(folds, bool) or not isinstance(folds, int) or folds <= 1:
        raise ConfigurationError(f"The number of cross-validation folds must be greater than 1, got {folds!r}")


def _make_rng(seed: Optional[int], rng: Optional[random.Random]) -> random.Random:
    if rng is not None:
        return rng
    return random.Random(seed)


def assign_split_groups(
    group_ids: Sequence[int],
    test_fraction: float,
    validation_fraction: float,
    rng: random.Random,
    *,
    cancel: Optional[CancelSignal] = None,
) -> dict[int, str]:
    """
    Assign every query group to train, test or validation.

    Each group is held out with probability test_fraction + validation_fraction.
    When both fractions are set the held-out groups get a second draw, in the
    same order, deciding validation (probability v / (t + v)) versus test.
    """
    held_out_fraction = test_fraction + validation_fraction
    assignments: dict[int, str] = {}
    held_out: list[int] = []
    for gid in group_ids:
        check_cancelled(cancel)
        if rng.random() < held_out_fraction:
            held_out.append(gid)
        else:
            assignments[gid] = TRAIN

    if validation_fraction == 0:
        assignments.update((gid, TEST) for gid in held_out)
    elif test_fraction == 0:
        assignments.update((gid, VALIDATION) for gid in held_out)
    else:
        validation_share = validation_fraction / held_out_fraction
        for gid in held_out:
            check_cancelled(cancel)
            assignments[gid] = VALIDATION if rng.random() < validation_share else TEST

    # Same iteration order as group_ids.
    return {gid: assignments[gid] for gid in group_ids}


def assign_fold_groups(
    group_ids: Sequence[int],
    folds: int,
    rng: random.Random,
    *,
    cancel: Optional[CancelSignal] = None,
) -> dict[int, int]:
    """Deal shuffled query groups round-robin into `folds` buckets."""
    order = list(group_ids)
    rng.shuffle(order)
    buckets: dict[int, int] = {}
    for position, gid in enumerate(order):
        check_cancelled(cancel)
        buckets[gid] = position % folds
    return {gid: buckets[gid] for gid in group_ids}


def _materialize(
    records: Iterable[Record], cancel: Optional[CancelSignal]
) -> tuple[list[Record], dict[int, list[Record]]]:
    rows = list(records)
    if not rows:
        raise EmptyInputError("No records to partition")
    return rows, group_records(rows, cancel=cancel)


@dataclass(frozen=True)
class DatasetSplit:
    train: list[Record]
    test: Optional[list[Record]]
    validation: Optional[list[Record]]
    assignments: dict[int, str]
    seed: Optional[int]

    def subsets(self) -> Iterator[tuple[str, list[Record]]]:
        yield TRAIN, self.train
        if self.test is not None:
            yield TEST, self.test
        if self.validation is not None:
            yield VALIDATION, self.validation

    def groups_in(self, name: str) -> list[int]:
        return [gid for gid, subset in self.assignments.items() if subset == name]


@dataclass(frozen=True)
class Fold:
    index: int
    train: list[Record]
    test: list[Record]

    @property
    def number(self) -> int:
        return self.index + 1


def split_records(
    records: Iterable[Record],
    test_fraction: float,
    validation_fraction: float = 0.0,
    *,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    cancel: Optional[CancelSignal] = None,
) -> DatasetSplit:
    """
    Split records into train/test/validation subsets by whole query groups.

    The realized fractions are probabilistic per group, so small datasets can
    land far from the nominal values. Same seed and input order give the same
    split.
    """
    validate_fractions(test_fraction, validation_fraction)
    rows, groups = _materialize(records, cancel)
    generator = _make_rng(seed, rng)

    assignments = assign_split_groups(
        list(groups), test_fraction, validation_fraction, generator, cancel=cancel
    )

    def select(name: str) -> list[Record]:
        return [r for r in rows if assignments[r.group_id] == name]

    split = DatasetSplit(
        train=select(TRAIN),
        test=select(TEST) if test_fraction > 0 else None,
        validation=select(VALIDATION) if validation_fraction > 0 else None,
        assignments=assignments,
        seed=seed,
    )
    logger.info(
        f"Split {len(rows)} records in {len(groups)} groups: "
        + ", ".join(f"{name}={len(subset)}" for name, subset in split.subsets())
    )
    return split


def fold_records(
    records: Iterable[Record],
    folds: int,
    *,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    cancel: Optional[CancelSignal] = None,
) -> list[Fold]:
    """
    K-fold cross-validation split by query group.

    Folds hold a near-equal number of groups (not records). Every group is in
    the test set of exactly one fold and in the train set of all the others.
    """
    validate_folds(folds)
    rows, groups = _materialize(records, cancel)
    generator = _make_rng(seed, rng)

    buckets = assign_fold_groups(list(groups), folds, generator, cancel=cancel)
    if len(groups) < folds:
        logger.warning(
            f"Only {len(groups)} query groups for {folds} folds, some folds have an empty test set"
        )

    out: list[Fold] = []
    for index in range(folds):
        check_cancelled(cancel)
        out.append(
            Fold(
                index=index,
                train=[r for r in rows if buckets[r.group_id] != index],
                test=[r for r in rows if buckets[r.group_id] == index],
            )
        )
    logger.info(f"Created {folds} folds over {len(rows)} records in {len(groups)} groups")
    return out
