from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

import lightgbm as lgb
import numpy as np

from letor.data.groups import group_records
from letor.data.record import Record
from letor.errors import EmptyInputError, FormatError
from letor.train.metrics import RankingMetrics, ranking_metrics, validate_truncation_level

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingMatrix:
    """
    Dense view of a LETOR subset for a ranking library: rows are reordered so
    each query group is contiguous, as LightGBM's `group` argument expects.
    """

    features: np.ndarray  # [num_records, num_features] float32
    labels: np.ndarray  # [num_records] int32
    group_ids: np.ndarray  # [num_groups]
    group_sizes: np.ndarray  # [num_groups]

    @classmethod
    def from_records(cls, records: Iterable[Record], num_features: int) -> "RankingMatrix":
        groups = group_records(records)
        if not groups:
            raise EmptyInputError("No records to build a ranking matrix from")

        rows: list[tuple[float, ...]] = []
        labels: list[int] = []
        for members in groups.values():
            for r in members:
                if r.num_features != num_features:
                    raise FormatError(
                        f"expected {num_features} features, got {r.num_features}", line=r.to_line()
                    )
                rows.append(r.features)
                labels.append(r.label)

        return cls(
            features=np.asarray(rows, dtype=np.float32),
            labels=np.asarray(labels, dtype=np.int32),
            group_ids=np.asarray(list(groups.keys()), dtype=np.int64),
            group_sizes=np.asarray([len(m) for m in groups.values()], dtype=np.int32),
        )


@dataclass(frozen=True)
class TrainerConfig:
    iterations: int = 100
    leaves: Optional[int] = None
    min_examples: Optional[int] = None
    learning_rate: Optional[float] = None
    seed: Optional[int] = None

    def to_lgbm_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "objective": "lambdarank",
            "n_estimators": self.iterations,
            "verbosity": -1,
        }
        # Unset options fall back to LightGBM's own defaults.
        if self.leaves is not None:
            params["num_leaves"] = self.leaves
        if self.min_examples is not None:
            params["min_child_samples"] = self.min_examples
        if self.learning_rate is not None:
            params["learning_rate"] = self.learning_rate
        if self.seed is not None:
            params["random_state"] = self.seed
        return params


def fit_ranker(records: Iterable[Record], config: TrainerConfig, num_features: int) -> lgb.LGBMRanker:
    data = RankingMatrix.from_records(records, num_features)
    logger.info(
        f"Training LightGBM ranker on {len(data.labels)} records in {len(data.group_sizes)} groups "
        f"({num_features} features)"
    )
    model = lgb.LGBMRanker(**config.to_lgbm_params())
    model.fit(data.features, data.labels, group=data.group_sizes)
    return model


def evaluate_ranker(
    model,
    records: Iterable[Record],
    truncation_level: int,
    num_features: int,
) -> RankingMetrics:
    """`model` is anything with a scikit-learn style predict(X) -> scores."""
    validate_truncation_level(truncation_level)
    data = RankingMatrix.from_records(records, num_features)
    scores = np.asarray(model.predict(data.features))
    return ranking_metrics(data.labels, scores, data.group_sizes, truncation_level)


def save_model(model: lgb.LGBMRanker, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    model.booster_.save_model(str(p))
    logger.info(f"Saved model to {p}")
    return p
