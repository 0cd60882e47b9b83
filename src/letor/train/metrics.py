from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from sklearn.metrics import dcg_score, ndcg_score

from letor.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingMetrics:
    """Mean DCG@k / NDCG@k over query groups, index 0 holds @1."""

    dcg: list[float]
    ndcg: list[float]
    queries_evaluated: int

    @property
    def truncation_level(self) -> int:
        return len(self.dcg)

    def as_dict(self) -> dict[str, float]:
        out: dict[str, float] = {"queries_evaluated": float(self.queries_evaluated)}
        for k, (d, n) in enumerate(zip(self.dcg, self.ndcg), start=1):
            out[f"dcg@{k}"] = d
            out[f"ndcg@{k}"] = n
        return out


def validate_truncation_level(truncation_level: int) -> None:
    if isinstance(truncation_level, bool) or not isinstance(truncation_level, int) or truncation_level < 1:
        raise ConfigurationError(f"The (N)DCG truncation level must be at least 1, got {truncation_level!r}")


def ranking_metrics(
    labels: np.ndarray,
    scores: np.ndarray,
    group_sizes: np.ndarray,
    truncation_level: int = 10,
) -> RankingMetrics:
    """
    DCG/NDCG at every cut-off 1..truncation_level, averaged over groups.

    Gains are 2**label - 1. Single-document groups are skipped since NDCG is
    undefined for them.
    """
    validate_truncation_level(truncation_level)
    gains = np.power(2.0, np.asarray(labels, dtype=np.float64)) - 1.0
    scores = np.asarray(scores, dtype=np.float64)

    dcg_sums = np.zeros(truncation_level)
    ndcg_sums = np.zeros(truncation_level)
    used = 0
    skipped = 0
    start = 0
    for size in group_sizes:
        end = start + int(size)
        if size < 2:
            skipped += 1
            start = end
            continue
        y_true = gains[start:end][None, :]
        y_score = scores[start:end][None, :]
        for k in range(1, truncation_level + 1):
            dcg_sums[k - 1] += dcg_score(y_true, y_score, k=k)
            ndcg_sums[k - 1] += ndcg_score(y_true, y_score, k=k)
        used += 1
        start = end

    if skipped:
        logger.warning(f"Skipped {skipped} single-document query groups when computing (N)DCG")
    if used == 0:
        return RankingMetrics(dcg=[0.0] * truncation_level, ndcg=[0.0] * truncation_level, queries_evaluated=0)

    return RankingMetrics(
        dcg=[float(v) for v in dcg_sums / used],
        ndcg=[float(v) for v in ndcg_sums / used],
        queries_evaluated=used,
    )
