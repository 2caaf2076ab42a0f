"""
Diagnostics for ranked feeds.

Rankings have no ground truth, so evaluation focuses on:
1. Score distribution of a ranked feed
2. Recency monotonicity (older posts never get a higher recency component)
3. Sensitivity of the ranking to a change of weights

These are sanity checks on the scoring rules, not a measure of feed quality.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Any, Optional, Sequence
import json

import numpy as np
from scipy.stats import spearmanr

from ..schema.entities import Post, Profile, ScoredPost, utc_now
from ..scoring.components import calculate_recency_score, hours_since
from ..scoring.weights import ScoringWeights
from ..ranking.filters import FeedFilters, apply_filters
from ..ranking.ranker import FeedRanker

logger = logging.getLogger(__name__)

DEFAULT_QUANTILES = (0.1, 0.25, 0.5, 0.75, 0.9)


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    count: int
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 12.5, "p50": 40.0, "p90": 130.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": int(self.count),
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class RecencyMonotonicityCheck:
    """Results of the recency monotonicity sanity check."""
    correlation_with_age: float
    is_monotonic: bool
    n_violations: int
    violation_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correlation_with_age": float(self.correlation_with_age),
            "is_monotonic": bool(self.is_monotonic),
            "n_violations": int(self.n_violations),
            "violation_rate": float(self.violation_rate)
        }


@dataclass
class WeightSensitivity:
    """Agreement between the rankings produced by two weight configurations."""
    n_common: int
    rank_correlation: float
    top_k: int
    top_k_jaccard: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_common": int(self.n_common),
            "rank_correlation": float(self.rank_correlation),
            "top_k": int(self.top_k),
            "top_k_jaccard": float(self.top_k_jaccard)
        }


@dataclass
class EvaluationReport:
    """
    Evaluation report for one ranked feed.

    Contains distribution statistics and sanity checks.
    """
    viewer_id: str
    distribution_stats: ScoreDistributionStats
    monotonicity_check: Optional[RecencyMonotonicityCheck] = None
    weight_sensitivity: Optional[WeightSensitivity] = None
    additional_metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "viewer_id": self.viewer_id,
            "distribution_stats": self.distribution_stats.to_dict(),
            "additional_metrics": self.additional_metrics
        }
        if self.monotonicity_check:
            result["monotonicity_check"] = self.monotonicity_check.to_dict()
        if self.weight_sensitivity:
            result["weight_sensitivity"] = self.weight_sensitivity.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved evaluation report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        stats = self.distribution_stats
        lines = [
            f"Evaluation Report: viewer {self.viewer_id}",
            "=" * 50,
            "",
            f"Score Distribution ({stats.count} posts):",
            f"  Mean: {stats.mean:.4f}",
            f"  Std:  {stats.std:.4f}",
            f"  Min:  {stats.min:.4f}",
            f"  Max:  {stats.max:.4f}",
        ]

        for q_name, q_value in stats.quantiles.items():
            lines.append(f"  {q_name}: {q_value:.4f}")

        if self.monotonicity_check:
            lines.extend([
                "",
                "Recency Monotonicity:",
                f"  Correlation with age: {self.monotonicity_check.correlation_with_age:.4f}",
                f"  Is monotonic: {self.monotonicity_check.is_monotonic}",
                f"  Violation rate: {self.monotonicity_check.violation_rate:.2%}",
            ])

        if self.weight_sensitivity:
            lines.extend([
                "",
                "Weight Sensitivity:",
                f"  Common posts: {self.weight_sensitivity.n_common}",
                f"  Rank correlation: {self.weight_sensitivity.rank_correlation:.4f}",
                f"  Top-{self.weight_sensitivity.top_k} Jaccard: {self.weight_sensitivity.top_k_jaccard:.4f}",
            ])

        return "\n".join(lines)


def _safe_spearman(a: np.ndarray, b: np.ndarray) -> float:
    """Spearman correlation, 0.0 when undefined (fewer than 2 points or constant input)."""
    if len(a) < 2 or np.all(a == a[0]) or np.all(b == b[0]):
        return 0.0
    correlation, _ = spearmanr(a, b)
    return float(correlation)


def compute_score_distribution_stats(
    scores: Sequence[float],
    quantiles: Sequence[float] = DEFAULT_QUANTILES
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for relevance scores.

    Args:
        scores: Relevance scores
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance (all zeros for an empty feed)
    """
    scores = np.asarray(scores, dtype=float)
    if scores.size == 0:
        return ScoreDistributionStats(
            count=0, mean=0.0, std=0.0, min=0.0, max=0.0,
            quantiles={f"p{int(round(q * 100))}": 0.0 for q in quantiles}
        )

    quantile_dict = {
        f"p{int(round(q * 100))}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        count=int(scores.size),
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


def sanity_check_recency_monotonicity(
    posts: Sequence[Post],
    now: Optional[datetime] = None
) -> RecencyMonotonicityCheck:
    """
    Check that the recency component never increases with post age.

    Args:
        posts: Posts (or their ScoredPost wrappers' posts) to check
        now: Reference time (default: current UTC time)

    Returns:
        RecencyMonotonicityCheck instance
    """
    now = now or utc_now()
    ages = np.array([hours_since(p.created_at, now) for p in posts], dtype=float)
    recency = np.array([calculate_recency_score(p.created_at, now) for p in posts], dtype=float)

    n = len(ages)
    if n < 2:
        return RecencyMonotonicityCheck(
            correlation_with_age=0.0, is_monotonic=True, n_violations=0, violation_rate=0.0
        )

    # Violation: strictly older post with a strictly higher recency component
    age_diff = ages[None, :] - ages[:, None]
    recency_diff = recency[None, :] - recency[:, None]
    upper = np.triu(np.ones((n, n), dtype=bool), k=1)
    n_violations = int(np.sum(upper & (age_diff * recency_diff > 0)))
    n_comparisons = n * (n - 1) // 2

    return RecencyMonotonicityCheck(
        correlation_with_age=_safe_spearman(ages, recency),
        is_monotonic=n_violations == 0,
        n_violations=n_violations,
        violation_rate=n_violations / n_comparisons
    )


def compute_weight_sensitivity(
    posts: Sequence[Post],
    viewer: Profile,
    weights_a: ScoringWeights,
    weights_b: ScoringWeights,
    now: Optional[datetime] = None,
    top_k: int = 10,
    filters: Optional[FeedFilters] = None,
    limit: Optional[int] = None
) -> WeightSensitivity:
    """
    Compare the rankings two weight configurations produce for one viewer.

    Both rankings go through FeedRanker with the same filters and limit,
    so they describe feeds the viewer could actually be served.

    Args:
        posts: Candidate posts, before feed filters
        viewer: Profile the feed is computed for
        weights_a: First weights configuration
        weights_b: Second weights configuration
        now: Reference time (default: current UTC time)
        top_k: Number of top posts for the Jaccard overlap
        filters: Feed filters shared by both rankings (default: FeedFilters())
        limit: Feed size limit shared by both rankings

    Returns:
        WeightSensitivity instance
    """
    now = now or utc_now()
    ranking_a = [sp.id for sp in FeedRanker(weights_a, filters, limit).rank(posts, viewer, now)]
    ranking_b = [sp.id for sp in FeedRanker(weights_b, filters, limit).rank(posts, viewer, now)]

    positions_b = {post_id: i for i, post_id in enumerate(ranking_b)}
    common = [post_id for post_id in ranking_a if post_id in positions_b]
    rank_a = np.arange(len(common), dtype=float)
    rank_b = np.array([positions_b[post_id] for post_id in common], dtype=float)

    top_a = set(ranking_a[:top_k])
    top_b = set(ranking_b[:top_k])
    union = len(top_a | top_b)
    jaccard = len(top_a & top_b) / union if union > 0 else 1.0

    return WeightSensitivity(
        n_common=len(common),
        rank_correlation=_safe_spearman(rank_a, rank_b) if len(common) > 1 else 1.0,
        top_k=top_k,
        top_k_jaccard=jaccard
    )


def create_evaluation_report(
    viewer: Profile,
    ranked: Sequence[ScoredPost],
    now: Optional[datetime] = None,
    candidates: Optional[Sequence[Post]] = None,
    alternative_weights: Optional[ScoringWeights] = None,
    ranker: Optional[FeedRanker] = None,
    quantiles: Sequence[float] = DEFAULT_QUANTILES,
    top_k: int = 10
) -> EvaluationReport:
    """
    Create a complete evaluation report for a ranked feed.

    Args:
        viewer: Profile the feed was computed for
        ranked: Output of the ranker
        now: Reference time used for ranking
        candidates: Candidate posts handed to the ranker, before feed filters
        alternative_weights: Weights to compare against (for weight sensitivity)
        ranker: FeedRanker that produced ranked (default: FeedRanker())
        quantiles: Quantiles to compute
        top_k: Top-k posts for the Jaccard overlap

    Returns:
        EvaluationReport instance
    """
    now = now or utc_now()
    ranker = ranker or FeedRanker()
    dist_stats = compute_score_distribution_stats([sp.relevance_score for sp in ranked], quantiles)
    monotonicity = sanity_check_recency_monotonicity([sp.post for sp in ranked], now)

    sensitivity = None
    if candidates is not None and alternative_weights is not None:
        sensitivity = compute_weight_sensitivity(
            candidates, viewer, ranker.weights, alternative_weights, now, top_k,
            filters=ranker.filters, limit=ranker.limit
        )

    additional = {}
    if candidates is not None:
        eligible = apply_filters(candidates, viewer, ranker.filters, now)
        additional["n_candidates"] = len(candidates)
        additional["n_after_filters"] = len(eligible)
        # Share of filtered candidates that made it into the feed
        additional["retention_rate"] = len(ranked) / len(eligible) if eligible else 0.0

    return EvaluationReport(
        viewer_id=viewer.id,
        distribution_stats=dist_stats,
        monotonicity_check=monotonicity,
        weight_sensitivity=sensitivity,
        additional_metrics=additional
    )
