"""Evaluation module for ranked feed diagnostics."""

from .metrics import (
    compute_score_distribution_stats,
    sanity_check_recency_monotonicity,
    compute_weight_sensitivity,
    EvaluationReport,
    create_evaluation_report
)

__all__ = [
    "compute_score_distribution_stats",
    "sanity_check_recency_monotonicity",
    "compute_weight_sensitivity",
    "EvaluationReport",
    "create_evaluation_report"
]
