"""
Command-line runner ranking one viewer's feed from fixture files.

Usage:
    python -m feedrank.run --config configs/config.yaml --viewer <profile-id>

The runner performs the following steps:
1. Load and validate configuration
2. Load profiles and posts
3. Filter and rank the viewer's feed
4. Evaluate the ranking
5. Write the ranked feed as JSON (stdout unless --output is given)
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run_feed(
    config_path: str,
    viewer_id: str,
    profiles_path: Optional[str] = None,
    posts_path: Optional[str] = None,
    output_path: Optional[str] = None,
    report_path: Optional[str] = None,
    limit: Optional[int] = None,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Rank the feed of one viewer.

    Args:
        config_path: Path to the configuration YAML file
        viewer_id: Id of the viewer profile
        profiles_path: If provided, overrides data.profiles.path
        posts_path: If provided, overrides data.posts.path
        output_path: If provided, write the ranked feed there instead of stdout
        report_path: If provided, save the evaluation report there
        limit: If provided, overrides feed.limit
        now: Reference time (default: current UTC time)

    Returns:
        Dictionary with the ranked feed and the evaluation report

    Raises:
        KeyError: If the viewer is not among the loaded profiles
    """
    from .configs import load_config, validate_config, get_config_value
    from .data_loading import load_profiles, load_posts
    from .compatibility import AgeCache
    from .ranking import FeedRanker
    from .scoring import ScoringWeights
    from .evaluation import create_evaluation_report
    from .schema.entities import utc_now

    # =========================================================================
    # 1. Load and validate configuration
    # =========================================================================
    config = load_config(config_path)
    issues = validate_config(config)
    for issue in issues:
        logger.warning(f"Config issue: {issue}")

    setup_logging(get_config_value(config, "global.log_level", "INFO"))

    if limit is not None:
        config["feed"] = dict(config.get("feed") or {}, limit=limit)

    # =========================================================================
    # 2. Load data
    # =========================================================================
    profiles_path = profiles_path or get_config_value(config, "data.profiles.path")
    posts_path = posts_path or get_config_value(config, "data.posts.path")
    delimiter = get_config_value(config, "data.delimiter", ",")

    profiles = load_profiles(profiles_path, delimiter=delimiter)
    posts = load_posts(posts_path, profiles, delimiter=delimiter)

    if viewer_id not in profiles:
        raise KeyError(f"Viewer profile not found: {viewer_id}")
    viewer = profiles[viewer_id]

    # =========================================================================
    # 3. Rank
    # =========================================================================
    now = now or utc_now()
    ranker = FeedRanker.from_config(config)
    age_cache = AgeCache()
    ranked = ranker.rank(posts, viewer, now=now, age_cache=age_cache, include_breakdown=True)
    logger.debug(f"Age cache: {age_cache.hits} hits, {age_cache.misses} misses")

    # =========================================================================
    # 4. Evaluate
    # =========================================================================
    alternative = get_config_value(config, "evaluation.alternative_weights")
    report = create_evaluation_report(
        viewer,
        ranked,
        now=now,
        candidates=posts,
        alternative_weights=ScoringWeights.from_dict(alternative) if alternative else None,
        ranker=ranker,
        quantiles=get_config_value(config, "evaluation.quantiles", [0.1, 0.25, 0.5, 0.75, 0.9]),
        top_k=get_config_value(config, "evaluation.top_k", 10)
    )
    logger.info("\n" + report.summary())

    if report_path:
        Path(report_path).parent.mkdir(parents=True, exist_ok=True)
        report.save(report_path)

    # =========================================================================
    # 5. Output
    # =========================================================================
    feed = {
        "viewer_id": viewer.id,
        "generated_at": now.isoformat(),
        "weights": ranker.weights.to_dict(),
        "posts": [sp.to_dict() for sp in ranked]
    }

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(feed, f, indent=2, ensure_ascii=False)
        logger.info(f"Saved ranked feed ({len(ranked)} posts) to {output_path}")
    else:
        json.dump(feed, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")

    return {
        "success": True,
        "feed": feed,
        "report": report.to_dict()
    }


def main(argv=None):
    """Main entry point for the feed runner."""
    parser = argparse.ArgumentParser(
        description="Rank a viewer's feed by relevance"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--viewer",
        type=str,
        required=True,
        help="Id of the viewer profile"
    )
    parser.add_argument(
        "--profiles",
        type=str,
        default=None,
        help="Profiles file (overrides config)"
    )
    parser.add_argument(
        "--posts",
        type=str,
        default=None,
        help="Posts file (overrides config)"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the ranked feed to this JSON file instead of stdout"
    )
    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Save the evaluation report to this JSON file"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of ranked posts (overrides config)"
    )

    args = parser.parse_args(argv)

    try:
        result = run_feed(
            args.config,
            args.viewer,
            profiles_path=args.profiles,
            posts_path=args.posts,
            output_path=args.output,
            report_path=args.report,
            limit=args.limit
        )
        return 0 if result["success"] else 1
    except Exception as e:
        logger.exception(f"Feed ranking failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
