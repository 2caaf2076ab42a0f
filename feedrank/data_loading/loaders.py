"""
Data loading functions for profile and post fixtures.

Profiles and posts are read from JSON, YAML or CSV files shaped like the
records the application database returns. No scoring is done here.

Posts either embed their author snapshot under "author" or reference it by
"author_id", in which case it is resolved against the loaded profiles.
In CSV files, list columns (interests, tags) are "|"-separated.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional

import pandas as pd
import yaml

from ..schema.entities import Post, Profile

logger = logging.getLogger(__name__)

LIST_SEPARATOR = "|"
LIST_COLUMNS = {"interests", "tags"}
INT_COLUMNS = {"looking_for_age_min", "looking_for_age_max"}


def _records_from_csv(path: Path, delimiter: str) -> List[Dict[str, Any]]:
    """Read CSV rows as dicts, splitting list columns and dropping empty cells."""
    df = pd.read_csv(path, sep=delimiter, dtype=str, keep_default_na=False)
    records = []
    for row in df.to_dict(orient="records"):
        record = {}
        for column, value in row.items():
            value = value.strip()
            if column in LIST_COLUMNS:
                record[column] = [v.strip() for v in value.split(LIST_SEPARATOR) if v.strip()]
            elif value == "":
                continue
            elif column in INT_COLUMNS:
                record[column] = int(value)
            else:
                record[column] = value
        records.append(record)
    return records


def load_records(filepath: str, key: Optional[str] = None, delimiter: str = ",") -> List[Dict[str, Any]]:
    """
    Load raw records from a JSON, YAML or CSV file.

    Args:
        filepath: Path to the data file
        key: Top-level key holding the records when the file is a mapping
            (e.g. {"profiles": [...]})
        delimiter: Field delimiter for CSV files

    Returns:
        List of record dictionaries

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or its format is unsupported
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {filepath}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        records = _records_from_csv(path, delimiter)
    elif suffix in (".json", ".yaml", ".yml"):
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f) if suffix == ".json" else yaml.safe_load(f)
        if isinstance(data, dict) and key is not None:
            data = data.get(key)
        records = data or []
    else:
        raise ValueError(f"Unsupported data file format: {suffix} ({filepath})")

    if not isinstance(records, list):
        raise ValueError(f"Expected a list of records in {filepath}")
    if not records:
        raise ValueError(f"Data file is empty: {filepath}")

    logger.info(f"Loaded {len(records)} records from {filepath}")
    return records


def load_profiles(filepath: str, delimiter: str = ",") -> Dict[str, Profile]:
    """
    Load profiles indexed by id.

    Args:
        filepath: Path to the profiles file
        delimiter: Field delimiter for CSV files

    Returns:
        Dictionary mapping profile id to Profile

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or a record is malformed
    """
    profiles = {}
    for record in load_records(filepath, key="profiles", delimiter=delimiter):
        profile = Profile.from_dict(record)
        if profile.id in profiles:
            logger.warning(f"Duplicate profile id {profile.id} in {filepath}, keeping the last one")
        profiles[profile.id] = profile

    premium = sum(1 for p in profiles.values() if p.is_premium)
    logger.info(f"Loaded {len(profiles)} profiles ({premium} premium)")
    return profiles


def load_posts(
    filepath: str,
    profiles: Optional[Dict[str, Profile]] = None,
    delimiter: str = ","
) -> List[Post]:
    """
    Load posts with their author snapshots.

    Args:
        filepath: Path to the posts file
        profiles: Profiles used to resolve "author_id" references
        delimiter: Field delimiter for CSV files

    Returns:
        List of Post instances, file order preserved

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or a post's author cannot be resolved
    """
    profiles = profiles or {}
    posts = []
    for record in load_records(filepath, key="posts", delimiter=delimiter):
        if isinstance(record.get("author"), dict):
            posts.append(Post.from_dict(record))
            continue

        author_id = record.get("author_id") or record.get("user_id")
        if author_id is None:
            raise ValueError(f"Post {record.get('id')} has neither an author nor an author_id")
        author_id = str(author_id)
        if author_id not in profiles:
            raise ValueError(f"Post {record.get('id')} references unknown author {author_id}")
        posts.append(Post.from_dict(record, author=profiles[author_id]))

    logger.info(f"Loaded {len(posts)} posts from {filepath}")
    return posts
