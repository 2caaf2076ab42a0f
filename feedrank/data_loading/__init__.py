"""Data loading module for profile and post fixtures."""

from .loaders import load_records, load_profiles, load_posts

__all__ = ["load_records", "load_profiles", "load_posts"]
