"""Error taxonomy for the recommendation engine."""

from __future__ import annotations


class RecommenderError(Exception):
    """Base class for all recommender errors."""


class DataUnavailable(RecommenderError):
    """History or activity log could not be fetched in time."""

    def __init__(self, user_id: str, reason: str):
        super().__init__(f"History unavailable for user '{user_id}': {reason}")
        self.user_id = user_id
        self.reason = reason


class InvalidItem(RecommenderError, ValueError):
    """A work item record is malformed and cannot be scored."""


class CacheCorruption(RecommenderError):
    """A cached entry does not have the expected shape."""
