"""Time bucket helpers."""

from .time_bucket import get_minute_time_bucket

__all__ = ["get_minute_time_bucket"]
