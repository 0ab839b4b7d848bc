"""
Time bucket utilities for aggregation keys.
"""

from datetime import datetime, timezone


def get_minute_time_bucket(time_millis: int) -> int:
    """
    Convert an epoch timestamp to a minute-granularity bucket.

    Args:
        time_millis: Epoch time in milliseconds

    Returns:
        Bucket as an integer of the form yyyyMMddHHmm (UTC), e.g. 202401151230
    """
    moment = datetime.fromtimestamp(time_millis / 1000.0, tz=timezone.utc)
    return int(moment.strftime('%Y%m%d%H%M'))
