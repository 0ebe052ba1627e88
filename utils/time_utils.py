"""
utils/time_utils.py

Purpose: Time helpers

- Timestamps for stored records
- Epoch milliseconds for gateway receipts
"""

from datetime import datetime
import time


def utcnow() -> datetime:
    """
    Current UTC time, truncated to milliseconds the way MongoDB stores it.
    """
    now = datetime.utcnow()
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def epoch_millis() -> int:
    """
    Milliseconds since the Unix epoch.
    """
    return int(time.time() * 1000)
