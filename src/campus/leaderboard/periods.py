"""Leaderboard categories, periods and bucket boundaries.

Buckets are keyed by the UTC date they start on:
- weekly: the most recent Sunday (weeks run Sunday..Saturday)
- monthly: the first of the month
- alltime: a fixed epoch marking the beginning of history
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from enum import Enum

ALLTIME_EPOCH = date(2020, 1, 1)


class LeaderboardCategory(str, Enum):
    TOP_POSTER = "top_poster"
    FUNNIEST = "funniest"
    MOST_HELPFUL = "most_helpful"
    STREAK_MASTER = "streak_master"


class LeaderboardPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ALLTIME = "alltime"


def get_sunday(dt: datetime | date) -> date:
    """Get the Sunday that starts the week containing dt."""
    d = dt.date() if isinstance(dt, datetime) else dt
    return d - timedelta(days=(d.weekday() + 1) % 7)


def get_month_start(dt: datetime | date) -> date:
    d = dt.date() if isinstance(dt, datetime) else dt
    return d.replace(day=1)


def get_period_start(period: LeaderboardPeriod, now: datetime | None = None) -> date:
    """Start date of the bucket for `period` that contains now."""
    if now is None:
        now = datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)

    if period is LeaderboardPeriod.WEEKLY:
        return get_sunday(now)
    if period is LeaderboardPeriod.MONTHLY:
        return get_month_start(now)
    if period is LeaderboardPeriod.ALLTIME:
        return ALLTIME_EPOCH
    raise ValueError(f"Unknown period: {period}")


def get_all_period_starts(now: datetime | None = None) -> list[tuple[LeaderboardPeriod, date]]:
    """Every (period, bucket start) pair a single score event lands in."""
    return [(period, get_period_start(period, now)) for period in LeaderboardPeriod]
