"""
Metrics calculation utilities for repository growth and trending detection.

``estimate_growth_rate`` is a placeholder until historical star counts are
available: it is derived only from current stars and recent activity and
carries no real growth signal. The pure helpers below it operate on
historical values once a caller has them.
"""

import math
from datetime import datetime, timedelta, timezone

TRENDING_WINDOW = timedelta(days=7)
TRENDING_MIN_STARS = 1000

# A repo is "hot" when ALL three criteria are met
HOT_REPO_MIN_STARS = 100
HOT_REPO_MIN_GROWTH_RATE = 0.25  # 25% as decimal
HOT_REPO_MIN_STARS_GAINED = 50


def _recently_active(last_activity: datetime | None, now: datetime | None) -> bool:
    if last_activity is None:
        return False
    now = now or datetime.now(timezone.utc)
    return last_activity > now - TRENDING_WINDOW


def estimate_growth_rate(
    stars: int, last_activity: datetime | None, now: datetime | None = None
) -> float:
    """
    Placeholder growth-rate estimate.

    Zero for repositories without activity in the last week; otherwise a
    base rate that shrinks with popularity (larger repos grow slower).
    """
    if not _recently_active(last_activity, now):
        return 0.0
    base_rate = max(1.0, 20 - math.log10(stars + 1) * 3)
    return round(base_rate, 1)


def is_trending(
    stars: int, last_activity: datetime | None, now: datetime | None = None
) -> bool:
    """Active in the last week and above the star threshold."""
    return _recently_active(last_activity, now) and stars > TRENDING_MIN_STARS


def calculate_growth_rate(current: float, previous: float) -> float:
    """
    Calculate growth rate as a decimal (0.25 = 25% growth).

    Returns 0 if previous is 0.

    Example:
        calculate_growth_rate(125, 100)  # 0.25
        calculate_growth_rate(80, 100)   # -0.2
    """
    if previous == 0:
        return 0.0
    return (current - previous) / previous


def calculate_stars_gained(current: int, previous: int) -> int:
    """Absolute change between two star counts."""
    return current - previous


def is_hot_repo(stars: int, growth_rate: float, stars_gained: int) -> bool:
    """True when stars, growth rate and stars gained all meet the hot thresholds."""
    return (
        stars >= HOT_REPO_MIN_STARS
        and growth_rate >= HOT_REPO_MIN_GROWTH_RATE
        and stars_gained >= HOT_REPO_MIN_STARS_GAINED
    )
