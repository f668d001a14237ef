"""Small calculations shared by the recipe, fridge and dashboard routers."""

import math
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

from ..models import CookingLog

Number = Union[int, float, Decimal]


def success_rate(statuses: Iterable[str]) -> Optional[int]:
    """Percentage of SUCCESS outcomes, rounded half-up. None when there are no logs."""
    statuses = list(statuses)
    if not statuses:
        return None
    successes = sum(1 for s in statuses if s == "SUCCESS")
    return math.floor(successes / len(statuses) * 100 + 0.5)


def d_day(expiry_date: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Calendar days until (positive) or since (negative) expiry."""
    if expiry_date is None:
        return None
    today = today or date.today()
    return (expiry_date - today).days


def scale_amount(amount: Optional[Number], base_servings: int, requested_servings: int) -> Optional[float]:
    """amount * requested / base, rounded half-up to 2 decimals."""
    if amount is None:
        return None
    base = Decimal(base_servings or 1)
    scaled = Decimal(str(amount)) * Decimal(requested_servings) / base
    return float(scaled.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def resolve_servings(base_servings: Optional[int], requested: Optional[int]) -> tuple[int, int]:
    """(base, target). A missing or non-positive request falls back to the base."""
    base = base_servings if base_servings and base_servings > 0 else 1
    target = requested if requested and requested > 0 else base
    return base, target


def month_windows(now: Optional[datetime] = None) -> tuple[tuple[datetime, datetime], tuple[datetime, datetime]]:
    """(this month start .. end of today), (previous month start .. previous month end)."""
    now = now or datetime.now()
    this_month_start = datetime(now.year, now.month, 1)
    today_end = datetime(now.year, now.month, now.day, 23, 59, 59, 999999)

    prev_month_end = this_month_start - timedelta(microseconds=1)
    prev_month_start = datetime(prev_month_end.year, prev_month_end.month, 1)
    return (this_month_start, today_end), (prev_month_start, prev_month_end)


def latest_log(logs: Iterable[CookingLog], user_id: Optional[int] = None) -> Optional[CookingLog]:
    """Most recent log, optionally restricted to one user."""
    candidates = [log for log in logs if user_id is None or log.user_id == user_id]
    if not candidates:
        return None
    return max(candidates, key=lambda log: (log.cooked_at, log.log_id))
