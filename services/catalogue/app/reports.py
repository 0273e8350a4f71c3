"""
Dashboard metrics and sales reports computed from a snapshot of parts.

Every function here is pure: the result depends only on the snapshot and
the moment passed in, so reports are recomputed on each request rather
than cached. Calendar comparisons (same day, same year) are made in the
shop's timezone.
"""
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import Decimal
from typing import Dict, List, Sequence, Tuple

from . import schemas
from .config import REPORT_TIMEZONE, ensure_aware

# Parts with fewer units than this are flagged as low stock
LOW_STOCK_THRESHOLD = 10

WEEK = timedelta(days=7)

NO_CATEGORY = "N/A"


def is_low_stock(part: schemas.Part) -> bool:
    return part.stock < LOW_STOCK_THRESHOLD


def to_local(moment: datetime, tz: tzinfo = REPORT_TIMEZONE) -> datetime:
    return ensure_aware(moment).astimezone(tz)


def dashboard_metrics(snapshot: Sequence[schemas.Part]) -> schemas.DashboardMetrics:
    """
    Headline figures for the inventory dashboard.

    Returns:
        DashboardMetrics with part count, total stock value and low stock count
    """
    total_value = sum((part.stock * part.price for part in snapshot), Decimal(0))
    low_stock = sum(1 for part in snapshot if is_low_stock(part))
    return schemas.DashboardMetrics(
        total_items=len(snapshot),
        total_stock_value=total_value,
        low_stock_count=low_stock,
    )


def in_period(sale_date: datetime, now: datetime, period: schemas.Period, tz: tzinfo = REPORT_TIMEZONE) -> bool:
    """
    Check whether a sale falls inside a reporting period ending at ``now``.

    Daily and yearly periods are calendar based, in ``tz``. The weekly
    period is the rolling seven days of elapsed time up to and including
    ``now``.
    """
    if period == schemas.Period.WEEKLY:
        # Both in UTC: the difference is exact elapsed time across DST changes
        elapsed = ensure_aware(now).astimezone(timezone.utc) - ensure_aware(sale_date).astimezone(timezone.utc)
        return timedelta(0) <= elapsed <= WEEK

    sale_local = to_local(sale_date, tz)
    now_local = to_local(now, tz)
    if period == schemas.Period.DAILY:
        return sale_local.date() == now_local.date()
    if period == schemas.Period.YEARLY:
        return sale_local.year == now_local.year
    raise ValueError(f"Unknown period: {period}")


def sales_in_period(
    snapshot: Sequence[schemas.Part],
    now: datetime,
    period: schemas.Period,
    tz: tzinfo = REPORT_TIMEZONE,
) -> List[Tuple[schemas.Part, int]]:
    """Flatten sales logs into (part, quantity) pairs for sales inside the period."""
    return [
        (part, sale.quantity)
        for part in snapshot
        for sale in part.sales_log
        if in_period(sale.timestamp, now, period, tz)
    ]


def period_summary(
    snapshot: Sequence[schemas.Part],
    period: schemas.Period,
    now: datetime,
    tz: tzinfo = REPORT_TIMEZONE,
) -> schemas.PeriodSummary:
    """
    Summarise dispatches for a period.

    Sales value uses each part's current price; no price history is kept.
    The best selling category is the one with the most units sold, the
    first one met in snapshot order winning a tie, or "N/A" without sales.
    """
    sales = sales_in_period(snapshot, now, period, tz)

    units_by_category: Dict[str, int] = {}
    for part, quantity in sales:
        category = part.category.value
        units_by_category[category] = units_by_category.get(category, 0) + quantity

    best_category = NO_CATEGORY
    best_units = None
    for category, units in units_by_category.items():
        if best_units is None or units > best_units:
            best_category, best_units = category, units

    return schemas.PeriodSummary(
        period=period,
        unique_dispatched_items=len({part.id for part, _ in sales}),
        total_units_sold=sum(quantity for _, quantity in sales),
        total_sales_value=sum((part.price * quantity for part, quantity in sales), Decimal(0)),
        best_selling_category=best_category,
    )


def format_report_date(day: date) -> str:
    """Format a date like "Monday, June 10, 2024"."""
    return f"{day:%A, %B} {day.day}, {day.year}"


def eod_report(
    snapshot: Sequence[schemas.Part],
    today: date,
    tz: tzinfo = REPORT_TIMEZONE,
) -> schemas.EodReport:
    """
    Build the end-of-day report for ``today``.

    A part added today with no stock shows up both as new and as out of
    stock.
    """
    new_parts: List[schemas.Part] = []
    out_of_stock: List[schemas.Part] = []
    new_stock_value = Decimal(0)

    for part in snapshot:
        if to_local(part.date_added, tz).date() == today:
            new_parts.append(part)
            new_stock_value += part.stock * part.price
        if part.stock == 0:
            out_of_stock.append(part)

    return schemas.EodReport(
        report_date=format_report_date(today),
        new_parts_today=new_parts,
        out_of_stock_parts=out_of_stock,
        new_parts_count=len(new_parts),
        out_of_stock_count=len(out_of_stock),
        value_of_new_stock=new_stock_value,
    )
