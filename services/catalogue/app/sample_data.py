"""
Sample Terreins catalogue used to seed a fresh store.

Recent dates are computed from the current time so the daily, weekly and
yearly reports always have something to show.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List

from .config import REPORT_TIMEZONE
from .schemas import HistoryEntry, Part, PartCategory


def _fixed(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def _entry(moment: datetime, quantity: int) -> HistoryEntry:
    return HistoryEntry(timestamp=moment, quantity=quantity)


def sample_inventory(now: datetime) -> List[Part]:
    """
    Build the sample parts relative to ``now``.

    Args:
        now: Current aware datetime

    Returns:
        List of seven parts with sales spread over the current year
    """
    local_now = now.astimezone(REPORT_TIMEZONE)
    two_days_ago = now - timedelta(days=2)
    three_days_ago = now - timedelta(days=3)
    earlier_this_year = datetime(local_now.year, 2, 10, tzinfo=REPORT_TIMEZONE)
    even_earlier_this_year = datetime(local_now.year, 1, 15, tzinfo=REPORT_TIMEZONE)

    return [
        Part(
            id="1",
            name="Terreins 'Street Fury' Performance Pipe for NMAX",
            sku="TR-SC-EX-001",
            category=PartCategory.EXHAUST,
            stock=18,
            price=Decimal("2850.00"),
            description=(
                "Unleash your scooter's true potential with the Terreins Street Fury performance pipe. "
                "Engineered for the Yamaha NMAX, it delivers a throaty exhaust note, improved throttle "
                "response, and a noticeable power boost. Full stainless steel construction."
            ),
            image_url="https://picsum.photos/seed/nmaxpipe/400/300",
            date_added=_fixed("2023-10-26T10:00:00"),
            sales_log=[_entry(now, 1), _entry(three_days_ago, 2)],
            stock_history=[_entry(_fixed("2023-10-26T10:00:00"), 18)],
        ),
        Part(
            id="2",
            name="Terreins 'Quick-Launch' CVT Kit",
            sku="TR-SC-CVT-001",
            category=PartCategory.ENGINE,
            stock=25,
            price=Decimal("1500.00"),
            description=(
                "Upgrade your scooter's acceleration with the Terreins Quick-Launch CVT Kit. Includes "
                "performance flyballs and clutch springs for faster take-offs and improved mid-range "
                "pull. Perfect for city commuting."
            ),
            image_url="https://picsum.photos/seed/cvtkit/400/300",
            date_added=_fixed("2023-11-05T11:30:00"),
            sales_log=[_entry(two_days_ago, 3), _entry(even_earlier_this_year, 10)],
            stock_history=[_entry(_fixed("2023-11-05T11:30:00"), 25)],
        ),
        Part(
            id="3",
            name="Terreins CNC Adjustable Brake Levers (Pair)",
            sku="TR-SC-BR-005",
            category=PartCategory.BRAKES,
            stock=40,
            price=Decimal("899.00"),
            description=(
                "Get the perfect feel and control with Terreins CNC-machined adjustable brake levers. "
                "Six levels of adjustment for a custom fit. Made from high-grade aluminum with a "
                "durable anodized finish. Universal fit for most Philippine scooter models."
            ),
            image_url="https://picsum.photos/seed/levers/400/300",
            date_added=_fixed("2023-11-15T09:20:00"),
            sales_log=[_entry(three_days_ago, 5)],
            stock_history=[_entry(_fixed("2023-11-15T09:20:00"), 40)],
        ),
        Part(
            id="4",
            name="Terreins 'Night Piercer' LED Mini Driving Lights",
            sku="TR-AC-LGT-012",
            category=PartCategory.LIGHTING,
            stock=32,
            price=Decimal("1250.00"),
            description=(
                "Illuminate the road ahead with the ultra-bright Night Piercer LED lights. Compact, "
                "waterproof, and energy-efficient, they provide exceptional visibility for safer night "
                "rides. Comes with a complete wiring harness and switch."
            ),
            image_url="https://picsum.photos/seed/minidriving/400/300",
            date_added=_fixed("2024-01-20T14:00:00"),
            sales_log=[],
            stock_history=[_entry(_fixed("2024-01-20T14:00:00"), 32)],
        ),
        Part(
            id="5",
            name="Terreins 'Cargo-Max' 45L Alloy Top Box",
            sku="TR-AC-TB-045",
            category=PartCategory.ACCESSORIES,
            stock=12,
            price=Decimal("4500.00"),
            description=(
                "Secure your belongings with the rugged Terreins Cargo-Max top box. With a 45-liter "
                "capacity, this waterproof and dustproof alloy case can hold a full-face helmet and "
                "more. Features a quick-release base plate."
            ),
            image_url="https://picsum.photos/seed/topbox/400/300",
            date_added=earlier_this_year,
            sales_log=[_entry(earlier_this_year, 3)],
            stock_history=[_entry(earlier_this_year, 12)],
        ),
        Part(
            id="6",
            name="Terreins 'Grip-Pro' Scooter Tire (110/80-14)",
            sku="TR-SC-WH-110",
            category=PartCategory.WHEELS,
            stock=50,
            price=Decimal("1800.00"),
            description=(
                "Experience superior handling in wet or dry conditions with the Grip-Pro scooter tire. "
                "Its advanced tread compound offers excellent grip and longevity, making it the ideal "
                "choice for daily commuters. Size 110/80-14."
            ),
            image_url="https://picsum.photos/seed/tire/400/300",
            date_added=three_days_ago,
            sales_log=[],
            stock_history=[_entry(three_days_ago, 50)],
        ),
        Part(
            id="7",
            name="Terreins 'Comfort-Ride' Rear Shock (310mm)",
            sku="TR-SC-SP-310",
            category=PartCategory.SUSPENSION,
            stock=22,
            price=Decimal("2100.00"),
            description=(
                "Smooth out rough Philippine roads with the Terreins Comfort-Ride rear shock absorber. "
                "Features adjustable preload and a gas-charged reservoir for consistent damping "
                "performance. A direct-fit upgrade for Honda Click models."
            ),
            image_url="https://picsum.photos/seed/scootershock/400/300",
            date_added=now,
            sales_log=[_entry(now, 2)],
            stock_history=[_entry(now, 22)],
        ),
    ]
