"""
Pydantic schemas for the Catalogue service.

These schemas define the part records held by the store, the payloads
accepted by the API and the report structures it returns.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

PLACEHOLDER_IMAGE = "https://placehold.co/400x300/374151/7f8ea3?text=No+Image"


class PartCategory(str, Enum):
    """Closed set of part categories, declared in menu display order."""
    ENGINE = "Engine"
    BRAKES = "Brakes"
    SUSPENSION = "Suspension"
    EXHAUST = "Exhaust"
    LIGHTING = "Lighting"
    WHEELS = "Wheels & Tires"
    ACCESSORIES = "Accessories"


CATEGORIES: List[PartCategory] = list(PartCategory)

# Category filter value that matches every category
ALL_CATEGORIES = "All"


class Period(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    YEARLY = "Yearly"


class HistoryEntry(BaseModel):
    """A dated quantity: a stock level snapshot or a dispatch event."""
    timestamp: datetime
    quantity: int = Field(..., ge=0)


class PartBase(BaseModel):
    """Base schema with the editable attributes of a part."""
    name: str
    sku: str
    category: PartCategory
    stock: int = Field(0, ge=0, description="Units on hand")
    price: Decimal = Field(Decimal("0"), ge=0, description="Unit price")
    description: str = ""
    image_url: str = Field(PLACEHOLDER_IMAGE, description="Remote URL or data URL")


class PartDraft(PartBase):
    """Schema for creating or editing a part."""
    pass


class Part(PartBase):
    """
    A catalogue record as stored by the inventory store.

    Attributes:
        id (str): Opaque identifier, immutable once assigned
        date_added (datetime): When the part was first created, immutable
        stock_history (List[HistoryEntry]): One entry at creation plus one per stock change
        sales_log (List[HistoryEntry]): Dispatch events
    """
    id: str
    date_added: datetime
    stock_history: List[HistoryEntry] = Field(default_factory=list)
    sales_log: List[HistoryEntry] = Field(default_factory=list)


class PartListing(Part):
    """Part as returned in listings, flagged when stock runs low."""
    low_stock: bool = False


class StockAdjustment(BaseModel):
    direction: Literal["add", "remove"]
    amount: int = Field(..., gt=0)


class SaleCreate(BaseModel):
    quantity: int = Field(..., gt=0, description="Units dispatched")
    timestamp: Optional[datetime] = None


class DashboardMetrics(BaseModel):
    total_items: int
    total_stock_value: Decimal
    low_stock_count: int


class PeriodSummary(BaseModel):
    """Sales figures for one reporting period."""
    period: Period
    unique_dispatched_items: int
    total_units_sold: int
    total_sales_value: Decimal
    best_selling_category: str


class EodReport(BaseModel):
    """
    End-of-day snapshot.

    Attributes:
        report_date (str): Human readable date the report covers
        new_parts_today (List[Part]): Parts added on the report date
        out_of_stock_parts (List[Part]): Parts with zero stock
        new_parts_count (int): len(new_parts_today)
        out_of_stock_count (int): len(out_of_stock_parts)
        value_of_new_stock (Decimal): Sum of stock * price over new parts
    """
    report_date: str
    new_parts_today: List[Part]
    out_of_stock_parts: List[Part]
    new_parts_count: int
    out_of_stock_count: int
    value_of_new_stock: Decimal


class DescriptionRequest(BaseModel):
    name: str = Field(..., min_length=1)
    category: PartCategory


class ReorderRequest(BaseModel):
    name: str = Field(..., min_length=1)
    category: PartCategory
    stock: int = Field(..., ge=0)


class AssistResponse(BaseModel):
    """Outcome of an AI assist call; ``ok`` is False when ``result`` is an error message."""
    result: str
    ok: bool
