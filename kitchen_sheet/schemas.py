"""
Pydantic Schemas for Request/Response Validation

The order payload matches what the ordering page posts:

    {
      "name": "...", "phone": "...", "delivery": "...", "email": "...",
      "buddy": "...", "comments": "...",
      "items": [
        {"name": "breakfast sandwich", "qty": 3, "price": 6.5,
         "instances": [{"options": ["egg", "croissant"]}, ...]}
      ]
    }

Items in the legacy quantity + selectedOptions shape are accepted too and
normalized by ``kitchen_sheet.engine.orders.normalize_line_item``.

Version: 1.0.0
"""

import re
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kitchen_sheet.engine.orders import Customer, LineItem, OrderRecord, normalize_line_item
from kitchen_sheet.services.status import OrderingStatus


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class InstanceIn(BaseModel):
    """Option selections for one unit of an item."""
    options: List[Optional[str]] = Field(default_factory=list, examples=[["egg", "croissant"]])


class OrderItemIn(BaseModel):
    """Single item in an order (current or legacy shape)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1, max_length=100, examples=["breakfast sandwich"])
    qty: Optional[int] = Field(None, ge=0, le=99, examples=[2])
    price: Optional[float] = Field(None, ge=0, examples=[6.5])
    instances: Optional[List[InstanceIn]] = None

    # Legacy shape
    quantity: Optional[int] = Field(None, ge=0, le=99)
    selected_options: Optional[List[Optional[str]]] = Field(None, alias="selectedOptions")

    def to_line_item(self) -> LineItem:
        raw: dict[str, Any] = {"name": self.name}
        if self.instances is not None:
            raw["instances"] = [i.model_dump() for i in self.instances]
        else:
            raw["quantity"] = self.quantity if self.quantity is not None else (self.qty or 0)
            raw["selectedOptions"] = self.selected_options or []
        return normalize_line_item(raw)


class OrderSubmission(BaseModel):
    """Request schema for submitting an order."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Jane Doe"])
    phone: str = Field(..., min_length=7, max_length=30, examples=["555-123-4567"])
    delivery: str = Field(default="", max_length=100, examples=["pickup"])
    email: Optional[str] = Field(None, examples=["jane@example.com"])
    buddy: Optional[str] = Field(None, max_length=100)
    comments: Optional[str] = Field(None, max_length=1000)
    items: List[OrderItemIn] = Field(..., min_length=1)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        cleaned = re.sub(r"[^\d]", "", v)
        if len(cleaned) < 7:
            raise ValueError("Phone number must have at least 7 digits")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if not re.match(r"^[\w\.\+-]+@[\w\.-]+\.\w+$", v):
            raise ValueError("Invalid email format")
        return v

    def to_record(self, timestamp: datetime) -> OrderRecord:
        return OrderRecord(
            timestamp=timestamp,
            customer=Customer(
                name=self.name,
                phone=self.phone,
                delivery=self.delivery,
                email=self.email or "",
                buddy=self.buddy or None,
                comments=self.comments or None,
            ),
            line_items=tuple(item.to_line_item() for item in self.items),
        )


class StatusUpdate(BaseModel):
    status: OrderingStatus


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class MenuItemOut(BaseModel):
    name: str
    price: float
    category: Optional[str] = None
    description: Optional[str] = None
    options: str = ""


class MenuResponse(BaseModel):
    """Menu in the shape the ordering page renders."""
    status: OrderingStatus
    menu: List[MenuItemOut]


class OrderCreateResponse(BaseModel):
    """Response after accepting an order."""
    success: bool
    message: str
    entry_id: Optional[int] = None
    projected: bool = False
    unmatched_items: List[str] = Field(default_factory=list)


class StatusResponse(BaseModel):
    status: OrderingStatus


class KitchenLineOut(BaseModel):
    item: str
    count: int
    options: str


class ProjectionResponse(BaseModel):
    """Current kitchen projection."""
    headers: List[str]
    orders: int
    rows: List[dict[str, Any]]
    totals: Optional[dict[str, Any]] = None
    kitchen: List[KitchenLineOut] = Field(default_factory=list)


class RebuildResponse(BaseModel):
    total_entries: int
    replayed: int
    skipped: int
    skipped_entry_ids: List[int]
    unmatched_items: List[str]
    summary: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    journal: str
    projection: str
    redis: str
    timestamp: datetime
