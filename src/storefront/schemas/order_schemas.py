from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.common_schemas import PaginationResponse


class ShippingAddressResponse(BaseModel):
    """Delivery address as it was when the order was placed"""
    id: Optional[int] = None
    full_name: str
    phone: str
    address_line_1: str
    address_line_2: Optional[str] = None
    city: str
    state: str
    postal_code: str


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    price_paise: int = Field(description="Unit price at time of purchase")
    subtotal_paise: int
    size: Optional[str] = None
    color: Optional[str] = None


class OrderSummaryResponse(BaseModel):
    """Lightweight order representation for listing"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: str
    payment_method: str
    total_paise: int
    currency: str
    item_count: int
    created_at: datetime


class OrderDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    status: str
    payment_method: str
    subtotal_paise: int
    shipping_paise: int
    total_paise: int
    currency: str
    created_at: datetime
    updated_at: datetime
    can_be_cancelled: bool
    shipping_address: ShippingAddressResponse
    items: List[OrderItemResponse]


class OrderListResponse(BaseModel):
    items: List[OrderSummaryResponse]
    pagination: PaginationResponse


class PlaceOrderResponse(BaseModel):
    order_id: int
    status: str
    subtotal_paise: int
    shipping_paise: int
    total_paise: int
    currency: str
    replayed: bool = Field(description="True when an earlier order was returned for the same idempotency key")
