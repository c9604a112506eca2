from typing import List, Optional

from pydantic import BaseModel, Field


class CartLineResponse(BaseModel):
    cart_item_id: int
    product_id: int
    product_name: str
    shop_id: int
    unit_price_paise: int
    original_price_paise: Optional[int] = None
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None
    subtotal_paise: int
    in_stock: bool
    image_url: Optional[str] = None


class CartSummaryResponse(BaseModel):
    subtotal_paise: int
    shipping_paise: int
    discount_paise: int
    total_paise: int
    free_shipping: bool
    amount_to_free_shipping_paise: int = Field(description="Extra spend needed to unlock free shipping")


class CartResponse(BaseModel):
    user_id: int
    item_count: int
    total_quantity: int
    is_empty: bool
    currency: str
    items: List[CartLineResponse]
    summary: CartSummaryResponse
