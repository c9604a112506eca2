from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    shop_id: int
    category_id: Optional[int] = None
    brand_id: Optional[int] = None
    name: str
    slug: str
    description: Optional[str] = None
    price_paise: int
    original_price_paise: Optional[int] = None
    discount_percentage: int
    stock_quantity: int
    sizes: List[str]
    colors: List[str]
    image_url: Optional[str] = None
    is_active: bool
    is_featured: bool
    created_at: datetime


class ShopResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    seller_id: int
    name: str
    slug: str
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address_line_1: Optional[str] = None
    address_line_2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    business_type: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_verified: bool


class NearbyShopResponse(BaseModel):
    """One row of get_nearby_shops; extra columns from the procedure are kept"""
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    slug: Optional[str] = None
    distance_km: Optional[float] = None


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    phone: str
    address_line_1: str
    address_line_2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    is_default: bool


class WishlistItemResponse(BaseModel):
    wishlist_item_id: int
    product: ProductResponse
