from pydantic import BaseModel, Field
from typing import Optional


class PaginationResponse(BaseModel):
    """Standard pagination metadata for responses"""
    limit: int = Field(description="Number of items requested")
    count: int = Field(description="Number of items returned")
    has_more: bool = Field(description="Whether there are more items available")
    next_cursor: Optional[int] = Field(default=None, description="Cursor for next page")
