from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select, text

from storefront.models import Shop
from storefront.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ShopRepository(BaseRepository[Shop]):
    model = Shop

    def get_by_seller(self, seller_id: int) -> Optional[Shop]:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(Shop).where(Shop.seller_id == seller_id)
            ).scalar_one_or_none()

    def get_by_slug(self, slug: str) -> Optional[Shop]:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(Shop).where(Shop.slug == slug)
            ).scalar_one_or_none()

    def find_nearby(self, latitude: float, longitude: float, radius_km: float, limit: int) -> List[Dict[str, Any]]:
        """
        Shops within radius_km, nearest first.

        The ranking is done by the get_nearby_shops stored procedure in the
        database; this method only passes the arguments and caps the rows.
        """
        with self.translate_errors("RPC get_nearby_shops"):
            rows = self.session.execute(
                text("""
                    SELECT *
                    FROM get_nearby_shops(:user_lat, :user_lng, :radius_km)
                    LIMIT :limit
                """),
                {
                    "user_lat": latitude,
                    "user_lng": longitude,
                    "radius_km": radius_km,
                    "limit": limit,
                },
            ).mappings().all()
        return [dict(row) for row in rows]
