from typing import List, Optional

from sqlalchemy import select, update

from storefront.models import Address
from storefront.repositories.base import BaseRepository


class AddressRepository(BaseRepository[Address]):
    model = Address

    def list_for_user(self, user_id: int) -> List[Address]:
        """User's addresses, default first"""
        with self.translate_errors("SELECT"):
            return list(self.session.execute(
                select(Address)
                .where(Address.user_id == user_id)
                .order_by(Address.is_default.desc(), Address.id)
            ).scalars())

    def get_for_user(self, user_id: int, address_id: int) -> Optional[Address]:
        """Get an address only if it belongs to user_id"""
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(Address).where(
                    Address.id == address_id, Address.user_id == user_id
                )
            ).scalar_one_or_none()

    def get_default(self, user_id: int) -> Optional[Address]:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(Address).where(
                    Address.user_id == user_id, Address.is_default.is_(True)
                )
            ).scalars().first()

    def set_default(self, user_id: int, address_id: int) -> None:
        """
        Make address_id the user's only default.

        Both statements run in the caller's transaction: clear the old
        default, then set the new one.
        """
        with self.translate_errors("UPDATE"):
            self.session.execute(
                update(Address)
                .where(Address.user_id == user_id, Address.id != address_id)
                .values(is_default=False)
            )
            self.session.execute(
                update(Address)
                .where(Address.user_id == user_id, Address.id == address_id)
                .values(is_default=True)
            )
