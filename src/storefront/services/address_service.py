from typing import Any, Dict, List
import logging

from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.models import Address
from storefront.repositories import AddressRepository

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = (
    "full_name", "phone", "address_line_1", "address_line_2",
    "city", "state", "postal_code",
)


class AddressService:
    """
    Address book management

    Business Rules:
    - A user's first address becomes the default
    - At most one default per user; setting a new default clears the old one
      in the same transaction
    - Deleting the default promotes the oldest remaining address
    """

    def __init__(self, session: Session):
        self.session = session
        self.address_repo = AddressRepository(session)

    def list_addresses(self, user_id: int) -> List[Address]:
        return self.address_repo.list_for_user(user_id)

    def create(self, user_id: int, data: Dict[str, Any]) -> Address:
        make_default = bool(data.get("is_default")) or self.address_repo.get_default(user_id) is None

        address = self.address_repo.add(Address(
            user_id=user_id,
            is_default=False,
            **{k: data.get(k) for k in ADDRESS_FIELDS},
        ))
        if make_default:
            self.address_repo.set_default(user_id, address.id)

        self.session.commit()
        logger.info(f"Created address {address.id} for user {user_id} (default={make_default})")
        return address

    def update(self, user_id: int, address_id: int, data: Dict[str, Any]) -> Address:
        address = self._get_owned(user_id, address_id)
        for key in ADDRESS_FIELDS:
            if key in data:
                setattr(address, key, data[key])
        if data.get("is_default"):
            self.address_repo.set_default(user_id, address.id)

        with self.address_repo.translate_errors("UPDATE"):
            self.session.commit()
        return address

    def set_default(self, user_id: int, address_id: int) -> Address:
        address = self._get_owned(user_id, address_id)
        self.address_repo.set_default(user_id, address.id)
        with self.address_repo.translate_errors("UPDATE"):
            self.session.commit()
        logger.info(f"Address {address_id} is now the default for user {user_id}")
        return address

    def delete(self, user_id: int, address_id: int) -> None:
        address = self._get_owned(user_id, address_id)
        was_default = address.is_default
        self.address_repo.delete(address)

        if was_default:
            remaining = self.address_repo.list_for_user(user_id)
            if remaining:
                self.address_repo.set_default(user_id, remaining[0].id)

        self.session.commit()
        logger.info(f"Deleted address {address_id} for user {user_id}")

    def _get_owned(self, user_id: int, address_id: int) -> Address:
        address = self.address_repo.get_for_user(user_id, address_id)
        if address is None:
            raise NotFoundError("Address", str(address_id))
        return address
