from typing import Optional

from sqlalchemy import select

from storefront.models import User
from storefront.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    def get_role(self, user_id: int) -> Optional[str]:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(User.role).where(User.id == user_id)
            ).scalar_one_or_none()

    def get_by_email(self, email: str) -> Optional[User]:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(User).where(User.email == email.lower())
            ).scalar_one_or_none()
