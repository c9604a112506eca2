from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Text

from storefront.db import Base, BigIntPK

USER_ROLES = ("buyer", "seller", "admin")


class User(Base):
    """
    A person known to the storefront.

    Credentials live with the external authentication provider; this row only
    carries the profile and the role used for seller/admin authorization.
    """

    __tablename__ = "users"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    full_name = Column(Text, nullable=True)
    role = Column(Text, nullable=False, default="buyer")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("role IN ('buyer','seller','admin')", name="ck_user_role"),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
