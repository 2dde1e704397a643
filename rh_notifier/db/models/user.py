"""ORM model for users (notification recipients)."""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rh_notifier.db.base import Base, TimestampMixin, new_id

USER_ROLES = ("admin", "gudang", "user")


class User(Base, TimestampMixin):
    """A store user. `whatsapp` is the delivery address: digits with country prefix, or None."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    whatsapp: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="user")

    products: Mapped[list["Product"]] = relationship(  # noqa: F821
        "Product", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        return self.name or "User"
