"""ORM model for named monotonic counters (currently the product PLU sequence)."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rh_notifier.db.base import Base

PLU_COUNTER = "product_plu"


class Counter(Base):
    """Highest value ever handed out for `name`; never decreases, so deleted rows never free a number."""

    __tablename__ = "counters"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
