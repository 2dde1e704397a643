"""Re-export all ORM models so Base.metadata has all tables."""

from rh_notifier.db.models.counter import Counter
from rh_notifier.db.models.notification import Notification
from rh_notifier.db.models.product import Batch, Product
from rh_notifier.db.models.user import User

__all__ = [
    "User",
    "Product",
    "Batch",
    "Notification",
    "Counter",
]
