"""DB repositories: sync functions opening one session per call and returning detached rows."""

from rh_notifier.db.repositories import notification_repo, product_repo, user_repo

__all__ = [
    "notification_repo",
    "product_repo",
    "user_repo",
]
