"""User repository: lookup, listing, creation and contact-address updates."""

from typing import Optional

from sqlalchemy import select

from rh_notifier.db import get_session
from rh_notifier.db.models.user import USER_ROLES, User
from rh_notifier.errors import NotFoundError


def get_by_id(user_id: str) -> Optional[User]:
    """Return the user with this id, or None."""
    with get_session() as session:
        return session.get(User, user_id)


def get_by_username(username: str) -> Optional[User]:
    with get_session() as session:
        return session.scalars(select(User).where(User.username == username)).first()


def list_all() -> list[User]:
    """All users in creation order."""
    with get_session() as session:
        return list(session.scalars(select(User).order_by(User.created_at, User.username)).all())


def create_user(
    username: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    whatsapp: Optional[str] = None,
    role: str = "user",
) -> User:
    if role not in USER_ROLES:
        raise ValueError(f"Unknown role: {role!r}. Expected one of {USER_ROLES}")
    with get_session() as session:
        user = User(username=username, name=name, email=email, whatsapp=whatsapp, role=role)
        session.add(user)
        session.flush()
        return user


def update_whatsapp(user_id: str, whatsapp: Optional[str]) -> User:
    """Store an already-normalized contact address (or None to clear it)."""
    with get_session() as session:
        user = session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        user.whatsapp = whatsapp
        session.flush()
        return user
