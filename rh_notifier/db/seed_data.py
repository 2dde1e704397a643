"""Demo data: two users and a handful of products whose batches fall in every RH status."""

from datetime import date, timedelta

from rh_notifier.db.models.user import User
from rh_notifier.db.repositories import product_repo, user_repo
from rh_notifier.utils.logger import get_logger

logger = get_logger("rh_notifier.db.seed_data")

DEMO_USERS = (
    {"username": "admin", "name": "Admin", "email": "admin@safir.com", "whatsapp": "6281234567890", "role": "admin"},
    {"username": "user", "name": "Test User", "email": "user@safir.com", "whatsapp": "6289876543210", "role": "user"},
)

# (barcode, name, description, category, [expiry offsets in days from today], [quantities])
DEMO_PRODUCTS = (
    ("8991234567890", "Indomie Goreng Spesial", "Mie instan goreng rasa spesial", "Makanan", (10, 90), (100, 150)),
    ("8999876543210", "Aqua 600ml", "Air mineral dalam kemasan 600ml", "Minuman", (-3,), (200,)),
    ("8995555555555", "Susu UHT 1L", "Susu UHT cokelat 1 liter", "Minuman", (5, 120), (80, 120)),
)


def seed_demo_data(today: date | None = None) -> list[User]:
    """Upsert demo users and give `admin` the demo products. Existing barcodes are left alone."""
    today = today or date.today()
    users = []
    for entry in DEMO_USERS:
        user = user_repo.get_by_username(entry["username"])
        if user is None:
            user = user_repo.create_user(**entry)
            logger.info("seed.user_created", username=user.username)
        users.append(user)

    owner = users[0]
    for barcode, name, description, category, offsets, quantities in DEMO_PRODUCTS:
        if product_repo.get_by_barcode(barcode) is not None:
            continue
        batches = [(today + timedelta(days=offset), qty) for offset, qty in zip(offsets, quantities)]
        product_repo.create_product(
            owner.id,
            barcode,
            name,
            batches=batches,
            description=description,
            category=category,
        )
    logger.info("seed.complete", users=len(users), products=len(DEMO_PRODUCTS))
    return users
