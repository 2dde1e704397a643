"""Product repository: listing with batches, creation with PLU/batch auto-numbering, deletion.

PLU codes come from the "product_plu" row of the counters table and batch numbers
from a per-product counter. Both are incremented with a single UPDATE, so
concurrent creates never reuse a number and deleted rows never free one. The
unique constraint on products.plu_seq is the backstop (retried on conflict).
"""

from datetime import date
from typing import Iterable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from rh_notifier.db import get_session
from rh_notifier.db.models.counter import PLU_COUNTER, Counter
from rh_notifier.db.models.product import Batch, Product
from rh_notifier.db.models.user import User
from rh_notifier.errors import NotFoundError
from rh_notifier.utils.logger import get_logger

logger = get_logger("rh_notifier.db.product_repo")

# (expiry_date, quantity)
BatchInput = tuple[date, int]

MAX_PLU_ATTEMPTS = 5


def format_plu(seq: int) -> str:
    return f"PLU{seq:03d}"


def format_batch_number(seq: int) -> str:
    return f"BATCH{seq:03d}"


def _validate_batches(batches: list[BatchInput]) -> None:
    for expiry_date, quantity in batches:
        if not isinstance(expiry_date, date):
            raise ValueError(f"expiry_date must be a date, got {expiry_date!r}")
        if int(quantity) <= 0:
            raise ValueError(f"quantity must be a positive integer, got {quantity!r}")


def _next_plu_seq(session: Session) -> int:
    """Reserve the next PLU sequence value. The counter row is created on first use,
    starting from the highest PLU already stored."""
    if session.get(Counter, PLU_COUNTER) is None:
        start = session.scalar(select(func.max(Product.plu_seq))) or 0
        session.add(Counter(name=PLU_COUNTER, value=start))
        session.flush()
    session.execute(
        update(Counter)
        .where(Counter.name == PLU_COUNTER)
        .values(value=Counter.value + 1)
        .execution_options(synchronize_session=False)
    )
    return session.scalar(select(Counter.value).where(Counter.name == PLU_COUNTER))


def _with_batches():
    return select(Product).options(selectinload(Product.batches))


def _append_batches(session: Session, product: Product, batches: list[BatchInput]) -> list[Batch]:
    """Reserve len(batches) numbers from the product counter and attach the new batches."""
    if not batches:
        return []
    count = len(batches)
    session.execute(
        update(Product)
        .where(Product.id == product.id)
        .values(batch_seq=Product.batch_seq + count)
        .execution_options(synchronize_session=False)
    )
    last_seq = session.scalar(select(Product.batch_seq).where(Product.id == product.id))
    session.refresh(product, attribute_names=["batch_seq"])
    first_seq = last_seq - count + 1
    created = []
    for offset, (expiry_date, quantity) in enumerate(batches):
        seq = first_seq + offset
        batch = Batch(
            seq=seq,
            batch_number=format_batch_number(seq),
            expiry_date=expiry_date,
            quantity=int(quantity),
        )
        product.batches.append(batch)
        created.append(batch)
    session.flush()
    return created


def list_for_user(user_id: str) -> list[Product]:
    """Products owned by the user with batches loaded, in creation order."""
    with get_session() as session:
        q = _with_batches().where(Product.user_id == user_id).order_by(Product.created_at, Product.plu_seq)
        return list(session.scalars(q).all())


def list_all() -> list[Product]:
    with get_session() as session:
        q = _with_batches().order_by(Product.created_at, Product.plu_seq)
        return list(session.scalars(q).all())


def get_by_id(product_id: str) -> Optional[Product]:
    with get_session() as session:
        return session.scalars(_with_batches().where(Product.id == product_id)).first()


def get_by_barcode(barcode: str) -> Optional[Product]:
    with get_session() as session:
        return session.scalars(_with_batches().where(Product.barcode == barcode)).first()


def create_product(
    user_id: str,
    barcode: str,
    name: str,
    batches: Iterable[BatchInput] = (),
    description: Optional[str] = None,
    category: Optional[str] = None,
) -> Product:
    """Create a product with the next free PLU and its initial batches.

    Raises ValueError if the barcode is already registered (append batches instead)
    and NotFoundError if the owner does not exist.
    """
    batches = list(batches)
    _validate_batches(batches)
    last_error: IntegrityError | None = None
    for attempt in range(1, MAX_PLU_ATTEMPTS + 1):
        try:
            with get_session() as session:
                if session.get(User, user_id) is None:
                    raise NotFoundError(f"User {user_id} not found")
                if session.scalars(select(Product.id).where(Product.barcode == barcode)).first():
                    raise ValueError(f"Barcode already registered: {barcode!r}")
                seq = _next_plu_seq(session)
                product = Product(
                    user_id=user_id,
                    barcode=barcode,
                    plu_seq=seq,
                    plu=format_plu(seq),
                    name=name.strip(),
                    description=description,
                    category=category,
                    batch_seq=0,
                )
                session.add(product)
                session.flush()
                _append_batches(session, product, batches)
                logger.info(
                    "product_repo.created",
                    product_id=product.id,
                    plu=product.plu,
                    batches=len(batches),
                )
                return product
        except IntegrityError as e:
            last_error = e
            logger.warning("product_repo.plu_conflict", barcode=barcode, attempt=attempt)
    raise last_error


def add_batches(product_id: str, batches: Iterable[BatchInput]) -> list[Batch]:
    """Append batches to an existing product, numbering them from its counter."""
    batches = list(batches)
    _validate_batches(batches)
    with get_session() as session:
        product = session.scalars(_with_batches().where(Product.id == product_id)).first()
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        created = _append_batches(session, product, batches)
        logger.info("product_repo.batches_added", product_id=product_id, count=len(created))
        return created


def delete_product(product_id: str) -> bool:
    """Delete a product and its batches. Returns False if it did not exist."""
    with get_session() as session:
        product = session.get(Product, product_id)
        if product is None:
            return False
        session.delete(product)
        return True
