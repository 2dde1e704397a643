"""Batch run coordinator: per-user selection -> (dedup) -> compose -> dispatch -> aggregate.

Users are processed one after another. A failure for one user is converted to an
error string and never stops the others; only losing the store itself is fatal.
"""

from datetime import date
from typing import Callable, Iterable, Literal, Optional

from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from rh_notifier.config import RH_DAYS
from rh_notifier.db.models.user import User
from rh_notifier.db.repositories import product_repo, user_repo
from rh_notifier.errors import NotFoundError, RhNotifierError, StoreUnavailableError
from rh_notifier.rh.composer import compose, compose_test_message
from rh_notifier.rh.dedup import raise_for_items
from rh_notifier.rh.selector import select_attention
from rh_notifier.utils.logger import bind_context, get_logger, unbind_context
from rh_notifier.utils.tracing import get_tracer
from rh_notifier.whatsapp.dispatcher import Dispatcher
from rh_notifier.whatsapp.models import DeliveryResult

logger = get_logger("rh_notifier.coordinator")


class UserOutcome(BaseModel):
    """What happened for one user in a run."""

    user_id: str
    username: str
    status: Literal["sent", "failed", "skipped"]
    items: int = 0
    raised: int = 0
    error: Optional[str] = None


class RunResult(BaseModel):
    sent: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)
    outcomes: list[UserOutcome] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed == 0

    @property
    def total(self) -> int:
        return self.sent + self.failed

    def add(self, outcome: UserOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.status == "sent":
            self.sent += 1
        elif outcome.status == "failed":
            self.failed += 1
            if outcome.error:
                self.errors.append(outcome.error)


class Coordinator:
    """Drives notification runs. `today` is injectable so runs can be replayed for a given date."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        rh_days: int = RH_DAYS,
        today: Callable[[], date] = date.today,
    ):
        self.dispatcher = dispatcher
        self.rh_days = rh_days
        self._today = today

    def run(
        self,
        users: Optional[Iterable[User]] = None,
        rh_days: Optional[int] = None,
        record: bool = True,
    ) -> RunResult:
        """Scheduled path: every user (or the given ones), one message per user.

        With record=True newly qualifying batches are also persisted as notifications.
        """
        rh_days = self.rh_days if rh_days is None else rh_days
        today = self._today()
        log = logger.bind(rh_days=rh_days, today=today.isoformat(), record=record)
        with get_tracer().start_as_current_span("coordinator.run", attributes={"rh.days": rh_days}) as span:
            if users is None:
                try:
                    users = user_repo.list_all()
                except SQLAlchemyError as e:
                    log.exception("coordinator.store_unavailable")
                    raise StoreUnavailableError(f"Could not read users: {e}") from e
            users = list(users)
            log.info("coordinator.run.start", users=len(users))

            result = RunResult()
            for user in users:
                try:
                    result.add(self._process_safely(user, rh_days, today, record))
                except StoreUnavailableError as e:
                    e.partial = result
                    log.error("coordinator.run.aborted", sent=result.sent, failed=result.failed)
                    raise

            span.set_attribute("rh.sent", result.sent)
            span.set_attribute("rh.failed", result.failed)
            log.info("coordinator.run.complete", sent=result.sent, failed=result.failed)
            return result

    def check_user(self, user_id: str, rh_days: Optional[int] = None) -> RunResult:
        """On-demand path: one user, compose and send directly, nothing persisted."""
        user = self._require_user(user_id)
        rh_days = self.rh_days if rh_days is None else rh_days
        result = RunResult()
        result.add(self._process_safely(user, rh_days, self._today(), record=False))
        return result

    def send_message(self, user_id: str, message: str) -> DeliveryResult:
        """Send a free-form message to a user's WhatsApp number."""
        user = self._require_user(user_id)
        if not user.whatsapp:
            return DeliveryResult(
                success=False,
                error=f"User {user.username} has no WhatsApp number",
                error_kind="invalid_address",
            )
        return self.dispatcher.send(user.whatsapp, message)

    def send_test(self, user_id: str) -> tuple[DeliveryResult, str]:
        """Send the sample message used to verify provider setup. Returns (result, message)."""
        user = self._require_user(user_id)
        message = compose_test_message(user.display_name, self.rh_days, self._today())
        return self.send_message(user.id, message), message

    def _require_user(self, user_id: str) -> User:
        user = user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def _process_safely(self, user: User, rh_days: int, today: date, record: bool) -> UserOutcome:
        bind_context(user_id=user.id)
        try:
            with get_tracer().start_as_current_span("coordinator.user", attributes={"rh.user_id": user.id}):
                return self._process_user(user, rh_days, today, record)
        except StoreUnavailableError:
            raise
        except RhNotifierError as e:
            logger.warning("coordinator.user_failed", username=user.username, error=e.message)
            return UserOutcome(
                user_id=user.id,
                username=user.username,
                status="failed",
                error=f"Failed for user {user.username}: {e.message}",
            )
        except Exception as e:
            logger.exception("coordinator.user_exception", username=user.username)
            return UserOutcome(
                user_id=user.id,
                username=user.username,
                status="failed",
                error=f"Exception for user {user.username}: {e}",
            )
        finally:
            unbind_context("user_id")

    def _process_user(self, user: User, rh_days: int, today: date, record: bool) -> UserOutcome:
        try:
            products = product_repo.list_for_user(user.id)
        except SQLAlchemyError as e:
            logger.exception("coordinator.store_unavailable", username=user.username)
            raise StoreUnavailableError(f"Could not read products for user {user.username}: {e}") from e
        items = select_attention(products, rh_days, today)

        outcome = UserOutcome(user_id=user.id, username=user.username, status="skipped", items=len(items))
        if record:
            try:
                outcome.raised = len(raise_for_items(user.id, items))
            except SQLAlchemyError as e:
                logger.exception("coordinator.record_failed", username=user.username)
                outcome.status = "failed"
                outcome.error = f"Failed for user {user.username}: could not record notifications: {e}"
                return outcome

        if not items:
            logger.debug("coordinator.user_nothing_to_send", username=user.username)
            return outcome

        if not user.whatsapp:
            outcome.status = "failed"
            outcome.error = f"User {user.username} has no WhatsApp number"
            logger.warning("coordinator.user_no_whatsapp", username=user.username, items=len(items))
            return outcome

        message = compose(user.display_name, items, rh_days)
        if not message:
            return outcome

        result = self.dispatcher.send(user.whatsapp, message)
        if result.success:
            outcome.status = "sent"
            logger.info("coordinator.user_sent", username=user.username, items=len(items))
        else:
            outcome.status = "failed"
            outcome.error = f"Failed for user {user.username}: {result.error}"
        return outcome
