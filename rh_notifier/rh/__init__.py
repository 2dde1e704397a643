"""RH status engine: status calculation, attention selection, deduplication, message composition."""

from rh_notifier.rh.composer import compose, compose_test_message
from rh_notifier.rh.dedup import mark_read, raise_for_user, raise_notifications
from rh_notifier.rh.selector import AttentionItem, select_attention
from rh_notifier.rh.status import RHStatus, RHSummary, compute_status, rh_date, summarize

__all__ = [
    "AttentionItem",
    "RHStatus",
    "RHSummary",
    "compose",
    "compose_test_message",
    "compute_status",
    "mark_read",
    "raise_for_user",
    "raise_notifications",
    "rh_date",
    "select_attention",
    "summarize",
]
