"""Warranty status classification.

Everything here is pure: the same end date and reference time always give
the same status, and nothing raises on bad input.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from deskboard.constants import WARRANTY_EXPIRING_DAYS
from deskboard.core.models.entities import WarrantyRecord, WarrantyStatus, WarrantySummary
from deskboard.core.models.enums import WarrantyColor, WarrantyState, WarrantyType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from deskboard.core.models.entities import Customer, Issue

type DateInput = str | date | datetime | None

_SECONDS_PER_DAY = 86400

NO_WARRANTY = WarrantyStatus(
    state=WarrantyState.NONE,
    label="Not set",
    days_left=None,
    color=WarrantyColor.NEUTRAL,
    due_date=None,
)


def parse_due_date(value: DateInput) -> date | None:
    """Parse an end date into a local calendar date, or None if it can't be read.

    Date-only strings are calendar dates. Datetimes carrying an offset are
    converted to local time before the date is taken.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _local(value).date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return _local(datetime.fromisoformat(text)).date()
    except ValueError:
        return None


def _local(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone()


def _today(now: datetime | date | None) -> date:
    if now is None:
        return datetime.now().date()
    if isinstance(now, datetime):
        return _local(now).date()
    return now


def days_until(due: date, today: date) -> int:
    """Whole days from local midnight ``today`` to local midnight ``due``."""
    delta: timedelta = due - today
    return math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)


def classify(
    end_date: DateInput,
    now: datetime | date | None = None,
    *,
    expiring_days: int = WARRANTY_EXPIRING_DAYS,
) -> WarrantyStatus:
    """Classify a warranty end date relative to ``now`` (defaults to the current time)."""
    due = parse_due_date(end_date)
    if due is None:
        return NO_WARRANTY

    diff = days_until(due, _today(now))

    if diff < 0:
        return WarrantyStatus(
            state=WarrantyState.EXPIRED,
            label=f"Expired ({abs(diff)} days ago)",
            days_left=diff,
            color=WarrantyColor.DANGER,
            due_date=due,
        )
    if diff == 0:
        return WarrantyStatus(
            state=WarrantyState.EXPIRING,
            label="Due today",
            days_left=0,
            color=WarrantyColor.WARNING,
            due_date=due,
        )
    if diff <= expiring_days:
        return WarrantyStatus(
            state=WarrantyState.EXPIRING,
            label=f"Expiring ({diff} days left)",
            days_left=diff,
            color=WarrantyColor.WARNING,
            due_date=due,
        )
    return WarrantyStatus(
        state=WarrantyState.ACTIVE,
        label=f"Active ({diff} days left)",
        days_left=diff,
        color=WarrantyColor.SUCCESS,
        due_date=due,
    )


def _end_date_of(record: WarrantyRecord | DateInput) -> DateInput:
    if isinstance(record, WarrantyRecord):
        return record.end_date
    return record


def _urgency_key(status: WarrantyStatus) -> tuple[int, int]:
    # Ties inside a state: soonest upcoming date first, or most recent expiry.
    days = status.days_left if status.days_left is not None else 0
    if status.state is WarrantyState.EXPIRED:
        return (status.state.severity, days)
    return (status.state.severity, -days)


def summarize(
    records: Iterable[WarrantyRecord | DateInput],
    now: datetime | date | None = None,
    *,
    warranty_type: WarrantyType | None = None,
    expiring_days: int = WARRANTY_EXPIRING_DAYS,
) -> WarrantySummary:
    """Summarize several warranty batches of one type.

    The most urgent state wins (expired > expiring > active > none). The
    reference due date is the soonest upcoming one among records that have
    not expired, or the most recently expired one when every dated record has
    expired. The result does not depend on record order.
    """
    today = _today(now)
    statuses = [
        classify(_end_date_of(record), today, expiring_days=expiring_days) for record in records
    ]
    if not statuses:
        return WarrantySummary(type=warranty_type, status=NO_WARRANTY, record_count=0)

    worst = max(statuses, key=_urgency_key)

    upcoming = [s.due_date for s in statuses if s.due_date and s.state is not WarrantyState.EXPIRED]
    expired = [s.due_date for s in statuses if s.due_date and s.state is WarrantyState.EXPIRED]
    if upcoming:
        reference: date | None = min(upcoming)
    elif expired:
        reference = max(expired)
    else:
        reference = None

    return WarrantySummary(
        type=warranty_type,
        status=worst,
        due_date=reference,
        record_count=len(statuses),
    )


def summarize_issue(
    issue: Issue,
    now: datetime | date | None = None,
    *,
    expiring_days: int = WARRANTY_EXPIRING_DAYS,
) -> dict[WarrantyType, WarrantySummary]:
    """Hardware and software summaries for an issue, classified independently."""
    return {
        WarrantyType.HARDWARE: summarize(
            issue.hardware_warranties,
            now,
            warranty_type=WarrantyType.HARDWARE,
            expiring_days=expiring_days,
        ),
        WarrantyType.SOFTWARE: summarize(
            issue.software_warranties,
            now,
            warranty_type=WarrantyType.SOFTWARE,
            expiring_days=expiring_days,
        ),
    }


def split_customers_by_warranty(
    customers: Iterable[Customer],
    now: datetime | date | None = None,
) -> tuple[list[Customer], list[Customer]]:
    """Partition customers into (not expired, expired) by their warranty due date."""
    today = _today(now)
    current: list[Customer] = []
    lapsed: list[Customer] = []
    for customer in customers:
        if classify(customer.warranty_due, today).state is WarrantyState.EXPIRED:
            lapsed.append(customer)
        else:
            current.append(customer)
    return current, lapsed
