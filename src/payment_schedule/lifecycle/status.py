"""Payment status lifecycle of a term.

States are ``unpaid``, ``invoiced``, ``paid`` and ``overdue``. Moving to
``paid`` requires a valid payment date and a positive paid amount; moving
away from ``paid`` clears both. Other transitions are unconstrained.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from payment_schedule.core.messages import ValidationMessages
from payment_schedule.results.types import (
    ImportRowError,
    PaymentSummary,
    StatusImportReport,
    TransitionResult,
    UpdatedPayment,
)
from payment_schedule.schemas.term import (
    PaymentStatus,
    PaymentTerm,
    coerce_status,
    coerce_term,
    coerce_terms,
    term_fields,
)
from payment_schedule.utils.dates import parse_date
from payment_schedule.utils.io import read_source
from payment_schedule.utils.numeric import ZERO, to_decimal

logger = logging.getLogger(__name__)


def transition_status(
    term: Any,
    status: PaymentStatus | str,
    paid_date: Any = None,
    paid_amount: Any = None,
    notes: str | None = None,
    messages: ValidationMessages | None = None,
) -> TransitionResult:
    """Move a term to a new payment status.

    The input term is never modified: an accepted transition returns an
    updated copy, a rejected one returns only the reasons.

    Args:
        term: The term to update (PaymentTerm or raw mapping).
        status: Target status.
        paid_date: Payment date, required when the target is ``paid``.
        paid_amount: Collected amount, required when the target is ``paid``.
        notes: New notes; ``None`` keeps the current ones.
        messages: Message catalogue. Uses defaults if not provided.

    Returns:
        TransitionResult with either the updated term or the errors.

    Example:
        ```python
        result = transition_status(term, "paid", paid_date="2025-04-18", paid_amount=30_000_000)
        if result.accepted:
            term = result.term
        ```
    """
    messages = messages or ValidationMessages()
    current = coerce_term(term)

    target = coerce_status(status)
    if target is None:
        logger.warning(
            "Rejected transition of term %d to unknown status %r", current.term_number, status
        )
        return TransitionResult(errors=[messages.format("unknown_status", status=status)])

    update: dict[str, Any] = {"status": target}
    if notes is not None:
        update["notes"] = notes

    if target is PaymentStatus.PAID:
        errors: list[str] = []
        if paid_date is None or (isinstance(paid_date, str) and not paid_date.strip()):
            errors.append(messages.paid_date_required)
            payment_day = None
        else:
            payment_day = parse_date(paid_date)
            if payment_day is None:
                errors.append(messages.paid_date_invalid)
        amount = to_decimal(paid_amount)
        if amount <= 0:
            errors.append(messages.paid_amount_positive)

        if errors or payment_day is None:
            logger.warning(
                "Rejected transition of term %d to paid: %s",
                current.term_number,
                "; ".join(errors),
            )
            return TransitionResult(errors=errors)

        update["paid_date"] = payment_day.isoformat()
        update["paid_amount"] = amount
    elif current.is_paid:
        update["paid_date"] = None
        update["paid_amount"] = ZERO

    return TransitionResult(term=current.model_copy(update=update))


def _find_term(
    schedule: Sequence[PaymentTerm],
    term_id: Any,
    term_number: int | None,
) -> int | None:
    if term_id is not None and str(term_id).strip():
        wanted = str(term_id).strip()
        for position, term in enumerate(schedule):
            if term.id is not None and str(term.id) == wanted:
                return position
        return None
    if term_number:
        for position, term in enumerate(schedule):
            if term.term_number == term_number:
                return position
    return None


def apply_status_updates(
    terms: Iterable[Any],
    rows: Iterable[Any],
    messages: ValidationMessages | None = None,
) -> StatusImportReport:
    """Apply a batch of status updates, one row per term.

    Each row names its term by ``id`` or, failing that, by ``term_number``
    (camelCase keys are accepted too) and carries ``status`` and optionally
    ``paid_date``, ``paid_amount`` and ``notes``. Missing values keep the
    term's current ones. Rows that cannot be applied are reported with
    their 1-based row number; the others are applied in order.

    Args:
        terms: The schedule to update.
        rows: Mappings, e.g. from ``load_status_rows``.
        messages: Message catalogue. Uses defaults if not provided.

    Returns:
        StatusImportReport listing applied and rejected rows and the
        resulting schedule.
    """
    messages = messages or ValidationMessages()
    schedule = coerce_terms(list(terms))
    report = StatusImportReport()

    for row_number, row in enumerate(rows, start=1):
        report.total_records += 1
        data = term_fields(row)
        term_id = data.get("id")
        number = int(to_decimal(data.get("term_number"))) or None

        position = _find_term(schedule, term_id, number)
        if position is None:
            reference = term_id if term_id not in (None, "") else number
            report.errors.append(
                ImportRowError(
                    row=row_number,
                    term_number=number,
                    error_message=messages.format("term_not_found", reference=reference),
                )
            )
            continue

        current = schedule[position]
        status = data.get("status")
        if status is None or (isinstance(status, str) and not status.strip()):
            status = current.status

        result = transition_status(
            current,
            status,
            paid_date=data.get("paid_date") or current.paid_date,
            paid_amount=data.get("paid_amount") or current.paid_amount,
            notes=data.get("notes") or None,
            messages=messages,
        )
        if result.term is None:
            report.errors.append(
                ImportRowError(
                    row=row_number,
                    term_number=current.term_number,
                    error_message="; ".join(result.errors),
                )
            )
            continue

        schedule[position] = result.term
        report.updated.append(
            UpdatedPayment(
                row=row_number,
                term_id=result.term.id,
                term_number=result.term.term_number,
                status=result.term.status,
                previous_status=current.status,
            )
        )

    report.success_count = len(report.updated)
    report.error_count = len(report.errors)
    report.terms = schedule

    logger.info(
        "Applied %d/%d status updates (%d rejected)",
        report.success_count,
        report.total_records,
        report.error_count,
    )
    return report


def load_status_rows(source: str | Path) -> list[dict[str, Any]]:
    """Read status update rows from a CSV file or CSV text.

    The first line holds the column names (``id``, ``termNumber``,
    ``status``, ``paidDate``, ``paidAmount``, ``notes`` or their snake_case
    forms). Blank cells become ``None`` and fully blank lines are skipped.

    Args:
        source: Path to a CSV file, or the CSV content itself.

    Returns:
        One dictionary per data row.
    """
    text = read_source(source, encoding="utf-8-sig")

    rows: list[dict[str, Any]] = []
    for raw in csv.DictReader(io.StringIO(text)):
        row = {
            key.strip(): (value.strip() or None) if isinstance(value, str) else None
            for key, value in raw.items()
            if key
        }
        if any(value is not None for value in row.values()):
            rows.append(row)
    return rows


def summarize_payments(terms: Iterable[Any]) -> PaymentSummary:
    """Collection progress of a schedule.

    Example:
        ```python
        summary = summarize_payments(terms)
        print(f"Collected {summary.paid_total} of {summary.scheduled_total}")
        ```
    """
    schedule = coerce_terms(list(terms))
    counts = {status: 0 for status in PaymentStatus}
    for term in schedule:
        counts[term.status] += 1

    scheduled = sum((term.amount for term in schedule), ZERO)
    paid = sum((term.paid_amount for term in schedule if term.is_paid), ZERO)
    return PaymentSummary(
        term_count=len(schedule),
        scheduled_total=scheduled,
        paid_total=paid,
        remaining=scheduled - paid,
        status_counts=counts,
    )
